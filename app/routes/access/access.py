from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.core.database import get_db
from app.core.security import Identity
from app.dependencies.auth import get_current_identity, require_admin
from app.schemas.access.invite import AccessStatusOut, InviteCreate, InviteOut, InviteRedeem, InviteValidate
from app.services.access.invite_service import (
    create_invite, disable_invite, get_access_status, list_invites, list_my_invites,
    redeem_invite, validate_invite
)

router = APIRouter(tags=["Access & Invites"])

@router.get("/access/status", response_model=AccessStatusOut)
async def access_status(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await get_access_status(db, identity)

@router.post("/invites/validate")
async def validate_invite_code(
    data: InviteValidate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await validate_invite(db, data.code)

@router.post("/invites/redeem")
async def redeem_invite_code(
    data: InviteRedeem,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await redeem_invite(db, identity, data)

@router.post("/invites/create", response_model=InviteOut, status_code=status.HTTP_201_CREATED)
async def create_invite_code(
    data: InviteCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await create_invite(db, identity, data)

@router.get("/invites", response_model=List[InviteOut])
async def all_invites(
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await list_invites(db)

@router.get("/invites/mine", response_model=List[InviteOut])
async def my_invites(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await list_my_invites(db, identity)

@router.post("/invites/{invite_id}/disable")
async def disable_invite_code(
    invite_id: int,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await disable_invite(db, invite_id)
