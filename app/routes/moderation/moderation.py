from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.core.database import get_db
from app.core.security import Identity
from app.dependencies.auth import get_current_identity
from app.schemas.moderation.moderation import BlockCheckOut, BlockCreate, BlockOut, ReportCreate, ReportOut
from app.services.moderation import block_service
from app.services.moderation.report_service import create_report

router = APIRouter(tags=["Moderation"])

@router.post("/blocks", response_model=BlockOut, status_code=status.HTTP_201_CREATED)
async def block(
    data: BlockCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await block_service.block_user(db, identity.user_id, data.blocked_id)

@router.delete("/blocks/{blocked_id}")
async def unblock(
    blocked_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    await block_service.unblock_user(db, identity.user_id, blocked_id)
    return {"ok": True}

@router.get("/blocks", response_model=List[str])
async def blocked_users(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await block_service.get_blocked_user_ids(db, identity.user_id)

@router.get("/blocks/check/{user_id}", response_model=BlockCheckOut)
async def check_block(
    user_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return BlockCheckOut(blocked=await block_service.is_blocked(db, identity.user_id, user_id))

@router.post("/reports", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
async def report_user(
    data: ReportCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await create_report(db, identity.user_id, data)
