from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.security import Identity
from app.dependencies.auth import get_current_identity
from app.schemas.verification.verification import (
    VerificationStatusOut, VerificationSubmit, VerificationUploadOut, VerificationUploadRequest
)
from app.services.verification.verification_service import (
    create_verification_upload, get_verification_status, submit_verification
)

router = APIRouter(prefix="/verification", tags=["Verification"])

@router.post("/upload-url", response_model=VerificationUploadOut)
async def upload_url(
    data: VerificationUploadRequest,
    identity: Identity = Depends(get_current_identity)
):
    return await create_verification_upload(data)

@router.post("/submit", response_model=VerificationStatusOut)
async def submit(
    data: VerificationSubmit,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await submit_verification(db, identity.user_id, data)

@router.get("/status", response_model=VerificationStatusOut)
async def status(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await get_verification_status(db, identity.user_id)
