from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.core.database import get_db
from app.core.security import Identity
from app.dependencies.auth import require_admin
from app.schemas.moderation.moderation import (
    GrantInviteRequest, ReportOut, ReportUpdate, SuspendRequest, UnsuspendRequest
)
from app.schemas.verification.verification import VerificationOut, VerificationReview
from app.services.moderation.admin_service import AdminService
from app.services.moderation.report_service import get_all_reports, update_report_status
from app.services.verification.verification_service import (
    get_verification_document, list_verifications, review_verification
)

router = APIRouter(prefix="/admin", tags=["Admin"])

@router.get("/reports", response_model=List[ReportOut])
async def list_reports(
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await get_all_reports(db)

@router.patch("/reports/{report_id}")
async def update_report(
    report_id: int,
    data: ReportUpdate,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await update_report_status(db, report_id, data)

@router.post("/suspend")
async def suspend(
    data: SuspendRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await AdminService.suspend_user(db, data.user_id, data.reason)

@router.post("/unsuspend")
async def unsuspend(
    data: UnsuspendRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await AdminService.unsuspend_user(db, data.user_id)

@router.post("/grant-invite")
async def grant_invite(
    data: GrantInviteRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await AdminService.set_can_invite(db, data.user_id, data.can_invite)

@router.get("/verifications", response_model=List[VerificationOut])
async def all_verifications(
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await list_verifications(db)

@router.get("/verifications/pending", response_model=List[VerificationOut])
async def pending_verifications(
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await list_verifications(db, pending_only=True)

@router.post("/verifications/{user_id}/review")
async def review(
    user_id: str,
    data: VerificationReview,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await review_verification(db, user_id, admin.user_id, data)

@router.get("/verification-document/{user_id}/{doc_type}")
async def verification_document(
    user_id: str,
    doc_type: str,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    stored = await get_verification_document(db, user_id, doc_type)
    return Response(content=stored.content, media_type=stored.content_type)
