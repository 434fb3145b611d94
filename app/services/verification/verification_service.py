from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from fastapi import HTTPException
from datetime import datetime
from typing import List
from app.core import storage_client
from app.core.exceptions import ConflictOfState, NotFound, ValidationFailed
from app.core.logger import logger
from app.core.security import Identity
from app.models.profile.pilgrim_profile import PilgrimProfile, VerificationStatus
from app.schemas.verification.verification import (
    UploadMetadata, VerificationReview, VerificationStatusOut, VerificationSubmit,
    VerificationUploadOut, VerificationUploadRequest
)
from app.services.profile.profile_service import ProfileService

UPLOAD_TYPES = ("document", "selfie")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


async def is_admin_user(db: AsyncSession, identity: Identity) -> bool:
    if identity.is_configured_admin:
        return True
    profile = await ProfileService.get_profile(db, identity.user_id)
    return bool(profile and profile.is_admin)


async def is_verified_user(db: AsyncSession, identity: Identity) -> bool:
    if await is_admin_user(db, identity):
        return True
    profile = await ProfileService.get_profile(db, identity.user_id)
    return bool(profile and profile.verification_status == VerificationStatus.verified)


async def create_verification_upload(data: VerificationUploadRequest) -> VerificationUploadOut:
    if not data.name or not data.type:
        raise ValidationFailed("Missing required fields")
    if data.type not in UPLOAD_TYPES:
        raise ValidationFailed("Invalid upload type")
    if not data.content_type or not data.content_type.startswith("image/"):
        raise ValidationFailed("Only image files are allowed")
    if data.size and data.size > MAX_UPLOAD_BYTES:
        raise ValidationFailed("File too large (max 10MB)")

    upload_url, object_path = await storage_client.create_upload_url(data.content_type)
    return VerificationUploadOut(
        upload_url=upload_url,
        object_path=object_path,
        metadata=UploadMetadata(name=data.name, size=data.size, content_type=data.content_type),
    )


async def submit_verification(db: AsyncSession, user_id: str, data: VerificationSubmit) -> VerificationStatusOut:
    for path in (data.document_path, data.selfie_path):
        if not storage_client.is_object_path(path):
            raise ValidationFailed("Invalid object path")

    profile = await ProfileService.get_profile(db, user_id)
    if not profile:
        raise NotFound("Profile not found")
    if profile.verification_status == VerificationStatus.verified:
        raise ConflictOfState("Already verified")

    # Ownership tags are advisory; the paths are stored either way
    for path in (data.document_path, data.selfie_path):
        try:
            await storage_client.set_object_owner(path, user_id)
        except HTTPException as e:
            logger.warning(f"Could not tag {path} for user {user_id}: {e.detail}")

    profile.document_url = data.document_path
    profile.selfie_url = data.selfie_path
    profile.verification_status = VerificationStatus.pending
    profile.verification_submitted_at = datetime.utcnow()
    profile.verification_reviewed_at = None
    profile.verification_reason = None
    await db.commit()
    await db.refresh(profile)

    logger.info(f"Verification submitted by user {user_id}")
    return VerificationStatusOut.from_profile(profile)


async def get_verification_status(db: AsyncSession, user_id: str) -> VerificationStatusOut:
    profile = await ProfileService.get_profile(db, user_id)
    if not profile:
        return VerificationStatusOut(status=VerificationStatus.unverified)
    return VerificationStatusOut.from_profile(profile)


async def list_verifications(db: AsyncSession, pending_only: bool = False) -> List[PilgrimProfile]:
    query = select(PilgrimProfile).where(PilgrimProfile.verification_status != VerificationStatus.unverified)
    if pending_only:
        query = select(PilgrimProfile).where(PilgrimProfile.verification_status == VerificationStatus.pending)
    result = await db.execute(query.order_by(PilgrimProfile.verification_submitted_at.desc()))
    return result.scalars().all()


async def review_verification(db: AsyncSession, user_id: str, reviewer_id: str, review: VerificationReview) -> dict:
    if review.status not in (VerificationStatus.verified, VerificationStatus.rejected):
        raise ValidationFailed("Status must be 'verified' or 'rejected'")
    if review.status == VerificationStatus.rejected and not review.reason:
        raise ValidationFailed("Reason required for rejection")

    profile = await ProfileService.get_profile(db, user_id)
    if not profile:
        raise NotFound("User not found")

    profile.verification_status = review.status
    profile.verification_reason = review.reason
    profile.verification_reviewed_at = datetime.utcnow()
    profile.verification_reviewed_by = reviewer_id
    await db.commit()

    logger.info(f"Verification for {user_id} marked {review.status.value} by {reviewer_id}")
    return {"ok": True}


async def get_verification_document(db: AsyncSession, user_id: str, doc_type: str) -> storage_client.StoredObject:
    if doc_type not in UPLOAD_TYPES:
        raise ValidationFailed("Invalid type")

    profile = await ProfileService.get_profile(db, user_id)
    if not profile:
        raise NotFound("User not found")

    object_path = profile.document_url if doc_type == "document" else profile.selfie_url
    if not object_path:
        raise NotFound("File not found")

    return await storage_client.fetch_object(object_path)
