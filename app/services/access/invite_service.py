from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy import update, or_
from datetime import datetime, timezone
from typing import List, Optional
import secrets

from app.core.exceptions import AuthorizationDenied, NotFound, ValidationFailed
from app.core.logger import logger
from app.core.security import Identity
from app.models.access.invite_code import InviteCode, InviteRedemption
from app.schemas.access.invite import AccessStatusOut, InviteCreate, InviteRedeem
from app.schemas.profile.profile import ProfileOut
from app.services.profile.profile_service import FALLBACK_DISPLAY_NAME, ProfileService
from app.services.verification.verification_service import is_admin_user
from app.models.profile.pilgrim_profile import PilgrimProfile

INVITE_CODE_BYTES = 4
NEW_PROFILE_LANGUAGE = "pt-BR"


def generate_invite_code() -> str:
    return secrets.token_hex(INVITE_CODE_BYTES).upper()


def normalize_code(code: str) -> str:
    return code.strip().upper()


def _as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


async def get_invite_by_code(db: AsyncSession, code: str) -> Optional[InviteCode]:
    result = await db.execute(select(InviteCode).where(InviteCode.code == normalize_code(code)))
    return result.scalar_one_or_none()


async def validate_invite(db: AsyncSession, code: str) -> dict:
    invite = await get_invite_by_code(db, code)
    if not invite:
        raise ValidationFailed("invalid_code")
    if invite.is_disabled:
        raise ValidationFailed("invite_disabled")
    if invite.expires_at and datetime.utcnow() > invite.expires_at:
        raise ValidationFailed("invite_expired")
    if invite.max_uses and (invite.used_count or 0) >= invite.max_uses:
        raise ValidationFailed("invite_used")
    return {"valid": True}


async def has_redeemed_any_invite(db: AsyncSession, user_id: str) -> bool:
    result = await db.execute(select(InviteRedemption.id).where(InviteRedemption.user_id == user_id))
    return result.first() is not None


async def consume_invite(db: AsyncSession, code: str, user_id: str) -> bool:
    """Spend one use of a valid invite on user_id. Returns False when the code cannot be used."""
    invite = await get_invite_by_code(db, code)
    if not invite:
        return False

    already = await db.execute(
        select(InviteRedemption.id).where(
            InviteRedemption.invite_id == invite.id,
            InviteRedemption.user_id == user_id,
        )
    )
    if already.first() is not None:
        return True

    # Single conditional update so concurrent redemptions cannot exceed max_uses
    result = await db.execute(
        update(InviteCode)
        .where(
            InviteCode.id == invite.id,
            InviteCode.is_disabled.is_(False),
            or_(InviteCode.expires_at.is_(None), InviteCode.expires_at > datetime.utcnow()),
            or_(InviteCode.max_uses.is_(None), InviteCode.used_count < InviteCode.max_uses),
        )
        .values(used_count=InviteCode.used_count + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.rollback()
        return False

    db.add(InviteRedemption(invite_id=invite.id, user_id=user_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        return True
    return True


def _grant_admin(profile: PilgrimProfile) -> None:
    profile.is_admin = True
    profile.can_invite = True


async def redeem_invite(db: AsyncSession, identity: Identity, data: InviteRedeem) -> dict:
    """Consume an invite (configured admins skip it), ensure a profile exists and record terms acceptance."""
    is_configured_admin = identity.is_configured_admin

    if not is_configured_admin:
        consumed = await consume_invite(db, data.invite_code, identity.user_id)
        if not consumed:
            logger.warning(f"Invalid invite redemption by {identity.user_id}")
            raise ValidationFailed("invalid_code")

    profile = await ProfileService.get_profile(db, identity.user_id)
    if profile is None:
        profile = PilgrimProfile(
            user_id=identity.user_id,
            display_name=identity.full_name or FALLBACK_DISPLAY_NAME,
            language=NEW_PROFILE_LANGUAGE,
            cities=[],
        )
        db.add(profile)

    profile.accepted_terms_at = datetime.utcnow()
    profile.terms_version = data.terms_version
    profile.privacy_version = data.privacy_version
    if is_configured_admin and not profile.is_admin:
        _grant_admin(profile)

    await db.commit()
    logger.info(f"User {identity.user_id} accepted terms {data.terms_version}/{data.privacy_version}")
    return {"ok": True}


async def can_create_invites(db: AsyncSession, identity: Identity) -> bool:
    if await is_admin_user(db, identity):
        return True
    profile = await ProfileService.get_profile(db, identity.user_id)
    return bool(profile and profile.can_invite)


async def create_invite(db: AsyncSession, identity: Identity, data: InviteCreate) -> InviteCode:
    if not await can_create_invites(db, identity):
        raise AuthorizationDenied("Invite permission required")

    for _ in range(3):
        invite = InviteCode(
            code=generate_invite_code(),
            created_by=identity.user_id,
            max_uses=data.max_uses or 1,
            expires_at=_as_naive_utc(data.expires_at),
            is_disabled=False,
        )
        db.add(invite)
        try:
            await db.commit()
        except IntegrityError:
            # code collision, draw another one
            await db.rollback()
            continue
        await db.refresh(invite)
        logger.info(f"Invite {invite.code} created by {identity.user_id}")
        return invite

    raise ValidationFailed("Failed to create invite")


async def list_invites(db: AsyncSession, created_by: Optional[str] = None) -> List[InviteCode]:
    query = select(InviteCode).order_by(InviteCode.created_at.desc(), InviteCode.id.desc())
    if created_by is not None:
        query = query.where(InviteCode.created_by == created_by)
    result = await db.execute(query)
    return result.scalars().all()


async def list_my_invites(db: AsyncSession, identity: Identity) -> List[InviteCode]:
    if not await can_create_invites(db, identity):
        return []
    return await list_invites(db, created_by=identity.user_id)


async def disable_invite(db: AsyncSession, invite_id: int) -> dict:
    invite = await db.get(InviteCode, invite_id)
    if not invite:
        raise NotFound("Invite not found")
    invite.is_disabled = True
    await db.commit()
    logger.info(f"Invite {invite.code} disabled")
    return {"ok": True}


async def get_access_status(db: AsyncSession, identity: Identity) -> AccessStatusOut:
    """Where the caller stands in the invite -> profile -> terms onboarding."""
    profile = await ProfileService.get_profile(db, identity.user_id)
    is_configured_admin = identity.is_configured_admin

    if profile and profile.is_suspended:
        return AccessStatusOut(status="suspended", reason=profile.suspension_reason or "")

    if profile is None or not profile.accepted_terms_at:
        allowed = is_configured_admin or await has_redeemed_any_invite(db, identity.user_id)
        if not allowed:
            status = "needs_invite"
        elif profile is None:
            status = "needs_profile"
        else:
            status = "needs_terms"
        return AccessStatusOut(
            status=status,
            is_admin=is_configured_admin or bool(profile and profile.is_admin),
        )

    return AccessStatusOut(
        status="active",
        is_admin=await is_admin_user(db, identity),
        profile=ProfileOut.model_validate(profile),
    )
