from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from app.core.logger import logger
from app.services.profile.profile_service import ProfileService


class AdminService:
    @staticmethod
    async def suspend_user(db: AsyncSession, user_id: str, reason: str) -> dict:
        profile = await ProfileService.get_profile_or_404(db, user_id)
        profile.is_suspended = True
        profile.suspension_reason = reason
        profile.suspended_at = datetime.utcnow()
        await db.commit()
        logger.warning(f"User {user_id} suspended: {reason}")
        return {"ok": True}

    @staticmethod
    async def unsuspend_user(db: AsyncSession, user_id: str) -> dict:
        profile = await ProfileService.get_profile_or_404(db, user_id)
        profile.is_suspended = False
        profile.suspension_reason = None
        profile.suspended_at = None
        await db.commit()
        logger.info(f"User {user_id} unsuspended")
        return {"ok": True}

    @staticmethod
    async def set_can_invite(db: AsyncSession, user_id: str, can_invite: bool) -> dict:
        profile = await ProfileService.get_profile_or_404(db, user_id)
        profile.can_invite = can_invite
        await db.commit()
        logger.info(f"Invite permission for {user_id} set to {can_invite}")
        return {"ok": True}
