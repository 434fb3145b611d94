from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete
from typing import List, Optional
from app.core.exceptions import ValidationFailed
from app.core.logger import logger
from app.models.moderation.user_block import UserBlock


async def get_block(db: AsyncSession, blocker_id: str, blocked_id: str) -> Optional[UserBlock]:
    result = await db.execute(
        select(UserBlock).where(UserBlock.blocker_id == blocker_id, UserBlock.blocked_id == blocked_id)
    )
    return result.scalar_one_or_none()


async def block_user(db: AsyncSession, blocker_id: str, blocked_id: str) -> UserBlock:
    if blocker_id == blocked_id:
        raise ValidationFailed("Cannot block yourself")

    existing = await get_block(db, blocker_id, blocked_id)
    if existing:
        return existing

    block = UserBlock(blocker_id=blocker_id, blocked_id=blocked_id)
    db.add(block)
    await db.commit()
    await db.refresh(block)
    logger.info(f"User {blocker_id} blocked {blocked_id}")
    return block


async def unblock_user(db: AsyncSession, blocker_id: str, blocked_id: str) -> None:
    await db.execute(
        delete(UserBlock).where(UserBlock.blocker_id == blocker_id, UserBlock.blocked_id == blocked_id)
    )
    await db.commit()


async def get_blocked_user_ids(db: AsyncSession, blocker_id: str) -> List[str]:
    result = await db.execute(
        select(UserBlock.blocked_id).where(UserBlock.blocker_id == blocker_id).order_by(UserBlock.created_at.asc())
    )
    return list(result.scalars().all())


async def is_blocked(db: AsyncSession, blocker_id: str, blocked_id: str) -> bool:
    return await get_block(db, blocker_id, blocked_id) is not None
