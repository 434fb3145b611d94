from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List
from app.core.exceptions import AuthorizationDenied
from app.core.logger import logger
from app.core.security import Identity
from app.models.activity.activity import Activity
from app.models.activity.chat_message import ChatMessage
from app.schemas.chat.message import MessageCreate, MessageWithAuthor, MessageOut
from app.services.activities.roster import effective_members, get_participant_ids, is_member
from app.services.profile.profile_service import FALLBACK_DISPLAY_NAME, ProfileService
from app.services.push.push_service import notify_users
from app.services.verification.verification_service import is_verified_user

PUSH_BODY_LENGTH = 100


async def _require_member(db: AsyncSession, activity_id: int, user_id: str) -> Activity:
    activity = await db.get(Activity, activity_id)
    if not await is_member(db, activity_id, user_id, activity=activity):
        raise AuthorizationDenied("Not a member of this activity")
    return activity


async def get_messages(db: AsyncSession, activity_id: int, viewer_id: str) -> List[MessageWithAuthor]:
    await _require_member(db, activity_id, viewer_id)

    result = await db.execute(
        select(ChatMessage)
        .where(ChatMessage.activity_id == activity_id)
        .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
    )
    messages = result.scalars().all()
    authors = await ProfileService.get_profiles_by_user_ids(db, {m.user_id for m in messages})

    return [
        MessageWithAuthor(
            **MessageOut.model_validate(m).model_dump(),
            display_name=authors[m.user_id].display_name if m.user_id in authors else FALLBACK_DISPLAY_NAME,
            photo_url=(authors[m.user_id].photo_url or "") if m.user_id in authors else "",
        )
        for m in messages
    ]


async def post_message(db: AsyncSession, activity_id: int, identity: Identity, data: MessageCreate) -> ChatMessage:
    if not await is_verified_user(db, identity):
        logger.warning(f"Unverified user {identity.user_id} tried to post in activity {activity_id}")
        raise AuthorizationDenied("Identity verification required")

    sender_id = identity.user_id
    activity = await _require_member(db, activity_id, sender_id)

    message = ChatMessage(activity_id=activity_id, user_id=sender_id, content=data.content)
    db.add(message)
    await db.commit()
    await db.refresh(message)
    logger.info(f"Message {message.id} posted to activity {activity_id} by {sender_id}")

    # Notifications never fail the message that triggered them
    try:
        await notify_new_message(db, activity, sender_id, data.content)
    except Exception:
        logger.exception(f"Push notification for message {message.id} failed")

    return message


async def notify_new_message(db: AsyncSession, activity: Activity, sender_id: str, content: str) -> int:
    members = effective_members(activity, await get_participant_ids(db, activity.id))
    recipients = [uid for uid in members if uid != sender_id]
    if not recipients:
        return 0

    sender = await ProfileService.get_profile(db, sender_id)
    sender_name = sender.display_name if sender else FALLBACK_DISPLAY_NAME
    payload = {
        "title": f"{sender_name} no {activity.title or 'atividade'}",
        "body": content[:PUSH_BODY_LENGTH],
    }
    return await notify_users(db, recipients, payload)
