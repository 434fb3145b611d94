from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete
from typing import Iterable, Optional
from app.core.config import settings
from app.core.exceptions import NotFound, UpstreamUnavailable
from app.core.logger import logger
from app.core.push_client import PushSubscriptionGone, send_push
from app.models.push.push_subscription import PushSubscription
from app.schemas.push.push import PushSubscriptionCreate


def get_vapid_public_key() -> str:
    if not settings.VAPID_PUBLIC_KEY:
        raise UpstreamUnavailable("Push not configured", status_code=503)
    return settings.VAPID_PUBLIC_KEY


async def get_subscription(db: AsyncSession, user_id: str) -> Optional[PushSubscription]:
    result = await db.execute(select(PushSubscription).where(PushSubscription.user_id == user_id))
    return result.scalar_one_or_none()


async def save_subscription(db: AsyncSession, user_id: str, data: PushSubscriptionCreate) -> PushSubscription:
    if not settings.push_enabled:
        raise UpstreamUnavailable("Push notifications not configured", status_code=503)

    subscription = await get_subscription(db, user_id)
    if subscription:
        subscription.endpoint = data.endpoint
        subscription.p256dh = data.keys.p256dh
        subscription.auth = data.keys.auth
    else:
        subscription = PushSubscription(
            user_id=user_id,
            endpoint=data.endpoint,
            p256dh=data.keys.p256dh,
            auth=data.keys.auth,
        )
        db.add(subscription)
    await db.commit()
    await db.refresh(subscription)
    return subscription


async def delete_subscription(db: AsyncSession, user_id: str) -> None:
    await db.execute(delete(PushSubscription).where(PushSubscription.user_id == user_id))
    await db.commit()


async def send_test_notification(db: AsyncSession, user_id: str) -> dict:
    if not settings.push_enabled:
        raise UpstreamUnavailable("Push notifications not configured", status_code=503)

    subscription = await get_subscription(db, user_id)
    if not subscription:
        raise NotFound("No subscription found")

    try:
        await send_push(
            subscription.endpoint,
            subscription.p256dh,
            subscription.auth,
            {"title": settings.APP_NAME, "body": "As notificações estão funcionando! Bom Caminho!"},
        )
    except PushSubscriptionGone:
        await delete_subscription(db, user_id)
        raise UpstreamUnavailable("Subscription expired", status_code=410)
    return {"ok": True}


async def notify_users(db: AsyncSession, user_ids: Iterable[str], payload: dict) -> int:
    """Best-effort delivery to every user with a subscription.

    Returns how many notifications were accepted by the push service.
    Subscriptions the push service reports as gone are pruned; any other
    delivery failure is logged and skipped.
    """
    if not settings.push_enabled:
        return 0

    delivered = 0
    for user_id in user_ids:
        subscription = await get_subscription(db, user_id)
        if not subscription:
            continue
        try:
            await send_push(subscription.endpoint, subscription.p256dh, subscription.auth, payload)
            delivered += 1
        except PushSubscriptionGone:
            logger.info(f"Pruning expired push subscription of user {user_id}")
            await delete_subscription(db, user_id)
        except UpstreamUnavailable as e:
            logger.error(f"Push to user {user_id} failed: {e.detail}")
    return delivered
