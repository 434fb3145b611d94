import json
from pywebpush import webpush, WebPushException
from starlette.concurrency import run_in_threadpool
from app.core.config import settings
from app.core.exceptions import UpstreamUnavailable
from app.core.logger import logger

GONE_STATUS_CODES = (404, 410)


class PushSubscriptionGone(Exception):
    """The push service reported the subscription as permanently invalid."""


async def send_push(endpoint: str, p256dh: str, auth: str, payload: dict) -> None:
    if not settings.push_enabled:
        raise UpstreamUnavailable("Push notifications not configured", status_code=503)

    try:
        await run_in_threadpool(
            webpush,
            subscription_info={"endpoint": endpoint, "keys": {"p256dh": p256dh, "auth": auth}},
            data=json.dumps(payload),
            vapid_private_key=settings.VAPID_PRIVATE_KEY,
            vapid_claims={"sub": settings.VAPID_CLAIMS_EMAIL},
        )
    except WebPushException as e:
        status_code = e.response.status_code if e.response is not None else None
        if status_code in GONE_STATUS_CODES:
            raise PushSubscriptionGone(endpoint) from e
        logger.error(f"Push delivery failed ({status_code}): {e}")
        raise UpstreamUnavailable("Push delivery failed")
