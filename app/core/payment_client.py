import stripe
from typing import Optional
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from app.core.config import settings
from app.core.exceptions import NotFound, UpstreamUnavailable
from app.core.logger import logger


class CheckoutSession(BaseModel):
    id: str
    url: Optional[str] = None
    payment_status: Optional[str] = None
    amount_total: Optional[int] = None


def _api_key() -> str:
    if not settings.STRIPE_SECRET_KEY:
        raise UpstreamUnavailable("Payments not configured", status_code=503)
    return settings.STRIPE_SECRET_KEY


def get_publishable_key() -> str:
    if not settings.STRIPE_PUBLISHABLE_KEY:
        raise UpstreamUnavailable("Payments not configured", status_code=503)
    return settings.STRIPE_PUBLISHABLE_KEY


async def create_checkout_session(amount: float, message: Optional[str], user_id: str) -> CheckoutSession:
    api_key = _api_key()
    base_url = settings.FRONTEND_BASE_URL.rstrip("/")
    try:
        session = await run_in_threadpool(
            stripe.checkout.Session.create,
            api_key=api_key,
            payment_method_types=["card"],
            line_items=[{
                "price_data": {
                    "currency": settings.DONATION_CURRENCY,
                    "product_data": {
                        "name": f"Doação - {settings.APP_NAME}",
                        "description": message or f"Apoio ao projeto {settings.APP_NAME}",
                    },
                    "unit_amount": round(amount * 100),
                },
                "quantity": 1,
            }],
            mode="payment",
            success_url=f"{base_url}/donate?status=success&session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{base_url}/donate?status=cancelled",
            metadata={"userId": user_id, "donationMessage": message or ""},
        )
    except stripe.StripeError as e:
        logger.error(f"Stripe checkout error: {e}")
        raise UpstreamUnavailable("Failed to create checkout session")

    return CheckoutSession(id=session.id, url=session.url)


async def retrieve_checkout_session(session_id: str) -> CheckoutSession:
    api_key = _api_key()
    try:
        session = await run_in_threadpool(stripe.checkout.Session.retrieve, session_id, api_key=api_key)
    except stripe.InvalidRequestError as e:
        if e.http_status == 404 or e.code == "resource_missing":
            raise NotFound("Session not found")
        logger.error(f"Stripe session lookup error: {e}")
        raise UpstreamUnavailable("Failed to check donation status")
    except stripe.StripeError as e:
        logger.error(f"Stripe session lookup error: {e}")
        raise UpstreamUnavailable("Failed to check donation status")

    return CheckoutSession(
        id=session.id,
        url=session.url,
        payment_status=session.payment_status,
        amount_total=session.amount_total,
    )
