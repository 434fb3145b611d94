from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update
from app.core import payment_client
from app.core.exceptions import ValidationFailed
from app.core.logger import logger
from app.models.donation.donation import Donation
from app.schemas.donation.donation import CheckoutResponse, DonationCreate, DonationStatusOut

CHECKOUT_SESSION_PREFIX = "cs_"


async def create_donation_checkout(db: AsyncSession, user_id: str, data: DonationCreate) -> CheckoutResponse:
    session = await payment_client.create_checkout_session(data.amount, data.message, user_id)

    donation = Donation(
        user_id=user_id,
        amount=data.amount,
        message=data.message or None,
        stripe_session_id=session.id,
        stripe_payment_status="pending",
    )
    db.add(donation)
    await db.commit()
    await db.refresh(donation)

    logger.info(f"Donation {donation.id} of {data.amount} started by {user_id}")
    return CheckoutResponse(url=session.url, donation_id=donation.id)


async def get_donation_status(db: AsyncSession, session_id: str) -> DonationStatusOut:
    if not session_id or not session_id.startswith(CHECKOUT_SESSION_PREFIX):
        raise ValidationFailed("Invalid session ID")

    session = await payment_client.retrieve_checkout_session(session_id)

    if session.payment_status == "paid":
        await db.execute(
            update(Donation)
            .where(Donation.stripe_session_id == session_id)
            .values(stripe_payment_status="paid")
        )
        await db.commit()
        logger.info(f"Donation with session {session_id} marked paid")

    return DonationStatusOut(
        status=session.payment_status,
        amount=session.amount_total / 100 if session.amount_total else 0,
    )
