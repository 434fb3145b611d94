from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.payment_client import get_publishable_key
from app.core.security import Identity
from app.dependencies.auth import get_current_identity
from app.schemas.donation.donation import CheckoutResponse, DonationCreate, DonationStatusOut, PublishableKeyOut
from app.services.donations.donation_service import create_donation_checkout, get_donation_status

router = APIRouter(tags=["Donations"])

@router.get("/stripe/publishable-key", response_model=PublishableKeyOut)
async def publishable_key():
    return PublishableKeyOut(publishable_key=get_publishable_key())

@router.post("/donations/checkout", response_model=CheckoutResponse)
async def checkout(
    data: DonationCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await create_donation_checkout(db, identity.user_id, data)

@router.get("/donations/status/{session_id}", response_model=DonationStatusOut)
async def donation_status(
    session_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await get_donation_status(db, session_id)
