from pydantic import BaseModel, Field
from typing import Optional


class DonationCreate(BaseModel):
    amount: float = Field(..., gt=0)
    message: Optional[str] = Field(None, max_length=500)


class CheckoutResponse(BaseModel):
    url: Optional[str] = None
    donation_id: int


class DonationStatusOut(BaseModel):
    status: Optional[str] = None
    amount: float = 0


class PublishableKeyOut(BaseModel):
    publishable_key: str
