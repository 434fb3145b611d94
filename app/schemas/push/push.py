from pydantic import BaseModel, Field


class PushKeys(BaseModel):
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class PushSubscriptionCreate(BaseModel):
    endpoint: str = Field(..., min_length=1)
    keys: PushKeys


class PushStatusOut(BaseModel):
    subscribed: bool


class VapidKeyOut(BaseModel):
    public_key: str
