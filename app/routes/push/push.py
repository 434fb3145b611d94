from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.security import Identity
from app.dependencies.auth import get_current_identity
from app.schemas.push.push import PushStatusOut, PushSubscriptionCreate, VapidKeyOut
from app.services.push import push_service

router = APIRouter(prefix="/push", tags=["Push Notifications"])

@router.get("/vapid-key", response_model=VapidKeyOut)
async def vapid_key():
    return VapidKeyOut(public_key=push_service.get_vapid_public_key())

@router.post("/subscribe")
async def subscribe(
    data: PushSubscriptionCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    await push_service.save_subscription(db, identity.user_id, data)
    return {"ok": True}

@router.delete("/subscribe")
async def unsubscribe(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    await push_service.delete_subscription(db, identity.user_id)
    return {"ok": True}

@router.get("/status", response_model=PushStatusOut)
async def subscription_status(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    subscription = await push_service.get_subscription(db, identity.user_id)
    return PushStatusOut(subscribed=subscription is not None)

@router.post("/test")
async def test_notification(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await push_service.send_test_notification(db, identity.user_id)
