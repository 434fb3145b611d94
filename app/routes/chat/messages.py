from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.core.database import get_db
from app.core.security import Identity
from app.dependencies.auth import get_current_identity, get_active_identity
from app.schemas.chat.message import MessageCreate, MessageOut, MessageWithAuthor
from app.services.chat.message_service import get_messages, post_message

router = APIRouter(prefix="/activities", tags=["Activity Chat"])

@router.get("/{activity_id}/messages", response_model=List[MessageWithAuthor])
async def list_messages(
    activity_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await get_messages(db, activity_id, identity.user_id)

@router.post("/{activity_id}/messages", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    activity_id: int,
    data: MessageCreate,
    identity: Identity = Depends(get_active_identity),
    db: AsyncSession = Depends(get_db)
):
    return await post_message(db, activity_id, identity, data)
