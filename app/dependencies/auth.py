from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.logger import logger
from app.core.security import Identity, decode_identity_token
from app.services.profile.profile_service import ProfileService
from app.services.verification.verification_service import is_admin_user

security = HTTPBearer()

async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Identity:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        return decode_identity_token(credentials.credentials)
    except JWTError:
        raise credentials_exception

async def get_active_identity(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """The caller, refused when their account is suspended."""
    profile = await ProfileService.get_profile(db, identity.user_id)
    if profile and profile.is_suspended:
        logger.warning(f"Suspended user {identity.user_id} attempted a write")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account suspended"
        )
    return identity

async def require_admin(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    if not await is_admin_user(db, identity):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return identity
