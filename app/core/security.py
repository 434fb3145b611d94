from jose import JWTError, jwt
from datetime import datetime, timedelta
from typing import Optional
from pydantic import BaseModel
from app.core.config import settings


class Identity(BaseModel):
    """Claims handed to us by the identity provider for one request."""
    user_id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def is_configured_admin(self) -> bool:
        return bool(self.email) and self.email.lower() in settings.admin_emails


def decode_identity_token(token: str) -> Identity:
    """Verify a bearer token and return its identity. Raises JWTError when invalid."""
    payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    sub = payload.get("sub")
    if not sub:
        raise JWTError("Token has no subject")
    return Identity(
        user_id=str(sub),
        email=payload.get("email"),
        first_name=payload.get("first_name"),
        last_name=payload.get("last_name"),
    )


def create_identity_token(user_id: str, expires_delta: timedelta = None, **claims) -> str:
    # Used by local tooling and tests; production tokens come from the identity provider.
    to_encode = {"sub": user_id, **claims}
    expire = datetime.utcnow() + (expires_delta or timedelta(hours=1))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
