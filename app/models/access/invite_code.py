from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base

class InviteCode(Base):
    __tablename__ = "invite_codes"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, index=True, nullable=False)
    created_by = Column(String, nullable=False, index=True)
    max_uses = Column(Integer, default=1)
    used_count = Column(Integer, default=0, nullable=False)
    expires_at = Column(DateTime, nullable=True)
    is_disabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    redemptions = relationship("InviteRedemption", back_populates="invite", cascade="all, delete")


class InviteRedemption(Base):
    __tablename__ = "invite_redemptions"

    id = Column(Integer, primary_key=True, index=True)
    invite_id = Column(Integer, ForeignKey("invite_codes.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, nullable=False, index=True)
    redeemed_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("invite_id", "user_id", name="uq_invite_user"),
    )

    invite = relationship("InviteCode", back_populates="redemptions")
