from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, Enum
from sqlalchemy.sql import func
from app.core.database import Base
import enum

DEFAULT_AFFINITY = 0

class VerificationStatus(str, enum.Enum):
    unverified = "unverified"
    pending = "pending"
    verified = "verified"
    rejected = "rejected"

class PilgrimProfile(Base):
    __tablename__ = "pilgrim_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=False)
    language = Column(String, default="en")
    nationality = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    photo_url = Column(Text, nullable=True)
    travel_start_date = Column(String, nullable=True)
    travel_end_date = Column(String, nullable=True)
    cities = Column(JSON, default=list)

    # Affinity per activity type, 0..5
    pref_transport = Column(Integer, default=DEFAULT_AFFINITY)
    pref_meals = Column(Integer, default=DEFAULT_AFFINITY)
    pref_hiking = Column(Integer, default=DEFAULT_AFFINITY)
    pref_lodging = Column(Integer, default=DEFAULT_AFFINITY)

    is_admin = Column(Boolean, default=False, nullable=False)
    can_invite = Column(Boolean, default=False, nullable=False)
    is_suspended = Column(Boolean, default=False, nullable=False)
    suspension_reason = Column(Text, nullable=True)
    suspended_at = Column(DateTime, nullable=True)

    accepted_terms_at = Column(DateTime, nullable=True)
    terms_version = Column(String, nullable=True)
    privacy_version = Column(String, nullable=True)

    verification_status = Column(Enum(VerificationStatus), default=VerificationStatus.unverified, nullable=False)
    document_url = Column(Text, nullable=True)
    selfie_url = Column(Text, nullable=True)
    verification_submitted_at = Column(DateTime, nullable=True)
    verification_reviewed_at = Column(DateTime, nullable=True)
    verification_reviewed_by = Column(String, nullable=True)
    verification_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())