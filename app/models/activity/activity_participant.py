from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from datetime import datetime
from app.core.database import Base

class ActivityParticipant(Base):
    """Membership of a non-creator user. The creator never has a row here."""
    __tablename__ = "activity_participants"

    id = Column(Integer, primary_key=True, index=True)
    activity_id = Column(Integer, ForeignKey("activities.id"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    joined_at = Column(DateTime, default=datetime.utcnow)

    # To ensure no duplicate joins
    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uq_activity_participant"),
    )
