from sqlalchemy import Column, Integer, String, Text, DateTime, Enum
from datetime import datetime
from app.core.database import Base
import enum

class ReportReason(str, enum.Enum):
    harassment = "harassment"
    offensive_language = "offensive_language"
    threat_violence = "threat_violence"
    scam_suspicious = "scam_suspicious"
    illegal_items = "illegal_items"
    sexual_content = "sexual_content"
    other = "other"

class ReportStatus(str, enum.Enum):
    open = "open"
    reviewing = "reviewing"
    closed = "closed"

class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    reporter_id = Column(String, nullable=False, index=True)
    reported_id = Column(String, nullable=False, index=True)
    reason = Column(Enum(ReportReason), nullable=False)
    details = Column(Text, nullable=True)
    activity_id = Column(Integer, nullable=True)
    message_id = Column(Integer, nullable=True)
    status = Column(Enum(ReportStatus), default=ReportStatus.open, nullable=False)
    admin_notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
