from sqlalchemy import Column, Integer, String, Text, Float, DateTime
from datetime import datetime
from app.core.database import Base

class Donation(Base):
    __tablename__ = "donations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=True)
    amount = Column(Float, nullable=False)
    message = Column(Text, nullable=True)
    stripe_session_id = Column(String, index=True, nullable=True)
    stripe_payment_status = Column(String, default="pending")  # pending, paid
    created_at = Column(DateTime, default=datetime.utcnow)
