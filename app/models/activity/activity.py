from sqlalchemy import Column, Integer, String, Text, Float, DateTime, Enum
from datetime import datetime
from app.core.database import Base
import enum

DEFAULT_SPOTS = 4

class ActivityTypeEnum(str, enum.Enum):
    transport = "transport"
    meal = "meal"
    hike = "hike"
    lodging = "lodging"

# Creating one of these types needs a verified identity
VERIFICATION_REQUIRED_TYPES = (ActivityTypeEnum.transport, ActivityTypeEnum.lodging)

class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    # Identity provider subject; the creator may not have saved a profile yet
    creator_id = Column(String, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(ActivityTypeEnum), nullable=False)
    city = Column(String, index=True, nullable=False)
    date = Column(String(10), nullable=False)
    time = Column(String, nullable=True)
    spots = Column(Integer, default=DEFAULT_SPOTS)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)

    transport_from = Column(String, nullable=True)
    transport_to = Column(String, nullable=True)
    transport_route_id = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def capacity(self) -> int:
        return DEFAULT_SPOTS if self.spots is None else self.spots
