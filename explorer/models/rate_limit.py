# explorer/models/rate_limit.py
from sqlalchemy import Column, String, Float, DateTime
from sqlalchemy.orm import declarative_base
from datetime import datetime


Base = declarative_base()


class RateLimitSlot(Base):
    """One named numeric slot of the rate limiter's persisted state."""
    __tablename__ = "rate_limit_slots"
    key = Column(String, primary_key=True)
    value = Column(Float, nullable=False, default=0.0)
    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
