"""
Newsletter / SMS subscribers
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func

from jingo.core.database import Base


class Subscriber(Base):
    __tablename__ = "subscribers"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(50))
    first_name = Column(String(100))
    last_name = Column(String(100))

    email_subscribed = Column(Boolean, default=True, nullable=False)
    sms_subscribed = Column(Boolean, default=False, nullable=False)

    # website, checkout, import, ...
    source = Column(String(50))

    confirmed_at = Column(DateTime(timezone=True))
    unsubscribed_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
