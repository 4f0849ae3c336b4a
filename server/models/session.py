# server/models/session.py

from sqlalchemy import Column, String, DateTime
from . import Base, utcnow


class UserSession(Base):
    __tablename__ = "user_sessions"

    token = Column(String(64), primary_key=True)
    identity = Column(String, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
