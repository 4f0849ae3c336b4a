# server/models/honk.py

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from . import Base, utcnow


HONK_MAX_LENGTH = 255


class Honk(Base):
    __tablename__ = "honks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(String(HONK_MAX_LENGTH), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    author = relationship("User", lazy="joined")

    __table_args__ = (
        Index("ix_honks_created_at_id", "created_at", "id"),
    )
