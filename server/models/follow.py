# server/models/follow.py

from sqlalchemy import Column, Integer, DateTime, ForeignKey, CheckConstraint
from . import Base, utcnow


class Follow(Base):
    """
    Directed edge: `follower_id` follows `followee_id`.
    The composite primary key keeps at most one edge per pair.
    """
    __tablename__ = "follows"

    follower_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    followee_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("follower_id <> followee_id", name="ck_follows_not_self"),
    )
