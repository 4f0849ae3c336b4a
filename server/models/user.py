# server/models/user.py

from sqlalchemy import Column, Integer, String, LargeBinary, DateTime
from . import Base, utcnow


USERNAME_MAX_LENGTH = 64


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Database model for application users.
    Stores the derived password key and its salt, never the plaintext password.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(USERNAME_MAX_LENGTH), unique=True, index=True, nullable=False)
    password_hash = Column(LargeBinary(32), nullable=False)
    salt = Column(LargeBinary(16), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
