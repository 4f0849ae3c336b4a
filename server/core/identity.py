# server/core/identity.py

import logging
import secrets
from typing import Optional
from core.errors import NotFound, ValidationError
from core.feed import parse_id
from core.store import RecordStore
from models.session import UserSession
from models.user import User


logger = logging.getLogger(__name__)


# -------------------------------
# Session Store
# -------------------------------

class SessionStore:
    """Durable token -> serialized identity table."""

    def __init__(self, store: RecordStore):
        self.store = store

    def get(self, token: str) -> Optional[str]:
        with self.store.reading() as db:
            session = db.get(UserSession, token)
        return session.identity if session else None

    def set(self, token: str, identity: str) -> None:
        with self.store.transaction() as db:
            db.merge(UserSession(token=token, identity=identity))

    def create(self, identity: str) -> str:
        token = secrets.token_urlsafe(32)
        self.set(token, identity)
        return token

    def destroy(self, token: str) -> None:
        with self.store.transaction() as db:
            removed = db.query(UserSession).filter(UserSession.token == token).delete()
        if removed:
            logger.info("Session closed")


# -------------------------------
# Session Identity
# -------------------------------

class SessionIdentity:
    """Maps the identity held by a session to a `User` and back."""

    def __init__(self, store: RecordStore):
        self.store = store

    @staticmethod
    def serialize(user: User) -> str:
        return str(user.id)

    def resolve(self, identity: str) -> User:
        try:
            user_id = parse_id(identity)
        except ValidationError:
            raise NotFound("Unknown session identity")

        user = self.store.get_user(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user
