# server/core/store.py

import logging
from contextlib import contextmanager
from typing import List, Optional, Tuple
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, Query
from core.errors import StoreError
from models.user import User
from models.honk import Honk


logger = logging.getLogger(__name__)


# -------------------------------
# Record Store
# -------------------------------

class RecordStore:
    """
    Repository over one SQLAlchemy session.
    Every SQLAlchemy failure leaves here as `StoreError`; the session is
    rolled back first so nothing half-written is ever committed.
    """

    def __init__(self, db: Session):
        self.db = db

    def query(self, *entities) -> Query:
        return self.db.query(*entities)

    @contextmanager
    def reading(self):
        try:
            yield self.db
        except SQLAlchemyError as e:
            logger.exception("Record store read failed")
            self.db.rollback()
            raise StoreError() from e

    @contextmanager
    def transaction(self):
        """
        Commits on success. `IntegrityError` is re-raised untouched so callers
        can map constraint violations to their own errors.
        """
        try:
            yield self.db
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            logger.exception("Record store write failed")
            self.db.rollback()
            raise StoreError() from e

    # --- users ---

    def get_user(self, user_id: int) -> Optional[User]:
        with self.reading():
            return self.db.get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self.reading():
            return self.db.query(User).filter(User.username == username).first()

    def add_user(self, username: str, password_hash: bytes, salt: bytes) -> User:
        user = User(username=username, password_hash=password_hash, salt=salt)
        with self.transaction() as db:
            db.add(user)
        with self.reading():
            self.db.refresh(user)
        return user

    # --- honks ---

    def add_honk(self, user_id: int, content: str) -> Honk:
        honk = Honk(user_id=user_id, content=content)
        try:
            with self.transaction() as db:
                db.add(honk)
        except IntegrityError as e:
            raise StoreError() from e
        with self.reading():
            self.db.refresh(honk)
        return honk

    # --- generic ---

    def count(self, query: Query) -> int:
        with self.reading():
            return query.order_by(None).count()

    def fetch_page(self, query: Query, offset: int, limit: int) -> Tuple[List, int]:
        """Returns one page of `query` plus the number of rows before pagination."""
        with self.reading():
            total = query.order_by(None).count()
            rows = query.offset(offset).limit(limit).all()
        return rows, total
