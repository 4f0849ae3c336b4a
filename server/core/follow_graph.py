# server/core/follow_graph.py

import logging
from typing import List
from sqlalchemy import and_, delete, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query
from core.errors import NotFound, ValidationError
from core.store import RecordStore
from models.follow import Follow
from models.user import User


logger = logging.getLogger(__name__)


class FollowGraph:
    """
    The follower/followee edge set.
    Adding an existing edge and removing a missing one are both no-ops.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def add_follower(self, followee_id: int, follower_id: int) -> None:
        if followee_id == follower_id:
            raise ValidationError("Users cannot follow themselves")
        self._require_users(followee_id, follower_id)

        stmt = insert(Follow).values(follower_id=follower_id, followee_id=followee_id)
        try:
            with self.store.transaction() as db:
                db.execute(stmt)
        except IntegrityError:
            # either the edge exists already, possibly from a concurrent request,
            # or an endpoint vanished after the lookup above
            if not self.is_following(follower_id, followee_id):
                raise NotFound(f"User {followee_id} or {follower_id} not found")
            logger.debug("User %s already follows %s", follower_id, followee_id)
            return
        logger.info("User %s follows %s", follower_id, followee_id)

    def remove_follower(self, followee_id: int, follower_id: int) -> None:
        stmt = delete(Follow).where(
            Follow.follower_id == follower_id,
            Follow.followee_id == followee_id,
        )
        with self.store.transaction() as db:
            result = db.execute(stmt)
        if result.rowcount:
            logger.info("User %s unfollowed %s", follower_id, followee_id)

    def is_following(self, follower_id: int, followee_id: int) -> bool:
        query = self.store.query(Follow).filter(
            Follow.follower_id == follower_id,
            Follow.followee_id == followee_id,
        )
        with self.store.reading():
            return bool(self.store.db.query(query.exists()).scalar())

    def count_followers(self, user_id: int) -> int:
        return self.store.count(
            self.store.query(Follow).filter(Follow.followee_id == user_id)
        )

    def count_following(self, user_id: int) -> int:
        return self.store.count(
            self.store.query(Follow).filter(Follow.follower_id == user_id)
        )

    def followers(self, user_id: int) -> List[User]:
        query = (
            self.store.query(User)
            .join(Follow, Follow.follower_id == User.id)
            .filter(Follow.followee_id == user_id)
            .order_by(User.username.asc())
        )
        with self.store.reading():
            return query.all()

    def restrict_to_followed(self, query: Query, user_column, follower_id: int) -> Query:
        """Inner-joins `query` so only rows whose `user_column` is followed by `follower_id` remain."""
        return query.join(
            Follow,
            and_(Follow.followee_id == user_column, Follow.follower_id == follower_id),
        )

    def _require_users(self, *user_ids: int):
        for user_id in user_ids:
            if self.store.get_user(user_id) is None:
                raise NotFound(f"User {user_id} not found")
