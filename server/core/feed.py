# server/core/feed.py

import logging
from enum import Enum
from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.orm import aliased
from core.errors import NotFound, ValidationError
from core.follow_graph import FollowGraph
from core.pagination import normalize_page, page_offset, page_window, total_pages
from core.store import RecordStore
from models.follow import Follow
from models.honk import Honk, HONK_MAX_LENGTH
from models.user import User
from schemas.honk import HonkOut, HonkPage
from schemas.user import UserDetail, UserListing, UserOut, UserPage


logger = logging.getLogger(__name__)


class FeedFilter(str, Enum):
    NONE = "none"
    FOLLOWED_ONLY = "followed_only"


def parse_filter(value) -> FeedFilter:
    if value is None or value == "":
        return FeedFilter.NONE
    try:
        return FeedFilter(value)
    except ValueError:
        raise ValidationError(f"Unknown filter: {value}")


MAX_ID = 2**63 - 1


def parse_id(value) -> int:
    """Validates a user or honk id before it ever reaches a query."""
    parsed = None
    if isinstance(value, int) and not isinstance(value, bool):
        parsed = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        parsed = int(value.strip())

    # ids outside a signed 64-bit integer cannot exist in any backing database
    if parsed is None or not 1 <= parsed <= MAX_ID:
        raise ValidationError(f"Malformed id: {value!r}")
    return parsed


def contains_pattern(term: str) -> str:
    # LIKE wildcards in the search term are matched literally
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _search_term(search: Optional[str]) -> Optional[str]:
    # blank means no search; otherwise the term is matched exactly as given
    if search is None or not search.strip():
        return None
    return search


# -------------------------------
# Feed Query Engine
# -------------------------------

class FeedQueryEngine:
    """
    Builds the honk feed, the user directory and the user profile page.

    Every listing shares the same inputs: a 1-indexed `page`, an optional
    case-insensitive `search` substring and a `filter` that can narrow the
    result to users the current user follows.
    """

    def __init__(self, store: RecordStore, graph: FollowGraph, page_size: int = 5):
        self.store = store
        self.graph = graph
        self.page_size = page_size

    # --- honks ---

    def list_honks(self, page=1, search: Optional[str] = None, filter=FeedFilter.NONE,
                   current_user: Optional[User] = None) -> HonkPage:
        query = self.store.query(Honk).join(User, Honk.user_id == User.id)

        if parse_filter(filter) is FeedFilter.FOLLOWED_ONLY and current_user is not None:
            query = self.graph.restrict_to_followed(query, Honk.user_id, current_user.id)

        return self._honk_page(query, page, search)

    def create_honk(self, author_id, content: Optional[str]) -> Honk:
        author_id = parse_id(author_id)
        content = (content or "").strip()
        if not content:
            raise ValidationError("Honk content cannot be empty")
        if len(content) > HONK_MAX_LENGTH:
            raise ValidationError(f"Honk content is limited to {HONK_MAX_LENGTH} characters")
        if self.store.get_user(author_id) is None:
            raise NotFound(f"User {author_id} not found")

        honk = self.store.add_honk(author_id, content)
        logger.info("User %s honked (%s)", author_id, honk.id)
        return honk

    # --- users ---

    def list_users(self, page=1, search: Optional[str] = None, filter=FeedFilter.NONE,
                   current_user: Optional[User] = None) -> UserPage:
        page = normalize_page(page)
        n_honks = self._n_honks_column()
        n_followers = self._n_followers_column()
        query = self.store.query(User, n_honks, n_followers)

        if parse_filter(filter) is FeedFilter.FOLLOWED_ONLY and current_user is not None:
            query = self.graph.restrict_to_followed(query, User.id, current_user.id)

        term = _search_term(search)
        if term:
            query = query.filter(User.username.ilike(contains_pattern(term), escape="\\"))

        query = query.order_by(User.username.asc(), User.id.asc())
        rows, total = self.store.fetch_page(query, page_offset(page, self.page_size), self.page_size)

        items = [
            UserListing(id=user.id, username=user.username, n_honks=honks, n_followers=followers)
            for user, honks, followers in rows
        ]
        return UserPage(
            items=items,
            total=total,
            page=page,
            page_window=page_window(page, total_pages(total, self.page_size)),
        )

    def get_user_with_honks(self, user_id, page=1, search: Optional[str] = None,
                            current_user: Optional[User] = None) -> UserDetail:
        user_id = parse_id(user_id)
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")

        honks = self._honk_page(
            self.store.query(Honk).filter(Honk.user_id == user_id), page, search
        )
        n_honks = self.store.count(self.store.query(Honk).filter(Honk.user_id == user_id))

        is_followed = None
        if current_user is not None:
            is_followed = self.graph.is_following(current_user.id, user_id)

        return UserDetail(
            user=UserOut.model_validate(user),
            created_at=user.created_at,
            n_honks=n_honks,
            n_followers=self.graph.count_followers(user_id),
            n_following=self.graph.count_following(user_id),
            followers=[UserOut.model_validate(f) for f in self.graph.followers(user_id)],
            is_followed=is_followed,
            honks=honks,
        )

    # --- helpers ---

    def _honk_page(self, query, page, search: Optional[str]) -> HonkPage:
        page = normalize_page(page)
        term = _search_term(search)
        if term:
            query = query.filter(Honk.content.ilike(contains_pattern(term), escape="\\"))

        query = query.order_by(Honk.created_at.desc(), Honk.id.desc())
        rows, total = self.store.fetch_page(query, page_offset(page, self.page_size), self.page_size)

        return HonkPage(
            items=[HonkOut.model_validate(honk) for honk in rows],
            total=total,
            page=page,
            page_window=page_window(page, total_pages(total, self.page_size)),
        )

    @staticmethod
    def _n_honks_column():
        return (
            select(func.count(Honk.id))
            .where(Honk.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
            .label("n_honks")
        )

    @staticmethod
    def _n_followers_column():
        # aliased, so it never binds to the follows table joined by the followed-only filter
        edge = aliased(Follow)
        return (
            select(func.count())
            .select_from(edge)
            .where(edge.followee_id == User.id)
            .correlate(User)
            .scalar_subquery()
            .label("n_followers")
        )
