# server/api/honks.py

from fastapi import APIRouter, Depends, status
from api.auth import get_current_user, get_optional_user
from api.deps import get_feed
from core.feed import FeedFilter, FeedQueryEngine
from models.user import User
from schemas.honk import HonkCreate, HonkOut, HonkPage


router = APIRouter(tags=["Honks"])


@router.get("/honks", response_model=HonkPage)
def list_honks(page: str | None = None, search: str | None = None, filter: FeedFilter = FeedFilter.NONE,
               current_user: User | None = Depends(get_optional_user),
               feed: FeedQueryEngine = Depends(get_feed)):
    """
    The honk feed, newest first.
    `filter=followed_only` keeps honks from users the caller follows.
    """
    return feed.list_honks(page=page, search=search, filter=filter, current_user=current_user)


@router.post("/honks", response_model=HonkOut, status_code=status.HTTP_201_CREATED)
def create_honk(payload: HonkCreate, current_user: User = Depends(get_current_user),
                feed: FeedQueryEngine = Depends(get_feed)):
    honk = feed.create_honk(current_user.id, payload.content)
    return HonkOut.model_validate(honk)
