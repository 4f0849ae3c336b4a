# server/api/users.py

from fastapi import APIRouter, Depends, status
from api.auth import get_current_user, get_optional_user
from api.deps import get_feed, get_graph
from core.feed import FeedFilter, FeedQueryEngine, parse_id
from core.follow_graph import FollowGraph
from models.user import User
from schemas.user import UserDetail, UserPage


router = APIRouter(tags=["Users"])


@router.get("/users", response_model=UserPage)
def list_users(page: str | None = None, search: str | None = None, filter: FeedFilter = FeedFilter.NONE,
               current_user: User | None = Depends(get_optional_user),
               feed: FeedQueryEngine = Depends(get_feed)):
    """
    User directory sorted by username, with honk and follower counts.
    """
    return feed.list_users(page=page, search=search, filter=filter, current_user=current_user)


@router.get("/users/{user_id}", response_model=UserDetail)
def get_user(user_id: str, page: str | None = None, search: str | None = None,
             current_user: User | None = Depends(get_optional_user),
             feed: FeedQueryEngine = Depends(get_feed)):
    return feed.get_user_with_honks(user_id, page=page, search=search, current_user=current_user)


@router.post("/users/{user_id}/follow", status_code=status.HTTP_204_NO_CONTENT)
def follow(user_id: str, current_user: User = Depends(get_current_user),
           graph: FollowGraph = Depends(get_graph)):
    graph.add_follower(parse_id(user_id), current_user.id)


@router.delete("/users/{user_id}/follow", status_code=status.HTTP_204_NO_CONTENT)
def unfollow(user_id: str, current_user: User = Depends(get_current_user),
             graph: FollowGraph = Depends(get_graph)):
    graph.remove_follower(parse_id(user_id), current_user.id)
