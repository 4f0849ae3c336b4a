# server/schemas/user.py

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from schemas.honk import HonkPage


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class UserListing(UserOut):
    n_honks: int
    n_followers: int


class UserPage(BaseModel):
    items: List[UserListing]
    total: int
    page: int
    page_window: List[Optional[int]]


class UserDetail(BaseModel):
    user: UserOut
    created_at: datetime
    n_honks: int
    n_followers: int
    n_following: int
    followers: List[UserOut]
    is_followed: Optional[bool] = None
    honks: HonkPage


class Token(BaseModel):
    access_token: str
    token_type: str
