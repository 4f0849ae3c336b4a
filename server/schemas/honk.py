# server/schemas/honk.py

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class HonkAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class HonkOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    created_at: datetime
    author: HonkAuthor


class HonkPage(BaseModel):
    items: List[HonkOut]
    total: int
    page: int
    page_window: List[Optional[int]]


class HonkCreate(BaseModel):
    content: str
