# server/api/deps.py

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from database import get_db
from core.accounts import Accounts
from core.feed import FeedQueryEngine
from core.follow_graph import FollowGraph
from core.store import RecordStore


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


def get_accounts(request: Request, store: RecordStore = Depends(get_store)) -> Accounts:
    return Accounts(store, request.app.state.credentials)


def get_graph(store: RecordStore = Depends(get_store)) -> FollowGraph:
    return FollowGraph(store)


def get_feed(request: Request, store: RecordStore = Depends(get_store),
             graph: FollowGraph = Depends(get_graph)) -> FeedQueryEngine:
    return FeedQueryEngine(store, graph, page_size=request.app.state.settings.page_size)
