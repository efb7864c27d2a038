"""Data models."""

from newsdesk.models.article import Article, ArticleSource
from newsdesk.models.database import get_session, init_db
from newsdesk.models.sync import SyncState

__all__ = [
    "Article",
    "ArticleSource",
    "SyncState",
    "get_session",
    "init_db",
]
