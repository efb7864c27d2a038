"""SyncState model."""

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from newsdesk.models.database import utcnow


class SyncState(SQLModel, table=True):
    """Durable sync state (single row)."""

    __tablename__ = "sync_state"  # type: ignore[assignment]

    id: int = Field(default=1, primary_key=True)
    last_sync_at: int = Field(
        default=0, description="Epoch ms of the last completed sync, 0 = never"
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True)
    )
