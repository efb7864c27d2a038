"""Article model."""

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from newsdesk.models.database import utcnow


class ArticleSource:
    """Provenance of an article."""

    FACEBOOK = "facebook"
    ADMIN = "admin"


class Article(SQLModel, table=True):
    """A published news article."""

    __tablename__ = "articles"  # type: ignore[assignment]

    id: int | None = Field(default=None, primary_key=True)
    external_id: str | None = Field(
        default=None,
        unique=True,
        index=True,
        description="Facebook post ID, None for locally authored articles",
    )
    headline: str = Field(description="Headline")
    body: str = Field(default="", description="Body text")
    image_url: str | None = Field(default=None, description="Image URL")
    published_at: datetime | None = Field(
        default=None, sa_type=DateTime(timezone=True), description="Publish time"
    )
    source_url: str | None = Field(default=None, description="Permalink of the post")
    source: str = Field(
        default=ArticleSource.FACEBOOK, description="Provenance: facebook|admin"
    )
    is_modified: bool = Field(default=False, description="Hand-edited after creation")
    is_visible: bool = Field(default=True, description="Shown on public endpoints")
    created_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True)
    )
