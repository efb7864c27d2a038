"""Admin article API."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.api.articles import paginate_articles, serialize_article
from newsdesk.api.security import require_admin_token
from newsdesk.models.article import Article, ArticleSource
from newsdesk.models.database import get_session, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin/articles",
    tags=["admin"],
    dependencies=[Depends(require_admin_token)],
)


class ArticleCreate(BaseModel):
    """New locally authored article."""

    headline: str
    body: str = ""
    image_url: str | None = None


class ArticleUpdate(BaseModel):
    """Article edit, unset fields are left alone."""

    headline: str | None = None
    body: str | None = None
    image_url: str | None = None
    is_visible: bool | None = None


@router.get("")
async def list_all_articles(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Page size"),
    session: AsyncSession = Depends(get_session),
) -> dict:
    """List all articles, hidden ones included."""
    return await paginate_articles(session, page, limit, visible_only=False)


@router.post("", status_code=201)
async def create_article(
    data: ArticleCreate,
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Create an article by hand."""
    if not data.headline.strip():
        raise HTTPException(status_code=400, detail="Headline is required")

    article = Article(
        external_id=None,
        headline=data.headline.strip(),
        body=data.body,
        image_url=data.image_url,
        published_at=utcnow(),
        source=ArticleSource.ADMIN,
    )
    session.add(article)
    await session.commit()
    await session.refresh(article)
    return serialize_article(article)


@router.put("/{article_id}")
async def update_article(
    article_id: int,
    data: ArticleUpdate,
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Edit an article. Edited articles are marked modified."""
    article = await session.get(Article, article_id)
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")

    if data.headline is not None:
        if not data.headline.strip():
            raise HTTPException(status_code=400, detail="Headline is required")
        article.headline = data.headline.strip()
    if data.body is not None:
        article.body = data.body
    if "image_url" in data.model_fields_set:
        article.image_url = data.image_url
    if data.is_visible is not None:
        article.is_visible = data.is_visible

    if data.model_fields_set:
        article.is_modified = True
    await session.commit()
    await session.refresh(article)
    return serialize_article(article)


@router.delete("/{article_id}")
async def delete_article(
    article_id: int,
    session: AsyncSession = Depends(get_session),
) -> dict:
    """
    Remove an article.

    Facebook articles are only hidden so their post ID stays known and the
    next sync does not import them again.
    """
    article = await session.get(Article, article_id)
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")

    if article.external_id is None:
        await session.delete(article)
        deleted = True
    else:
        article.is_visible = False
        article.is_modified = True
        deleted = False

    await session.commit()
    logger.info(f"Article {article_id} {'deleted' if deleted else 'hidden'}")
    return {"success": True, "deleted": deleted}
