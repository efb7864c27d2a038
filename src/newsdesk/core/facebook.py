"""Facebook Graph API page posts client."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import httpx

from newsdesk.core.gateways import FeedItem, FeedSource, FeedUnavailable

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.facebook.com"
POST_FIELDS = "id,message,full_picture,created_time,permalink_url"
# Graph API timestamps look like 2025-01-31T08:15:00+0000
GRAPH_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


@dataclass
class FacebookConfig:
    """Facebook page connection settings."""

    page_id: str
    page_token: str
    graph_version: str = "v24.0"
    timeout: float = 30.0


def parse_graph_time(value: Any) -> datetime | None:
    """Parse a Graph API timestamp into timezone-aware UTC."""
    if not value:
        return None
    if not isinstance(value, str):
        logger.warning(f"Unrecognised created_time: {value!r}")
        return None
    try:
        parsed = datetime.strptime(value, GRAPH_TIME_FORMAT)
    except ValueError:
        logger.warning(f"Unrecognised created_time: {value!r}")
        return None
    return parsed.astimezone(UTC)


def _text(value: Any) -> str | None:
    """Non-empty string fields only."""
    return value if isinstance(value, str) and value else None


class FacebookClient(FeedSource):
    """Reads the most recent posts of one Facebook page."""

    def __init__(
        self,
        config: FacebookConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    @property
    def is_configured(self) -> bool:
        return bool(self.config.page_id and self.config.page_token)

    async def fetch_recent(self, limit: int) -> list[FeedItem]:
        """Fetch the page's most recent posts, newest first."""
        if not self.is_configured:
            msg = "Missing FB_PAGE_ID or FB_PAGE_TOKEN"
            raise FeedUnavailable(msg)

        url = f"{GRAPH_BASE_URL}/{self.config.graph_version}/{self.config.page_id}/posts"
        params = {
            "access_token": self.config.page_token,
            "fields": POST_FIELDS,
            "limit": limit,
        }

        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            reason = self._error_message(e.response)
            msg = f"Facebook fetch failed ({e.response.status_code}): {reason}"
            raise FeedUnavailable(msg) from e
        except httpx.HTTPError as e:
            msg = f"Facebook fetch failed: {e}"
            raise FeedUnavailable(msg) from e
        except ValueError as e:
            msg = "Facebook returned a malformed response"
            raise FeedUnavailable(msg) from e

        posts = data.get("data") if isinstance(data, dict) else None
        if not isinstance(posts, list):
            msg = "Facebook response has no post list"
            raise FeedUnavailable(msg)

        return self._parse_posts(posts)

    def _parse_posts(self, posts: list[Any]) -> list[FeedItem]:
        """Convert raw post payloads to feed items, dropping malformed entries."""
        items: list[FeedItem] = []

        for post in posts:
            if not isinstance(post, dict):
                logger.warning(f"Skipping malformed post entry: {post!r:.100}")
                continue

            post_id = post.get("id")
            if not post_id or not isinstance(post_id, str | int):
                continue

            items.append(
                FeedItem(
                    id=str(post_id),
                    message=_text(post.get("message")),
                    full_picture=_text(post.get("full_picture")),
                    created_time=parse_graph_time(post.get("created_time")),
                    permalink_url=_text(post.get("permalink_url")),
                )
            )

        return items

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the Graph API error message, falling back to the raw body."""
        try:
            payload = response.json()
        except ValueError:
            return response.text[:200]
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return response.text[:200]
