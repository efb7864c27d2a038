"""Post text to article conversion."""

from dataclasses import dataclass
from datetime import datetime

from newsdesk.core.gateways import FeedItem

# A first line longer than this is cut down to its first sentence
HEADLINE_MAX_LENGTH = 100
# ...unless that sentence is shorter than this
MIN_SENTENCE_LENGTH = 20
# Ads and footers on the page follow this separator
AD_SEPARATOR = "-" * 44


@dataclass(frozen=True)
class ParsedRecord:
    """Structured article fields derived from a post."""

    external_id: str
    headline: str
    body: str
    image_url: str | None = None
    published_at: datetime | None = None
    source_url: str | None = None


def extract_headline(first_line: str) -> str:
    """
    Derive the headline from the first line of a post.

    Short lines are kept verbatim even if they contain a period (abbreviations,
    short sentences). Overlong lines are cut to their first sentence when that
    sentence is long enough to stand on its own.

    Args:
        first_line: first non-empty, trimmed line

    Returns:
        the headline
    """
    if "." in first_line and len(first_line) > HEADLINE_MAX_LENGTH:
        first_sentence = first_line.split(".")[0]
        if len(first_sentence) >= MIN_SENTENCE_LENGTH:
            return first_sentence + "."
    return first_line


def strip_footer(body: str) -> str:
    """Drop everything from the ad separator onward."""
    if AD_SEPARATOR in body:
        body = body.split(AD_SEPARATOR)[0]
    return body.strip()


def parse_post(item: FeedItem) -> ParsedRecord | None:
    """
    Convert a feed item to a record.

    Returns:
        ParsedRecord, or None when the post has no usable text
    """
    if not isinstance(item.message, str) or not item.message:
        return None

    lines = [line.strip() for line in item.message.split("\n")]
    lines = [line for line in lines if line]
    if not lines:
        return None

    headline = extract_headline(lines[0])
    body = strip_footer("\n".join(lines[1:]))

    return ParsedRecord(
        external_id=item.id,
        headline=headline,
        body=body,
        image_url=item.full_picture,
        published_at=item.created_time,
        source_url=item.permalink_url,
    )
