"""
Video URL Recognizer Module

Finds stand-alone YouTube and Vimeo links inside paragraph-oriented text.
A link is only recognized when it opens a paragraph block (optionally after
whitespace); the whole paragraph, up to its closing tag, becomes the span
that the resolver replaces with embed markup.

Recognized forms:
- YouTube: youtube.com/watch?v=ID, youtube.com/v/ID, youtu.be/ID, with an
  optional trailing "&..." query string (plain or "&amp;" escaped)
- Vimeo: vimeo.com/NUMERIC_ID

Matching is plain substring and regular-expression work over the text; the
markup is never parsed.
"""

import logging
import re

from collections.abc import Iterator
from dataclasses import dataclass

from app.models.embed import Provider, VideoReference


logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Substrings that must be present before a provider pattern is evaluated
YOUTUBE_HOST_MARKERS: tuple[str, ...] = ("youtube.com/watch", "youtube.com/v/", "youtu.be/")
VIMEO_HOST_MARKERS: tuple[str, ...] = ("vimeo.com/",)

# Opening paragraph tag with optional attributes, then optional whitespace
_PARAGRAPH_OPEN = r"<p(?:\s[^>]*)?>\s*"

# Rest of the paragraph, consumed and replaced with the embed
_PARAGRAPH_REST = r".*?</p>"

YOUTUBE_PATTERN = re.compile(
    _PARAGRAPH_OPEN
    + r"(?P<url>https?://(?:www\.|m\.)?"
    r"(?:youtube\.com/(?:watch\?v=|v/)|youtu\.be/)"
    r"(?P<id>[^\s&\"'<>]+))"
    r"(?P<query>&[\w\-.~%=;&#+:,]*)?"
    + _PARAGRAPH_REST,
    re.IGNORECASE | re.DOTALL,
)

VIMEO_PATTERN = re.compile(
    _PARAGRAPH_OPEN
    + r"(?P<url>https?://(?:www\.)?vimeo\.com/(?P<id>\d+))\b"
    + _PARAGRAPH_REST,
    re.IGNORECASE | re.DOTALL,
)

PROVIDER_PATTERNS: dict[Provider, re.Pattern[str]] = {
    Provider.YOUTUBE: YOUTUBE_PATTERN,
    Provider.VIMEO: VIMEO_PATTERN,
}

PROVIDER_HOST_MARKERS: dict[Provider, tuple[str, ...]] = {
    Provider.YOUTUBE: YOUTUBE_HOST_MARKERS,
    Provider.VIMEO: VIMEO_HOST_MARKERS,
}


# =============================================================================
# MATCH TYPES
# =============================================================================


@dataclass(frozen=True)
class VideoMatch:
    """A recognized link and the [start, end) span of text it replaces."""

    reference: VideoReference
    start: int
    end: int


class VideoMatches:
    """
    Lazy, restartable sequence of matches for one provider in one text.

    Each iteration re-scans the text from the beginning, in order of
    appearance.
    """

    def __init__(self, text: str, provider: Provider) -> None:
        self.text = text
        self.provider = provider

    def __iter__(self) -> Iterator[VideoMatch]:
        pattern = PROVIDER_PATTERNS[self.provider]
        for match in pattern.finditer(self.text):
            reference = VideoReference(
                provider=self.provider,
                video_id=match.group("id"),
                source_url=match.group("url"),
                raw_matched_text=match.group(0),
                extra_query=match.groupdict().get("query") or "",
            )
            yield VideoMatch(reference=reference, start=match.start(), end=match.end())


# =============================================================================
# RECOGNIZER
# =============================================================================


class VideoURLRecognizer:
    """
    Finds provider links inside text blocks.

    Example:
        >>> recognizer = VideoURLRecognizer()
        >>> text = "<p>https://vimeo.com/76979871</p>"
        >>> [m.reference.video_id for m in recognizer.find(text, Provider.VIMEO)]
        ['76979871']
    """

    def has_candidates(self, text: str, provider: Provider) -> bool:
        """
        Cheap pre-filter: does the text mention one of the provider's hosts?

        Texts without any host marker never reach the regular expressions.
        """
        if not text:
            return False
        lowered = text.lower()
        return any(marker in lowered for marker in PROVIDER_HOST_MARKERS[provider])

    def find(self, text: str, provider: Provider) -> VideoMatches | tuple[()]:
        """
        Recognize the provider's links in text.

        Args:
            text: Paragraph-oriented markup
            provider: Which provider pattern to apply

        Returns:
            A restartable sequence of VideoMatch; empty when the pre-filter
            rules the text out.
        """
        if not self.has_candidates(text, provider):
            return ()
        logger.debug(f"Text mentions a {provider.value} host, scanning for links")
        return VideoMatches(text, provider)


__all__ = [
    "PROVIDER_HOST_MARKERS",
    "PROVIDER_PATTERNS",
    "VIMEO_PATTERN",
    "VideoMatch",
    "VideoMatches",
    "VideoURLRecognizer",
    "YOUTUBE_PATTERN",
]
