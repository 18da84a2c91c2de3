"""
Embed Resolver Service Module

Replaces stand-alone YouTube and Vimeo links in user text with playable
embed markup. For every recognized link:

1. Look the video up in the embed cache
2. On a miss, fetch the provider's oEmbed reply and cache it; if the fetch
   fails, leave that paragraph untouched
3. Optionally wrap the markup in a responsive container
4. Rewrite http:// to https:// when the site is served over https
5. Merge a YouTube link's extra query string (e.g. t=30s) into the iframe src
6. Substitute the markup for the matched paragraph

Links are handled one at a time in order of appearance, YouTube first and
then Vimeo, each fully resolved before the next.
"""

import asyncio
import logging
import re

from dataclasses import dataclass

from app.models.embed import Provider, ResolverConfig, VideoReference
from app.services.embed_cache import EmbedCache
from app.services.oembed_client import OEmbedClient, build_endpoint_url
from app.services.responsive_wrapper import ResponsiveWrapper
from app.services.url_recognizer import VideoMatch, VideoURLRecognizer
from app.utils.logger import add_log_context


# Configure module logger
logger = logging.getLogger(__name__)

# Order in which provider recognizers run over the text
PROVIDER_ORDER: tuple[Provider, ...] = (Provider.YOUTUBE, Provider.VIMEO)

# iframe up to and including the src opening quote, then the src URL
IFRAME_SRC_PATTERN = re.compile(
    r"""(?P<head><iframe\b[^>]*?\ssrc=(?P<quote>["']))(?P<url>[^"']*)(?P=quote)""",
    re.IGNORECASE,
)


@dataclass
class ResolvedEmbed:
    """Markup and aspect ratio for one video, from the cache or the network."""

    markup: str
    aspect_ratio: float
    from_cache: bool


@dataclass
class ResolutionResult:
    """Output text of a resolution run and how many links were embedded."""

    text: str
    embeds: int = 0


def inject_query(markup: str, query: str) -> str:
    """
    Merge a query string into the first iframe src of the markup.

    The query goes straight after the "?" followed by "&", so existing
    parameters stay valid: "embed/ID?feature=oembed" with "t=30s" becomes
    "embed/ID?t=30s&feature=oembed". A src without "?" gains "?t=30s".
    """
    if not query:
        return markup

    def _merge(match: re.Match) -> str:
        url = match.group("url")
        if "?" in url:
            url = url.replace("?", f"?{query}&", 1)
        else:
            url = f"{url}?{query}"
        return f"{match.group('head')}{url}{match.group('quote')}"

    return IFRAME_SRC_PATTERN.sub(_merge, markup, count=1)


def force_https(markup: str) -> str:
    return markup.replace("http://", "https://")


class EmbedResolver:
    """
    Orchestrates recognition, cache, oEmbed fetches and substitution.

    Args:
        cache: Durable embed cache
        client: oEmbed HTTP client
        config: Options for this run, including the site scheme
        recognizer: Link recognizer (a default instance if omitted)

    Example:
        ```python
        resolver = EmbedResolver(cache, OEmbedClient(), settings.resolver_config())
        html = await resolver.resolve("<p>https://vimeo.com/76979871</p>")
        ```
    """

    def __init__(
        self,
        cache: EmbedCache,
        client: OEmbedClient,
        config: ResolverConfig,
        recognizer: VideoURLRecognizer | None = None,
    ) -> None:
        self.cache = cache
        self.client = client
        self.config = config
        self.recognizer = recognizer or VideoURLRecognizer()
        self.wrapper = ResponsiveWrapper(config.default_aspect_ratio)

    async def resolve(self, text: str) -> str:
        """Return text with every resolvable video paragraph replaced by its embed."""
        result = await self.resolve_with_stats(text)
        return result.text

    async def resolve_with_stats(self, text: str) -> ResolutionResult:
        result = ResolutionResult(text=text)
        for provider in PROVIDER_ORDER:
            matches = list(self.recognizer.find(result.text, provider))
            if not matches:
                continue
            result.text, replaced = await self._substitute(result.text, matches)
            result.embeds += replaced
        return result

    async def _substitute(self, text: str, matches: list[VideoMatch]) -> tuple[str, int]:
        pieces: list[str] = []
        cursor = 0
        replaced = 0

        for match in matches:
            markup = await self.render(match.reference)
            pieces.append(text[cursor : match.start])
            if markup is None:
                pieces.append(text[match.start : match.end])
            else:
                pieces.append(markup)
                replaced += 1
            cursor = match.end

        pieces.append(text[cursor:])
        return "".join(pieces), replaced

    async def render(self, reference: VideoReference) -> str | None:
        """
        Final embed markup for one recognized link.

        Returns:
            Markup ready to substitute, or None when the video could not be resolved.
        """
        embed = await self.obtain(reference)
        if embed is None:
            return None

        markup = embed.markup
        if self.config.responsive:
            markup = self.wrapper.wrap(markup, embed.aspect_ratio)
        if self.config.scheme == "https":
            markup = force_https(markup)
        if reference.provider is Provider.YOUTUBE and reference.extra_query:
            markup = inject_query(markup, reference.playback_query)
        return markup

    async def obtain(self, reference: VideoReference) -> ResolvedEmbed | None:
        """Cached embed for the video, fetching and caching it on a miss."""
        log = add_log_context(
            logger, provider=reference.provider.value, video_id=reference.video_id
        )

        cached = await self.cache.lookup(reference.provider, reference.video_id)
        if cached is not None:
            log.debug("Embed cache hit")
            return ResolvedEmbed(
                markup=cached.embed_markup,
                aspect_ratio=cached.aspect_ratio,
                from_cache=True,
            )

        endpoint = build_endpoint_url(reference, self.config)
        log.info(f"Embed cache miss, fetching {endpoint}")
        # Blocking requests call, run in a worker thread
        reply = await asyncio.to_thread(self.client.fetch, endpoint)
        if reply is None:
            log.warning("oEmbed fetch failed, leaving link unconverted")
            return None

        # Stored even when the aspect ratio is unknown (0.0)
        stored = await self.cache.store(
            reference.provider, reference.video_id, reply.html, reply.aspect_ratio
        )
        if not stored:
            log.warning("Embed could not be cached, using it for this response only")

        return ResolvedEmbed(markup=reply.html, aspect_ratio=reply.aspect_ratio, from_cache=False)


__all__ = [
    "EmbedResolver",
    "PROVIDER_ORDER",
    "ResolutionResult",
    "ResolvedEmbed",
    "force_https",
    "inject_query",
]
