"""
oEmbed Client Module

Fetches embed markup for a video link from its provider's oEmbed endpoint.

Every failure is soft: transport errors, non-2xx statuses, bodies that are
not JSON objects and replies without usable "html" all yield None, so one
broken link never stops the rest of a text from being processed.
"""

import logging

from typing import Any
from urllib.parse import quote

import requests

from pydantic import ValidationError

from app.models.embed import OEmbedResponse, Provider, ResolverConfig, VideoReference


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_REQUEST_TIMEOUT: float = 10.0

DEFAULT_USER_AGENT: str = "video-embed-service/1.0 (+oembed)"

# Endpoint templates; the source URL is percent-encoded before substitution
OEMBED_ENDPOINT_TEMPLATES: dict[Provider, str] = {
    Provider.YOUTUBE: (
        "{scheme}://www.youtube.com/oembed?url={url}&format=json"
        "&maxwidth={max_width}&maxheight={max_height}"
    ),
    Provider.VIMEO: (
        "{scheme}://vimeo.com/api/oembed.json?url={url}"
        "&maxwidth={max_width}&maxheight={max_height}"
    ),
}


def build_endpoint_url(reference: VideoReference, config: ResolverConfig) -> str:
    """
    Build the provider's oEmbed request URL for a recognized link.

    Args:
        reference: The recognized link
        config: Supplies the request scheme, maxwidth and maxheight

    Returns:
        Fully formed oEmbed endpoint URL
    """
    template = OEMBED_ENDPOINT_TEMPLATES[reference.provider]
    return template.format(
        scheme=config.scheme,
        url=quote(reference.source_url, safe=""),
        max_width=config.max_width,
        max_height=config.max_height,
    )


class OEmbedClient:
    """
    Performs the single oEmbed GET for a video and parses the reply.

    Example:
        >>> client = OEmbedClient(request_timeout=5)
        >>> reply = client.fetch("https://vimeo.com/api/oembed.json?url=...")
        >>> reply.html if reply else None
    """

    def __init__(self, request_timeout: float = DEFAULT_REQUEST_TIMEOUT) -> None:
        """
        Initialize the oEmbed client.

        Args:
            request_timeout: Timeout in seconds for each request (default: 10)
        """
        self.logger = logging.getLogger(__name__)
        self.request_timeout = request_timeout
        self._session_headers = {
            "User-Agent": DEFAULT_USER_AGENT,
            "Accept": "application/json",
        }

    def fetch(self, endpoint_url: str) -> OEmbedResponse | None:
        """
        GET an oEmbed endpoint and parse the JSON reply.

        Args:
            endpoint_url: Full oEmbed request URL

        Returns:
            OEmbedResponse with html and optional dimensions, or None on any failure
        """
        try:
            response = requests.get(
                endpoint_url,
                headers=self._session_headers,
                timeout=self.request_timeout,
            )
            response.raise_for_status()
            payload = response.json()

        except requests.exceptions.Timeout:
            self.logger.warning(f"Timeout fetching oEmbed data: {endpoint_url}")
            return None

        except requests.exceptions.ConnectionError:
            self.logger.warning(f"Connection error fetching oEmbed data: {endpoint_url}")
            return None

        except requests.exceptions.HTTPError as e:
            self.logger.warning(f"oEmbed provider returned an error status: {e}")
            return None

        except ValueError:
            # requests' JSONDecodeError is both a ValueError and a RequestException
            self.logger.warning(f"oEmbed reply is not valid JSON: {endpoint_url}")
            return None

        except requests.exceptions.RequestException as e:
            self.logger.warning(f"Request error fetching oEmbed data: {e}")
            return None

        return self.parse(payload)

    def parse(self, payload: Any) -> OEmbedResponse | None:
        """
        Extract the usable fields of an oEmbed JSON document.

        Dimensions that are missing or not integers are dropped, which leaves
        the aspect ratio unknown rather than rejecting the embed.
        """
        if not isinstance(payload, dict):
            self.logger.warning("oEmbed reply is not a JSON object")
            return None

        markup = payload.get("html")
        if not isinstance(markup, str) or not markup.strip():
            self.logger.warning("oEmbed reply has no usable html")
            return None

        try:
            return OEmbedResponse(
                html=markup,
                width=self._as_dimension(payload.get("width")),
                height=self._as_dimension(payload.get("height")),
            )
        except ValidationError:
            self.logger.exception("oEmbed reply failed validation")
            return None

    @staticmethod
    def _as_dimension(value: Any) -> int | None:
        # Some providers send dimensions as strings, e.g. "360"
        if isinstance(value, bool) or value is None:
            return None
        try:
            dimension = int(value)
        except (TypeError, ValueError):
            return None
        return dimension if dimension > 0 else None


__all__ = [
    "DEFAULT_REQUEST_TIMEOUT",
    "OEMBED_ENDPOINT_TEMPLATES",
    "OEmbedClient",
    "build_endpoint_url",
]
