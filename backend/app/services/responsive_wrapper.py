"""
Responsive Wrapper Module

Turns fixed-size iframe embeds into fluid, aspect-ratio-preserving blocks.
The outer container reserves height through padding-bottom (a percentage of
its own width) and every iframe is absolutely positioned to fill it.

This is a textual transformation; the markup does not need to be a complete
HTML document.
"""

import re

from decimal import ROUND_HALF_UP, Decimal


IFRAME_OPEN_PATTERN = re.compile(r"<iframe\b", re.IGNORECASE)

IFRAME_STYLE = "position:absolute;top:0;left:0;width:100%;height:100%;"

CONTAINER_CLASS = "video-embed-responsive"

CONTAINER_TEMPLATE = (
    '<div class="{css_class}" '
    'style="position:relative;padding-bottom:{padding}%;height:0;overflow:hidden;">'
    "{markup}</div>"
)


def padding_percent(aspect_ratio: float) -> Decimal:
    """
    Vertical padding, as a percentage of width, for a width/height ratio.

    Rounded half-up to two decimals, so 16:9 gives 56.25.
    """
    raw = Decimal(1) / Decimal(str(aspect_ratio)) * 100
    return raw.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class ResponsiveWrapper:
    """
    Wraps embed markup in a fluid container.

    Args:
        default_aspect_ratio: Used when an embed's aspect ratio is unknown (0)

    Example:
        >>> wrapper = ResponsiveWrapper(default_aspect_ratio=16 / 9)
        >>> wrapper.wrap('<iframe src="x"></iframe>', 0)[:60]
        '<div class="video-embed-responsive" style="position:relative;pa'
    """

    def __init__(self, default_aspect_ratio: float = 16 / 9) -> None:
        if default_aspect_ratio <= 0:
            raise ValueError("default_aspect_ratio must be positive")
        self.default_aspect_ratio = default_aspect_ratio

    def wrap(self, embed_markup: str, aspect_ratio: float) -> str:
        ratio = aspect_ratio if aspect_ratio > 0 else self.default_aspect_ratio
        padding = padding_percent(ratio)

        styled = IFRAME_OPEN_PATTERN.sub(
            lambda match: f'{match.group(0)} style="{IFRAME_STYLE}"', embed_markup
        )
        return CONTAINER_TEMPLATE.format(
            css_class=CONTAINER_CLASS,
            padding=_format_percent(padding),
            markup=styled,
        )


def _format_percent(value: Decimal) -> str:
    # 56.25 -> "56.25", 75.00 -> "75", 62.50 -> "62.5"
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


__all__ = ["CONTAINER_CLASS", "IFRAME_STYLE", "ResponsiveWrapper", "padding_percent"]
