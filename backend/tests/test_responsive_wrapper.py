"""Responsive Wrapper Test Suite"""

from decimal import Decimal

import pytest

from app.services.responsive_wrapper import (
    CONTAINER_CLASS,
    IFRAME_STYLE,
    ResponsiveWrapper,
    padding_percent,
)


IFRAME = '<iframe src="https://player.vimeo.com/video/1" width="640" height="360"></iframe>'


@pytest.fixture
def wrapper() -> ResponsiveWrapper:
    return ResponsiveWrapper(default_aspect_ratio=16 / 9)


class TestPaddingPercent:
    @pytest.mark.parametrize(
        ("ratio", "expected"),
        [
            (1.7778, Decimal("56.25")),
            (16 / 9, Decimal("56.25")),
            (4 / 3, Decimal("75.00")),
            (1.6, Decimal("62.50")),
            (2.35, Decimal("42.55")),
        ],
    )
    def test_rounding(self, ratio: float, expected: Decimal) -> None:
        assert padding_percent(ratio) == expected


class TestWrap:
    def test_known_ratio(self, wrapper: ResponsiveWrapper) -> None:
        result = wrapper.wrap(IFRAME, 1.7778)

        assert result.startswith(f'<div class="{CONTAINER_CLASS}" ')
        assert "padding-bottom:56.25%" in result
        assert result.endswith("</iframe></div>")

    def test_iframe_is_absolutely_positioned(self, wrapper: ResponsiveWrapper) -> None:
        result = wrapper.wrap(IFRAME, 1.7778)

        assert f'<iframe style="{IFRAME_STYLE}" src="https://player.vimeo.com/video/1"' in result

    def test_unknown_ratio_uses_default(self) -> None:
        four_three = ResponsiveWrapper(default_aspect_ratio=4 / 3)

        result = four_three.wrap(IFRAME, 0.0)

        assert "padding-bottom:75%" in result

    def test_case_insensitive_iframe_tag(self, wrapper: ResponsiveWrapper) -> None:
        result = wrapper.wrap('<IFRAME src="x"></IFRAME>', 1.6)

        assert f'<IFRAME style="{IFRAME_STYLE}" src="x">' in result
        assert "padding-bottom:62.5%" in result

    def test_every_iframe_is_styled(self, wrapper: ResponsiveWrapper) -> None:
        result = wrapper.wrap("<iframe src='a'></iframe><iframe src='b'></iframe>", 2.0)

        assert result.count(IFRAME_STYLE) == 2
        assert "padding-bottom:50%" in result

    def test_markup_without_iframe_is_still_wrapped(self, wrapper: ResponsiveWrapper) -> None:
        result = wrapper.wrap("<object></object>", 2.0)

        assert IFRAME_STYLE not in result
        assert "<object></object></div>" in result

    @pytest.mark.parametrize("ratio", [0, -1.5])
    def test_invalid_default_ratio(self, ratio: float) -> None:
        with pytest.raises(ValueError):
            ResponsiveWrapper(default_aspect_ratio=ratio)
