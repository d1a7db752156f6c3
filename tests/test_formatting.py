from __future__ import annotations

import pytest

from sunwear.formatting import IconCategory, celsius_to_fahrenheit, format_temperature, icon_category


def test_format_temperature_metric_rounds_to_whole_degrees() -> None:
    assert format_temperature(21.4) == "21°"
    assert format_temperature(-3.2) == "-3°"


def test_format_temperature_imperial_converts() -> None:
    assert celsius_to_fahrenheit(100.0) == 212.0
    assert format_temperature(0.0, metric=False) == "32°"


@pytest.mark.parametrize(
    ("condition_id", "expected"),
    [
        (200, IconCategory.STORM),
        (310, IconCategory.LIGHT_RAIN),
        (502, IconCategory.RAIN),
        (511, IconCategory.SNOW),
        (521, IconCategory.RAIN),
        (601, IconCategory.SNOW),
        (741, IconCategory.FOG),
        (761, IconCategory.FOG),
        (781, IconCategory.STORM),
        (800, IconCategory.CLEAR),
        (801, IconCategory.LIGHT_CLOUDS),
        (804, IconCategory.CLOUDS),
    ],
)
def test_icon_category_ranges(condition_id: int, expected: IconCategory) -> None:
    assert icon_category(condition_id) == expected


def test_icon_category_unknown_id() -> None:
    assert icon_category(999) is None
    assert icon_category(-1) is None
