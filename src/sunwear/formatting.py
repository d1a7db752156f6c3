"""Display formatting for digest values.

Only the two rules the digest depends on live here: how a raw Celsius value
becomes a display string, and which icon category a condition id belongs to.
"""

from __future__ import annotations

from enum import StrEnum

DEGREE_SIGN = "°"


class IconCategory(StrEnum):
    STORM = "storm"
    LIGHT_RAIN = "light_rain"
    RAIN = "rain"
    SNOW = "snow"
    FOG = "fog"
    CLEAR = "clear"
    LIGHT_CLOUDS = "light_clouds"
    CLOUDS = "clouds"


def celsius_to_fahrenheit(temp_c: float) -> float:
    return 9.0 * temp_c / 5.0 + 32.0


def format_temperature(temp_c: float, *, metric: bool = True) -> str:
    """Format a raw Celsius temperature as a whole-degree display string.

    >>> format_temperature(21.4)
    '21°'
    >>> format_temperature(21.4, metric=False)
    '71°'
    """
    value = float(temp_c) if metric else celsius_to_fahrenheit(float(temp_c))
    return f"{value:.0f}{DEGREE_SIGN}"


def icon_category(condition_id: int) -> IconCategory | None:
    """Map an OpenWeatherMap condition id to an icon category.

    Returns ``None`` for ids without an icon.
    """
    if 200 <= condition_id <= 232:
        return IconCategory.STORM
    if 300 <= condition_id <= 321:
        return IconCategory.LIGHT_RAIN
    if 500 <= condition_id <= 504:
        return IconCategory.RAIN
    if condition_id == 511:
        return IconCategory.SNOW
    if 520 <= condition_id <= 531:
        return IconCategory.RAIN
    if 600 <= condition_id <= 622:
        return IconCategory.SNOW
    if 701 <= condition_id <= 761:
        return IconCategory.FOG
    if condition_id == 781:
        return IconCategory.STORM
    if condition_id == 800:
        return IconCategory.CLEAR
    if condition_id == 801:
        return IconCategory.LIGHT_CLOUDS
    if 802 <= condition_id <= 804:
        return IconCategory.CLOUDS
    return None
