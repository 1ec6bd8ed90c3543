"""
Presentation of decoded METAR as the condition text and icon used by the
generic weather provider, so both sources render the same way on the client.
"""
from typing import Optional, Sequence

from weather_feeds.models.records import CodedText


ICON_BASE_URL = "//cdn.weatherapi.com/weather/64x64/day"

ICON_CLEAR = f"{ICON_BASE_URL}/113.png"
ICON_PARTLY_CLOUDY = f"{ICON_BASE_URL}/116.png"
ICON_OVERCAST = f"{ICON_BASE_URL}/122.png"
ICON_HAZE = f"{ICON_BASE_URL}/143.png"
ICON_THUNDER = f"{ICON_BASE_URL}/200.png"
ICON_FOG = f"{ICON_BASE_URL}/248.png"
ICON_RAIN = f"{ICON_BASE_URL}/296.png"
ICON_SNOW = f"{ICON_BASE_URL}/338.png"
ICON_THUNDER_RAIN = f"{ICON_BASE_URL}/389.png"

LOW_VISIBILITY_KM = 1.0


def format_metar_condition(conditions: Sequence[CodedText], clouds: Sequence[CodedText]) -> str:
    """
    Human-readable condition text.

    Present weather wins over clouds; clouds fall back to the lowest layer.

    Args:
        conditions: Present weather conditions
        clouds: Cloud layers, lowest first

    Returns:
        Condition text, "Clear" when nothing is reported
    """
    if conditions:
        return ", ".join(condition.label for condition in conditions)

    if clouds:
        return clouds[0].label or "Clear"

    return "Clear"


def map_metar_to_icon(
    conditions: Sequence[CodedText],
    clouds: Sequence[CodedText],
    visibility_km: Optional[float]
) -> str:
    """
    Pick an icon URL for a METAR.

    Priority: low visibility, thunderstorm (with rain distinguished),
    rain/drizzle, snow, fog/mist, haze/smoke/dust, then cloud cover tiers,
    then clear.

    Args:
        conditions: Present weather conditions
        clouds: Cloud layers, lowest first
        visibility_km: Visibility in km, if reported

    Returns:
        Icon URL
    """
    if visibility_km is not None and visibility_km < LOW_VISIBILITY_KM:
        return ICON_FOG

    if conditions:
        codes = " ".join(condition.code for condition in conditions)

        if "TS" in codes:
            return ICON_THUNDER_RAIN if "RA" in codes else ICON_THUNDER
        if "RA" in codes or "DZ" in codes:
            return ICON_RAIN
        if "SN" in codes:
            return ICON_SNOW
        if "FG" in codes or "BR" in codes:
            return ICON_FOG
        if "HZ" in codes or "FU" in codes or "DU" in codes:
            return ICON_HAZE

    if clouds:
        cloud_code = clouds[0].code
        if cloud_code in ("OVC", "BKN"):
            return ICON_OVERCAST
        if cloud_code == "SCT":
            return ICON_PARTLY_CLOUDY
        if cloud_code == "FEW":
            return ICON_CLEAR

    return ICON_CLEAR
