"""
Tests for METAR condition text and icon mapping.
"""
import pytest

from travel_api.services.metar_presentation import (
    ICON_CLEAR,
    ICON_FOG,
    ICON_HAZE,
    ICON_OVERCAST,
    ICON_PARTLY_CLOUDY,
    ICON_RAIN,
    ICON_SNOW,
    ICON_THUNDER,
    ICON_THUNDER_RAIN,
    format_metar_condition,
    map_metar_to_icon,
)
from weather_feeds.models.records import CodedText


def coded(*codes):
    return [CodedText(code=code) for code in codes]


class TestFormatCondition:

    def test_conditions_joined(self):
        conditions = [CodedText(code="-RA", text="Light rain"), CodedText(code="BR", text="Mist")]
        assert format_metar_condition(conditions, coded("OVC")) == "Light rain, Mist"

    def test_falls_back_to_lowest_cloud(self):
        clouds = [CodedText(code="BKN", text="Broken"), CodedText(code="OVC", text="Overcast")]
        assert format_metar_condition([], clouds) == "Broken"

    def test_code_used_when_text_missing(self):
        assert format_metar_condition(coded("HZ"), []) == "HZ"

    def test_clear_when_nothing_reported(self):
        assert format_metar_condition([], []) == "Clear"


class TestIconMapping:

    @pytest.mark.parametrize("conditions, clouds, expected", [
        (coded("TSRA"), coded("BKN"), ICON_THUNDER_RAIN),
        (coded("TS"), [], ICON_THUNDER),
        (coded("-RA"), coded("OVC"), ICON_RAIN),
        (coded("DZ"), [], ICON_RAIN),
        (coded("SN"), [], ICON_SNOW),
        (coded("BR"), [], ICON_FOG),
        (coded("HZ"), coded("FEW"), ICON_HAZE),
        (coded("DU"), [], ICON_HAZE),
        ([], coded("OVC"), ICON_OVERCAST),
        ([], coded("BKN"), ICON_OVERCAST),
        ([], coded("SCT"), ICON_PARTLY_CLOUDY),
        ([], coded("FEW"), ICON_CLEAR),
        ([], [], ICON_CLEAR),
    ])
    def test_priority(self, conditions, clouds, expected):
        assert map_metar_to_icon(conditions, clouds, 10.0) == expected

    def test_thunderstorm_outranks_rain_in_separate_groups(self):
        assert map_metar_to_icon(coded("-RA", "TS"), [], 8.0) == ICON_THUNDER_RAIN

    def test_low_visibility_wins(self):
        assert map_metar_to_icon(coded("TSRA"), coded("OVC"), 0.8) == ICON_FOG

    def test_unknown_visibility_ignored(self):
        assert map_metar_to_icon([], coded("SCT"), None) == ICON_PARTLY_CLOUDY
