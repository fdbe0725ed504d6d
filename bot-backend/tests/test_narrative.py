import os
import sys

# Ensure bot-backend/ is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from models import ESTIMATED_LABEL, LIVE_LABEL, ActivityType, RiskCategory, RiskProfile, WeatherObservation
from narrative import DATA_SOURCES, describe, dominant_risk, round_half_up


def _obs(label=LIVE_LABEL) -> WeatherObservation:
    return WeatherObservation(
        temperature_c=30.2,
        precipitation_mm=2.04,
        humidity_pct=70.0,
        wind_speed_kmh=10.4,
        cloud_cover_pct=40.0,
        lat=48.8566,
        lon=2.3522,
        location_label=label,
    )


def _risks(hot=5.0, cold=5.0, windy=5.0, wet=5.0, uncomfortable=5.0) -> RiskProfile:
    return RiskProfile(hot=hot, cold=cold, windy=windy, wet=wet, uncomfortable=uncomfortable)


# ── Tests: dominant risk ──────────────────────────────────────────────────────

def test_dominant_risk_picks_maximum():
    assert dominant_risk(_risks(windy=45, wet=20)) == (RiskCategory.windy, 45)


def test_dominant_risk_ties_go_to_first_category():
    assert dominant_risk(_risks(hot=50, wet=50)) == (RiskCategory.hot, 50)
    assert dominant_risk(_risks(windy=60, uncomfortable=60)) == (RiskCategory.windy, 60)


# ── Tests: severity bands ─────────────────────────────────────────────────────

def test_favorable_band():
    narrative = describe(_obs(), ActivityType.hiking, _risks(hot=29), "2025-07-04", "Paris")

    assert "Excellent conditions for hiking!" in narrative.text
    assert "Temperature: 30°C, Wind: 10 km/h, Precipitation: 2.0mm." in narrative.text


def test_moderate_band():
    narrative = describe(_obs(), ActivityType.fishing, _risks(windy=45), "2025-07-04", "Paris")

    assert "Moderate risk of high winds for fishing." in narrative.text
    assert "45% chance of challenging conditions" in narrative.text
    assert "Current forecast: 30°C, 10 km/h winds." in narrative.text


def test_high_band():
    narrative = describe(_obs(), ActivityType.picnic, _risks(wet=71, windy=35), "2025-07-04", "Paris")

    assert "High risk of heavy precipitation for picnic!" in narrative.text
    assert "Strongly consider rescheduling due to 71% chance" in narrative.text
    assert "Forecast shows 30°C with 2.0mm precipitation." in narrative.text


def test_band_boundaries():
    moderate = describe(_obs(), ActivityType.sports, _risks(hot=30), "2025-07-04", "Paris")
    high = describe(_obs(), ActivityType.sports, _risks(hot=60), "2025-07-04", "Paris")

    assert "Moderate risk of extreme heat" in moderate.text
    assert "High risk of extreme heat" in high.text


# ── Tests: framing ────────────────────────────────────────────────────────────

def test_header_names_location_and_date():
    narrative = describe(_obs(), ActivityType.camping, _risks(), "2025-12-24", "Tokyo")
    assert narrative.text.startswith("Based on NASA satellite data and atmospheric analysis for Tokyo on 2025-12-24:")


def test_estimated_data_is_flagged():
    live = describe(_obs(LIVE_LABEL), ActivityType.picnic, _risks(), "2025-07-04", "Paris")
    estimated = describe(_obs(ESTIMATED_LABEL), ActivityType.picnic, _risks(), "2025-07-04", "Paris")

    assert "estimated from seasonal climate patterns" not in live.text
    assert "estimated from seasonal climate patterns" in estimated.text


def test_data_sources_are_fixed():
    live = describe(_obs(LIVE_LABEL), ActivityType.picnic, _risks(), "2025-07-04", "Paris")
    estimated = describe(_obs(ESTIMATED_LABEL), ActivityType.picnic, _risks(), "2025-07-04", "Paris")

    assert live.data_sources == list(DATA_SOURCES)
    assert estimated.data_sources == list(DATA_SOURCES)
    assert len(live.data_sources) == 4


def test_describe_is_idempotent():
    args = (_obs(), ActivityType.vacation, _risks(uncomfortable=48.6), "2025-07-04", "Paris")
    assert describe(*args) == describe(*args)
    assert describe(*args).text.encode() == describe(*args).text.encode()


# ── Tests: display rounding ───────────────────────────────────────────────────

def test_round_half_up():
    assert round_half_up(22.5) == 23
    assert round_half_up(23.5) == 24
    assert round_half_up(22.49) == 22
    assert round_half_up(-2.5) == -2
    assert round_half_up(0.5) == 1


def test_half_degree_rounds_up_in_text():
    observation = _obs().model_copy(update={"temperature_c": 22.5, "wind_speed_kmh": 10.5})

    narrative = describe(observation, ActivityType.hiking, _risks(wet=44.5), "2025-07-04", "Paris")

    assert "45% chance of challenging conditions" in narrative.text
    assert "Current forecast: 23°C, 11 km/h winds." in narrative.text
