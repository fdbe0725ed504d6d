import math

from models import ActivityType, Narrative, RiskCategory, RiskProfile, WeatherObservation

DATA_SOURCES = (
    "NASA Global Forecast System (GFS)",
    "Open-Meteo Weather API",
    "Historical Climate Patterns",
    "Satellite Atmospheric Analysis",
)

RISK_LABELS = {
    RiskCategory.hot: "extreme heat",
    RiskCategory.cold: "freezing temperatures",
    RiskCategory.windy: "high winds",
    RiskCategory.wet: "heavy precipitation",
    RiskCategory.uncomfortable: "uncomfortable conditions",
}

FAVORABLE_BELOW = 30
MODERATE_BELOW = 60


def round_half_up(value: float) -> int:
    """Whole-number display rounding; .5 always rounds up (22.5 -> 23, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def dominant_risk(risks: RiskProfile) -> tuple[RiskCategory, float]:
    """Highest risk; ties go to the earliest category in RiskCategory order."""
    best = RiskCategory.hot
    for category in RiskCategory:
        if risks.get(category) > risks.get(best):
            best = category
    return best, risks.get(best)


def describe(
    observation: WeatherObservation,
    activity: ActivityType,
    risks: RiskProfile,
    date: str,
    location: str,
) -> Narrative:
    category, max_risk = dominant_risk(risks)
    label = RISK_LABELS[category]
    temperature = round_half_up(observation.temperature_c)
    wind = round_half_up(observation.wind_speed_kmh)
    precipitation = f"{observation.precipitation_mm:.1f}"
    event = activity.value

    text = f"Based on NASA satellite data and atmospheric analysis for {location} on {date}:\n\n"
    if observation.is_estimated:
        text += (
            "(Live forecast data was unavailable, so these figures are estimated "
            "from seasonal climate patterns.)\n\n"
        )

    if max_risk < FAVORABLE_BELOW:
        text += (
            f"✅ Excellent conditions for {event}! All weather parameters are within optimal ranges. "
            f"Temperature: {temperature}°C, Wind: {wind} km/h, Precipitation: {precipitation}mm."
        )
    elif max_risk < MODERATE_BELOW:
        text += (
            f"⚠️ Moderate risk of {label} for {event}. "
            f"Consider preparing for {round_half_up(max_risk)}% chance of challenging conditions. "
            f"Current forecast: {temperature}°C, {wind} km/h winds."
        )
    else:
        text += (
            f"🚨 High risk of {label} for {event}! "
            f"Strongly consider rescheduling due to {round_half_up(max_risk)}% chance of adverse conditions. "
            f"Forecast shows {temperature}°C with {precipitation}mm precipitation."
        )

    return Narrative(text=text, data_sources=list(DATA_SOURCES))
