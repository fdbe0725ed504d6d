from activities import ACTIVITIES
from models import ActivityType, RiskCategory, RiskProfile, WeatherObservation

RISK_FLOOR = 5.0
RISK_CEILING = 95.0


def clamp_risk(value: float) -> float:
    return max(RISK_FLOOR, min(RISK_CEILING, value))


def base_risks(observation: WeatherObservation) -> dict[RiskCategory, float]:
    t = observation.temperature_c
    humidity = observation.humidity_pct
    return {
        RiskCategory.hot: clamp_risk((t - 25) * 3),
        RiskCategory.cold: clamp_risk((5 - t) * 4),
        RiskCategory.windy: clamp_risk(observation.wind_speed_kmh * 2),
        RiskCategory.wet: clamp_risk(observation.precipitation_mm * 10 + humidity * 0.3),
        RiskCategory.uncomfortable: clamp_risk(abs(t - 20) * 2 + humidity * 0.2),
    }


def score_risks(observation: WeatherObservation, activity: ActivityType) -> RiskProfile:
    """Five independently clamped percentages; they are not normalised."""
    risks = base_risks(observation)
    for category, delta in ACTIVITIES[activity].adjustments.items():
        risks[category] = clamp_risk(risks[category] + delta)
    return RiskProfile(**{category.value: value for category, value in risks.items()})
