import logging

from forecast import fetch_forecast
from geocoding import resolve_location
from models import ActivityType, ChatMessage, Sender, WeatherObservation
from narrative import describe, round_half_up
from risk import score_risks

logger = logging.getLogger(__name__)


class ReportPipelineFailure(Exception):
    pass


def _data_block(observation: WeatherObservation) -> str:
    heading = "Estimated Data" if observation.is_estimated else "Real-time Data"
    return (
        f"**{heading}:**\n"
        f"• Temperature: {round_half_up(observation.temperature_c)}°C\n"
        f"• Wind Speed: {round_half_up(observation.wind_speed_kmh)} km/h\n"
        f"• Precipitation: {observation.precipitation_mm:.1f}mm\n"
        f"• Humidity: {round_half_up(observation.humidity_pct)}%\n"
        f"• Cloud Cover: {round_half_up(observation.cloud_cover_pct)}%"
    )


async def generate_report(activity: ActivityType, location_text: str, date_text: str) -> ChatMessage:
    """Geocode, forecast, score and narrate. Raises ReportPipelineFailure on any error."""
    try:
        logger.info(
            "Report requested: activity=%s, location=%r, date=%r",
            activity.value,
            location_text[:80],
            date_text[:80],
        )
        location = await resolve_location(location_text)
        observation = await fetch_forecast(location.lat, location.lon, date_text)
        risks = score_risks(observation, activity)
        narrative = describe(observation, activity, risks, date_text, location.label)
    except Exception as exc:
        logger.error("Report pipeline failed", exc_info=True)
        raise ReportPipelineFailure(str(exc)) from exc

    logger.info(
        "Report ready: location=%s, estimated=%s, risks=%s",
        location.label,
        observation.is_estimated,
        risks.model_dump(),
    )
    return ChatMessage(
        text=f"{narrative.text}\n\n{_data_block(observation)}",
        sender=Sender.bot,
        risk_profile=risks,
        data_sources=narrative.data_sources,
    )
