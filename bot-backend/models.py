import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

LIVE_LABEL = "Live Forecast"
ESTIMATED_LABEL = "Estimated Data"


class ActivityType(str, Enum):
    vacation = "vacation"
    hiking = "hiking"
    fishing = "fishing"
    picnic = "picnic"
    sports = "sports"
    camping = "camping"


class Stage(str, Enum):
    awaiting_activity = "awaiting_activity"
    awaiting_location = "awaiting_location"
    awaiting_date = "awaiting_date"


class Sender(str, Enum):
    bot = "bot"
    user = "user"


# Declaration order doubles as the tie-break order for the dominant risk.
class RiskCategory(str, Enum):
    hot = "hot"
    cold = "cold"
    windy = "windy"
    wet = "wet"
    uncomfortable = "uncomfortable"


# ── Conversation ─────────────────────────────────────────────────────────────

class ConversationState(BaseModel):
    model_config = ConfigDict(frozen=True)

    stage: Stage = Stage.awaiting_activity
    activity_type: ActivityType | None = None
    location_text: str | None = None
    date: str | None = None


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float
    label: str


class WeatherObservation(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature_c: float
    precipitation_mm: float
    humidity_pct: float
    wind_speed_kmh: float
    cloud_cover_pct: float
    lat: float
    lon: float
    location_label: str

    @property
    def is_estimated(self) -> bool:
        return self.location_label == ESTIMATED_LABEL


class RiskProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    hot: float
    cold: float
    windy: float
    wet: float
    uncomfortable: float

    def get(self, category: RiskCategory) -> float:
        return getattr(self, category.value)

    def as_dict(self) -> dict[RiskCategory, float]:
        return {category: self.get(category) for category in RiskCategory}


class Narrative(BaseModel):
    text: str
    data_sources: list[str]


def _message_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    id: str = Field(default_factory=_message_id)
    text: str
    sender: Sender
    timestamp: datetime = Field(default_factory=_now)
    risk_profile: RiskProfile | None = None
    data_sources: list[str] | None = None


# ── HTTP payloads ────────────────────────────────────────────────────────────

class ChatRequest(BaseModel):
    session_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class ActivityRequest(BaseModel):
    session_id: str = Field(..., min_length=1)
    activity: ActivityType


class ChatResponse(BaseModel):
    session_id: str
    stage: Stage
    replies: list[ChatMessage]
    user_message: ChatMessage | None = None


class SessionResponse(BaseModel):
    session_id: str
    stage: Stage
    messages: list[ChatMessage]


class HealthResponse(BaseModel):
    status: str
    live_weather: bool
    active_sessions: int
