from dataclasses import dataclass

from models import ActivityType, RiskCategory


@dataclass(frozen=True)
class ActivityProfile:
    label: str
    emoji: str
    keywords: tuple[str, ...]
    adjustments: dict[RiskCategory, float]


# Dict order is the keyword-matching order: the first activity with a hit wins.
ACTIVITIES: dict[ActivityType, ActivityProfile] = {
    ActivityType.vacation: ActivityProfile(
        label="Beach Day",
        emoji="🏖️",
        keywords=("vacation", "holiday", "beach", "trip"),
        adjustments={RiskCategory.hot: 10, RiskCategory.wet: 15, RiskCategory.uncomfortable: 5},
    ),
    ActivityType.hiking: ActivityProfile(
        label="Hiking",
        emoji="🥾",
        keywords=("hike", "hiking", "trail", "trek", "mountain"),
        adjustments={
            RiskCategory.hot: 15,
            RiskCategory.cold: 10,
            RiskCategory.windy: 10,
            RiskCategory.wet: 20,
        },
    ),
    ActivityType.fishing: ActivityProfile(
        label="Fishing",
        emoji="🎣",
        keywords=("fish", "fishing", "angling"),
        adjustments={RiskCategory.windy: 20, RiskCategory.wet: 25, RiskCategory.uncomfortable: 10},
    ),
    ActivityType.picnic: ActivityProfile(
        label="Picnic",
        emoji="🧺",
        keywords=("picnic", "outdoor meal", "park"),
        adjustments={RiskCategory.wet: 30, RiskCategory.windy: 15, RiskCategory.hot: 10},
    ),
    ActivityType.sports: ActivityProfile(
        label="Sports",
        emoji="⚽",
        keywords=("sport", "game", "match", "athletic", "exercise"),
        adjustments={RiskCategory.hot: 25, RiskCategory.wet: 20, RiskCategory.uncomfortable: 15},
    ),
    ActivityType.camping: ActivityProfile(
        label="Camping",
        emoji="⛺",
        keywords=("camp", "camping", "tent"),
        adjustments={
            RiskCategory.cold: 20,
            RiskCategory.wet: 25,
            RiskCategory.windy: 10,
            RiskCategory.uncomfortable: 15,
        },
    ),
}


def match_activity(text: str) -> ActivityType | None:
    """Case-insensitive substring match against the keyword table; first hit wins."""
    lowered = text.lower()
    for activity, profile in ACTIVITIES.items():
        if any(keyword in lowered for keyword in profile.keywords):
            return activity
    return None
