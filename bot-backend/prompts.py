import random

from activities import ACTIVITIES
from models import ActivityType

WELCOME_MESSAGE = (
    "Hey! 👋 I'm WeatherBot, powered by real NASA Earth observation data. "
    "I can predict if adverse weather might ruin your outdoor plans!\n\n"
    "I'll analyze chances of extreme heat, cold, wind, rain, and uncomfortable conditions "
    "using satellite data and AI analysis.\n\n"
    "What kind of outdoor adventure are you planning?"
)

UNRECOGNIZED_ACTIVITY_MESSAGE = (
    "Hmm, I'm not quite sure about that activity. "
    "Try: vacation, hiking, fishing, picnic, sports, or camping!"
)

ANALYSIS_STARTED_MESSAGE = "🛰️ Accessing NASA satellite data and atmospheric models..."

REPORT_FAILED_MESSAGE = (
    "I encountered an issue accessing real-time NASA data. Please try again in a moment."
)

NEW_QUERY_MESSAGE = (
    "Want to check another event with real NASA data? Just tell me what you're planning!"
)


def activity_acknowledgement(activity: ActivityType) -> str:
    name = activity.value
    title = name.capitalize()
    return random.choice([
        f"Awesome! {title} is amazing! Now, where's this happening? Drop me a city name!",
        f"Nice choice! {title} sounds fun! What's the location?",
        f"Perfect! I love {name}! Where are you heading?",
    ])


def quick_reply_acknowledgement(activity: ActivityType) -> str:
    label = ACTIVITIES[activity].label
    return random.choice([
        f"{label} sounds amazing! Where's this adventure taking place?",
        f"Great choice! What's the location for your {label.lower()}?",
        f"Perfect! Where are you heading for this {label.lower()}?",
    ])


def quick_reply_user_text(activity: ActivityType) -> str:
    return f"I'm planning {ACTIVITIES[activity].label.lower()}"


def location_acknowledgement(location_text: str) -> str:
    return random.choice([
        f"Got it! {location_text} it is! When's the big day? Use format YYYY-MM-DD",
        f"{location_text} - sounds great! What date are we looking at? (YYYY-MM-DD)",
        f"Perfect! I've got {location_text} locked in. Now, what's the date? (YYYY-MM-DD)",
    ])
