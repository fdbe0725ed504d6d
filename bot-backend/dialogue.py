import asyncio
import logging
import time
import uuid
from collections.abc import AsyncIterator
from typing import Any

import prompts
from activities import match_activity
from models import ActivityType, ChatMessage, ConversationState, Sender, Stage
from report import ReportPipelineFailure, generate_report

logger = logging.getLogger(__name__)

INITIAL_STATE = ConversationState()


def _bot(text: str) -> ChatMessage:
    return ChatMessage(text=text, sender=Sender.bot)


def select_activity(activity: ActivityType, state: ConversationState) -> tuple[ConversationState, list[ChatMessage]]:
    """Quick-reply shortcut: set the activity without classifying any text."""
    next_state = ConversationState(stage=Stage.awaiting_location, activity_type=activity)
    return next_state, [_bot(prompts.quick_reply_acknowledgement(activity))]


async def handle_turn_stream(raw_text: str, state: ConversationState) -> AsyncIterator[dict[str, Any]]:
    """Async generator version of handle_turn — yields message events, then one state event."""
    if not raw_text or not raw_text.strip():
        yield {"type": "state", "state": state}
        return

    if state.stage == Stage.awaiting_activity:
        activity = match_activity(raw_text)
        if activity is None:
            logger.info("No activity recognised in %r", raw_text[:80])
            yield {"type": "message", "message": _bot(prompts.UNRECOGNIZED_ACTIVITY_MESSAGE)}
            yield {"type": "state", "state": state}
            return

        logger.info("Activity recognised: %s", activity.value)
        yield {"type": "message", "message": _bot(prompts.activity_acknowledgement(activity))}
        yield {
            "type": "state",
            "state": ConversationState(stage=Stage.awaiting_location, activity_type=activity),
        }
        return

    if state.stage == Stage.awaiting_location:
        yield {"type": "message", "message": _bot(prompts.location_acknowledgement(raw_text))}
        yield {
            "type": "state",
            "state": state.model_copy(update={"stage": Stage.awaiting_date, "location_text": raw_text}),
        }
        return

    # ── awaiting_date: run the report pipeline ───────────────────────────────
    reporting = state.model_copy(update={"date": raw_text})
    yield {"type": "message", "message": _bot(prompts.ANALYSIS_STARTED_MESSAGE)}

    try:
        report = await generate_report(reporting.activity_type, reporting.location_text, reporting.date)
    except ReportPipelineFailure as exc:
        logger.error("Report failed for state=%s: %s", reporting.model_dump(), exc)
        yield {"type": "message", "message": _bot(prompts.REPORT_FAILED_MESSAGE)}
    else:
        yield {"type": "message", "message": report}
        yield {"type": "message", "message": _bot(prompts.NEW_QUERY_MESSAGE)}

    yield {"type": "state", "state": INITIAL_STATE}


async def handle_turn(raw_text: str, state: ConversationState) -> tuple[ConversationState, list[ChatMessage]]:
    next_state = state
    replies: list[ChatMessage] = []
    async for event in handle_turn_stream(raw_text, state):
        if event["type"] == "message":
            replies.append(event["message"])
        else:
            next_state = event["state"]
    return next_state, replies


class ChatSession:
    """One user's conversation: its state, its message log, and a lock serialising turns."""

    def __init__(self, session_id: str | None = None) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.state = INITIAL_STATE
        self._messages: list[ChatMessage] = [_bot(prompts.WELCOME_MESSAGE)]
        self._lock = asyncio.Lock()
        self.last_active = time.monotonic()

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    def is_idle(self, max_idle_seconds: float) -> bool:
        if self._lock.locked():
            return False
        return time.monotonic() - self.last_active > max_idle_seconds

    async def stream_user_text(self, text: str) -> AsyncIterator[ChatMessage]:
        """Append the user's message, then yield each bot reply as it is appended."""
        async with self._lock:
            if not text or not text.strip():
                return
            self.last_active = time.monotonic()
            self._messages.append(ChatMessage(text=text, sender=Sender.user))
            async for event in handle_turn_stream(text, self.state):
                if event["type"] == "message":
                    self._messages.append(event["message"])
                    yield event["message"]
                else:
                    self.state = event["state"]

    async def submit_user_text(self, text: str) -> list[ChatMessage]:
        return [message async for message in self.stream_user_text(text)]

    async def choose_activity(self, activity: ActivityType) -> list[ChatMessage]:
        async with self._lock:
            self.last_active = time.monotonic()
            self._messages.append(ChatMessage(text=prompts.quick_reply_user_text(activity), sender=Sender.user))
            self.state, replies = select_activity(activity, self.state)
            self._messages.extend(replies)
            return replies

    async def request_new_conversation(self) -> None:
        async with self._lock:
            self.last_active = time.monotonic()
            self.state = INITIAL_STATE
            self._messages = [_bot(prompts.WELCOME_MESSAGE)]
