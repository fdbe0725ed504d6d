"""
frontend/app.py — Streamlit chat UI for WeatherBot.

Creates a session on the bot backend, then sends each turn via
POST /chat/stream (SSE) and renders bot messages as they arrive, including
the risk bars and data sources attached to a weather report.
"""

import json
import math
import os

import httpx
import streamlit as st
from dotenv import load_dotenv
from pathlib import Path

load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

BOT_PORT = int(os.getenv("BOT_PORT", "8001"))
BOT_URL = f"http://localhost:{BOT_PORT}"

QUICK_REPLIES = [
    ("vacation", "🏖️ Beach Day"),
    ("hiking", "🥾 Hiking"),
    ("fishing", "🎣 Fishing"),
    ("picnic", "🧺 Picnic"),
    ("sports", "⚽ Sports"),
    ("camping", "⛺ Camping"),
]

RISK_LABELS = {
    "hot": "🔥 Hot",
    "cold": "🥶 Cold",
    "windy": "💨 Windy",
    "wet": "🌧️ Wet",
    "uncomfortable": "😓 Uncomfortable",
}

st.set_page_config(page_title="WeatherBot", page_icon="🛰️", layout="centered")
st.title("🛰️ WeatherBot")


def _load_session(data: dict) -> None:
    st.session_state.session_id = data["session_id"]
    st.session_state.stage = data["stage"]
    st.session_state.messages = data["messages"]


def _start_session() -> None:
    response = httpx.post(f"{BOT_URL}/sessions", timeout=10.0)
    response.raise_for_status()
    _load_session(response.json())


def _render(msg: dict) -> None:
    role = "user" if msg["sender"] == "user" else "assistant"
    with st.chat_message(role):
        st.markdown(msg["text"])
        risks = msg.get("risk_profile")
        if risks:
            for key, label in RISK_LABELS.items():
                value = risks[key]
                percent = math.floor(value + 0.5)
                st.progress(percent / 100, text=f"{label}: {percent}%")
        if msg.get("data_sources"):
            st.caption("📡 Sources: " + " · ".join(msg["data_sources"]))


# ── Session state ──────────────────────────────────────────────────────────────

try:
    if "session_id" not in st.session_state:
        _start_session()
except httpx.HTTPError:
    st.error("Could not connect to the WeatherBot backend. Is it running?")
    st.stop()

with st.sidebar:
    if st.button("➕ New chat"):
        try:
            response = httpx.post(f"{BOT_URL}/sessions/{st.session_state.session_id}/reset", timeout=10.0)
            if response.status_code == 404:
                _start_session()
            else:
                response.raise_for_status()
                _load_session(response.json())
        except httpx.HTTPError:
            st.error("Could not reset the conversation. Is the backend still running?")
        else:
            st.rerun()

# ── Render chat history ────────────────────────────────────────────────────────

for msg in st.session_state.messages:
    _render(msg)

# ── Quick replies ──────────────────────────────────────────────────────────────

if st.session_state.stage == "awaiting_activity":
    columns = st.columns(len(QUICK_REPLIES))
    for column, (activity, label) in zip(columns, QUICK_REPLIES):
        if column.button(label, key=f"quick-{activity}"):
            try:
                response = httpx.post(
                    f"{BOT_URL}/chat/activity",
                    json={"session_id": st.session_state.session_id, "activity": activity},
                    timeout=10.0,
                )
            except httpx.HTTPError:
                st.error("Could not connect to the WeatherBot backend. Is it running?")
            else:
                if response.status_code != 200:
                    st.error(f"WeatherBot returned error {response.status_code}.")
                else:
                    data = response.json()
                    if data.get("user_message"):
                        st.session_state.messages.append(data["user_message"])
                    st.session_state.messages.extend(data["replies"])
                    st.session_state.stage = data["stage"]
                    st.rerun()

# ── Chat input ─────────────────────────────────────────────────────────────────

if prompt := st.chat_input("Tell me about your plans..."):
    user_msg = {"sender": "user", "text": prompt}
    st.session_state.messages.append(user_msg)
    _render(user_msg)

    payload = {"session_id": st.session_state.session_id, "message": prompt}
    error_message = None

    try:
        with st.spinner("Thinking..."):
            with httpx.Client(timeout=60.0) as client:
                with client.stream("POST", f"{BOT_URL}/chat/stream", json=payload) as response:
                    if response.status_code != 200:
                        error_message = f"WeatherBot returned error {response.status_code}."
                    else:
                        for line in response.iter_lines():
                            if not line.startswith("data: "):
                                continue
                            try:
                                event = json.loads(line[len("data: "):])
                            except json.JSONDecodeError:
                                continue

                            etype = event.get("type")
                            if etype == "message":
                                st.session_state.messages.append(event["message"])
                                _render(event["message"])
                            elif etype == "state":
                                st.session_state.stage = event["stage"]
                            elif etype == "error":
                                error_message = event.get("message", "An error occurred.")
    except httpx.ConnectError:
        error_message = "Could not connect to WeatherBot. Is it running?"
    except Exception as exc:
        error_message = str(exc)

    if error_message:
        st.error(error_message)
    else:
        st.rerun()
