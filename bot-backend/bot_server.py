import json
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse

import config
from dialogue import ChatSession
from models import (
    ActivityRequest,
    ChatRequest,
    ChatResponse,
    HealthResponse,
    SessionResponse,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

_sessions: dict[str, ChatSession] = {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not config.LIVE_WEATHER_ENABLED:
        logger.warning(
            "LIVE_WEATHER_ENABLED is off. "
            "Reports will use the fallback city table and seasonal estimates."
        )
    yield
    _sessions.clear()


app = FastAPI(
    title="WeatherBot",
    description="Outdoor-activity weather risk assistant.",
    version="1.0.0",
    lifespan=lifespan,
)


# ── Custom exception handlers ────────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


def _get_session(session_id: str) -> ChatSession:
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session '{session_id}'.")
    return session


def _evict_idle_sessions() -> None:
    idle = [sid for sid, session in _sessions.items() if session.is_idle(config.SESSION_IDLE_SECONDS)]
    for sid in idle:
        del _sessions[sid]
    if idle:
        logger.info("Evicted %d idle session(s)", len(idle))


# ── Endpoints ────────────────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        live_weather=config.LIVE_WEATHER_ENABLED,
        active_sessions=len(_sessions),
    )


@app.post("/sessions", response_model=SessionResponse)
async def create_session() -> SessionResponse:
    _evict_idle_sessions()
    session = ChatSession()
    _sessions[session.session_id] = session
    logger.info("Session created: %s", session.session_id)
    return SessionResponse(session_id=session.session_id, stage=session.state.stage, messages=session.messages)


@app.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str) -> SessionResponse:
    session = _get_session(session_id)
    return SessionResponse(session_id=session_id, stage=session.state.stage, messages=session.messages)


@app.post("/sessions/{session_id}/reset", response_model=SessionResponse)
async def reset_session(session_id: str) -> SessionResponse:
    session = _get_session(session_id)
    await session.request_new_conversation()
    logger.info("Session reset: %s", session_id)
    return SessionResponse(session_id=session_id, stage=session.state.stage, messages=session.messages)


@app.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest) -> ChatResponse:
    logger.info("Incoming POST /chat: session=%s, message=%r", request.session_id, request.message[:80])
    session = _get_session(request.session_id)

    try:
        replies = await session.submit_user_text(request.message)
    except Exception:
        logger.error("Unexpected exception in /chat", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "An unexpected error occurred."})

    return ChatResponse(session_id=session.session_id, stage=session.state.stage, replies=replies)


@app.post("/chat/activity", response_model=ChatResponse)
async def chat_activity(request: ActivityRequest) -> ChatResponse:
    logger.info("Incoming POST /chat/activity: session=%s, activity=%s", request.session_id, request.activity.value)
    session = _get_session(request.session_id)
    replies = await session.choose_activity(request.activity)
    user_message = session.messages[-len(replies) - 1]
    return ChatResponse(
        session_id=session.session_id,
        stage=session.state.stage,
        replies=replies,
        user_message=user_message,
    )


@app.post("/chat/stream")
async def chat_stream(request: ChatRequest) -> StreamingResponse:
    logger.info("Incoming POST /chat/stream: session=%s, message=%r", request.session_id, request.message[:80])
    session = _get_session(request.session_id)

    async def events():
        try:
            async for message in session.stream_user_text(request.message):
                payload = {"type": "message", "message": message.model_dump(mode="json")}
                yield f"data: {json.dumps(payload)}\n\n"
        except Exception:
            logger.error("Unexpected exception in /chat/stream", exc_info=True)
            payload = {"type": "error", "message": "An unexpected error occurred."}
            yield f"data: {json.dumps(payload)}\n\n"
            return
        yield f"data: {json.dumps({'type': 'state', 'stage': session.state.stage.value})}\n\n"

    return StreamingResponse(events(), media_type="text/event-stream")


if __name__ == "__main__":
    uvicorn.run(
        "bot_server:app",
        host="0.0.0.0",
        port=config.BOT_PORT,
        reload=False,
    )
