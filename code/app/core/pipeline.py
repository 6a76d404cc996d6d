import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .models import AdvisoryContext, ChatRequest, ChatResponse, HistoryTurn, UserProfile
from .prompts import build_advisor_prompt
from .storage import fetch_profile, fetch_recent_history, resolve_user_id, save_history
from .tools import normalize_history, recent_turns, turns_from_stored, utc_timestamp
from app.ai.gemini_client import generate_text

logger = logging.getLogger(__name__)

CHAT_HISTORY_TURNS = int(os.getenv("CHAT_HISTORY_TURNS", "3"))

MESSAGE_REQUIRED = "Message is required"
FALLBACK_RESPONSE = (
    "I apologize, but I'm experiencing technical difficulties connecting to the AI service. "
    "Please try again in a moment, or consider consulting with a qualified financial advisor "
    "for immediate assistance."
)


class ChatStatus(str, Enum):
    OK = "ok"
    INVALID = "invalid"
    UNAVAILABLE = "unavailable"


@dataclass
class ChatOutcome:
    status: ChatStatus
    context: AdvisoryContext = AdvisoryContext.GENERAL
    text: str = ""
    error: Optional[str] = None
    timestamp: str = field(default_factory=utc_timestamp)

    def to_response(self) -> ChatResponse:
        if self.status == ChatStatus.INVALID:
            raise ValueError("Invalid chat requests have no chat response.")
        text = self.text if self.status == ChatStatus.OK else FALLBACK_RESPONSE
        return ChatResponse(response=text, context=self.context.value, timestamp=self.timestamp)


def parse_chat_request(payload: Any) -> Optional[ChatRequest]:
    """Validate a raw JSON body. Only ``message`` is strict; other fields degrade to defaults."""
    if not isinstance(payload, dict):
        return None
    message = payload.get("message")
    if not isinstance(message, str) or not message:
        return None
    try:
        return ChatRequest(
            message=message,
            context=AdvisoryContext.from_tag(payload.get("context")),
            history=normalize_history(payload.get("history")),
        )
    except ValidationError:
        return None


def _load_profile(user_id: str, access_token: Optional[str]) -> Optional[UserProfile]:
    try:
        row = fetch_profile(user_id, access_token)
    except Exception as e:  # noqa: BLE001 - profile lookup is best-effort
        logger.warning("Error fetching user profile: %s", e)
        return None
    if not row:
        return None
    try:
        return UserProfile.model_validate(row)
    except ValidationError as e:
        logger.warning("Ignoring malformed user profile: %s", e)
        return None


def _load_stored_turns(user_id: str, access_token: Optional[str]) -> List[HistoryTurn]:
    try:
        rows = fetch_recent_history(user_id, CHAT_HISTORY_TURNS, access_token)
    except Exception as e:  # noqa: BLE001 - history lookup is best-effort
        logger.warning("Error fetching chat history: %s", e)
        return []
    return turns_from_stored(rows)


def _resolve_user(access_token: Optional[str]) -> Optional[str]:
    try:
        return resolve_user_id(access_token)
    except Exception as e:  # noqa: BLE001 - anonymous on any auth failure
        logger.warning("Error resolving user identity: %s", e)
        return None


def _save_exchange(user_id: str, request: ChatRequest, response: str, access_token: Optional[str]) -> None:
    try:
        save_history(user_id, request.message, response, request.context.value, access_token)
    except Exception as e:  # noqa: BLE001 - persistence never blocks the reply
        logger.warning("Error saving chat history: %s", e)


def handle_chat(payload: Any, access_token: Optional[str] = None) -> ChatOutcome:
    request = parse_chat_request(payload)
    if request is None:
        return ChatOutcome(status=ChatStatus.INVALID, error=MESSAGE_REQUIRED)

    context = request.context
    logger.info("Chat request received (context=%s)", context.value)

    user_id = _resolve_user(access_token)
    logger.info("User authenticated: %s", user_id is not None)

    profile: Optional[UserProfile] = None
    turns: List[HistoryTurn] = list(request.history)
    if user_id:
        profile = _load_profile(user_id, access_token)
        logger.info("User profile loaded: %s", profile is not None)
        if not turns:
            turns = _load_stored_turns(user_id, access_token)

    prompt = build_advisor_prompt(
        request.message,
        context,
        profile,
        recent_turns(turns, CHAT_HISTORY_TURNS),
    )

    try:
        text = generate_text(prompt)
    except Exception as e:  # noqa: BLE001 - any provider failure becomes UNAVAILABLE
        logger.error("Text generation failed: %s", e)
        return ChatOutcome(status=ChatStatus.UNAVAILABLE, context=context, error=str(e))

    if not text:
        logger.error("Text generation returned no usable text")
        return ChatOutcome(status=ChatStatus.UNAVAILABLE, context=context, error="empty response")

    logger.info("AI response generated successfully")
    if user_id:
        _save_exchange(user_id, request, text, access_token)

    return ChatOutcome(status=ChatStatus.OK, context=context, text=text)


def error_body(outcome: ChatOutcome) -> Dict[str, str]:
    return {"error": outcome.error or MESSAGE_REQUIRED}
