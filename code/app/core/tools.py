from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .models import HistoryTurn


def format_currency(value: float) -> str:
    return f"₹{value:,.0f}"


def format_multiplier(value: float) -> str:
    return f"{value:g}x"


def format_percent(value: float, digits: int = 0) -> str:
    return f"{value * 100:.{digits}f}%"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    moment = now or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def role_label(role: str) -> str:
    return "User" if role == "user" else "Assistant"


def normalize_history(raw: Any) -> List[HistoryTurn]:
    # Malformed entries are dropped instead of rejecting the whole request.
    if not isinstance(raw, list):
        return []
    turns: List[HistoryTurn] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        content = item.get("content")
        if not isinstance(content, str) or not content.strip():
            continue
        role = item.get("role")
        turns.append(HistoryTurn(role=role if isinstance(role, str) else "assistant", content=content))
    return turns


def turns_from_stored(rows: Iterable[Dict[str, Any]]) -> List[HistoryTurn]:
    """Expand stored exchanges (newest first) into chronological user/assistant turns."""
    turns: List[HistoryTurn] = []
    for row in reversed(list(rows)):
        message = row.get("message")
        response = row.get("response")
        if message:
            turns.append(HistoryTurn(role="user", content=str(message)))
        if response:
            turns.append(HistoryTurn(role="assistant", content=str(response)))
    return turns


def recent_turns(turns: List[HistoryTurn], limit: int) -> List[HistoryTurn]:
    if limit <= 0:
        return []
    return turns[-limit:]
