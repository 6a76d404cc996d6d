"""Supabase-backed identity, profile and chat-history access.

Every function here talks to the network and may raise; callers decide
whether a failure is fatal. The chat pipeline treats all of them as
best-effort.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

logger = logging.getLogger(__name__)

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")

PROFILES_TABLE = "user_profiles"
HISTORY_TABLE = "chat_history"


def supabase_configured() -> bool:
    return bool(SUPABASE_URL and SUPABASE_ANON_KEY)


def get_supabase_client(access_token: Optional[str] = None) -> Client:
    """Return a Supabase client, scoped to the caller's session when a token is given."""
    if not supabase_configured():
        raise RuntimeError("Supabase credentials not set in environment variables.")
    client = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)
    if access_token:
        # Row-level security evaluates queries as the signed-in user.
        client.postgrest.auth(access_token)
    return client


def resolve_user_id(access_token: Optional[str]) -> Optional[str]:
    if not access_token:
        return None
    if not supabase_configured():
        logger.warning("Supabase is not configured; treating caller as anonymous.")
        return None
    client = get_supabase_client(access_token)
    res = client.auth.get_user(access_token)
    user = getattr(res, "user", None)
    return getattr(user, "id", None)


def fetch_profile(user_id: str, access_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
    client = get_supabase_client(access_token)
    res = client.table(PROFILES_TABLE).select("*").eq("id", user_id).limit(1).execute()
    rows = res.data or []
    return rows[0] if rows else None


def fetch_recent_history(user_id: str, limit: int, access_token: Optional[str] = None) -> List[Dict[str, Any]]:
    """Fetch the most recent exchanges for a user, newest first."""
    client = get_supabase_client(access_token)
    res = (
        client.table(HISTORY_TABLE)
        .select("message, response, context, created_at")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return res.data or []


def save_history(
    user_id: str,
    message: str,
    response: str,
    context: str,
    access_token: Optional[str] = None,
) -> List[Dict[str, Any]]:
    client = get_supabase_client(access_token)
    res = (
        client.table(HISTORY_TABLE)
        .insert({"user_id": user_id, "message": message, "response": response, "context": context})
        .execute()
    )
    return res.data or []
