import logging
import os
from typing import Any, Dict, List

import requests
from openai import OpenAI

logger = logging.getLogger(__name__)

LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini").strip().lower()

GEMINI_API_URL = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash-latest")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "30"))
GEMINI_HEALTH_TIMEOUT = float(os.getenv("GEMINI_HEALTH_TIMEOUT", "1.0"))

LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.openai.com/v1")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
LLM_API_KEY = os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY")

GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 1024,
}

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
SAFETY_SETTINGS: List[Dict[str, str]] = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"} for category in SAFETY_CATEGORIES
]


def _generate_url() -> str:
    return f"{GEMINI_API_URL.rstrip('/')}/models/{GEMINI_MODEL}:generateContent"


def build_gemini_payload(prompt: str) -> Dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": dict(GENERATION_CONFIG),
        "safetySettings": [dict(setting) for setting in SAFETY_SETTINGS],
    }


def query_gemini(prompt: str) -> Dict[str, Any]:
    if not GEMINI_API_KEY:
        raise RuntimeError("Missing GEMINI_API_KEY. Set the environment variable and restart the app.")
    resp = requests.post(
        _generate_url(),
        json=build_gemini_payload(prompt),
        headers={"Content-Type": "application/json", "x-goog-api-key": GEMINI_API_KEY},
        timeout=GEMINI_TIMEOUT,
    )
    logger.info("Gemini API response status: %s", resp.status_code)
    if not resp.ok:
        logger.error("Gemini API error: %s", resp.text[:500])
        resp.raise_for_status()
    return resp.json()


def query_openai_compatible(prompt: str) -> Dict[str, Any]:
    if not LLM_API_KEY:
        raise RuntimeError("Missing LLM_API_KEY. Set the environment variable and restart the app.")
    client = OpenAI(base_url=LLM_BASE_URL, api_key=LLM_API_KEY, max_retries=0)
    response = client.chat.completions.create(
        model=LLM_MODEL,
        messages=[{"role": "user", "content": prompt}],
        temperature=GENERATION_CONFIG["temperature"],
        top_p=GENERATION_CONFIG["topP"],
        max_tokens=GENERATION_CONFIG["maxOutputTokens"],
        # top_k is not part of the OpenAI schema; compatible servers read it from the body.
        extra_body={"top_k": GENERATION_CONFIG["topK"]},
        timeout=GEMINI_TIMEOUT,
    )
    return response.model_dump()


def extract_text(response: Dict[str, Any]) -> str:
    if not isinstance(response, dict):
        return ""
    candidates = response.get("candidates") or []
    if candidates:
        candidate = candidates[0] if isinstance(candidates[0], dict) else {}
        content = candidate.get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if parts and isinstance(parts[0], dict):
            text = parts[0].get("text")
            if isinstance(text, str):
                return text.strip()
        return ""
    choices = response.get("choices") or []
    if choices and isinstance(choices[0], dict):
        message = choices[0].get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content.strip()
    return ""


def generate_text(prompt: str) -> str:
    """Send ``prompt`` to the configured provider and return the generated text.

    Configuration and transport errors propagate; an empty string means the
    provider answered without usable text.
    """
    if LLM_PROVIDER == "openai":
        response = query_openai_compatible(prompt)
    else:
        response = query_gemini(prompt)
    return extract_text(response)


def check_llm_online(timeout: float | None = None) -> bool:
    health_timeout = timeout if timeout is not None else GEMINI_HEALTH_TIMEOUT
    if LLM_PROVIDER == "openai":
        url = f"{LLM_BASE_URL.rstrip('/')}/models"
        headers = {"Authorization": f"Bearer {LLM_API_KEY}"} if LLM_API_KEY else {}
    else:
        url = f"{GEMINI_API_URL.rstrip('/')}/models"
        headers = {"x-goog-api-key": GEMINI_API_KEY} if GEMINI_API_KEY else {}
    try:
        resp = requests.get(url, timeout=health_timeout, headers=headers)
    except requests.RequestException:
        return False
    # Any non-5xx HTTP response means the endpoint is reachable.
    return resp.status_code < 500
