import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.ai.gemini_client import LLM_PROVIDER, check_llm_online
from app.core.models import CalculateResponse, ChatResponse
from app.core.pipeline import ChatStatus, error_body, handle_chat
from finance.coverage import CATEGORIES, calculate

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="FinAdvisor API")


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/health/ai")
def health_ai():
    return {"provider": LLM_PROVIDER, "online": check_llm_online()}


@app.post("/api/chat", response_model=ChatResponse)
async def chat(request: Request):
    try:
        payload: Any = await request.json()
    except ValueError:
        payload = None
    outcome = await run_in_threadpool(handle_chat, payload, _bearer_token(request))
    if outcome.status == ChatStatus.INVALID:
        return JSONResponse(status_code=400, content=error_body(outcome))
    return outcome.to_response()


@app.post("/calculate/{category}", response_model=CalculateResponse)
def calculate_coverage(category: str, form: Dict[str, Any] = Body(...)):
    if category not in CATEGORIES:
        raise HTTPException(status_code=404, detail=f"Unknown coverage category: {category}")
    result = calculate(category, form)
    return CalculateResponse(category=category, result=result.to_dict() if result is not None else None)
