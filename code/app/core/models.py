from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class AdvisoryContext(str, Enum):
    FINANCIAL = "financial"
    LOAN = "loan"
    INVESTMENT = "investment"
    INSURANCE = "insurance"
    GENERAL = "general"

    @classmethod
    def from_tag(cls, tag: Any) -> "AdvisoryContext":
        if isinstance(tag, str):
            try:
                return cls(tag.strip().lower())
            except ValueError:
                pass
        return cls.GENERAL


class HistoryTurn(BaseModel):
    role: str = "user"
    content: str = ""


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    age: Optional[Union[int, float, str]] = None
    monthly_income: Optional[Union[float, str]] = None
    monthly_expenses: Optional[Union[float, str]] = None
    current_savings: Optional[Union[float, str]] = None
    dependents: Optional[Union[int, str]] = None
    risk_tolerance: Optional[str] = None
    investment_experience: Optional[str] = None


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    context: AdvisoryContext = AdvisoryContext.GENERAL
    history: List[HistoryTurn] = []


class ChatResponse(BaseModel):
    response: str
    context: str
    timestamp: str


class CalculateResponse(BaseModel):
    category: str
    result: Optional[Dict[str, Any]] = None
