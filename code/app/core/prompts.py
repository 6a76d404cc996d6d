from typing import Any, Dict, List, Optional

from .models import AdvisoryContext, HistoryTurn, UserProfile
from .tools import format_currency, role_label

NOT_SPECIFIED = "Not specified"

PERSONA_PREAMBLE = """
You are FinAdvisor, a professional AI financial advisor. You provide helpful, accurate and personalized financial guidance.

IMPORTANT GUIDELINES:
- Always provide educational, informative responses
- Never recommend specific individual stocks
- Always suggest consulting a qualified financial professional before major decisions
- Use Indian financial context (INR, Indian financial products and regulations)
- Be conversational but professional
- Keep responses concise but comprehensive
""".strip()

CONTEXT_GUIDANCE: Dict[AdvisoryContext, str] = {
    AdvisoryContext.FINANCIAL: (
        "Focus on budgeting, savings strategies, emergency funds, retirement planning, and general financial wellness."
    ),
    AdvisoryContext.LOAN: "Focus on loan eligibility, EMI calculations, debt management, credit scores, and loan comparisons.",
    AdvisoryContext.INVESTMENT: (
        "Focus on investment strategies, portfolio allocation, SIP planning, mutual funds, and risk management."
    ),
    AdvisoryContext.INSURANCE: (
        "Focus on insurance needs assessment, coverage calculations, policy comparisons, and claim guidance."
    ),
    AdvisoryContext.GENERAL: "Provide comprehensive financial guidance across all areas.",
}


def context_guidance(context: AdvisoryContext) -> str:
    return CONTEXT_GUIDANCE.get(context, CONTEXT_GUIDANCE[AdvisoryContext.GENERAL])


def _money(value: Any) -> str:
    if not value:
        return NOT_SPECIFIED
    try:
        return format_currency(float(value))
    except (TypeError, ValueError):
        return str(value)


def _text(value: Any) -> str:
    if not value:
        return NOT_SPECIFIED
    return str(value)


def build_profile_block(profile: UserProfile) -> str:
    return f"""
USER PROFILE:
- Age: {_text(profile.age)}
- Monthly Income: {_money(profile.monthly_income)}
- Monthly Expenses: {_money(profile.monthly_expenses)}
- Current Savings: {_money(profile.current_savings)}
- Dependents: {profile.dependents or 0}
- Risk Tolerance: {_text(profile.risk_tolerance)}
- Investment Experience: {_text(profile.investment_experience)}

Please personalize your advice based on this profile when relevant.
""".strip()


def build_history_block(turns: List[HistoryTurn]) -> str:
    lines = ["RECENT CONVERSATION CONTEXT:"]
    lines.extend(f"{role_label(turn.role)}: {turn.content}" for turn in turns)
    return "\n".join(lines)


def build_advisor_prompt(
    message: str,
    context: AdvisoryContext,
    profile: Optional[UserProfile],
    turns: List[HistoryTurn],
) -> str:
    sections = [
        PERSONA_PREAMBLE,
        f"CONTEXT: You are currently in the {context.value} advisory portal.",
    ]
    if profile is not None:
        sections.append(build_profile_block(profile))
    sections.append(f"SPECIALIZATION: {context_guidance(context)}")
    if turns:
        sections.append(build_history_block(turns))
    sections.append(f"User's current question: {message}")
    return "\n\n".join(sections)
