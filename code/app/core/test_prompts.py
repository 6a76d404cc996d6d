from app.core.models import AdvisoryContext, HistoryTurn, UserProfile
from app.core.prompts import CONTEXT_GUIDANCE, build_advisor_prompt, context_guidance
from app.core.sample_payloads import SAMPLE_PROFILE
from app.core.tools import normalize_history, recent_turns, turns_from_stored, utc_timestamp


def test_context_tags_map_to_guidance():
    assert AdvisoryContext.from_tag("loan") is AdvisoryContext.LOAN
    assert AdvisoryContext.from_tag(" Insurance ") is AdvisoryContext.INSURANCE
    assert AdvisoryContext.from_tag("crypto") is AdvisoryContext.GENERAL
    assert AdvisoryContext.from_tag(None) is AdvisoryContext.GENERAL
    assert set(CONTEXT_GUIDANCE) == set(AdvisoryContext)
    assert "EMI calculations" in context_guidance(AdvisoryContext.LOAN)


def test_prompt_without_profile_or_history():
    prompt = build_advisor_prompt("What is an SIP?", AdvisoryContext.INVESTMENT, None, [])
    assert prompt.startswith("You are FinAdvisor")
    assert "CONTEXT: You are currently in the investment advisory portal." in prompt
    assert "SPECIALIZATION: Focus on investment strategies" in prompt
    assert "USER PROFILE" not in prompt
    assert "RECENT CONVERSATION CONTEXT" not in prompt
    assert prompt.endswith("User's current question: What is an SIP?")


def test_prompt_with_profile_block():
    profile = UserProfile.model_validate(SAMPLE_PROFILE)
    prompt = build_advisor_prompt("Help", AdvisoryContext.GENERAL, profile, [])
    assert "- Age: 35" in prompt
    assert "- Monthly Income: ₹100,000" in prompt
    assert "- Dependents: 2" in prompt
    assert "- Risk Tolerance: moderate" in prompt


def test_profile_missing_fields_render_not_specified():
    prompt = build_advisor_prompt("Help", AdvisoryContext.GENERAL, UserProfile(), [])
    assert "- Age: Not specified" in prompt
    assert "- Current Savings: Not specified" in prompt
    assert "- Dependents: 0" in prompt


def test_prompt_renders_recent_turns_in_order():
    turns = [
        HistoryTurn(role="user", content="one"),
        HistoryTurn(role="assistant", content="two"),
        HistoryTurn(role="user", content="three"),
        HistoryTurn(role="model", content="four"),
    ]
    prompt = build_advisor_prompt("next", AdvisoryContext.GENERAL, None, recent_turns(turns, 3))
    assert "User: one" not in prompt
    assert "Assistant: two\nUser: three\nAssistant: four" in prompt


def test_normalize_history_drops_malformed_entries():
    turns = normalize_history(
        [{"role": "user", "content": "hi"}, "oops", {"role": "user"}, {"content": "reply"}]
    )
    assert [(t.role, t.content) for t in turns] == [("user", "hi"), ("assistant", "reply")]
    assert normalize_history("not a list") == []


def test_stored_exchanges_become_chronological_turns():
    rows = [
        {"message": "second q", "response": "second a"},
        {"message": "first q", "response": "first a"},
    ]
    turns = turns_from_stored(rows)
    assert [t.content for t in turns] == ["first q", "first a", "second q", "second a"]


def test_utc_timestamp_format():
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert len(stamp) == len("2024-01-01T00:00:00.000Z")


def test_unknown_context_tag_renders_general_portal():
    prompt = build_advisor_prompt("Help", AdvisoryContext.from_tag("crypto"), None, [])
    assert "CONTEXT: You are currently in the general advisory portal." in prompt
    assert "SPECIALIZATION: Provide comprehensive financial guidance across all areas." in prompt
    assert "crypto" not in prompt


def test_zero_profile_values_render_not_specified():
    profile = UserProfile(age=0, monthly_income=0, monthly_expenses=0, current_savings=0, dependents=0)
    prompt = build_advisor_prompt("Help", AdvisoryContext.GENERAL, profile, [])
    assert "- Age: Not specified" in prompt
    assert "- Monthly Income: Not specified" in prompt
    assert "- Monthly Expenses: Not specified" in prompt
    assert "- Current Savings: Not specified" in prompt
    assert "- Dependents: 0" in prompt
