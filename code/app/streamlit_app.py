# streamlit_app.py
import os
import sys
from typing import Any, Dict, List

import requests
import streamlit as st
from dotenv import load_dotenv

# Ensure the `code/` directory is on sys.path so `app` and `finance` import when Streamlit runs this file.
CODE_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if CODE_ROOT not in sys.path:
    sys.path.insert(0, CODE_ROOT)

from app.core.models import AdvisoryContext
from app.core.pipeline import FALLBACK_RESPONSE
from app.core.sample_payloads import SAMPLE_HEALTH_FORM, SAMPLE_LIFE_FORM, SAMPLE_VEHICLE_FORM
from app.core.tools import format_currency, format_multiplier, format_percent
from finance.coverage import calculate

load_dotenv()
ADVISOR_API_URL = os.getenv("ADVISOR_API_URL", "http://127.0.0.1:8000")
CHAT_TIMEOUT = float(os.getenv("ADVISOR_CHAT_TIMEOUT", "60"))

CITY_OPTIONS = {"": "Select city type", "metro": "Metro City", "non-metro": "Non-Metro City"}
PRE_EXISTING_OPTIONS = {"": "Any pre-existing conditions?", "yes": "Yes", "no": "No"}
ROOM_OPTIONS = {
    "": "Select room preference",
    "general": "General Ward",
    "semi-private": "Semi-Private Room",
    "private": "Private Room",
}
DEDUCTIBLE_OPTIONS = {"0": "No Deductible", "2500": "₹2,500", "5000": "₹5,000", "7500": "₹7,500", "15000": "₹15,000"}

st.set_page_config(page_title="FinAdvisor", layout="wide")
st.title("FinAdvisor")

if "coverage_result" not in st.session_state:
    st.session_state.coverage_result = None
if "messages" not in st.session_state:
    st.session_state.messages: List[Dict[str, Any]] = []

with st.sidebar:
    st.header("Session")
    access_token = st.text_input("Access token (optional)", type="password")
    st.caption(f"Advisor API: {ADVISOR_API_URL}")


def _select(label: str, options: Dict[str, str], key: str) -> str:
    return st.selectbox(label, list(options), format_func=lambda k: options[k], key=key)


def _run(category: str, form: Dict[str, Any]) -> None:
    # A failed validation leaves the previous result on screen.
    result = calculate(category, form)
    if result is not None:
        st.session_state.coverage_result = result


def render_life_form() -> None:
    with st.form("life_form"):
        col1, col2 = st.columns(2)
        form = {
            "age": col1.text_input("Age", placeholder=SAMPLE_LIFE_FORM["age"]),
            "income": col2.text_input("Annual Income (₹)", placeholder=SAMPLE_LIFE_FORM["income"]),
            "dependents": col1.text_input("Number of Dependents", placeholder=SAMPLE_LIFE_FORM["dependents"]),
            "loans": col2.text_input("Outstanding Loans (₹)", placeholder=SAMPLE_LIFE_FORM["loans"]),
            "expenses": col1.text_input("Annual Expenses (₹)", placeholder=SAMPLE_LIFE_FORM["expenses"]),
            "goals": col2.text_input("Future Goals (₹)", placeholder=SAMPLE_LIFE_FORM["goals"]),
        }
        if st.form_submit_button("Calculate Life Coverage", use_container_width=True):
            _run("life", form)


def render_health_form() -> None:
    with st.form("health_form"):
        col1, col2 = st.columns(2)
        form = {
            "age": col1.text_input("Age", placeholder="35", key="health_age"),
            "family_size": col2.text_input("Family Size", placeholder="4"),
            "city": _select("City Type", CITY_OPTIONS, "health_city"),
            "pre_existing": _select("Pre-existing Conditions", PRE_EXISTING_OPTIONS, "health_pre_existing"),
            "room_type": _select("Preferred Room Type", ROOM_OPTIONS, "health_room"),
        }
        if st.form_submit_button("Calculate Health Coverage", use_container_width=True):
            _run("health", form)


def render_vehicle_form() -> None:
    with st.form("vehicle_form"):
        col1, col2 = st.columns(2)
        form = {
            "vehicle_value": col1.text_input("Vehicle Value (₹)", placeholder=SAMPLE_VEHICLE_FORM["vehicle_value"]),
            "vehicle_age": col2.text_input("Vehicle Age (Years)", placeholder=SAMPLE_VEHICLE_FORM["vehicle_age"]),
            "city": _select("City Type", CITY_OPTIONS, "vehicle_city"),
            "previous_claims": col1.text_input("Previous Claims (Last 3 Years)", placeholder="0"),
            "voluntary_deductible": _select("Voluntary Deductible (₹)", DEDUCTIBLE_OPTIONS, "vehicle_deductible"),
        }
        if st.form_submit_button("Calculate Vehicle Premium", use_container_width=True):
            _run("vehicle", form)


def render_results() -> None:
    result = st.session_state.coverage_result
    if result is None:
        return
    st.subheader("Calculation Results")
    st.caption("Demo Calculation")
    if result.type == "life":
        col1, col2 = st.columns(2)
        col1.metric("Recommended Coverage", format_currency(result.recommended_coverage))
        col2.metric("Estimated Annual Premium", format_currency(round(result.estimated_premium)))
        st.markdown("**Calculation Methods**")
        m1, m2, m3 = st.columns(3)
        m1.metric("Human Life Value", format_currency(result.methods["human_life_value"]))
        m2.metric("Needs Analysis", format_currency(result.methods["needs_analysis"]))
        m3.metric("Income Replacement", format_currency(result.methods["income_replacement"]))
    elif result.type == "health":
        col1, col2 = st.columns(2)
        col1.metric("Recommended Coverage", format_currency(result.recommended_coverage))
        col2.metric("Estimated Annual Premium", format_currency(round(result.estimated_premium)))
        st.markdown("**Coverage Factors**")
        f1, f2, f3, f4 = st.columns(4)
        f1.metric("Age Factor", format_multiplier(result.factors["age_multiplier"]))
        f2.metric("Family Factor", format_multiplier(result.factors["family_multiplier"]))
        f3.metric("City Factor", format_multiplier(result.factors["city_multiplier"]))
        f4.metric("Health Factor", format_multiplier(result.factors["pre_existing_multiplier"]))
    else:
        col1, col2 = st.columns(2)
        col1.metric("Insured Declared Value (IDV)", format_currency(round(result.idv)))
        col2.metric("Estimated Annual Premium", format_currency(round(result.estimated_premium)))
        st.markdown("**Premium Factors**")
        f1, f2, f3, f4 = st.columns(4)
        f1.metric("Depreciation", format_percent(result.factors["depreciation_rate"]))
        f2.metric("Age Factor", format_multiplier(result.factors["age_multiplier"]))
        f3.metric("Claims Factor", f"{result.factors['claims_multiplier']:.1f}x")
        f4.metric("Deductible Discount", format_percent(result.factors["deductible_discount"]))


def ask_advisor(message: str, context: str, history: List[Dict[str, Any]]) -> str:
    headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
    try:
        resp = requests.post(
            f"{ADVISOR_API_URL.rstrip('/')}/api/chat",
            json={"message": message, "context": context, "history": history},
            headers=headers,
            timeout=CHAT_TIMEOUT,
        )
        resp.raise_for_status()
        return resp.json().get("response") or FALLBACK_RESPONSE
    except (requests.RequestException, ValueError):
        return FALLBACK_RESPONSE


calculator_tab, chat_tab = st.tabs(["Coverage Calculator", "Advisor Chat"])

with calculator_tab:
    st.caption("Calculate optimal insurance coverage for different insurance types")
    life_tab, health_tab, vehicle_tab = st.tabs(["Life Insurance", "Health Insurance", "Vehicle Insurance"])
    with life_tab:
        render_life_form()
    with health_tab:
        render_health_form()
    with vehicle_tab:
        render_vehicle_form()
    render_results()

with chat_tab:
    context = st.selectbox(
        "Advisory portal",
        [c.value for c in AdvisoryContext],
        index=[c.value for c in AdvisoryContext].index(AdvisoryContext.GENERAL.value),
        format_func=str.capitalize,
    )
    for msg in st.session_state.messages:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])
    user_input = st.chat_input("Ask about your finances")
    if user_input and user_input.strip():
        prior = list(st.session_state.messages)
        st.session_state.messages.append({"role": "user", "content": user_input})
        with st.chat_message("user"):
            st.markdown(user_input)
        with st.spinner("Thinking..."):
            reply = ask_advisor(user_input, context, prior)
        st.session_state.messages.append({"role": "assistant", "content": reply})
        with st.chat_message("assistant"):
            st.markdown(reply)
