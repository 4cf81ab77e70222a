"""
Streamlit playground for the date resolver.

Run with:
    streamlit run app.py
"""
from zoneinfo import ZoneInfo

import streamlit as st

import config
from date_phrase import DateparserPhraseParser
from date_resolver import resolve_human_datetime
from errors import DateResolutionError
from timezone_utils import format_instant, system_clock

# ---------------------------------------------------------------------------
# Page configuration
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Human Date to ISO",
    page_icon="📅",
    layout="centered",
)

if "parser" not in st.session_state:
    st.session_state.parser = DateparserPhraseParser()

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

with st.sidebar:
    st.title("📅 Human Date to ISO")
    st.markdown(
        "Turns a natural language **date** and a **time** into an ISO 8601 "
        "timestamp in the timezone you choose."
    )
    st.divider()

    st.subheader("Phrases that work")
    st.markdown(
        "- tomorrow, today, yesterday\n"
        "- friday, next monday, next week monday, last friday\n"
        "- friday at 3pm, tomorrow at 9am\n"
        "- in 2 hours, in 2 weeks, next month\n"
        "- september 15th, 2025-09-15\n"
    )
    st.subheader("Rewrite these first")
    st.markdown(
        "- \"15th of next month\" → \"september 15th\"\n"
        "- \"last day of month\" → \"august 31st\"\n"
        "- \"christmas\" → \"december 25th\"\n"
        "- \"afternoon\" → \"2pm\"\n"
    )

# ---------------------------------------------------------------------------
# Main form
# ---------------------------------------------------------------------------

st.header("Convert")

with st.form("convert"):
    human_date = st.text_input("Date", value="next week monday")
    human_time = st.text_input("Time", value="2pm")
    time_zone = st.text_input("Timezone", value=config.DEFAULT_TIME_ZONE)
    client_now = st.text_input("Current time (ISO 8601, blank for now)", value="")
    submitted = st.form_submit_button("Convert", use_container_width=True)

if submitted:
    if not client_now.strip():
        client_now = format_instant(system_clock(ZoneInfo("UTC")))
    try:
        result = resolve_human_datetime(
            human_date, human_time, time_zone, client_now, parser=st.session_state.parser
        )
    except DateResolutionError as exc:
        st.error(f"**{exc.error}** – {exc.message}")
    except Exception as exc:  # noqa: BLE001
        st.error(f"An error occurred: {exc}")
    else:
        st.success(result.converted_date)
        st.json(result.to_dict())
