from __future__ import annotations

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from acr.core.config import Settings, configure_logging, load_settings
from acr.core.errors import ConfigurationError
from acr.core.provider import GeminiClient
from acr.core.report import REPORT_FILENAME, REPORT_MIME
from acr.core.schemas import ALL, FILTER_OPTIONS, SEVERITIES
from acr.core.session import ReviewSession, ReviewStatus
from acr.core.view import display_severity
from acr.utils.fs import LANGUAGE_BY_EXTENSION, SUPPORTED_LANGUAGES, is_probably_text

SEVERITY_CONFIG = {
    "Critical": ("🔴", "Critical Issue"),
    "Major": ("🟠", "Major Issue"),
    "Minor": ("🟡", "Minor Issue"),
    "Info": ("🔵", "Information"),
}


def inject_css():
    st.markdown(
        """
        <style>
        .stApp {
            background: #F7F9FC;
        }

        .block-container {
            padding-top: 2rem;
            padding-bottom: 2rem;
            max-width: 1300px;
        }

        section[data-testid="stSidebar"] {
            background: #FFFFFF !important;
            border-right: 1px solid #E5E7EB;
        }

        h1, h2, h3 {
            color: #111827;
        }

        section[data-testid="stFileUploaderDropzone"] {
            border: 2px dashed #CBD5E1;
            border-radius: 12px;
            background: #FFFFFF;
        }

        .stButton > button {
            border-radius: 10px;
            padding: 0.55rem 1rem;
            border: 1px solid #CBD5E1;
            background: #EEF2FF;
            color: #1E3A8A;
            font-weight: 600;
        }
        .stButton > button:hover {
            background: #E0E7FF;
            border-color: #A5B4FC;
        }

        textarea {
            font-family: "Fira Code", monospace !important;
        }

        /* Line badge on finding cards */
        .acr-line {
            display: inline-block;
            padding: 2px 8px;
            border-radius: 6px;
            background: #F1F5F9;
            border: 1px solid #CBD5E1;
            color: #0F172A;
            font-family: monospace;
            font-size: 0.85rem;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


@st.cache_resource
def get_client(_settings: Settings) -> GeminiClient:
    # one client per server process
    return GeminiClient(_settings)


def get_session(settings: Settings) -> ReviewSession:
    if "session" not in st.session_state:
        st.session_state["session"] = ReviewSession(settings)
    return st.session_state["session"]


def render_finding(session: ReviewSession, finding) -> None:
    icon, title = SEVERITY_CONFIG[display_severity(finding.severity)]
    strike = "~~" if finding.resolved else ""

    with st.container(border=True):
        head_left, head_right = st.columns([4, 1])
        with head_left:
            st.markdown(f"#### {icon} {strike}{title}{strike}")
            st.markdown(f'<span class="acr-line">Line: {finding.location}</span>', unsafe_allow_html=True)
        with head_right:
            done = st.checkbox(
                "Done",
                value=finding.resolved,
                key=f"done-{session.generation}-{finding.id}",
                help="Mark as not done" if finding.resolved else "Mark as done",
            )
            if done != finding.resolved:
                session.toggle_resolved(finding.id)
                st.rerun()

        st.markdown(f"{strike}{finding.description}{strike}")
        st.markdown("**Suggestion:**")
        st.code(finding.suggestion, language=None)


def render_results(session: ReviewSession) -> None:
    if session.status is ReviewStatus.SUBMITTING:
        st.info("AI is analyzing your code...")
        return

    if session.status is ReviewStatus.FAILED:
        st.error(session.error_message)
        return

    if session.status is not ReviewStatus.READY:
        st.info("Awaiting your code. Your code review results will appear here.")
        return

    if not session.findings:
        st.success("No issues found! The AI reviewer didn't find any issues in your code. Great job!")
        return

    counts = session.counts()
    options = [o for o in FILTER_OPTIONS if o == ALL or counts[o] > 0]
    current = session.severity_filter if session.severity_filter in options else ALL
    choice = st.radio(
        "Filter",
        options=options,
        index=options.index(current),
        format_func=lambda o: f"{o} ({counts[o]})",
        horizontal=True,
    )
    session.set_filter(choice)

    summary = pd.DataFrame([{"Severity": s, "Count": counts[s]} for s in SEVERITIES if counts[s] > 0])
    st.dataframe(summary, use_container_width=True, hide_index=True)

    visible = session.visible_findings()
    if not visible:
        st.warning("No matching issues. Change the filter to see issues of a different severity.")
    for finding in visible:
        render_finding(session, finding)

    st.download_button(
        label="Download Markdown report",
        data=session.report().encode("utf-8"),
        file_name=REPORT_FILENAME,
        mime=REPORT_MIME,
        use_container_width=True,
    )


st.set_page_config(page_title="AI Code Reviewer", layout="wide")
inject_css()

load_dotenv()
try:
    settings = load_settings()
except ConfigurationError as e:
    st.error(str(e))
    st.stop()
configure_logging(settings.log_level)

client = get_client(settings)
session = get_session(settings)

st.title("AI Code Reviewer")
st.caption("Paste or upload a snippet. Get structured findings you can filter, tick off and export.")

with st.sidebar:
    st.header("Settings")
    session.language = st.selectbox(
        "Language",
        options=SUPPORTED_LANGUAGES,
        index=SUPPORTED_LANGUAGES.index(session.language) if session.language in SUPPORTED_LANGUAGES else 0,
    )
    session.structured = st.toggle(
        "Data-oriented review",
        value=session.structured,
        help="Focus on data layout, cache locality and data flow rather than class hierarchies.",
    )
    st.divider()
    st.caption(f"Model: {settings.model}   Temperature: {settings.temperature}")

col_input, col_output = st.columns(2, gap="large")

with col_input:
    st.subheader("Your Code")
    uploaded = st.file_uploader(
        "Upload a file",
        type=[ext.lstrip(".") for ext in LANGUAGE_BY_EXTENSION],
        accept_multiple_files=False,
    )
    if uploaded is not None:
        upload_id = getattr(uploaded, "file_id", uploaded.name)
        if st.session_state.get("upload_id") != upload_id and is_probably_text(uploaded.name):
            st.session_state["upload_id"] = upload_id
            session.load_upload(uploaded.name, uploaded.getvalue())
            st.rerun()

    session.code = st.text_area(
        "Code",
        value=session.code,
        height=480,
        placeholder=f"Paste your {session.language} code here, or upload a file...",
        label_visibility="collapsed",
    )

    c_run, c_clear = st.columns([3, 1])
    with c_run:
        run_review = st.button(
            "Analyzing..." if session.is_loading else "Review Code",
            disabled=not session.can_submit,
            use_container_width=True,
        )
    with c_clear:
        if st.button("Clear", use_container_width=True):
            session.clear()
            st.rerun()

    if run_review:
        with st.spinner("AI is analyzing your code..."):
            session.submit(client)

with col_output:
    st.subheader("Review Feedback")
    render_results(session)

st.caption("Powered by Gemini. For educational and demonstration purposes only.")
