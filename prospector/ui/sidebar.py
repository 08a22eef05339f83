"""Sidebar: edits the run Settings and offers a session reset."""

import streamlit as st

from ..config import Settings

CREDENTIAL_FIELDS = [
    ("deepseek_api_key", "DeepSeek API Key"),
    ("tavily_api_key", "Tavily API Key"),
]

MODEL_FIELDS = [
    ("reasoning_model", "Enrichment Model"),
    ("drafting_model", "Discovery Model"),
]

MODEL_OPTIONS = ["deepseek-reasoner", "deepseek-chat"]

MAX_PARALLEL = 8


def _help(field: str) -> str:
    return Settings.model_fields[field].description or ""


def _model_select(field: str, label: str, current: str) -> str:
    options = MODEL_OPTIONS if current in MODEL_OPTIONS else [current] + MODEL_OPTIONS
    return st.selectbox(
        label,
        options=options,
        index=options.index(current),
        key=f"{field}_select",
        help=_help(field),
    )


def render_sidebar(on_reset=None) -> Settings:
    """
    Render the configuration sidebar.

    Widgets start from ``Settings.from_env`` (Streamlit secrets, then .env)
    and the edited values come back as a new Settings.

    Args:
        on_reset: Callback invoked when the user asks for a fresh session
    """
    base = Settings.from_env(secrets=st.secrets)
    edits = {}

    with st.sidebar:
        st.header("System Config")

        st.subheader("Credentials")
        for field, label in CREDENTIAL_FIELDS:
            edits[field] = st.text_input(
                label,
                type="password",
                value=getattr(base, field),
                key=f"{field}_input",
                help=_help(field),
            )

        st.divider()

        st.subheader("Models")
        for field, label in MODEL_FIELDS:
            edits[field] = _model_select(field, label, getattr(base, field))

        edits["max_concurrent_enrichments"] = st.slider(
            "Parallel Enrichments",
            min_value=1,
            max_value=MAX_PARALLEL,
            value=min(base.max_concurrent_enrichments, MAX_PARALLEL),
            key="max_concurrent_enrichments_slider",
            help=_help("max_concurrent_enrichments"),
        )

        st.divider()

        # Without a key there is nothing live to call, so start in mock mode
        edits["use_mock"] = st.toggle(
            "Use Mock Data",
            value=base.use_mock or not base.deepseek_api_key,
            key="use_mock_toggle",
            help=_help("use_mock"),
        )

        settings = base.model_copy(update=edits)
        if settings.use_mock:
            st.info("Mock mode: campaigns use sample leads and canned profiles")
        elif settings.credential is None:
            st.warning("Enter a DeepSeek API key to run live campaigns")

        st.divider()

        if st.button("New Campaign", type="secondary", use_container_width=True):
            if on_reset:
                on_reset()
            st.rerun()

    return settings
