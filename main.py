"""Prospector - Two-phase lead discovery and enrichment."""

import asyncio
import streamlit as st
from functools import partial

# Force immediate stdout flushing for print statements
print = partial(print, flush=True)

from prospector.agents import build_agents
from prospector.config import Settings
from prospector.exceptions import ProspectorError
from prospector.models.pipeline_state import LogEvent, RunOutcome, Severity
from prospector.pipeline import PipelineSession
from prospector.ui.sidebar import render_sidebar
from prospector.ui.mission_control import render_mission_control
from prospector.ui.war_room import render_war_room
from prospector.ui.process_inspector import render_process_inspector


# Page configuration
st.set_page_config(
    page_title="Prospector",
    page_icon="🎯",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for better styling
st.markdown("""
<style>
    .stTabs [data-baseweb="tab-list"] {
        gap: 24px;
    }
    .stTabs [data-baseweb="tab"] {
        height: 50px;
        padding-left: 20px;
        padding-right: 20px;
    }
    .main .block-container {
        padding-top: 2rem;
    }
</style>
""", unsafe_allow_html=True)


def initialize_session_state():
    """Initialize session state variables."""
    defaults = {
        "pipeline_session": None,
        "agent_mode": None,
        "campaign_params": None,
        "enrich_ids": None,
        "last_outcome": None,
        "reset_requested": False,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def get_session(settings: Settings) -> PipelineSession:
    """Return the session for this browser tab, swapping agents when the mode changes."""
    session = st.session_state["pipeline_session"]
    if session is None:
        discovery, enrichment = build_agents(settings)
        session = PipelineSession(discovery, enrichment, settings=settings)
        st.session_state["pipeline_session"] = session
        st.session_state["agent_mode"] = settings.use_mock
    elif st.session_state["agent_mode"] != settings.use_mock:
        discovery, enrichment = build_agents(settings)
        session.reconfigure(settings, discovery, enrichment)
        st.session_state["agent_mode"] = settings.use_mock
    else:
        session.reconfigure(settings)
    return session


def request_campaign(params: dict):
    st.session_state["campaign_params"] = params
    st.rerun()


def request_reset():
    st.session_state["reset_requested"] = True


def request_enrichment(lead_ids):
    st.session_state["enrich_ids"] = list(lead_ids)
    st.rerun()


async def consume_stream(stream, status) -> RunOutcome:
    """Drain a discovery stream, echoing each event into the status panel."""
    outcome = None
    async for item in stream:
        if isinstance(item, LogEvent):
            if item.severity == Severity.ERROR:
                status.error(item.message)
            elif item.severity == Severity.WARNING:
                status.warning(item.message)
            else:
                status.write(item.message)
        elif isinstance(item, RunOutcome):
            outcome = item
    return outcome


def run_campaign(session: PipelineSession, params: dict):
    """Execute the discovery phase for one campaign."""
    # A finished run must be cleared before the next campaign can claim the session
    if session.phase.is_terminal:
        session.reset()

    print(f"\n{'='*60}")
    print(f"STARTING CAMPAIGN - Mode: {'MOCK' if session.settings.use_mock else 'LIVE'}")
    print(f"{'='*60}")

    try:
        stream = session.start(params)
    except ProspectorError as e:
        print(f"ERROR: {e}")
        st.error(str(e))
        return

    with st.status("Running discovery...", expanded=True) as status:
        outcome = asyncio.run(consume_stream(stream, status))
        if outcome is not None and outcome.succeeded:
            status.update(label=f"Discovery complete: {outcome.lead_count} leads", state="complete")
        else:
            status.update(label="Discovery failed", state="error")

    st.session_state["last_outcome"] = outcome
    print(f"CAMPAIGN FINISHED - {outcome}")


def run_enrichment(session: PipelineSession, lead_ids):
    """Execute the enrichment phase for the selected leads."""
    print(f"Enriching {len(lead_ids)} leads...")
    try:
        with st.spinner(f"Enriching {len(lead_ids)} lead(s)..."):
            outcomes = asyncio.run(session.enrich_many(lead_ids))
    except ProspectorError as e:
        print(f"ERROR: {e}")
        st.error(str(e))
        return

    summary = {}
    for outcome in outcomes:
        summary[outcome.value] = summary.get(outcome.value, 0) + 1
    st.toast(", ".join(f"{count} {name}" for name, count in summary.items()), icon="🔍")


def main():
    """Main application entry point."""
    initialize_session_state()

    st.title("🎯 Prospector")
    st.caption("Two-phase lead discovery and enrichment")

    settings = render_sidebar(on_reset=request_reset)
    session = get_session(settings)

    if st.session_state.get("reset_requested"):
        st.session_state["reset_requested"] = False
        session.reset()
        st.session_state["last_outcome"] = None

    params = st.session_state.get("campaign_params")
    if params:
        st.session_state["campaign_params"] = None
        run_campaign(session, params)

    lead_ids = st.session_state.get("enrich_ids")
    if lead_ids:
        st.session_state["enrich_ids"] = None
        run_enrichment(session, lead_ids)

    tab1, tab2, tab3 = st.tabs(["Mission Control", "War Room", "Process Inspector"])

    with tab1:
        render_mission_control(on_start=request_campaign, disabled=session.phase.is_active)

    with tab2:
        render_war_room(session, on_enrich=request_enrichment)

    with tab3:
        render_process_inspector(session)


if __name__ == "__main__":
    main()
