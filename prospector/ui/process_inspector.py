"""Process Inspector tab - Glass Box transparency for the pipeline."""

import streamlit as st
import pandas as pd
from typing import List

from ..models.pipeline_state import LogEvent, PipelineRun, RunPhase, Severity
from ..pipeline.session import PipelineSession

SEVERITY_ICONS = {
    Severity.INFO: "ℹ️",
    Severity.SUCCESS: "✅",
    Severity.WARNING: "⚠️",
    Severity.ERROR: "❌",
}


def render_process_inspector(session: PipelineSession):
    """Render the Process Inspector tab with full pipeline transparency."""
    st.header("Process Inspector")
    st.caption("The Glass Box - Complete visibility into the discovery and enrichment pipeline")

    run = session.run
    events = session.events()

    if run.phase == RunPhase.IDLE and not events:
        st.info("No campaign has been executed yet. Start one in Mission Control to see process details.")
        return

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Run ID", run.run_id[:8] + "...")
    with col2:
        st.metric("Phase", run.phase.value.title())
    with col3:
        st.metric("Events", len(events))
    with col4:
        duration = run.duration_seconds
        st.metric("Duration", f"{duration:.1f}s" if duration else "N/A")

    st.divider()

    tab1, tab2, tab3 = st.tabs(["Event Log", "Run Timeline", "Errors"])

    with tab1:
        render_event_log(events)

    with tab2:
        render_run_timeline(run)

    with tab3:
        render_errors(session.log.errors())


def render_event_log(events: List[LogEvent]):
    """Display the full pipeline narrative, oldest first."""
    st.subheader("Event Log")

    if not events:
        st.info("No events recorded yet.")
        return

    df = pd.DataFrame([
        {
            "Time": event.timestamp.strftime("%H:%M:%S"),
            "": SEVERITY_ICONS[event.severity],
            "Message": event.message,
        }
        for event in events
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)


def render_run_timeline(run: PipelineRun):
    """Timeline view of run phases."""
    st.subheader("Run Timeline")
    st.caption("Phase-by-phase execution history")

    if not run.stage_timestamps:
        st.info("No phase data recorded yet.")
        return

    for phase, reached_at in run.stage_timestamps.items():
        col1, col2 = st.columns([3, 1])
        with col1:
            icon = "❌" if phase == RunPhase.FAILED.value else "✅"
            st.markdown(f"**{icon} {phase.title()}**")
        with col2:
            st.caption(reached_at.strftime("%H:%M:%S"))

    if run.request is not None:
        with st.expander("View search request"):
            st.json(run.request.model_dump())


def render_errors(errors: List[LogEvent]):
    """Display any errors that occurred during the pipeline."""
    st.subheader("Errors")

    if not errors:
        st.success("No errors recorded during this campaign.")
        return

    for event in errors:
        st.error(f"{event.timestamp.strftime('%H:%M:%S')}  {event.message}")
