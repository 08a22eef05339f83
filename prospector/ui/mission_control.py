"""Mission Control tab - Campaign mode and search parameters."""

import streamlit as st
from typing import Callable, Optional

from ..models.leads import INDIVIDUAL, ORGANIZATION
from ..models.search import COUNT_OPTIONS, LANGUAGE_OPTIONS


def render_mission_control(on_start: Optional[Callable[[dict], None]] = None, disabled: bool = False) -> dict:
    """
    Render the Mission Control tab with the campaign form.

    Args:
        on_start: Callback receiving the raw request dict when the campaign is launched
        disabled: Grey out the launch button (a run is already active)

    Returns:
        dict with all search parameters
    """
    st.header("Mission Control")

    mode_label = st.radio(
        "Campaign Type",
        options=["Find Companies (B2B)", "Find People (B2C)"],
        horizontal=True,
        key="campaign_mode_radio",
        help="Company search or social listening for individual buyers"
    )
    mode = INDIVIDUAL if mode_label.startswith("Find People") else ORGANIZATION

    st.divider()

    col1, col2 = st.columns(2)

    with col1:
        if mode == ORGANIZATION:
            subject = st.text_input(
                "Target Industry",
                value=st.session_state.get("subject", ""),
                placeholder="e.g., Logistics SaaS",
                key="subject_input"
            )
        else:
            subject = st.text_input(
                "Your Business / Product",
                value=st.session_state.get("subject", ""),
                placeholder="e.g., Dog grooming salon",
                key="subject_input"
            )
        st.session_state["subject"] = subject

        location = st.text_input(
            "Location / Target Market",
            value=st.session_state.get("location", ""),
            placeholder="e.g., Berlin, Germany",
            key="location_input"
        )
        st.session_state["location"] = location

    with col2:
        count = st.select_slider(
            "Lead Count",
            options=COUNT_OPTIONS,
            value=st.session_state.get("count", 20),
            key="count_slider",
            help="Number of leads to discover"
        )
        st.session_state["count"] = count

        language = st.selectbox(
            "Output Language",
            options=LANGUAGE_OPTIONS,
            key="language_select"
        )

    params = {"mode": mode, "subject": subject, "location": location, "count": count, "language": language}

    if mode == ORGANIZATION:
        params["product_context"] = st.text_area(
            "What are you selling? (optional)",
            value=st.session_state.get("product_context", ""),
            height=100,
            key="product_context_input",
            help="Helps pick the right decision maker and tailors enrichment pitches"
        )
        st.session_state["product_context"] = params["product_context"]
    else:
        col1, col2 = st.columns(2)
        with col1:
            params["target_role"] = st.text_input(
                "Target Persona (optional)",
                placeholder="e.g., New parents",
                key="target_role_input"
            )
        with col2:
            params["keywords"] = st.text_input(
                "Specific Criteria (optional)",
                placeholder="e.g., complaining about wait times",
                key="keywords_input"
            )

    st.divider()

    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        start_clicked = st.button(
            "START CAMPAIGN",
            type="primary",
            use_container_width=True,
            disabled=disabled,
            key="start_campaign_button"
        )

    if start_clicked and on_start:
        on_start(params)

    return params
