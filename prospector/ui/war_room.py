"""War Room tab - Results display, enrichment and export."""

import streamlit as st
import pandas as pd
from typing import Callable, List, Optional

from ..models.leads import EnrichmentStatus, IndividualLead, LeadRecord, OrganizationLead
from ..pipeline.session import PipelineSession
from ..services.export_service import generate_csv

STATUS_BADGES = {
    EnrichmentStatus.NEW: "⚪ New",
    EnrichmentStatus.ENRICHING: "🔄 Enriching",
    EnrichmentStatus.COMPLETE: "✅ Complete",
    EnrichmentStatus.FAILED: "❌ Failed",
}


def get_score_color(score: int) -> str:
    """Return color based on score value."""
    if score >= 85:
        return "🟢"
    elif score >= 70:
        return "🟡"
    else:
        return "🔴"


def render_metrics(session: PipelineSession):
    """Render the progress summary for the active run."""
    snapshot = session.progress()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Leads Found", f"{snapshot.total}/{snapshot.target_count}")
    with col2:
        st.metric("With Contact", snapshot.records_with_contact)
    with col3:
        st.metric("Enriched", f"{snapshot.enrichment_rate}%")
    with col4:
        st.metric("Phase", session.phase.value.title())

    st.progress(snapshot.progress_percent / 100, text=f"Discovery progress: {snapshot.progress_percent}%")


def _table_row(lead: LeadRecord) -> dict:
    contact = lead.contacts[0] if lead.contacts else None
    return {
        "Name": lead.name,
        "Type": lead.classification,
        "Location": lead.locale,
        "Score": f"{get_score_color(lead.quality_score)} {lead.quality_score}",
        "Contact": contact.name if contact else (lead.general_contact or ""),
        "Status": STATUS_BADGES[lead.enrichment_status],
    }


def render_war_room(
    session: PipelineSession,
    on_enrich: Optional[Callable[[List[str]], None]] = None
):
    """
    Render the War Room tab with results table and detail views.

    Args:
        session: The active pipeline session
        on_enrich: Callback receiving the lead ids the user asked to enrich
    """
    st.header("War Room")

    leads = session.leads()

    if not leads:
        st.info("No leads yet. Go to Mission Control and start a campaign!")

        with st.expander("Quick Tips"):
            st.markdown("""
            1. **Configure your DeepSeek key** in the sidebar (or use Mock Mode for testing)
            2. **Pick a campaign type**: companies (B2B) or people (B2C)
            3. **Describe the target** and its location in Mission Control
            4. **Click START CAMPAIGN**, then enrich the leads you like here
            """)
        return

    render_metrics(session)

    col1, col2 = st.columns([3, 1])
    with col2:
        st.download_button(
            label="📥 Download CSV",
            data=generate_csv(leads),
            file_name="prospector_leads.csv",
            mime="text/csv",
            type="secondary"
        )

    st.divider()

    df = pd.DataFrame([_table_row(lead) for lead in leads])
    st.dataframe(
        df,
        use_container_width=True,
        hide_index=True,
        column_config={
            "Name": st.column_config.TextColumn("Name", width="medium"),
            "Type": st.column_config.TextColumn("Industry / Sentiment", width="medium"),
            "Score": st.column_config.TextColumn("Score", width="small"),
            "Status": st.column_config.TextColumn("Enrichment", width="small"),
        }
    )

    # Bulk enrichment
    pending = [lead for lead in leads if lead.enrichment_status in (EnrichmentStatus.NEW, EnrichmentStatus.FAILED)]
    if pending and on_enrich:
        labels = {lead.id: f"{lead.name} ({lead.enrichment_status.value})" for lead in pending}
        selected = st.multiselect(
            "Select leads to enrich",
            options=list(labels),
            format_func=labels.get,
            key="enrich_select"
        )
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Enrich Selected", disabled=not selected, use_container_width=True):
                on_enrich(selected)
        with col2:
            if st.button(f"Enrich All ({len(pending)})", use_container_width=True):
                on_enrich([lead.id for lead in pending])

    st.divider()

    st.subheader("Lead Details")
    for i, lead in enumerate(leads):
        with st.expander(
            f"{get_score_color(lead.quality_score)} {lead.name} — Score: {lead.quality_score} — "
            f"{STATUS_BADGES[lead.enrichment_status]}",
            expanded=False
        ):
            render_lead_detail(lead, i, on_enrich)


def render_lead_detail(lead: LeadRecord, index: int, on_enrich: Optional[Callable[[List[str]], None]] = None):
    """Render detailed view for a single lead."""

    col1, col2 = st.columns(2)

    with col1:
        if isinstance(lead, IndividualLead):
            st.markdown("**Post Info**")
            st.write(f"**Platform:** {lead.name}")
            st.write(f"**Handle:** {lead.handle or 'Unknown'}")
            if lead.posted_at:
                st.write(f"**Posted:** {lead.posted_at}")
            st.write(f"**Sentiment:** {lead.classification or 'N/A'}")
        else:
            st.markdown("**Company Info**")
            st.write(f"**Name:** {lead.name}")
            st.write(f"**Industry:** {lead.classification or 'N/A'}")
            if isinstance(lead, OrganizationLead):
                st.write(f"**Employees:** {lead.employee_size or 'N/A'}")
                st.write(f"**Phone:** {lead.phone_number or 'N/A'}")
                if lead.linkedin_url:
                    st.write(f"**LinkedIn:** [View Page]({lead.linkedin_url})")
        if lead.source_url:
            st.write(f"**Link:** [{lead.source_url}]({lead.source_url})")
        st.write(f"**Location:** {lead.locale or 'N/A'}")
        st.progress(lead.quality_score / 100, text=f"Quality Score: {lead.quality_score}/100")

    with col2:
        st.markdown("**Contacts**")
        if lead.general_contact:
            st.write(f"**General:** {lead.general_contact}")
        for contact in lead.contacts:
            title = f" — {contact.title}" if contact.title else ""
            email = f" ({contact.email})" if contact.email else ""
            st.write(f"{contact.name}{title}{email}")
        if not lead.contacts and not lead.general_contact:
            st.caption("No contact details found")

        st.markdown("**Summary**")
        st.write(lead.summary or "N/A")

    st.divider()

    profile = lead.enriched_data
    if profile is not None:
        st.markdown("**Strategic Analysis**")
        tab1, tab2, tab3 = st.tabs(["🔍 Insights", "🎯 Pitch", "✉️ Outreach"])
        with tab1:
            for insight in profile.key_insights:
                st.write(f"- {insight}")
            if profile.products_services:
                st.write(f"**Products / Services:** {', '.join(profile.products_services)}")
            if profile.technologies:
                st.write(f"**Technologies:** {', '.join(profile.technologies)}")
            if profile.competitive_advantage:
                st.write(f"**Competitive Advantage:** {profile.competitive_advantage}")
            if profile.target_market:
                st.write(f"**Target Market:** {profile.target_market}")
        with tab2:
            st.write(profile.pitch_strategy or "No pitch strategy generated")
        with tab3:
            st.text_area(
                "Outreach Message",
                value=profile.outreach_message,
                height=200,
                key=f"outreach_{index}"
            )
    elif lead.enrichment_status == EnrichmentStatus.COMPLETE:
        st.warning("Enrichment finished without usable insights for this lead.")
    elif lead.enrichment_status == EnrichmentStatus.ENRICHING:
        st.info("Enrichment in progress...")
    elif on_enrich:
        label = "Retry Enrichment" if lead.enrichment_status == EnrichmentStatus.FAILED else "Enrich Lead"
        if st.button(label, key=f"enrich_{index}"):
            on_enrich([lead.id])
