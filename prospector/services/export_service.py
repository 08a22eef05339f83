"""Tabular export of a lead store snapshot."""

from typing import Dict, Iterable, List

import pandas as pd

from ..models.leads import IndividualLead, LeadRecord, OrganizationLead


def _organization_row(lead: OrganizationLead) -> Dict:
    dm = lead.contacts[0] if lead.contacts else None
    return {
        "Company Name": lead.name,
        "Website": lead.source_url,
        "Industry": lead.classification,
        "Country": lead.locale,
        "Summary": lead.summary,
        "General Email": lead.general_contact or "",
        "Phone": lead.phone_number or "",
        "Employee Size": lead.employee_size or "",
        "LinkedIn": lead.linkedin_url or "",
        "Quality Score": lead.quality_score,
        "Decision Maker Name": dm.name if dm else "",
        "Decision Maker Title": dm.title if dm else "",
        "Decision Maker Email": (dm.email or "") if dm else "",
    }


def _individual_row(lead: IndividualLead) -> Dict:
    user = lead.contacts[0] if lead.contacts else None
    return {
        "Platform": lead.name,
        "Post Link": lead.source_url,
        "Sentiment / Industry": lead.classification,
        "Location": lead.locale,
        "Post Content": lead.summary,
        "General Info": lead.general_contact or "",
        "Date Posted": lead.posted_at or "",
        "Quality Score": lead.quality_score,
        "User Handle": user.name if user else "",
        "User Profile / Inbox Link": (user.email or "") if user else "",
    }


def lead_to_row(lead: LeadRecord) -> Dict:
    """Flatten one lead into export columns for its campaign mode."""
    if isinstance(lead, IndividualLead):
        row = _individual_row(lead)
    else:
        row = _organization_row(lead)

    row["Enrichment Status"] = lead.enrichment_status.value
    profile = lead.enriched_data
    if profile is not None:
        row.update({
            "Key Insights": "; ".join(profile.key_insights),
            "Products / Services": "; ".join(profile.products_services),
            "Technologies": "; ".join(profile.technologies),
            "Pitch Strategy": profile.pitch_strategy,
            "Outreach Message": profile.outreach_message,
        })
    return row


def leads_to_dataframe(leads: Iterable[LeadRecord]) -> pd.DataFrame:
    """Build a DataFrame from a snapshot. Mixed campaign modes get the union of columns."""
    rows: List[Dict] = [lead_to_row(lead) for lead in leads]
    return pd.DataFrame(rows)


def generate_csv(leads: Iterable[LeadRecord]) -> str:
    """Generate CSV data from leads."""
    df = leads_to_dataframe(leads)
    return df.to_csv(index=False)
