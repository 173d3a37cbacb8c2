"""In-place lead mutations shared by the leads and appointments routers."""

from leadhub.db.models import Lead
from leadhub.db.repository import rescore_lead
from leadhub.services.clock import utcnow


def add_interaction(lead: Lead, interaction_type: str, description: str | None) -> dict:
    interaction = {
        "type": interaction_type,
        "description": description,
        "timestamp": utcnow().isoformat(),
    }
    # Reassign so the JSON column is flagged dirty
    lead.interactions = [*(lead.interactions or []), interaction]
    return interaction


def add_note(lead: Lead, content: str, author_id: str) -> dict:
    note = {
        "content": content,
        "created_at": utcnow().isoformat(),
        "created_by": str(author_id),
    }
    lead.notes = [*(lead.notes or []), note]
    return note


def change_lead_status(lead: Lead, status: str) -> None:
    """Move a lead to ``status`` and rescore it (even if the status is unchanged)."""
    lead.status = status
    if status == "contacted" and not lead.response_time:
        lead.response_time = utcnow()
    rescore_lead(lead)
