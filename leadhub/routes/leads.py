"""
/api/leads — public intake plus provider-only lead management.

Scoring runs once at intake and again on every status change; the stored
score is what list/detail endpoints report.
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from leadhub.auth import get_current_provider
from leadhub.db.models import Provider
from leadhub.db.repository import (
    count_leads,
    count_leads_by,
    count_leads_by_stored_category,
    create_lead,
    get_lead_by_id,
    list_leads,
)
from leadhub.db.session import async_session
from leadhub.routes.common import page_count, validate_uuid
from leadhub.schemas.lead import (
    CategoryCount,
    InteractionCreateRequest,
    InteractionResponse,
    LeadCreateRequest,
    LeadCreateResponse,
    LeadListResponse,
    LeadResponse,
    LeadStatsResponse,
    LeadStatus,
    LeadStatusUpdateRequest,
    LeadStatusUpdateResponse,
    LeadSummary,
    Pagination,
    ServiceType,
    StatusCount,
)
from leadhub.services.clock import utcnow
from leadhub.services.lead_updates import add_interaction, add_note, change_lead_status
from leadhub.services.scheduling import day_bounds

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/leads", tags=["leads"])


# ============================================================
# CREATE LEAD  POST /api/leads  (public)
# ============================================================

@router.post("", response_model=LeadCreateResponse, status_code=201)
async def create_lead_api(data: LeadCreateRequest):
    """Accept a lead from the public form and score it before saving."""
    async with async_session() as session:
        lead = await create_lead(
            session,
            name=data.name,
            email=data.email,
            phone=data.phone,
            service_type=data.service_type,
            message=data.message or None,
            source=data.source,
        )
        await session.commit()

    logger.info("New %s lead %s scored %d", lead.service_type, lead.id, lead.score)
    return LeadCreateResponse(message="Lead created successfully", lead=LeadSummary.from_lead(lead))


# ============================================================
# LIST LEADS  GET /api/leads
# ============================================================

@router.get("", response_model=LeadListResponse)
async def list_leads_api(
    status: Optional[LeadStatus] = Query(None),
    service_type: Optional[ServiceType] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: Literal["created_at", "score", "name", "status", "service_type"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    provider: Provider = Depends(get_current_provider),
):
    async with async_session() as session:
        leads = await list_leads(
            session,
            status=status,
            service_type=service_type,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=(page - 1) * limit,
        )
        total = await count_leads(session, status=status, service_type=service_type)

    return LeadListResponse(
        leads=[LeadResponse.from_lead(lead) for lead in leads],
        pagination=Pagination(current=page, pages=page_count(total, limit), total=total),
    )


# ============================================================
# STATS  GET /api/leads/stats/overview
# ============================================================

@router.get("/stats/overview", response_model=LeadStatsResponse)
async def lead_stats_api(provider: Provider = Depends(get_current_provider)):
    """Status and category breakdown from stored scores."""
    today_start, _ = day_bounds(utcnow().date())
    async with async_session() as session:
        total = await count_leads(session)
        today = await count_leads(session, created_since=today_start)
        by_status = await count_leads_by(session, "status")
        by_category = await count_leads_by_stored_category(session)

    return LeadStatsResponse(
        total_leads=total,
        today_leads=today,
        status_breakdown=[StatusCount(status=s, count=n) for s, n in by_status],
        score_breakdown=[
            CategoryCount(category=c, count=by_category[c])
            for c in ("hot", "warm", "cold")
            if c in by_category
        ],
    )


# ============================================================
# GET SINGLE LEAD  GET /api/leads/{lead_id}
# ============================================================

@router.get("/{lead_id}", response_model=LeadResponse)
async def get_lead_api(lead_id: str, provider: Provider = Depends(get_current_provider)):
    validate_uuid(lead_id, "lead ID")
    async with async_session() as session:
        lead = await get_lead_by_id(session, lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    return LeadResponse.from_lead(lead)


# ============================================================
# UPDATE STATUS  PATCH /api/leads/{lead_id}/status
# ============================================================

@router.patch("/{lead_id}/status", response_model=LeadStatusUpdateResponse)
async def update_lead_status_api(
    lead_id: str,
    data: LeadStatusUpdateRequest,
    provider: Provider = Depends(get_current_provider),
):
    """
    Change a lead's status.

    - First move to "contacted" stamps response_time.
    - Optional notes are appended, attributed to the provider.
    - A follow_up interaction is logged and the lead is rescored.
    """
    validate_uuid(lead_id, "lead ID")
    async with async_session() as session:
        lead = await get_lead_by_id(session, lead_id)
        if not lead:
            raise HTTPException(status_code=404, detail="Lead not found")

        if data.notes:
            add_note(lead, data.notes, provider.id)

        add_interaction(lead, "follow_up", f"Status updated to {data.status}")
        change_lead_status(lead, data.status)
        await session.commit()
        await session.refresh(lead)

    logger.info("Lead %s moved to %s (score %d)", lead.id, lead.status, lead.score)
    return LeadStatusUpdateResponse(
        message="Lead status updated successfully", lead=LeadResponse.from_lead(lead)
    )


# ============================================================
# ADD INTERACTION  POST /api/leads/{lead_id}/interactions
# ============================================================

@router.post("/{lead_id}/interactions", response_model=InteractionResponse)
async def add_interaction_api(
    lead_id: str,
    data: InteractionCreateRequest,
    provider: Provider = Depends(get_current_provider),
):
    validate_uuid(lead_id, "lead ID")
    async with async_session() as session:
        lead = await get_lead_by_id(session, lead_id)
        if not lead:
            raise HTTPException(status_code=404, detail="Lead not found")

        interaction = add_interaction(lead, data.type, data.description)
        await session.commit()

    return InteractionResponse(message="Interaction added successfully", interaction=interaction)
