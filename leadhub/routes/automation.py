"""
/api/automation — bulk rescoring and actionable insights.

POST /score-leads  →  rescores every non-closed lead, saves only changed scores
GET  /insights     →  hot / stale / follow-up counts with recommendations
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException

from leadhub.auth import get_current_provider
from leadhub.db.models import Provider
from leadhub.db.repository import (
    count_follow_up_leads,
    count_stale_leads,
    list_all_leads,
    rescore_lead,
)
from leadhub.db.session import async_session
from leadhub.schemas.analytics import InsightsResponse, ScoreLeadsResponse
from leadhub.services.clock import utcnow
from leadhub.services.insights import build_recommendations, count_hot_pending

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/automation", tags=["automation"])

UNCONTACTED_AFTER = timedelta(hours=24)


@router.post("/score-leads", response_model=ScoreLeadsResponse)
async def score_leads_api(provider: Provider = Depends(get_current_provider)):
    """Rescore all open leads in one transaction."""
    now = utcnow()
    try:
        async with async_session() as session:
            leads = await list_all_leads(session, exclude_status="closed")
            updated = sum(1 for lead in leads if rescore_lead(lead, now=now))
            await session.commit()
    except Exception as e:
        logger.exception("Bulk lead rescoring failed")
        raise HTTPException(status_code=500, detail=f"Lead scoring automation failed: {e}") from e

    logger.info("Rescored %d leads, %d changed", len(leads), updated)
    return ScoreLeadsResponse(
        message="Lead scoring automation completed",
        total_leads=len(leads),
        updated_leads=updated,
    )


@router.get("/insights", response_model=InsightsResponse)
async def insights_api(provider: Provider = Depends(get_current_provider)):
    now = utcnow()
    async with async_session() as session:
        leads = await list_all_leads(session)
        stale = await count_stale_leads(session, created_before=now - UNCONTACTED_AFTER)
        follow_up = await count_follow_up_leads(session, due_by=now)

    hot = count_hot_pending(leads, now=now)
    return InsightsResponse(
        hot_leads=hot,
        stale_leads=stale,
        follow_up_leads=follow_up,
        recommendations=build_recommendations(hot, stale, follow_up),
    )
