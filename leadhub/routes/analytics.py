"""
/api/analytics — provider dashboard numbers and lead trends.

The dashboard score distribution rescores every lead in memory and never
writes the result back.
"""

from collections import Counter
from datetime import timedelta

from fastapi import APIRouter, Depends, Query

from leadhub.auth import get_current_provider
from leadhub.db.models import Provider
from leadhub.db.repository import (
    completed_revenue,
    count_appointments,
    count_leads,
    count_leads_by,
    lead_creation_times,
    list_all_leads,
)
from leadhub.db.session import async_session
from leadhub.schemas.analytics import (
    DashboardOverview,
    DashboardResponse,
    DateCount,
    LeadAnalyticsResponse,
    ScoreDistribution,
    ServiceCount,
    SourceCount,
    StatusCount,
)
from leadhub.services.clock import as_utc, utcnow
from leadhub.services.insights import conversion_rate, score_distribution
from leadhub.services.scheduling import day_bounds

router = APIRouter(prefix="/api/analytics", tags=["analytics"])

ACTIVE_APPOINTMENT_STATUSES = ("scheduled", "confirmed", "in_progress")


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard_api(provider: Provider = Depends(get_current_provider)):
    now = utcnow()
    today_start, _ = day_bounds(now.date())
    month_start, _ = day_bounds(now.date().replace(day=1))

    async with async_session() as session:
        total_leads = await count_leads(session)
        new_leads = await count_leads(session, status="pending")
        converted_leads = await count_leads(session, status="converted")
        today_leads = await count_leads(session, created_since=today_start)

        total_appointments = await count_appointments(session, provider.id)
        active_appointments = await count_appointments(
            session, provider.id, statuses=ACTIVE_APPOINTMENT_STATUSES
        )
        monthly_revenue = await completed_revenue(session, provider.id, since=month_start)

        leads = await list_all_leads(session)
        by_service = await count_leads_by(session, "service_type")

    return DashboardResponse(
        overview=DashboardOverview(
            total_leads=total_leads,
            new_leads=new_leads,
            today_leads=today_leads,
            converted_leads=converted_leads,
            conversion_rate=conversion_rate(converted_leads, total_leads),
            total_appointments=total_appointments,
            active_appointments=active_appointments,
            monthly_revenue=monthly_revenue,
        ),
        score_distribution=ScoreDistribution(**score_distribution(leads, now=now)),
        leads_by_service=[ServiceCount(service_type=s, count=n) for s, n in by_service],
        rating=provider.rating_average,
    )


@router.get("/leads", response_model=LeadAnalyticsResponse)
async def lead_analytics_api(
    period: int = Query(30, ge=1, le=365, description="Look-back window in days"),
    provider: Provider = Depends(get_current_provider),
):
    since = utcnow() - timedelta(days=period)
    async with async_session() as session:
        created = await lead_creation_times(session, since)
        by_status = await count_leads_by(session, "status", created_since=since)
        by_source = await count_leads_by(session, "source", created_since=since)

    per_day = Counter(as_utc(ts).date().isoformat() for ts in created)
    return LeadAnalyticsResponse(
        leads_over_time=[DateCount(date=d, count=n) for d, n in sorted(per_day.items())],
        status_breakdown=[StatusCount(status=s, count=n) for s, n in by_status],
        source_breakdown=[SourceCount(source=s, count=n) for s, n in by_source],
    )
