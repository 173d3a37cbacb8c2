"""Response schemas for /api/analytics and /api/automation."""

from pydantic import BaseModel


class DashboardOverview(BaseModel):
    total_leads: int
    new_leads: int
    today_leads: int
    converted_leads: int
    conversion_rate: float
    total_appointments: int
    active_appointments: int
    monthly_revenue: float


class ScoreDistribution(BaseModel):
    hot: int = 0
    warm: int = 0
    cold: int = 0


class ServiceCount(BaseModel):
    service_type: str
    count: int


class DashboardResponse(BaseModel):
    overview: DashboardOverview
    score_distribution: ScoreDistribution
    leads_by_service: list[ServiceCount]
    rating: float


class DateCount(BaseModel):
    date: str
    count: int


class StatusCount(BaseModel):
    status: str
    count: int


class SourceCount(BaseModel):
    source: str
    count: int


class LeadAnalyticsResponse(BaseModel):
    leads_over_time: list[DateCount]
    status_breakdown: list[StatusCount]
    source_breakdown: list[SourceCount]


class ScoreLeadsResponse(BaseModel):
    message: str
    total_leads: int
    updated_leads: int


class InsightsResponse(BaseModel):
    hot_leads: int
    stale_leads: int
    follow_up_leads: int
    recommendations: list[str]
