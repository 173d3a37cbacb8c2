"""
Pydantic schemas for /api/leads.

Category is derived from the stored score on every read, never stored.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from leadhub.services.scoring import Category, is_valid_email, score_category

ServiceType = Literal[
    "plumbing", "electrical", "landscaping", "hvac", "roofing", "cleaning", "renovation", "other"
]
LeadSource = Literal["website", "referral", "instagram", "facebook", "google", "other"]
LeadStatus = Literal["pending", "contacted", "qualified", "converted", "closed"]
InteractionType = Literal["call", "email", "sms", "meeting", "quote_sent", "follow_up"]


class LeadCreateRequest(BaseModel):
    """Public intake form."""

    name: str = Field(..., min_length=1, examples=["Jane Doe"])
    email: str = Field(..., examples=["jane@example.com"])
    phone: str = Field(..., min_length=1, examples=["(555) 123-4567"])
    service_type: ServiceType
    message: str | None = Field(None, examples=["Water heater is leaking in the basement"])
    source: LeadSource = "website"

    @field_validator("name", "phone", "message", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not is_valid_email(value):
            raise ValueError("must be a valid email address")
        return value


class LeadStatusUpdateRequest(BaseModel):
    status: LeadStatus
    notes: str | None = None


class InteractionCreateRequest(BaseModel):
    type: InteractionType
    description: str | None = None


class LeadSummary(BaseModel):
    """Returned to the public intake form."""

    id: str
    name: str
    service_type: str
    score: int
    category: Category
    created_at: datetime

    @classmethod
    def from_lead(cls, lead) -> "LeadSummary":
        return cls(
            id=str(lead.id),
            name=lead.name,
            service_type=lead.service_type,
            score=lead.score,
            category=score_category(lead.score),
            created_at=lead.created_at,
        )


class LeadCreateResponse(BaseModel):
    message: str
    lead: LeadSummary


class LeadResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    service_type: str
    message: str | None
    status: str
    score: int
    category: Category
    source: str
    assigned_to: str | None
    follow_up_date: datetime | None
    notes: list[dict]
    interactions: list[dict]
    response_time: datetime | None
    appointment_booked: bool
    estimated_value: float | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_lead(cls, lead) -> "LeadResponse":
        return cls(
            id=str(lead.id),
            name=lead.name,
            email=lead.email,
            phone=lead.phone,
            service_type=lead.service_type,
            message=lead.message,
            status=lead.status,
            score=lead.score,
            category=score_category(lead.score),
            source=lead.source,
            assigned_to=str(lead.assigned_to) if lead.assigned_to else None,
            follow_up_date=lead.follow_up_date,
            notes=lead.notes or [],
            interactions=lead.interactions or [],
            response_time=lead.response_time,
            appointment_booked=lead.appointment_booked,
            estimated_value=lead.estimated_value,
            created_at=lead.created_at,
            updated_at=lead.updated_at,
        )


class Pagination(BaseModel):
    current: int
    pages: int
    total: int


class LeadListResponse(BaseModel):
    leads: list[LeadResponse]
    pagination: Pagination


class LeadStatusUpdateResponse(BaseModel):
    message: str
    lead: LeadResponse


class InteractionResponse(BaseModel):
    message: str
    interaction: dict


class StatusCount(BaseModel):
    status: str
    count: int


class CategoryCount(BaseModel):
    category: Category
    count: int


class LeadStatsResponse(BaseModel):
    total_leads: int
    today_leads: int
    status_breakdown: list[StatusCount]
    score_breakdown: list[CategoryCount]
