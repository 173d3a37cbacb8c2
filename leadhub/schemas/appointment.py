"""Pydantic schemas for /api/appointments."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from leadhub.schemas.lead import Pagination
from leadhub.services.clock import as_utc

AppointmentStatus = Literal[
    "scheduled", "confirmed", "in_progress", "completed", "cancelled", "no_show"
]


class Location(BaseModel):
    address: str
    city: str
    state: str
    zip_code: str


class AppointmentCreateRequest(BaseModel):
    lead_id: str
    scheduled_date: datetime = Field(..., examples=["2026-10-20T14:00:00Z"])
    duration: int = Field(60, ge=15, le=480)
    service_type: str
    location: Location
    notes: str | None = None
    estimated_cost: float | None = Field(None, ge=0)

    @field_validator("scheduled_date")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class AppointmentStatusUpdateRequest(BaseModel):
    status: AppointmentStatus
    completion_notes: str | None = None
    actual_cost: float | None = Field(None, ge=0)


class ReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    review: str | None = None


class AppointmentResponse(BaseModel):
    id: str
    lead_id: str
    customer_id: str | None
    provider_id: str
    scheduled_date: datetime
    duration: int
    service_type: str
    status: str
    location: dict | None
    notes: str | None
    estimated_cost: float | None
    actual_cost: float | None
    completion_notes: str | None
    customer_rating: int | None
    customer_review: str | None
    created_at: datetime

    @classmethod
    def from_appointment(cls, appointment) -> "AppointmentResponse":
        return cls(
            id=str(appointment.id),
            lead_id=str(appointment.lead_id),
            customer_id=str(appointment.customer_id) if appointment.customer_id else None,
            provider_id=str(appointment.provider_id),
            scheduled_date=as_utc(appointment.scheduled_date),
            duration=appointment.duration,
            service_type=appointment.service_type,
            status=appointment.status,
            location=appointment.location,
            notes=appointment.notes,
            estimated_cost=appointment.estimated_cost,
            actual_cost=appointment.actual_cost,
            completion_notes=appointment.completion_notes,
            customer_rating=appointment.customer_rating,
            customer_review=appointment.customer_review,
            created_at=appointment.created_at,
        )


class AppointmentCreateResponse(BaseModel):
    message: str
    appointment: AppointmentResponse


class AppointmentListResponse(BaseModel):
    appointments: list[AppointmentResponse]
    pagination: Pagination


class Slot(BaseModel):
    time: str
    display: str


class AvailableSlotsResponse(BaseModel):
    available_slots: list[Slot]
