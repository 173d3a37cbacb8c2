"""
/api/appointments — provider scheduling plus customer-side history and reviews.

Appointment status drives lead status:
  booked     →  lead "qualified", appointment_booked, assigned to provider
  completed  →  lead "converted"
  cancelled / no_show  →  lead "closed"
Every lead transition is rescored.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from leadhub.auth import get_current_customer, get_current_provider
from leadhub.db.models import Customer, Provider
from leadhub.db.repository import (
    booked_times,
    count_appointments,
    create_appointment,
    get_appointment_for_provider,
    get_customer_by_email,
    get_lead_by_id,
    get_provider_by_id,
    list_appointments,
    list_customer_appointments,
    provider_rating_summary,
)
from leadhub.db.session import async_session
from leadhub.routes.common import page_count, validate_uuid
from leadhub.schemas.appointment import (
    AppointmentCreateRequest,
    AppointmentCreateResponse,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdateRequest,
    AvailableSlotsResponse,
    ReviewRequest,
)
from leadhub.schemas.lead import Pagination
from leadhub.services.lead_updates import change_lead_status
from leadhub.services.scheduling import INACTIVE_APPOINTMENT_STATUSES, available_slots, day_bounds

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["appointments"])

LEAD_STATUS_FOR_APPOINTMENT = {
    "completed": "converted",
    "cancelled": "closed",
    "no_show": "closed",
}


# ============================================================
# CREATE APPOINTMENT  POST /api/appointments
# ============================================================

@router.post("", response_model=AppointmentCreateResponse, status_code=201)
async def create_appointment_api(
    data: AppointmentCreateRequest, provider: Provider = Depends(get_current_provider)
):
    """Book a lead; the lead becomes qualified and is assigned to this provider."""
    validate_uuid(data.lead_id, "lead ID")
    async with async_session() as session:
        lead = await get_lead_by_id(session, data.lead_id)
        if not lead:
            raise HTTPException(status_code=404, detail="Lead not found")

        # Link the customer account when the lead's email belongs to one
        customer = await get_customer_by_email(session, lead.email)

        appointment = await create_appointment(
            session,
            lead_id=lead.id,
            customer_id=customer.id if customer else None,
            provider_id=provider.id,
            scheduled_date=data.scheduled_date,
            duration=data.duration,
            service_type=data.service_type,
            location=data.location.model_dump(),
            notes=data.notes,
            estimated_cost=data.estimated_cost,
        )

        lead.appointment_booked = True
        lead.assigned_to = provider.id
        change_lead_status(lead, "qualified")
        await session.commit()

    logger.info("Provider %s booked lead %s for %s", provider.id, lead.id, data.scheduled_date)
    return AppointmentCreateResponse(
        message="Appointment created successfully",
        appointment=AppointmentResponse.from_appointment(appointment),
    )


# ============================================================
# LIST APPOINTMENTS  GET /api/appointments
# ============================================================

@router.get("", response_model=AppointmentListResponse)
async def list_appointments_api(
    status: Optional[AppointmentStatus] = Query(None),
    day: Optional[date] = Query(None, alias="date", description="YYYY-MM-DD (UTC)"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    provider: Provider = Depends(get_current_provider),
):
    start, end = day_bounds(day) if day else (None, None)
    async with async_session() as session:
        appointments = await list_appointments(
            session,
            provider.id,
            status=status,
            start=start,
            end=end,
            limit=limit,
            offset=(page - 1) * limit,
        )
        total = await count_appointments(session, provider.id, status=status, start=start, end=end)

    return AppointmentListResponse(
        appointments=[AppointmentResponse.from_appointment(a) for a in appointments],
        pagination=Pagination(current=page, pages=page_count(total, limit), total=total),
    )


# ============================================================
# AVAILABLE SLOTS  GET /api/appointments/slots/available
# ============================================================

@router.get("/slots/available", response_model=AvailableSlotsResponse)
async def available_slots_api(
    day: date = Query(..., alias="date", description="YYYY-MM-DD (UTC)"),
    provider: Provider = Depends(get_current_provider),
):
    """Hourly slots between 9 AM and 4 PM not already taken by an active appointment."""
    start, end = day_bounds(day)
    async with async_session() as session:
        taken = await booked_times(
            session, provider.id, start, end, exclude_statuses=INACTIVE_APPOINTMENT_STATUSES
        )
    return AvailableSlotsResponse(available_slots=available_slots(day, taken))


# ============================================================
# CUSTOMER HISTORY  GET /api/appointments/customer/mine
# ============================================================

@router.get("/customer/mine", response_model=list[AppointmentResponse])
async def customer_appointments_api(customer: Customer = Depends(get_current_customer)):
    async with async_session() as session:
        appointments = await list_customer_appointments(session, customer.id)
    return [AppointmentResponse.from_appointment(a) for a in appointments]


# ============================================================
# GET SINGLE APPOINTMENT  GET /api/appointments/{appointment_id}
# ============================================================

@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment_api(
    appointment_id: str, provider: Provider = Depends(get_current_provider)
):
    validate_uuid(appointment_id, "appointment ID")
    async with async_session() as session:
        appointment = await get_appointment_for_provider(session, appointment_id, provider.id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return AppointmentResponse.from_appointment(appointment)


# ============================================================
# UPDATE STATUS  PATCH /api/appointments/{appointment_id}/status
# ============================================================

@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status_api(
    appointment_id: str,
    data: AppointmentStatusUpdateRequest,
    provider: Provider = Depends(get_current_provider),
):
    validate_uuid(appointment_id, "appointment ID")
    async with async_session() as session:
        appointment = await get_appointment_for_provider(session, appointment_id, provider.id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")

        appointment.status = data.status
        if data.completion_notes:
            appointment.completion_notes = data.completion_notes
        if data.actual_cost is not None:
            appointment.actual_cost = data.actual_cost

        lead_status = LEAD_STATUS_FOR_APPOINTMENT.get(data.status)
        if lead_status:
            lead = await get_lead_by_id(session, appointment.lead_id)
            if lead and lead.status != lead_status:
                change_lead_status(lead, lead_status)

        await session.commit()

    return AppointmentResponse.from_appointment(appointment)


# ============================================================
# CUSTOMER REVIEW  POST /api/appointments/{appointment_id}/review
# ============================================================

@router.post("/{appointment_id}/review", response_model=AppointmentResponse)
async def review_appointment_api(
    appointment_id: str,
    data: ReviewRequest,
    customer: Customer = Depends(get_current_customer),
):
    """Rate a completed appointment once; folds the rating into the provider's average."""
    validate_uuid(appointment_id, "appointment ID")
    async with async_session() as session:
        appointments = await list_customer_appointments(session, customer.id, appointment_id=appointment_id)
        if not appointments:
            raise HTTPException(status_code=404, detail="Appointment not found")
        appointment = appointments[0]

        if appointment.status != "completed":
            raise HTTPException(status_code=400, detail="Only completed appointments can be reviewed")
        if appointment.customer_rating is not None:
            raise HTTPException(status_code=400, detail="Appointment already reviewed")

        appointment.customer_rating = data.rating
        appointment.customer_review = data.review

        await session.flush()
        provider = await get_provider_by_id(session, appointment.provider_id)
        if provider:
            provider.rating_count, provider.rating_average = await provider_rating_summary(
                session, provider.id
            )

        await session.commit()

    return AppointmentResponse.from_appointment(appointment)
