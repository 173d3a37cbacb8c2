from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from leadhub.db.models import Appointment, Customer, Lead, Provider
from leadhub.services.clock import utcnow
from leadhub.services.scoring import score_category, score_record

LEAD_SORT_COLUMNS = {
    "created_at": Lead.created_at,
    "score": Lead.score,
    "name": Lead.name,
    "status": Lead.status,
    "service_type": Lead.service_type,
}


# ======================================================
# ACCOUNTS
# ======================================================

async def get_provider_by_id(session: AsyncSession, provider_id: str) -> Provider | None:
    return await session.get(Provider, provider_id)


async def get_provider_by_email(session: AsyncSession, email: str) -> Provider | None:
    result = await session.execute(select(Provider).where(Provider.email == email.lower()))
    return result.scalar_one_or_none()


async def create_provider(session: AsyncSession, **fields) -> Provider:
    provider = Provider(**fields)
    session.add(provider)
    await session.flush()
    return provider


async def get_customer_by_id(session: AsyncSession, customer_id: str) -> Customer | None:
    return await session.get(Customer, customer_id)


async def get_customer_by_email(session: AsyncSession, email: str) -> Customer | None:
    result = await session.execute(select(Customer).where(Customer.email == email.lower()))
    return result.scalar_one_or_none()


async def create_customer(session: AsyncSession, **fields) -> Customer:
    customer = Customer(**fields)
    session.add(customer)
    await session.flush()
    return customer


# ======================================================
# LEAD SCORING HELPERS
# ======================================================

def rescore_lead(lead: Lead, **score_kwargs) -> bool:
    """Run the scoring engine and write the score onto the row. Returns True if it changed."""
    result = score_record(lead, **score_kwargs)
    changed = lead.score != result.score
    lead.score = result.score
    return changed


def _lead_filters(
    stmt,
    status: str | None = None,
    service_type: str | None = None,
    created_since: datetime | None = None,
):
    if status:
        stmt = stmt.where(Lead.status == status)
    if service_type:
        stmt = stmt.where(Lead.service_type == service_type)
    if created_since:
        stmt = stmt.where(Lead.created_at >= created_since)
    return stmt


# ======================================================
# LEAD CRUD OPERATIONS
# ======================================================

async def create_lead(session: AsyncSession, **fields) -> Lead:
    """Score and insert a new lead in one step."""
    # Column defaults only apply at flush; the engine needs them now
    fields.setdefault("created_at", utcnow())
    fields.setdefault("status", "pending")
    fields.setdefault("source", "website")
    fields.setdefault("appointment_booked", False)
    lead = Lead(notes=[], interactions=[], **fields)
    rescore_lead(lead)
    session.add(lead)
    await session.flush()
    return lead


async def get_lead_by_id(session: AsyncSession, lead_id: str) -> Lead | None:
    return await session.get(Lead, lead_id)


async def list_leads(
    session: AsyncSession,
    status: str | None = None,
    service_type: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    limit: int = 10,
    offset: int = 0,
) -> list[Lead]:
    column = LEAD_SORT_COLUMNS.get(sort_by, Lead.created_at)
    order = column.desc() if sort_order == "desc" else column.asc()
    stmt = _lead_filters(select(Lead), status, service_type).order_by(order).limit(limit).offset(offset)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_all_leads(session: AsyncSession, exclude_status: str | None = None) -> list[Lead]:
    stmt = select(Lead)
    if exclude_status:
        stmt = stmt.where(Lead.status != exclude_status)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_leads(
    session: AsyncSession,
    status: str | None = None,
    service_type: str | None = None,
    created_since: datetime | None = None,
) -> int:
    stmt = _lead_filters(select(func.count()).select_from(Lead), status, service_type, created_since)
    result = await session.execute(stmt)
    return result.scalar() or 0


async def count_leads_by(
    session: AsyncSession, field: str, created_since: datetime | None = None
) -> list[tuple[str, int]]:
    """Group leads by ``field`` (status, source, service_type); largest groups first."""
    column = getattr(Lead, field)
    count = func.count().label("count")
    stmt = _lead_filters(select(column, count), created_since=created_since)
    stmt = stmt.group_by(column).order_by(count.desc(), column)
    result = await session.execute(stmt)
    return [(value, n) for value, n in result.all()]


async def count_leads_by_stored_category(session: AsyncSession) -> dict[str, int]:
    """Category breakdown from persisted scores (no rescoring)."""
    stmt = select(Lead.score, func.count()).group_by(Lead.score)
    result = await session.execute(stmt)
    breakdown: dict[str, int] = {}
    for score, n in result.all():
        category = score_category(score)
        breakdown[category] = breakdown.get(category, 0) + n
    return breakdown


async def lead_creation_times(session: AsyncSession, since: datetime) -> list[datetime]:
    stmt = select(Lead.created_at).where(Lead.created_at >= since).order_by(Lead.created_at)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_stale_leads(session: AsyncSession, created_before: datetime) -> int:
    stmt = (
        select(func.count())
        .select_from(Lead)
        .where(Lead.status == "pending", Lead.created_at < created_before)
    )
    result = await session.execute(stmt)
    return result.scalar() or 0


async def count_follow_up_leads(session: AsyncSession, due_by: datetime) -> int:
    stmt = (
        select(func.count())
        .select_from(Lead)
        .where(Lead.status == "contacted", Lead.follow_up_date <= due_by)
    )
    result = await session.execute(stmt)
    return result.scalar() or 0


# ======================================================
# APPOINTMENT OPERATIONS
# ======================================================

def _appointment_filters(
    stmt,
    provider_id: str,
    status: str | None = None,
    statuses: tuple[str, ...] | None = None,
    exclude_statuses: tuple[str, ...] | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
):
    stmt = stmt.where(Appointment.provider_id == provider_id)
    if status:
        stmt = stmt.where(Appointment.status == status)
    if statuses:
        stmt = stmt.where(Appointment.status.in_(statuses))
    if exclude_statuses:
        stmt = stmt.where(Appointment.status.not_in(exclude_statuses))
    if start:
        stmt = stmt.where(Appointment.scheduled_date >= start)
    if end:
        stmt = stmt.where(Appointment.scheduled_date < end)
    return stmt


async def create_appointment(session: AsyncSession, **fields) -> Appointment:
    appointment = Appointment(**fields)
    session.add(appointment)
    await session.flush()
    return appointment


async def get_appointment_for_provider(
    session: AsyncSession, appointment_id: str, provider_id: str
) -> Appointment | None:
    stmt = select(Appointment).where(
        Appointment.id == appointment_id, Appointment.provider_id == provider_id
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_appointments(
    session: AsyncSession,
    provider_id: str,
    status: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int = 10,
    offset: int = 0,
) -> list[Appointment]:
    stmt = _appointment_filters(select(Appointment), provider_id, status=status, start=start, end=end)
    stmt = stmt.order_by(Appointment.scheduled_date.asc()).limit(limit).offset(offset)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_appointments(session: AsyncSession, provider_id: str, **filters) -> int:
    stmt = _appointment_filters(select(func.count()).select_from(Appointment), provider_id, **filters)
    result = await session.execute(stmt)
    return result.scalar() or 0


async def booked_times(
    session: AsyncSession,
    provider_id: str,
    start: datetime,
    end: datetime,
    exclude_statuses: tuple[str, ...],
) -> list[datetime]:
    stmt = _appointment_filters(
        select(Appointment.scheduled_date),
        provider_id,
        exclude_statuses=exclude_statuses,
        start=start,
        end=end,
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def completed_revenue(session: AsyncSession, provider_id: str, since: datetime) -> float:
    """Sum of actual_cost over completed appointments scheduled since ``since``."""
    stmt = _appointment_filters(
        select(func.coalesce(func.sum(Appointment.actual_cost), 0)),
        provider_id,
        status="completed",
        start=since,
    ).where(Appointment.actual_cost.is_not(None))
    result = await session.execute(stmt)
    return float(result.scalar() or 0)


async def provider_rating_summary(session: AsyncSession, provider_id: str) -> tuple[int, float]:
    """(count, average) of customer ratings across a provider's appointments."""
    stmt = select(func.count(Appointment.customer_rating), func.avg(Appointment.customer_rating)).where(
        Appointment.provider_id == provider_id, Appointment.customer_rating.is_not(None)
    )
    count, average = (await session.execute(stmt)).one()
    return count, float(average or 0)


async def list_customer_appointments(
    session: AsyncSession, customer_id: str, appointment_id: str | None = None
) -> list[Appointment]:
    stmt = select(Appointment).where(Appointment.customer_id == customer_id)
    if appointment_id:
        stmt = stmt.where(Appointment.id == appointment_id)
    result = await session.execute(stmt.order_by(Appointment.scheduled_date.desc()))
    return list(result.scalars().all())
