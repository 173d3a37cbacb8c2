"""
Database models for providers, customers, leads and appointments.

Nested documents (notes, interactions, locations) live in JSON columns;
JSONB on Postgres.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from leadhub.services.clock import utcnow

JSONDocument = JSON().with_variant(JSONB, "postgresql")


class Base(DeclarativeBase):
    pass


def _uuid_pk() -> Mapped[str]:
    return mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )


def _created_at() -> Mapped[datetime]:
    return mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


def _updated_at() -> Mapped[datetime]:
    return mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class Provider(Base):
    """A service business that works leads and books appointments."""

    __tablename__ = "providers"

    id: Mapped[str] = _uuid_pk()
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    service_types: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)
    service_radius: Mapped[int] = mapped_column(Integer, nullable=False, default=25)
    zip_codes: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)
    rating_average: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    subscription_plan: Mapped[str] = mapped_column(
        String(20), nullable=False, default="basic"
    )  # basic | premium | enterprise
    subscription_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active"
    )  # active | inactive | suspended
    auto_assign_leads: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    email_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sms_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()


class Customer(Base):
    """A homeowner account."""

    __tablename__ = "customers"

    id: Mapped[str] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[dict | None] = mapped_column(JSONDocument, nullable=True)
    preferred_contact: Mapped[str] = mapped_column(
        String(10), nullable=False, default="email"
    )  # email | phone | sms
    notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()


class Lead(Base):
    """A prospective customer's service request."""

    __tablename__ = "leads"

    id: Mapped[str] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    service_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )  # pending | contacted | qualified | converted | closed
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    source: Mapped[str] = mapped_column(String(20), nullable=False, default="website")
    assigned_to: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("providers.id", ondelete="SET NULL"), nullable=True
    )
    follow_up_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # [{"content", "created_at", "created_by"}]
    notes: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)
    # [{"type", "description", "timestamp"}]
    interactions: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)
    response_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    appointment_booked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    estimated_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()


class Appointment(Base):
    """A scheduled visit for a lead."""

    __tablename__ = "appointments"

    id: Mapped[str] = _uuid_pk()
    lead_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True
    )
    provider_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scheduled_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=60)  # minutes
    service_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="scheduled"
    )  # scheduled | confirmed | in_progress | completed | cancelled | no_show
    location: Mapped[dict | None] = mapped_column(JSONDocument, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    estimated_cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    actual_cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    completion_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    customer_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    customer_review: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()
