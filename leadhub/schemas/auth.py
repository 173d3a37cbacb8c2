"""Pydantic schemas for /api/auth."""

from pydantic import BaseModel, Field, field_validator

from leadhub.schemas.lead import ServiceType
from leadhub.services.scoring import is_valid_email


class _EmailModel(BaseModel):
    email: str

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


class CustomerRegisterRequest(_EmailModel):
    name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    phone: str | None = None


class ProviderRegisterRequest(_EmailModel):
    business_name: str = Field(..., min_length=1)
    owner_name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    phone: str = Field(..., min_length=1)
    service_types: list[ServiceType]


class LoginRequest(_EmailModel):
    password: str = Field(..., min_length=1)


class CustomerInfo(BaseModel):
    id: str
    name: str
    email: str

    @classmethod
    def from_customer(cls, customer) -> "CustomerInfo":
        return cls(id=str(customer.id), name=customer.name, email=customer.email)


class ProviderInfo(BaseModel):
    id: str
    business_name: str
    owner_name: str
    email: str

    @classmethod
    def from_provider(cls, provider) -> "ProviderInfo":
        return cls(
            id=str(provider.id),
            business_name=provider.business_name,
            owner_name=provider.owner_name,
            email=provider.email,
        )


class CustomerAuthResponse(BaseModel):
    message: str
    token: str
    customer: CustomerInfo


class ProviderAuthResponse(BaseModel):
    message: str
    token: str
    provider: ProviderInfo


class ProviderProfile(BaseModel):
    id: str
    business_name: str
    owner_name: str
    email: str
    phone: str
    service_types: list[str]
    service_radius: int
    zip_codes: list[str]
    rating_average: float
    rating_count: int
    subscription_plan: str
    subscription_status: str

    @classmethod
    def from_provider(cls, provider) -> "ProviderProfile":
        return cls(
            id=str(provider.id),
            business_name=provider.business_name,
            owner_name=provider.owner_name,
            email=provider.email,
            phone=provider.phone,
            service_types=provider.service_types or [],
            service_radius=provider.service_radius,
            zip_codes=provider.zip_codes or [],
            rating_average=provider.rating_average,
            rating_count=provider.rating_count,
            subscription_plan=provider.subscription_plan,
            subscription_status=provider.subscription_status,
        )


class CustomerProfile(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None
    address: dict | None
    preferred_contact: str
    notifications: bool

    @classmethod
    def from_customer(cls, customer) -> "CustomerProfile":
        return cls(
            id=str(customer.id),
            name=customer.name,
            email=customer.email,
            phone=customer.phone,
            address=customer.address,
            preferred_contact=customer.preferred_contact,
            notifications=customer.notifications,
        )


class ProfileResponse(BaseModel):
    type: str
    user: ProviderProfile | CustomerProfile
