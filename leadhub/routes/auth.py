"""
/api/auth — registration, login and profile for providers and customers.

Every successful register/login returns a bearer token (see services.security).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from leadhub.auth import require_token
from leadhub.db.repository import (
    create_customer,
    create_provider,
    get_customer_by_email,
    get_customer_by_id,
    get_provider_by_email,
    get_provider_by_id,
)
from leadhub.db.session import async_session
from leadhub.schemas.auth import (
    CustomerAuthResponse,
    CustomerInfo,
    CustomerProfile,
    CustomerRegisterRequest,
    LoginRequest,
    ProfileResponse,
    ProviderAuthResponse,
    ProviderInfo,
    ProviderProfile,
    ProviderRegisterRequest,
)
from leadhub.services.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

INVALID_CREDENTIALS = "Invalid email or password"


# ============================================================
# CUSTOMERS
# ============================================================

@router.post("/customer/register", response_model=CustomerAuthResponse, status_code=201)
async def register_customer(data: CustomerRegisterRequest):
    async with async_session() as session:
        if await get_customer_by_email(session, data.email):
            raise HTTPException(status_code=400, detail="Customer already exists with this email")

        customer = await create_customer(
            session,
            name=data.name.strip(),
            email=data.email,
            password_hash=hash_password(data.password),
            phone=data.phone,
        )
        await session.commit()

    logger.info("Registered customer %s", customer.id)
    return CustomerAuthResponse(
        message="Customer registered successfully",
        token=create_access_token(customer.id, "customer"),
        customer=CustomerInfo.from_customer(customer),
    )


@router.post("/customer/login", response_model=CustomerAuthResponse)
async def login_customer(data: LoginRequest):
    async with async_session() as session:
        customer = await get_customer_by_email(session, data.email)

    if not customer or not verify_password(data.password, customer.password_hash):
        logger.warning("Failed customer login for %s", data.email)
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    return CustomerAuthResponse(
        message="Login successful",
        token=create_access_token(customer.id, "customer"),
        customer=CustomerInfo.from_customer(customer),
    )


# ============================================================
# PROVIDERS
# ============================================================

@router.post("/provider/register", response_model=ProviderAuthResponse, status_code=201)
async def register_provider(data: ProviderRegisterRequest):
    async with async_session() as session:
        if await get_provider_by_email(session, data.email):
            raise HTTPException(status_code=400, detail="Provider already exists with this email")

        provider = await create_provider(
            session,
            business_name=data.business_name.strip(),
            owner_name=data.owner_name.strip(),
            email=data.email,
            password_hash=hash_password(data.password),
            phone=data.phone.strip(),
            service_types=list(data.service_types),
        )
        await session.commit()

    logger.info("Registered provider %s", provider.id)
    return ProviderAuthResponse(
        message="Provider registered successfully",
        token=create_access_token(provider.id, "provider"),
        provider=ProviderInfo.from_provider(provider),
    )


@router.post("/provider/login", response_model=ProviderAuthResponse)
async def login_provider(data: LoginRequest):
    async with async_session() as session:
        provider = await get_provider_by_email(session, data.email)

    if not provider or not verify_password(data.password, provider.password_hash):
        logger.warning("Failed provider login for %s", data.email)
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    return ProviderAuthResponse(
        message="Login successful",
        token=create_access_token(provider.id, "provider"),
        provider=ProviderInfo.from_provider(provider),
    )


# ============================================================
# PROFILE  GET /api/auth/profile
# ============================================================

@router.get("/profile", response_model=ProfileResponse)
async def get_profile(claims: dict = Depends(require_token)):
    """Return the account behind the bearer token, whichever type it is."""
    account_type = claims["type"]
    async with async_session() as session:
        if account_type == "customer":
            customer = await get_customer_by_id(session, claims["sub"])
            if not customer:
                raise HTTPException(status_code=404, detail="Customer not found")
            return ProfileResponse(type="customer", user=CustomerProfile.from_customer(customer))

        if account_type == "provider":
            provider = await get_provider_by_id(session, claims["sub"])
            if not provider:
                raise HTTPException(status_code=404, detail="Provider not found")
            return ProfileResponse(type="provider", user=ProviderProfile.from_provider(provider))

    raise HTTPException(status_code=400, detail="Invalid token type")
