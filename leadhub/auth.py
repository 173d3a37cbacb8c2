"""
Bearer-token authentication dependencies.

Tokens carry ``type`` (provider|customer); each dependency only admits its
own account type and loads the account row.
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from leadhub.db.models import Customer, Provider
from leadhub.db.repository import get_customer_by_id, get_provider_by_id
from leadhub.db.session import async_session
from leadhub.services.security import InvalidTokenError, decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def require_token(creds: HTTPAuthorizationCredentials | None = Depends(security)) -> dict:
    """Return verified token claims or raise 401."""
    if not creds or creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required")
    try:
        return decode_access_token(creds.credentials)
    except InvalidTokenError as e:
        logger.warning("Rejected access token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token"
        ) from e


async def get_current_provider(claims: dict = Depends(require_token)) -> Provider:
    if claims["type"] != "provider":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Provider access required")
    async with async_session() as session:
        provider = await get_provider_by_id(session, claims["sub"])
    if not provider:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Provider not found")
    return provider


async def get_current_customer(claims: dict = Depends(require_token)) -> Customer:
    if claims["type"] != "customer":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Customer access required")
    async with async_session() as session:
        customer = await get_customer_by_id(session, claims["sub"])
    if not customer:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Customer not found")
    return customer
