"""
Password hashing and JWT access tokens.

Passwords: PBKDF2-HMAC-SHA256, stored as ``pbkdf2_sha256$<rounds>$<salt>$<hash>``.
Tokens: HS256 with ``sub`` (account id), ``type`` (provider|customer), ``exp``.
"""

import hashlib
import hmac
import os
from datetime import timedelta
from typing import Literal

from jose import JWTError, jwt

from leadhub.config import settings
from leadhub.services.clock import utcnow

AccountType = Literal["provider", "customer"]

_SCHEME = "pbkdf2_sha256"


class InvalidTokenError(Exception):
    """Token is malformed, expired, or signed with another key."""


def hash_password(password: str, *, iterations: int | None = None) -> str:
    iterations = iterations or settings.password_hash_iterations
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{_SCHEME}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt_hex, digest_hex = stored.split("$")
    except ValueError:
        return False
    if scheme != _SCHEME:
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), bytes.fromhex(salt_hex), int(iterations)
    )
    return hmac.compare_digest(digest.hex(), digest_hex)


def create_access_token(
    account_id: str, account_type: AccountType, *, expires_in: timedelta | None = None
) -> str:
    expires_in = expires_in if expires_in is not None else timedelta(days=settings.jwt_expire_days)
    claims = {
        "sub": str(account_id),
        "type": account_type,
        "exp": utcnow() + expires_in,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry; raise InvalidTokenError otherwise."""
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e
    if not claims.get("sub") or not claims.get("type"):
        raise InvalidTokenError("Token is missing subject or type")
    return claims
