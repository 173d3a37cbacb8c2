"""Helpers shared by the routers."""

import math
from uuid import UUID

from fastapi import HTTPException


def validate_uuid(value: str, label: str = "ID") -> None:
    try:
        UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} format.")


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
