"""
Lead scoring engine.

Additive point system over a lead snapshot, clamped to 0-10 once at the end.
Two behavioral signals (fast form submission, opened follow-up) are not
captured in stored data; callers may pass them explicitly, otherwise they are
drawn at random with fixed probabilities.
"""

import random
import re
from datetime import datetime, timedelta
from typing import Literal, NamedTuple, Protocol

from pydantic import BaseModel, ConfigDict, field_validator

from leadhub.services.clock import as_utc, utcnow

Category = Literal["hot", "warm", "cold"]

MIN_SCORE = 0
MAX_SCORE = 10
HOT_THRESHOLD = 8
WARM_THRESHOLD = 5

FAST_SUBMISSION_PROBABILITY = 0.3
OPENED_FOLLOW_UP_PROBABILITY = 0.4
DETAILED_MESSAGE_MIN_WORDS = 21
STALE_AFTER = timedelta(days=3)

HIGH_VALUE_SERVICES = frozenset({"plumbing", "electrical", "hvac", "renovation"})
HIGH_INTENT_SOURCES = frozenset({"referral", "instagram"})

# (signal name, points)
SIGNAL_POINTS = {
    "fast_submission": 3,
    "detailed_message": 2,
    "high_value_service": 2,
    "high_intent_source": 1,
    "instant_booking": 1,
    "opened_follow_up": 1,
    "stale_unanswered": -2,
    "bad_contact_info": -1,
}

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_FORMATTED_PHONE_RE = re.compile(r"\(\d{3}\)\s\d{3}-\d{4}", re.ASCII)
_NON_DIGITS_RE = re.compile(r"\D", re.ASCII)

_system_random = random.SystemRandom()


class RandomSource(Protocol):
    def random(self) -> float: ...


class LeadSnapshot(BaseModel):
    """Immutable view of the lead attributes the engine reads."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    message: str | None = None
    service_type: str
    source: str = "website"
    appointment_booked: bool = False
    created_at: datetime | None = None
    status: str = "pending"
    email: str | None = None
    phone: str | None = None

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _garbled_contact_is_missing(cls, value):
        return value if isinstance(value, str) else None


class ScoreResult(NamedTuple):
    score: int
    category: Category
    signals: tuple[str, ...]


def is_valid_email(email: str | None) -> bool:
    return bool(email) and _EMAIL_RE.fullmatch(email) is not None


def is_valid_phone(phone: str | None) -> bool:
    """Accept "(NNN) NNN-NNNN" or anything with exactly ten digits."""
    if not isinstance(phone, str):
        return False
    if _FORMATTED_PHONE_RE.fullmatch(phone):
        return True
    return len(_NON_DIGITS_RE.sub("", phone)) == 10


def score_category(score: int) -> Category:
    if score >= HOT_THRESHOLD:
        return "hot"
    if score >= WARM_THRESHOLD:
        return "warm"
    return "cold"


def score_lead(
    lead: LeadSnapshot,
    *,
    submitted_quickly: bool | None = None,
    opened_follow_up: bool | None = None,
    rng: RandomSource | None = None,
    now: datetime | None = None,
) -> ScoreResult:
    """
    Score a lead snapshot.

    Behavioral flags left as None are drawn from ``rng`` (fast submission
    first, then follow-up). The default source is a SystemRandom instance, so
    parallel callers never share generator state. Pinning both flags makes the
    result a pure function of the snapshot and ``now``.
    """
    rng = rng or _system_random
    now = as_utc(now) if now else utcnow()

    if submitted_quickly is None:
        submitted_quickly = rng.random() < FAST_SUBMISSION_PROBABILITY
    if opened_follow_up is None:
        opened_follow_up = rng.random() < OPENED_FOLLOW_UP_PROBABILITY

    fired = []
    if submitted_quickly:
        fired.append("fast_submission")
    if lead.message and len(lead.message.split()) >= DETAILED_MESSAGE_MIN_WORDS:
        fired.append("detailed_message")
    if lead.service_type in HIGH_VALUE_SERVICES:
        fired.append("high_value_service")
    if lead.source in HIGH_INTENT_SOURCES:
        fired.append("high_intent_source")
    if lead.appointment_booked:
        fired.append("instant_booking")
    if opened_follow_up:
        fired.append("opened_follow_up")
    if (
        lead.created_at is not None
        and as_utc(lead.created_at) < now - STALE_AFTER
        and lead.status == "pending"
    ):
        fired.append("stale_unanswered")
    if not is_valid_email(lead.email) or not is_valid_phone(lead.phone):
        fired.append("bad_contact_info")

    total = sum(SIGNAL_POINTS[name] for name in fired)
    score = max(MIN_SCORE, min(MAX_SCORE, total))
    return ScoreResult(score=score, category=score_category(score), signals=tuple(fired))


def score_record(record, **kwargs) -> ScoreResult:
    """Score any object exposing lead attributes (ORM row, schema, ...)."""
    return score_lead(LeadSnapshot.model_validate(record), **kwargs)
