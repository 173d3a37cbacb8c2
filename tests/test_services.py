"""Tests for security, scheduling and insight helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest
from jose import jwt

from leadhub.config import settings
from leadhub.services.insights import (
    build_recommendations,
    conversion_rate,
    count_hot_pending,
    score_distribution,
)
from leadhub.services.scheduling import available_slots, day_bounds, format_hour
from leadhub.services.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswords:
    def test_round_trip(self):
        stored = hash_password("hunter22", iterations=1000)
        assert stored.startswith("pbkdf2_sha256$1000$")
        assert verify_password("hunter22", stored)
        assert not verify_password("hunter23", stored)

    def test_salted(self):
        assert hash_password("same", iterations=1000) != hash_password("same", iterations=1000)

    @pytest.mark.parametrize("stored", ["", "plain-text", "md5$1$aa$bb"])
    def test_unknown_formats_rejected(self, stored):
        assert not verify_password("anything", stored)


class TestTokens:
    def test_round_trip(self):
        token = create_access_token("abc-123", "provider")
        claims = decode_access_token(token)
        assert claims["sub"] == "abc-123"
        assert claims["type"] == "provider"

    def test_expired_token_rejected(self):
        token = create_access_token("abc", "customer", expires_in=timedelta(seconds=-5))
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_foreign_signature_rejected(self):
        token = jwt.encode({"sub": "abc", "type": "provider"}, "some-other-secret-key", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_missing_type_rejected(self):
        token = jwt.encode({"sub": "abc"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidTokenError):
            decode_access_token("not.a.token")


class TestScheduling:
    def test_format_hour(self):
        assert format_hour(9) == "9:00 AM"
        assert format_hour(12) == "12:00 PM"
        assert format_hour(16) == "4:00 PM"

    def test_day_bounds(self):
        start, end = day_bounds(date(2026, 10, 20))
        assert start == datetime(2026, 10, 20, tzinfo=timezone.utc)
        assert end - start == timedelta(days=1)

    def test_all_slots_free(self):
        slots = available_slots(date(2026, 10, 20), [])
        assert [s["display"] for s in slots] == [
            "9:00 AM", "10:00 AM", "11:00 AM", "12:00 PM",
            "1:00 PM", "2:00 PM", "3:00 PM", "4:00 PM",
        ]
        assert slots[0]["time"] == "2026-10-20T09:00:00+00:00"

    def test_booked_hours_removed(self):
        booked = [
            datetime(2026, 10, 20, 10, 30, tzinfo=timezone.utc),
            datetime(2026, 10, 20, 14, 0),  # naive, read as UTC
        ]
        displays = [s["display"] for s in available_slots(date(2026, 10, 20), booked)]
        assert "10:00 AM" not in displays
        assert "2:00 PM" not in displays
        assert len(displays) == 6


class _Lead:
    def __init__(self, service_type="other", status="pending", **extra):
        self.message = None
        self.service_type = service_type
        self.source = "website"
        self.appointment_booked = False
        self.created_at = datetime.now(timezone.utc)
        self.status = status
        self.email = "a@b.co"
        self.phone = "5551234567"
        self.__dict__.update(extra)


class TestInsights:
    def test_distribution_counts_every_lead(self):
        leads = [_Lead(), _Lead("hvac"), _Lead("plumbing", appointment_booked=True)]
        distribution = score_distribution(leads, submitted_quickly=True, opened_follow_up=True)
        # 4, 6, 7 points
        assert distribution == {"hot": 0, "warm": 2, "cold": 1}

    def test_hot_pending_ignores_other_statuses(self):
        hot = dict(
            service_type="plumbing",
            appointment_booked=True,
            message=" ".join(["w"] * 25),
        )
        leads = [_Lead(**hot), _Lead(status="contacted", **hot)]
        assert count_hot_pending(leads, submitted_quickly=True, opened_follow_up=True) == 1

    def test_scoring_does_not_mutate(self):
        lead = _Lead()
        lead.score = 3
        score_distribution([lead], submitted_quickly=True, opened_follow_up=True)
        assert lead.score == 3

    def test_recommendations_only_for_nonzero(self):
        assert build_recommendations(0, 0, 0) == []
        assert build_recommendations(2, 0, 1) == [
            "You have 2 hot leads that need immediate attention",
            "1 leads are ready for follow-up",
        ]

    def test_conversion_rate(self):
        assert conversion_rate(0, 0) == 0.0
        assert conversion_rate(1, 3) == 33.3
