"""Unit tests for delivery risk classification

Tests cover:
- Tier boundaries (1, 13, 14, 30, 31 days overdue)
- Future, same-day and missing delivery dates
- Unparseable dates
- Dates that overflow when converted to UTC
- Default evaluation instant
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from orderlink.domain.risk import RiskLevel, RiskAssessment, classify_risk, days_overdue, risk_rank

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def overdue_by(days, hours=0):
    return NOW - timedelta(days=days, hours=hours)


class TestRiskTiers:
    """Risk level by whole days overdue"""

    @pytest.mark.parametrize("days,expected", [
        (1, RiskLevel.LOW),
        (13, RiskLevel.LOW),
        (14, RiskLevel.MEDIUM),
        (30, RiskLevel.MEDIUM),
        (31, RiskLevel.HIGH),
        (365, RiskLevel.HIGH),
    ])
    def test_boundaries(self, days, expected):
        assessment = classify_risk(overdue_by(days), NOW)

        assert assessment.level == expected
        assert assessment.days_overdue == days
        assert assessment.is_at_risk

    def test_partial_day_is_floored(self):
        """13 days and 23 hours is still 13 whole days"""
        assessment = classify_risk(overdue_by(13, hours=23), NOW)

        assert assessment.days_overdue == 13
        assert assessment.level == RiskLevel.LOW

    def test_medium_example(self):
        assessment = classify_risk("2025-06-01", "2025-06-15")

        assert assessment == RiskAssessment(level=RiskLevel.MEDIUM, days_overdue=14)


class TestNotOverdue:
    """Orders that are not overdue get no level"""

    def test_future_delivery_date(self):
        assert classify_risk(NOW + timedelta(days=5), NOW) == RiskAssessment()

    def test_due_today_less_than_a_day_ago(self):
        assessment = classify_risk(NOW - timedelta(hours=23), NOW)

        assert assessment.level is None
        assert assessment.days_overdue is None
        assert not assessment.is_at_risk

    def test_missing_delivery_date(self):
        assert classify_risk(None, NOW) == RiskAssessment()

    @pytest.mark.parametrize("value", ["", "soon", "2025-13-45", True])
    def test_invalid_delivery_date(self, value):
        assert classify_risk(value, NOW) == RiskAssessment()

    @pytest.mark.parametrize("value", ["9999-12-31T23:00:00-05:00", "0001-01-01T00:30:00+01:00"])
    def test_delivery_date_out_of_range_in_utc(self, value):
        assert classify_risk(value, "2025-06-15") == RiskAssessment()

    def test_evaluation_instant_out_of_range_in_utc(self):
        assert classify_risk("2025-06-01", "9999-12-31T23:00:00-05:00") == RiskAssessment()


class TestDateInputs:
    """Accepted delivery date shapes"""

    def test_plain_date(self):
        assert classify_risk(date(2025, 5, 1), NOW).level == RiskLevel.HIGH

    def test_norwegian_format(self):
        assert classify_risk("01.06.2025", NOW).days_overdue == 14

    def test_naive_datetime_treated_as_utc(self):
        assessment = classify_risk(datetime(2025, 6, 10, 12, 0), NOW)

        assert assessment.days_overdue == 5

    def test_default_now_uses_current_time(self):
        delivery = datetime.now(timezone.utc) - timedelta(days=40)

        assert classify_risk(delivery).level == RiskLevel.HIGH


class TestHelpers:

    def test_days_overdue_negative_for_future(self):
        assert days_overdue(NOW + timedelta(days=3), NOW) == -3

    def test_days_overdue_none_for_missing(self):
        assert days_overdue(None, NOW) is None

    def test_risk_rank_orders_levels(self):
        assert risk_rank(RiskLevel.HIGH) > risk_rank(RiskLevel.MEDIUM) > risk_rank(RiskLevel.LOW) > risk_rank(None)

    def test_risk_rank_accepts_values(self):
        assert risk_rank("high") == risk_rank(RiskLevel.HIGH)
        assert risk_rank("unknown") == 0
