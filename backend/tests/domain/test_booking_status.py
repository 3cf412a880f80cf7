"""
预订状态机单元测试
"""
import pytest
from datetime import date, datetime
from types import SimpleNamespace

from app.models.ontology import BookingStatus, PaymentStatus
from app.lodge.domain.booking import BookingStatusMachine, apply_transition

NOW = datetime(2025, 2, 1, 9, 30)


def _booking(status, check_in=date(2025, 2, 10)):
    return SimpleNamespace(id="B1", status=status, check_in=check_in, payment_status=PaymentStatus.PENDING)


@pytest.fixture
def machine():
    return BookingStatusMachine()


class TestBookingStatusMachine:
    """状态转换"""

    @pytest.mark.parametrize("current,target", [
        (BookingStatus.PENDING, BookingStatus.CONFIRMED),
        (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN),
        (BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT),
        (BookingStatus.PENDING, BookingStatus.CANCELLED),
        (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    ])
    def test_allowed_transitions(self, machine, current, target):
        result = machine.transition(_booking(current), target, "staff_1", now=NOW)
        assert result.success
        assert result.status == target
        assert result.changes["status"] == target
        assert result.changes["last_modified_by"] == "staff_1"
        assert result.changes["updated_at"] == NOW

    @pytest.mark.parametrize("current,target", [
        (BookingStatus.PENDING, BookingStatus.CHECKED_IN),
        (BookingStatus.CHECKED_OUT, BookingStatus.CHECKED_IN),
        (BookingStatus.CHECKED_IN, BookingStatus.CANCELLED),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED),
    ])
    def test_rejected_transitions(self, machine, current, target):
        result = machine.transition(_booking(current), target, "staff_1", now=NOW)
        assert not result.success
        assert result.status == current
        assert result.changes == {}
        assert result.error

    def test_cancel_checked_out_fails(self, machine):
        result = machine.transition(_booking(BookingStatus.CHECKED_OUT), BookingStatus.CANCELLED, "staff_1", now=NOW)
        assert not result.success
        assert "已退房" in result.error

    def test_check_out_marks_paid(self, machine):
        result = machine.transition(_booking(BookingStatus.CHECKED_IN), BookingStatus.CHECKED_OUT, "staff_1", now=NOW)
        assert result.changes["payment_status"] == PaymentStatus.PAID
        assert result.changes["check_out_time"] == NOW

    def test_check_in_stamps_time(self, machine):
        result = machine.transition(_booking(BookingStatus.CONFIRMED), BookingStatus.CHECKED_IN, "staff_1", now=NOW)
        assert result.changes["check_in_time"] == NOW

    def test_cancel_records_reason(self, machine):
        result = machine.transition(_booking(BookingStatus.PENDING), BookingStatus.CANCELLED, "staff_1",
                                    now=NOW, reason="Guest changed plans")
        assert result.changes["cancellation_reason"] == "Guest changed plans"

    def test_late_cancel_warns_but_succeeds(self, machine):
        booking = _booking(BookingStatus.CONFIRMED, check_in=date(2025, 2, 2))
        result = machine.transition(booking, BookingStatus.CANCELLED, "staff_1", now=NOW)
        assert result.success
        assert "deadline" in result.warnings

    def test_transition_does_not_modify_booking(self, machine):
        booking = _booking(BookingStatus.PENDING)
        machine.transition(booking, BookingStatus.CONFIRMED, "staff_1", now=NOW)
        assert booking.status == BookingStatus.PENDING

    def test_apply_transition(self, machine):
        booking = _booking(BookingStatus.CHECKED_IN)
        apply_transition(booking, machine.transition(booking, BookingStatus.CHECKED_OUT, "staff_1", now=NOW))
        assert booking.status == BookingStatus.CHECKED_OUT
        assert booking.payment_status == PaymentStatus.PAID

    def test_apply_failed_transition_raises(self, machine):
        booking = _booking(BookingStatus.CANCELLED)
        result = machine.transition(booking, BookingStatus.CONFIRMED, "staff_1", now=NOW)
        with pytest.raises(ValueError):
            apply_transition(booking, result)

    def test_available_targets(self, machine):
        assert set(machine.available_targets(_booking(BookingStatus.PENDING))) == {
            BookingStatus.CONFIRMED, BookingStatus.CANCELLED,
        }
        assert machine.available_targets(_booking(BookingStatus.CHECKED_OUT)) == []

    def test_initial_status(self, machine):
        assert machine.initial_status() == BookingStatus.PENDING


class _SkewedClock(datetime):
    """本地时间已过取消截止，UTC 时间尚未到"""

    @classmethod
    def now(cls, tz=None):
        return cls(2025, 2, 9, 12)

    @classmethod
    def utcnow(cls):
        return cls(2025, 2, 8, 12)


def test_default_clock_is_utc_for_both_entry_points(machine, monkeypatch):
    from app.lodge.domain import booking as booking_module
    from app.lodge.domain.rules import booking_rules

    monkeypatch.setattr(booking_rules, "datetime", _SkewedClock)
    monkeypatch.setattr(booking_module, "datetime", _SkewedClock)

    confirmed = _booking(BookingStatus.CONFIRMED)
    assert booking_rules.validate_cancellation(confirmed).warnings == {}
    result = machine.transition(confirmed, BookingStatus.CANCELLED, "staff_1")
    assert result.success
    assert result.warnings == {}
