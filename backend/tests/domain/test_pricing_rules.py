"""
计价规则单元测试
"""
import pytest
from datetime import date, datetime
from decimal import Decimal

from app.models.ontology import RoomType, RateSeason
from app.lodge.domain.rules.pricing_rules import (
    calculate_booking_amount, count_nights, nightly_rate_for, round_money,
    suggest_room_pricing, estimate_monthly_room_revenue,
)


class TestCalculateBookingAmount:
    """预订金额计算"""

    def test_breakdown_with_discount_tax_and_extras(self):
        price = calculate_booking_amount(
            100, date(2025, 1, 1), date(2025, 1, 4),
            discount_percent=10, extra_charges=20, tax_rate=Decimal("0.15"),
        )
        assert price.nights == 3
        assert price.subtotal == Decimal("300.00")
        assert price.discount_amount == Decimal("30.00")
        assert price.taxes == Decimal("40.50")
        assert price.extra_charges == Decimal("20.00")
        assert price.total == Decimal("330.50")

    def test_default_tax_rate_from_settings(self):
        from app.config import settings
        price = calculate_booking_amount(200, date(2025, 3, 1), date(2025, 3, 3))
        assert price.taxes == round_money(Decimal("400") * settings.DEFAULT_TAX_RATE)

    def test_total_equals_parts(self):
        price = calculate_booking_amount(
            Decimal("133.33"), date(2025, 5, 1), date(2025, 5, 8),
            discount_percent=Decimal("12.5"), extra_charges=Decimal("7.77"), tax_rate=Decimal("0.155"),
        )
        assert abs(price.subtotal - price.discount_amount + price.taxes + price.extra_charges - price.total) <= Decimal("0.02")

    def test_zero_discount_zero_tax(self):
        price = calculate_booking_amount(150, date(2025, 6, 1), date(2025, 6, 3), tax_rate=0)
        assert price.discount_amount == Decimal("0.00")
        assert price.taxes == Decimal("0.00")
        assert price.total == Decimal("300.00")

    def test_full_discount(self):
        price = calculate_booking_amount(150, date(2025, 6, 1), date(2025, 6, 3),
                                         discount_percent=100, extra_charges=15, tax_rate=Decimal("0.15"))
        assert price.total == Decimal("15.00")

    def test_float_inputs_do_not_leak_binary_error(self):
        price = calculate_booking_amount(0.1, date(2025, 1, 1), date(2025, 1, 4), tax_rate=0)
        assert price.subtotal == Decimal("0.30")

    def test_non_positive_stay_is_not_rejected_here(self):
        price = calculate_booking_amount(100, date(2025, 1, 4), date(2025, 1, 4), tax_rate=0)
        assert price.nights == 0
        assert price.total == Decimal("0.00")

    def test_to_dict(self):
        data = calculate_booking_amount(100, date(2025, 1, 1), date(2025, 1, 2), tax_rate=0).to_dict()
        assert set(data) == {"nights", "subtotal", "discount_amount", "taxes", "extra_charges", "total"}


class TestCountNights:
    """晚数计算"""

    def test_dates(self):
        assert count_nights(date(2025, 2, 1), date(2025, 2, 5)) == 4

    def test_partial_day_rounds_up(self):
        assert count_nights(datetime(2025, 2, 1, 14), datetime(2025, 2, 2, 16)) == 2

    def test_mixed_date_and_datetime(self):
        assert count_nights(date(2025, 2, 1), datetime(2025, 2, 2, 10)) == 2


class TestRates:
    """季节价格与定价建议"""

    def test_nightly_rate_by_season(self):
        pricing = {"normal": "100", "busy": "150", "slow": "80"}
        assert nightly_rate_for(pricing, RateSeason.BUSY) == Decimal("150")
        assert nightly_rate_for(pricing, "slow") == Decimal("80")

    def test_missing_season_falls_back_to_normal(self):
        assert nightly_rate_for({"normal": 120}, RateSeason.BUSY) == Decimal("120")

    def test_suggest_room_pricing(self):
        assert suggest_room_pricing(RoomType.SUITE, 100) == {
            "normal": Decimal("200"), "busy": Decimal("260"), "slow": Decimal("160"),
        }

    @pytest.mark.parametrize("room_type", list(RoomType))
    def test_busy_never_below_slow(self, room_type):
        pricing = suggest_room_pricing(room_type, 150)
        assert pricing["slow"] <= pricing["normal"] <= pricing["busy"]

    def test_estimate_monthly_revenue(self):
        # 50% × 30 天 = 15 天
        assert estimate_monthly_room_revenue({"normal": "100"}, 50) == Decimal("1500.00")
