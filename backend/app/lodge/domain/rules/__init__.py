"""
app/lodge/domain/rules/ - 营地业务规则模块

- 定价规则（晚数、折扣、税费、季节价格）
- 预订规则（字段校验、冲突检测、收款、取消）
- 营地/房间表单规则
"""
from app.lodge.domain.rules.pricing_rules import (
    PriceBreakdown,
    calculate_booking_amount,
    nightly_rate_for,
    suggest_room_pricing,
    estimate_monthly_room_revenue,
)
from app.lodge.domain.rules.booking_rules import (
    BookingDraft,
    BookingValidationError,
    CancellationCheck,
    validate_booking_fields,
    validate_booking_conflicts,
    validate_payment,
    validate_cancellation,
    cancellation_deadline_for,
)
from app.lodge.domain.rules.lodge_rules import (
    validate_lodge_form,
    validate_room_form,
    validate_room_number,
    capacity_from_beds,
    suggest_room_numbers,
)

__all__ = [
    "PriceBreakdown",
    "calculate_booking_amount",
    "nightly_rate_for",
    "suggest_room_pricing",
    "estimate_monthly_room_revenue",
    "BookingDraft",
    "BookingValidationError",
    "CancellationCheck",
    "validate_booking_fields",
    "validate_booking_conflicts",
    "validate_payment",
    "validate_cancellation",
    "cancellation_deadline_for",
    "validate_lodge_form",
    "validate_room_form",
    "validate_room_number",
    "capacity_from_beds",
    "suggest_room_numbers",
]
