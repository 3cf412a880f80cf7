"""
app/lodge/domain/rules/pricing_rules.py

定价规则

- 住宿晚数、小计、折扣、税费、总价计算
- 按季节档位取房价
- 按房型给出建议价格
- 月度房间收入估算
"""
import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Mapping, Optional, Union

from app.config import settings
from app.models.ontology import RoomType, RateSeason
import logging

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
DAYS_IN_MONTH = 30

Number = Union[int, float, str, Decimal]

# 房型 -> 各季节相对市场价的倍数
ROOM_TYPE_MULTIPLIERS: Dict[RoomType, Dict[RateSeason, Decimal]] = {
    RoomType.STANDARD: {
        RateSeason.NORMAL: Decimal("1.0"), RateSeason.BUSY: Decimal("1.3"), RateSeason.SLOW: Decimal("0.8"),
    },
    RoomType.DELUXE: {
        RateSeason.NORMAL: Decimal("1.4"), RateSeason.BUSY: Decimal("1.8"), RateSeason.SLOW: Decimal("1.1"),
    },
    RoomType.SUITE: {
        RateSeason.NORMAL: Decimal("2.0"), RateSeason.BUSY: Decimal("2.6"), RateSeason.SLOW: Decimal("1.6"),
    },
    RoomType.FAMILY: {
        RateSeason.NORMAL: Decimal("1.6"), RateSeason.BUSY: Decimal("2.1"), RateSeason.SLOW: Decimal("1.3"),
    },
    RoomType.EXECUTIVE: {
        RateSeason.NORMAL: Decimal("1.8"), RateSeason.BUSY: Decimal("2.3"), RateSeason.SLOW: Decimal("1.4"),
    },
}


@dataclass(frozen=True)
class PriceBreakdown:
    """价格明细"""
    nights: int
    subtotal: Decimal
    discount_amount: Decimal
    taxes: Decimal
    extra_charges: Decimal
    total: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nights": self.nights,
            "subtotal": self.subtotal,
            "discount_amount": self.discount_amount,
            "taxes": self.taxes,
            "extra_charges": self.extra_charges,
            "total": self.total,
        }


def to_decimal(value: Number) -> Decimal:
    """转换为 Decimal，float 先转字符串避免二进制误差"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Decimal) -> Decimal:
    """四舍五入到分"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def count_nights(check_in: Union[date, datetime], check_out: Union[date, datetime]) -> int:
    """
    计算住宿晚数

    日期按整天相减；带时间的值不足一天按一天计（向上取整）。
    结果可能 <= 0，由校验器负责拦截。
    """
    if isinstance(check_in, datetime) or isinstance(check_out, datetime):
        start = check_in if isinstance(check_in, datetime) else datetime.combine(check_in, datetime.min.time())
        end = check_out if isinstance(check_out, datetime) else datetime.combine(check_out, datetime.min.time())
        return math.ceil((end - start).total_seconds() / 86400)
    return (check_out - check_in).days


def calculate_booking_amount(
    room_rate: Number,
    check_in: Union[date, datetime],
    check_out: Union[date, datetime],
    guests: int = 1,
    discount_percent: Number = 0,
    extra_charges: Number = 0,
    tax_rate: Optional[Number] = None,
) -> PriceBreakdown:
    """
    计算预订金额

    Args:
        room_rate: 每晚房价
        check_in: 入住日期
        check_out: 离店日期
        guests: 客人数（当前不参与计价）
        discount_percent: 折扣百分比 0-100
        extra_charges: 额外费用
        tax_rate: 税率，默认取配置

    Returns:
        PriceBreakdown
    """
    if tax_rate is None:
        tax_rate = settings.DEFAULT_TAX_RATE

    rate = to_decimal(room_rate)
    pct = to_decimal(discount_percent)
    extras = to_decimal(extra_charges)
    tax = to_decimal(tax_rate)

    nights = count_nights(check_in, check_out)
    subtotal = rate * nights
    discount_amount = subtotal * pct / Decimal("100")
    taxes = (subtotal - discount_amount) * tax
    total = subtotal - discount_amount + taxes + extras

    return PriceBreakdown(
        nights=nights,
        subtotal=round_money(subtotal),
        discount_amount=round_money(discount_amount),
        taxes=round_money(taxes),
        extra_charges=round_money(extras),
        total=round_money(total),
    )


def nightly_rate_for(pricing: Mapping[str, Number], season: Union[RateSeason, str] = RateSeason.NORMAL) -> Decimal:
    """按季节档位取房价，缺失档位回落到平季价"""
    key = season.value if isinstance(season, RateSeason) else str(season)
    value = pricing.get(key)
    if value is None:
        value = pricing.get(RateSeason.NORMAL.value, 0)
    return to_decimal(value)


def suggest_room_pricing(room_type: Union[RoomType, str], market_rate: Number = 100) -> Dict[str, Decimal]:
    """按房型倍数给出三档建议价格，取整到元"""
    multipliers = ROOM_TYPE_MULTIPLIERS[RoomType(room_type)]
    base = to_decimal(market_rate)
    return {
        season.value: (base * factor).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        for season, factor in multipliers.items()
    }


def estimate_monthly_room_revenue(
    pricing: Mapping[str, Number],
    occupancy_rate: Number,
    season: Union[RateSeason, str] = RateSeason.NORMAL,
) -> Decimal:
    """估算单个房间 30 天的收入：房价 × 入住天数"""
    occupied_days = (to_decimal(occupancy_rate) / Decimal("100") * DAYS_IN_MONTH).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return round_money(nightly_rate_for(pricing, season) * occupied_days)


__all__ = [
    "PriceBreakdown",
    "ROOM_TYPE_MULTIPLIERS",
    "to_decimal",
    "round_money",
    "count_nights",
    "calculate_booking_amount",
    "nightly_rate_for",
    "suggest_room_pricing",
    "estimate_monthly_room_revenue",
]
