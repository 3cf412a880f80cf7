"""
app/lodge/domain - 营地领域层

- booking: 预订状态机
- inventory: 营地库存统计
- interfaces / repositories: 仓储接口与 SQLAlchemy 实现
- rules: 定价、预订、营地表单规则
"""
from app.lodge.domain.booking import BookingStatusMachine, TransitionResult, apply_transition
from app.lodge.domain.inventory import (
    LodgeStats,
    recompute_lodge_stats,
    apply_lodge_stats,
    tally_room_statuses,
    portfolio_occupancy,
)

__all__ = [
    "BookingStatusMachine",
    "TransitionResult",
    "apply_transition",
    "LodgeStats",
    "recompute_lodge_stats",
    "apply_lodge_stats",
    "tally_room_statuses",
    "portfolio_occupancy",
]
