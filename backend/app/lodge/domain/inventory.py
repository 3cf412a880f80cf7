"""
app/lodge/domain/inventory.py

营地库存统计

total_rooms = 房间数
available_rooms = 状态为 available 的房间数
occupancy_rate = (total_rooms - available_rooms) / total_rooms * 100，无房间时为 0

房间增删或状态变更后调用 apply_lodge_stats，重复调用结果不变。
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable

from app.models.ontology import RoomStatus
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LodgeStats:
    """营地派生统计"""
    total_rooms: int
    available_rooms: int
    occupancy_rate: float


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, RoomStatus) else str(status)


def compute_stats(rooms: Iterable[Any]) -> LodgeStats:
    """按房间列表计算统计"""
    rooms = list(rooms)
    total = len(rooms)
    available = sum(1 for r in rooms if _status_value(r.status) == RoomStatus.AVAILABLE.value)
    rate = (total - available) * 100 / total if total else 0.0
    return LodgeStats(total_rooms=total, available_rooms=available, occupancy_rate=rate)


def recompute_lodge_stats(lodge: Any) -> LodgeStats:
    """计算营地统计，不修改营地"""
    return compute_stats(lodge.rooms or [])


def apply_lodge_stats(lodge: Any) -> LodgeStats:
    """重新计算并写回营地的派生字段"""
    stats = recompute_lodge_stats(lodge)
    lodge.total_rooms = stats.total_rooms
    lodge.available_rooms = stats.available_rooms
    lodge.occupancy_rate = stats.occupancy_rate
    logger.debug(
        f"Lodge {lodge.id} stats: {stats.available_rooms}/{stats.total_rooms} available, "
        f"{stats.occupancy_rate}% occupied"
    )
    return stats


def tally_room_statuses(rooms: Iterable[Any]) -> Dict[str, int]:
    """按状态统计房间数，所有状态都有键"""
    tally = {s.value: 0 for s in RoomStatus}
    for room in rooms:
        tally[_status_value(room.status)] += 1
    return tally


def portfolio_occupancy(lodges: Iterable[Any]) -> float:
    """多个营地合计的入住率"""
    total = 0
    available = 0
    for lodge in lodges:
        stats = recompute_lodge_stats(lodge)
        total += stats.total_rooms
        available += stats.available_rooms
    return (total - available) * 100 / total if total else 0.0


__all__ = [
    "LodgeStats",
    "compute_stats",
    "recompute_lodge_stats",
    "apply_lodge_stats",
    "tally_room_statuses",
    "portfolio_occupancy",
]
