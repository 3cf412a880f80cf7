"""
营地服务 - 本体操作层
管理 Lodge 和 Room 对象

房间增删或状态变更后，在同一事务内重算营地派生统计。
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.models.ontology import Lodge, Room, RoomStatus, Employee
from app.models.schemas import LodgeCreate, LodgeUpdate, RoomCreate, RoomUpdate
from app.lodge.domain.interfaces import LodgeRepository
from app.lodge.domain.inventory import apply_lodge_stats, tally_room_statuses
from app.lodge.domain.repositories import SqlLodgeRepository
from app.lodge.domain.rules.booking_rules import BookingValidationError, EntityNotFoundError
from app.lodge.domain.rules.lodge_rules import (
    validate_lodge_form, validate_room_form, validate_room_number,
    capacity_from_beds, suggest_room_numbers,
)
from app.lodge.security.access import ensure_lodge_access, filter_lodges
from app.lodge.services.pagination import paginate

logger = logging.getLogger(__name__)


@dataclass
class LodgeFilters:
    """营地列表过滤条件"""
    is_active: Optional[bool] = None
    location: Optional[str] = None        # 匹配城市或名称
    amenities: List[str] = field(default_factory=list)  # 任一匹配

    def matches(self, lodge: Lodge) -> bool:
        if self.is_active is not None and bool(lodge.is_active) != self.is_active:
            return False
        if self.location:
            keyword = self.location.lower()
            city = (lodge.address or {}).get("city", "")
            if keyword not in city.lower() and keyword not in lodge.name.lower():
                return False
        if self.amenities and not any(a in (lodge.amenities or []) for a in self.amenities):
            return False
        return True


class LodgeService:
    """营地服务"""

    def __init__(self, db: Session, lodges: Optional[LodgeRepository] = None):
        self.db = db
        self.lodges = lodges or SqlLodgeRepository(db)

    # ============== 营地 ==============

    def list_lodges(self, user: Employee, filters: Optional[LodgeFilters] = None,
                    page: int = 1) -> Dict[str, Any]:
        """获取营地列表，附带过滤后全部房间的状态统计"""
        filters = filters or LodgeFilters()
        matched = [lodge for lodge in filter_lodges(user, self.lodges.list_all()) if filters.matches(lodge)]
        items, pagination = paginate(matched, page, settings.LODGES_PAGE_SIZE)
        return {
            "lodges": items,
            "pagination": pagination,
            "room_statuses": tally_room_statuses(room for lodge in matched for room in lodge.rooms),
        }

    def get_lodge(self, user: Employee, lodge_id: str) -> Lodge:
        """获取营地，不存在抛 EntityNotFoundError，越权抛 PermissionError"""
        lodge = self.lodges.get(lodge_id)
        if not lodge:
            raise EntityNotFoundError("营地不存在")
        ensure_lodge_access(user, lodge.id)
        return lodge

    def create_lodge(self, user: Employee, data: LodgeCreate) -> Lodge:
        """创建营地，房间为空，统计为 0"""
        errors = validate_lodge_form(data)
        if errors:
            raise BookingValidationError(errors, "营地信息校验失败")

        lodge = Lodge(
            name=data.name.strip(),
            description=data.description,
            address=data.address.model_dump(),
            contact=data.contact.model_dump(),
            amenities=list(data.amenities),
            images=list(data.images),
            facilities=data.facilities.model_dump(),
            policies=data.policies.model_dump(),
            rating=data.rating,
            is_active=data.is_active,
            manager_id=data.manager_id,
            total_rooms=0,
            available_rooms=0,
            occupancy_rate=0,
        )
        self.lodges.add(lodge)
        self.db.commit()
        self.db.refresh(lodge)
        logger.info(f"Lodge {lodge.id} '{lodge.name}' created by {user.id}")
        return lodge

    def update_lodge(self, user: Employee, lodge_id: str, data: LodgeUpdate) -> Lodge:
        """更新营地，子结构整体替换"""
        lodge = self.get_lodge(user, lodge_id)
        updates = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

        merged = LodgeCreate(
            name=lodge.name,
            description=lodge.description or "",
            address=lodge.address or {},
            contact=lodge.contact or {},
            amenities=lodge.amenities or [],
            images=lodge.images or [],
            facilities=lodge.facilities or {},
            policies=lodge.policies or {},
            rating=lodge.rating or 0,
            is_active=lodge.is_active,
            manager_id=lodge.manager_id,
        ).model_copy(update={k: getattr(data, k) for k in updates})

        errors = validate_lodge_form(merged)
        if errors:
            raise BookingValidationError(errors, "营地信息校验失败")

        for key in updates:
            value = getattr(merged, key)
            setattr(lodge, key, value.model_dump() if hasattr(value, "model_dump") else value)
        lodge.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(lodge)
        logger.info(f"Lodge {lodge.id} updated by {user.id}: {sorted(updates.keys())}")
        return lodge

    def delete_lodge(self, user: Employee, lodge_id: str) -> None:
        """删除营地（存在预订记录时不允许）"""
        lodge = self.get_lodge(user, lodge_id)
        if self.lodges.count_bookings_for_lodge(lodge.id):
            raise ValueError("营地存在预订记录，无法删除")
        self.lodges.delete(lodge)
        self.db.commit()
        logger.info(f"Lodge {lodge_id} deleted by {user.id}")

    # ============== 房间 ==============

    def _get_room(self, lodge: Lodge, room_id: str) -> Room:
        room = self.lodges.get_room(room_id)
        if not room or room.lodge_id != lodge.id:
            raise EntityNotFoundError("房间不存在")
        return room

    def _validate_room(self, lodge: Lodge, data: RoomCreate, exclude_id: Optional[str] = None) -> None:
        errors = validate_room_form(data)
        number_error = validate_room_number(data.number, lodge.rooms, exclude_id)
        if number_error and "number" not in errors:
            errors["number"] = number_error
        if errors:
            raise BookingValidationError(errors, "房间信息校验失败")

    def add_room(self, user: Employee, lodge_id: str, data: RoomCreate) -> Room:
        """添加房间，未填容量时按床型估算"""
        lodge = self.get_lodge(user, lodge_id)
        if not data.capacity:
            data = data.model_copy(update={"capacity": capacity_from_beds(data.beds)})
        self._validate_room(lodge, data)

        room = Room(
            number=data.number.strip(),
            name=data.name.strip(),
            type=data.type,
            capacity=data.capacity,
            beds=data.beds.model_dump(),
            amenities=list(data.amenities),
            images=list(data.images),
            pricing={k: str(v) for k, v in data.pricing.model_dump().items()},
            status=data.status,
            description=data.description,
            size=data.size,
            view=data.view,
            floor=data.floor,
            is_active=data.is_active,
        )
        lodge.rooms.append(room)
        apply_lodge_stats(lodge)
        lodge.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(room)
        logger.info(f"Room {room.id} ({room.number}) added to lodge {lodge.id} by {user.id}")
        return room

    def update_room(self, user: Employee, lodge_id: str, room_id: str, data: RoomUpdate) -> Room:
        """更新房间"""
        lodge = self.get_lodge(user, lodge_id)
        room = self._get_room(lodge, room_id)
        updates = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

        merged = RoomCreate(
            number=room.number,
            name=room.name,
            type=room.type,
            capacity=room.capacity,
            beds=room.beds or {},
            amenities=room.amenities or [],
            images=room.images or [],
            pricing=room.pricing or {},
            status=room.status,
            description=room.description or "",
            size=room.size or 0,
            view=room.view or "",
            floor=room.floor,
            is_active=room.is_active,
        ).model_copy(update={k: getattr(data, k) for k in updates})
        self._validate_room(lodge, merged, exclude_id=room.id)

        for key in updates:
            value = getattr(merged, key)
            if key == "pricing":
                value = {k: str(v) for k, v in value.model_dump().items()}
            elif hasattr(value, "model_dump"):
                value = value.model_dump()
            setattr(room, key, value)
        room.updated_at = datetime.utcnow()

        if "status" in updates:
            apply_lodge_stats(lodge)
        self.db.commit()
        self.db.refresh(room)
        logger.info(f"Room {room.id} updated by {user.id}: {sorted(updates.keys())}")
        return room

    def update_room_status(self, user: Employee, lodge_id: str, room_id: str, status: RoomStatus) -> Room:
        """变更房间状态并重算营地统计"""
        lodge = self.get_lodge(user, lodge_id)
        room = self._get_room(lodge, room_id)
        old_status = room.status
        room.status = status
        now = datetime.utcnow()
        room.updated_at = now
        if old_status == RoomStatus.CLEANING and status == RoomStatus.AVAILABLE:
            room.last_cleaned = now
        apply_lodge_stats(lodge)
        lodge.updated_at = now

        self.db.commit()
        self.db.refresh(room)
        logger.info(f"Room {room.id} status: {old_status.value} -> {status.value} by {user.id}")
        return room

    def delete_room(self, user: Employee, lodge_id: str, room_id: str) -> None:
        """删除房间（存在预订记录时不允许）"""
        lodge = self.get_lodge(user, lodge_id)
        room = self._get_room(lodge, room_id)
        if self.lodges.count_bookings_for_room(room.id):
            raise ValueError("房间存在预订记录，无法删除")
        lodge.rooms.remove(room)
        apply_lodge_stats(lodge)
        lodge.updated_at = datetime.utcnow()

        self.db.commit()
        logger.info(f"Room {room_id} removed from lodge {lodge.id} by {user.id}")

    def suggest_room_numbers(self, user: Employee, lodge_id: str) -> List[str]:
        """未占用的房间号建议"""
        lodge = self.get_lodge(user, lodge_id)
        return suggest_room_numbers(room.number for room in lodge.rooms)
