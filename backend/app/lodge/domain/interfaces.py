"""
app/lodge/domain/interfaces.py

仓储接口定义

校验器、统计器、作用域过滤都只依赖这些接口，
测试可注入内存实现，生产使用 SQLAlchemy 实现（repositories.py）。
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Iterable, List, Optional


class BookingRepository(ABC):
    """预订仓储"""

    @abstractmethod
    def get(self, booking_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    def list_all(self, lodge_ids: Optional[Iterable[str]] = None) -> List[Any]:
        """列出预订，lodge_ids 为 None 时不限营地"""
        ...

    @abstractmethod
    def find_for_room(self, room_id: str) -> List[Any]:
        """同一房间的全部预订（冲突检测用）"""
        ...

    @abstractmethod
    def find_arrivals(self, day: date) -> List[Any]:
        ...

    @abstractmethod
    def find_departures(self, day: date) -> List[Any]:
        ...

    @abstractmethod
    def lock_room(self, room_id: str) -> Optional[Any]:
        """在当前事务内锁定房间，串行化同一房间的预订写入"""
        ...

    @abstractmethod
    def add(self, booking: Any) -> Any:
        ...


class LodgeRepository(ABC):
    """营地仓储"""

    @abstractmethod
    def get(self, lodge_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    def list_all(self) -> List[Any]:
        ...

    @abstractmethod
    def add(self, lodge: Any) -> Any:
        ...

    @abstractmethod
    def delete(self, lodge: Any) -> None:
        ...

    @abstractmethod
    def get_room(self, room_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    def count_bookings_for_lodge(self, lodge_id: str) -> int:
        ...

    @abstractmethod
    def count_bookings_for_room(self, room_id: str) -> int:
        ...


class StaffRepository(ABC):
    """员工仓储"""

    @abstractmethod
    def get(self, staff_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Any]:
        ...

    @abstractmethod
    def list_all(self) -> List[Any]:
        ...

    @abstractmethod
    def add(self, staff: Any) -> Any:
        ...


__all__ = [
    "BookingRepository",
    "LodgeRepository",
    "StaffRepository",
]
