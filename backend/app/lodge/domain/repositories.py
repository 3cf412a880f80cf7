"""
app/lodge/domain/repositories.py

SQLAlchemy 仓储实现

仓储只负责查询和 flush，事务的提交/回滚由服务层控制。
"""
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from app.models.ontology import Booking, BookingStatus, Lodge, Room, Employee
from app.lodge.domain.interfaces import BookingRepository, LodgeRepository, StaffRepository
import logging

logger = logging.getLogger(__name__)


class SqlBookingRepository(BookingRepository):
    """预订仓储"""

    def __init__(self, db: Session):
        self._db = db

    def get(self, booking_id: str) -> Optional[Booking]:
        return self._db.query(Booking).filter(Booking.id == booking_id).first()

    def list_all(self, lodge_ids: Optional[Iterable[str]] = None) -> List[Booking]:
        query = self._db.query(Booking)
        if lodge_ids is not None:
            query = query.filter(Booking.lodge_id.in_(list(lodge_ids)))
        return query.order_by(Booking.created_at.desc()).all()

    def find_for_room(self, room_id: str) -> List[Booking]:
        return self._db.query(Booking).filter(Booking.room_id == room_id).all()

    def find_arrivals(self, day: date) -> List[Booking]:
        """指定日期待入住的预订（已确认）"""
        return self._db.query(Booking).filter(
            Booking.check_in == day,
            Booking.status == BookingStatus.CONFIRMED,
        ).order_by(Booking.created_at).all()

    def find_departures(self, day: date) -> List[Booking]:
        """指定日期待退房的预订（已入住）"""
        return self._db.query(Booking).filter(
            Booking.check_out == day,
            Booking.status == BookingStatus.CHECKED_IN,
        ).order_by(Booking.created_at).all()

    def lock_room(self, room_id: str) -> Optional[Room]:
        """
        锁定房间行

        先递增 booking_version 触发写锁（SQLite 上即开始写事务），
        再以 SELECT ... FOR UPDATE 读取房间；同一房间的并发写入在此排队。
        """
        self._db.execute(
            update(Room)
            .where(Room.id == room_id)
            .values(booking_version=Room.booking_version + 1)
        )
        return self._db.query(Room).filter(Room.id == room_id).with_for_update().first()

    def add(self, booking: Booking) -> Booking:
        self._db.add(booking)
        self._db.flush()
        return booking


class SqlLodgeRepository(LodgeRepository):
    """营地仓储"""

    def __init__(self, db: Session):
        self._db = db

    def get(self, lodge_id: str) -> Optional[Lodge]:
        return self._db.query(Lodge).filter(Lodge.id == lodge_id).first()

    def list_all(self) -> List[Lodge]:
        return self._db.query(Lodge).order_by(Lodge.name).all()

    def add(self, lodge: Lodge) -> Lodge:
        self._db.add(lodge)
        self._db.flush()
        return lodge

    def delete(self, lodge: Lodge) -> None:
        self._db.delete(lodge)
        self._db.flush()

    def get_room(self, room_id: str) -> Optional[Room]:
        return self._db.query(Room).filter(Room.id == room_id).first()

    def count_bookings_for_lodge(self, lodge_id: str) -> int:
        return self._db.query(func.count(Booking.id)).filter(Booking.lodge_id == lodge_id).scalar()

    def count_bookings_for_room(self, room_id: str) -> int:
        return self._db.query(func.count(Booking.id)).filter(Booking.room_id == room_id).scalar()


class SqlStaffRepository(StaffRepository):
    """员工仓储"""

    def __init__(self, db: Session):
        self._db = db

    def get(self, staff_id: str) -> Optional[Employee]:
        return self._db.query(Employee).filter(Employee.id == staff_id).first()

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._db.query(Employee).filter(func.lower(Employee.email) == email.strip().lower()).first()

    def list_all(self) -> List[Employee]:
        return self._db.query(Employee).order_by(Employee.name).all()

    def add(self, staff: Employee) -> Employee:
        self._db.add(staff)
        self._db.flush()
        return staff


__all__ = [
    "SqlBookingRepository",
    "SqlLodgeRepository",
    "SqlStaffRepository",
]
