"""
预订服务 - 本体操作层
管理 Booking 对象（预订生命周期的聚合根）

写入流程：作用域检查 -> 字段校验 -> 计价 -> 锁定房间 -> 冲突检测 -> 写入，
冲突检测与写入在同一事务内完成。
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.models.ontology import (
    Booking, BookingStatus, BookingSource, PaymentStatus, Employee, RateSeason, RoomType
)
from app.models.schemas import BookingCreate, BookingUpdate, QuoteRequest
from app.lodge.domain.booking import BookingStatusMachine, apply_transition
from app.lodge.domain.interfaces import BookingRepository, LodgeRepository
from app.lodge.domain.repositories import SqlBookingRepository, SqlLodgeRepository
from app.lodge.domain.rules.booking_rules import (
    BookingDraft, BookingValidationError, EntityNotFoundError, validate_booking_fields,
    validate_booking_conflicts, validate_payment, cancellation_deadline_for,
)
from app.lodge.domain.rules.pricing_rules import (
    PriceBreakdown, calculate_booking_amount, nightly_rate_for, round_money, to_decimal,
)
from app.lodge.security.access import ensure_lodge_access, filter_bookings, resolve_lodge_scope
from app.lodge.services.pagination import paginate

logger = logging.getLogger(__name__)

INITIAL_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)
PRICING_FIELDS = {"room_id", "check_in", "check_out", "room_rate", "season", "discount_percent", "extra_charges"}


@dataclass
class BookingFilters:
    """预订列表过滤条件，None 表示不过滤"""
    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None
    lodge_id: Optional[str] = None
    room_type: Optional[RoomType] = None
    booking_source: Optional[BookingSource] = None
    search: Optional[str] = None          # 客人姓名或邮箱
    date_from: Optional[date] = None      # 入住日期范围
    date_to: Optional[date] = None
    guests_min: Optional[int] = None
    guests_max: Optional[int] = None
    amount_min: Optional[Decimal] = None
    amount_max: Optional[Decimal] = None

    def matches(self, booking: Booking) -> bool:
        if self.status and booking.status != self.status:
            return False
        if self.payment_status and booking.payment_status != self.payment_status:
            return False
        if self.lodge_id and booking.lodge_id != self.lodge_id:
            return False
        if self.room_type and booking.room_type != RoomType(self.room_type).value:
            return False
        if self.booking_source and booking.booking_source != BookingSource(self.booking_source):
            return False
        if self.search:
            keyword = self.search.lower()
            if keyword not in booking.guest_name.lower() and keyword not in booking.guest_email.lower():
                return False
        if self.date_from and self.date_to:
            if not self.date_from <= booking.check_in <= self.date_to:
                return False
        if self.guests_min is not None and booking.guests < self.guests_min:
            return False
        if self.guests_max is not None and booking.guests > self.guests_max:
            return False
        if self.amount_min is not None and booking.amount < self.amount_min:
            return False
        if self.amount_max is not None and booking.amount > self.amount_max:
            return False
        return True


def compute_booking_stats(bookings: List[Booking], today: Optional[date] = None) -> Dict[str, Any]:
    """
    预订统计

    收入与平均值只计未取消的预订；取消率按全部预订计算。
    今日入住数只计已确认，今日退房数只计已入住。
    """
    today = today or date.today()
    total = len(bookings)
    active = [b for b in bookings if b.status != BookingStatus.CANCELLED]
    revenue = sum((to_decimal(b.amount) for b in active), Decimal("0"))
    cancelled = total - len(active)

    return {
        "total_bookings": total,
        "total_revenue": round_money(revenue),
        "average_booking_value": round_money(revenue / (len(active) or 1)),
        "cancellation_rate": round_money(Decimal(cancelled) / total * 100) if total else Decimal("0.00"),
        "today_check_ins": sum(
            1 for b in bookings if b.check_in == today and b.status == BookingStatus.CONFIRMED
        ),
        "today_check_outs": sum(
            1 for b in bookings if b.check_out == today and b.status == BookingStatus.CHECKED_IN
        ),
        "pending_bookings": sum(1 for b in bookings if b.status == BookingStatus.PENDING),
        "confirmed_bookings": sum(1 for b in bookings if b.status == BookingStatus.CONFIRMED),
    }


def payment_status_for(amount: Decimal, paid: Decimal) -> PaymentStatus:
    """按已付金额推导支付状态"""
    if paid <= 0:
        return PaymentStatus.PENDING
    if paid >= amount:
        return PaymentStatus.PAID
    return PaymentStatus.PARTIAL


class BookingService:
    """预订服务"""

    def __init__(self, db: Session,
                 bookings: Optional[BookingRepository] = None,
                 lodges: Optional[LodgeRepository] = None):
        self.db = db
        self.bookings = bookings or SqlBookingRepository(db)
        self.lodges = lodges or SqlLodgeRepository(db)
        self.status_machine = BookingStatusMachine()

    # ============== 查询 ==============

    def _scoped_bookings(self, user: Employee) -> List[Booking]:
        scope = resolve_lodge_scope(user)
        if scope.is_unrestricted:
            return self.bookings.list_all()
        return self.bookings.list_all(lodge_ids=scope.scope_ids)

    def list_bookings(self, user: Employee, filters: Optional[BookingFilters] = None,
                      page: int = 1, today: Optional[date] = None) -> Dict[str, Any]:
        """获取预订列表（作用域过滤 + 条件过滤 + 分页），统计基于过滤后的全集"""
        filters = filters or BookingFilters()
        matched = [b for b in self._scoped_bookings(user) if filters.matches(b)]
        items, pagination = paginate(matched, page, settings.BOOKINGS_PAGE_SIZE)
        return {
            "bookings": items,
            "pagination": pagination,
            "stats": compute_booking_stats(matched, today),
        }

    def get_booking(self, user: Employee, booking_id: str) -> Booking:
        """获取单个预订，不存在抛 EntityNotFoundError，越权抛 PermissionError"""
        booking = self.bookings.get(booking_id)
        if not booking:
            raise EntityNotFoundError("预订不存在")
        ensure_lodge_access(user, booking.lodge_id)
        return booking

    def get_today_activity(self, user: Employee, today: Optional[date] = None) -> Dict[str, List[Booking]]:
        """今日预抵（已确认）和预离（已入住）"""
        today = today or date.today()
        return {
            "arrivals": filter_bookings(user, self.bookings.find_arrivals(today)),
            "departures": filter_bookings(user, self.bookings.find_departures(today)),
        }

    def get_upcoming_check_ins(self, user: Employee, today: Optional[date] = None) -> List[Booking]:
        """明日预抵（已确认）"""
        tomorrow = (today or date.today()) + timedelta(days=1)
        return filter_bookings(user, self.bookings.find_arrivals(tomorrow))

    def get_overdue_payments(self, user: Employee, today: Optional[date] = None) -> List[Booking]:
        """已到入住日但仍未付款的有效预订"""
        today = today or date.today()
        return [
            b for b in self._scoped_bookings(user)
            if b.payment_status == PaymentStatus.PENDING
            and b.status != BookingStatus.CANCELLED
            and b.check_in <= today
        ]

    def get_revenue_for_period(self, user: Employee, start: date, end: date) -> Decimal:
        """入住日期在 [start, end] 内的未取消预订金额合计"""
        return round_money(sum(
            (to_decimal(b.amount) for b in self._scoped_bookings(user)
             if start <= b.check_in <= end and b.status != BookingStatus.CANCELLED),
            Decimal("0"),
        ))

    def quote(self, data: QuoteRequest) -> PriceBreakdown:
        """报价，不落库"""
        if data.check_out <= data.check_in:
            raise BookingValidationError({"check_out": "离店日期必须晚于入住日期"})
        return calculate_booking_amount(
            data.room_rate, data.check_in, data.check_out, data.guests,
            data.discount_percent, data.extra_charges, data.tax_rate,
        )

    # ============== 写入 ==============

    def _resolve_room(self, lodge_id: Optional[str], room_id: Optional[str], errors: Dict[str, str]):
        if not room_id:
            return None
        room = self.lodges.get_room(room_id)
        if room is None or room.lodge_id != lodge_id:
            errors["room_id"] = "房间不存在或不属于该营地"
            return None
        return room

    def _check_conflicts(self, draft: BookingDraft, exclude_id: Optional[str] = None) -> None:
        """锁定房间后检测冲突，冲突时回滚并抛出"""
        self.bookings.lock_room(draft.room_id)
        conflicts = validate_booking_conflicts(draft, self.bookings.find_for_room(draft.room_id), exclude_id)
        if conflicts:
            self.db.rollback()
            raise BookingValidationError(conflicts, "房间时段冲突")

    def _is_returning_guest(self, email: str) -> bool:
        email = email.strip().lower()
        return any(b.guest_email.strip().lower() == email for b in self.bookings.list_all())

    def create_booking(self, user: Employee, data: BookingCreate,
                       today: Optional[date] = None) -> Booking:
        """创建预订"""
        if data.lodge_id:
            ensure_lodge_access(user, data.lodge_id)

        draft = BookingDraft.from_mapping(data.model_dump())
        errors = validate_booking_fields(draft, today)
        room = self._resolve_room(data.lodge_id, data.room_id, errors)
        if data.status not in INITIAL_STATUSES:
            errors["status"] = "新预订只能是待确认或已确认状态"
        if errors:
            raise BookingValidationError(errors)

        rate = data.room_rate if data.room_rate is not None else nightly_rate_for(room.pricing or {}, data.season)
        price = calculate_booking_amount(
            rate, data.check_in, data.check_out, data.guests,
            data.discount_percent, data.extra_charges,
        )
        draft.amount = price.total
        errors = validate_booking_fields(draft, today)
        if errors:
            raise BookingValidationError(errors)

        self._check_conflicts(draft)

        deposit = to_decimal(data.deposit)
        now = datetime.utcnow()
        booking = Booking(
            guest_name=data.guest_name.strip(),
            guest_email=data.guest_email.strip(),
            guest_phone=data.guest_phone.strip(),
            guest_address=data.guest_address,
            guest_nationality=data.guest_nationality,
            guest_id_number=data.guest_id_number,
            is_returning_guest=data.is_returning_guest or self._is_returning_guest(data.guest_email),
            lodge_id=room.lodge_id,
            lodge_name=room.lodge.name,
            room_id=room.id,
            room_name=room.name,
            room_type=room.type.value,
            check_in=data.check_in,
            check_out=data.check_out,
            guests=data.guests,
            adults=data.adults,
            children=data.children,
            status=data.status,
            room_rate=round_money(to_decimal(rate)),
            nights=price.nights,
            subtotal=price.subtotal,
            discount_percent=data.discount_percent,
            discount_amount=price.discount_amount,
            taxes=price.taxes,
            extra_charges=price.extra_charges,
            amount=price.total,
            deposit=deposit,
            balance=price.total - deposit,
            currency=settings.DEFAULT_CURRENCY,
            payment_status=payment_status_for(price.total, deposit),
            payment_method=data.payment_method,
            booking_source=data.booking_source,
            special_requests=data.special_requests,
            notes=data.notes,
            cancellation_deadline=cancellation_deadline_for(data.check_in),
            created_at=now,
            updated_at=now,
            created_by=user.id,
            last_modified_by=user.id,
        )
        self.bookings.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        logger.info(
            f"Booking {booking.id} created by {user.id}: room {booking.room_id} "
            f"{booking.check_in} - {booking.check_out}, amount {booking.amount}"
        )
        return booking

    def update_booking(self, user: Employee, booking_id: str, data: BookingUpdate,
                       today: Optional[date] = None) -> Booking:
        """
        更新预订

        重新校验并重新计价；入住日期未改动时不检查"入住日期不能早于今天"，
        冲突检测排除预订自身。
        """
        booking = self.get_booking(user, booking_id)
        updates = data.model_dump(exclude_unset=True)

        draft = BookingDraft.from_booking(booking)
        for key, value in updates.items():
            if hasattr(draft, key):
                setattr(draft, key, value)

        check_in_changed = "check_in" in updates and updates["check_in"] != booking.check_in
        errors = validate_booking_fields(draft, today, check_past_check_in=check_in_changed)
        room = self._resolve_room(booking.lodge_id, draft.room_id, errors)
        if errors:
            raise BookingValidationError(errors)

        if "room_rate" in updates and updates["room_rate"] is not None:
            rate = to_decimal(updates["room_rate"])
        elif "season" in updates or draft.room_id != booking.room_id:
            rate = nightly_rate_for(room.pricing or {}, updates.get("season") or RateSeason.NORMAL)
        else:
            rate = to_decimal(booking.room_rate)

        discount = to_decimal(updates.get("discount_percent", booking.discount_percent) or 0)
        extras = to_decimal(updates.get("extra_charges", booking.extra_charges) or 0)
        price = calculate_booking_amount(rate, draft.check_in, draft.check_out, draft.guests, discount, extras)
        draft.amount = price.total
        errors = validate_booking_fields(draft, today, check_past_check_in=check_in_changed)
        if errors:
            raise BookingValidationError(errors)

        if PRICING_FIELDS & updates.keys():
            self._check_conflicts(draft, exclude_id=booking.id)

        for key in (
            "guest_name", "guest_email", "guest_phone", "guest_address", "guest_nationality",
            "guest_id_number", "check_in", "check_out", "guests", "adults", "children",
            "booking_source", "special_requests", "notes",
        ):
            if key in updates:
                setattr(booking, key, updates[key])

        if draft.room_id != booking.room_id:
            booking.room_id = room.id
            booking.room_name = room.name
            booking.room_type = room.type.value

        deposit = to_decimal(draft.deposit or 0)
        booking.room_rate = round_money(rate)
        booking.nights = price.nights
        booking.subtotal = price.subtotal
        booking.discount_percent = discount
        booking.discount_amount = price.discount_amount
        booking.taxes = price.taxes
        booking.extra_charges = price.extra_charges
        booking.amount = price.total
        booking.deposit = deposit
        booking.balance = price.total - deposit
        money_changed = bool((PRICING_FIELDS | {"deposit"}) & updates.keys())
        if money_changed and booking.payment_status != PaymentStatus.REFUNDED:
            booking.payment_status = payment_status_for(price.total, deposit)
        booking.cancellation_deadline = cancellation_deadline_for(booking.check_in)
        booking.updated_at = datetime.utcnow()
        booking.last_modified_by = user.id

        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} updated by {user.id}: {sorted(updates.keys())}")
        return booking

    def change_status(self, user: Employee, booking_id: str, target: BookingStatus,
                      reason: Optional[str] = None,
                      now: Optional[datetime] = None) -> Tuple[Booking, Dict[str, str]]:
        """
        变更预订状态

        Returns:
            (预订, 提示信息)，提示不阻断操作
        """
        booking = self.get_booking(user, booking_id)
        result = self.status_machine.transition(booking, target, user.id, now=now, reason=reason)
        if not result.success:
            raise ValueError(result.error)

        apply_transition(booking, result)
        self.db.commit()
        self.db.refresh(booking)
        return booking, result.warnings

    def cancel_booking(self, user: Employee, booking_id: str, reason: Optional[str] = None,
                       now: Optional[datetime] = None) -> Tuple[Booking, Dict[str, str]]:
        """取消预订（状态变更为 cancelled，不删除）"""
        return self.change_status(user, booking_id, BookingStatus.CANCELLED, reason=reason, now=now)

    def record_payment(self, user: Employee, booking_id: str, amount: Decimal, method: str) -> Booking:
        """登记收款：累加已付金额并重算余额与支付状态"""
        booking = self.get_booking(user, booking_id)
        errors = validate_payment(booking, amount, method)
        if errors:
            raise BookingValidationError(errors, "收款校验失败")

        paid = to_decimal(booking.deposit or 0) + to_decimal(amount)
        booking.deposit = paid
        booking.balance = to_decimal(booking.amount) - paid
        booking.payment_status = payment_status_for(to_decimal(booking.amount), paid)
        booking.payment_method = method
        booking.updated_at = datetime.utcnow()
        booking.last_modified_by = user.id

        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} payment {amount} via {method}, balance {booking.balance}")
        return booking

    def update_payment_status(self, user: Employee, booking_id: str, payment_status: PaymentStatus,
                              payment_method: Optional[str] = None) -> Booking:
        """直接设置支付状态"""
        booking = self.get_booking(user, booking_id)
        booking.payment_status = payment_status
        if payment_method:
            booking.payment_method = payment_method
        booking.updated_at = datetime.utcnow()
        booking.last_modified_by = user.id

        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} payment status set to {payment_status.value} by {user.id}")
        return booking
