"""
app/lodge/domain/rules/booking_rules.py

预订校验规则

- 字段校验：客人信息、日期、人数、金额、文本长度
- 冲突校验：同一房间的半开区间 [check_in, check_out) 重叠
- 收款校验
- 取消校验（过了取消截止时间只给提示，不阻断）

所有校验返回 {字段: 错误信息}，空字典表示通过。
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.config import settings
from app.models.ontology import BookingStatus
from app.lodge.domain.rules.pricing_rules import to_decimal
import logging

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[+]?[1-9]\d{3,14}$")
WHITESPACE = re.compile(r"\s")


class BookingValidationError(ValueError):
    """预订校验失败，errors 为 {字段: 错误信息}"""

    def __init__(self, errors: Dict[str, str], message: str = "预订校验失败"):
        super().__init__(message)
        self.message = message
        self.errors = dict(errors)


class EntityNotFoundError(LookupError):
    """营地、房间、预订或员工不存在"""


@dataclass
class BookingDraft:
    """
    待校验的预订草稿

    创建和编辑共用；可选字段缺省为 None，表示未提供。
    """
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    lodge_id: Optional[str] = None
    room_id: Optional[str] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    guests: Optional[int] = None
    adults: Optional[int] = None
    children: Optional[int] = None
    amount: Optional[Decimal] = None
    deposit: Optional[Decimal] = None
    special_requests: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BookingDraft":
        """从字典构造，忽略未知键"""
        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_booking(cls, booking: Any) -> "BookingDraft":
        """从已存在的预订（ORM 或同构对象）构造"""
        return cls(**{k: getattr(booking, k, None) for k in cls.__dataclass_fields__.keys()})


@dataclass
class CancellationCheck:
    """取消校验结果：errors 阻断，warnings 仅提示"""
    errors: Dict[str, str] = field(default_factory=dict)
    warnings: Dict[str, str] = field(default_factory=dict)

    @property
    def allowed(self) -> bool:
        return not self.errors


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, BookingStatus) else str(status)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def validate_booking_fields(
    draft: BookingDraft,
    today: Optional[date] = None,
    check_past_check_in: bool = True,
) -> Dict[str, str]:
    """
    校验预订字段

    Args:
        draft: 预订草稿
        today: 当天日期，默认取系统日期
        check_past_check_in: 是否校验入住日期不早于今天（编辑且入住日期未变时关闭）

    Returns:
        {字段: 错误信息}
    """
    errors: Dict[str, str] = {}
    today = today or date.today()

    # 客人信息
    if _is_blank(draft.guest_name):
        errors["guest_name"] = "客人姓名不能为空"
    elif len(draft.guest_name.strip()) < 2:
        errors["guest_name"] = "客人姓名至少 2 个字符"

    if _is_blank(draft.guest_email):
        errors["guest_email"] = "客人邮箱不能为空"
    elif not EMAIL_PATTERN.match(draft.guest_email.strip()):
        errors["guest_email"] = "邮箱格式不正确"

    if _is_blank(draft.guest_phone):
        errors["guest_phone"] = "客人电话不能为空"
    elif not PHONE_PATTERN.match(WHITESPACE.sub("", draft.guest_phone)):
        errors["guest_phone"] = "电话号码格式不正确"

    # 房间
    if not draft.lodge_id:
        errors["lodge_id"] = "请选择营地"
    if not draft.room_id:
        errors["room_id"] = "请选择房间"

    # 日期
    if draft.check_in is None:
        errors["check_in"] = "入住日期不能为空"
    if draft.check_out is None:
        errors["check_out"] = "离店日期不能为空"

    if draft.check_in is not None and draft.check_out is not None:
        if check_past_check_in and draft.check_in < today:
            errors["check_in"] = "入住日期不能早于今天"
        stay = (draft.check_out - draft.check_in).days
        if stay <= 0:
            errors["check_out"] = "离店日期必须晚于入住日期"
        elif stay > settings.MAX_STAY_NIGHTS:
            errors["check_out"] = f"最长入住 {settings.MAX_STAY_NIGHTS} 晚"

    # 人数
    if draft.guests is None or draft.guests < 1:
        errors["guests"] = "客人数至少为 1"
    elif draft.guests > settings.MAX_GUESTS:
        errors["guests"] = f"每个预订最多 {settings.MAX_GUESTS} 位客人"

    if draft.adults is None or draft.adults < 1:
        errors["adults"] = "成人数至少为 1"

    if draft.children is not None and draft.children < 0:
        errors["children"] = "儿童数不能为负"

    if draft.guests is not None and (draft.adults or 0) + (draft.children or 0) != draft.guests:
        errors["guests"] = "客人总数必须等于成人数加儿童数"

    # 金额
    amount = to_decimal(draft.amount) if draft.amount is not None else None
    deposit = to_decimal(draft.deposit) if draft.deposit is not None else None
    if amount is not None and amount < 0:
        errors["amount"] = "金额不能为负"
    if deposit is not None and deposit < 0:
        errors["deposit"] = "押金不能为负"
    if amount is not None and deposit is not None and deposit > amount:
        errors["deposit"] = "押金不能超过总金额"

    # 文本长度
    if draft.special_requests and len(draft.special_requests) > settings.SPECIAL_REQUESTS_MAX_LENGTH:
        errors["special_requests"] = f"特殊要求不能超过 {settings.SPECIAL_REQUESTS_MAX_LENGTH} 个字符"
    if draft.notes and len(draft.notes) > settings.NOTES_MAX_LENGTH:
        errors["notes"] = f"备注不能超过 {settings.NOTES_MAX_LENGTH} 个字符"

    return errors


def intervals_overlap(start: date, end: date, other_start: date, other_end: date) -> bool:
    """半开区间 [start, end) 与 [other_start, other_end) 是否重叠"""
    return start < other_end and end > other_start


def find_conflicts(draft: Any, existing: Iterable[Any], exclude_id: Optional[str] = None) -> List[Any]:
    """查找与草稿冲突的已有预订（同房间、未取消、日期重叠）"""
    if not draft.room_id or draft.check_in is None or draft.check_out is None:
        return []

    conflicts = []
    for other in existing:
        if exclude_id is not None and other.id == exclude_id:
            continue
        if _status_value(other.status) == BookingStatus.CANCELLED.value:
            continue
        if other.room_id != draft.room_id:
            continue
        if intervals_overlap(draft.check_in, draft.check_out, other.check_in, other.check_out):
            conflicts.append(other)
    return conflicts


def validate_booking_conflicts(
    draft: Any,
    existing: Iterable[Any],
    exclude_id: Optional[str] = None,
) -> Dict[str, str]:
    """
    校验房间占用冲突

    Args:
        draft: 预订草稿（需要 room_id / check_in / check_out）
        existing: 已有预订
        exclude_id: 编辑时排除自身

    Returns:
        冲突时返回 {"room_conflict": 描述}，列出每个冲突客人及日期
    """
    conflicts = find_conflicts(draft, existing, exclude_id)
    if not conflicts:
        return {}

    details = ", ".join(
        f"{c.guest_name} ({c.check_in.isoformat()} - {c.check_out.isoformat()})"
        for c in conflicts
    )
    logger.info(f"Room {draft.room_id} conflict for {draft.check_in} - {draft.check_out}: {details}")
    return {"room_conflict": f"该房间在此期间已被预订: {details}"}


def validate_payment(booking: Any, amount: Any, method: Optional[str]) -> Dict[str, str]:
    """校验收款：金额大于 0 且不超过未付余额，必须提供付款方式"""
    errors: Dict[str, str] = {}
    value = to_decimal(amount)
    balance = to_decimal(booking.balance or 0)

    if value <= 0:
        errors["amount"] = "收款金额必须大于 0"
    elif value > balance:
        errors["amount"] = "收款金额不能超过未付余额"

    if _is_blank(method):
        errors["method"] = "请选择付款方式"

    return errors


def cancellation_deadline_for(check_in: date) -> datetime:
    """取消截止时间：入住日零点前 N 小时"""
    return datetime.combine(check_in, datetime.min.time()) - timedelta(
        hours=settings.CANCELLATION_NOTICE_HOURS
    )


def validate_cancellation(
    booking: Any,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> CancellationCheck:
    """
    校验取消

    已取消或已退房的预订不能取消；
    已确认的预订过了截止时间仍可取消，但给出迟取消提示。
    """
    result = CancellationCheck()
    now = now or datetime.utcnow()
    status = _status_value(booking.status)

    if status == BookingStatus.CANCELLED.value:
        result.errors["status"] = "预订已取消"
    elif status == BookingStatus.CHECKED_OUT.value:
        result.errors["status"] = "已退房的预订不能取消"

    if status == BookingStatus.CONFIRMED.value and booking.check_in is not None:
        if now > cancellation_deadline_for(booking.check_in):
            result.warnings["deadline"] = "已过取消截止时间，可能产生迟取消费用"

    if reason and len(reason) > settings.CANCELLATION_REASON_MAX_LENGTH:
        result.errors["reason"] = f"取消原因不能超过 {settings.CANCELLATION_REASON_MAX_LENGTH} 个字符"

    return result


__all__ = [
    "BookingValidationError",
    "EntityNotFoundError",
    "BookingDraft",
    "CancellationCheck",
    "validate_booking_fields",
    "intervals_overlap",
    "find_conflicts",
    "validate_booking_conflicts",
    "validate_payment",
    "cancellation_deadline_for",
    "validate_cancellation",
]
