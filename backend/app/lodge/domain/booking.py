"""
app/lodge/domain/booking.py

预订状态机

pending -> confirmed -> checked_in -> checked_out
pending / confirmed -> cancelled

状态机只计算需要变更的字段（TransitionResult.changes），
不修改预订本身，由服务层在事务内统一应用后提交。
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.engine.state_machine import StateMachine, StateMachineConfig, StateTransition
from app.models.ontology import BookingStatus, PaymentStatus
from app.lodge.domain.rules.booking_rules import validate_cancellation
import logging

logger = logging.getLogger(__name__)


@dataclass
class TransitionResult:
    """状态转换结果"""
    success: bool
    status: BookingStatus
    changes: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    warnings: Dict[str, str] = field(default_factory=dict)


# ============== 副作用 ==============

def _audit(context: Dict[str, Any]) -> Dict[str, Any]:
    return {"updated_at": context["now"], "last_modified_by": context.get("actor")}


def _stamp_check_in(context: Dict[str, Any]) -> Dict[str, Any]:
    return {"check_in_time": context["now"]}


def _stamp_check_out(context: Dict[str, Any]) -> Dict[str, Any]:
    # 退房即视为结清
    return {"check_out_time": context["now"], "payment_status": PaymentStatus.PAID}


def _record_cancellation(context: Dict[str, Any]) -> Dict[str, Any]:
    return {"cancellation_reason": context.get("reason")}


BOOKING_TRANSITIONS: List[StateTransition] = [
    StateTransition(
        from_state=BookingStatus.PENDING.value,
        to_state=BookingStatus.CONFIRMED.value,
        trigger="confirm",
        side_effects=[_audit],
    ),
    StateTransition(
        from_state=BookingStatus.CONFIRMED.value,
        to_state=BookingStatus.CHECKED_IN.value,
        trigger="check_in",
        side_effects=[_audit, _stamp_check_in],
    ),
    StateTransition(
        from_state=BookingStatus.CHECKED_IN.value,
        to_state=BookingStatus.CHECKED_OUT.value,
        trigger="check_out",
        side_effects=[_audit, _stamp_check_out],
    ),
    StateTransition(
        from_state=BookingStatus.PENDING.value,
        to_state=BookingStatus.CANCELLED.value,
        trigger="cancel",
        side_effects=[_audit, _record_cancellation],
    ),
    StateTransition(
        from_state=BookingStatus.CONFIRMED.value,
        to_state=BookingStatus.CANCELLED.value,
        trigger="cancel",
        side_effects=[_audit, _record_cancellation],
    ),
]


def _create_booking_state_machine(initial_status: str) -> StateMachine:
    """创建预订状态机"""
    return StateMachine(
        config=StateMachineConfig(
            name="Booking",
            states=[s.value for s in BookingStatus],
            transitions=BOOKING_TRANSITIONS,
            initial_state=initial_status,
        )
    )


STATUS_LABELS = {
    BookingStatus.PENDING.value: "待确认",
    BookingStatus.CONFIRMED.value: "已确认",
    BookingStatus.CHECKED_IN.value: "已入住",
    BookingStatus.CHECKED_OUT.value: "已退房",
    BookingStatus.CANCELLED.value: "已取消",
}


class BookingStatusMachine:
    """
    预订状态机

    Example:
        >>> result = BookingStatusMachine().transition(booking, BookingStatus.CHECKED_OUT, "staff_1")
        >>> result.changes["payment_status"]
        <PaymentStatus.PAID: 'paid'>
    """

    def initial_status(self) -> BookingStatus:
        return BookingStatus.PENDING

    def available_targets(self, booking: Any) -> List[BookingStatus]:
        """当前状态可到达的目标状态"""
        machine = _create_booking_state_machine(BookingStatus(booking.status).value)
        return [BookingStatus(s) for s in machine.available_targets()]

    def transition(
        self,
        booking: Any,
        target: BookingStatus,
        actor: Optional[str],
        now: Optional[datetime] = None,
        reason: Optional[str] = None,
    ) -> TransitionResult:
        """
        计算一次状态转换

        Args:
            booking: 当前预订（只读）
            target: 目标状态
            actor: 操作人 ID
            now: 当前时间
            reason: 取消原因

        Returns:
            TransitionResult，失败时 success=False 并带 error
        """
        now = now or datetime.utcnow()
        current = BookingStatus(booking.status)
        target = BookingStatus(target)
        warnings: Dict[str, str] = {}

        if target == BookingStatus.CANCELLED:
            check = validate_cancellation(booking, reason=reason, now=now)
            if check.errors:
                return TransitionResult(
                    success=False,
                    status=current,
                    error="; ".join(check.errors.values()),
                    warnings=check.warnings,
                )
            warnings = check.warnings

        machine = _create_booking_state_machine(current.value)
        context = {"now": now, "actor": actor, "reason": reason}
        if not machine.transition_to(target.value, context=context):
            return TransitionResult(
                success=False,
                status=current,
                error=f"预订状态 {STATUS_LABELS[current.value]} 不能变更为 {STATUS_LABELS[target.value]}",
            )

        changes = machine.last_effects()
        changes["status"] = target

        if warnings:
            logger.warning(f"Booking {booking.id} cancelled after deadline by {actor}")
        logger.info(f"Booking {booking.id} transition: {current.value} -> {target.value} by {actor}")
        return TransitionResult(success=True, status=target, changes=changes, warnings=warnings)


def apply_transition(booking: Any, result: TransitionResult) -> None:
    """把成功的转换结果写回预订"""
    if not result.success:
        raise ValueError(result.error)
    for key, value in result.changes.items():
        setattr(booking, key, value)


__all__ = [
    "TransitionResult",
    "BOOKING_TRANSITIONS",
    "BookingStatusMachine",
    "apply_transition",
]
