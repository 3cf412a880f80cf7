"""
预订管理路由
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import Employee, BookingStatus, PaymentStatus, BookingSource, RoomType
from app.models.schemas import (
    BookingCreate, BookingUpdate, BookingResponse, BookingListResponse, BookingActionResponse,
    BookingStatusChange, BookingCancel, PaymentCreate, PaymentStatusUpdate,
    QuoteRequest, QuoteResponse,
)
from app.lodge.services.booking_service import BookingService, BookingFilters
from app.lodge.routers import http_error, SERVICE_ERRORS
from app.security import permissions as P
from app.security.auth import require_permission

router = APIRouter(prefix="/bookings", tags=["预订管理"])


def _action_response(booking, warnings) -> BookingActionResponse:
    return BookingActionResponse(booking=BookingResponse.model_validate(booking), warnings=warnings)


@router.get("", response_model=BookingListResponse)
def list_bookings(
    status: Optional[BookingStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    lodge_id: Optional[str] = None,
    room_type: Optional[RoomType] = None,
    source: Optional[BookingSource] = None,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    guests_min: Optional[int] = None,
    guests_max: Optional[int] = None,
    amount_min: Optional[Decimal] = None,
    amount_max: Optional[Decimal] = None,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_READ))
):
    """获取预订列表"""
    filters = BookingFilters(
        status=status, payment_status=payment_status, lodge_id=lodge_id,
        room_type=room_type, booking_source=source, search=search,
        date_from=date_from, date_to=date_to,
        guests_min=guests_min, guests_max=guests_max,
        amount_min=amount_min, amount_max=amount_max,
    )
    result = BookingService(db).list_bookings(current_user, filters, page)
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in result["bookings"]],
        pagination=result["pagination"],
        stats=result["stats"],
    )


@router.post("/quote", response_model=QuoteResponse)
def quote_booking(
    data: QuoteRequest,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_WRITE))
):
    """报价（不创建预订）"""
    try:
        return QuoteResponse(**BookingService(db).quote(data).to_dict())
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.get("/today")
def get_today_activity(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_READ))
):
    """今日预抵和预离"""
    activity = BookingService(db).get_today_activity(current_user)
    return {
        key: [BookingResponse.model_validate(b) for b in bookings]
        for key, bookings in activity.items()
    }


@router.get("/upcoming", response_model=List[BookingResponse])
def get_upcoming_check_ins(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_READ))
):
    """明日预抵"""
    return [BookingResponse.model_validate(b) for b in BookingService(db).get_upcoming_check_ins(current_user)]


@router.get("/overdue-payments", response_model=List[BookingResponse])
def get_overdue_payments(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_PAYMENT))
):
    """逾期未付款的预订"""
    return [BookingResponse.model_validate(b) for b in BookingService(db).get_overdue_payments(current_user)]


@router.get("/revenue")
def get_revenue(
    start: date,
    end: date,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_PAYMENT))
):
    """期间收入（按入住日期）"""
    revenue = BookingService(db).get_revenue_for_period(current_user, start, end)
    return {"start": start, "end": end, "revenue": revenue}


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_READ))
):
    """获取预订详情"""
    try:
        return BookingResponse.model_validate(BookingService(db).get_booking(current_user, booking_id))
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.post("", response_model=BookingResponse, status_code=201)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_WRITE))
):
    """创建预订"""
    try:
        booking = BookingService(db).create_booking(current_user, data)
        return BookingResponse.model_validate(booking)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.put("/{booking_id}", response_model=BookingResponse)
def update_booking(
    booking_id: str,
    data: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_WRITE))
):
    """更新预订"""
    try:
        booking = BookingService(db).update_booking(current_user, booking_id, data)
        return BookingResponse.model_validate(booking)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.post("/{booking_id}/status", response_model=BookingActionResponse)
def change_booking_status(
    booking_id: str,
    data: BookingStatusChange,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_WRITE, *P.BOOKING_CHECKIN))
):
    """变更预订状态（确认 / 入住 / 退房 / 取消）"""
    try:
        booking, warnings = BookingService(db).change_status(
            current_user, booking_id, data.status, reason=data.reason
        )
        return _action_response(booking, warnings)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.post("/{booking_id}/cancel", response_model=BookingActionResponse)
def cancel_booking(
    booking_id: str,
    data: BookingCancel,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_WRITE))
):
    """取消预订"""
    try:
        booking, warnings = BookingService(db).cancel_booking(current_user, booking_id, data.reason)
        return _action_response(booking, warnings)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.post("/{booking_id}/payments", response_model=BookingResponse)
def record_payment(
    booking_id: str,
    data: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_PAYMENT))
):
    """登记收款"""
    try:
        booking = BookingService(db).record_payment(current_user, booking_id, data.amount, data.method)
        return BookingResponse.model_validate(booking)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.put("/{booking_id}/payment-status", response_model=BookingResponse)
def update_payment_status(
    booking_id: str,
    data: PaymentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.BOOKING_PAYMENT))
):
    """设置支付状态"""
    try:
        booking = BookingService(db).update_payment_status(
            current_user, booking_id, data.payment_status, data.payment_method
        )
        return BookingResponse.model_validate(booking)
    except SERVICE_ERRORS as e:
        raise http_error(e)
