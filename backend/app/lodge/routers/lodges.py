"""
营地与房间管理路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import Employee
from app.models.schemas import (
    LodgeCreate, LodgeUpdate, LodgeResponse, LodgeListResponse,
    RoomCreate, RoomUpdate, RoomStatusUpdate, RoomResponse,
)
from app.lodge.services.lodge_service import LodgeService, LodgeFilters
from app.lodge.routers import http_error, SERVICE_ERRORS
from app.security import permissions as P
from app.security.auth import require_permission

router = APIRouter(prefix="/lodges", tags=["营地管理"])


@router.get("", response_model=LodgeListResponse)
def list_lodges(
    is_active: Optional[bool] = None,
    location: Optional[str] = None,
    amenities: List[str] = Query(default=[]),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.LODGE_READ))
):
    """获取营地列表"""
    filters = LodgeFilters(is_active=is_active, location=location, amenities=amenities)
    result = LodgeService(db).list_lodges(current_user, filters, page)
    return LodgeListResponse(
        lodges=[LodgeResponse.model_validate(lodge) for lodge in result["lodges"]],
        pagination=result["pagination"],
        room_statuses=result["room_statuses"],
    )


@router.get("/{lodge_id}", response_model=LodgeResponse)
def get_lodge(
    lodge_id: str,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.LODGE_READ))
):
    """获取营地详情（含房间）"""
    try:
        return LodgeResponse.model_validate(LodgeService(db).get_lodge(current_user, lodge_id))
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.post("", response_model=LodgeResponse, status_code=201)
def create_lodge(
    data: LodgeCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.LODGE_WRITE))
):
    """创建营地"""
    try:
        return LodgeResponse.model_validate(LodgeService(db).create_lodge(current_user, data))
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.put("/{lodge_id}", response_model=LodgeResponse)
def update_lodge(
    lodge_id: str,
    data: LodgeUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.LODGE_WRITE))
):
    """更新营地"""
    try:
        return LodgeResponse.model_validate(LodgeService(db).update_lodge(current_user, lodge_id, data))
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.delete("/{lodge_id}")
def delete_lodge(
    lodge_id: str,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.LODGE_WRITE))
):
    """删除营地"""
    try:
        LodgeService(db).delete_lodge(current_user, lodge_id)
        return {"message": "营地已删除"}
    except SERVICE_ERRORS as e:
        raise http_error(e)


# ============== 房间 ==============

@router.get("/{lodge_id}/room-suggestions", response_model=List[str])
def suggest_room_numbers(
    lodge_id: str,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.ROOM_WRITE))
):
    """可用房间号建议"""
    try:
        return LodgeService(db).suggest_room_numbers(current_user, lodge_id)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.post("/{lodge_id}/rooms", response_model=RoomResponse, status_code=201)
def add_room(
    lodge_id: str,
    data: RoomCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.ROOM_WRITE))
):
    """添加房间"""
    try:
        return RoomResponse.model_validate(LodgeService(db).add_room(current_user, lodge_id, data))
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.put("/{lodge_id}/rooms/{room_id}", response_model=RoomResponse)
def update_room(
    lodge_id: str,
    room_id: str,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.ROOM_WRITE))
):
    """更新房间"""
    try:
        room = LodgeService(db).update_room(current_user, lodge_id, room_id, data)
        return RoomResponse.model_validate(room)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.put("/{lodge_id}/rooms/{room_id}/status", response_model=RoomResponse)
def update_room_status(
    lodge_id: str,
    room_id: str,
    data: RoomStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.ROOM_STATUS))
):
    """变更房间状态"""
    try:
        room = LodgeService(db).update_room_status(current_user, lodge_id, room_id, data.status)
        return RoomResponse.model_validate(room)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.delete("/{lodge_id}/rooms/{room_id}")
def delete_room(
    lodge_id: str,
    room_id: str,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.ROOM_WRITE))
):
    """删除房间"""
    try:
        LodgeService(db).delete_room(current_user, lodge_id, room_id)
        return {"message": "房间已删除"}
    except SERVICE_ERRORS as e:
        raise http_error(e)
