"""
员工管理路由
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import Employee, EmployeeRole
from app.models.schemas import (
    StaffCreate, StaffUpdate, StaffResponse, StaffListResponse, StaffLodgeAssignment,
)
from app.lodge.services.staff_service import StaffService, StaffFilters, to_staff_response
from app.lodge.routers import http_error, SERVICE_ERRORS
from app.security import permissions as P
from app.security.auth import require_permission

router = APIRouter(prefix="/staff", tags=["员工管理"])


@router.get("", response_model=StaffListResponse)
def list_staff(
    role: Optional[EmployeeRole] = None,
    lodge_id: Optional[str] = None,
    is_active: Optional[bool] = None,
    department: Optional[str] = None,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.STAFF_READ))
):
    """获取员工列表"""
    filters = StaffFilters(role=role, lodge_id=lodge_id, is_active=is_active, department=department)
    result = StaffService(db).list_staff(current_user, filters, page)
    return StaffListResponse(
        staff=[to_staff_response(s) for s in result["staff"]],
        pagination=result["pagination"],
    )


@router.get("/{staff_id}", response_model=StaffResponse)
def get_staff(
    staff_id: str,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.STAFF_READ))
):
    """获取员工详情"""
    try:
        return to_staff_response(StaffService(db).get_staff(current_user, staff_id))
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.post("", response_model=StaffResponse, status_code=201)
def create_staff(
    data: StaffCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.STAFF_WRITE))
):
    """创建员工"""
    try:
        return to_staff_response(StaffService(db).create_staff(current_user, data))
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.put("/{staff_id}", response_model=StaffResponse)
def update_staff(
    staff_id: str,
    data: StaffUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.STAFF_WRITE))
):
    """更新员工信息"""
    try:
        return to_staff_response(StaffService(db).update_staff(current_user, staff_id, data))
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.put("/{staff_id}/lodges", response_model=StaffResponse)
def assign_lodges(
    staff_id: str,
    data: StaffLodgeAssignment,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.STAFF_WRITE))
):
    """分配营地"""
    try:
        return to_staff_response(StaffService(db).assign_lodges(current_user, staff_id, data.lodge_ids))
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.post("/{staff_id}/deactivate", response_model=StaffResponse)
def deactivate_staff(
    staff_id: str,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(*P.STAFF_WRITE))
):
    """停用员工"""
    try:
        return to_staff_response(StaffService(db).deactivate_staff(current_user, staff_id))
    except SERVICE_ERRORS as e:
        raise http_error(e)
