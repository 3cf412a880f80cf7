"""
员工服务 - 本体操作层
管理 Employee 对象和认证

非全局角色只能看到作用域内的员工，只能修改自己可管理的员工。
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.models.ontology import Employee, EmployeeRole
from app.models.schemas import StaffCreate, StaffUpdate, StaffResponse, PasswordChange
from app.lodge.domain.interfaces import LodgeRepository, StaffRepository
from app.lodge.domain.repositories import SqlLodgeRepository, SqlStaffRepository
from app.lodge.domain.rules.booking_rules import BookingValidationError, EntityNotFoundError
from app.lodge.security import permissions_for
from app.lodge.security.access import can_manage_staff, filter_staff, has_global_access
from app.lodge.services.pagination import paginate
from app.security.auth import get_password_hash, verify_password, create_access_token

logger = logging.getLogger(__name__)

JSON_FIELDS = ("shift", "emergency_contact", "performance")
# 不可置空的字段，更新时忽略 null
REQUIRED_FIELDS = ("name", "role", "is_active")


@dataclass
class StaffFilters:
    """员工列表过滤条件"""
    role: Optional[EmployeeRole] = None
    lodge_id: Optional[str] = None       # 未分配营地的员工也算匹配
    is_active: Optional[bool] = None
    department: Optional[str] = None

    def matches(self, staff: Employee) -> bool:
        if self.role and staff.role != self.role:
            return False
        if self.lodge_id:
            assigned = staff.assigned_lodges or []
            if assigned and self.lodge_id not in assigned:
                return False
        if self.is_active is not None and bool(staff.is_active) != self.is_active:
            return False
        if self.department and staff.department != self.department:
            return False
        return True


def to_staff_response(staff: Employee) -> StaffResponse:
    """ORM -> 响应模型，权限按角色推导"""
    response = StaffResponse.model_validate(staff)
    response.permissions = sorted(permissions_for(staff.role))
    return response


def _dump_json(value: Any) -> Any:
    if value is None:
        return None
    return value.model_dump(mode="json") if hasattr(value, "model_dump") else value


class StaffService:
    """员工服务"""

    def __init__(self, db: Session,
                 staff: Optional[StaffRepository] = None,
                 lodges: Optional[LodgeRepository] = None):
        self.db = db
        self.staff = staff or SqlStaffRepository(db)
        self.lodges = lodges or SqlLodgeRepository(db)

    # ============== 查询 ==============

    def list_staff(self, user: Employee, filters: Optional[StaffFilters] = None,
                   page: int = 1) -> Dict[str, Any]:
        """获取员工列表（作用域过滤 + 条件过滤 + 分页）"""
        filters = filters or StaffFilters()
        matched = [s for s in filter_staff(user, self.staff.list_all()) if filters.matches(s)]
        items, pagination = paginate(matched, page, settings.STAFF_PAGE_SIZE)
        return {"staff": items, "pagination": pagination}

    def get_staff(self, user: Employee, staff_id: str) -> Employee:
        """获取单个员工，不可见时抛 PermissionError"""
        staff = self.staff.get(staff_id)
        if not staff:
            raise EntityNotFoundError("员工不存在")
        if not filter_staff(user, [staff]):
            raise PermissionError("无权查看该员工")
        return staff

    # ============== 写入 ==============

    def _check_lodges(self, lodge_ids: Iterable[str], errors: Dict[str, str]) -> List[str]:
        lodge_ids = list(dict.fromkeys(lodge_ids or []))
        missing = [lid for lid in lodge_ids if self.lodges.get(lid) is None]
        if missing:
            errors["assigned_lodges"] = f"营地不存在: {', '.join(missing)}"
        return lodge_ids

    def _check_role(self, user: Employee, role: EmployeeRole) -> None:
        if has_global_access(role) and not has_global_access(user.role):
            raise PermissionError("无权设置该角色")

    def _ensure_manageable(self, user: Employee, staff: Any) -> None:
        if not can_manage_staff(user, staff):
            logger.warning(f"User {user.id} denied managing staff {getattr(staff, 'id', None)}")
            raise PermissionError("无权管理该员工")

    def create_staff(self, user: Employee, data: StaffCreate) -> Employee:
        """创建员工"""
        if self.staff.get_by_email(data.email):
            raise ValueError(f"邮箱 '{data.email}' 已存在")
        self._check_role(user, data.role)

        errors: Dict[str, str] = {}
        lodge_ids = self._check_lodges(data.assigned_lodges, errors)
        if data.supervisor_id and not self.staff.get(data.supervisor_id):
            errors["supervisor_id"] = "上级不存在"
        if errors:
            raise BookingValidationError(errors, "员工信息校验失败")

        staff = Employee(
            name=data.name.strip(),
            email=data.email.strip().lower(),
            password_hash=get_password_hash(data.password),
            role=data.role,
            assigned_lodges=lodge_ids,
            is_active=data.is_active,
            phone=data.phone,
            address=data.address,
            employee_no=data.employee_no,
            department=data.department,
            date_hired=data.date_hired,
            salary=data.salary,
            supervisor_id=data.supervisor_id,
            notes=data.notes,
            **{key: _dump_json(getattr(data, key)) for key in JSON_FIELDS},
        )
        self._ensure_manageable(user, staff)

        self.staff.add(staff)
        self.db.commit()
        self.db.refresh(staff)
        logger.info(f"Staff {staff.id} ({staff.role.value}) created by {user.id}")
        return staff

    def update_staff(self, user: Employee, staff_id: str, data: StaffUpdate) -> Employee:
        """更新员工"""
        staff = self.get_staff(user, staff_id)
        self._ensure_manageable(user, staff)
        updates = data.model_dump(exclude_unset=True)
        updates = {k: v for k, v in updates.items() if v is not None or k not in REQUIRED_FIELDS}

        if "role" in updates and updates["role"] is not None:
            self._check_role(user, updates["role"])
            if staff.role == EmployeeRole.ADMIN and updates["role"] != EmployeeRole.ADMIN:
                self._ensure_other_admin(staff)

        if updates.get("is_active") is False:
            self._check_deactivation(user, staff)

        if updates.get("supervisor_id"):
            if updates["supervisor_id"] == staff.id:
                raise ValueError("员工不能是自己的上级")
            if not self.staff.get(updates["supervisor_id"]):
                raise BookingValidationError({"supervisor_id": "上级不存在"}, "员工信息校验失败")

        for key in updates:
            value = getattr(data, key)
            setattr(staff, key, _dump_json(value) if key in JSON_FIELDS else value)
        staff.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(staff)
        logger.info(f"Staff {staff.id} updated by {user.id}: {sorted(updates.keys())}")
        return staff

    def assign_lodges(self, user: Employee, staff_id: str, lodge_ids: List[str]) -> Employee:
        """
        重新分配营地

        非全局角色只能分配自己作用域内的营地。
        """
        staff = self.get_staff(user, staff_id)
        self._ensure_manageable(user, staff)

        errors: Dict[str, str] = {}
        lodge_ids = self._check_lodges(lodge_ids, errors)
        if errors:
            raise BookingValidationError(errors, "员工信息校验失败")
        if not has_global_access(user.role):
            outside = [lid for lid in lodge_ids if lid not in (user.assigned_lodges or [])]
            if outside:
                raise PermissionError(f"无权分配营地: {', '.join(outside)}")

        staff.assigned_lodges = lodge_ids
        staff.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(staff)
        logger.info(f"Staff {staff.id} assigned to lodges {lodge_ids} by {user.id}")
        return staff

    def deactivate_staff(self, user: Employee, staff_id: str) -> Employee:
        """停用员工"""
        staff = self.get_staff(user, staff_id)
        self._ensure_manageable(user, staff)
        self._check_deactivation(user, staff)

        staff.is_active = False
        staff.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(staff)
        logger.info(f"Staff {staff.id} deactivated by {user.id}")
        return staff

    def _check_deactivation(self, user: Employee, staff: Employee) -> None:
        if staff.id == user.id:
            raise ValueError("不能停用自己的账号")
        if staff.role == EmployeeRole.ADMIN:
            self._ensure_other_admin(staff)

    def _ensure_other_admin(self, staff: Employee) -> None:
        """系统需至少保留一个在职管理员"""
        others = [
            s for s in self.staff.list_all()
            if s.id != staff.id and s.role == EmployeeRole.ADMIN and s.is_active
        ]
        if not others:
            raise ValueError("系统需至少保留一个管理员账号")

    # ============== 认证 ==============

    def authenticate(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """
        邮箱 + 密码登录

        Returns:
            {"access_token", "token_type", "user"}，凭证错误返回 None

        Raises:
            ValueError: 账号已停用
        """
        staff = self.staff.get_by_email(email)
        if not staff or not verify_password(password, staff.password_hash):
            logger.warning(f"Failed login attempt for {email}")
            return None

        if not staff.is_active:
            raise ValueError("账号已停用，请联系管理员")

        staff.last_login = datetime.utcnow()
        self.db.commit()
        self.db.refresh(staff)

        logger.info(f"Staff {staff.id} logged in")
        return {
            "access_token": create_access_token(staff.id, staff.role),
            "token_type": "bearer",
            "user": to_staff_response(staff),
        }

    def change_password(self, user: Employee, data: PasswordChange) -> None:
        """修改自己的密码"""
        if not verify_password(data.old_password, user.password_hash):
            raise ValueError("原密码错误")
        user.password_hash = get_password_hash(data.new_password)
        user.updated_at = datetime.utcnow()
        self.db.commit()
        logger.info(f"Staff {user.id} changed password")
