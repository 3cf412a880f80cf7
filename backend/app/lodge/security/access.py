"""
营地数据作用域

admin / manager 为全局访问，不受营地限制；
其他角色只能看到、操作自己被分配营地内的营地、预订和员工。
列表在返回给非全局角色前统一经过这里过滤。
"""
import logging
from typing import Any, Hashable, Iterable, List, Optional, Union

from core.security.data_scope import DataScopeContext, DataScopeLevel, IDataScopeResolver
from app.models.ontology import EmployeeRole

logger = logging.getLogger(__name__)

GLOBAL_ACCESS_ROLES = frozenset({EmployeeRole.ADMIN, EmployeeRole.MANAGER})


def _role(role: Union[EmployeeRole, str]) -> Optional[EmployeeRole]:
    try:
        return EmployeeRole(role)
    except ValueError:
        return None


def has_global_access(role: Union[EmployeeRole, str]) -> bool:
    """是否为全局访问角色"""
    return _role(role) in GLOBAL_ACCESS_ROLES


def accessible_lodges(all_lodge_ids: Iterable[str], assigned_lodges: Iterable[str],
                      role: Union[EmployeeRole, str]) -> List[str]:
    """可访问的营地 ID，保持 all_lodge_ids 的顺序"""
    if has_global_access(role):
        return list(all_lodge_ids)
    assigned = set(assigned_lodges or [])
    return [lodge_id for lodge_id in all_lodge_ids if lodge_id in assigned]


def can_access_lodge(lodge_id: str, assigned_lodges: Iterable[str],
                     role: Union[EmployeeRole, str]) -> bool:
    """是否可以访问某个营地"""
    if has_global_access(role):
        return True
    return lodge_id in set(assigned_lodges or [])


class LodgeDataScopeResolver(IDataScopeResolver):
    """营地数据作用域解析器"""

    def resolve_scope(self, role: str, scope_ids: Iterable[Hashable],
                      user_id: Optional[Any] = None) -> DataScopeContext:
        if has_global_access(role):
            return DataScopeContext(level=DataScopeLevel.ALL, user_id=user_id)
        return DataScopeContext(
            level=DataScopeLevel.SCOPE_ONLY,
            scope_ids=frozenset(scope_ids or []),
            user_id=user_id,
        )


lodge_scope_resolver = LodgeDataScopeResolver()


def resolve_lodge_scope(user: Any) -> DataScopeContext:
    """解析用户的营地作用域"""
    return lodge_scope_resolver.resolve_scope(user.role, user.assigned_lodges or [], user.id)


def ensure_lodge_access(user: Any, lodge_id: str) -> None:
    """不在作用域内时抛出 PermissionError"""
    if not resolve_lodge_scope(user).allows(lodge_id):
        logger.warning(f"User {user.id} ({_role(user.role)}) denied access to lodge {lodge_id}")
        raise PermissionError("无权访问该营地的数据")


def filter_lodges(user: Any, lodges: Iterable[Any]) -> List[Any]:
    return resolve_lodge_scope(user).filter(lodges, key=lambda lodge: lodge.id)


def filter_bookings(user: Any, bookings: Iterable[Any]) -> List[Any]:
    return resolve_lodge_scope(user).filter(bookings, key=lambda booking: booking.lodge_id)


def _visible_staff(scope: DataScopeContext, user: Any, staff: Any) -> bool:
    if staff.id == user.id or staff.supervisor_id == user.id:
        return True
    assigned = staff.assigned_lodges or []
    # 未分配营地的员工视为全局员工，对所有人可见
    if not assigned:
        return True
    return scope.allows_any(assigned)


def filter_staff(user: Any, staff_members: Iterable[Any]) -> List[Any]:
    """
    过滤员工列表

    非全局角色可见：营地有交集的员工、未分配营地的员工、直接下属、自己
    """
    scope = resolve_lodge_scope(user)
    if scope.is_unrestricted:
        return list(staff_members)
    return [s for s in staff_members if _visible_staff(scope, user, s)]


def can_manage_staff(user: Any, staff: Any) -> bool:
    """
    是否可以管理某个员工

    全局角色总是可以；主管可以管理营地有交集的员工或直接下属；其他角色不可以。
    """
    if has_global_access(user.role):
        return True
    if _role(user.role) != EmployeeRole.SUPERVISOR:
        return False
    if staff.supervisor_id == user.id:
        return True
    return bool(set(user.assigned_lodges or []) & set(staff.assigned_lodges or []))


__all__ = [
    "GLOBAL_ACCESS_ROLES",
    "has_global_access",
    "accessible_lodges",
    "can_access_lodge",
    "LodgeDataScopeResolver",
    "resolve_lodge_scope",
    "ensure_lodge_access",
    "filter_lodges",
    "filter_bookings",
    "filter_staff",
    "can_manage_staff",
]
