"""
app/lodge/security：营地领域角色权限

权限不随用户保存，始终由角色推导：permissions_for(role)。
"""
from typing import Any, Dict, FrozenSet, Union

from app.models.ontology import EmployeeRole
from app.security import permissions as P


LODGE_ROLE_PERMISSIONS: Dict[EmployeeRole, FrozenSet[str]] = {
    EmployeeRole.ADMIN: frozenset({
        P.VIEW_DASHBOARD, P.MANAGE_LODGES, P.MANAGE_BOOKINGS, P.MANAGE_CUSTOMERS,
        P.MANAGE_STAFF, P.MANAGE_INVOICES, P.MANAGE_PAYMENTS, P.VIEW_REPORTS,
        P.MANAGE_SETTINGS, P.VIEW_ANALYTICS, P.MANAGE_ROOMS, P.MANAGE_PRICING,
        P.SYSTEM_ADMIN, P.USER_MANAGEMENT, P.GLOBAL_ACCESS,
    }),

    EmployeeRole.MANAGER: frozenset({
        P.VIEW_DASHBOARD, P.MANAGE_LODGES, P.MANAGE_BOOKINGS, P.MANAGE_CUSTOMERS,
        P.VIEW_STAFF, P.MANAGE_STAFF_ASSIGNED, P.MANAGE_INVOICES, P.MANAGE_PAYMENTS,
        P.VIEW_REPORTS, P.MANAGE_ROOMS, P.LODGE_MANAGEMENT,
    }),

    EmployeeRole.SUPERVISOR: frozenset({
        P.VIEW_DASHBOARD, P.VIEW_LODGES, P.MANAGE_BOOKINGS, P.MANAGE_CUSTOMERS,
        P.VIEW_STAFF, P.MANAGE_STAFF_ASSIGNED, P.CREATE_INVOICES, P.VIEW_PAYMENTS,
        P.MANAGE_ROOMS, P.VIEW_REPORTS_ASSIGNED,
    }),

    EmployeeRole.RECEPTIONIST: frozenset({
        P.VIEW_DASHBOARD, P.VIEW_LODGES_ASSIGNED, P.MANAGE_BOOKINGS_ASSIGNED,
        P.MANAGE_CUSTOMERS_ASSIGNED, P.CREATE_INVOICES, P.VIEW_PAYMENTS_ASSIGNED,
        P.MANAGE_ROOMS_ASSIGNED, P.CHECKIN_CHECKOUT,
    }),

    EmployeeRole.CLEANER: frozenset({
        P.VIEW_DASHBOARD, P.VIEW_ROOMS_ASSIGNED, P.VIEW_BOOKINGS_ASSIGNED,
        P.UPDATE_ROOM_STATUS, P.CLEANING_SCHEDULE, P.MAINTENANCE_REQUESTS,
    }),

    EmployeeRole.MAINTENANCE: frozenset({
        P.VIEW_DASHBOARD, P.VIEW_ROOMS_ASSIGNED, P.UPDATE_ROOM_STATUS,
        P.MAINTENANCE_SCHEDULE, P.MAINTENANCE_REPORTS, P.INVENTORY_MANAGEMENT,
    }),
}


def permissions_for(role: Union[EmployeeRole, str]) -> FrozenSet[str]:
    """角色对应的权限集合，未知角色为空集"""
    try:
        return LODGE_ROLE_PERMISSIONS.get(EmployeeRole(role), frozenset())
    except ValueError:
        return frozenset()


def has_permission(user: Any, code: str) -> bool:
    """用户（按角色）是否拥有某个权限码"""
    return code in permissions_for(user.role)


def has_any_permission(user: Any, *codes: str) -> bool:
    """任一权限码匹配即可"""
    granted = permissions_for(user.role)
    return any(code in granted for code in codes)


__all__ = [
    "LODGE_ROLE_PERMISSIONS",
    "permissions_for",
    "has_permission",
    "has_any_permission",
]
