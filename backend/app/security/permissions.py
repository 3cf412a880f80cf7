"""
集中定义所有权限码常量

与前端 rolePermissions 保持一致；角色到权限码的映射见 app.lodge.security。
"""

# 通用
VIEW_DASHBOARD = "view_dashboard"
GLOBAL_ACCESS = "global_access"
SYSTEM_ADMIN = "system_admin"
USER_MANAGEMENT = "user_management"
MANAGE_SETTINGS = "manage_settings"

# 营地
MANAGE_LODGES = "manage_lodges"
LODGE_MANAGEMENT = "lodge_management"
VIEW_LODGES = "view_lodges"
VIEW_LODGES_ASSIGNED = "view_lodges_assigned"

# 房间
MANAGE_ROOMS = "manage_rooms"
MANAGE_ROOMS_ASSIGNED = "manage_rooms_assigned"
VIEW_ROOMS_ASSIGNED = "view_rooms_assigned"
UPDATE_ROOM_STATUS = "update_room_status"
MANAGE_PRICING = "manage_pricing"

# 预订
MANAGE_BOOKINGS = "manage_bookings"
MANAGE_BOOKINGS_ASSIGNED = "manage_bookings_assigned"
VIEW_BOOKINGS_ASSIGNED = "view_bookings_assigned"
CHECKIN_CHECKOUT = "checkin_checkout"

# 客户
MANAGE_CUSTOMERS = "manage_customers"
MANAGE_CUSTOMERS_ASSIGNED = "manage_customers_assigned"

# 账单 / 收款
MANAGE_INVOICES = "manage_invoices"
CREATE_INVOICES = "create_invoices"
MANAGE_PAYMENTS = "manage_payments"
VIEW_PAYMENTS = "view_payments"
VIEW_PAYMENTS_ASSIGNED = "view_payments_assigned"

# 员工
MANAGE_STAFF = "manage_staff"
MANAGE_STAFF_ASSIGNED = "manage_staff_assigned"
VIEW_STAFF = "view_staff"

# 报表
VIEW_REPORTS = "view_reports"
VIEW_REPORTS_ASSIGNED = "view_reports_assigned"
VIEW_ANALYTICS = "view_analytics"

# 清洁 / 维修
CLEANING_SCHEDULE = "cleaning_schedule"
MAINTENANCE_REQUESTS = "maintenance_requests"
MAINTENANCE_SCHEDULE = "maintenance_schedule"
MAINTENANCE_REPORTS = "maintenance_reports"
INVENTORY_MANAGEMENT = "inventory_management"


# ============== 路由守卫用的权限组（任一匹配即通过） ==============

BOOKING_READ = (MANAGE_BOOKINGS, MANAGE_BOOKINGS_ASSIGNED, VIEW_BOOKINGS_ASSIGNED)
BOOKING_WRITE = (MANAGE_BOOKINGS, MANAGE_BOOKINGS_ASSIGNED)
BOOKING_CHECKIN = (CHECKIN_CHECKOUT, MANAGE_BOOKINGS)
BOOKING_PAYMENT = (MANAGE_PAYMENTS, MANAGE_BOOKINGS, MANAGE_BOOKINGS_ASSIGNED)

LODGE_READ = (MANAGE_LODGES, LODGE_MANAGEMENT, VIEW_LODGES, VIEW_LODGES_ASSIGNED, VIEW_ROOMS_ASSIGNED)
LODGE_WRITE = (MANAGE_LODGES,)
ROOM_WRITE = (MANAGE_ROOMS, MANAGE_ROOMS_ASSIGNED)
ROOM_STATUS = (UPDATE_ROOM_STATUS, MANAGE_ROOMS, MANAGE_ROOMS_ASSIGNED)

STAFF_READ = (MANAGE_STAFF, VIEW_STAFF)
STAFF_WRITE = (MANAGE_STAFF, MANAGE_STAFF_ASSIGNED)
