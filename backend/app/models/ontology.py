"""
本体对象定义 (Ontology Objects)
所有业务实体通过对象、属性、链接进行建模：Lodge、Room、Booking、Employee
嵌套结构（地址、联系方式、床型、价格等）以 JSON 列保存，
读写由 schemas 中的类型化子结构负责
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Date, Boolean, Numeric, Text,
    ForeignKey, JSON, UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from app.database import Base


def new_id(prefix: str) -> str:
    """生成带前缀的字符串 ID"""
    return f"{prefix}_{uuid4().hex[:12]}"


# ============== 枚举定义 ==============

class RoomType(str, Enum):
    """房型"""
    STANDARD = "standard"
    DELUXE = "deluxe"
    SUITE = "suite"
    FAMILY = "family"
    EXECUTIVE = "executive"


class RoomStatus(str, Enum):
    """房间状态"""
    AVAILABLE = "available"        # 空闲可售
    OCCUPIED = "occupied"          # 入住中
    MAINTENANCE = "maintenance"    # 保养中
    OUT_OF_ORDER = "out_of_order"  # 故障停用
    CLEANING = "cleaning"          # 清洁中


class BookingStatus(str, Enum):
    """预订状态"""
    PENDING = "pending"          # 待确认
    CONFIRMED = "confirmed"      # 已确认
    CHECKED_IN = "checked_in"    # 已入住
    CHECKED_OUT = "checked_out"  # 已退房
    CANCELLED = "cancelled"      # 已取消


class PaymentStatus(str, Enum):
    """支付状态"""
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"


class BookingSource(str, Enum):
    """预订来源"""
    WEBSITE = "website"
    WALK_IN = "walk_in"
    BOOKING_COM = "booking_com"
    AIRBNB = "airbnb"
    PHONE = "phone"
    AGENT = "agent"


class RateSeason(str, Enum):
    """价格季节档位"""
    NORMAL = "normal"
    BUSY = "busy"
    SLOW = "slow"


class EmployeeRole(str, Enum):
    """员工角色"""
    ADMIN = "admin"                # 系统管理员
    MANAGER = "manager"            # 经理
    SUPERVISOR = "supervisor"      # 主管
    RECEPTIONIST = "receptionist"  # 前台
    CLEANER = "cleaner"            # 清洁员
    MAINTENANCE = "maintenance"    # 维修工


# ============== 本体对象定义 ==============

class Lodge(Base):
    """
    营地/酒店对象
    total_rooms / available_rooms / occupancy_rate 为派生统计，
    由 inventory 聚合器在房间变更后重新计算
    """
    __tablename__ = "lodges"

    id = Column(String(40), primary_key=True, default=lambda: new_id("lodge"))
    name = Column(String(100), nullable=False)
    description = Column(Text, default="")
    address = Column(JSON, default=dict)       # Address
    contact = Column(JSON, default=dict)       # ContactInfo
    amenities = Column(JSON, default=list)
    images = Column(JSON, default=list)
    facilities = Column(JSON, default=dict)    # Facilities
    policies = Column(JSON, default=dict)      # LodgePolicies
    rating = Column(Float, default=0)
    total_rooms = Column(Integer, default=0)
    available_rooms = Column(Integer, default=0)
    occupancy_rate = Column(Float, default=0)
    is_active = Column(Boolean, default=True)
    manager_id = Column(String(40))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    rooms = relationship(
        "Room", back_populates="lodge", cascade="all, delete-orphan",
        order_by="Room.number"
    )


class Room(Base):
    """房间对象 - 房间号在所属营地内唯一"""
    __tablename__ = "rooms"
    __table_args__ = (UniqueConstraint("lodge_id", "number", name="uq_room_lodge_number"),)

    id = Column(String(40), primary_key=True, default=lambda: new_id("room"))
    lodge_id = Column(String(40), ForeignKey("lodges.id"), nullable=False, index=True)
    number = Column(String(20), nullable=False)
    name = Column(String(100), nullable=False)
    type = Column(SQLEnum(RoomType), nullable=False, default=RoomType.STANDARD)
    capacity = Column(Integer, default=1)
    beds = Column(JSON, default=dict)          # BedConfiguration
    amenities = Column(JSON, default=list)
    images = Column(JSON, default=list)
    pricing = Column(JSON, default=dict)       # RoomPricing
    status = Column(SQLEnum(RoomStatus), nullable=False, default=RoomStatus.AVAILABLE)
    description = Column(Text, default="")
    size = Column(Float, default=0)            # 平方米
    view = Column(String(100), default="")
    floor = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    last_cleaned = Column(DateTime)
    next_maintenance = Column(DateTime)
    booking_version = Column(Integer, nullable=False, default=0)  # 每次写入预订时递增，用作行锁
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    lodge = relationship("Lodge", back_populates="rooms")


class Booking(Base):
    """
    预订对象 - 预订生命周期的聚合根
    lodge_name / room_name / room_type 为冗余字段，便于列表展示
    取消是状态而不是删除
    """
    __tablename__ = "bookings"

    id = Column(String(40), primary_key=True, default=lambda: new_id("booking"))

    # 客人信息
    guest_name = Column(String(100), nullable=False)
    guest_email = Column(String(100), nullable=False)
    guest_phone = Column(String(30), nullable=False)
    guest_address = Column(String(255))
    guest_nationality = Column(String(60))
    guest_id_number = Column(String(60))
    is_returning_guest = Column(Boolean, default=False)

    # 房间信息
    lodge_id = Column(String(40), ForeignKey("lodges.id"), nullable=False, index=True)
    lodge_name = Column(String(100))
    room_id = Column(String(40), ForeignKey("rooms.id"), nullable=False, index=True)
    room_name = Column(String(100))
    room_type = Column(String(20))

    # 入住窗口 [check_in, check_out)
    check_in = Column(Date, nullable=False, index=True)
    check_out = Column(Date, nullable=False)
    guests = Column(Integer, nullable=False, default=1)
    adults = Column(Integer, nullable=False, default=1)
    children = Column(Integer, nullable=False, default=0)

    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.PENDING)

    # 金额
    room_rate = Column(Numeric(10, 2), nullable=False, default=0)
    nights = Column(Integer, nullable=False, default=1)
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    discount_percent = Column(Numeric(5, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    taxes = Column(Numeric(10, 2), nullable=False, default=0)
    extra_charges = Column(Numeric(10, 2), nullable=False, default=0)
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    deposit = Column(Numeric(10, 2), nullable=False, default=0)
    balance = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(String(3), default="USD")
    payment_status = Column(SQLEnum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)
    payment_method = Column(String(30))
    booking_source = Column(SQLEnum(BookingSource), nullable=False, default=BookingSource.WEBSITE)

    special_requests = Column(Text)
    notes = Column(Text)

    # 状态流转记录
    check_in_time = Column(DateTime)
    check_out_time = Column(DateTime)
    cancellation_reason = Column(Text)
    cancellation_deadline = Column(DateTime)

    # 审计
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)
    created_by = Column(String(40))
    last_modified_by = Column(String(40))

    lodge = relationship("Lodge")
    room = relationship("Room")


class Employee(Base):
    """
    员工对象 - 同时是登录用户
    权限不落库，由 role 推导（见 app.lodge.security.permissions_for）
    assigned_lodges 为空时，admin/manager 拥有全局访问
    """
    __tablename__ = "employees"

    id = Column(String(40), primary_key=True, default=lambda: new_id("staff"))
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SQLEnum(EmployeeRole), nullable=False, default=EmployeeRole.RECEPTIONIST)
    assigned_lodges = Column(JSON, default=list)
    is_active = Column(Boolean, default=True)

    phone = Column(String(30))
    address = Column(String(255))
    employee_no = Column(String(20))
    department = Column(String(60))
    date_hired = Column(Date)
    salary = Column(Numeric(10, 2))
    supervisor_id = Column(String(40), ForeignKey("employees.id"))
    last_login = Column(DateTime)

    shift = Column(JSON)               # ShiftSchedule
    emergency_contact = Column(JSON)   # EmergencyContact
    notes = Column(Text)
    performance = Column(JSON)         # PerformanceReview

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
