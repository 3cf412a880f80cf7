"""
Pydantic 模式定义
用于 API 请求/响应验证

嵌套结构（地址、联系方式、政策、床型、价格、排班等）定义为独立子模型，
更新时整体替换对应子结构，不做字符串路径修改
"""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List, Dict
from pydantic import BaseModel, Field, ConfigDict
from app.models.ontology import (
    RoomType, RoomStatus, BookingStatus, PaymentStatus, BookingSource,
    RateSeason, EmployeeRole
)


# ============== 营地子结构 ==============

class Coordinates(BaseModel):
    lat: float
    lng: float


class Address(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zip_code: str = ""
    coordinates: Optional[Coordinates] = None


class ContactInfo(BaseModel):
    phone: str = ""
    email: str = ""
    website: Optional[str] = None


class Facilities(BaseModel):
    conference_rooms: int = 0
    restaurant: bool = False
    gym: bool = False
    spa: bool = False
    pool: bool = False
    parking: bool = False
    wifi: bool = False
    laundry: bool = False


class LodgePolicies(BaseModel):
    check_in: str = ""
    check_out: str = ""
    cancellation: str = ""
    pet_policy: Optional[str] = None
    smoking_policy: str = ""


# ============== 营地 Schemas ==============

class LodgeBase(BaseModel):
    name: str = Field("", max_length=100)
    description: str = ""
    address: Address = Field(default_factory=Address)
    contact: ContactInfo = Field(default_factory=ContactInfo)
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    facilities: Facilities = Field(default_factory=Facilities)
    policies: LodgePolicies = Field(default_factory=LodgePolicies)
    rating: float = 0
    is_active: bool = True
    manager_id: Optional[str] = None


class LodgeCreate(LodgeBase):
    pass


class LodgeUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    address: Optional[Address] = None
    contact: Optional[ContactInfo] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    facilities: Optional[Facilities] = None
    policies: Optional[LodgePolicies] = None
    rating: Optional[float] = None
    is_active: Optional[bool] = None
    manager_id: Optional[str] = None


class LodgeStatsResponse(BaseModel):
    total_rooms: int
    available_rooms: int
    occupancy_rate: float


# ============== 房间 Schemas ==============

class BedConfiguration(BaseModel):
    single: int = Field(0, ge=0)
    double: int = Field(0, ge=0)
    queen: int = Field(0, ge=0)
    king: int = Field(0, ge=0)


class RoomPricing(BaseModel):
    normal: Decimal = Decimal("0")
    busy: Decimal = Decimal("0")
    slow: Decimal = Decimal("0")


class RoomBase(BaseModel):
    number: str = Field("", max_length=20)
    name: str = Field("", max_length=100)
    type: Optional[RoomType] = None
    capacity: int = 0
    beds: BedConfiguration = Field(default_factory=BedConfiguration)
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    pricing: RoomPricing = Field(default_factory=RoomPricing)
    status: RoomStatus = RoomStatus.AVAILABLE
    description: str = ""
    size: float = 0
    view: str = ""
    floor: Optional[int] = None
    is_active: bool = True


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    number: Optional[str] = Field(None, max_length=20)
    name: Optional[str] = Field(None, max_length=100)
    type: Optional[RoomType] = None
    capacity: Optional[int] = None
    beds: Optional[BedConfiguration] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    pricing: Optional[RoomPricing] = None
    status: Optional[RoomStatus] = None
    description: Optional[str] = None
    size: Optional[float] = None
    view: Optional[str] = None
    floor: Optional[int] = None
    is_active: Optional[bool] = None


class RoomStatusUpdate(BaseModel):
    status: RoomStatus


class RoomResponse(RoomBase):
    id: str
    lodge_id: str
    type: RoomType
    floor: int
    last_cleaned: Optional[datetime] = None
    next_maintenance: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class LodgeResponse(LodgeBase):
    id: str
    total_rooms: int
    available_rooms: int
    occupancy_rate: float
    rooms: List[RoomResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class RoomStatusTally(BaseModel):
    available: int = 0
    occupied: int = 0
    maintenance: int = 0
    out_of_order: int = 0
    cleaning: int = 0


class LodgeListResponse(BaseModel):
    lodges: List[LodgeResponse]
    pagination: "Pagination"
    room_statuses: RoomStatusTally


# ============== 预订 Schemas ==============

class BookingBase(BaseModel):
    guest_name: str = ""
    guest_email: str = ""
    guest_phone: str = ""
    guest_address: Optional[str] = None
    guest_nationality: Optional[str] = None
    guest_id_number: Optional[str] = None
    is_returning_guest: bool = False
    lodge_id: str = ""
    room_id: str = ""
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    guests: int = 1
    adults: int = 1
    children: int = 0
    booking_source: BookingSource = BookingSource.WEBSITE
    special_requests: Optional[str] = None
    notes: Optional[str] = None


class BookingCreate(BookingBase):
    """创建预订 - 房价默认取房间当季价格，可显式指定 room_rate 覆盖"""
    status: BookingStatus = BookingStatus.PENDING
    season: RateSeason = RateSeason.NORMAL
    room_rate: Optional[Decimal] = None
    discount_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    extra_charges: Decimal = Field(default=Decimal("0"), ge=0)
    deposit: Decimal = Decimal("0")
    payment_method: Optional[str] = None


class BookingUpdate(BaseModel):
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_address: Optional[str] = None
    guest_nationality: Optional[str] = None
    guest_id_number: Optional[str] = None
    room_id: Optional[str] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    guests: Optional[int] = None
    adults: Optional[int] = None
    children: Optional[int] = None
    booking_source: Optional[BookingSource] = None
    special_requests: Optional[str] = None
    notes: Optional[str] = None
    season: Optional[RateSeason] = None
    room_rate: Optional[Decimal] = None
    discount_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    extra_charges: Optional[Decimal] = Field(None, ge=0)
    deposit: Optional[Decimal] = None


class BookingStatusChange(BaseModel):
    status: BookingStatus
    reason: Optional[str] = None


class BookingCancel(BaseModel):
    reason: Optional[str] = None


class PaymentCreate(BaseModel):
    amount: Decimal
    method: str = ""


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus
    payment_method: Optional[str] = None


class BookingResponse(BaseModel):
    id: str
    guest_name: str
    guest_email: str
    guest_phone: str
    guest_address: Optional[str] = None
    guest_nationality: Optional[str] = None
    guest_id_number: Optional[str] = None
    is_returning_guest: bool = False
    lodge_id: str
    lodge_name: Optional[str] = None
    room_id: str
    room_name: Optional[str] = None
    room_type: Optional[str] = None
    check_in: date
    check_out: date
    guests: int
    adults: int
    children: int
    status: BookingStatus
    room_rate: Decimal
    nights: int
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    taxes: Decimal
    extra_charges: Decimal
    amount: Decimal
    deposit: Decimal
    balance: Decimal
    currency: str
    payment_status: PaymentStatus
    payment_method: Optional[str] = None
    booking_source: BookingSource
    special_requests: Optional[str] = None
    notes: Optional[str] = None
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    cancellation_deadline: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    created_by: Optional[str] = None
    last_modified_by: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class BookingActionResponse(BaseModel):
    """状态变更 / 取消的响应，warnings 为不阻断的提示"""
    booking: BookingResponse
    warnings: Dict[str, str] = Field(default_factory=dict)


class BookingStats(BaseModel):
    total_bookings: int = 0
    total_revenue: Decimal = Decimal("0")
    average_booking_value: Decimal = Decimal("0")
    cancellation_rate: Decimal = Decimal("0")
    today_check_ins: int = 0
    today_check_outs: int = 0
    pending_bookings: int = 0
    confirmed_bookings: int = 0


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]
    pagination: Pagination
    stats: BookingStats


class QuoteRequest(BaseModel):
    room_rate: Decimal = Field(..., ge=0)
    check_in: date
    check_out: date
    guests: int = 1
    discount_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    extra_charges: Decimal = Field(default=Decimal("0"), ge=0)
    tax_rate: Optional[Decimal] = Field(None, ge=0)


class QuoteResponse(BaseModel):
    nights: int
    subtotal: Decimal
    discount_amount: Decimal
    taxes: Decimal
    extra_charges: Decimal
    total: Decimal


# ============== 员工 Schemas ==============

class ShiftSchedule(BaseModel):
    start: str
    end: str
    days: List[str] = Field(default_factory=list)


class EmergencyContact(BaseModel):
    name: str
    phone: str
    relationship: str


class PerformanceReview(BaseModel):
    rating: float = Field(..., ge=0, le=5)
    last_review: Optional[date] = None
    next_review: Optional[date] = None


class StaffBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=100)
    role: EmployeeRole
    assigned_lodges: List[str] = Field(default_factory=list)
    is_active: bool = True
    phone: Optional[str] = None
    address: Optional[str] = None
    employee_no: Optional[str] = None
    department: Optional[str] = None
    date_hired: Optional[date] = None
    salary: Optional[Decimal] = Field(None, ge=0)
    supervisor_id: Optional[str] = None
    shift: Optional[ShiftSchedule] = None
    emergency_contact: Optional[EmergencyContact] = None
    notes: Optional[str] = None
    performance: Optional[PerformanceReview] = None


class StaffCreate(StaffBase):
    password: str = Field(..., min_length=6)


class StaffUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[EmployeeRole] = None
    is_active: Optional[bool] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    employee_no: Optional[str] = None
    department: Optional[str] = None
    date_hired: Optional[date] = None
    salary: Optional[Decimal] = Field(None, ge=0)
    supervisor_id: Optional[str] = None
    shift: Optional[ShiftSchedule] = None
    emergency_contact: Optional[EmergencyContact] = None
    notes: Optional[str] = None
    performance: Optional[PerformanceReview] = None


class StaffLodgeAssignment(BaseModel):
    lodge_ids: List[str]


class StaffResponse(StaffBase):
    id: str
    permissions: List[str] = Field(default_factory=list)
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class StaffListResponse(BaseModel):
    staff: List[StaffResponse]
    pagination: Pagination


# ============== 认证 Schemas ==============

class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: StaffResponse


class PasswordChange(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=6)


LodgeListResponse.model_rebuild()
