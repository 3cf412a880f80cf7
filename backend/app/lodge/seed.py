"""
演示数据

两个营地（Victoria Falls / Hwange）、三个房间、六个演示账号，以及几条未来日期的预订。
已存在数据时跳过，可重复执行。

演示账号（邮箱 / 密码）：
  admin@harrislodges.com        admin123         管理员   全部营地
  manager@harrislodges.com      manager123       经理     全部营地
  supervisor@harrislodges.com   supervisor123    主管     营地 1、2
  reception@harrislodges.com    reception123     前台     营地 1
  cleaner@harrislodges.com      cleaner123       清洁     营地 1
  maintenance@harrislodges.com  maintenance123   维修     营地 1、2
"""
import logging
from datetime import date, timedelta
from typing import Any, Dict

from sqlalchemy.orm import Session

from app.models.ontology import Lodge, Room, RoomType, RoomStatus, Employee, EmployeeRole, BookingSource
from app.models.schemas import BookingCreate
from app.lodge.domain.inventory import apply_lodge_stats
from app.security.auth import get_password_hash

logger = logging.getLogger(__name__)


DEMO_LODGES = [
    {
        "id": "1",
        "name": "Victoria Falls Lodge",
        "description": "Luxury lodge overlooking the magnificent Victoria Falls with world-class amenities and breathtaking views.",
        "address": {
            "street": "1 Victoria Falls Drive", "city": "Victoria Falls", "state": "Matabeleland North",
            "country": "Zimbabwe", "zip_code": "00263", "coordinates": {"lat": -17.9243, "lng": 25.8572},
        },
        "contact": {
            "phone": "+263 13 44751", "email": "info@victoriafallslodge.com",
            "website": "https://victoriafallslodge.com",
        },
        "amenities": ["WiFi", "Pool", "Restaurant", "Spa", "Conference Rooms", "Gym", "Parking"],
        "facilities": {
            "conference_rooms": 3, "restaurant": True, "gym": True, "spa": True,
            "pool": True, "parking": True, "wifi": True, "laundry": True,
        },
        "policies": {
            "check_in": "15:00", "check_out": "11:00", "cancellation": "24 hours before arrival",
            "pet_policy": "Pets allowed with additional fee", "smoking_policy": "No smoking in rooms",
        },
        "rating": 4.8,
        "rooms": [
            {
                "id": "r1", "number": "101", "name": "Victoria Suite", "type": RoomType.SUITE, "capacity": 4,
                "beds": {"single": 0, "double": 0, "queen": 1, "king": 1},
                "amenities": ["Balcony", "Mini Bar", "Safe", "Air Conditioning", "Room Service"],
                "pricing": {"normal": "450", "busy": "550", "slow": "350"},
                "status": RoomStatus.AVAILABLE, "size": 85, "view": "Falls View", "floor": 1,
                "description": "Spacious suite with panoramic views of Victoria Falls",
            },
            {
                "id": "r2", "number": "102", "name": "Garden Deluxe", "type": RoomType.DELUXE, "capacity": 2,
                "beds": {"single": 0, "double": 0, "queen": 1, "king": 0},
                "amenities": ["Garden View", "Mini Bar", "Safe", "Air Conditioning"],
                "pricing": {"normal": "280", "busy": "350", "slow": "220"},
                "status": RoomStatus.OCCUPIED, "size": 45, "view": "Garden View", "floor": 1,
                "description": "Elegant room with beautiful garden views",
            },
        ],
    },
    {
        "id": "2",
        "name": "Hwange Safari Lodge",
        "description": "Experience the African wilderness at our safari lodge near Hwange National Park.",
        "address": {
            "street": "Hwange National Park Road", "city": "Hwange", "state": "Matabeleland North",
            "country": "Zimbabwe", "zip_code": "00264", "coordinates": {"lat": -18.6297, "lng": 26.6056},
        },
        "contact": {
            "phone": "+263 18 8202", "email": "reservations@hwangesafari.com",
            "website": "https://hwangesafari.com",
        },
        "amenities": ["WiFi", "Restaurant", "Game Drives", "Campfire Area", "Conference Room"],
        "facilities": {
            "conference_rooms": 1, "restaurant": True, "gym": False, "spa": False,
            "pool": False, "parking": True, "wifi": True, "laundry": True,
        },
        "policies": {
            "check_in": "14:00", "check_out": "10:00", "cancellation": "48 hours before arrival",
            "smoking_policy": "Smoking allowed in designated areas only",
        },
        "rating": 4.5,
        "rooms": [
            {
                "id": "r3", "number": "201", "name": "Safari Tent", "type": RoomType.STANDARD, "capacity": 2,
                "beds": {"single": 2, "double": 0, "queen": 0, "king": 0},
                "amenities": ["Mosquito Net", "Fan", "Private Bathroom", "Safari View"],
                "pricing": {"normal": "180", "busy": "220", "slow": "150"},
                "status": RoomStatus.AVAILABLE, "size": 35, "view": "Safari View", "floor": 1,
                "description": "Authentic safari tent with modern amenities",
            },
        ],
    },
]

DEMO_STAFF = [
    {"id": "1", "name": "John Admin", "email": "admin@harrislodges.com", "password": "admin123",
     "role": EmployeeRole.ADMIN, "assigned_lodges": [], "department": "Administration"},
    {"id": "2", "name": "Sarah Manager", "email": "manager@harrislodges.com", "password": "manager123",
     "role": EmployeeRole.MANAGER, "assigned_lodges": [], "department": "Management"},
    {"id": "3", "name": "Mike Supervisor", "email": "supervisor@harrislodges.com", "password": "supervisor123",
     "role": EmployeeRole.SUPERVISOR, "assigned_lodges": ["1", "2"], "department": "Operations"},
    {"id": "4", "name": "Jane Receptionist", "email": "reception@harrislodges.com", "password": "reception123",
     "role": EmployeeRole.RECEPTIONIST, "assigned_lodges": ["1"], "department": "Front Desk",
     "supervisor_id": "3"},
    {"id": "5", "name": "Tom Cleaner", "email": "cleaner@harrislodges.com", "password": "cleaner123",
     "role": EmployeeRole.CLEANER, "assigned_lodges": ["1"], "department": "Housekeeping",
     "supervisor_id": "3"},
    {"id": "6", "name": "Lisa Maintenance", "email": "maintenance@harrislodges.com", "password": "maintenance123",
     "role": EmployeeRole.MAINTENANCE, "assigned_lodges": ["1", "2"], "department": "Maintenance",
     "supervisor_id": "3"},
]

# (房间, 入住偏移天数, 晚数, 客人)
DEMO_BOOKINGS = [
    ("r1", 3, 4, {"guest_name": "John Smith", "guest_email": "john@example.com", "guest_phone": "+263777123456"}),
    ("r2", 10, 2, {"guest_name": "Sarah Johnson", "guest_email": "sarah@example.com", "guest_phone": "+263777654321"}),
    ("r3", 5, 3, {"guest_name": "Mike Wilson", "guest_email": "mike@example.com", "guest_phone": "+263777987654"}),
]


def _seed_lodges(db: Session) -> int:
    created = 0
    for data in DEMO_LODGES:
        if db.get(Lodge, data["id"]):
            continue
        fields: Dict[str, Any] = {k: v for k, v in data.items() if k != "rooms"}
        lodge = Lodge(**fields)
        lodge.rooms = [Room(**room) for room in data["rooms"]]
        apply_lodge_stats(lodge)
        db.add(lodge)
        created += 1
    db.flush()
    return created


def _seed_staff(db: Session) -> int:
    created = 0
    for data in DEMO_STAFF:
        if db.get(Employee, data["id"]):
            continue
        fields = {k: v for k, v in data.items() if k != "password"}
        db.add(Employee(password_hash=get_password_hash(data["password"]), **fields))
        created += 1
    db.flush()
    return created


def _seed_bookings(db: Session, today: date) -> int:
    from app.lodge.services.booking_service import BookingService

    admin = db.get(Employee, "1")
    service = BookingService(db)
    created = 0
    for room_id, offset, nights, guest in DEMO_BOOKINGS:
        room = db.get(Room, room_id)
        if room is None or service.bookings.find_for_room(room_id):
            continue
        check_in = today + timedelta(days=offset)
        data = BookingCreate(
            lodge_id=room.lodge_id,
            room_id=room_id,
            check_in=check_in,
            check_out=check_in + timedelta(days=nights),
            guests=2,
            adults=2,
            children=0,
            booking_source=BookingSource.WEBSITE,
            **guest,
        )
        service.create_booking(admin, data, today=today)
        created += 1
    return created


def seed_demo_data(db: Session, today: date = None) -> Dict[str, int]:
    """写入演示数据，返回各类新建数量"""
    stats = {
        "lodges": _seed_lodges(db),
        "staff": _seed_staff(db),
    }
    db.commit()
    stats["bookings"] = _seed_bookings(db, today or date.today())
    if any(stats.values()):
        logger.info(f"Demo data seeded: {stats}")
    return stats
