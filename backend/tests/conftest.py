"""
Pytest 配置和共享 fixtures
"""
import os

# 测试不写演示数据，也不落地数据库文件
os.environ.setdefault("SEED_DEMO_DATA", "false")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import date, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.database import Base, get_db
from app.models import ontology  # noqa: F401
from app.models.ontology import Employee, EmployeeRole, Lodge, Room, RoomType, RoomStatus
from app.lodge.domain.inventory import apply_lodge_stats
from app.security.auth import get_password_hash, create_access_token
from app.main import app


@pytest.fixture(scope="function")
def db_engine():
    """创建内存数据库引擎"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """创建测试客户端"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== 营地 / 房间 Fixtures ==============

def make_lodge(lodge_id: str, name: str, rooms) -> Lodge:
    lodge = Lodge(
        id=lodge_id,
        name=name,
        description="Riverside lodge with game drives and a pool",
        address={"street": "1 Park Road", "city": "Victoria Falls", "state": "Matabeleland North",
                 "country": "Zimbabwe", "zip_code": "00263"},
        contact={"phone": "+263 13 44751", "email": "info@example.com"},
        amenities=["WiFi", "Pool"],
        images=[],
        facilities={"restaurant": True, "wifi": True},
        policies={"check_in": "14:00", "check_out": "10:00",
                  "cancellation": "24 hours before arrival", "smoking_policy": "No smoking"},
        rating=4.5,
        is_active=True,
    )
    lodge.rooms = rooms
    apply_lodge_stats(lodge)
    return lodge


def make_room(room_id: str, number: str, status: RoomStatus = RoomStatus.AVAILABLE,
              room_type: RoomType = RoomType.STANDARD, normal: str = "100") -> Room:
    return Room(
        id=room_id,
        number=number,
        name=f"Room {number}",
        type=room_type,
        capacity=2,
        beds={"single": 0, "double": 1, "queen": 0, "king": 0},
        amenities=["Fan"],
        images=[],
        pricing={"normal": normal, "busy": "150", "slow": "80"},
        status=status,
        description="Comfortable room",
        size=30,
        view="Garden View",
        floor=1,
        is_active=True,
    )


@pytest.fixture
def lodge(db_session):
    """营地 L1，两个空闲房间"""
    lodge = make_lodge("L1", "Victoria Falls Lodge", [make_room("R101", "101"), make_room("R102", "102")])
    db_session.add(lodge)
    db_session.commit()
    db_session.refresh(lodge)
    return lodge


@pytest.fixture
def other_lodge(db_session):
    """营地 L2，一个房间"""
    lodge = make_lodge("L2", "Hwange Safari Lodge", [make_room("R201", "201")])
    db_session.add(lodge)
    db_session.commit()
    db_session.refresh(lodge)
    return lodge


@pytest.fixture
def room(lodge):
    return next(r for r in lodge.rooms if r.id == "R101")


# ============== 员工 / 认证 Fixtures ==============

def make_staff(db_session, staff_id: str, role: EmployeeRole, lodges=None,
               supervisor_id=None, password: str = "123456") -> Employee:
    staff = Employee(
        id=staff_id,
        name=f"{role.value.title()} {staff_id}",
        email=f"{staff_id}@harrislodges.com",
        password_hash=get_password_hash(password),
        role=role,
        assigned_lodges=list(lodges or []),
        supervisor_id=supervisor_id,
        is_active=True,
    )
    db_session.add(staff)
    db_session.commit()
    db_session.refresh(staff)
    return staff


@pytest.fixture
def admin(db_session):
    return make_staff(db_session, "admin1", EmployeeRole.ADMIN)


@pytest.fixture
def manager(db_session):
    return make_staff(db_session, "manager1", EmployeeRole.MANAGER)


@pytest.fixture
def supervisor(db_session):
    return make_staff(db_session, "super1", EmployeeRole.SUPERVISOR, ["L1"])


@pytest.fixture
def receptionist(db_session, supervisor):
    return make_staff(db_session, "front1", EmployeeRole.RECEPTIONIST, ["L1"], supervisor_id=supervisor.id)


@pytest.fixture
def cleaner(db_session):
    return make_staff(db_session, "cleaner1", EmployeeRole.CLEANER, ["L1"])


def headers_for(staff: Employee) -> dict:
    return {"Authorization": f"Bearer {create_access_token(staff.id, staff.role)}"}


@pytest.fixture
def admin_auth_headers(admin):
    return headers_for(admin)


@pytest.fixture
def manager_auth_headers(manager):
    return headers_for(manager)


@pytest.fixture
def supervisor_auth_headers(supervisor):
    return headers_for(supervisor)


@pytest.fixture
def receptionist_auth_headers(receptionist):
    return headers_for(receptionist)


@pytest.fixture
def cleaner_auth_headers(cleaner):
    return headers_for(cleaner)


# ============== 预订 Fixtures ==============

def booking_payload(lodge_id: str = "L1", room_id: str = "R101", start_in: int = 7,
                    nights: int = 3, **overrides) -> dict:
    """有效的创建预订请求体，入住日期为今天之后 start_in 天"""
    check_in = date.today() + timedelta(days=start_in)
    payload = {
        "guest_name": "John Smith",
        "guest_email": "john@example.com",
        "guest_phone": "+263777123456",
        "lodge_id": lodge_id,
        "room_id": room_id,
        "check_in": check_in.isoformat(),
        "check_out": (check_in + timedelta(days=nights)).isoformat(),
        "guests": 2,
        "adults": 2,
        "children": 0,
        "booking_source": "website",
    }
    payload.update(overrides)
    return payload
