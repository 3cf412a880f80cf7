"""
营地服务测试
"""
import pytest
from datetime import date

from app.models.ontology import Lodge, RoomStatus, RoomType
from app.models.schemas import BookingCreate, LodgeCreate, LodgeUpdate, RoomCreate, RoomUpdate
from app.lodge.domain.rules.booking_rules import BookingValidationError
from app.lodge.services.booking_service import BookingService
from app.lodge.services.lodge_service import LodgeService, LodgeFilters


def _lodge_data(**overrides) -> LodgeCreate:
    data = {
        "name": "Kariba Lakeside Lodge",
        "description": "Lakeside lodge with sunset cruises",
        "address": {"street": "Lake Drive", "city": "Kariba", "state": "Mashonaland West", "country": "Zimbabwe"},
        "contact": {"phone": "+263 61 2146", "email": "stay@kariba.com"},
        "policies": {"check_in": "14:00", "check_out": "10:00",
                     "cancellation": "48 hours before arrival", "smoking_policy": "No smoking"},
        "amenities": ["WiFi", "Boat Cruises"],
    }
    data.update(overrides)
    return LodgeCreate(**data)


def _room_data(**overrides) -> RoomCreate:
    data = {
        "number": "103",
        "name": "River Suite",
        "type": RoomType.SUITE,
        "beds": {"king": 1, "single": 1},
        "pricing": {"normal": 300, "busy": 380, "slow": 240},
        "description": "Suite facing the river",
        "size": 60,
        "view": "River View",
        "floor": 1,
    }
    data.update(overrides)
    return RoomCreate(**data)


@pytest.fixture
def service(db_session, lodge, other_lodge):
    return LodgeService(db_session)


class TestLodges:
    """营地增删改查"""

    def test_create_lodge_starts_empty(self, service, admin):
        lodge = service.create_lodge(admin, _lodge_data())
        assert lodge.id.startswith("lodge")
        assert (lodge.total_rooms, lodge.available_rooms, lodge.occupancy_rate) == (0, 0, 0)
        assert lodge.address["city"] == "Kariba"

    def test_create_invalid_lodge(self, service, admin):
        with pytest.raises(BookingValidationError) as exc:
            service.create_lodge(admin, _lodge_data(name="K", contact={"phone": "", "email": ""}))
        assert {"name", "contact.phone", "contact.email"} <= set(exc.value.errors)

    def test_update_replaces_sub_structure(self, service, admin, lodge):
        updated = service.update_lodge(admin, lodge.id, LodgeUpdate(
            contact={"phone": "+263 13 99999", "email": "new@vfl.com"}, rating=4.9,
        ))
        assert updated.contact == {"phone": "+263 13 99999", "email": "new@vfl.com", "website": None}
        assert updated.rating == 4.9
        assert updated.name == "Victoria Falls Lodge"

    def test_update_validates_merged_form(self, service, admin, lodge):
        with pytest.raises(BookingValidationError):
            service.update_lodge(admin, lodge.id, LodgeUpdate(description="short"))

    def test_list_scoped_and_filtered(self, service, admin, receptionist):
        assert service.list_lodges(admin)["pagination"]["total_items"] == 2
        assert [l.id for l in service.list_lodges(receptionist)["lodges"]] == ["L1"]
        found = service.list_lodges(admin, LodgeFilters(location="hwange"))["lodges"]
        assert [l.id for l in found] == ["L2"]

    def test_list_room_status_tally(self, service, admin):
        tally = service.list_lodges(admin)["room_statuses"]
        assert tally["available"] == 3
        assert tally["occupied"] == 0

    def test_out_of_scope_lodge(self, service, receptionist):
        with pytest.raises(PermissionError):
            service.get_lodge(receptionist, "L2")

    def test_missing_lodge(self, service, admin):
        with pytest.raises(LookupError):
            service.get_lodge(admin, "nope")

    def test_delete_lodge_with_bookings_refused(self, service, admin, db_session):
        BookingService(db_session).create_booking(admin, BookingCreate(
            guest_name="John Smith", guest_email="john@example.com", guest_phone="+263777123456",
            lodge_id="L2", room_id="R201", check_in=date(2025, 2, 1), check_out=date(2025, 2, 3),
            guests=1, adults=1,
        ), today=date(2025, 1, 15))
        with pytest.raises(ValueError):
            service.delete_lodge(admin, "L2")

    def test_delete_lodge(self, service, admin, db_session):
        service.delete_lodge(admin, "L2")
        assert db_session.get(Lodge, "L2") is None


class TestRooms:
    """房间管理与派生统计"""

    def test_add_room_updates_stats(self, service, admin, lodge):
        room = service.add_room(admin, lodge.id, _room_data())
        assert room.capacity == 3
        assert room.pricing == {"normal": "300", "busy": "380", "slow": "240"}
        assert (lodge.total_rooms, lodge.available_rooms) == (3, 3)

    def test_duplicate_room_number(self, service, admin, lodge):
        with pytest.raises(BookingValidationError) as exc:
            service.add_room(admin, lodge.id, _room_data(number="101"))
        assert "number" in exc.value.errors

    def test_status_change_recomputes_occupancy(self, service, admin, lodge):
        service.update_room_status(admin, lodge.id, "R101", RoomStatus.OCCUPIED)
        assert lodge.available_rooms == 1
        assert lodge.occupancy_rate == 50.0

    def test_cleaning_to_available_stamps_last_cleaned(self, service, admin, lodge):
        service.update_room_status(admin, lodge.id, "R101", RoomStatus.CLEANING)
        room = service.update_room_status(admin, lodge.id, "R101", RoomStatus.AVAILABLE)
        assert room.last_cleaned is not None

    def test_update_room(self, service, admin, lodge):
        room = service.update_room(admin, lodge.id, "R101", RoomUpdate(pricing={"normal": 120, "busy": 160, "slow": 90}))
        assert room.pricing["normal"] == "120"

    def test_update_room_to_taken_number(self, service, admin, lodge):
        with pytest.raises(BookingValidationError):
            service.update_room(admin, lodge.id, "R101", RoomUpdate(number="102"))

    def test_room_of_other_lodge_not_found(self, service, admin, lodge):
        with pytest.raises(LookupError):
            service.update_room_status(admin, lodge.id, "R201", RoomStatus.OCCUPIED)

    def test_delete_room_updates_stats(self, service, admin, lodge):
        service.delete_room(admin, lodge.id, "R102")
        assert lodge.total_rooms == 1

    def test_suggest_room_numbers(self, service, admin, lodge):
        suggestions = service.suggest_room_numbers(admin, lodge.id)
        assert "101" not in suggestions
        assert suggestions[0] == "103"
