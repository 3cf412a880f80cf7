"""
营地 / 房间表单规则单元测试
"""
import pytest
from types import SimpleNamespace

from app.models.ontology import RoomType
from app.models.schemas import LodgeCreate, RoomCreate, BedConfiguration
from app.lodge.domain.rules.lodge_rules import (
    validate_lodge_form, validate_room_form, validate_room_number,
    capacity_from_beds, suggest_room_numbers,
)


def _lodge(**overrides) -> LodgeCreate:
    data = {
        "name": "Victoria Falls Lodge",
        "description": "Luxury lodge overlooking the falls",
        "address": {"street": "1 Falls Drive", "city": "Victoria Falls",
                    "state": "Matabeleland North", "country": "Zimbabwe"},
        "contact": {"phone": "+263 13 44751", "email": "info@vfl.com", "website": "https://vfl.com"},
        "policies": {"check_in": "15:00", "check_out": "11:00",
                     "cancellation": "24 hours before arrival", "smoking_policy": "No smoking"},
        "rating": 4.8,
    }
    data.update(overrides)
    return LodgeCreate(**data)


def _room(**overrides) -> RoomCreate:
    data = {
        "number": "101",
        "name": "Victoria Suite",
        "type": RoomType.SUITE,
        "capacity": 4,
        "beds": {"queen": 1, "king": 1},
        "pricing": {"normal": 450, "busy": 550, "slow": 350},
        "description": "Suite with falls view",
        "size": 85,
        "view": "Falls View",
        "floor": 1,
    }
    data.update(overrides)
    return RoomCreate(**data)


class TestLodgeForm:
    """营地表单"""

    def test_valid(self):
        assert validate_lodge_form(_lodge()) == {}

    def test_short_name_and_description(self):
        errors = validate_lodge_form(_lodge(name="VF", description="short"))
        assert set(errors) >= {"name", "description"}

    def test_address_errors_use_dotted_keys(self):
        errors = validate_lodge_form(_lodge(address={"street": "", "city": "", "state": "", "country": ""}))
        assert set(errors) >= {"address.street", "address.city", "address.state", "address.country"}

    def test_contact_format(self):
        errors = validate_lodge_form(_lodge(contact={"phone": "call me", "email": "nope", "website": "vfl.com"}))
        assert set(errors) >= {"contact.phone", "contact.email", "contact.website"}

    def test_website_optional(self):
        assert validate_lodge_form(_lodge(contact={"phone": "+263 13 44751", "email": "info@vfl.com"})) == {}

    def test_policies_required(self):
        errors = validate_lodge_form(_lodge(policies={}))
        assert set(errors) >= {"policies.check_in", "policies.check_out",
                               "policies.cancellation", "policies.smoking_policy"}

    def test_rating_range(self):
        assert "rating" in validate_lodge_form(_lodge(rating=5.5))


class TestRoomForm:
    """房间表单"""

    def test_valid(self):
        assert validate_room_form(_room()) == {}

    def test_pricing_errors_use_dotted_keys(self):
        errors = validate_room_form(_room(pricing={"normal": 0, "busy": 100, "slow": 0}))
        assert set(errors) == {"pricing.normal", "pricing.slow"}

    def test_requires_bed(self):
        assert "beds" in validate_room_form(_room(beds={}))

    def test_required_fields(self):
        errors = validate_room_form(_room(number="", name="", type=None, capacity=0,
                                          description="", size=0, view="", floor=None))
        assert set(errors) >= {"number", "name", "type", "capacity", "description", "size", "view", "floor"}

    def test_capacity_from_beds(self):
        assert capacity_from_beds(BedConfiguration(single=2, double=1, queen=0, king=1)) == 6


class TestRoomNumbers:
    """房间号"""

    def test_duplicate_number_case_insensitive(self):
        rooms = [SimpleNamespace(id="R1", number="A101")]
        assert validate_room_number("a101", rooms) is not None

    def test_same_room_excluded(self):
        rooms = [SimpleNamespace(id="R1", number="101")]
        assert validate_room_number("101", rooms, exclude_id="R1") is None

    def test_blank_number(self):
        assert validate_room_number("  ", []) is not None

    def test_suggestions_skip_taken(self):
        suggestions = suggest_room_numbers(["101", "102", "104"], limit=3)
        assert suggestions == ["103", "105", "106"]

    @pytest.mark.parametrize("limit", [1, 10])
    def test_suggestion_limit(self, limit):
        assert len(suggest_room_numbers([], limit=limit)) == limit
