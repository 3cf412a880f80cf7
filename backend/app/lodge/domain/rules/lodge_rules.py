"""
app/lodge/domain/rules/lodge_rules.py

营地 / 房间表单规则

嵌套字段的错误键使用 "address.street"、"pricing.normal" 这样的点号路径，
仅用于定位错误，数据本身按类型化子结构读写。
"""
import re
from typing import Any, Dict, Iterable, List, Optional

import logging

logger = logging.getLogger(__name__)

LODGE_PHONE_PATTERN = re.compile(r"^\+?[\d\s\-\(\)]+$")
LODGE_EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
WEBSITE_PATTERN = re.compile(r"^https?://.+")

SUGGESTION_FLOORS = range(1, 6)
SUGGESTION_ROOMS_PER_FLOOR = range(1, 21)
SUGGESTION_LIMIT = 10


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def validate_lodge_form(lodge: Any) -> Dict[str, str]:
    """
    校验营地表单

    Args:
        lodge: LodgeCreate 或同构对象（address / contact / policies 为子结构）

    Returns:
        {字段: 错误信息}
    """
    errors: Dict[str, str] = {}

    if _blank(lodge.name):
        errors["name"] = "营地名称不能为空"
    elif len(lodge.name.strip()) < 3:
        errors["name"] = "营地名称至少 3 个字符"

    if _blank(lodge.description):
        errors["description"] = "营地描述不能为空"
    elif len(lodge.description.strip()) < 10:
        errors["description"] = "营地描述至少 10 个字符"

    address = lodge.address
    for key, label in (("street", "街道地址"), ("city", "城市"), ("state", "省/州"), ("country", "国家")):
        if _blank(getattr(address, key, None)):
            errors[f"address.{key}"] = f"{label}不能为空"

    contact = lodge.contact
    if _blank(contact.phone):
        errors["contact.phone"] = "联系电话不能为空"
    elif not LODGE_PHONE_PATTERN.match(contact.phone):
        errors["contact.phone"] = "联系电话格式不正确"

    if _blank(contact.email):
        errors["contact.email"] = "联系邮箱不能为空"
    elif not LODGE_EMAIL_PATTERN.search(contact.email):
        errors["contact.email"] = "联系邮箱格式不正确"

    if contact.website and not WEBSITE_PATTERN.match(contact.website):
        errors["contact.website"] = "网站地址格式不正确"

    policies = lodge.policies
    for key, label in (
        ("check_in", "入住时间"),
        ("check_out", "退房时间"),
        ("cancellation", "取消政策"),
        ("smoking_policy", "吸烟政策"),
    ):
        if _blank(getattr(policies, key, None)):
            errors[f"policies.{key}"] = f"{label}不能为空"

    if lodge.rating is not None and not 0 <= lodge.rating <= 5:
        errors["rating"] = "评分必须在 0 到 5 之间"

    return errors


def total_beds(beds: Any) -> int:
    return (beds.single or 0) + (beds.double or 0) + (beds.queen or 0) + (beds.king or 0)


def capacity_from_beds(beds: Any) -> int:
    """按床型估算可住人数：单人床 1 人，其余 2 人"""
    return (beds.single or 0) + 2 * ((beds.double or 0) + (beds.queen or 0) + (beds.king or 0))


def validate_room_form(room: Any) -> Dict[str, str]:
    """
    校验房间表单

    Args:
        room: RoomCreate 或同构对象（beds / pricing 为子结构）
    """
    errors: Dict[str, str] = {}

    if _blank(room.number):
        errors["number"] = "房间号不能为空"

    if _blank(room.name):
        errors["name"] = "房间名称不能为空"
    elif len(room.name.strip()) < 3:
        errors["name"] = "房间名称至少 3 个字符"

    if room.type is None:
        errors["type"] = "请选择房型"

    if not room.capacity or room.capacity < 1:
        errors["capacity"] = "房间容量至少为 1"

    if _blank(room.description):
        errors["description"] = "房间描述不能为空"

    if not room.size or room.size <= 0:
        errors["size"] = "房间面积必须大于 0"

    if _blank(room.view):
        errors["view"] = "房间朝向不能为空"

    if room.floor is None or room.floor < 0:
        errors["floor"] = "楼层必须为 0 或以上"

    pricing = room.pricing
    for key, label in (("normal", "平季"), ("busy", "旺季"), ("slow", "淡季")):
        value = getattr(pricing, key, None)
        if not value or value < 0:
            errors[f"pricing.{key}"] = f"{label}价格必须为正数"

    if total_beds(room.beds) == 0:
        errors["beds"] = "至少需要一张床"

    return errors


def validate_room_number(number: str, existing_rooms: Iterable[Any],
                         exclude_id: Optional[str] = None) -> Optional[str]:
    """房间号在营地内唯一（不区分大小写），返回错误信息或 None"""
    if _blank(number):
        return "房间号不能为空"
    wanted = number.strip().lower()
    for room in existing_rooms:
        if room.id != exclude_id and room.number.strip().lower() == wanted:
            return "该营地已存在相同房间号"
    return None


def suggest_room_numbers(existing_numbers: Iterable[str], limit: int = SUGGESTION_LIMIT) -> List[str]:
    """按 楼层 + 两位房号 生成未占用的房间号建议"""
    taken = {n.strip().lower() for n in existing_numbers}
    suggestions: List[str] = []
    for floor in SUGGESTION_FLOORS:
        for seq in SUGGESTION_ROOMS_PER_FLOOR:
            number = f"{floor}{seq:02d}"
            if number not in taken:
                suggestions.append(number)
                if len(suggestions) >= limit:
                    return suggestions
    return suggestions


__all__ = [
    "validate_lodge_form",
    "validate_room_form",
    "validate_room_number",
    "total_beds",
    "capacity_from_beds",
    "suggest_room_numbers",
]
