"""
认证工具单元测试
"""
import pytest
from fastapi import HTTPException

from app.models.ontology import EmployeeRole
from app.security.auth import get_password_hash, verify_password, create_access_token, decode_token


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_token_carries_id_and_role():
    payload = decode_token(create_access_token("staff_1", EmployeeRole.SUPERVISOR))
    assert payload["sub"] == "staff_1"
    assert payload["role"] == "supervisor"


def test_invalid_token_rejected():
    with pytest.raises(HTTPException) as exc:
        decode_token("not-a-token")
    assert exc.value.status_code == 401
