"""
服务层异常到 HTTP 状态码的映射
"""
from app.lodge.domain.rules.booking_rules import BookingValidationError, EntityNotFoundError
from app.lodge.routers import http_error, SERVICE_ERRORS


def test_status_codes():
    assert http_error(BookingValidationError({"guests": "x"})).status_code == 422
    assert http_error(PermissionError("no")).status_code == 403
    assert http_error(EntityNotFoundError("预订不存在")).status_code == 404
    assert http_error(ValueError("bad")).status_code == 400


def test_validation_detail_shape():
    detail = http_error(BookingValidationError({"guests": "x"}, "预订校验失败")).detail
    assert detail == {"message": "预订校验失败", "errors": {"guests": "x"}}


def test_key_error_is_not_a_service_error():
    # 程序错误（KeyError / IndexError）不能被当成 404
    assert not isinstance(KeyError("status"), SERVICE_ERRORS)
    assert not isinstance(IndexError(0), SERVICE_ERRORS)
    assert isinstance(EntityNotFoundError("营地不存在"), SERVICE_ERRORS)
