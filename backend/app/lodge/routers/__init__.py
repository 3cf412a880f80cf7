"""Lodge domain API routers."""
from fastapi import HTTPException, status

from app.lodge.domain.rules.booking_rules import BookingValidationError, EntityNotFoundError


def http_error(e: Exception) -> HTTPException:
    """
    服务层异常 -> HTTP 错误

    BookingValidationError -> 422 {"message", "errors"}
    PermissionError -> 403, EntityNotFoundError -> 404, 其他 ValueError -> 400
    """
    if isinstance(e, BookingValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": e.message, "errors": e.errors},
        )
    if isinstance(e, PermissionError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    if isinstance(e, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


SERVICE_ERRORS = (ValueError, EntityNotFoundError, PermissionError)


def get_lodge_routers():
    """Return list of all lodge domain FastAPI routers."""
    from app.lodge.routers import bookings, lodges, staff
    return [
        bookings.router,
        lodges.router,
        staff.router,
    ]
