"""
app/lodge/services - 营地领域服务
"""
from app.lodge.services.booking_service import BookingService, BookingFilters, compute_booking_stats
from app.lodge.services.lodge_service import LodgeService, LodgeFilters
from app.lodge.services.staff_service import StaffService, StaffFilters, to_staff_response

__all__ = [
    "BookingService",
    "BookingFilters",
    "compute_booking_stats",
    "LodgeService",
    "LodgeFilters",
    "StaffService",
    "StaffFilters",
    "to_staff_response",
]
