# Ontology Models
from app.models.ontology import Lodge, Room, Booking, Employee

__all__ = ['Lodge', 'Room', 'Booking', 'Employee']
