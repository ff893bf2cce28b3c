# Domain models
from hoteldesk.models.ontology import (
    Employee, Room, Guest, Reservation, Invoice, InvoiceItem,
    Owner, OwnerAttendance, PromoCode, Transaction, Setting
)

__all__ = [
    'Employee', 'Room', 'Guest', 'Reservation', 'Invoice', 'InvoiceItem',
    'Owner', 'OwnerAttendance', 'PromoCode', 'Transaction', 'Setting'
]
