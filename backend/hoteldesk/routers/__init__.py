# API Routers
from hoteldesk.routers import (
    auth, admin, rooms, guests, reservations, owners, promo_codes, transactions, invoices, tax
)

__all__ = [
    'auth', 'admin', 'rooms', 'guests', 'reservations', 'owners',
    'promo_codes', 'transactions', 'invoices', 'tax'
]
