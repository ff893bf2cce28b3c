# Console stores, one per screen area
from hoteldesk.console.stores.base import BaseStore
from hoteldesk.console.stores.auth import AuthStore
from hoteldesk.console.stores.guests import GuestStore
from hoteldesk.console.stores.rooms import RoomStore
from hoteldesk.console.stores.reservations import ReservationStore
from hoteldesk.console.stores.owners import OwnerStore
from hoteldesk.console.stores.promo_codes import PromoCodeStore
from hoteldesk.console.stores.invoices import InvoiceStore
from hoteldesk.console.stores.transactions import TransactionStore
from hoteldesk.console.stores.settings import SettingStore

__all__ = [
    'BaseStore', 'AuthStore', 'GuestStore', 'RoomStore', 'ReservationStore', 'OwnerStore',
    'PromoCodeStore', 'InvoiceStore', 'TransactionStore', 'SettingStore'
]
