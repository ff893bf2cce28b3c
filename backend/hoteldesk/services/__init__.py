# Business Services
from hoteldesk.services.employee_service import EmployeeService
from hoteldesk.services.setting_service import SettingService
from hoteldesk.services.room_service import RoomService
from hoteldesk.services.promo_code_service import PromoCodeService
from hoteldesk.services.invoice_service import InvoiceService
from hoteldesk.services.guest_service import GuestService
from hoteldesk.services.reservation_service import ReservationService
from hoteldesk.services.owner_service import OwnerService
from hoteldesk.services.transaction_service import TransactionService
from hoteldesk.services.email_service import EmailService

__all__ = [
    'EmployeeService', 'SettingService', 'RoomService', 'PromoCodeService',
    'InvoiceService', 'GuestService', 'ReservationService', 'OwnerService',
    'TransactionService', 'EmailService'
]
