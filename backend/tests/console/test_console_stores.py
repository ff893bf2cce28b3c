"""
Console store tests against the running app
"""
import pytest
from datetime import date, timedelta
from decimal import Decimal

from factories import guest_payload, reservation_payload, owner_payload
from hoteldesk.console import ApiError, FormError
from hoteldesk.console.stores import (
    GuestStore, RoomStore, ReservationStore, OwnerStore, PromoCodeStore,
    InvoiceStore, TransactionStore, SettingStore,
)
from hoteldesk.console.stores.owners import OVER_STAY_NOTICE


class TestRoomStore:

    def test_fetch_and_refresh_all(self, admin_api, sample_room, presidential_room, maintenance_room):
        store = RoomStore(admin_api)

        store.refresh_all(max_workers=1)

        assert [r["roomNumber"] for r in store.rooms] == ["101", "301", "401"]
        assert [r["roomNumber"] for r in store.available_rooms] == ["101", "301"]
        assert [r["roomNumber"] for r in store.presidential_rooms] == ["301"]
        assert store.loading is False

    def test_delete_rolls_back_when_refused(self, admin_api, sample_guest, sample_room_102):
        store = RoomStore(admin_api)
        store.fetch_rooms()

        with pytest.raises(ApiError):
            store.delete_room(sample_guest.room_id)

        assert [r["roomNumber"] for r in store.rooms] == ["101", "102"]
        assert store.error == "Cannot delete an occupied room"

    def test_delete(self, admin_api, sample_room, sample_room_102):
        store = RoomStore(admin_api)
        store.fetch_rooms()

        store.delete_room(sample_room_102.id)

        assert [r["roomNumber"] for r in store.rooms] == ["101"]

    def test_availability_error_keeps_message(self, admin_api, sample_room):
        store = RoomStore(admin_api)
        day = date.today() + timedelta(days=3)

        with pytest.raises(ApiError):
            store.fetch_available_rooms(day, day)

        assert store.available_rooms == []
        assert store.error == "Check-out date must be after check-in date"

    def test_timeline(self, admin_api, sample_reservation):
        store = RoomStore(admin_api)

        store.fetch_room_timeline(sample_reservation.room_id)
        assert [e["name"] for e in store.room_timeline] == ["Sara Ahmed"]

        store.clear_room_timeline()
        assert store.room_timeline == []


class TestGuestStore:

    def test_create_guest_refreshes_lists(self, receptionist_api, sample_room, sample_room_102):
        store = GuestStore(receptionist_api)

        guest = store.create_guest(guest_payload())

        assert guest["fullName"] == "Ali Khan"
        assert store.invoice["grandTotal"] == 10000.0
        assert [g["fullName"] for g in store.guests] == ["Ali Khan"]
        assert [r["roomNumber"] for r in store.rooms] == ["102"]

    def test_form_errors_stop_the_request(self, receptionist_api, sample_room):
        store = GuestStore(receptionist_api)

        with pytest.raises(FormError) as exc_info:
            store.create_guest(guest_payload(phone="123"))

        assert "phone" in exc_info.value.errors
        assert store.error == exc_info.value.errors["phone"]
        assert store.fetch_guests() == []

    def test_checkout_and_details(self, admin_api, sample_guest):
        store = GuestStore(admin_api)

        guest = store.checkout_guest(sample_guest.id)

        assert guest["status"] == "checked-out"
        assert store.invoice["subtotal"] == 5000.0

    def test_extend_stay(self, admin_api, sample_guest):
        store = GuestStore(admin_api)

        guest = store.extend_stay(sample_guest.id, date.today() + timedelta(days=3), additional_discount=100)

        assert guest["stayDuration"] == 3
        assert store.invoice["additionalDiscount"] == 100.0


class TestReservationStore:

    def test_create_and_filter(self, admin_api, sample_room):
        store = ReservationStore(admin_api)

        created = store.create_reservation(reservation_payload())
        store.cancel_reservation(created["_id"])

        assert store.fetch_reservations("reserved") == []
        assert [r["status"] for r in store.fetch_reservations()] == ["cancelled"]

    def test_past_start_is_caught_locally(self, admin_api, sample_room):
        store = ReservationStore(admin_api)

        with pytest.raises(FormError):
            store.create_reservation(reservation_payload(start_in=-2))

        assert store.error == "Check-in date cannot be in the past"

    def test_delete_rolls_back_when_refused(self, admin_api, sample_reservation):
        TransactionStore(admin_api).add_transaction({
            "reservationId": sample_reservation.id, "amount": 1000, "type": "advance", "paymentMethod": "Cash",
        })
        store = ReservationStore(admin_api)
        store.fetch_reservations()

        with pytest.raises(ApiError):
            store.delete_reservation(sample_reservation.id)

        assert [r["_id"] for r in store.reservations] == [sample_reservation.id]
        assert store.error == "Reservation has recorded payments; cancel it instead"

    def test_swap_and_check_in(self, admin_api, sample_room, sample_room_102):
        store = ReservationStore(admin_api)
        created = store.create_reservation(reservation_payload(start_in=0))

        moved = store.swap_reservation(created["_id"], {"roomNumber": "102"})
        guest = store.check_in(created["_id"])

        assert moved["roomNumber"] == "102"
        assert guest["room"]["roomNumber"] == "102"
        assert store.get_reservation_by_id(created["_id"])["status"] == "checked-in"


class TestOwnerStore:

    def test_scan_and_mark(self, receptionist_api, sample_owner):
        store = OwnerStore(receptionist_api)

        assert store.search_owner("CARD-001") is True
        assert store.usage_percentage() == 0.0

        assert store.mark_attendance("CARD-001") is True
        assert store.notice == "Attendance marked successfully"
        assert store.warning is None
        assert store.usage_stats["totalDaysUsed"] == 1
        assert store.usage_percentage() == pytest.approx(100 / 3)
        assert len(store.recent_logs) == 1

    def test_over_stay_warning(self, admin_api):
        store = OwnerStore(admin_api)
        assert store.create_owner(owner_payload(seasonLimits={"totalSeasonLimit": 0}))

        assert store.mark_attendance("CARD-777", amount_charged=2000) is True

        assert store.warning == OVER_STAY_NOTICE
        assert store.usage_percentage() == 100.0

    def test_failures_return_false(self, admin_api, sample_owner):
        store = OwnerStore(admin_api)
        store.mark_attendance("CARD-001")

        assert store.mark_attendance("CARD-001") is False
        assert store.error == "Attendance already marked for today"
        assert store.search_owner("ghost") is False
        assert store.current_owner is None

    def test_create_checks_form(self, admin_api):
        store = OwnerStore(admin_api)

        assert store.create_owner(owner_payload(phone="123")) is False
        assert store.fetch_owners() is True
        assert store.owners == []

    def test_update_delete_and_timeline(self, admin_api, sample_owner):
        store = OwnerStore(admin_api)
        store.mark_attendance("card-001")

        assert store.update_owner(sample_owner.id, {"apartmentNumber": "A-20"}) is True
        assert store.owners[0]["apartmentNumber"] == "A-20"
        assert len(store.get_owner_timeline(sample_owner.id)) == 1

        assert store.delete_owner(sample_owner.id) is True
        assert store.owners == []
        assert store.get_owner_timeline(sample_owner.id) is None
        assert store.error == "Owner not found"


class TestPromoCodeStore:

    def test_validate(self, admin_api, sample_promo):
        store = PromoCodeStore(admin_api)

        assert store.validate_promo_code("summer10") == {"isValid": True, "percentage": 10}
        assert store.validate_promo_code("NOPE") == {"isValid": False, "message": "Invalid promo code"}

    def test_create_and_deactivate(self, admin_api):
        store = PromoCodeStore(admin_api)
        today = date.today()

        promo = store.create_promo_code({"code": "eid20", "percentage": 20,
                                         "startDate": today, "endDate": today + timedelta(days=3)})
        store.update_promo_status(promo["_id"], "inactive")

        assert [p["status"] for p in store.promo_codes] == ["inactive"]
        assert store.validate_promo_code("EID20")["message"] == "Promo code is inactive"

    def test_receptionist_cannot_create(self, receptionist_api):
        store = PromoCodeStore(receptionist_api)
        today = date.today()

        with pytest.raises(ApiError) as exc_info:
            store.create_promo_code({"code": "EID20", "percentage": 20, "startDate": today, "endDate": today})

        assert exc_info.value.status_code == 403


class TestInvoiceStore:

    def test_pagination(self, admin_api, sample_guest):
        store = InvoiceStore(admin_api)

        page = store.fetch_all_invoices(page=1, limit=1)

        assert page["count"] == 1
        assert store.pagination_range() == [1]

    def test_search_replaces_page(self, admin_api, sample_guest):
        store = InvoiceStore(admin_api)
        store.fetch_all_invoices()

        results = store.search_invoices(guest_name="ali")

        assert len(results) == 1
        assert store.paginated is None
        assert store.pagination_range() == []

    def test_status_change_refreshes_current(self, admin_api, sample_guest):
        store = InvoiceStore(admin_api)
        invoice_id = store.fetch_all_invoices()["data"][0]["_id"]
        store.fetch_invoice_by_id(invoice_id)

        store.update_invoice_status(invoice_id, "cancelled")

        assert store.current_invoice["status"] == "cancelled"
        assert store.paginated["data"][0]["status"] == "cancelled"

    def test_delete_clears_current(self, admin_api, sample_guest):
        store = InvoiceStore(admin_api)
        invoice_id = store.fetch_all_invoices()["data"][0]["_id"]
        store.fetch_invoice_by_id(invoice_id)

        store.delete_invoice(invoice_id)

        assert store.current_invoice is None
        assert store.paginated["count"] == 0

    def test_download_url(self, admin_api, sample_guest):
        store = InvoiceStore(admin_api)
        invoice_id = store.fetch_all_invoices()["data"][0]["_id"]

        assert store.download_url(invoice_id).endswith(f"/api/invoice/{invoice_id}/document")
        assert store.download_url(999) is None
        assert store.error == "Could not download the invoice. Please try again."


class TestTransactionStore:

    def test_add_and_query_by_source(self, admin_api, sample_guest):
        store = TransactionStore(admin_api)

        store.add_transaction({"guestId": sample_guest.id, "amount": Decimal("2500"),
                               "type": "payment", "paymentMethod": "Card"})

        assert [t["amount"] for t in store.transactions] == [2500.0]
        assert len(store.get_transactions_by_source(sample_guest.id, "guest")) == 1

    def test_unknown_source(self, admin_api):
        with pytest.raises(ValueError):
            TransactionStore(admin_api).get_transactions_by_source(1, "invoice")

    def test_delete(self, admin_api, sample_guest):
        store = TransactionStore(admin_api)
        tx = store.add_transaction({"guestId": sample_guest.id, "amount": 2500,
                                    "type": "payment", "paymentMethod": "Cash"})

        store.delete_transaction(tx["_id"])

        assert store.transactions == []

    def test_failed_delete_keeps_rows(self, admin_api, sample_guest):
        store = TransactionStore(admin_api)
        store.add_transaction({"guestId": sample_guest.id, "amount": 2500,
                               "type": "payment", "paymentMethod": "Cash"})

        with pytest.raises(ApiError):
            store.delete_transaction(999)

        assert len(store.transactions) == 1
        assert store.error == "Transaction not found"


class TestSettingStore:

    def test_helpers(self, admin_api):
        store = SettingStore(admin_api)
        store.update_settings({"taxRate": 16})

        assert store.tax_rate == Decimal("16.0")
        assert store.calculate_tax(1234) == Decimal("197.44")
        assert store.format_currency(12.5) == "Rs 12.50"
        assert store.active_alert() is None

    def test_active_alert(self, admin_api):
        store = SettingStore(admin_api)
        store.refresh_settings()

        store.update_settings({"systemAlert": {"message": "Lift under repair", "isActive": True,
                                               "type": "warning"}})

        assert store.active_alert()["message"] == "Lift under repair"

    def test_rejected_update_is_reverted(self, receptionist_api):
        store = SettingStore(receptionist_api)
        store.refresh_settings()

        with pytest.raises(ApiError):
            store.update_settings({"taxRate": 30})

        assert store.settings["taxRate"] == 0
        assert store.error is not None

    def test_defaults_before_loading(self, admin_api):
        store = SettingStore(admin_api)

        assert store.calculate_tax(1000) == Decimal("0")
        assert store.format_currency(3) == "Rs 3.00"
