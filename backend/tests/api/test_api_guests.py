"""
Guest API tests
Check-in, guest details, corrections, checkout and stay extension
"""
from datetime import date, datetime, time, timedelta, timezone
from fastapi.testclient import TestClient

from factories import guest_payload


def utc_noon(day: date) -> str:
    """Noon UTC as a browser serializes it"""
    return datetime.combine(day, time(12, 0), tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")


class TestCheckIn:

    def test_walk_in_check_in(self, client: TestClient, admin_headers, sample_room):
        response = client.post("/api/guests/create-guest", headers=admin_headers, json=guest_payload())

        assert response.status_code == 201
        data = response.json()
        guest = data["guest"]
        assert guest["fullName"] == "Ali Khan"
        assert guest["cnic"] == "35202-1234567-1"
        assert guest["status"] == "checked-in"
        assert guest["stayDuration"] == 2
        assert guest["totalRent"] == 10000.0
        assert guest["room"]["roomNumber"] == "101"
        assert guest["createdBy"]["name"] == "Admin"

        invoice = data["invoice"]
        assert invoice["invoiceNumber"].startswith(f"INV-{date.today():%Y%m%d}-")
        assert invoice["status"] == "pending"
        assert invoice["grandTotal"] == 10000.0
        assert invoice["guestDetails"]["fullName"] == "Ali Khan"
        assert invoice["roomDetails"]["roomNumber"] == "101"

        room = client.get(f"/api/rooms/get-by-id/{sample_room.id}", headers=admin_headers).json()["room"]
        assert room["status"] == "occupied"

    def test_promo_code_discounts_invoice(self, client: TestClient, admin_headers, sample_room, sample_promo):
        response = client.post("/api/guests/create-guest", headers=admin_headers,
                               json=guest_payload(promoCode="summer10"))

        assert response.status_code == 201
        invoice = response.json()["invoice"]
        assert invoice["promoPercentage"] == 10
        assert invoice["promoDiscount"] == 1000.0
        assert invoice["grandTotal"] == 9000.0
        assert response.json()["guest"]["applyDiscount"] is True

        promos = client.get("/api/promocodes/all", headers=admin_headers).json()["data"]
        assert promos[0]["usageCount"] == 1

    def test_unknown_promo_code(self, client: TestClient, admin_headers, sample_room):
        response = client.post("/api/guests/create-guest", headers=admin_headers,
                               json=guest_payload(promoCode="NOPE"))

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid promo code"

    def test_tax_is_applied(self, client: TestClient, admin_headers, sample_room):
        client.put("/api/tax/update-setting", headers=admin_headers, json={"taxRate": 16})

        response = client.post("/api/guests/create-guest", headers=admin_headers,
                               json=guest_payload(additionalDiscount=1000))

        invoice = response.json()["invoice"]
        assert invoice["additionalDiscount"] == 1000.0
        assert invoice["taxAmount"] == 1440.0
        assert invoice["grandTotal"] == 10440.0

    def test_invalid_phone(self, client: TestClient, admin_headers, sample_room):
        response = client.post("/api/guests/create-guest", headers=admin_headers,
                               json=guest_payload(phone="12345"))

        assert response.status_code == 422
        assert response.json()["message"] == "Phone number must be 11 digits starting with 03"

    def test_invalid_cnic(self, client: TestClient, admin_headers, sample_room):
        response = client.post("/api/guests/create-guest", headers=admin_headers,
                               json=guest_payload(cnic="12345-123"))

        assert response.status_code == 422
        assert response.json()["message"] == "CNIC must be 13 digits (#####-#######-#)"

    def test_checkout_not_after_checkin(self, client: TestClient, admin_headers, sample_room):
        response = client.post("/api/guests/create-guest", headers=admin_headers,
                               json=guest_payload(checkOutAt=date.today().isoformat()))

        assert response.status_code == 422
        assert response.json()["message"] == "Check-out date must be after check-in date"

    def test_utc_checkout_timestamp(self, client: TestClient, admin_headers, sample_room):
        payload = guest_payload(checkOutAt=utc_noon(date.today() + timedelta(days=2)))
        del payload["checkInAt"]

        response = client.post("/api/guests/create-guest", headers=admin_headers, json=payload)

        assert response.status_code == 201
        guest = response.json()["guest"]
        assert guest["status"] == "checked-in"
        assert guest["stayDuration"] >= 1
        assert not guest["checkOutAt"].endswith("Z")

    def test_occupied_room(self, client: TestClient, admin_headers, sample_guest):
        response = client.post("/api/guests/create-guest", headers=admin_headers,
                               json=guest_payload(fullName="Second Guest"))

        assert response.status_code == 409
        assert response.json()["message"] == "Room 101 is occupied"

    def test_room_reserved_during_stay(self, client: TestClient, admin_headers, sample_reservation):
        response = client.post("/api/guests/create-guest", headers=admin_headers,
                               json=guest_payload(nights=4))

        assert response.status_code == 409
        assert "not available" in response.json()["message"]

    def test_maintenance_room(self, client: TestClient, admin_headers, maintenance_room):
        response = client.post("/api/guests/create-guest", headers=admin_headers,
                               json=guest_payload(room_number="401"))

        assert response.status_code == 400
        assert "maintenance" in response.json()["message"]


class TestGuestDetails:

    def test_list_guests(self, client: TestClient, admin_headers, sample_guest):
        response = client.get("/api/guests/get-all-guest", headers=admin_headers)

        assert response.status_code == 200
        assert [g["_id"] for g in response.json()["guests"]] == [sample_guest.id]

    def test_guest_detail(self, client: TestClient, admin_headers, sample_guest):
        client.post("/api/transactions/add", headers=admin_headers, json={
            "guestId": sample_guest.id, "amount": 2000, "type": "payment", "paymentMethod": "Cash",
        })

        response = client.get(f"/api/guests/get-Guest-By-Id/{sample_guest.id}", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["guest"]["fullName"] == "Ali Khan"
        assert data["invoice"]["totalPaid"] == 2000.0
        assert data["invoice"]["balanceDue"] == 8000.0
        assert [t["amount"] for t in data["transactions"]] == [2000.0]

    def test_guest_not_found(self, client: TestClient, admin_headers):
        response = client.get("/api/guests/get-Guest-By-Id/999", headers=admin_headers)
        assert response.status_code == 404

    def test_update_guest_refreshes_invoice_snapshot(self, client: TestClient, admin_headers, sample_guest):
        response = client.patch(f"/api/guests/update-guest/{sample_guest.id}", headers=admin_headers, json={
            "fullName": "Ali Raza Khan",
            "phone": "+92 300 7654321",
        })

        assert response.status_code == 200
        assert response.json()["guest"]["phone"] == "03007654321"

        detail = client.get(f"/api/guests/get-Guest-By-Id/{sample_guest.id}", headers=admin_headers).json()
        assert detail["invoice"]["guestDetails"]["fullName"] == "Ali Raza Khan"


class TestCheckOut:

    def test_check_out_bills_nights_spent(self, client: TestClient, admin_headers, sample_guest):
        response = client.patch(f"/api/guests/check-out-Guest/{sample_guest.id}/checkout", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["guest"]["status"] == "checked-out"
        assert data["guest"]["stayDuration"] == 1
        assert data["invoice"]["subtotal"] == 5000.0
        assert len(data["invoice"]["items"]) == 1

        room = client.get(f"/api/rooms/get-by-id/{sample_guest.room_id}", headers=admin_headers).json()["room"]
        assert room["status"] == "available"
        assert room["cleanliness"] == "dirty"

    def test_check_out_twice(self, client: TestClient, admin_headers, sample_guest):
        client.patch(f"/api/guests/check-out-Guest/{sample_guest.id}/checkout", headers=admin_headers)

        response = client.patch(f"/api/guests/check-out-Guest/{sample_guest.id}/checkout", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Guest has already checked out"


class TestExtendStay:

    def test_extend_stay(self, client: TestClient, admin_headers, sample_guest):
        new_checkout = date.today() + timedelta(days=4)

        response = client.post(f"/api/guests/{sample_guest.id}/extend", headers=admin_headers, json={
            "newCheckoutDate": new_checkout.isoformat(),
        })

        assert response.status_code == 200
        data = response.json()
        assert data["guest"]["stayDuration"] == 4
        assert data["guest"]["checkOutAt"].startswith(new_checkout.isoformat())
        assert data["invoice"]["subtotal"] == 20000.0
        assert data["invoice"]["items"][-1]["quantity"] == 2

    def test_extend_with_utc_timestamp(self, client: TestClient, admin_headers, sample_guest):
        response = client.post(f"/api/guests/{sample_guest.id}/extend", headers=admin_headers, json={
            "newCheckoutDate": utc_noon(date.today() + timedelta(days=4)),
        })

        assert response.status_code == 200
        data = response.json()
        assert data["guest"]["stayDuration"] >= 3
        assert len(data["invoice"]["items"]) == 2

    def test_extension_must_be_later(self, client: TestClient, admin_headers, sample_guest):
        response = client.post(f"/api/guests/{sample_guest.id}/extend", headers=admin_headers, json={
            "newCheckoutDate": (date.today() + timedelta(days=1)).isoformat(),
        })

        assert response.status_code == 400
        assert "after the current checkout" in response.json()["message"]

    def test_extension_clashing_with_reservation(self, client: TestClient, admin_headers,
                                                 sample_guest, sample_reservation):
        response = client.post(f"/api/guests/{sample_guest.id}/extend", headers=admin_headers, json={
            "newCheckoutDate": (date.today() + timedelta(days=4)).isoformat(),
        })

        assert response.status_code == 409
