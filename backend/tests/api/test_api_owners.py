"""
Owner API tests
Card scan, attendance marking, owner management and visit history
"""
from datetime import date, timedelta
from fastapi.testclient import TestClient

from factories import owner_payload


class TestScanAndAttendance:

    def test_scan_card(self, client: TestClient, admin_headers, sample_owner):
        response = client.get("/api/owners/scan/CARD-001", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["owner"]["fullName"] == "Bilal Qureshi"
        assert data["owner"]["assignedRoom"]["roomNumber"] == "102"
        assert data["usage"]["totalDaysUsed"] == 0
        assert data["usage"]["remainingDays"] == 3
        assert data["usage"]["isTodayMarked"] is False
        assert data["recentLogs"] == []

    def test_scan_unknown_card(self, client: TestClient, admin_headers):
        response = client.get("/api/owners/scan/nobody", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "No owner found for this card"

    def test_mark_attendance(self, client: TestClient, receptionist_headers, sample_owner):
        response = client.post("/api/owners/mark-attendance", headers=receptionist_headers,
                               json={"cardId": "card-001"})

        assert response.status_code == 201
        data = response.json()
        assert data["isOverStay"] is False
        assert data["message"] == "Attendance marked"
        assert data["log"]["date"] == date.today().isoformat()
        assert data["log"]["markedBy"]["name"] == "Front Desk"
        assert data["usage"]["totalDaysUsed"] == 1
        assert data["usage"]["remainingDays"] == 2
        assert data["usage"]["isTodayMarked"] is True

        scan = client.get("/api/owners/scan/card-001", headers=receptionist_headers).json()
        assert len(scan["recentLogs"]) == 1

    def test_mark_twice_on_one_day(self, client: TestClient, admin_headers, sample_owner):
        client.post("/api/owners/mark-attendance", headers=admin_headers, json={"cardId": "CARD-001"})

        response = client.post("/api/owners/mark-attendance", headers=admin_headers, json={"cardId": "CARD-001"})

        assert response.status_code == 409
        assert response.json()["message"] == "Attendance already marked for today"

    def test_over_stay_is_flagged_and_charged(self, client: TestClient, admin_headers):
        client.post("/api/owners/create", headers=admin_headers,
                    json=owner_payload(seasonLimits={"totalSeasonLimit": 0}))

        response = client.post("/api/owners/mark-attendance", headers=admin_headers,
                               json={"cardId": "CARD-777", "amountCharged": 2500})

        assert response.status_code == 201
        data = response.json()
        assert data["isOverStay"] is True
        assert data["message"] == "Attendance marked (over stay)"
        assert data["log"]["amountCharged"] == 2500.0

    def test_expired_agreement(self, client: TestClient, admin_headers):
        today = date.today()
        client.post("/api/owners/create", headers=admin_headers, json=owner_payload(
            agreementStartDate=(today - timedelta(days=400)).isoformat(),
            agreementEndDate=(today - timedelta(days=1)).isoformat(),
        ))

        response = client.post("/api/owners/mark-attendance", headers=admin_headers, json={"cardId": "CARD-777"})

        assert response.status_code == 400
        assert response.json()["message"] == "Owner agreement has expired"

    def test_unknown_card(self, client: TestClient, admin_headers):
        response = client.post("/api/owners/mark-attendance", headers=admin_headers, json={"cardId": "ghost"})
        assert response.status_code == 404


class TestOwnerManagement:

    def test_create_owner(self, client: TestClient, admin_headers):
        response = client.post("/api/owners/create", headers=admin_headers, json=owner_payload())

        assert response.status_code == 201
        owner = response.json()["data"]
        assert owner["cardId"] == "card-777"
        assert owner["phone"] == "03451234567"
        assert owner["cnic"] == "37405-1234567-9"
        assert owner["seasonLimits"]["totalSeasonLimit"] == 10

    def test_duplicate_card(self, client: TestClient, admin_headers, sample_owner):
        response = client.post("/api/owners/create", headers=admin_headers,
                               json=owner_payload(cardId="card-001"))
        assert response.status_code == 409

    def test_agreement_end_before_start(self, client: TestClient, admin_headers):
        response = client.post("/api/owners/create", headers=admin_headers, json=owner_payload(
            agreementStartDate="2026-06-01", agreementEndDate="2026-05-01",
        ))

        assert response.status_code == 422
        assert response.json()["message"] == "Agreement end date must not be before its start date"

    def test_unknown_assigned_room(self, client: TestClient, admin_headers):
        response = client.post("/api/owners/create", headers=admin_headers,
                               json=owner_payload(assignedRoomId=999))

        assert response.status_code == 400
        assert response.json()["message"] == "Assigned room does not exist"

    def test_list_owners(self, client: TestClient, admin_headers, sample_owner):
        client.post("/api/owners/create", headers=admin_headers, json=owner_payload())

        owners = client.get("/api/owners/get-all-owners", headers=admin_headers).json()["owners"]

        assert [o["fullName"] for o in owners] == ["Bilal Qureshi", "Hina Malik"]

    def test_update_owner(self, client: TestClient, admin_headers, sample_owner):
        response = client.put(f"/api/owners/update/{sample_owner.id}", headers=admin_headers, json={
            "apartmentNumber": "A-14",
            "seasonLimits": {"totalSeasonLimit": 30, "summerWeekend": 8},
        })

        assert response.status_code == 200
        owner = response.json()["data"]
        assert owner["apartmentNumber"] == "A-14"
        assert owner["seasonLimits"]["totalSeasonLimit"] == 30
        assert owner["seasonLimits"]["summerWeekend"] == 8

    def test_update_missing_owner(self, client: TestClient, admin_headers):
        response = client.put("/api/owners/update/999", headers=admin_headers, json={"apartmentNumber": "X"})
        assert response.status_code == 404

    def test_delete_owner_requires_admin(self, client: TestClient, receptionist_headers, sample_owner):
        response = client.delete(f"/api/owners/delete/{sample_owner.id}", headers=receptionist_headers)
        assert response.status_code == 403

    def test_delete_owner(self, client: TestClient, admin_headers, sample_owner):
        client.post("/api/owners/mark-attendance", headers=admin_headers, json={"cardId": "card-001"})

        response = client.delete(f"/api/owners/delete/{sample_owner.id}", headers=admin_headers)

        assert response.status_code == 200
        assert client.get("/api/owners/scan/card-001", headers=admin_headers).status_code == 404


class TestOwnerTimeline:

    def test_timeline(self, client: TestClient, admin_headers, sample_owner):
        client.post("/api/owners/mark-attendance", headers=admin_headers, json={"cardId": "card-001"})

        response = client.get(f"/api/owners/timeline/{sample_owner.id}", headers=admin_headers)

        assert response.status_code == 200
        entry = response.json()["timeline"][0]
        assert entry["date"] == date.today().isoformat()
        assert entry["dayName"] == date.today().strftime("%A")
        assert entry["markedBy"]["name"] == "Admin"

    def test_timeline_unknown_owner(self, client: TestClient, admin_headers):
        assert client.get("/api/owners/timeline/999", headers=admin_headers).status_code == 404
