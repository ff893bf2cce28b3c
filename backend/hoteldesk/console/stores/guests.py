"""
Guest store: check-in, details, checkout and extensions
"""
from typing import Any, Dict, List, Optional

from hoteldesk.console.forms import validate_guest_form
from hoteldesk.console.stores.base import BaseStore


class GuestStore(BaseStore):

    def __init__(self, client):
        super().__init__(client)
        self.guests: List[Dict[str, Any]] = []
        self.guest: Optional[Dict[str, Any]] = None
        self.invoice: Optional[Dict[str, Any]] = None
        self.transactions: List[Dict[str, Any]] = []
        self.rooms: List[Dict[str, Any]] = []

    def fetch_guests(self) -> List[Dict[str, Any]]:
        def run():
            self.guests = self.client.get("/api/guests/get-all-guest", fallback="Failed to fetch guests.")["guests"]
            return self.guests
        return self._call(run, "Failed to fetch guests.")

    def fetch_guest_by_id(self, guest_id) -> Dict[str, Any]:
        def run():
            res = self.client.get(f"/api/guests/get-Guest-By-Id/{guest_id}", fallback="Failed to fetch guest.")
            self.guest = res["guest"]
            self.invoice = res.get("invoice")
            self.transactions = res.get("transactions", [])
            return self.guest
        return self._call(run, "Failed to fetch guest.")

    def fetch_available_rooms(self) -> List[Dict[str, Any]]:
        """Rooms a walk-in can be checked into right now"""
        def run():
            self.rooms = self.client.get("/api/rooms/get-available-rooms")["rooms"]
            return self.rooms
        return self._call(run, "Failed to fetch available rooms.")

    def create_guest(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Check a guest in; refreshes guests and available rooms"""
        self._check_form(validate_guest_form(data))

        def run():
            res = self.client.post("/api/guests/create-guest", json=data, fallback="Failed to check in guest.")
            self.guest, self.invoice = res["guest"], res.get("invoice")
            return self.guest
        guest = self._call(run, "Failed to check in guest.")
        self.fetch_guests()
        self.fetch_available_rooms()
        return guest

    def update_guest(self, guest_id, data: Dict[str, Any]) -> Dict[str, Any]:
        self._call(
            lambda: self.client.patch(f"/api/guests/update-guest/{guest_id}", json=data),
            "Failed to update guest."
        )
        guest = self.fetch_guest_by_id(guest_id)
        self.fetch_guests()
        return guest

    def checkout_guest(self, guest_id) -> Dict[str, Any]:
        self._call(
            lambda: self.client.patch(f"/api/guests/check-out-Guest/{guest_id}/checkout", json={}),
            "Failed to check out guest."
        )
        guest = self.fetch_guest_by_id(guest_id)
        self.fetch_guests()
        self.fetch_available_rooms()
        return guest

    def extend_stay(self, guest_id, new_checkout_date, additional_discount=0) -> Dict[str, Any]:
        payload = {"newCheckoutDate": new_checkout_date, "additionalDiscount": additional_discount}
        self._call(
            lambda: self.client.post(f"/api/guests/{guest_id}/extend", json=payload),
            "Failed to extend stay."
        )
        return self.fetch_guest_by_id(guest_id)
