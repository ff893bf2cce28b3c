"""
Reservation store
"""
from datetime import date
from typing import Any, Dict, List, Optional

from hoteldesk.console.client import ApiError
from hoteldesk.console.forms import validate_reservation_form
from hoteldesk.console.stores.base import BaseStore


class ReservationStore(BaseStore):

    def __init__(self, client):
        super().__init__(client)
        self.reservations: List[Dict[str, Any]] = []

    def fetch_reservations(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"status": status} if status else {}

        def run():
            self.reservations = self.client.get("/api/reservations", params=params)["reservations"]
            return self.reservations
        return self._call(run, "Failed to fetch reservations")

    def create_reservation(self, data: Dict[str, Any], today: Optional[date] = None) -> Dict[str, Any]:
        self._check_form(validate_reservation_form(data, today=today))
        reservation = self._call(
            lambda: self.client.post("/api/reservations", json=data,
                                     fallback="Failed to create reservation")["reservation"],
            "Failed to create reservation"
        )
        self.fetch_reservations()
        return reservation

    def delete_reservation(self, reservation_id) -> None:
        snapshot = list(self.reservations)
        self.reservations = [r for r in self.reservations if r.get("_id") != reservation_id]
        try:
            self._call(
                lambda: self.client.delete(f"/api/reservations/{reservation_id}",
                                           fallback="Failed to delete reservation"),
                "Failed to delete reservation"
            )
        except ApiError:
            self.reservations = snapshot
            raise

    def get_reservation_by_id(self, reservation_id) -> Dict[str, Any]:
        return self._call(
            lambda: self.client.get(f"/api/reservations/{reservation_id}",
                                    fallback="Failed to fetch reservation")["reservation"],
            "Failed to fetch reservation"
        )

    def cancel_reservation(self, reservation_id) -> Dict[str, Any]:
        reservation = self._call(
            lambda: self.client.post(f"/api/reservations/{reservation_id}/cancel",
                                     fallback="Failed to cancel reservation")["reservation"],
            "Failed to cancel reservation"
        )
        self.fetch_reservations()
        return reservation

    def swap_reservation(self, reservation_id, data: Dict[str, Any]) -> Dict[str, Any]:
        """Move a reservation to another room and/or other dates"""
        reservation = self._call(
            lambda: self.client.put(f"/api/reservations/{reservation_id}/swap", json=data,
                                    fallback="Failed to update reservation")["reservation"],
            "Failed to update reservation"
        )
        self.fetch_reservations()
        return reservation

    def check_in(self, reservation_id, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        guest = self._call(
            lambda: self.client.post(f"/api/reservations/{reservation_id}/check-in", json=data or {},
                                     fallback="Failed to check in reservation")["guest"],
            "Failed to check in reservation"
        )
        self.fetch_reservations()
        return guest
