"""
Owner reception store

Card scan, attendance marking and owner maintenance. Unlike the other stores
the methods report success as a bool and leave the reason in ``error``; the
reception screen only needs to know whether to close its dialog.
"""
import logging
from typing import Any, Dict, List, Optional

from hoteldesk.console.client import ApiError
from hoteldesk.console.forms import validate_owner_form
from hoteldesk.console.stores.base import BaseStore

logger = logging.getLogger(__name__)

OVER_STAY_NOTICE = "Notice: This owner has exceeded their allowed days."


class OwnerStore(BaseStore):

    def __init__(self, client):
        super().__init__(client)
        self.current_owner: Optional[Dict[str, Any]] = None
        self.usage_stats: Optional[Dict[str, Any]] = None
        self.recent_logs: List[Dict[str, Any]] = []
        self.owners: List[Dict[str, Any]] = []
        self.notice: Optional[str] = None
        self.warning: Optional[str] = None

    def clear_owner(self) -> None:
        self.current_owner = None
        self.usage_stats = None
        self.recent_logs = []

    def _attempt(self, fn, fallback: str) -> bool:
        try:
            self._call(fn, fallback)
        except ApiError as e:
            logger.warning("%s: %s", fallback, e.message)
            return False
        return True

    def search_owner(self, card_id: str) -> bool:
        self.clear_owner()

        def run():
            res = self.client.get(f"/api/owners/scan/{card_id}", fallback="Owner not found")
            self.current_owner = res["owner"]
            self.usage_stats = res["usage"]
            self.recent_logs = res["recentLogs"]
        return self._attempt(run, "Owner not found")

    def mark_attendance(self, card_id: str, amount_charged=0) -> bool:
        """Mark today's visit and reload the owner's usage"""
        self.notice = self.warning = None
        result = {}

        def run():
            result.update(self.client.post(
                "/api/owners/mark-attendance",
                json={"cardId": card_id, "amountCharged": amount_charged},
                fallback="Failed to mark attendance",
            ))
        if not self._attempt(run, "Failed to mark attendance"):
            return False

        self.notice = "Attendance marked successfully"
        if result.get("isOverStay"):
            self.warning = OVER_STAY_NOTICE
        self.search_owner(card_id)
        return True

    def fetch_owners(self) -> bool:
        def run():
            self.owners = self.client.get("/api/owners/get-all-owners")["owners"]
        return self._attempt(run, "Failed to fetch owners list")

    def create_owner(self, data: Dict[str, Any]) -> bool:
        errors = validate_owner_form(data)
        if errors:
            self.error = next(iter(errors.values()))
            return False
        if not self._attempt(lambda: self.client.post("/api/owners/create", json=data,
                                                      fallback="Failed to create owner"),
                             "Failed to create owner"):
            return False
        self.notice = "Owner created successfully"
        self.fetch_owners()
        return True

    def update_owner(self, owner_id, data: Dict[str, Any]) -> bool:
        if not self._attempt(lambda: self.client.put(f"/api/owners/update/{owner_id}", json=data,
                                                     fallback="Failed to update owner"),
                             "Failed to update owner"):
            return False
        self.notice = "Owner updated successfully"
        self.fetch_owners()
        return True

    def delete_owner(self, owner_id) -> bool:
        if not self._attempt(lambda: self.client.delete(f"/api/owners/delete/{owner_id}",
                                                        fallback="Failed to delete owner"),
                             "Failed to delete owner"):
            return False
        self.notice = "Owner deleted successfully"
        self.fetch_owners()
        return True

    def get_owner_timeline(self, owner_id) -> Optional[List[Dict[str, Any]]]:
        """Every visit of an owner, newest first; None when the call fails"""
        try:
            return self.client.get(f"/api/owners/timeline/{owner_id}",
                                   fallback="Failed to fetch timeline")["timeline"]
        except ApiError as e:
            self.error = e.message
            return None

    def usage_percentage(self) -> float:
        """Share of the season pool used, capped at 100"""
        if not self.usage_stats:
            return 0.0
        used, limit = self.usage_stats["totalDaysUsed"], self.usage_stats["limit"]
        if limit <= 0:
            return 100.0 if used else 0.0
        return min(100.0, used / limit * 100)
