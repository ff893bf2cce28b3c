"""
Promo code store
"""
from typing import Any, Dict, List

from hoteldesk.console.client import ApiError
from hoteldesk.console.stores.base import BaseStore

INVALID_CODE = "Invalid promo code"


class PromoCodeStore(BaseStore):

    def __init__(self, client):
        super().__init__(client)
        self.promo_codes: List[Dict[str, Any]] = []

    def fetch_promo_codes(self) -> List[Dict[str, Any]]:
        def run():
            self.promo_codes = self.client.get("/api/promocodes/all")["data"]
            return self.promo_codes
        return self._call(run, "Failed to fetch promo codes")

    def create_promo_code(self, data: Dict[str, Any]) -> Dict[str, Any]:
        promo = self._call(
            lambda: self.client.post("/api/promocodes/create", json=data,
                                     fallback="Failed to create promo code")["data"],
            "Failed to create promo code"
        )
        self.fetch_promo_codes()
        return promo

    def update_promo_status(self, promo_id, status: str) -> Dict[str, Any]:
        promo = self._call(
            lambda: self.client.put(f"/api/promocodes/status/{promo_id}", json={"status": status},
                                    fallback="Failed to update promo status")["data"],
            "Failed to update promo status"
        )
        self.fetch_promo_codes()
        return promo

    def validate_promo_code(self, code: str) -> Dict[str, Any]:
        """
        Check a code at check-in time; never raises

        Returns:
            {"isValid": True, "percentage": int} or {"isValid": False, "message": str}
        """
        try:
            res = self.client.get(f"/api/promocodes/validate/{code}", fallback=INVALID_CODE)
        except ApiError as e:
            if e.status_code is None:
                return {"isValid": False, "message": "Error validating promo code"}
            return {"isValid": False, "message": e.message or INVALID_CODE}
        if res.get("success") and res.get("data"):
            return {"isValid": True, "percentage": res["data"]["percentage"]}
        return {"isValid": False, "message": res.get("message") or INVALID_CODE}
