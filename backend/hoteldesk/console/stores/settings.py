"""
Hotel settings store: tax rate, currency and the system-wide alert banner
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

from hoteldesk.console.client import ApiError
from hoteldesk.console.stores.base import BaseStore

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "Rs"


class SettingStore(BaseStore):

    def __init__(self, client):
        super().__init__(client)
        self.settings: Optional[Dict[str, Any]] = None

    def refresh_settings(self) -> Dict[str, Any]:
        def run():
            self.settings = self.client.get("/api/tax/get-all-gst")["data"]
            return self.settings
        return self._call(run, "Failed to load settings")

    def update_settings(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply changes locally first, then save them

        On failure the server copy is re-fetched, the message is kept in
        ``error`` and the ApiError is re-raised.
        """
        payload = {**(self.settings or {}), **changes}
        self.settings = payload
        try:
            self.settings = self.client.put("/api/tax/update-setting", json=payload,
                                            fallback="Failed to update settings")["data"]
        except ApiError as e:
            logger.warning("Settings update rejected, reloading: %s", e.message)
            try:
                self.refresh_settings()
            except ApiError:
                self.settings = None
            self.error = e.message
            raise
        return self.settings

    @property
    def tax_rate(self) -> Decimal:
        return Decimal(str(self.settings["taxRate"])) if self.settings else Decimal("0")

    def calculate_tax(self, amount) -> Decimal:
        if not self.settings:
            return Decimal("0")
        tax = Decimal(str(amount)) * self.tax_rate / 100
        return tax.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def format_currency(self, amount) -> str:
        symbol = self.settings["currencySymbol"] if self.settings else DEFAULT_CURRENCY
        value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return f"{symbol} {value}"

    def active_alert(self) -> Optional[Dict[str, Any]]:
        """The banner to show on every screen, if one is switched on"""
        if not self.settings:
            return None
        alert = self.settings.get("systemAlert") or {}
        if alert.get("isActive") and alert.get("message"):
            return alert
        return None
