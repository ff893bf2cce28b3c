"""
Transaction store

Deletes are optimistic: the row disappears at once, comes back if the server
refuses, and the list is reloaded afterwards in both cases.
"""
import logging
from typing import Any, Dict, List

from hoteldesk.console.client import ApiError
from hoteldesk.console.stores.base import BaseStore

logger = logging.getLogger(__name__)

SOURCES = ("reservation", "guest")


class TransactionStore(BaseStore):

    def __init__(self, client):
        super().__init__(client)
        self.transactions: List[Dict[str, Any]] = []

    def fetch_transactions(self) -> List[Dict[str, Any]]:
        def run():
            self.transactions = self.client.get("/api/transactions/get-transactions")["data"] or []
            return self.transactions
        return self._call(run, "Failed to fetch transactions")

    def add_transaction(self, data: Dict[str, Any]) -> Dict[str, Any]:
        tx = self._call(
            lambda: self.client.post("/api/transactions/add", json=data,
                                     fallback="Failed to record transaction")["data"],
            "Failed to record transaction"
        )
        self.fetch_transactions()
        return tx

    def delete_transaction(self, transaction_id) -> None:
        snapshot = list(self.transactions)
        self.transactions = [t for t in self.transactions if t.get("_id") != transaction_id]
        try:
            self._call(
                lambda: self.client.delete(f"/api/transactions/{transaction_id}",
                                           fallback="Failed to delete transaction"),
                "Failed to delete transaction"
            )
        except ApiError:
            self.transactions = snapshot
            raise
        finally:
            self._refetch_quietly()

    def _refetch_quietly(self) -> None:
        try:
            self.transactions = self.client.get("/api/transactions/get-transactions")["data"] or []
        except ApiError as e:
            # keep the rolled back list; the delete error is already in self.error
            logger.info("Could not reload transactions: %s", e.message)

    def get_transactions_by_source(self, source_id, source: str) -> List[Dict[str, Any]]:
        """Payments recorded against one reservation or one guest"""
        if source not in SOURCES:
            raise ValueError(f"source must be one of {SOURCES}")
        params = {"reservationId" if source == "reservation" else "guestId": source_id}
        return self.client.get("/api/transactions", params=params)["data"] or []
