"""
Invoice store

Holds either one page of the invoice list or the results of the last search,
never both, plus the invoice currently opened.
"""
from typing import Any, Dict, List, Optional, Union

from hoteldesk.console.client import ApiError
from hoteldesk.console.stores.base import BaseStore
from hoteldesk.domain.pagination import pagination_range

DEFAULT_PAGE_SIZE = 25


class InvoiceStore(BaseStore):

    def __init__(self, client):
        super().__init__(client)
        self.paginated: Optional[Dict[str, Any]] = None
        self.invoices: List[Dict[str, Any]] = []
        self.current_invoice: Optional[Dict[str, Any]] = None

    def fetch_all_invoices(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Dict[str, Any]:
        def run():
            self.paginated = self.client.get("/api/invoice/get-all-invoices",
                                             params={"page": page, "limit": limit})
            return self.paginated
        return self._call(run, "Failed to fetch invoices")

    def search_invoices(self, guest_name: Optional[str] = None, room_number: Optional[str] = None,
                        invoice_number: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {
            key: value for key, value in (
                ("guestName", guest_name), ("roomNumber", room_number), ("invoiceNumber", invoice_number)
            ) if value
        }

        def run():
            self.invoices = self.client.get("/api/invoice/search-Invoices", params=params)["data"]
            self.paginated = None
            return self.invoices
        return self._call(run, "Failed to search for invoices")

    def fetch_invoice_by_id(self, invoice_id) -> Dict[str, Any]:
        def run():
            self.current_invoice = self.client.get(f"/api/invoice/get-Invoice-By-Id/{invoice_id}")["data"]
            return self.current_invoice
        return self._call(run, "Failed to fetch invoice details")

    def _current_page(self) -> int:
        return self.paginated["currentPage"] if self.paginated else 1

    def update_invoice_status(self, invoice_id, status: str) -> None:
        self._call(
            lambda: self.client.patch(f"/api/invoice/{invoice_id}/status", json={"status": status},
                                      fallback="Failed to update invoice status"),
            "Failed to update invoice status"
        )
        if self.paginated:
            self.fetch_all_invoices(self._current_page())
        if self.current_invoice and self.current_invoice.get("_id") == invoice_id:
            self.fetch_invoice_by_id(invoice_id)

    def delete_invoice(self, invoice_id) -> None:
        self._call(
            lambda: self.client.delete(f"/api/invoice/delete-Invoice/{invoice_id}",
                                       fallback="Failed to delete invoice"),
            "Failed to delete invoice"
        )
        if self.current_invoice and self.current_invoice.get("_id") == invoice_id:
            self.current_invoice = None
        self.fetch_all_invoices(self._current_page())

    def send_invoice_by_email(self, invoice_id) -> Dict[str, Any]:
        return self._call(
            lambda: self.client.post(f"/api/invoice/{invoice_id}/send-email",
                                     fallback="Failed to send invoice email"),
            "Failed to send invoice email"
        )

    def download_url(self, invoice_id) -> Optional[str]:
        """Where the printable invoice can be opened; None on failure"""
        try:
            return self.client.get(f"/api/invoice/{invoice_id}/download")["url"]
        except ApiError:
            self.error = "Could not download the invoice. Please try again."
            return None

    def pagination_range(self, sibling_count: int = 1) -> List[Union[int, str]]:
        """Page strip for the current page of the invoice list"""
        if not self.paginated:
            return []
        return pagination_range(self.paginated["totalPages"], self.paginated["currentPage"], sibling_count)
