"""
Store base class

A store holds the last fetched state for one area of the console plus the
``loading`` / ``error`` pair every screen renders.
"""
import logging
from typing import Callable, Dict, Optional, TypeVar

from hoteldesk.console.client import ApiClient, ApiError
from hoteldesk.console.forms import FormError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseStore:

    def __init__(self, client: ApiClient):
        self.client = client
        self.loading = False
        self.error: Optional[str] = None

    def clear_error(self) -> None:
        self.error = None

    def _call(self, fn: Callable[[], T], fallback: str = "An error occurred") -> T:
        """Run one API interaction; on failure keep its message in ``error`` and re-raise"""
        self.loading = True
        self.error = None
        try:
            return fn()
        except ApiError as e:
            self.error = e.message or fallback
            raise
        finally:
            self.loading = False

    def _check_form(self, errors: Dict[str, str]) -> None:
        if errors:
            error = FormError(errors)
            self.error = str(error)
            raise error
