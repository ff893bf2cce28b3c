"""
HotelDesk console client

An httpx-based API client plus one store per screen area. Stores keep the last
fetched state together with ``loading`` / ``error`` and re-fetch after every
mutation.
"""
from hoteldesk.console.client import ApiClient, ApiError, SessionExpiredError
from hoteldesk.console.forms import FormError

__all__ = ['ApiClient', 'ApiError', 'SessionExpiredError', 'FormError']
