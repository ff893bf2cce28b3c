"""
Console fixtures: an ApiClient driving the app through the test client
"""
import pytest

from factories import ADMIN_EMAIL, RECEPTIONIST_EMAIL, PASSWORD
from hoteldesk.console import ApiClient
from hoteldesk.console.stores import AuthStore


@pytest.fixture
def api(client):
    return ApiClient(http_client=client)


@pytest.fixture
def admin_api(api, admin_user):
    """ApiClient holding an admin session cookie"""
    assert AuthStore(api).login(ADMIN_EMAIL, PASSWORD)["success"]
    return api


@pytest.fixture
def receptionist_api(api, receptionist_user):
    assert AuthStore(api).login(RECEPTIONIST_EMAIL, PASSWORD)["success"]
    return api
