"""
Login state for the console
"""
import logging
from typing import Any, Dict, Optional

from hoteldesk.console.client import ApiError
from hoteldesk.console.stores.base import BaseStore

logger = logging.getLogger(__name__)


class AuthStore(BaseStore):

    def __init__(self, client):
        super().__init__(client)
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") == "admin"

    def check_auth(self) -> Optional[Dict[str, Any]]:
        """Who is logged in, or None when there is no valid session"""
        self.loading = True
        try:
            self.user = self.client.get("/api/auth/me")["user"]
        except ApiError:
            self.user = None
        finally:
            self.loading = False
        return self.user

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Log in; never raises

        Returns:
            {"success": bool, "message": str}
        """
        self.loading = True
        self.error = None
        try:
            res = self.client.post("/api/auth/login", json={"email": email, "password": password},
                                   fallback="Login failed")
        except ApiError as e:
            self.error = e.message
            return {"success": False, "message": e.message}
        finally:
            self.loading = False

        self.user = res["user"]
        self.client.session.reset()
        return {"success": True, "message": res.get("message", "Login successful")}

    def logout(self) -> None:
        try:
            self.client.post("/api/auth/logout")
        except ApiError as e:
            # the local session is dropped either way
            logger.info("Logout request failed: %s", e.message)
        self.user = None
