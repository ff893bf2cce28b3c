"""
Room store

Keeps the room list, the date-filtered availability search, the presidential
suites and the schedule of the room currently opened.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from hoteldesk.console.client import ApiError
from hoteldesk.console.stores.base import BaseStore


class RoomStore(BaseStore):

    def __init__(self, client):
        super().__init__(client)
        self.rooms: List[Dict[str, Any]] = []
        self.available_rooms: List[Dict[str, Any]] = []
        self.presidential_rooms: List[Dict[str, Any]] = []
        self.current_room: Optional[Dict[str, Any]] = None
        self.room_timeline: List[Dict[str, Any]] = []

    def fetch_rooms(self) -> List[Dict[str, Any]]:
        def run():
            self.rooms = self.client.get("/api/rooms/get-all-rooms")["rooms"]
            return self.rooms
        return self._call(run, "Failed to fetch all rooms.")

    def fetch_available_rooms(self, checkin=None, checkout=None) -> List[Dict[str, Any]]:
        """Rooms free for [checkin, checkout); without dates, rooms available now"""
        self.available_rooms = []
        params = {}
        if checkin and checkout:
            params = {"checkin": str(checkin), "checkout": str(checkout)}

        def run():
            self.available_rooms = self.client.get("/api/rooms/get-available-rooms", params=params)["rooms"]
            return self.available_rooms
        return self._call(run, "Failed to fetch available rooms. Please check the dates and try again.")

    def fetch_presidential_rooms(self) -> List[Dict[str, Any]]:
        def run():
            self.presidential_rooms = self.client.get("/api/rooms/get-presidential-rooms")["rooms"]
            return self.presidential_rooms
        return self._call(run, "Failed to fetch presidential rooms.")

    def fetch_room_by_id(self, room_id) -> Dict[str, Any]:
        def run():
            self.current_room = self.client.get(f"/api/rooms/get-by-id/{room_id}")["room"]
            return self.current_room
        return self._call(run, "Failed to fetch room.")

    def create_room(self, data: Dict[str, Any]) -> Dict[str, Any]:
        room = self._call(
            lambda: self.client.post("/api/rooms/create-room", json=data, fallback="Failed to create room.")["room"],
            "Failed to create room."
        )
        self.fetch_rooms()
        return room

    def update_room(self, room_id, data: Dict[str, Any]) -> Dict[str, Any]:
        room = self._call(
            lambda: self.client.put(f"/api/rooms/update-room/{room_id}", json=data,
                                    fallback="Failed to update room.")["room"],
            "Failed to update room."
        )
        if self.current_room and self.current_room.get("_id") == room["_id"]:
            self.current_room = room
        self.fetch_rooms()
        return room

    def delete_room(self, room_id) -> None:
        """Drop the room from the list at once; restore the list if the server refuses"""
        snapshot = list(self.rooms)
        self.rooms = [r for r in self.rooms if r.get("_id") != room_id]
        try:
            self._call(
                lambda: self.client.delete(f"/api/rooms/delete-room/{room_id}", fallback="Failed to delete room."),
                "Failed to delete room."
            )
        except ApiError:
            self.rooms = snapshot
            raise
        if self.current_room and self.current_room.get("_id") == room_id:
            self.current_room = None

    def fetch_room_timeline(self, room_id) -> List[Dict[str, Any]]:
        self.room_timeline = []

        def run():
            self.room_timeline = self.client.get(f"/api/rooms/{room_id}/timeline")["timeline"]
            return self.room_timeline
        return self._call(run, "Could not fetch the room's schedule.")

    def clear_room_timeline(self) -> None:
        self.room_timeline = []

    def refresh_all(self, max_workers: int = 3) -> None:
        """Reload rooms, current availability and presidential suites side by side"""
        paths = {
            "rooms": "/api/rooms/get-all-rooms",
            "available_rooms": "/api/rooms/get-available-rooms",
            "presidential_rooms": "/api/rooms/get-presidential-rooms",
        }

        def run():
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                futures = {attr: pool.submit(self.client.get, path) for attr, path in paths.items()}
                results = {attr: future.result()["rooms"] for attr, future in futures.items()}
            for attr, rooms in results.items():
                setattr(self, attr, rooms)
        self._call(run, "Failed to refresh rooms.")
