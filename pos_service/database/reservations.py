"""In-house guest storage for room charge detection"""

import re
from typing import Optional

from ..models.settlement import DetectedReservation, GuestContext


class ReservationDatabase:
    """Checked-in guests keyed by room name"""

    def __init__(self):
        self.by_room: dict[str, DetectedReservation] = {}
        self.phones: dict[str, str] = {}

    @staticmethod
    def _room_key(value: str) -> str:
        return re.sub(r"^room\s*", "", value.strip().lower())

    def check_in(self, reservation: DetectedReservation, phone: Optional[str] = None) -> None:
        """Register an in-house guest"""
        key = self._room_key(reservation.room_name)
        self.by_room[key] = reservation
        if phone:
            self.phones[re.sub(r"\D", "", phone)] = key

    def check_out(self, room_name: str) -> bool:
        key = self._room_key(room_name)
        if key not in self.by_room:
            return False
        del self.by_room[key]
        self.phones = {p: k for p, k in self.phones.items() if k != key}
        return True

    def detect(self, context: GuestContext) -> Optional[DetectedReservation]:
        """Find the in-house guest for a table/room reference or phone"""
        if context.table_ref:
            reservation = self.by_room.get(self._room_key(context.table_ref))
            if reservation:
                return reservation

        if context.phone:
            key = self.phones.get(re.sub(r"\D", "", context.phone))
            if key:
                return self.by_room.get(key)

        return None
