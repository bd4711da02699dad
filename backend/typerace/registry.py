import logging
import threading
from typing import Dict, List, Optional

from typerace.models import Room
from typerace.services.texts import TextSupplier


class RoomRegistry:
    """Process-wide mapping of room id to Room.

    Rooms are created on first join and deleted when their last participant
    leaves. ``lock`` guards the mapping; acquire it before any room lock.
    """

    def __init__(self, texts: TextSupplier, duration: int = 60, logger: Optional[logging.Logger] = None):
        self.texts = texts
        self.duration = duration
        self.logger = logger or logging.getLogger(__name__)
        self.lock = threading.RLock()
        self._rooms: Dict[str, Room] = {}

    def __contains__(self, room_id) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def get_or_create(self, room_id: str) -> Room:
        with self.lock:
            room = self._rooms.get(room_id)
            if room is None:
                room = Room(room_id, self.texts.choose(), duration=self.duration)
                self._rooms[room_id] = room
                self.logger.info(f"[room-created] room={room_id} text_len={len(room.text)}")
            return room

    def remove(self, room_id: str) -> None:
        with self.lock:
            if self._rooms.pop(room_id, None) is not None:
                self.logger.info(f"[room-deleted] room={room_id} no users left")

    def snapshot(self) -> List[dict]:
        with self.lock:
            rooms = list(self._rooms.values())
        return [room.summary() for room in rooms]
