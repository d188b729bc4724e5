import random
import string
import threading
from typing import Dict, List, Optional

from impostor.models import Player, Room
from .errors import RoomCodesExhausted, RoomNotFound


CODE_ALPHABET = string.ascii_uppercase
CODE_LENGTH = 4


class RoomRegistry:
    """Owns the live room table, keyed by room code.

    All mutations are expected to happen while holding ``lock``; the socket
    gateway takes it once per inbound event.
    """

    def __init__(self, rng: Optional[random.Random] = None, max_attempts: int = 1000):
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts
        self.lock = threading.RLock()
        self._rooms: Dict[str, Room] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code) -> bool:
        return code in self._rooms

    def codes(self) -> List[str]:
        return list(self._rooms)

    def generate_code(self) -> str:
        """Generate a 4-letter code (A-Z only) that no live room is using."""
        for _ in range(self.max_attempts):
            code = ''.join(self.rng.choices(CODE_ALPHABET, k=CODE_LENGTH))
            if code not in self._rooms:
                return code
        raise RoomCodesExhausted()

    def create(self, host_id: str, host_name: str) -> Room:
        room = Room(self.generate_code(), Player(host_id, host_name, is_host=True))
        self._rooms[room.code] = room
        return room

    def find(self, code) -> Optional[Room]:
        if not isinstance(code, str):
            return None
        return self._rooms.get(code.strip().upper())

    def get(self, code) -> Room:
        room = self.find(code)
        if room is None:
            raise RoomNotFound()
        return room

    def destroy(self, code: str) -> None:
        self._rooms.pop(code, None)

    def codes_for(self, conn_id: str) -> List[str]:
        """Codes of every live room the connection is a player in."""
        return [code for code, room in self._rooms.items() if room.find_player(conn_id)]
