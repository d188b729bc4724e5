from typing import List, Optional


class Player:
    def __init__(self, id: str, name: str, is_host: bool = False):
        self.id = id
        self.name = name
        self.is_host = is_host

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'isHost': self.is_host,
        }

    def __repr__(self):
        return f"<Player {self.id} {self.name!r}{' host' if self.is_host else ''}>"


class Room:
    """In-memory state of one game session.

    ``players`` keeps join order. ``turn_order`` holds connection ids and is
    kept in step with ``players``: appended on join, pruned on leave and
    rebuilt when a round is dealt.
    """

    def __init__(self, code: str, host: Player):
        host.is_host = True
        self.code = code
        self.players: List[Player] = [host]
        self.host_id: str = host.id
        self.secret_word: Optional[str] = None
        self.impostor_id: Optional[str] = None
        self.turn_order: List[str] = [host.id]
        self.turn_index = 0

    @property
    def in_round(self) -> bool:
        return self.secret_word is not None

    @property
    def secret_word_loaded(self) -> bool:
        return bool(self.secret_word)

    @property
    def current_turn_id(self) -> Optional[str]:
        if not self.turn_order:
            return None
        return self.turn_order[self.turn_index]

    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def find_player(self, conn_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == conn_id:
                return p
        return None

    def players_dict(self):
        return [p.to_dict() for p in self.players]

    def lobby_dict(self):
        return {
            'room': self.code,
            'players': self.players_dict(),
            'hostId': self.host_id,
        }

    def to_dict(self):
        return {
            'players': self.players_dict(),
            'hostId': self.host_id,
            'secretWordLoaded': self.secret_word_loaded,
            'impostorId': self.impostor_id,
            'currentTurnId': self.current_turn_id,
        }

    def __repr__(self):
        return f"<Room {self.code} players={len(self.players)}>"
