import logging
import random
from typing import Dict, List, Optional, Tuple

from impostor.models import Player, Room
from impostor.words import WordSource
from .errors import InsufficientPlayers, NoWordsAvailable, NotHost, RoomNotFound
from .registry import RoomRegistry


ROLE_IMPOSTOR = 'Impostor'
ROLE_CITIZEN = 'Citizen'

DEFAULT_PLAYER_NAME = 'Anonymous'


class RoundDeal:
    """Outcome of a successful start: private roles plus the room-wide announcement."""

    def __init__(self, room: Room, roles: List[Tuple[str, Dict]]):
        self.room = room
        self.roles = roles

    @property
    def announcement(self) -> Dict:
        return {
            'room': self.room.code,
            'players': self.room.players_dict(),
            'impostorId': self.room.impostor_id,
            'currentTurnId': self.room.current_turn_id,
        }


class Departure:
    """Outcome of removing a connection from one room.

    ``room`` is None when the room emptied and was destroyed.
    """

    def __init__(self, code: str, player: Player, room: Optional[Room], new_host_id: Optional[str] = None):
        self.code = code
        self.player = player
        self.room = room
        self.new_host_id = new_host_id

    @property
    def destroyed(self) -> bool:
        return self.room is None


def role_payload(player_id: str, room: Room) -> Dict:
    if player_id == room.impostor_id:
        return {'role': ROLE_IMPOSTOR, 'message': 'You are the Impostor. Keep it secret.'}
    return {
        'role': ROLE_CITIZEN,
        'word': room.secret_word,
        'message': 'You are a Citizen. Use the word to play.',
    }


class RoomStateMachine:
    """Lobby and round transitions for every room in a registry.

    Methods are synchronous and raise a RoomError subclass on failure. They
    never emit anything themselves; callers turn the returned room or
    outcome into events.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        words: WordSource,
        rng: Optional[random.Random] = None,
        min_players: int = 3,
        default_name: str = DEFAULT_PLAYER_NAME,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.words = words
        self.rng = rng or registry.rng
        self.min_players = min_players
        self.default_name = default_name
        self.logger = logger or logging.getLogger(__name__)

    def _name(self, name) -> str:
        if isinstance(name, str) and name.strip():
            return name.strip()
        return self.default_name

    def create(self, name, conn_id: str) -> Room:
        room = self.registry.create(conn_id, self._name(name))
        self.logger.info(f"[room-create] room={room.code} host={conn_id} name={room.players[0].name!r}")
        return room

    def join(self, code, name, conn_id: str) -> Room:
        room = self.registry.get(code)
        if room.find_player(conn_id):
            return room
        player = Player(conn_id, self._name(name))
        room.players.append(player)
        room.turn_order.append(conn_id)
        self.logger.info(f"[room-join] room={room.code} player={conn_id} name={player.name!r} count={len(room.players)}")
        return room

    def start_round(self, code, requester_id: str) -> RoundDeal:
        room = self.registry.get(code)
        if requester_id != room.host_id:
            raise NotHost()
        if len(room.players) < self.min_players:
            raise InsufficientPlayers(self.min_players)
        if not self.words:
            raise NoWordsAvailable()

        room.secret_word = self.words.pick(self.rng)
        room.impostor_id = room.players[self.rng.randrange(len(room.players))].id
        room.turn_order = room.player_ids()
        room.turn_index = 0

        roles = [(pid, role_payload(pid, room)) for pid in room.turn_order]
        self.logger.info(
            f"[round-start] room={room.code} players={len(room.players)} impostor={room.impostor_id} first={room.current_turn_id}"
        )
        self.logger.debug(f"[round-start] room={room.code} word={room.secret_word!r}")
        return RoundDeal(room, roles)

    def advance_turn(self, code) -> Optional[str]:
        room = self.registry.get(code)
        if not room.turn_order:
            return None
        room.turn_index = (room.turn_index + 1) % len(room.turn_order)
        self.logger.info(f"[turn] room={room.code} index={room.turn_index} current={room.current_turn_id}")
        return room.current_turn_id

    def leave(self, code, conn_id: str) -> Departure:
        room = self.registry.get(code)
        player = room.find_player(conn_id)
        if player is None:
            raise RoomNotFound()
        room.players.remove(player)
        room.turn_order = [pid for pid in room.turn_order if pid != conn_id]
        self.logger.info(f"[room-leave] room={room.code} player={conn_id} name={player.name!r}")

        if not room.players:
            self.registry.destroy(room.code)
            self.logger.info(f"[room-destroy] room={room.code} empty")
            return Departure(room.code, player, None)

        new_host_id = None
        if player.is_host:
            new_host = room.players[0]
            new_host.is_host = True
            room.host_id = new_host.id
            new_host_id = new_host.id
            self.logger.info(f"[host-transfer] room={room.code} host={new_host.id} name={new_host.name!r}")

        if room.turn_order:
            room.turn_index = room.turn_index % len(room.turn_order)
        else:
            room.turn_index = 0
        return Departure(room.code, player, room, new_host_id)

    def disconnect(self, conn_id: str) -> List[Departure]:
        """Remove a dropped connection from every room it was playing in."""
        return [self.leave(code, conn_id) for code in self.registry.codes_for(conn_id)]

    def get_state(self, code) -> Dict:
        return self.registry.get(code).to_dict()
