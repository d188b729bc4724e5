"""Room domain services: registry, lobby and round state machine.

Pure in-memory logic imported by the socket gateway and HTTP routes;
nothing in here knows about Socket.IO.
"""

from .errors import (
    InsufficientPlayers,
    NoWordsAvailable,
    NotHost,
    RoomCodesExhausted,
    RoomError,
    RoomNotFound,
)
from .machine import ROLE_CITIZEN, ROLE_IMPOSTOR, Departure, RoomStateMachine, RoundDeal
from .registry import RoomRegistry
