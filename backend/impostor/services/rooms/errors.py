class RoomError(Exception):
    """Request-scoped failure reported back to the requesting client."""

    message = 'Request failed.'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class RoomNotFound(RoomError):
    message = 'Room not found.'


class NotHost(RoomError):
    message = 'Only the host can start the game.'


class InsufficientPlayers(RoomError):
    message = 'At least 3 players are required to start.'

    def __init__(self, min_players: int = 3):
        super().__init__(f'At least {min_players} players are required to start.')
        self.min_players = min_players


class NoWordsAvailable(RoomError):
    message = 'No words are loaded on the server.'


class RoomCodesExhausted(RoomError):
    message = 'Could not allocate a room code, try again.'
