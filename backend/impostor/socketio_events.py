from functools import wraps
from typing import Any, Dict

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from impostor import socketio
from impostor.services.rooms import RoomError, RoomStateMachine


def _machine() -> RoomStateMachine:
    return current_app.extensions['impostor']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _acknowledged(handler):
    """Run a request handler under the registry lock and turn failures into acks.

    The handler's return value is sent back as the Socket.IO acknowledgment.
    Errors never escape to the connection loop.
    """
    @wraps(handler)
    def wrapper(data=None, *_):
        payload: Dict[str, Any] = data if isinstance(data, dict) else {}
        machine = _machine()
        try:
            with machine.registry.lock:
                return handler(machine, payload)
        except RoomError as exc:
            current_app.logger.info(f"[request-fail] event={handler.__name__} sid={_get_sid()} reason={exc.message}")
            return {'ok': False, 'message': exc.message}
        except Exception:
            current_app.logger.exception(f"[request-error] event={handler.__name__} sid={_get_sid()}")
            return {'ok': False, 'message': 'Internal server error.'}
    return wrapper


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    emit('connected', {'id': _get_sid()})


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid}")
    machine = _machine()
    try:
        with machine.registry.lock:
            for departure in machine.disconnect(sid):
                leave_room(departure.code)
                if departure.destroyed:
                    continue
                socketio.emit('update_lobby', departure.room.lobby_dict(), to=departure.code, namespace=request.namespace)
    except Exception:
        current_app.logger.exception(f"[disconnect-error] sid={sid}")


@_acknowledged
def handle_create_room(machine: RoomStateMachine, data):
    room = machine.create(data.get('name'), _get_sid())
    join_room(room.code)
    emit('update_lobby', room.lobby_dict(), to=room.code)
    return {'ok': True, 'room': room.code, 'players': room.players_dict(), 'hostId': room.host_id, 'isHost': True}


@_acknowledged
def handle_join_room(machine: RoomStateMachine, data):
    sid = _get_sid()
    room = machine.join(data.get('room'), data.get('name'), sid)
    join_room(room.code)
    emit('update_lobby', room.lobby_dict(), to=room.code)
    return {
        'ok': True,
        'room': room.code,
        'players': room.players_dict(),
        'hostId': room.host_id,
        'isHost': room.host_id == sid,
    }


@_acknowledged
def handle_start_game(machine: RoomStateMachine, data):
    deal = machine.start_round(data.get('room'), _get_sid())
    # Private reveal first so every client knows its role before the announcement
    for player_id, role in deal.roles:
        emit('game_role', role, to=player_id)
    emit('game_started', deal.announcement, to=deal.room.code)
    return {'ok': True}


@_acknowledged
def handle_next_turn(machine: RoomStateMachine, data):
    code = data.get('room')
    current_turn_id = machine.advance_turn(code)
    if current_turn_id is not None:
        emit('turn_changed', {'currentTurnId': current_turn_id}, to=machine.registry.get(code).code)
    return {'ok': True, 'currentTurnId': current_turn_id}


@_acknowledged
def handle_get_room_state(machine: RoomStateMachine, data):
    state = machine.get_state(data.get('room'))
    return dict(ok=True, **state)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the room protocol handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create_room', handle_create_room, namespace=namespace)
    socketio.on_event('join_room', handle_join_room, namespace=namespace)
    socketio.on_event('start_game', handle_start_game, namespace=namespace)
    socketio.on_event('next_turn', handle_next_turn, namespace=namespace)
    socketio.on_event('get_room_state', handle_get_room_state, namespace=namespace)
