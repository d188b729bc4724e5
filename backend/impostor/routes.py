from flask import Blueprint, current_app, jsonify

from impostor.services.rooms import RoomError

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Impostor game server!'})


@main.route('/health')
def health():
    machine = current_app.extensions['impostor']
    return jsonify({'ok': True, 'rooms': len(machine.registry), 'words': len(machine.words)})


@main.route('/api/rooms/<string:code>')
def room_state(code):
    """
    Read-only snapshot of a live room, same shape as the get_room_state ack.
    """
    machine = current_app.extensions['impostor']
    try:
        with machine.registry.lock:
            state = machine.get_state(code)
    except RoomError as exc:
        return jsonify({'ok': False, 'message': exc.message}), 404
    return jsonify(dict(ok=True, **state))
