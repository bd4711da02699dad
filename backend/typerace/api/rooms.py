from flask import Blueprint, current_app, jsonify

rooms = Blueprint('rooms', __name__)


def _registry():
    return current_app.extensions['typerace'].registry


@rooms.route('', methods=['GET'])
def list_rooms():
    """
    Returns a summary of every live room.
    """
    return jsonify(_registry().snapshot()), 200


@rooms.route('/<string:room_id>', methods=['GET'])
def get_room(room_id):
    """
    Returns the full view of one room, the same one its participants see.
    """
    room = _registry().get(room_id)
    if room is None:
        return jsonify({'error': 'Room not found'}), 404
    with room.lock:
        view = room.to_dict()
    return jsonify(view), 200
