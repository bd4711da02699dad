from flask_socketio import SocketIO, join_room


def room_channel(room_id: str) -> str:
    """Socket.IO room name for a race room (kept apart from per-sid rooms)."""
    return f"room:{room_id}"


class Broadcaster:
    """Delivers protocol events over Flask-SocketIO rooms."""

    def __init__(self, socketio: SocketIO, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def bind(self, sid: str, room_id: str) -> None:
        join_room(room_channel(room_id), sid=sid, namespace=self.namespace)

    def to_room(self, room_id: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=room_channel(room_id), namespace=self.namespace)

    def to_connection(self, sid: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)
