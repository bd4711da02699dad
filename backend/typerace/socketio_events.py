from flask import current_app, request

from typerace import socketio
from typerace.session import SessionHandler


def _handler() -> SessionHandler:
    return current_app.extensions['typerace']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect():
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(*args):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid}")
    _handler().disconnect(sid)


def handle_join_room(data):
    data = data if isinstance(data, dict) else {}
    _handler().join(_get_sid(), data.get('roomId'), data.get('username'))


def handle_start_game(*args):
    handler = _handler()
    handler.start(handler.context_for(_get_sid()))


def handle_typing_progress(data=None):
    handler = _handler()
    handler.progress(handler.context_for(_get_sid()), data)


def handle_reset_game(*args):
    handler = _handler()
    handler.reset(handler.context_for(_get_sid()))


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the race protocol's Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join-room', handle_join_room, namespace=namespace)
    socketio.on_event('start-game', handle_start_game, namespace=namespace)
    socketio.on_event('typing-progress', handle_typing_progress, namespace=namespace)
    socketio.on_event('reset-game', handle_reset_game, namespace=namespace)
