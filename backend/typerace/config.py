import os


def _split_origins(value):
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Frontend dev server origins allowed for HTTP and Socket.IO
    CORS_ORIGINS = _split_origins(os.environ.get('CORS_ORIGINS', 'http://localhost:5173'))
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
    # Stored on every room and exposed to clients; never ends a race
    ROOM_DURATION_SEC = int(os.environ.get('ROOM_DURATION_SEC', '60'))
    # Optional passage corpus, one passage per non-blank line
    TEXTS_FILE = os.environ.get('TEXTS_FILE')
    # In-code corpus override (takes precedence over TEXTS_FILE)
    TEXTS = None
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
