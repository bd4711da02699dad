from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from typerace.config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config['CORS_ORIGINS']
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry and session handler per app; nothing lives at module level
    from typerace.broadcast import Broadcaster
    from typerace.registry import RoomRegistry
    from typerace.services.texts import TextSupplier
    from typerace.session import SessionHandler

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    texts = TextSupplier.from_config(flask_app.config)
    registry = RoomRegistry(texts, duration=flask_app.config['ROOM_DURATION_SEC'], logger=flask_app.logger)
    flask_app.extensions['typerace'] = SessionHandler(
        registry, Broadcaster(socketio, namespace), logger=flask_app.logger
    )

    # Import and register blueprints here
    from typerace.main import main
    flask_app.register_blueprint(main)

    from typerace.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    # Register Socket.IO event handlers
    from typerace.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace)

    @click.command('texts')
    def texts_command():
        """Prints the passages rooms are drawn from."""
        for idx, text in enumerate(texts.texts, start=1):
            click.echo(f"{idx}. {text}")

    flask_app.cli.add_command(texts_command)

    return flask_app
