from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per app; handlers reach it through current_app
    from xo_rooms.services.games.registry import RoomRegistry
    flask_app.extensions['rooms'] = RoomRegistry(
        code_length=int(flask_app.config.get('ROOM_CODE_LENGTH', 6)),
    )

    from xo_rooms.main import main
    flask_app.register_blueprint(main)

    from xo_rooms.socketio_events import register_socketio_handlers
    register_socketio_handlers(flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    from xo_rooms.services.games.scheduler import start_idle_sweeper
    start_idle_sweeper(flask_app)

    @click.command('rooms')
    def rooms_command():
        """Lists live rooms with their status and score."""
        registry = flask_app.extensions['rooms']
        with registry.lock:
            codes = registry.codes()
            if not codes:
                click.echo('No live rooms.')
            for code in codes:
                room = registry.get(code)
                click.echo(
                    f"{code}  {room.status:<8}  X {room.win_counts['X']} - {room.win_counts['O']} O"
                )

    flask_app.cli.add_command(rooms_command)

    return flask_app
