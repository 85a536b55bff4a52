from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import atexit
import click
from config import Config
from countdown_board.services.countdowns import board

socketio = SocketIO(async_mode=None)


def _parse_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _parse_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Board state is loaded from the snapshot before any handler can run
    board.init_app(flask_app, socketio)

    # Import and register blueprints here
    from countdown_board.main import main
    flask_app.register_blueprint(main)

    from countdown_board.api.countdowns import countdowns
    flask_app.register_blueprint(countdowns, url_prefix='/api/countdowns')

    # Register Socket.IO event handlers
    # Importing here ensures the handlers bind to the initialized socketio instance
    from countdown_board.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    if not flask_app.config.get('TESTING'):
        # Best-effort final write on interpreter exit, skipped when nothing changed
        atexit.register(board.flush_if_dirty)

    @click.command('board-reset')
    def board_reset_command():
        """Removes every countdown and rewrites an empty snapshot."""
        board.registry.clear()
        board.store.reset()
        print(f'Board snapshot at {board.store.path} has been reset!')

    @click.command('board-status')
    def board_status_command():
        """Prints the countdowns recorded in the snapshot."""
        loaded = board.store.load(board.now(), board.grace_ms)
        if loaded is None:
            print(f'No snapshot at {board.store.path}')
            return
        items, next_id = loaded
        active = [item for item in items if item.is_active(board.now())]
        print(f'{len(active)} active / {len(items)} stored countdowns, next id {next_id}')
        for item in items:
            print(f'  #{item.id} ({item.x}, {item.y}) by {item.created_by} remaining={item.remaining_ms(board.now()) // 1000}s')

    flask_app.cli.add_command(board_reset_command)
    flask_app.cli.add_command(board_status_command)

    return flask_app
