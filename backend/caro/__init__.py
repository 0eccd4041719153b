from flask import Flask
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

bcrypt = Bcrypt()
socketio = SocketIO(async_mode=None)


def _no_spawn(*_args, **_kwargs):
    """Stand-in spawner under TESTING: the clock is ticked by hand."""
    return None


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS') or ['*']
    # Both Flask-CORS and engine.io treat the bare string '*' as "any origin"
    allowed_origins = '*' if '*' in origins else origins

    bcrypt.init_app(flask_app)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from caro.services.gate import PasswordGate
    from caro.services.game import Session
    from caro.socketio_events import make_room_emitter, register_socketio_handlers

    if flask_app.config.get('TESTING') and not flask_app.config.get('ENABLE_CLOCK_IN_TESTS'):
        spawn = _no_spawn
    else:
        spawn = socketio.start_background_task

    # One room per process; handlers and routes reach it through app.extensions
    flask_app.extensions['caro_session'] = Session(
        make_room_emitter(flask_app.config['ROOM_ID']),
        board_size=int(flask_app.config.get('BOARD_SIZE', 20)),
        win_length=int(flask_app.config.get('WIN_LENGTH', 5)),
        turn_time=int(flask_app.config.get('TURN_TIME_SEC', 30)),
        spawn=spawn,
        sleep=socketio.sleep,
        logger=flask_app.logger,
    )
    flask_app.extensions['caro_gate'] = PasswordGate.from_config(bcrypt, flask_app.config)

    from caro.routes import main
    flask_app.register_blueprint(main)

    register_socketio_handlers()

    @click.command('hash-password')
    @click.argument('password', required=False)
    def hash_password_command(password):
        """Print a bcrypt hash to use as GAME_PASSWORD_HASH."""
        password = password or flask_app.config.get('GAME_PASSWORD')
        if not password:
            raise click.UsageError('Pass a password or set GAME_PASSWORD.')
        click.echo(bcrypt.generate_password_hash(password).decode('utf-8'))

    flask_app.cli.add_command(hash_password_command)

    return flask_app
