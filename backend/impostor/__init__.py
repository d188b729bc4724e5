import logging

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from config import Config

# Handlers serialize on a threading.RLock, so the server must run real threads
socketio = SocketIO(async_mode='threading')


def create_app(config_class=Config, rng=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Room table lives on the app; handlers reach it through current_app
    from impostor.words import WordSource
    from impostor.services.rooms import RoomRegistry, RoomStateMachine

    if flask_app.config.get('WORDS') is not None:
        words = WordSource(flask_app.config['WORDS'])
        flask_app.logger.info(f"[words] using {len(words)} configured words")
    else:
        words = WordSource.from_file(flask_app.config['WORDS_FILE'], flask_app.logger)

    min_players = int(flask_app.config.get('MIN_PLAYERS', 3))
    if min_players < 3:
        raise ValueError(f'MIN_PLAYERS must be at least 3, got {min_players}')

    registry = RoomRegistry(
        rng=rng,
        max_attempts=int(flask_app.config.get('ROOM_CODE_MAX_ATTEMPTS', 1000)),
    )
    flask_app.extensions['impostor'] = RoomStateMachine(
        registry,
        words,
        min_players=min_players,
        default_name=flask_app.config.get('DEFAULT_PLAYER_NAME', 'Anonymous'),
        logger=flask_app.logger,
    )

    from impostor.routes import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from impostor.socketio_events import register_socketio_handlers
    register_socketio_handlers(flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('words-check')
    def words_check_command():
        """Loads the configured word file and reports how many words it holds."""
        from impostor.words import load_words
        loaded = load_words(flask_app.config['WORDS_FILE'], flask_app.logger)
        click.echo(f"{len(loaded)} words loaded from {flask_app.config['WORDS_FILE']}")
        if not loaded:
            raise click.exceptions.Exit(1)

    flask_app.cli.add_command(words_check_command)

    return flask_app
