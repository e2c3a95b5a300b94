from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)

ROOM_PREFIX = 'game:'


def room_for(session_id: str) -> str:
    return f"{ROOM_PREFIX}{session_id}"


def _broadcast(event: str, payload: dict, session_id: str) -> None:
    # socketio.emit works from handlers and from background timer tasks alike
    socketio.emit(event, payload, to=room_for(session_id), namespace='/ws')


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS') or '*'
    if origins == ['*']:
        origins = '*'
    CORS(flask_app, supports_credentials=True, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from trivia.questions import load_question_bank
    from trivia.services.sessions import AdvanceScheduler, SessionEngine, SessionRegistry

    questions = load_question_bank(flask_app.config.get('QUESTION_BANK_PATH'))
    testing = flask_app.config.get('TESTING', False)
    scheduler = AdvanceScheduler(
        socketio,
        enabled=(not testing) or flask_app.config.get('ENABLE_SCHEDULER_IN_TESTS', False),
        logger=flask_app.logger,
    )
    engine = SessionEngine(
        registry=SessionRegistry(questions, id_length=int(flask_app.config.get('SESSION_ID_LENGTH', 8))),
        scheduler=scheduler,
        broadcast=_broadcast,
        host_password=flask_app.config['HOST_PASSWORD'],
        question_duration=float(flask_app.config.get('QUESTION_DURATION_SEC', 10)),
        start_delay=float(flask_app.config.get('GAME_START_DELAY_SEC', 2)),
        logger=flask_app.logger,
    )
    flask_app.extensions['trivia'] = engine

    from trivia.main import main
    flask_app.register_blueprint(main)

    from trivia.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from trivia.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('questions')
    def questions_command():
        """Prints the loaded question bank."""
        for q in questions:
            click.echo(f"{q.id}\t[{q.category}]\t{q.text}")
        click.echo(f"{len(questions)} questions loaded")

    flask_app.cli.add_command(questions_command)

    return flask_app
