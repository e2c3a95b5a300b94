import hmac

from flask import Blueprint, current_app, jsonify, request
from trivia.errors import TriviaError, Unauthorized
from trivia.services.sessions import SessionEngine


sessions = Blueprint('sessions', __name__)


def _engine() -> SessionEngine:
    return current_app.extensions['trivia']


@sessions.errorhandler(TriviaError)
def handle_trivia_error(exc: TriviaError):
    return jsonify(exc.to_dict()), exc.status_code


@sessions.route('/<string:session_id>/state', methods=['GET'])
def get_session_state(session_id):
    session = _engine().get_session(session_id)
    with session.lock:
        payload = session.to_dict()
    payload['durations'] = {
        'question': _engine().question_duration,
        'start_delay': _engine().start_delay,
    }
    return jsonify(payload)


@sessions.route('/<string:session_id>/leaderboard', methods=['GET'])
def get_leaderboard(session_id):
    entries = _engine().leaderboard(session_id)
    return jsonify({'leaderboard': [e.to_dict() for e in entries]})


@sessions.route('/<string:session_id>', methods=['DELETE'])
def destroy_session(session_id):
    data = request.get_json(silent=True) or {}
    password = str(data.get('password') or '')
    if not hmac.compare_digest(password.encode(), current_app.config['HOST_PASSWORD'].encode()):
        raise Unauthorized('Invalid password')
    if not _engine().destroy_session(session_id):
        return jsonify({'error': 'Game not found', 'code': 'session_not_found'}), 404
    return jsonify({'message': 'Session destroyed', 'sessionId': session_id})
