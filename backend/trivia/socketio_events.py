from flask import current_app, request
from flask_socketio import emit, join_room
from trivia import room_for, socketio
from trivia.errors import TriviaError
from trivia.services.sessions import SessionEngine


def _engine() -> SessionEngine:
    return current_app.extensions['trivia']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _bad_request(message: str):
    return {'error': message, 'code': 'bad_request'}


def handle_connect():
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    # Participants stay in their session; the game runs on without them
    current_app.logger.info(f"[disconnect] sid={_get_sid()}")


def handle_create_session(data):
    password = (data or {}).get('password')
    try:
        session = _engine().create_session(_get_sid(), password)
    except TriviaError as exc:
        return exc.to_dict()
    join_room(room_for(session.id))
    return {'sessionId': session.id}


def handle_join_session(data):
    data = data or {}
    session_id = data.get('sessionId')
    address = data.get('address') or data.get('stacksAddress')
    if not session_id or not address:
        return _bad_request('sessionId and address are required')
    sid = _get_sid()
    try:
        players = _engine().join(session_id, sid, str(address))
    except TriviaError as exc:
        return exc.to_dict()
    join_room(room_for(session_id))
    return {'success': True, 'playerId': sid, 'players': players}


def handle_start_session(data):
    session_id = (data or {}).get('sessionId')
    if not session_id:
        return _bad_request('sessionId is required')
    try:
        _engine().start(session_id, _get_sid())
    except TriviaError as exc:
        return exc.to_dict()
    return {'success': True}


def handle_submit_answer(data):
    data = data or {}
    session_id = data.get('sessionId')
    answer_index = data.get('answerIndex')
    if not session_id:
        return _bad_request('sessionId is required')
    if isinstance(answer_index, bool) or not isinstance(answer_index, int):
        return _bad_request('answerIndex must be an integer')
    try:
        result = _engine().submit_answer(session_id, _get_sid(), answer_index)
    except TriviaError as exc:
        return exc.to_dict()
    return result.to_dict()


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'.

    Intent handlers return their result, which Socket.IO delivers to the
    caller as the acknowledgement payload.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('disconnect', handle_disconnect, namespace='/ws')
    socketio.on_event('create-session', handle_create_session, namespace='/ws')
    socketio.on_event('join-session', handle_join_session, namespace='/ws')
    socketio.on_event('start-session', handle_start_session, namespace='/ws')
    socketio.on_event('submit-answer', handle_submit_answer, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')
