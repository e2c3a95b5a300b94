PASSWORD = 'letmein'


def _new_session(flask_app, players=('A', 'B')):
    engine = flask_app.extensions['trivia']
    session = engine.create_session('host-sid', PASSWORD)
    for pid in players:
        engine.join(session.id, pid, f'SP{pid}')
    return engine, session


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['sessions'] == 0


def test_state_in_lobby(flask_app, client):
    _, session = _new_session(flask_app)
    res = client.get(f'/api/sessions/{session.id}/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['id'] == session.id
    assert state['state'] == 'LOBBY'
    assert state['question_number'] is None
    assert state['total_questions'] == 10
    assert state['players'] == [{'id': 'A', 'address': 'SPA'}, {'id': 'B', 'address': 'SPB'}]
    assert state['durations'] == {'question': 10, 'start_delay': 0}


def test_state_during_game_hides_answers(flask_app, client):
    engine, session = _new_session(flask_app)
    engine.start(session.id, 'host-sid')
    engine.advance(session.id)
    state = client.get(f'/api/sessions/{session.id}/state').get_json()
    assert state['state'] == 'QUESTION_ACTIVE'
    assert state['question_number'] == 2
    assert 'players' in state
    assert 'correct' not in client.get(f'/api/sessions/{session.id}/state').get_data(as_text=True)


def test_state_unknown_session(client):
    res = client.get('/api/sessions/missing1/state')
    assert res.status_code == 404
    assert res.get_json()['code'] == 'session_not_found'


def test_leaderboard(flask_app, client):
    engine, session = _new_session(flask_app)
    engine.start(session.id, 'host-sid')
    engine.submit_answer(session.id, 'B', session.current_question.correct_answer)
    res = client.get(f'/api/sessions/{session.id}/leaderboard')
    assert res.status_code == 200
    board = res.get_json()['leaderboard']
    assert [row['address'] for row in board] == ['SPB', 'SPA']
    assert [row['rank'] for row in board] == [1, 2]


def test_destroy_requires_password(flask_app, client):
    engine, session = _new_session(flask_app)
    res = client.delete(f'/api/sessions/{session.id}', json={'password': 'wrong'})
    assert res.status_code == 401
    assert engine.registry.get_session(session.id) is not None

    res = client.delete(f'/api/sessions/{session.id}', json={'password': PASSWORD})
    assert res.status_code == 200
    assert engine.registry.get_session(session.id) is None

    res = client.delete(f'/api/sessions/{session.id}', json={'password': PASSWORD})
    assert res.status_code == 404


def test_questions_cli(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['questions'])
    assert result.exit_code == 0
    assert '10 questions loaded' in result.output


def test_start_delay_in_testing_still_sends_first_question():
    from conftest import TestConfig
    from trivia import create_app, socketio

    class DelayedConfig(TestConfig):
        GAME_START_DELAY_SEC = 2

    app = create_app(DelayedConfig)
    host = socketio.test_client(app, namespace='/ws')
    try:
        ack = host.emit('create-session', {'password': PASSWORD}, namespace='/ws', callback=True)
        host.emit('start-session', {'sessionId': ack['sessionId']}, namespace='/ws', callback=True)
        names = [pkt['name'] for pkt in host.get_received('/ws')]
        assert 'game-started' in names
        assert 'question-started' in names
    finally:
        host.disconnect(namespace='/ws')
