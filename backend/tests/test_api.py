import json

from globetrotter import db
from globetrotter.models import Destination, Question, User


def _city(question_id):
    question = db.session.get(Question, question_id)
    return db.session.get(Destination, question.destination_id).city


def _create(client, username='alice'):
    res = client.post('/api/challenges/create', json={'username': username})
    assert res.status_code == 201
    return res.get_json()['challenge_id']


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200


def test_register_and_login(client):
    res = client.post('/api/users/register', json={'username': 'alice', 'password': 'secret'})
    assert res.status_code == 201
    assert res.get_json()['auth_token']

    dup = client.post('/api/users/register', json={'username': 'alice', 'password': 'other'})
    assert dup.status_code == 409

    bad = client.post('/api/users/login', json={'username': 'alice', 'password': 'wrong'})
    assert bad.status_code == 401

    res = client.post('/api/users/login', json={'username': 'alice', 'password': 'secret'})
    assert res.status_code == 200
    assert res.get_json()['username'] == 'alice'
    assert res.get_json()['auth_token']


def test_auth_token_header_identifies_user(client):
    token = client.post('/api/users/register', json={'username': 'alice', 'password': 'pw'}).get_json()['auth_token']
    me = client.get('/api/users/me', headers={'Authorization': token})
    assert me.status_code == 200
    assert me.get_json()['username'] == 'alice'


def test_me_requires_auth(client):
    assert client.get('/api/users/me').status_code == 401


def test_register_requires_fields(client):
    res = client.post('/api/users/register', json={'username': 'alice'})
    assert res.status_code == 400


def test_solo_question_and_answer(client, seeded):
    res = client.get('/api/game/question')
    assert res.status_code == 200
    payload = res.get_json()
    assert set(payload) == {'question_id', 'clues', 'choices', 'trivia'}
    assert len(payload['clues']) == 2
    assert len(payload['choices']) == 6

    city = _city(payload['question_id'])
    assert city in payload['choices']
    res = client.post('/api/game/answer', json={'question_id': payload['question_id'], 'city': city.upper()})
    assert res.status_code == 200
    body = res.get_json()
    assert body['correct'] is True
    assert body['fun_fact'].startswith(city)


def test_solo_question_with_empty_catalog(client):
    res = client.get('/api/game/question')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_create_challenge_provisions_unknown_user(client):
    challenge_id = _create(client, 'newcomer')
    assert User.query.filter_by(username='newcomer').first() is not None

    state = client.get(f'/api/challenges/{challenge_id}').get_json()
    assert state['inviter'] == 'newcomer'
    assert state['is_active'] is True
    assert state['question_ids'] == []
    assert 'ended_at' not in state


def test_create_challenge_requires_username(client):
    assert client.post('/api/challenges/create', json={}).status_code == 400


def test_two_player_challenge_flow(client, seeded):
    challenge_id = _create(client, 'alice')

    # Guest before the inviter has played: nothing to do yet, no generation
    early = client.get('/api/game/question', query_string={'challenge_id': challenge_id, 'username': 'bob'})
    assert early.status_code == 200
    assert early.get_json()['message'].startswith('Challenge complete')
    assert Question.query.count() == 0

    first = client.get('/api/game/question', query_string={'challenge_id': challenge_id, 'username': 'alice'}).get_json()
    state = client.get(f'/api/challenges/{challenge_id}').get_json()
    queue = state['question_ids']
    assert len(queue) == 5
    assert first['question_id'] == queue[0]

    res = client.post('/api/game/answer', json={
        'question_id': first['question_id'],
        'city': _city(first['question_id']).lower(),
        'challenge_id': challenge_id,
        'username': 'alice',
    })
    assert res.get_json()['correct'] is True

    state = client.get(f'/api/challenges/{challenge_id}').get_json()
    assert state['score'] == 3
    assert state['correct_answers'] == 1
    assert len(state['question_ids']) == 4
    assert queue[0] not in state['question_ids']

    bobs = client.get('/api/game/question', query_string={'challenge_id': challenge_id, 'username': 'bob'}).get_json()
    assert bobs['question_id'] == queue[1]
    assert Question.query.count() == 5


def test_question_uses_logged_in_user_when_username_missing(client, seeded):
    client.post('/api/users/register', json={'username': 'alice', 'password': 'pw'})
    token = client.post('/api/users/login', json={'username': 'alice', 'password': 'pw'}).get_json()['auth_token']
    challenge_id = _create(client, 'alice')

    res = client.get('/api/game/question', query_string={'challenge_id': challenge_id},
                     headers={'Authorization': token})
    assert res.status_code == 200
    assert 'question_id' in res.get_json()


def test_challenge_mode_requires_username(client, seeded):
    challenge_id = _create(client)
    res = client.get('/api/game/question', query_string={'challenge_id': challenge_id})
    assert res.status_code == 400


def test_invalid_and_unknown_challenge_ids(client):
    assert client.get('/api/challenges/not-a-uuid').status_code == 400
    res = client.get('/api/challenges/00000000-0000-0000-0000-000000000000')
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Challenge not found'


def test_answer_validation(client, seeded):
    assert client.post('/api/game/answer', json={'city': 'Paris'}).status_code == 400
    res = client.post('/api/game/answer', json={
        'question_id': '00000000-0000-0000-0000-000000000000', 'city': 'Paris'})
    assert res.status_code == 404


def test_reveal_clue_penalty(client, seeded):
    challenge_id = _create(client)
    for _ in range(2):
        res = client.post('/api/game/reveal-clue', json={'challenge_id': challenge_id, 'username': 'alice'})
        assert res.status_code == 200
    state = client.get(f'/api/challenges/{challenge_id}').get_json()
    assert state['score'] == 0
    assert state['clues_revealed'] == 2

    assert client.post('/api/game/reveal-clue', json={'username': 'alice'}).status_code == 200


def test_end_then_get_reactivates(client, seeded):
    challenge_id = _create(client)
    res = client.post('/api/challenges/end', json={
        'challenge_id': challenge_id,
        'username': 'alice',
        'score': 6,
        'correct_answers': 2,
        'incorrect_answers': 3,
        'clues_revealed': 0,
        'question_ids': [],
    })
    assert res.status_code == 200

    state = client.get(f'/api/challenges/{challenge_id}').get_json()
    assert state['is_active'] is True
    assert state['ended_at']
    assert state['score'] == 6
    assert state['incorrect_answers'] == 3


def test_end_rejects_bad_tallies(client):
    challenge_id = _create(client)
    res = client.post('/api/challenges/end', json={'challenge_id': challenge_id, 'score': -2})
    assert res.status_code == 400
    res = client.post('/api/challenges/end', json={'challenge_id': challenge_id, 'question_ids': ['nope']})
    assert res.status_code == 400


def test_import_destinations_command(runner, tmp_path):
    dataset = tmp_path / 'dataset.json'
    dataset.write_text(json.dumps([
        {'city': 'Rome', 'country': 'Italy', 'clues': ['c1', 'c2'], 'fun_fact': ['f1'], 'trivia': ['t1']},
        {'city': '', 'country': 'Nowhere'},
    ]))
    result = runner.invoke(args=['import-destinations', str(dataset)])
    assert 'Imported 1 destinations.' in result.output
    rome = Destination.query.filter_by(city='Rome').one()
    assert rome.clues.count() == 2


def test_end_drops_duplicate_queue_ids(client, seeded):
    challenge_id = _create(client)
    client.get('/api/game/question', query_string={'challenge_id': challenge_id, 'username': 'alice'})
    queue = client.get(f'/api/challenges/{challenge_id}').get_json()['question_ids']
    q0, q1 = queue[0], queue[1]

    res = client.post('/api/challenges/end', json={
        'challenge_id': challenge_id,
        'question_ids': [q0, q0, q1],
    })
    assert res.status_code == 200
    state = client.get(f'/api/challenges/{challenge_id}').get_json()
    assert state['question_ids'] == [q0, q1]

    client.post('/api/game/answer', json={
        'question_id': q0,
        'city': _city(q0),
        'challenge_id': challenge_id,
    })
    state = client.get(f'/api/challenges/{challenge_id}').get_json()
    assert state['question_ids'] == [q1]
