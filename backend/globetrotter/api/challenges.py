from flask import Blueprint, jsonify, request

from globetrotter.services.challenges import build_engine
from globetrotter.services.challenges.errors import ValidationError
from .errors import parse_id


challenges = Blueprint('challenges', __name__)

TALLY_FIELDS = ('score', 'correct_answers', 'incorrect_answers', 'clues_revealed')


@challenges.route('/create', methods=['POST'])
def create_challenge():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    if not username or not isinstance(username, str):
        raise ValidationError('Username is required')

    state = build_engine().create_session(username)
    return jsonify({'challenge_id': state.id, 'inviter': state.inviter}), 201


@challenges.route('/<string:challenge_id>', methods=['GET'])
def get_challenge(challenge_id):
    state = build_engine().get_session(parse_id(challenge_id, 'challenge'))
    return jsonify(state.to_dict())


@challenges.route('/end', methods=['POST'])
def end_challenge():
    data = request.get_json(silent=True) or {}
    challenge_id = parse_id(data.get('challenge_id'), 'challenge')
    if not challenge_id:
        raise ValidationError('challenge_id is required')

    tallies = {}
    for name in TALLY_FIELDS:
        value = data.get(name, 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f'{name} must be a non-negative integer')
        tallies[name] = value

    raw_ids = data.get('question_ids') or []
    if not isinstance(raw_ids, list):
        raise ValidationError('question_ids must be a list')
    question_ids = [parse_id(qid, 'question') for qid in raw_ids]
    if None in question_ids:
        raise ValidationError('Invalid question ID')

    build_engine().end_session(challenge_id, question_ids=question_ids, **tallies)
    return jsonify({'message': 'Challenge ended successfully'})
