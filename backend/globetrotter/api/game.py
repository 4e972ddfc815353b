from flask import Blueprint, jsonify, request, current_app
from flask_login import current_user

from globetrotter.services.challenges import build_engine
from globetrotter.services.challenges.errors import ValidationError
from .errors import parse_id


game = Blueprint('game', __name__)


def _username(data=None):
    name = (data or {}).get('username') if data is not None else request.args.get('username')
    if not name and current_user.is_authenticated:
        name = current_user.username
    return name


@game.route('/question', methods=['GET'])
def get_question():
    challenge_id = parse_id(request.args.get('challenge_id'), 'challenge')
    username = _username()
    if challenge_id and not username:
        raise ValidationError('Username is required for challenge mode')

    payload = build_engine().next_question(challenge_id, username)
    return jsonify(payload.to_dict())


@game.route('/answer', methods=['POST'])
def submit_answer():
    data = request.get_json(silent=True) or {}
    question_id = parse_id(data.get('question_id'), 'question')
    city = data.get('city')
    if not question_id or not isinstance(city, str) or city == '':
        raise ValidationError('question_id and city are required')
    challenge_id = parse_id(data.get('challenge_id'), 'challenge')

    result = build_engine().submit_answer(question_id, city, challenge_id)
    current_app.logger.info(
        f"[answer-route] user={_username(data)} question={question_id} correct={result.correct}"
    )
    return jsonify(result.to_dict())


@game.route('/reveal-clue', methods=['POST'])
def reveal_clue():
    data = request.get_json(silent=True) or {}
    challenge_id = parse_id(data.get('challenge_id'), 'challenge')
    build_engine().reveal_clue(challenge_id)
    return jsonify({'message': 'Clue revealed'})
