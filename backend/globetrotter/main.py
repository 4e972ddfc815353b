import secrets

from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from globetrotter import db
from globetrotter.models import User

main = Blueprint('main', __name__)


def generate_token(nbytes=32):
    return secrets.token_urlsafe(nbytes)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Globetrotter game server!'})


@main.route('/api/users/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    if not data.get('username') or not data.get('password'):
        return jsonify({'error': 'Missing username or password'}), 400

    if User.query.filter_by(username=data['username']).first():
        return jsonify({'error': 'Username already exists'}), 409

    user = User(username=data['username'], auth_token=generate_token())
    user.set_password(data['password'])
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"[register] user={user.username}")

    return jsonify({
        'message': 'User registered successfully',
        'username': user.username,
        'auth_token': user.auth_token,
    }), 201


@main.route('/api/users/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(username=data.get('username')).first()
    if not user or not user.check_password(data.get('password') or ''):
        return jsonify({'error': 'Invalid username or password'}), 401

    # New token on every login
    user.auth_token = generate_token()
    db.session.commit()
    login_user(user, remember=True)
    return jsonify({'username': user.username, 'auth_token': user.auth_token})


@main.route('/api/users/me')
@login_required
def me():
    return jsonify(current_user.to_dict())


@main.route('/api/users/logout', methods=['POST'])
@login_required
def logout():
    current_user.auth_token = None
    db.session.commit()
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})
