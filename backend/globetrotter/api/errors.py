import uuid

from flask import current_app, jsonify

from globetrotter.services.challenges.errors import ChallengeError, ExhaustedError, ValidationError


def parse_id(value, label):
    """Normalize a UUID string, or raise ValidationError naming the field."""
    if value is None or value == '':
        return None
    try:
        return str(uuid.UUID(str(value)))
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(f'Invalid {label} ID')


def register_error_handlers(flask_app):
    @flask_app.errorhandler(ExhaustedError)
    def handle_exhausted(exc):
        return jsonify({'message': exc.message}), 200

    @flask_app.errorhandler(ChallengeError)
    def handle_challenge_error(exc):
        if exc.status_code >= 500:
            current_app.logger.error(f"[request-failed] {type(exc).__name__}: {exc.message}")
        return jsonify({'error': exc.message}), exc.status_code
