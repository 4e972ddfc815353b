import os
import sys
import pytest

# Ensure the backend root (containing the `globetrotter` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from globetrotter import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Keep bcrypt fast in tests
    BCRYPT_LOG_ROUNDS = 4
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'
    CHALLENGE_QUESTION_COUNT = 5
    CHOICE_COUNT = 6
    CLUES_PER_QUESTION = 2
    CORRECT_ANSWER_POINTS = 3
    CLUE_PENALTY = 1
    STORE_STATEMENT_TIMEOUT_MS = 0
    DATASET_PATH = 'does-not-exist.json'


DATASET = [
    {
        'city': city,
        'country': country,
        'clues': [f'{city} clue {i}' for i in range(1, 4)],
        'fun_fact': [f'{city} fun fact {i}' for i in range(1, 3)],
        'trivia': [f'{city} trivia {i}' for i in range(1, 3)],
    }
    for city, country in [
        ('Paris', 'France'),
        ('Tokyo', 'Japan'),
        ('Cairo', 'Egypt'),
        ('Lima', 'Peru'),
        ('Oslo', 'Norway'),
        ('Nairobi', 'Kenya'),
        ('Sydney', 'Australia'),
        ('Toronto', 'Canada'),
    ]
]


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import globetrotter.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def runner(flask_app):
    return flask_app.test_cli_runner()


@pytest.fixture()
def seeded(flask_app):
    from globetrotter.services.challenges.importer import import_records
    assert import_records(DATASET) == len(DATASET)
    return DATASET
