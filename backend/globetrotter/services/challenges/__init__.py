"""Question and challenge session services.

Pure(ish) domain logic imported by the HTTP routes. The engine only talks to
its collaborators through the objects handed to it, so tests can swap in
in-memory fakes; ``build_engine`` wires the database-backed ones.
"""

from flask import current_app

from globetrotter import db, bcrypt
from .accounts import AccountStore
from .catalog import ContentCatalog
from .engine import ChallengeEngine
from .questions import QuestionGenerator
from .store import ChallengeStore


def hash_password(password: str) -> str:
    return bcrypt.generate_password_hash(password).decode('utf-8')


def build_engine(session=None) -> ChallengeEngine:
    session = session or db.session
    cfg = current_app.config
    store = ChallengeStore(session)
    catalog = ContentCatalog(session)
    generator = QuestionGenerator(
        catalog,
        store,
        clue_count=int(cfg.get('CLUES_PER_QUESTION', 2)),
        choice_count=int(cfg.get('CHOICE_COUNT', 6)),
    )
    return ChallengeEngine(
        store,
        catalog,
        AccountStore(session),
        hash_password,
        generator=generator,
        question_count=int(cfg.get('CHALLENGE_QUESTION_COUNT', 5)),
        correct_points=int(cfg.get('CORRECT_ANSWER_POINTS', 3)),
        clue_penalty=int(cfg.get('CLUE_PENALTY', 1)),
    )
