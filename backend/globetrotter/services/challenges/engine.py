import logging
import secrets
from typing import List, Optional

from .errors import ExhaustedError, NotFoundError, StoreError
from .evaluator import is_correct
from .questions import QuestionGenerator
from .state import AnswerResult, ChallengeState, ParticipantRole, QuestionPayload


logger = logging.getLogger(__name__)

CHALLENGE_COMPLETE = 'Challenge complete! No more questions available.'
NO_QUESTIONS = 'No questions available for this challenge'
NO_DESTINATIONS = 'No destinations available'


class ChallengeEngine:
    """Solo and two-player challenge play over injected collaborators.

    ``store`` persists questions and challenge sessions, ``catalog`` samples
    reference content, ``accounts`` answers whether a player exists and
    provisions placeholder accounts. ``hash_password`` turns a plaintext
    password into the stored hash for those placeholder accounts.
    """

    def __init__(self, store, catalog, accounts, hash_password, generator=None,
                 question_count=5, correct_points=3, clue_penalty=1):
        self.store = store
        self.catalog = catalog
        self.accounts = accounts
        self.hash_password = hash_password
        self.generator = generator or QuestionGenerator(catalog, store)
        self.question_count = question_count
        self.correct_points = correct_points
        self.clue_penalty = clue_penalty

    # ---- Accounts ----

    def ensure_account_exists(self, username: str) -> bool:
        """Provision a placeholder account for an unknown player.

        Returns True when an account was created. The generated password is
        never surfaced.
        """
        if self.accounts.exists(username):
            return False
        logger.info(f"[account-provision] user={username} not found, creating")
        self.accounts.create(username, self.hash_password(secrets.token_urlsafe(10)))
        return True

    # ---- Sessions ----

    def create_session(self, username: str) -> ChallengeState:
        self.ensure_account_exists(username)
        state = self.store.create_challenge(username)
        logger.info(f"[challenge-create] challenge={state.id} inviter={username}")
        return state

    def _load(self, session_id: str) -> ChallengeState:
        state = self.store.get_challenge(session_id)
        if state is None:
            logger.info(f"[challenge-missing] challenge={session_id}")
            raise NotFoundError('Challenge not found')
        return state

    def get_session(self, session_id: str) -> ChallengeState:
        """Snapshot of the session; an ended session is reactivated so it can be rejoined."""
        state = self._load(session_id)
        if not state.is_active:
            try:
                self.store.reactivate(session_id)
            except StoreError:
                logger.warning(f"[challenge-reactivate-failed] challenge={session_id}")
            else:
                state.is_active = True
                logger.info(f"[challenge-reactivate] challenge={session_id}")
        return state

    def end_session(self, session_id: str, score: int, correct_answers: int, incorrect_answers: int,
                    clues_revealed: int, question_ids: List[str]) -> None:
        """Overwrite the tallies with the client's final values and mark the session ended."""
        current = self._load(session_id)
        server = (current.score, current.correct_answers, current.incorrect_answers, current.clues_revealed)
        client = (score, correct_answers, incorrect_answers, clues_revealed)
        if server != client:
            logger.warning(
                f"[challenge-end-mismatch] challenge={session_id} server={server} client={client}"
            )
        if not self.store.finalize(session_id, score, correct_answers, incorrect_answers,
                                   clues_revealed, question_ids):
            raise NotFoundError('Challenge not found')
        logger.info(f"[challenge-end] challenge={session_id} score={score}")

    # ---- Questions ----

    def next_question(self, session_id: Optional[str] = None, username: Optional[str] = None) -> QuestionPayload:
        """Serve a question: a fresh random one in solo play, else the challenge queue head.

        Raises ExhaustedError when there is nothing to play.
        """
        if session_id is None:
            return self._solo_question()

        state = self._load(session_id)
        role = state.role_of(username)

        if not state.question_ids:
            if role is ParticipantRole.GUEST:
                raise ExhaustedError(CHALLENGE_COMPLETE)
            state = self._populate(state)

        if not state.question_ids:
            logger.info(f"[challenge-empty] challenge={session_id}")
            raise ExhaustedError(NO_QUESTIONS)

        # Peek only; the id leaves the queue when it is answered
        question_id = state.question_ids[0]
        destination_id = self.store.question_destination(question_id)
        if destination_id is None:
            logger.error(f"[challenge-question-missing] challenge={session_id} question={question_id}")
            raise NotFoundError('Error retrieving question')
        return self.generator.build_payload(question_id, destination_id)

    def _solo_question(self) -> QuestionPayload:
        destination_ids = self.catalog.random_destinations(1)
        if not destination_ids:
            raise ExhaustedError(NO_DESTINATIONS)
        return self.generator.generate(destination_ids[0])

    def _populate(self, state: ChallengeState) -> ChallengeState:
        destination_ids = self.catalog.random_destinations(self.question_count)
        if not destination_ids:
            return state
        logger.info(
            f"[challenge-populate] challenge={state.id} inviter={state.inviter} count={len(destination_ids)}"
        )
        if not self.store.populate_queue(state.id, destination_ids):
            logger.info(f"[challenge-populate-skip] challenge={state.id} already generated")
        return self._load(state.id)

    # ---- Answers and clues ----

    def submit_answer(self, question_id: str, city: str, session_id: Optional[str] = None) -> AnswerResult:
        destination_id = self.store.question_destination(question_id)
        if destination_id is None:
            logger.info(f"[answer-question-missing] question={question_id}")
            raise NotFoundError('Question not found')

        canonical = self.catalog.city(destination_id)
        if canonical is None:
            logger.error(f"[answer-destination-missing] destination={destination_id}")
            raise NotFoundError('Error retrieving destination')

        correct = is_correct(city, canonical)

        fun_fact = self.catalog.random_fun_fact(destination_id)
        if fun_fact is None:
            logger.error(f"[answer-fun-fact-missing] destination={destination_id}")
            raise NotFoundError('Error retrieving fun fact')

        if session_id is not None:
            state = self.store.record_answer(session_id, question_id, correct, self.correct_points)
            logger.info(
                f"[answer] challenge={session_id} question={question_id} correct={correct} "
                f"score={state.score} remaining={len(state.question_ids)}"
            )
        return AnswerResult(correct=correct, fun_fact=fun_fact)

    def reveal_clue(self, session_id: Optional[str] = None) -> None:
        if session_id is None:
            return
        if not self.store.reveal_clue(session_id, self.clue_penalty):
            raise NotFoundError('Challenge not found')
        logger.info(f"[clue-reveal] challenge={session_id}")
