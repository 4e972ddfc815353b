"""SQLAlchemy-backed persistence for questions and challenge sessions.

Every method either commits its whole change or rolls back and raises
StoreError. The read-modify-write paths take a row lock (or a conditional
UPDATE) so concurrent requests against one challenge cannot lose updates.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import case, update

from globetrotter.models import Challenge, Question, new_id, utcnow
from .errors import NotFoundError, store_call
from .state import ChallengeState


logger = logging.getLogger(__name__)


def _to_state(challenge: Challenge) -> ChallengeState:
    return ChallengeState(
        id=challenge.id,
        inviter=challenge.inviter,
        score=challenge.score or 0,
        correct_answers=challenge.correct_answers or 0,
        incorrect_answers=challenge.incorrect_answers or 0,
        clues_revealed=challenge.clues_revealed or 0,
        is_active=bool(challenge.is_active),
        question_ids=challenge.queue,
        created_at=challenge.created_at,
        ended_at=challenge.ended_at,
    )


class ChallengeStore:
    def __init__(self, session):
        self.session = session

    def _locked(self, challenge_id: str) -> Optional[Challenge]:
        return (
            self.session.query(Challenge)
            .filter(Challenge.id == challenge_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    # ---- Questions ----

    @store_call('Error creating question')
    def create_question(self, destination_id: str) -> str:
        question = Question(id=new_id(), destination_id=destination_id)
        self.session.add(question)
        self.session.commit()
        return question.id

    @store_call('Error retrieving question')
    def question_destination(self, question_id: str) -> Optional[str]:
        row = self.session.query(Question.destination_id).filter(Question.id == question_id).first()
        return row.destination_id if row else None

    # ---- Challenges ----

    @store_call('Error creating challenge')
    def create_challenge(self, inviter: str) -> ChallengeState:
        challenge = Challenge(id=new_id(), inviter=inviter, is_active=True, questions_generated=False)
        challenge.queue = []
        self.session.add(challenge)
        self.session.commit()
        return _to_state(challenge)

    @store_call('Error retrieving challenge')
    def get_challenge(self, challenge_id: str) -> Optional[ChallengeState]:
        challenge = (
            self.session.query(Challenge)
            .filter(Challenge.id == challenge_id)
            .populate_existing()
            .first()
        )
        return _to_state(challenge) if challenge else None

    @store_call('Error updating challenge')
    def populate_queue(self, challenge_id: str, destination_ids: Iterable[str]) -> bool:
        """Create one question per destination and append them to the queue.

        Runs only if the challenge has never had its queue generated; the
        claim and the inserts share one transaction. Returns False when another
        request already claimed generation.
        """
        claimed = self.session.execute(
            update(Challenge)
            .where(Challenge.id == challenge_id, Challenge.questions_generated.is_(False))
            .values(questions_generated=True)
            .execution_options(synchronize_session=False)
        ).rowcount
        if not claimed:
            self.session.rollback()
            return False

        question_ids: List[str] = []
        for destination_id in destination_ids:
            question = Question(id=new_id(), destination_id=destination_id)
            self.session.add(question)
            question_ids.append(question.id)

        challenge = self._locked(challenge_id)
        challenge.queue = challenge.queue + question_ids
        self.session.commit()
        return True

    @store_call('Error updating challenge')
    def record_answer(self, challenge_id: str, question_id: str, correct: bool, points: int) -> ChallengeState:
        challenge = self._locked(challenge_id)
        if challenge is None:
            self.session.rollback()
            raise NotFoundError('Challenge not found')

        if correct:
            challenge.score = (challenge.score or 0) + points
            challenge.correct_answers = (challenge.correct_answers or 0) + 1
        else:
            challenge.incorrect_answers = (challenge.incorrect_answers or 0) + 1
        # Remove by value: duplicate or out-of-order submissions leave the rest intact
        challenge.queue = [qid for qid in challenge.queue if qid != question_id]

        self.session.commit()
        return _to_state(challenge)

    @store_call('Error updating challenge')
    def reveal_clue(self, challenge_id: str, penalty: int) -> bool:
        result = self.session.execute(
            update(Challenge)
            .where(Challenge.id == challenge_id)
            .values(
                clues_revealed=Challenge.clues_revealed + 1,
                score=case((Challenge.score > penalty, Challenge.score - penalty), else_=0),
            )
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount > 0

    @store_call('Error updating challenge')
    def finalize(self, challenge_id: str, score: int, correct_answers: int, incorrect_answers: int,
                 clues_revealed: int, question_ids: List[str]) -> bool:
        result = self.session.execute(
            update(Challenge)
            .where(Challenge.id == challenge_id)
            .values(
                is_active=False,
                ended_at=utcnow(),
                score=score,
                correct_answers=correct_answers,
                incorrect_answers=incorrect_answers,
                clues_revealed=clues_revealed,
                question_ids=Challenge.serialize_queue(question_ids),
            )
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount > 0

    @store_call('Error reactivating challenge')
    def reactivate(self, challenge_id: str) -> None:
        self.session.execute(
            update(Challenge)
            .where(Challenge.id == challenge_id)
            .values(is_active=True)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
