import logging
import random

from .errors import NotFoundError
from .state import QuestionPayload


logger = logging.getLogger(__name__)


class QuestionGenerator:
    """Builds multiple-choice payloads for destinations.

    ``catalog`` supplies the random samples, ``store`` persists new Question
    rows. ``rng`` only drives the final shuffle of the choices.
    """

    def __init__(self, catalog, store, clue_count=2, choice_count=6, rng=None):
        self.catalog = catalog
        self.store = store
        self.clue_count = clue_count
        self.choice_count = choice_count
        self.rng = rng or random.Random()

    def generate(self, destination_id: str) -> QuestionPayload:
        """Persist a new Question for the destination and return its payload."""
        question_id = self.store.create_question(destination_id)
        logger.info(f"[question-new] question={question_id} destination={destination_id}")
        return self.build_payload(question_id, destination_id)

    def build_payload(self, question_id: str, destination_id: str) -> QuestionPayload:
        clues = self.catalog.random_clues(destination_id, self.clue_count)

        trivia = self.catalog.random_trivia(destination_id)
        if trivia is None:
            logger.error(f"[question-trivia-missing] destination={destination_id}")
            raise NotFoundError('Error retrieving trivia')

        return QuestionPayload(
            question_id=question_id,
            clues=clues,
            choices=self.build_choices(destination_id),
            trivia=trivia,
        )

    def build_choices(self, destination_id: str):
        correct_city = self.catalog.city(destination_id)
        if correct_city is None:
            logger.error(f"[question-destination-missing] destination={destination_id}")
            raise NotFoundError('Error retrieving destination')

        distractors = self.catalog.random_cities(destination_id, self.choice_count - 1)
        choices = [correct_city] + [c for c in distractors if c != correct_city]
        self.rng.shuffle(choices)
        return choices
