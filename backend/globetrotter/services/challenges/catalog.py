"""Read-only random sampling over the destination catalog."""

from typing import List, Optional

from sqlalchemy import func

from globetrotter.models import Destination, Clue, FunFact, Trivia
from .errors import store_call


class ContentCatalog:
    def __init__(self, session):
        self.session = session

    @store_call('Error retrieving destinations')
    def random_destinations(self, n: int) -> List[str]:
        rows = (
            self.session.query(Destination.id)
            .order_by(func.random())
            .limit(n)
            .all()
        )
        return [row.id for row in rows]

    @store_call('Error retrieving destination')
    def city(self, destination_id: str) -> Optional[str]:
        row = self.session.query(Destination.city).filter(Destination.id == destination_id).first()
        return row.city if row else None

    @store_call('Error retrieving incorrect destinations')
    def random_cities(self, exclude_destination_id: str, n: int) -> List[str]:
        """Up to ``n`` distinct city names, never the excluded destination's city."""
        excluded = self.city(exclude_destination_id)
        query = self.session.query(Destination.city).filter(Destination.id != exclude_destination_id)
        if excluded is not None:
            query = query.filter(Destination.city != excluded)
        rows = query.group_by(Destination.city).order_by(func.random()).limit(n).all()
        return [row.city for row in rows]

    @store_call('Error retrieving clues')
    def random_clues(self, destination_id: str, n: int) -> List[str]:
        rows = (
            self.session.query(Clue.clue_text)
            .filter(Clue.destination_id == destination_id)
            .order_by(func.random())
            .limit(n)
            .all()
        )
        return [row.clue_text for row in rows]

    @store_call('Error retrieving trivia')
    def random_trivia(self, destination_id: str) -> Optional[str]:
        row = (
            self.session.query(Trivia.trivia_text)
            .filter(Trivia.destination_id == destination_id)
            .order_by(func.random())
            .first()
        )
        return row.trivia_text if row else None

    @store_call('Error retrieving fun fact')
    def random_fun_fact(self, destination_id: str) -> Optional[str]:
        row = (
            self.session.query(FunFact.fact_text)
            .filter(FunFact.destination_id == destination_id)
            .order_by(func.random())
            .first()
        )
        return row.fact_text if row else None
