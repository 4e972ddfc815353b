import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from globetrotter import db
from globetrotter.models import Destination, Clue, FunFact, Trivia


logger = logging.getLogger(__name__)


def import_records(records) -> int:
    """Insert destination records and their clues, fun facts and trivia.

    Each record is ``{city, country, clues: [], fun_fact: [], trivia: []}``.
    A record that fails to insert is logged and skipped.
    """
    imported = 0
    for record in records:
        city = (record.get('city') or '').strip()
        country = (record.get('country') or '').strip()
        if not city or not country:
            logger.warning(f"[import-skip] record missing city/country: {record!r}")
            continue
        try:
            destination = Destination(city=city, country=country)
            db.session.add(destination)
            db.session.flush()
            for text in record.get('clues') or []:
                db.session.add(Clue(destination_id=destination.id, clue_text=text))
            for text in record.get('fun_fact') or []:
                db.session.add(FunFact(destination_id=destination.id, fact_text=text))
            for text in record.get('trivia') or []:
                db.session.add(Trivia(destination_id=destination.id, trivia_text=text))
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error(f"[import-error] destination=({city}, {country}) error={exc}")
            continue
        imported += 1
        logger.info(f"[import] destination={destination.id} city={city}")
    return imported


def import_dataset_file(path: str) -> int:
    with open(path, encoding='utf-8') as fh:
        records = json.load(fh)
    return import_records(records)
