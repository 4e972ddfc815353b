"""Error taxonomy for the question and challenge services.

Routes translate these into JSON responses; see ``globetrotter.api.errors``.
"""

import functools
import logging

from sqlalchemy.exc import SQLAlchemyError


logger = logging.getLogger(__name__)


class ChallengeError(Exception):
    """Base class. ``message`` is safe to show to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ChallengeError):
    status_code = 400


class NotFoundError(ChallengeError):
    status_code = 404


class StoreError(ChallengeError):
    status_code = 500


class ExhaustedError(ChallengeError):
    """Nothing left to play. Reported as a successful, empty result."""

    status_code = 200


def store_call(message: str):
    """Wrap a store method so driver errors roll back and surface as StoreError.

    The wrapped method's instance must expose the SQLAlchemy session as
    ``self.session``.
    """
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(self, *args, **kwargs):
            try:
                return fn(self, *args, **kwargs)
            except SQLAlchemyError as exc:
                self.session.rollback()
                logger.error(f"[store-error] op={fn.__name__} args={args!r} error={exc}")
                raise StoreError(message) from exc
        return wrapper
    return decorator
