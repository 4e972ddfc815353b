from typing import Optional

from globetrotter.models import User
from .errors import store_call


class AccountStore:
    """The slice of the user table the challenge engine depends on."""

    def __init__(self, session):
        self.session = session

    @store_call('Database error')
    def exists(self, username: str) -> bool:
        return self.session.query(User.id).filter_by(username=username).first() is not None

    @store_call('Error creating user')
    def create(self, username: str, password_hash: str, token: Optional[str] = None) -> None:
        self.session.add(User(username=username, password_hash=password_hash, auth_token=token))
        self.session.commit()
