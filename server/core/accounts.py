# server/core/accounts.py

import logging
from typing import Tuple
from sqlalchemy.exc import IntegrityError
from core.credentials import Credential, CredentialStore
from core.errors import AuthenticationFailure, UsernameTaken, ValidationError
from core.identity import SessionIdentity, SessionStore
from core.store import RecordStore
from models.user import User, USERNAME_MAX_LENGTH


logger = logging.getLogger(__name__)


class Accounts:
    """
    Registration, login and logout.
    Each flow runs credential work first, then touches the user record,
    then opens or closes the session.
    """

    def __init__(self, store: RecordStore, credentials: CredentialStore):
        self.store = store
        self.credentials = credentials
        self.identity = SessionIdentity(store)
        self.sessions = SessionStore(store)

    def register(self, username: str, password: str) -> Tuple[User, str]:
        username = (username or "").strip()
        if not username:
            raise ValidationError("Username cannot be empty")
        if len(username) > USERNAME_MAX_LENGTH:
            raise ValidationError(f"Username is limited to {USERNAME_MAX_LENGTH} characters")
        if not password:
            raise ValidationError("Password cannot be empty")

        if self.store.get_user_by_username(username) is not None:
            raise UsernameTaken()

        credential = self.credentials.derive(password)
        try:
            user = self.store.add_user(username, credential.hash, credential.salt)
        except IntegrityError:
            # lost a race with another registration for the same name
            raise UsernameTaken()

        logger.info("Registered user %s (%s)", user.username, user.id)
        return user, self._open_session(user)

    def login(self, username: str, password: str) -> Tuple[User, str]:
        user = self.store.get_user_by_username((username or "").strip())
        if user is None:
            self.credentials.verify_dummy(password or "")
            logger.warning("Failed login for unknown user")
            raise AuthenticationFailure()

        stored = Credential(hash=user.password_hash, salt=user.salt)
        if not self.credentials.verify(password or "", stored):
            logger.warning("Failed login for user %s", user.id)
            raise AuthenticationFailure()

        logger.info("User %s logged in", user.id)
        return user, self._open_session(user)

    def logout(self, token: str) -> None:
        self.sessions.destroy(token)

    def current_user(self, token: str) -> User:
        """Resolves a session token: AuthenticationFailure once closed, NotFound if the user is gone."""
        identity = self.sessions.get(token)
        if identity is None:
            raise AuthenticationFailure("Session is not active")
        return self.identity.resolve(identity)

    def _open_session(self, user: User) -> str:
        return self.sessions.create(self.identity.serialize(user))
