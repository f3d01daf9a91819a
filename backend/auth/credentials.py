# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Credential store – user records and the password check behind login.

Security notes
--------------
* ``authenticate`` fails with the same public message whether the email is
  unknown or the password is wrong, and it runs one hash verification in
  both cases so response time does not reveal which one it was.
* Email uniqueness is enforced by the repository's atomic ``put``; the
  pre-check in ``register`` only saves the cost of hashing for the common
  duplicate case.
"""

from datetime import datetime, timezone

from core.errors import (
    BadPasswordError,
    DuplicateEmailError,
    DuplicateKeyError,
    UserNotFound,
    UserNotFoundError,
)
from core.logger import logger
from core.policy import ADMIN, USER, VALID_ROLES
from core.security import PasswordHasher
from models.user import User
from repositories.base import Repository


class CredentialStore:
    def __init__(self, users: Repository, hasher: PasswordHasher):
        self._users = users
        self._hasher = hasher
        # Verified against when the email is unknown
        self._dummy_hash = hasher.hash("not-a-real-password")

    def register(self, name: str, email: str, password: str, role: str = USER) -> User:
        """Create a user.  Raises DuplicateEmailError if the email is taken."""
        if role not in VALID_ROLES:
            raise ValueError(f"Invalid role: {role!r}")
        if self._users.find_by("email", email) is not None:
            raise DuplicateEmailError()

        user = User(
            name=name,
            email=email,
            password_hash=self._hasher.hash(password),
            role=role,
            created_at=datetime.now(timezone.utc),
        )
        try:
            user = self._users.put(user)
        except DuplicateKeyError as exc:
            raise DuplicateEmailError() from exc

        logger.info("User registered: id=%s email=%s role=%s", user.id, user.email, user.role)
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self._users.find_by("email", email)
        if user is None:
            self._hasher.verify(password, self._dummy_hash)
            raise UserNotFoundError()
        if not self._hasher.verify(password, user.password_hash):
            raise BadPasswordError()
        return user

    def get(self, user_id: int) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFound()
        return user

    def list(self) -> list[User]:
        return self._users.list()

    def assign_role(self, user_id: int, role: str) -> User:
        """
        Internal role change.  Tokens already issued keep the old role until
        they expire.
        """
        if role not in VALID_ROLES:
            raise ValueError(f"Invalid role: {role!r}")
        current = self.get(user_id)
        updated = User(
            id=current.id,
            name=current.name,
            email=current.email,
            password_hash=current.password_hash,
            role=role,
            created_at=current.created_at,
        )
        updated = self._users.put(updated)
        logger.info("Role of user %s set to %s", user_id, role)
        return updated

    def seed_admin(self, email: str, password: str, name: str) -> User:
        """Create the first admin unless a user with *email* already exists."""
        existing = self._users.find_by("email", email)
        if existing is not None:
            logger.info("Admin '%s' already exists – skipping seed", email)
            return existing
        try:
            return self.register(name=name, email=email, password=password, role=ADMIN)
        except DuplicateEmailError:
            return self._users.find_by("email", email)
