"""Local user directory for nexushub.

Users live in a single un-scoped "users" collection (no user id exists
before registration). Passwords are compared in plaintext; this shim
simulates an account system and is not a secure one.
"""

import logging

from nexushub.models.user import User, UserRecord
from nexushub.storage.collection import Collection
from nexushub.storage.errors import DuplicateUserError, InvalidCredentialsError

logger = logging.getLogger(__name__)


class LocalAuthenticator:
    """Register and log in users against the local users collection."""

    def __init__(self, users: Collection[UserRecord]):
        self.users = users

    async def register(self, email: str, password: str, name: str) -> User:
        """Create a user.

        Raises:
            DuplicateUserError: a user with this email already exists
        """
        existing = await self.users.get_all(None)
        if any(record.email == email for record in existing):
            logger.info("Registration rejected: email already registered")
            raise DuplicateUserError(email)

        stored = await self.users.add(None, UserRecord(email=email, password=password, name=name))
        logger.info(f"Registered user {stored.id}")
        return stored.to_public()

    async def login(self, email: str, password: str) -> User:
        """Return the user whose email and password both match exactly.

        Raises:
            InvalidCredentialsError: no such user, or wrong password
        """
        records = await self.users.get_all(None)
        for record in records:
            if record.email == email and record.password == password:
                logger.debug(f"User {record.id} logged in")
                return record.to_public()
        logger.info("Login rejected: invalid credentials")
        raise InvalidCredentialsError()
