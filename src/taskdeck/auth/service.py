"""Simulated credential store.

Users and the single active session live in key-value storage:

    task_manager_users -> [{id, email, name, password, avatar?}, ...]
    task_manager_token -> {token, user: {id, email, name, avatar?}, expiresAt}

Only one session is kept at a time; logging in replaces it. Passwords are
compared as plaintext and tokens are not cryptographically random. This
mirrors the browser build and is not meant to protect anything.
"""

import asyncio
import base64
import random
from urllib.parse import quote

from taskdeck.auth.models import AuthToken, User, UserRecord
from taskdeck.clock import Clock, timestamp_id, to_epoch_ms, utc_now
from taskdeck.config import Settings, get_settings
from taskdeck.constants import (
    AVATAR_URL_TEMPLATE,
    DEMO_USER,
    MS_PER_HOUR,
    TOKEN_KEY,
    USERS_KEY,
)
from taskdeck.errors import DuplicateUserError, InvalidCredentialsError
from taskdeck.logging import Loggers
from taskdeck.storage import KeyValueStorage, read_json, read_records, write_json

logger = Loggers.auth()


def avatar_url(seed: str) -> str:
    """Placeholder avatar URL derived from a display name."""
    return AVATAR_URL_TEMPLATE.format(seed=quote(seed))


class AuthService:
    """Registers users, checks credentials and tracks the current session.

    Example:
        >>> auth = AuthService(storage)
        >>> session = await auth.register("ada@example.com", "s3cret", "Ada")
        >>> auth.get_current_user().name
        'Ada'
        >>> auth.logout()
        >>> auth.is_authenticated()
        False
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the credential store.

        Args:
            storage: Backend holding the users and session keys.
            settings: Session TTL, latency and demo seeding options. Defaults to get_settings().
            clock: Source of the current time, injectable for tests.
        """
        settings = settings or get_settings()
        self._storage = storage
        self._clock = clock or utc_now
        self._ttl_ms = settings.session_ttl_hours * MS_PER_HOUR
        self._latency = settings.simulated_latency
        self._seed_demo_user = settings.seed_demo_user

    def _now_ms(self) -> int:
        return to_epoch_ms(self._clock())

    def _load_users(self) -> list[UserRecord]:
        return read_records(self._storage, USERS_KEY, UserRecord.from_dict)

    def _save_users(self, users: list[UserRecord]) -> None:
        write_json(self._storage, USERS_KEY, [u.to_dict() for u in users])

    def _initialize_users(self) -> None:
        if not self._seed_demo_user or self._load_users():
            return
        self._save_users([UserRecord.from_dict(DEMO_USER)])
        logger.info("demo_user_seeded", email=DEMO_USER["email"])

    def _generate_token(self) -> str:
        raw = f"{self._now_ms()}_{random.random()}"
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    async def _simulate_latency(self) -> None:
        if self._latency > 0:
            await asyncio.sleep(self._latency)

    def _issue_session(self, record: UserRecord) -> AuthToken:
        session = AuthToken(
            token=self._generate_token(),
            user=record.to_user(),
            expires_at=self._now_ms() + self._ttl_ms,
        )
        write_json(self._storage, TOKEN_KEY, session.to_dict())
        return session

    async def login(self, email: str, password: str) -> AuthToken:
        """Check credentials and start a new session.

        Args:
            email: Account email (exact, case-sensitive match).
            password: Plaintext password (exact match).

        Returns:
            The persisted session.

        Raises:
            InvalidCredentialsError: If no user matches both email and password.
        """
        await self._simulate_latency()
        return self._login(email, password)

    def _login(self, email: str, password: str) -> AuthToken:
        self._initialize_users()
        for record in self._load_users():
            if record.email == email and record.password == password:
                session = self._issue_session(record)
                logger.info("login_succeeded", user_id=record.id)
                return session

        logger.info("login_failed", email=email)
        raise InvalidCredentialsError("Invalid credentials", details={"email": email})

    async def register(self, email: str, password: str, name: str) -> AuthToken:
        """Create an account and log straight into it.

        Args:
            email: Account email, must not already be registered.
            password: Plaintext password.
            name: Display name, also seeds the avatar URL.

        Returns:
            The session started for the new user.

        Raises:
            DuplicateUserError: If the email is already registered.
        """
        await self._simulate_latency()
        self._initialize_users()
        users = self._load_users()

        if any(u.email == email for u in users):
            logger.info("registration_rejected", email=email, reason="duplicate")
            raise DuplicateUserError("User already exists", details={"email": email})

        record = UserRecord(
            id=timestamp_id(self._now_ms(), {u.id for u in users}),
            email=email,
            name=name,
            password=password,
            avatar=avatar_url(name),
        )
        users.append(record)
        self._save_users(users)
        logger.info("user_registered", user_id=record.id)

        # Auto login after registration
        return self._login(email, password)

    def current_session(self) -> AuthToken | None:
        """Return the active session, purging it first if it has expired."""
        data = read_json(self._storage, TOKEN_KEY, expected=dict)
        if data is None:
            return None

        try:
            session = AuthToken.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("session_unreadable")
            return None

        if session.is_expired(self._now_ms()):
            logger.info("session_expired", user_id=session.user.id)
            self.logout()
            return None
        return session

    def get_current_user(self) -> User | None:
        """User of the active session, or None when logged out or expired."""
        session = self.current_session()
        return session.user if session else None

    def logout(self) -> None:
        """Drop the session unconditionally."""
        self._storage.remove_item(TOKEN_KEY)

    def is_authenticated(self) -> bool:
        return self.get_current_user() is not None

    def update_avatar(self, avatar: str) -> User | None:
        """Change the logged-in user's avatar.

        Updates both the stored account and the session snapshot.

        Returns:
            The updated user, or None if nobody is logged in.
        """
        session = self.current_session()
        if session is None:
            return None

        users = self._load_users()
        for record in users:
            if record.id == session.user.id:
                record.avatar = avatar
        self._save_users(users)

        session.user.avatar = avatar
        write_json(self._storage, TOKEN_KEY, session.to_dict())
        logger.info("avatar_updated", user_id=session.user.id)
        return session.user
