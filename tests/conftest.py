"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock and the in-memory registration store
- In-memory doubles for the user repository and email sender
- Domain services wired with fast bcrypt settings
- A fresh per-client request throttle for every test
"""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

import pytest

from witlt.adapters.session.jwt_issuer import JwtSessionIssuer
from witlt.adapters.store.memory import InMemoryRegistrationStore
from witlt.api.rate_limit import limiter
from witlt.domain.authentication import AuthenticationService
from witlt.domain.models import User
from witlt.domain.registration import RegistrationService
from witlt.domain.social import SocialAuthService

# Lowest cost bcrypt accepts; keeps hashing fast in tests
FAST_BCRYPT_COST = 4

JWT_SECRET = "test-secret"


class FakeClock:
    """Callable clock returning a settable unix timestamp."""

    def __init__(self, now: float = 1_760_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryUserRepository:
    """UserRepository double keeping users and settings documents in dicts."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.settings: dict[int, dict[str, Any]] = {}
        self.fail_on_create = False
        self._next_id = 1

    def exists_by_email(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def get_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def create_user(
        self, email: str, password_hash: str | None, nickname: str, settings: dict[str, Any],
        twitter_id: str | None = None,
    ) -> User:
        if self.fail_on_create:
            raise RuntimeError("database unavailable")
        if self.exists_by_email(email):
            raise RuntimeError(f"duplicate email {email}")
        now = datetime.now(timezone.utc)
        user = User(
            id=self._next_id,
            email=email,
            nickname=nickname,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
            twitter_id=twitter_id,
        )
        self._next_id += 1
        self.users[user.id] = user
        self.settings[user.id] = settings
        return user

    def link_or_create_social_user(
        self, provider: str, provider_id: str, email: str, nickname: str, settings: dict[str, Any]
    ) -> User:
        assert provider == "twitter"
        for user in self.users.values():
            if user.twitter_id == provider_id:
                return user
        existing = self.get_by_email(email)
        if existing is not None:
            linked = replace(existing, twitter_id=provider_id)
            self.users[linked.id] = linked
            return linked
        return self.create_user(email, None, nickname, settings, twitter_id=provider_id)


class RecordingEmailSender:
    """EmailSender double remembering every message it was asked to send."""

    def __init__(self) -> None:
        self.codes: list[tuple[str, str]] = []
        self.notices: list[str] = []
        self.fail = False

    def send_verification_code(self, email: str, code: str) -> None:
        if self.fail:
            raise ConnectionError("Mail API unreachable")
        self.codes.append((email, code))

    def send_existing_account_notice(self, email: str) -> None:
        if self.fail:
            raise ConnectionError("Mail API unreachable")
        self.notices.append(email)

    def last_code(self) -> str:
        return self.codes[-1][1]


@pytest.fixture(autouse=True)
def reset_throttle() -> None:
    limiter.reset()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryRegistrationStore:
    return InMemoryRegistrationStore(clock=clock)


@pytest.fixture
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def issuer() -> JwtSessionIssuer:
    return JwtSessionIssuer(secret_key=JWT_SECRET, ttl_minutes=60)


@pytest.fixture
def registration_service(
    store: InMemoryRegistrationStore,
    users: InMemoryUserRepository,
    sender: RecordingEmailSender,
    issuer: JwtSessionIssuer,
    clock: FakeClock,
) -> RegistrationService:
    return RegistrationService(
        store=store,
        users=users,
        email_sender=sender,
        session_issuer=issuer,
        bcrypt_cost=FAST_BCRYPT_COST,
        clock=clock,
    )


@pytest.fixture
def authentication_service(
    store: InMemoryRegistrationStore,
    users: InMemoryUserRepository,
    issuer: JwtSessionIssuer,
) -> AuthenticationService:
    # Tokens carry wall-clock expiry, so revocation uses the real clock too
    return AuthenticationService(users=users, store=store, session_issuer=issuer)


@pytest.fixture
def social_service(
    store: InMemoryRegistrationStore,
    users: InMemoryUserRepository,
    issuer: JwtSessionIssuer,
) -> SocialAuthService:
    return SocialAuthService(users=users, store=store, session_issuer=issuer)
