"""
Domain models - Value objects shared between services and ports.

PendingRegistration is serialized to JSON with camelCase keys so records
written by one process can be read by any other consumer of the store.
"""

import copy
import json
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class PendingRegistration:
    """
    In-flight registration attempt, keyed by email in the ephemeral store.

    ``is_existing_user`` marks the decoy record written when the email
    already belongs to an account: it has no password hash or nickname
    and can never be promoted to a user.
    """

    email: str
    password_hash: str
    nickname: str
    code_hash: str
    attempts: int
    last_sent_at: int
    created_at: int
    is_existing_user: bool

    def with_failed_attempt(self) -> "PendingRegistration":
        return replace(self, attempts=self.attempts + 1)

    def with_new_code(self, code_hash: str, sent_at: int) -> "PendingRegistration":
        """Replace the code and restart the attempt window."""
        return replace(self, code_hash=code_hash, last_sent_at=sent_at, attempts=0)

    def to_json(self) -> str:
        return json.dumps(
            {
                "email": self.email,
                "passwordHash": self.password_hash,
                "nickname": self.nickname,
                "code": self.code_hash,
                "attempts": self.attempts,
                "lastSentAt": self.last_sent_at,
                "createdAt": self.created_at,
                "isExistingUser": self.is_existing_user,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "PendingRegistration":
        data = json.loads(raw)
        return cls(
            email=data["email"],
            password_hash=data["passwordHash"],
            nickname=data["nickname"],
            code_hash=data["code"],
            attempts=int(data["attempts"]),
            last_sent_at=int(data["lastSentAt"]),
            created_at=int(data["createdAt"]),
            is_existing_user=bool(data["isExistingUser"]),
        )


@dataclass(frozen=True)
class User:
    """Durable account record."""

    id: int
    email: str
    nickname: str
    password_hash: str | None
    created_at: datetime
    updated_at: datetime
    twitter_id: str | None = None


@dataclass(frozen=True)
class SocialIdentity:
    """Identity assertion returned by a third-party provider."""

    provider_id: str
    email: str | None = None
    nickname: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class Session:
    """An authenticated user together with a freshly issued access token."""

    user: User
    access_token: str


@dataclass(frozen=True)
class CodeDispatch:
    """Outcome of a send/resend: where the code went and how long it lives."""

    email: str
    expires_in: int


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    jti: str
    expires_at: int


_DEFAULT_SETTINGS: dict[str, Any] = {
    "export": {
        "lastExportedAt": None,
    },
    "notification": {
        "reminder": {
            "enabled": False,
            "timing": {
                "type": "daily",
                "time": "09:00",
                "dayOfWeek": None,
                "dayOfMonth": None,
            },
            "targetEvents": "week",
        },
    },
    "misc": {
        "showTutorial": True,
    },
}


def default_user_settings() -> dict[str, Any]:
    """Settings document stored alongside every newly created user."""
    return copy.deepcopy(_DEFAULT_SETTINGS)
