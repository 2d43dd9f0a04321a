"""
Registration domain service - verification code workflow.

This module contains the core business logic for email/password sign-up:
a time-limited 6-digit code is mailed to the address, and the account is
only created once the code comes back.

Pending Registration States (per email)
=======================================

- NONE:    No record in the store (never sent, expired, or completed)
- PENDING: Record exists and attempts < max_attempts
- LOCKED:  Record exists and attempts >= max_attempts

Transitions:
    NONE    -> PENDING  (send_code)
    PENDING -> PENDING  (resend_code, failed verify_code)
    PENDING -> LOCKED   (failed verify_code reaching max_attempts)
    LOCKED  -> PENDING  (resend_code resets attempts)
    PENDING -> NONE     (successful verify_code, decoy verify_code, TTL expiry)
    LOCKED  -> NONE     (TTL expiry)

Existing Accounts
=================

Sending a code to an address that already has an account writes the same
kind of record, flagged ``is_existing_user``, and mails an "account exists"
notice instead of a code. The record can never be promoted, so the API
behaves the same for taken and free addresses.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from .codes import generate_code, hash_secret, verify_secret
from .exceptions import (
    InvalidVerificationCode,
    RateLimitExceeded,
    ResendCooldown,
    TooManyAttempts,
)
from .models import CodeDispatch, PendingRegistration, Session, default_user_settings
from .ports import EmailSender, RegistrationStore, SessionIssuer, UserRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def registration_key(email: str) -> str:
    return f"registration:{email}"


def rate_limit_key(email: str) -> str:
    return f"rate_limit:registration:{email}"


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates code issuance, resend throttling, attempt counting and
    promotion of a verified registration into a durable user.
    """

    store: RegistrationStore
    users: UserRepository
    email_sender: EmailSender
    session_issuer: SessionIssuer
    ttl_seconds: int = 600
    max_attempts: int = 5
    resend_cooldown_seconds: int = 60
    rate_limit_window_seconds: int = 3600
    bcrypt_cost: int = 10
    clock: Callable[[], float] = time.time

    def send_code(self, email: str, password: str, nickname: str) -> CodeDispatch:
        """
        Start (or restart) a registration and mail the verification code.

        Any pending registration for the address is replaced. The response
        is the same whether or not the address already has an account.

        Args:
            email: User's email address (will be normalized)
            password: User's password (will be hashed)
            nickname: Display name for the new account

        Returns:
            CodeDispatch with the normalized email and the code lifetime

        Raises:
            RateLimitExceeded: If max_attempts sends happened within the window
        """
        email = normalize_email(email)
        counter_key = rate_limit_key(email)

        sent_count = self.store.get(counter_key)
        if sent_count is not None and int(sent_count) >= self.max_attempts:
            logger.warning("Registration send limit reached for %s", email)
            raise RateLimitExceeded()

        is_existing_user = self.users.exists_by_email(email)

        code = generate_code()
        # Hash the password on both branches so response time does not
        # reveal whether the address is taken.
        password_hash = hash_secret(password, self.bcrypt_cost)
        now = self._now()

        pending = PendingRegistration(
            email=email,
            password_hash="" if is_existing_user else password_hash,
            nickname="" if is_existing_user else nickname,
            code_hash=hash_secret(code, self.bcrypt_cost),
            attempts=0,
            last_sent_at=now,
            created_at=now,
            is_existing_user=is_existing_user,
        )
        self.store.set(registration_key(email), pending.to_json(), self.ttl_seconds)

        self._dispatch(pending, code)

        self.store.increment(counter_key)
        self.store.expire(counter_key, self.rate_limit_window_seconds)

        logger.info("Registration code issued for %s", email)
        return CodeDispatch(email=email, expires_in=self.ttl_seconds)

    def resend_code(self, email: str) -> CodeDispatch:
        """
        Replace the code of a pending registration and mail it again.

        Resets the attempt counter. Only the cooldown throttles resends;
        the hourly send counter is not touched.

        Raises:
            InvalidVerificationCode: If no registration is pending
            ResendCooldown: If the previous code was sent too recently
        """
        email = normalize_email(email)
        key = registration_key(email)

        pending = self._load(key)
        if pending is None:
            raise InvalidVerificationCode()

        now = self._now()
        elapsed = now - pending.last_sent_at
        if elapsed < self.resend_cooldown_seconds:
            raise ResendCooldown(retry_after=self.resend_cooldown_seconds - elapsed)

        code = generate_code()
        pending = pending.with_new_code(hash_secret(code, self.bcrypt_cost), now)

        ttl = self._remaining_ttl(key)
        self.store.set(key, pending.to_json(), ttl)

        self._dispatch(pending, code)

        logger.info("Registration code re-issued for %s", email)
        return CodeDispatch(email=email, expires_in=ttl)

    def verify_code(self, email: str, code: str) -> Session:
        """
        Check a verification code and create the account on success.

        The pending record is only deleted after the user and its settings
        have been committed, so a failed promotion can be retried.

        Args:
            email: User's email (will be normalized)
            code: 6-digit verification code

        Returns:
            Session for the newly created user

        Raises:
            InvalidVerificationCode: No pending record, wrong code, or decoy record
            TooManyAttempts: Attempts exhausted for the pending record
        """
        email = normalize_email(email)
        key = registration_key(email)

        pending = self._load(key)
        if pending is None:
            raise InvalidVerificationCode()

        if pending.attempts >= self.max_attempts:
            raise TooManyAttempts()

        if not verify_secret(code, pending.code_hash):
            ttl = self._remaining_ttl(key)
            self.store.set(key, pending.with_failed_attempt().to_json(), ttl)
            logger.info(
                "Invalid verification code for %s (attempt %d)", email, pending.attempts + 1
            )
            raise InvalidVerificationCode()

        if pending.is_existing_user:
            self.store.delete(key)
            raise InvalidVerificationCode()

        user = self.users.create_user(
            email=pending.email,
            password_hash=pending.password_hash,
            nickname=pending.nickname,
            settings=default_user_settings(),
        )
        self.store.delete(key)

        logger.info("Registration completed for user %s", user.id)
        return Session(user=user, access_token=self.session_issuer.issue(user))

    def _load(self, key: str) -> PendingRegistration | None:
        raw = self.store.get(key)
        if raw is None:
            return None
        return PendingRegistration.from_json(raw)

    def _remaining_ttl(self, key: str) -> int:
        """Remaining lifetime of a record, or the full window if it has none left."""
        ttl = self.store.ttl(key)
        if ttl is not None and ttl > 0:
            return ttl
        return self.ttl_seconds

    def _dispatch(self, pending: PendingRegistration, code: str) -> None:
        """Send the branch-specific mail; delivery failures never fail the request."""
        try:
            if pending.is_existing_user:
                self.email_sender.send_existing_account_notice(pending.email)
            else:
                self.email_sender.send_verification_code(pending.email, code)
        except Exception:
            logger.exception("Failed to send registration email to %s", pending.email)

    def _now(self) -> int:
        return int(self.clock())
