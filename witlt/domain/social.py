"""
Social login domain service.

Runs the OAuth authorization-code round trip against a provider and turns
the returned identity into a local user, independent of the code-based
registration workflow.
"""

import json
import logging
import secrets
from dataclasses import dataclass, field

from .exceptions import SocialAuthFailed, UnsupportedProvider
from .models import Session, SocialIdentity, default_user_settings
from .ports import RegistrationStore, SessionIssuer, SocialIdentityProvider, UserRepository
from .registration import normalize_email

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("twitter",)

NICKNAME_MAX_LENGTH = 10
DEFAULT_NICKNAME = "User"
OAUTH_STATE_TTL_SECONDS = 600


def oauth_state_key(state: str) -> str:
    return f"oauth_state:{state}"


def placeholder_email(provider: str, provider_id: str) -> str:
    """Address used when the provider does not share the user's email."""
    return f"{provider}_{provider_id}@social.witlt.local"


@dataclass
class SocialAuthService:
    users: UserRepository
    store: RegistrationStore
    session_issuer: SessionIssuer
    providers: dict[str, SocialIdentityProvider] = field(default_factory=dict)

    def authorization_url(self, provider: str) -> str:
        """
        Begin an OAuth round trip and return the provider's consent URL.

        A single-use state token and PKCE verifier are kept in the store
        until the callback arrives.
        """
        identity_provider = self._provider(provider)

        state = secrets.token_urlsafe(32)
        code_verifier = secrets.token_urlsafe(64)
        self.store.set(
            oauth_state_key(state),
            json.dumps({"provider": provider, "codeVerifier": code_verifier}),
            OAUTH_STATE_TTL_SECONDS,
        )
        return identity_provider.authorization_url(state, code_verifier)

    def complete(self, provider: str, code: str, state: str) -> Session:
        """
        Finish an OAuth round trip started by ``authorization_url``.

        Raises:
            UnsupportedProvider: Unknown or unconfigured provider
            SocialAuthFailed: Unknown, reused or mismatched state
        """
        identity_provider = self._provider(provider)

        key = oauth_state_key(state)
        raw = self.store.get(key)
        self.store.delete(key)
        if raw is None:
            raise SocialAuthFailed("OAuth state is missing or expired.")

        pending = json.loads(raw)
        if pending.get("provider") != provider:
            raise SocialAuthFailed("OAuth state does not match the provider.")

        identity = identity_provider.fetch_identity(code, pending["codeVerifier"])
        return self.login(provider, identity)

    def login(self, provider: str, identity: SocialIdentity) -> Session:
        """
        Resolve a provider identity to a user and issue a session.

        Raises:
            UnsupportedProvider: Unknown provider
            SocialAuthFailed: Provider returned no user id
        """
        if provider not in SUPPORTED_PROVIDERS:
            raise UnsupportedProvider()

        if not identity.provider_id:
            logger.warning("Social auth returned an empty provider id (provider=%s)", provider)
            raise SocialAuthFailed()

        nickname = (identity.nickname or identity.name or DEFAULT_NICKNAME)[:NICKNAME_MAX_LENGTH]
        if identity.email:
            email = normalize_email(identity.email)
        else:
            email = placeholder_email(provider, identity.provider_id)

        user = self.users.link_or_create_social_user(
            provider=provider,
            provider_id=identity.provider_id,
            email=email,
            nickname=nickname,
            settings=default_user_settings(),
        )

        logger.info("Social login for user %s via %s", user.id, provider)
        return Session(user=user, access_token=self.session_issuer.issue(user))

    def _provider(self, provider: str) -> SocialIdentityProvider:
        if provider not in SUPPORTED_PROVIDERS or provider not in self.providers:
            raise UnsupportedProvider()
        return self.providers[provider]
