"""
Twitter (X) OAuth 2.0 adapter - Implements SocialIdentityProvider protocol.

Authorization-code flow with PKCE. Twitter does not return an email
address, so identities from this provider never carry one.
API Documentation: https://developer.x.com/en/docs/authentication/oauth-2-0/authorization-code
"""

import base64
import hashlib
import logging
from urllib.parse import urlencode

import httpx

from witlt.domain.exceptions import SocialAuthFailed
from witlt.domain.models import SocialIdentity

logger = logging.getLogger(__name__)


def code_challenge(code_verifier: str) -> str:
    """S256 PKCE challenge: base64url(sha256(verifier)) without padding."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


class TwitterOAuthProvider:
    """
    Implements SocialIdentityProvider protocol via httpx.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    AUTH_URL = "https://twitter.com/i/oauth2/authorize"
    TOKEN_URL = "https://api.twitter.com/2/oauth2/token"
    ME_URL = "https://api.twitter.com/2/users/me"

    SCOPES = ["tweet.read", "users.read"]

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=30.0)

    def authorization_url(self, state: str, code_verifier: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(self.SCOPES),
            "state": state,
            "code_challenge": code_challenge(code_verifier),
            "code_challenge_method": "S256",
        }
        return f"{self.AUTH_URL}?{urlencode(params)}"

    def fetch_identity(self, code: str, code_verifier: str) -> SocialIdentity:
        """
        Exchange the authorization code and read the authenticated user.

        Raises:
            SocialAuthFailed: If Twitter rejects the exchange or profile request
        """
        token_response = self._http.post(
            self.TOKEN_URL,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
                "code_verifier": code_verifier,
                "client_id": self.client_id,
            },
            auth=(self.client_id, self.client_secret),
        )
        if token_response.status_code != 200:
            logger.error(
                "Twitter token exchange failed (status=%s)", token_response.status_code
            )
            raise SocialAuthFailed()

        access_token = token_response.json().get("access_token")
        if not access_token:
            raise SocialAuthFailed()

        me_response = self._http.get(
            self.ME_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if me_response.status_code != 200:
            logger.error(
                "Twitter profile request failed (status=%s)", me_response.status_code
            )
            raise SocialAuthFailed()

        data = me_response.json().get("data") or {}
        return SocialIdentity(
            provider_id=str(data.get("id") or ""),
            nickname=data.get("username"),
            name=data.get("name"),
        )

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_http:
            self._http.close()
