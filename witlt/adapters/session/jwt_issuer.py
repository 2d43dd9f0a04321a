"""
JWT session issuer adapter - Implements SessionIssuer protocol.

Access tokens are HMAC-signed JWTs (python-jose) carrying the user id in
``sub`` and a random ``jti`` so individual tokens can be revoked.
"""

import time
import uuid

from jose import JWTError, jwt

from witlt.domain.exceptions import Unauthenticated
from witlt.domain.models import TokenClaims, User


class JwtSessionIssuer:
    """
    Implements SessionIssuer protocol via python-jose.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", ttl_minutes: int = 60) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl_seconds = ttl_minutes * 60

    def issue(self, user: User) -> str:
        """
        Create a signed access token for the user.

        Claims: sub (user id as string), jti, iat, exp.
        """
        now = int(time.time())
        claims = {
            "sub": str(user.id),
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the token claims.

        Raises:
            Unauthenticated: If the token is malformed, forged, expired or incomplete
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError:
            raise Unauthenticated() from None

        try:
            return TokenClaims(
                user_id=int(payload["sub"]),
                jti=str(payload["jti"]),
                expires_at=int(payload["exp"]),
            )
        except (KeyError, TypeError, ValueError):
            raise Unauthenticated() from None
