"""JWT session token service.

Tokens are stateless HS256 JWTs carrying the account id (``sub``) and the
username. Nothing about an issued token is stored server-side.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt

from portal.domain.users.entities import TokenClaims
from portal.domain.users.exceptions import InvalidTokenError
from portal.domain.users.repositories import TokenIssuer


class JwtTokenIssuer(TokenIssuer):
    """Issue and verify session tokens.

    Examples
    --------
    >>> issuer = JwtTokenIssuer(secret_key="change-me")
    >>> token = issuer.issue(1, "alice_01")
    >>> issuer.verify(token).username
    'alice_01'
    """

    DEFAULT_TTL = timedelta(hours=1)
    ALGORITHM = "HS256"

    def __init__(self, secret_key: str, ttl: timedelta = DEFAULT_TTL) -> None:
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)
        self._secret_key = secret_key
        self._ttl = ttl

    def issue(
        self, user_id: int, username: str, expires_delta: timedelta | None = None
    ) -> str:
        """Sign a token for ``user_id``/``username``.

        ``expires_delta`` overrides the configured lifetime; a negative value
        yields an already expired token.
        """
        now = datetime.now(tz=UTC)
        payload = {
            "sub": str(user_id),
            "username": username,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self._ttl),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Decode ``token``.

        Raises
        ------
        InvalidTokenError
            If the token is malformed, expired or signed with another key.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )
            return TokenClaims(
                user_id=int(payload["sub"]),
                username=str(payload["username"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError(context={"reason": "expired"}) from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(context={"reason": "invalid"}) from e
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(context={"reason": "malformed"}) from e


__all__ = ["JwtTokenIssuer"]
