"""Signed, time-bounded session tokens (JWT)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from sessiongate.domain.users.entities import SessionToken, TokenClaims
from sessiongate.domain.users.exceptions import InvalidTokenError, TokenExpiredError
from sessiongate.domain.users.repositories import TokenService
from sessiongate.shared.logging import logger

_REQUIRED_CLAIMS = ("username", "iat", "exp")


def utc_now() -> datetime:
    return datetime.now(UTC)


def _numeric_date(moment: datetime) -> int | float:
    # Sub-second precision is kept so the token expires exactly one TTL after issue.
    timestamp = moment.timestamp()
    return int(timestamp) if timestamp.is_integer() else timestamp


def _is_numeric_date(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class JwtTokenService(TokenService):
    """Issues and verifies HMAC-signed JWTs carrying a ``username`` claim.

    Tokens are stateless: nothing is stored server side and there is no
    revocation. A token is accepted iff its signature verifies against
    ``secret_key`` and the current time (per ``clock``) is strictly before its
    ``exp`` claim.
    """

    def __init__(
        self,
        *,
        secret_key: str,
        ttl: timedelta = timedelta(hours=1),
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._secret_key = secret_key
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, username: str) -> SessionToken:
        issued_at = self._clock()
        expires_at = issued_at + self._ttl
        payload = {
            "username": username,
            "iat": _numeric_date(issued_at),
            "exp": _numeric_date(expires_at),
        }
        token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        logger.debug(f"tokens.issue: user={username} exp={expires_at.isoformat()}")
        return SessionToken(
            token=token,
            username=username,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def verify(self, token: str) -> TokenClaims:
        try:
            # Expiry is checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": list(_REQUIRED_CLAIMS)},
            )
        except jwt.InvalidTokenError as exc:
            logger.debug(f"tokens.verify: rejected ({type(exc).__name__})")
            raise InvalidTokenError() from exc

        username = payload.get("username")
        exp = payload.get("exp")
        iat = payload.get("iat")
        if not isinstance(username, str) or not username:
            raise InvalidTokenError()
        if not _is_numeric_date(exp) or not _is_numeric_date(iat):
            raise InvalidTokenError()

        expires_at = datetime.fromtimestamp(exp, UTC)
        if self._clock() >= expires_at:
            logger.debug(f"tokens.verify: expired token for user={username}")
            raise TokenExpiredError()

        return TokenClaims(
            username=username,
            issued_at=datetime.fromtimestamp(iat, UTC),
            expires_at=expires_at,
        )
