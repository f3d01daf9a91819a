# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives and auth guards live
here.  No other module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (passlib pbkdf2_sha256)
2. Bearer token issuing / validation        (PyJWT / HS256)
3. Auth gate: bearer token → claims
4. FastAPI dependency guard                 (get_current_user)

Tokens are stateless: nothing about an issued token is stored server-side,
so any process configured with the same secret can validate it and there is
no way to revoke one before it expires.  The claims are trusted as-is for the
token's lifetime; a role change only takes effect after the user logs in
again.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt as _jwt        # PyJWT
from passlib.hash import pbkdf2_sha256 as _pbkdf2  # pure Python, no binary deps
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from pydantic import ValidationError as _PydanticValidationError

from core.errors import (
    AuthError,
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
)
from core.logger import logger

_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["id", "email", "role", "iat", "exp"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# 1.  pbkdf2_sha256 – password hashing
# ---------------------------------------------------------------------------
# passlib embeds the random per-call salt and the round count inside the
# hash string, so two hashes of the same password never compare equal as
# strings while both still verify.
# ---------------------------------------------------------------------------


class PasswordHasher:
    def __init__(self, rounds: int = 600_000):
        self._scheme = _pbkdf2.using(rounds=rounds)

    def hash(self, plain: str) -> str:
        """Return the full passlib hash string, e.g. "$pbkdf2-sha256$..."."""
        return self._scheme.hash(plain)

    def verify(self, plain: str, stored_hash: Optional[str]) -> bool:
        """
        Constant-time verification of *plain* against *stored_hash*.

        Malformed, empty or foreign hash strings verify as ``False`` instead
        of raising.
        """
        if not stored_hash:
            return False
        try:
            return self._scheme.verify(plain, stored_hash)
        except (ValueError, TypeError):
            return False


# ---------------------------------------------------------------------------
# 2.  JWT – bearer tokens
# ---------------------------------------------------------------------------


class TokenClaims(BaseModel):
    """The authenticated identity carried by a token."""

    id: int
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """
    Sign and validate HS256 tokens.

    The secret, lifetime and clock are injected so the service can be
    rotated and tested in isolation.
    """

    def __init__(
        self,
        secret: str,
        lifetime: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._lifetime = lifetime
        self._clock = clock

    def issue(self, user) -> str:
        """Sign a token for *user* (anything with id, email and role)."""
        issued_at = self._clock()
        payload = {
            "id": user.id,
            "email": user.email,
            "role": user.role,
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        return _jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def validate(self, token: str) -> TokenClaims:
        """
        Verify *token* and return its claims.

        Raises ``InvalidTokenError`` when the token is malformed, the
        signature does not match or a claim is missing, and
        ``ExpiredTokenError`` once the injected clock reaches ``exp``.
        """
        try:
            # Time checks are done below against the injected clock
            payload = _jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except _jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        exp, iat = payload["exp"], payload["iat"]
        if not isinstance(exp, (int, float)) or not isinstance(iat, (int, float)):
            raise InvalidTokenError()
        if self._clock().timestamp() >= exp:
            raise ExpiredTokenError()

        try:
            return TokenClaims(
                id=payload["id"],
                email=payload["email"],
                role=payload["role"],
                issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
                expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
            )
        except _PydanticValidationError as exc:
            raise InvalidTokenError() from exc


# ---------------------------------------------------------------------------
# 3.  Auth gate
# ---------------------------------------------------------------------------


def authenticate(token: Optional[str], tokens: TokenService) -> TokenClaims:
    """
    Resolve a bearer token to the caller's claims.

    An absent token is ``MissingTokenError`` and never reaches the token
    service.  Every validation failure is reported as ``InvalidTokenError``
    so the caller cannot tell an expired token from a forged one.
    """
    if not token or not token.strip():
        raise MissingTokenError()
    try:
        return tokens.validate(token.strip())
    except AuthError as exc:
        logger.debug("Token rejected: %s", type(exc).__name__)
        raise InvalidTokenError() from exc


# ---------------------------------------------------------------------------
# 4.  FastAPI dependency guard
# ---------------------------------------------------------------------------

# The tokenUrl here is only used by the auto-generated OpenAPI docs;
# the actual login endpoint is POST /auth/login.  auto_error is off so a
# missing or non-Bearer header goes through our own error envelope.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
) -> TokenClaims:
    """
    Dependency: authenticate the request and bind the claims to
    ``request.state.user``.  No user lookup is made – the token is the
    source of truth until it expires.
    """
    tokens: TokenService = request.app.state.container.tokens
    claims = authenticate(token, tokens)
    request.state.user = claims
    return claims


# -- IP Address extraction ----------------------------------------------------


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from the request.
    Checks X-Forwarded-For header first (for proxies), then falls back to client host.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
