"""TokenService: issue and verify short-lived HS* JWT bearer tokens.

Payload is ``{"id": <subject>, "iat": ..., "exp": ...}``; issued tokens are
returned with the ``Bearer `` prefix so clients can send them back verbatim
in the Authorization header.
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from boilerplate.core.exceptions import ConfigurationError, UnauthorizedError, ValidationError

if TYPE_CHECKING:
    from boilerplate.config import AppConfig

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def strip_bearer(value: str) -> str:
    value = (value or "").strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "bearer":
        return rest.strip()
    return value


class TokenService:
    """Encode/decode bearer tokens with a shared secret.

    Usage::

        svc = TokenService.from_config(app_config)
        header = svc.issue(42)            # "Bearer eyJ..."
        claims = svc.verify(header)       # {"id": 42, "iat": ..., "exp": ...}
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        expires_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ConfigurationError("TOKEN_SECRET is not configured")
        self._secret = secret
        self._algorithm = algorithm
        self._expires_seconds = expires_seconds
        self._clock = clock

    @classmethod
    def from_config(cls, config: "AppConfig") -> "TokenService":
        return cls(
            config.token_secret or "",
            algorithm=config.token_algorithm,
            expires_seconds=config.token_expires_seconds,
        )

    @property
    def expires_seconds(self) -> int:
        return self._expires_seconds

    def encode(self, subject: Any) -> str:
        if subject is None or (isinstance(subject, str) and not subject.strip()):
            raise ValidationError("id is required", details={"field": "id"})
        now = int(self._clock())
        payload: Dict[str, Any] = {
            "id": subject,
            "iat": now,
            "exp": now + self._expires_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def issue(self, subject: Any) -> str:
        """Return ``"Bearer <jwt>"`` for ``subject``."""
        return BEARER_PREFIX + self.encode(subject)

    def verify(self, token: Optional[str]) -> Dict[str, Any]:
        """Decode a raw or ``Bearer``-prefixed token; raise UnauthorizedError if unusable."""
        raw = strip_bearer(token or "")
        if not raw:
            raise UnauthorizedError("Authentication required, please sign in")
        try:
            claims = jwt.decode(raw, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise UnauthorizedError("Token has expired", code="TOKEN_EXPIRED")
        except InvalidTokenError as exc:
            logger.debug("Rejected token: %s", exc)
            raise UnauthorizedError("Invalid token", code="TOKEN_INVALID", cause=exc)
        if "id" not in claims:
            raise UnauthorizedError("Token has no subject", code="TOKEN_INVALID")
        return claims
