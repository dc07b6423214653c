"""Shared slowapi limiter.

Limit strings are resolved per request from the serving app's AppConfig.
RateLimitScopeMiddleware publishes them for the duration of each request,
so several apps in one process each keep their own limits.
"""
from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING, Mapping

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.types import ASGIApp, Receive, Scope, Send

if TYPE_CHECKING:
    from boilerplate.config import AppConfig

DEFAULT_LIMITS: Mapping[str, str] = {
    "global": "200 per 15 minutes",
    "strict": "5 per hour",
    "login": "10 per hour",
}

_current_limits: ContextVar[Mapping[str, str]] = ContextVar(
    "rate_limits", default=DEFAULT_LIMITS
)


def limits_for(config: "AppConfig") -> Mapping[str, str]:
    return {
        "global": config.global_rate_limit,
        "strict": config.strict_rate_limit,
        "login": config.login_rate_limit,
    }


def global_limit() -> str:
    return _current_limits.get()["global"]


def strict_limit() -> str:
    """Uploads and other expensive writes."""
    return _current_limits.get()["strict"]


def login_limit() -> str:
    """Token issuance."""
    return _current_limits.get()["login"]


class RateLimitScopeMiddleware:
    """Expose ``scope["app"].state.config`` limits to the limit providers.

    Must sit outside SlowAPIMiddleware.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        config = getattr(scope["app"].state, "config", None)
        limits = limits_for(config) if config is not None else DEFAULT_LIMITS
        token = _current_limits.set(limits)
        try:
            await self.app(scope, receive, send)
        finally:
            _current_limits.reset(token)


limiter = Limiter(key_func=get_remote_address, default_limits=[global_limit])
