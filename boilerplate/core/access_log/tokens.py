"""
Access-log tokens.

A token is a named function ``(request, response, *args) -> str | None``
where ``request`` is a Starlette Request and ``response`` a ResponseRecorder.
Tokens live in an explicit TokenRegistry built at startup; evaluating a
token never raises: failures and None both render as "-".
"""
from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Callable, Dict, Iterator, Optional

from starlette.requests import Request
from user_agents import parse as parse_user_agent

from boilerplate.core.access_log.recorder import STATIC_FILE_SIZE_KEY, ResponseRecorder
from boilerplate.core.ansi import CYAN, GREEN, RED, RESET, YELLOW

logger = logging.getLogger(__name__)

TokenFn = Callable[..., Optional[str]]

MISSING = "-"
UNKNOWN = "Unknown"

# Compression middleware may rewrite Content-Length; prefer the uncompressed size.
_LENGTH_HEADERS = ("x-original-content-length", "x-content-length", "content-length")


class TokenRegistry:
    """Name -> token function mapping with never-raising evaluation."""

    def __init__(self, tokens: Optional[Dict[str, TokenFn]] = None) -> None:
        self._tokens: Dict[str, TokenFn] = dict(tokens or {})

    def register(self, name: str, fn: Optional[TokenFn] = None):
        """Register ``fn`` under ``name``; usable as a decorator."""
        if fn is None:
            def decorator(func: TokenFn) -> TokenFn:
                self._tokens[name] = func
                return func
            return decorator
        self._tokens[name] = fn
        return fn

    def get(self, name: str) -> Optional[TokenFn]:
        return self._tokens.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    @property
    def names(self) -> list[str]:
        return sorted(self._tokens)

    def copy(self) -> "TokenRegistry":
        return TokenRegistry(self._tokens)

    def evaluate(
        self,
        name: str,
        request: Request,
        response: ResponseRecorder,
        arg: Optional[str] = None,
    ) -> str:
        fn = self._tokens.get(name)
        if fn is None:
            return MISSING
        try:
            value = fn(request, response) if arg is None else fn(request, response, arg)
        except Exception:
            logger.debug("access-log token %r failed", name, exc_info=True)
            return MISSING
        return MISSING if value is None else str(value)


# ── Helpers ───────────────────────────────────────────────────────────────────

def status_color(status: int) -> str:
    if status >= 500:
        return RED
    if status >= 400:
        return YELLOW
    if status >= 300:
        return CYAN
    return GREEN


def _as_int(value: object) -> Optional[int]:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def _known(name: Optional[str]) -> str:
    if not name or name == "Other":
        return UNKNOWN
    return name


# ── Token functions ───────────────────────────────────────────────────────────

def colored_status(request: Request, response: ResponseRecorder) -> Optional[str]:
    if response.status_code is None:
        return None
    status = response.status_code
    return f"{status_color(status)}{status}{RESET}"


def parsed_user_agent(request: Request, response: ResponseRecorder) -> str:
    raw = request.headers.get("user-agent")
    if not raw:
        return UNKNOWN
    try:
        agent = parse_user_agent(raw)
    except Exception:
        return UNKNOWN
    os_name = _known(agent.os.family)
    browser = _known(agent.browser.family)
    major = (agent.browser.version_string or "").split(".")[0]
    return f"{os_name}/{browser} v{major}"


def bytes_sent(request: Request, response: ResponseRecorder) -> str:
    length: object = None
    for header in _LENGTH_HEADERS:
        value = response.headers.get(header)
        if value:
            length = value
            break
    if not length:
        length = request.scope.get("state", {}).get(STATIC_FILE_SIZE_KEY)
    if not length:
        length = response.bytes_written

    size = _as_int(length) if length else None
    if size is not None:
        return f"{size / 1024:.2f}KB"
    if response.headers.get("transfer-encoding", "").lower() == "chunked":
        return "chunked"
    return MISSING


def transfer_state(request: Request, response: ResponseRecorder) -> str:
    if not response.headers_sent:
        return "NO_RESPONSE"
    if response.finished:
        return "COMPLETE"
    return "PARTIAL"


def method(request: Request, response: ResponseRecorder) -> str:
    return request.method


def url(request: Request, response: ResponseRecorder) -> str:
    path = request.scope.get("path", "")
    query = request.scope.get("query_string", b"")
    if query:
        return f"{path}?{query.decode('latin-1')}"
    return path


def status(request: Request, response: ResponseRecorder) -> Optional[str]:
    if not response.headers_sent or response.status_code is None:
        return None
    return str(response.status_code)


def remote_addr(request: Request, response: ResponseRecorder) -> Optional[str]:
    return request.client.host if request.client else None


def response_time(request: Request, response: ResponseRecorder, digits: str = "3") -> Optional[str]:
    elapsed = response.response_time_ms()
    if elapsed is None:
        return None
    return f"{elapsed:.{int(digits)}f}"


def default_registry(now: Callable[[], datetime] = datetime.now) -> TokenRegistry:
    """Registry with the standard and custom tokens; ``now`` feeds short-date."""

    def short_date(request: Request, response: ResponseRecorder) -> str:
        return now().strftime("%Y-%m-%d %H:%M:%S")

    return TokenRegistry(
        {
            "colored-status": colored_status,
            "short-date": short_date,
            "parsed-user-agent": parsed_user_agent,
            "bytes-sent": bytes_sent,
            "transfer-state": transfer_state,
            "method": method,
            "url": url,
            "status": status,
            "remote-addr": remote_addr,
            "response-time": response_time,
        }
    )
