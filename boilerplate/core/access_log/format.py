"""
Access-log line templates.

Templates use ``:token`` and ``:token[arg]`` placeholders; everything else
is copied literally. A template is compiled once into an AccessLogFormat
together with the registry that resolves its tokens.
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple, Union

from starlette.requests import Request

from boilerplate.core.access_log.recorder import ResponseRecorder
from boilerplate.core.access_log.tokens import TokenRegistry, default_registry

PRODUCTION_FORMAT = (
    ":short-date :method :url :colored-status :response-time[0]ms "
    ":bytes-sent :transfer-state - :parsed-user-agent"
)
DEVELOPMENT_FORMAT = (
    "[:short-date]  :method  :url  :status (:response-time[0]ms) "
    "| Size::bytes-sent :transfer-state | IP::remote-addr | Client::parsed-user-agent"
)

_TOKEN_PATTERN = re.compile(r":([-\w]{2,})(?:\[([^\]]+)\])?")

_Part = Union[str, Tuple[str, Optional[str]]]


def compile_template(template: str) -> List[_Part]:
    """Split a template into literal strings and (token, arg) pairs."""
    parts: List[_Part] = []
    pos = 0
    for match in _TOKEN_PATTERN.finditer(template):
        if match.start() > pos:
            parts.append(template[pos:match.start()])
        parts.append((match.group(1), match.group(2)))
        pos = match.end()
    if pos < len(template):
        parts.append(template[pos:])
    return parts


class AccessLogFormat:
    """A compiled template bound to a token registry."""

    def __init__(self, template: str, tokens: Optional[TokenRegistry] = None) -> None:
        self.template = template
        self.tokens = tokens if tokens is not None else default_registry()
        self._parts = compile_template(template)

    @classmethod
    def for_mode(cls, production: bool, tokens: Optional[TokenRegistry] = None) -> "AccessLogFormat":
        """Compact line in production, verbose line everywhere else."""
        return cls(PRODUCTION_FORMAT if production else DEVELOPMENT_FORMAT, tokens)

    @property
    def token_names(self) -> List[str]:
        return [part[0] for part in self._parts if isinstance(part, tuple)]

    def format(self, request: Request, response: ResponseRecorder) -> str:
        out = []
        for part in self._parts:
            if isinstance(part, str):
                out.append(part)
            else:
                name, arg = part
                out.append(self.tokens.evaluate(name, request, response, arg))
        return "".join(out)

    def __repr__(self) -> str:
        return f"AccessLogFormat(template={self.template!r})"
