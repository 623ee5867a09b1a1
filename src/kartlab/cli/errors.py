"""Error reporting for the ``kartlab`` command line.

Every failure surfaced to the user is a :class:`CliError` whose category
decides the process exit status.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..errors import KartlabError, LoadError, PersistenceError, _normalise_context

__all__ = [
    "STATUS_CODES",
    "CliError",
    "ErrorPayload",
    "build_error_payload",
    "log_cli_error",
]

STATUS_CODES: Mapping[str, int] = {
    "runtime": 1,
    "usage": 2,
    "io": 3,
    "not_found": 4,
}

_RUNTIME = "runtime"

logger = logging.getLogger("kartlab.cli")


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """What gets logged and printed for a failed command."""

    status_code: int
    category: str
    message: str
    context: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "category": self.category,
            "message": self.message,
            "context": dict(self.context),
        }


def build_error_payload(
    message: str,
    *,
    category: str = _RUNTIME,
    context: Optional[Mapping[str, Any]] = None,
) -> ErrorPayload:
    """Unknown categories report the runtime status."""

    category = category or _RUNTIME
    return ErrorPayload(
        status_code=STATUS_CODES.get(category, STATUS_CODES[_RUNTIME]),
        category=category,
        message=message,
        context=_normalise_context(context),
    )


def log_cli_error(
    payload: ErrorPayload,
    *,
    target: Optional[logging.Logger] = None,
    exc_info: Optional[BaseException] = None,
) -> None:
    (target or logger).error(
        payload.message,
        extra={
            "event": "cli.error",
            "category": payload.category,
            "status_code": payload.status_code,
            "context": dict(payload.context),
        },
        exc_info=exc_info,
    )


class CliError(RuntimeError):
    """Failure of a sub-command, carrying its exit status."""

    def __init__(
        self,
        message: str,
        *,
        category: str = _RUNTIME,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.payload = build_error_payload(message, category=category, context=context)
        self.logged = False

    @property
    def category(self) -> str:
        return self.payload.category

    @property
    def status_code(self) -> int:
        return self.payload.status_code

    @property
    def context(self) -> dict[str, Any]:
        return dict(self.payload.context)

    @classmethod
    def from_kartlab_error(cls, exc: KartlabError) -> "CliError":
        """Load and store failures map to ``io``, anything else to ``runtime``."""

        category = "io" if isinstance(exc, (LoadError, PersistenceError)) else _RUNTIME
        return cls(str(exc), category=category, context=exc.context)
