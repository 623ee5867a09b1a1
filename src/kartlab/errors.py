"""Exception types raised by the KartLab computation layer."""

from __future__ import annotations

from typing import Any, Mapping, Optional

__all__ = ["KartlabError", "LoadError", "PersistenceError"]


def _normalise_context(context: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    if not context:
        return {}
    payload: dict[str, Any] = {}
    for key, value in context.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            payload[str(key)] = value
        else:
            payload[str(key)] = str(value)
    return payload


class KartlabError(RuntimeError):
    """Base error carrying a flat, loggable ``context`` mapping."""

    def __init__(self, message: str, *, context: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.context = _normalise_context(context)


class LoadError(KartlabError):
    """Raised when no usable dataset could be loaded.

    Both the structured and the tabular sources failed, or the dataset they
    produced has no characters or no vehicles, or it carries hard validation
    errors.
    """


class PersistenceError(KartlabError):
    """Raised by collection stores when a payload cannot be read or written."""
