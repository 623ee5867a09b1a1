"""Package version.

Installed distributions report the version recorded in their metadata. A
source checkout without metadata reads the top release heading of
``CHANGELOG.md`` (``## vX.Y.Z``). Either way the version must be a plain
``MAJOR.MINOR.PATCH`` release.
"""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path
from typing import Iterator

from packaging.version import InvalidVersion, Version

__all__ = ["__version__"]

_RELEASE_HEADING = re.compile(r"^## v(\d+\.\d+\.\d+)\b", re.MULTILINE)
# src/kartlab/_version.py -> repository root is two levels above the package.
_CHECKOUT_DEPTH = 2


def _changelogs() -> Iterator[Path]:
    package_dir = Path(__file__).resolve().parent
    for parent in package_dir.parents[:_CHECKOUT_DEPTH]:
        candidate = parent / "CHANGELOG.md"
        if candidate.is_file():
            yield candidate


def _checkout_version() -> str | None:
    for changelog in _changelogs():
        match = _RELEASE_HEADING.search(changelog.read_text(encoding="utf-8"))
        if match is not None:
            return match.group(1)
    return None


def _release(raw: str) -> str:
    try:
        version = Version(raw)
    except InvalidVersion as exc:
        raise RuntimeError(f"kartlab version {raw!r} is not a valid version") from exc
    if len(version.release) != 3 or version.pre or version.dev or version.local:
        raise RuntimeError(f"kartlab version {raw!r} is not a MAJOR.MINOR.PATCH release")
    return raw


def _detect() -> str:
    try:
        return _release(metadata.version("kartlab"))
    except metadata.PackageNotFoundError:
        pass
    raw = _checkout_version()
    if raw is None:
        raise RuntimeError("kartlab is not installed and no CHANGELOG.md release heading was found")
    return _release(raw)


__version__ = _detect()
