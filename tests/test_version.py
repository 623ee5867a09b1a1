from __future__ import annotations

import pytest
from packaging.version import Version

import kartlab
from kartlab import _version


def test_version_is_semantic() -> None:
    parsed = Version(kartlab.__version__)

    assert len(parsed.release) == 3


def test_checkout_version_matches_latest_changelog_heading() -> None:
    assert _version._checkout_version() == "0.1.0"


@pytest.mark.parametrize("raw", ["1.2", "1.2.3rc1", "1.2.3+local", "not-a-version"])
def test_non_release_versions_are_rejected(raw: str) -> None:
    with pytest.raises(RuntimeError):
        _version._release(raw)
