"""Shared pytest fixtures."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from oxr import OXR  # noqa: E402

FIXED_NOW = datetime(2023, 6, 1, 11, 0, tzinfo=UTC)


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Return the path to bundled JSON fixtures."""

    return ROOT_DIR / "tests" / "fixtures"


@pytest.fixture()
def load_json_fixture(fixtures_dir: Path) -> Callable[[str], dict]:
    """Load a JSON fixture by filename."""

    def _loader(filename: str) -> dict:
        path = fixtures_dir / filename
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    return _loader


@pytest.fixture()
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def oxr(now: datetime) -> Iterator[OXR]:
    """Client pointed at the real base URL with a frozen clock."""

    client = OXR("test-app-id", clock=lambda: now)
    yield client
    client.close()
