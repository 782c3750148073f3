"""Fixtures for integration tests."""

import stat
from collections.abc import Generator
from pathlib import Path
from typing import Protocol

import pytest
from aioresponses import aioresponses as aioresponses_cls


class FakeBinaryFn(Protocol):
    """Protocol for fake executable creation function."""

    def __call__(self, script: str) -> Path:
        """Write a shell script and return its path."""


@pytest.fixture
def aioresponses() -> Generator[aioresponses_cls, None, None]:
    """Mock all aiohttp requests."""
    with aioresponses_cls() as mocked:
        yield mocked


@pytest.fixture
def fake_binary(tmp_path: Path) -> FakeBinaryFn:
    """Return a function creating executable shell scripts."""

    def _create(script: str) -> Path:
        path = tmp_path / "sc"
        path.write_text(f"#!/bin/sh\n{script}\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR)
        return path

    return _create
