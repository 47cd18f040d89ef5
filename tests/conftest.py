"""Shared test fixtures for all test modules."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import structlog

_ENV_VARS = (
    "KUBE_NS_DUMP_APISERVER_HOST",
    "KUBE_NS_DUMP_CONTEXT",
    "KUBE_NS_DUMP_OUTPUT",
    "KUBE_NS_DUMP_NAMESPACE",
    "KUBE_NS_DUMP_SKIP_TYPES",
    "KUBE_NS_DUMP_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment from leaking into DumpConfig defaults."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_api_client() -> MagicMock:
    """Stand-in for kubernetes.client.ApiClient."""
    return MagicMock()


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "dump"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """The CLI binds structlog to the captured stderr; undo that after each test."""
    yield
    structlog.reset_defaults()
