"""Pytest configuration: make `src/` importable and provide fake API plumbing."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

repo_root = Path(__file__).parent.parent
for path in (repo_root / "src", Path(__file__).parent):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from crunchbase_client.config import ClientSettings  # noqa: E402
from fakes import Handler, RecordingHandler  # noqa: E402


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(user_key="secret-key", base_url="https://api.example.com")


@pytest.fixture
def make_client() -> Iterator[Callable[[Handler], tuple[httpx.Client, RecordingHandler]]]:
    clients: list[httpx.Client] = []

    def factory(handler: Handler) -> tuple[httpx.Client, RecordingHandler]:
        recorder = RecordingHandler(handler)
        client = httpx.Client(transport=httpx.MockTransport(recorder), follow_redirects=False)
        clients.append(client)
        return client, recorder

    yield factory

    for client in clients:
        client.close()
