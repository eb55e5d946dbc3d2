"""Shared fixtures for store and companion tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.config import Settings
from src.cycle.config_loader import load_cycle_config
from src.services.companion import CompanionApp
from src.services.store import JsonKeyValueStore, ProfileStore

TODAY = date(2024, 1, 6)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "sakhi_store.json"


@pytest.fixture
def kv_store(store_path: Path) -> JsonKeyValueStore:
    return JsonKeyValueStore(store_path)


@pytest.fixture
def profile_store(kv_store: JsonKeyValueStore) -> ProfileStore:
    return ProfileStore(kv_store)


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def app(profile_store: ProfileStore, client: MagicMock) -> CompanionApp:
    """Companion with a fixed clock and a mocked assistant client."""
    return CompanionApp(
        profile_store,
        settings=Settings(anthropic_api_key="test-key"),
        config=load_cycle_config(),
        client=client,
        clock=lambda: TODAY,
    )
