"""Shared fixtures for assistant tests.

Responses from the Messages API are faked with SimpleNamespace objects that
carry the same attributes the session reads: ``stop_reason`` and ``content``
blocks with ``type``/``text`` or ``type``/``id``/``name``/``input``.
"""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from src.config import Settings
from src.cycle.config_loader import CycleConfig, load_cycle_config
from src.models.profile import UserProfile

TODAY = date(2024, 1, 6)


def text_block(text: str) -> SimpleNamespace:
    return SimpleNamespace(type="text", text=text)


def tool_use_block(name: str, arguments: dict, block_id: str = "toolu_01") -> SimpleNamespace:
    return SimpleNamespace(type="tool_use", id=block_id, name=name, input=arguments)


def text_response(text: str) -> SimpleNamespace:
    return SimpleNamespace(stop_reason="end_turn", content=[text_block(text)])


def tool_response(*blocks: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(stop_reason="tool_use", content=list(blocks))


@pytest.fixture
def cycle_config() -> CycleConfig:
    return load_cycle_config()


@pytest.fixture
def settings() -> Settings:
    return Settings(anthropic_api_key="test-key", assistant_max_tool_rounds=2)


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(last_period_date=date(2024, 1, 1), cycle_length=28)
