"""Key-value JSON store for the companion's persisted state.

The profile and the chat transcript are kept under separate keys in a single
JSON object file.  Every write replaces the whole file atomically.

Usage::

    store = ProfileStore.at(settings.store_path)
    profile = store.load_profile()       # None before onboarding
    store.save_profile(profile)
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from src.models.profile import ChatMessage, UserProfile

logger = logging.getLogger("sakhi.store")

PROFILE_KEY = "sakhi_user_profile"
MESSAGES_KEY = "sakhi_chat_history"


class StoreError(RuntimeError):
    """Raised when the store file or a stored value cannot be read."""


class JsonKeyValueStore:
    """A flat ``key -> JSON value`` mapping persisted in one file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Store file {self._path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Store file {self._path} must contain a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=".store-", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> bool:
        data = self._read()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        return True


class ProfileStore:
    """Typed access to the profile and chat transcript."""

    def __init__(self, store: JsonKeyValueStore) -> None:
        self._store = store

    @classmethod
    def at(cls, path: Path) -> ProfileStore:
        return cls(JsonKeyValueStore(path))

    def load_profile(self) -> UserProfile | None:
        raw = self._store.get(PROFILE_KEY)
        if raw is None:
            return None
        try:
            return UserProfile.model_validate(raw)
        except ValidationError as exc:
            raise StoreError(f"Stored profile is invalid: {exc}") from exc

    def save_profile(self, profile: UserProfile) -> None:
        self._store.set(PROFILE_KEY, profile.to_storage())
        logger.debug(
            "Saved profile (history=%d, symptoms=%d)",
            len(profile.period_history),
            len(profile.symptom_history),
        )

    def load_messages(self) -> list[ChatMessage]:
        raw = self._store.get(MESSAGES_KEY) or []
        try:
            return [ChatMessage.model_validate(m) for m in raw]
        except ValidationError as exc:
            raise StoreError(f"Stored chat history is invalid: {exc}") from exc

    def save_messages(self, messages: list[ChatMessage]) -> None:
        self._store.set(MESSAGES_KEY, [m.to_storage() for m in messages])

    def clear(self) -> None:
        self._store.delete(PROFILE_KEY)
        self._store.delete(MESSAGES_KEY)
        logger.info("Cleared stored profile and chat history")
