"""Pydantic models for the persisted companion state: the user profile,
logged symptoms, and the chat transcript."""

from __future__ import annotations

import datetime as dt
import uuid
from enum import Enum

from pydantic import ConfigDict, Field, model_validator

from src.models.base import SakhiBase, utc_now

DEFAULT_CYCLE_LENGTH = 28


# ---------- Enums ----------

class DietPreference(str, Enum):
    vegetarian = "vegetarian"
    non_vegetarian = "non-vegetarian"


class Language(str, Enum):
    english = "english"
    hindi = "hindi"
    telugu = "telugu"
    tamil = "tamil"
    kannada = "kannada"


class MessageRole(str, Enum):
    user = "user"
    assistant = "assistant"


# ---------- Symptoms ----------

class SymptomEntry(SakhiBase):
    """One logged symptom.  ``cycle_day`` is stamped at logging time and never
    recomputed, even if the profile's cycle length is edited later."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    symptom: str = Field(min_length=1)
    cycle_day: int = Field(ge=1)


# ---------- Profile ----------

class UserProfile(SakhiBase):
    name: str | None = None
    last_period_date: dt.date
    cycle_length: int = Field(default=DEFAULT_CYCLE_LENGTH, gt=0)
    period_history: list[dt.date] = Field(default_factory=list)
    symptom_history: list[SymptomEntry] = Field(default_factory=list)
    diet_preference: DietPreference = DietPreference.vegetarian
    language: Language = Language.english
    onboarding_complete: bool = True

    @model_validator(mode="after")
    def _seed_period_history(self) -> UserProfile:
        # Profiles saved before history tracking only carry lastPeriodDate.
        if not self.period_history:
            self.period_history = [self.last_period_date]
        return self


# ---------- Chat transcript ----------

class ChatMessage(SakhiBase):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: MessageRole
    text: str
    timestamp: dt.datetime = Field(default_factory=utc_now)
