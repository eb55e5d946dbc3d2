"""Hosting application glue.

``CompanionApp`` plays the role of the client application around the cycle
engine: it loads the profile from the store before every operation, passes
it into the engine, and saves it after every mutation.  Settings edits and
assistant tool calls both go through this path, so each one starts from the
latest stored profile.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

import anthropic

from src.assistant.context import build_system_context, to_assistant_history
from src.assistant.session import AssistantSession
from src.assistant.tools import ActionResult, AssistantAction, execute_action
from src.config import Settings, get_settings
from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.cycle.dates import DateInput
from src.cycle.errors import NoActiveProfileError
from src.cycle.history import apply_settings, create_profile, record_period_start
from src.cycle.insights import DailyInsight, daily_insight
from src.cycle.status import CycleStatus, compute_status
from src.cycle.symptoms import log_symptom, recent_symptoms
from src.models.profile import (
    ChatMessage,
    DietPreference,
    Language,
    MessageRole,
    SymptomEntry,
    UserProfile,
)
from src.services.store import ProfileStore

logger = logging.getLogger("sakhi.companion")


class CompanionApp:
    """Single-user companion session around a profile store.

    Args:
        store:    Where the profile and chat transcript live.
        settings: App settings; defaults to ``get_settings()``.
        config:   Engine config; defaults to the global singleton.
        client:   Anthropic client handed to chat sessions.
        clock:    Returns "today"; injectable for tests.
    """

    def __init__(
        self,
        store: ProfileStore,
        settings: Settings | None = None,
        config: CycleConfig | None = None,
        client: anthropic.Anthropic | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._config = config or get_cycle_config()
        self._client = client
        self._clock = clock
        self._session: AssistantSession | None = None

    # ------------------------------------------------------------------
    # Profile access
    # ------------------------------------------------------------------

    def profile(self) -> UserProfile | None:
        return self._store.load_profile()

    def _save(self, profile: UserProfile) -> None:
        # Chat sessions carry a snapshot of the profile in their system context.
        self._store.save_profile(profile)
        self._session = None

    def _require_profile(self, operation: str) -> UserProfile:
        profile = self._store.load_profile()
        if profile is None:
            raise NoActiveProfileError(operation)
        return profile

    def onboard(
        self,
        last_period_date: DateInput,
        diet_preference: DietPreference | str = DietPreference.vegetarian,
        language: Language | str = Language.english,
        name: str | None = None,
    ) -> UserProfile:
        profile = create_profile(
            last_period_date,
            diet_preference=diet_preference,
            language=language,
            name=name,
            config=self._config,
        )
        self._save(profile)
        return profile

    # ------------------------------------------------------------------
    # Engine operations
    # ------------------------------------------------------------------

    def status(self) -> CycleStatus:
        profile = self._require_profile("compute status")
        return compute_status(
            profile.last_period_date,
            profile.cycle_length,
            as_of_date=self._clock(),
            config=self._config,
        )

    def record_period_start(self, period_date: DateInput) -> UserProfile:
        profile = record_period_start(self.profile(), period_date, config=self._config)
        self._save(profile)
        return profile

    def log_symptom(self, symptom: str) -> SymptomEntry:
        profile = self.profile()
        entry = log_symptom(profile, symptom, as_of_date=self._clock(), config=self._config)
        self._save(profile)
        return entry

    def update_settings(
        self,
        last_period_date: DateInput | None = None,
        cycle_length: int | None = None,
        diet_preference: DietPreference | str | None = None,
        language: Language | str | None = None,
        name: str | None = None,
    ) -> UserProfile:
        profile = apply_settings(
            self.profile(),
            last_period_date=last_period_date,
            cycle_length=cycle_length,
            diet_preference=diet_preference,
            language=language,
            name=name,
            config=self._config,
        )
        self._save(profile)
        return profile

    def daily_insight(self) -> DailyInsight:
        profile = self._require_profile("show today's insight")
        phase = self.status().phase
        return daily_insight(phase, profile.language)

    def recent_symptoms(self, limit: int | None = None) -> tuple[list[SymptomEntry], int]:
        profile = self._require_profile("list symptoms")
        return recent_symptoms(profile, limit=limit, config=self._config)

    # ------------------------------------------------------------------
    # Assistant
    # ------------------------------------------------------------------

    def handle_action(self, action: AssistantAction) -> ActionResult:
        """Run an assistant-requested action against the latest stored profile."""
        profile = self.profile()
        result = execute_action(profile, action, as_of_date=self._clock(), config=self._config)
        if result.success and profile is not None:
            self._save(profile)
        return result

    def open_chat(self) -> AssistantSession:
        profile = self._require_profile("open a chat")
        history = to_assistant_history(
            self._store.load_messages(), window=self._settings.assistant_history_window
        )
        self._session = AssistantSession(
            system_context=build_system_context(
                profile,
                as_of_date=self._clock(),
                recent_limit=self._config.symptoms.recent_limit,
            ),
            history=history,
            action_handler=self.handle_action,
            settings=self._settings,
            client=self._client,
        )
        logger.info("Opened chat session with %d seeded turns", len(history))
        return self._session

    def chat(self, text: str) -> str:
        """Send ``text`` to the assistant and persist both sides of the exchange."""
        session = self._session or self.open_chat()
        reply = session.send(text)
        messages = self._store.load_messages()
        messages.append(ChatMessage(role=MessageRole.user, text=text))
        messages.append(ChatMessage(role=MessageRole.assistant, text=reply))
        self._store.save_messages(messages)
        return reply
