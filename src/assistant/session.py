"""Conversation with the external language model.

A session holds only its own transcript.  It never reads or writes the
profile: tool calls from the model are parsed into typed actions and handed
to the ``action_handler`` supplied by the hosting application, which runs
them against the engine and persists the result.

Usage::

    session = AssistantSession(
        system_context=build_system_context(profile),
        history=to_assistant_history(messages),
        action_handler=app.handle_action,
    )
    reply = session.send("My period started today")
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import anthropic
from pydantic import ValidationError

from src.assistant.tools import (
    TOOLS,
    ActionResult,
    AssistantAction,
    UnknownActionError,
    parse_action,
)
from src.config import Settings, get_settings
from src.cycle.errors import CycleEngineError
from src.services.store import StoreError

logger = logging.getLogger("sakhi.assistant.session")

ActionHandler = Callable[[AssistantAction], ActionResult]

NOT_CONFIGURED_REPLY = "Configuration Error: API Key is missing or invalid."
EMPTY_REPLY = "I processed that, but I'm not sure what to say. 🌸"
CONNECTION_ERROR_REPLY = (
    "Sorry, I'm having trouble connecting right now. "
    "Please check your internet connection and try again. 💙"
)


class AssistantSession:
    """One chat session with tool support.

    Args:
        system_context: System prompt, usually from ``build_system_context``.
        history:        Seed transcript as Messages API turns.
        action_handler: Executes typed actions requested by the model.
        settings:       App settings; defaults to ``get_settings()``.
        client:         Anthropic client; built from settings when omitted.
    """

    def __init__(
        self,
        system_context: str,
        history: list[dict[str, Any]],
        action_handler: ActionHandler,
        settings: Settings | None = None,
        client: anthropic.Anthropic | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._system = system_context
        self._seed = list(history)
        self._messages: list[dict[str, Any]] = list(history)
        self._action_handler = action_handler
        if client is None and self._settings.assistant_enabled:
            client = anthropic.Anthropic(api_key=self._settings.anthropic_api_key)
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None

    @property
    def messages(self) -> list[dict[str, Any]]:
        return list(self._messages)

    def reset(self) -> None:
        """Drop everything said since the session was opened."""
        self._messages = list(self._seed)

    def _create(self) -> Any:
        return self._client.messages.create(
            model=self._settings.assistant_model,
            max_tokens=self._settings.assistant_max_tokens,
            temperature=self._settings.assistant_temperature,
            system=self._system,
            tools=TOOLS,
            messages=list(self._messages),
        )

    def _run_tool(self, block: Any) -> dict[str, Any]:
        try:
            action = parse_action(block.name, block.input)
        except (UnknownActionError, ValidationError) as exc:
            logger.warning("Rejected tool call %s: %s", block.name, exc)
            result = ActionResult(False, f"Could not run {block.name}: invalid request.")
        else:
            logger.info("Executing tool %s with %s", block.name, block.input)
            try:
                result = self._action_handler(action)
            except (CycleEngineError, StoreError) as exc:
                logger.error("Tool %s failed: %s", block.name, exc)
                result = ActionResult(False, f"Could not run {block.name}: {exc}")
        return {
            "type": "tool_result",
            "tool_use_id": block.id,
            "content": result.message,
            "is_error": not result.success,
        }

    def send(self, text: str) -> str:
        """Send a user message and return the assistant's reply text."""
        if not self.configured:
            logger.warning("Assistant called without an API key")
            return NOT_CONFIGURED_REPLY

        self._messages.append({"role": "user", "content": text})
        try:
            response = self._create()
            rounds = 0
            while (
                response.stop_reason == "tool_use"
                and rounds < self._settings.assistant_max_tool_rounds
            ):
                tool_results = [
                    self._run_tool(block)
                    for block in response.content
                    if block.type == "tool_use"
                ]
                self._messages.append({"role": "assistant", "content": response.content})
                self._messages.append({"role": "user", "content": tool_results})
                response = self._create()
                rounds += 1
        except anthropic.APIError as exc:
            logger.error("Assistant API error: %s", exc)
            self.reset()
            return CONNECTION_ERROR_REPLY
        except Exception:
            self.reset()
            raise

        if response.stop_reason == "tool_use":
            dropped = [b.name for b in response.content if b.type == "tool_use"]
            logger.warning(
                "Tool round limit (%d) reached; dropped tool calls: %s",
                self._settings.assistant_max_tool_rounds,
                dropped,
            )

        reply = "".join(
            block.text for block in response.content if block.type == "text"
        ).strip()
        self._messages.append({"role": "assistant", "content": reply or EMPTY_REPLY})
        return reply or EMPTY_REPLY
