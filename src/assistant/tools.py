"""Assistant tool declarations and the typed action boundary.

The language model never touches the profile.  When it decides the user has
reported a period start or a symptom it emits a tool call; the call is parsed
into a typed action request, executed synchronously against the engine, and
answered with a plain success/failure string for the model to relay.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import Field, ValidationError

from src.cycle.config_loader import CycleConfig
from src.cycle.dates import DateInput
from src.cycle.errors import NoActiveProfileError
from src.cycle.history import record_period_start
from src.cycle.symptoms import log_symptom
from src.models.base import SakhiBase
from src.models.profile import UserProfile

logger = logging.getLogger("sakhi.assistant.tools")

UPDATE_PERIOD_DATE = "update_period_date"
LOG_SYMPTOM = "log_symptom"

# Anthropic Messages API tool schemas
UPDATE_PERIOD_DATE_TOOL: dict[str, Any] = {
    "name": UPDATE_PERIOD_DATE,
    "description": (
        "Update the user's period start date when they report their period has started."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "date": {
                "type": "string",
                "description": (
                    "The start date of the period in YYYY-MM-DD format. "
                    "If the user says \"today\", use today's date."
                ),
            },
        },
        "required": ["date"],
    },
}

LOG_SYMPTOM_TOOL: dict[str, Any] = {
    "name": LOG_SYMPTOM,
    "description": (
        "Log a health symptom reported by the user (e.g., headache, cramps, bloating)."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "symptom_name": {
                "type": "string",
                "description": (
                    'The specific name of the symptom (e.g., "Cramps", "Headache", "Fatigue").'
                ),
            },
        },
        "required": ["symptom_name"],
    },
}

TOOLS: list[dict[str, Any]] = [UPDATE_PERIOD_DATE_TOOL, LOG_SYMPTOM_TOOL]


# ---------------------------------------------------------------------------
# Typed action requests
# ---------------------------------------------------------------------------


class UpdatePeriodDate(SakhiBase):
    kind: Literal["update_period_date"] = UPDATE_PERIOD_DATE
    date: dt.date


class LogSymptom(SakhiBase):
    kind: Literal["log_symptom"] = LOG_SYMPTOM
    symptom_name: str = Field(min_length=1)


AssistantAction = UpdatePeriodDate | LogSymptom


@dataclass(frozen=True)
class ActionResult:
    """Outcome reported back to the assistant."""

    success: bool
    message: str


class UnknownActionError(ValueError):
    """Raised for a tool name that was never declared to the assistant."""


_ACTION_TYPES: dict[str, type[SakhiBase]] = {
    UPDATE_PERIOD_DATE: UpdatePeriodDate,
    LOG_SYMPTOM: LogSymptom,
}


def parse_action(name: str, arguments: dict[str, Any]) -> AssistantAction:
    """Turn a raw tool call into a typed action request.

    Raises:
        UnknownActionError: If ``name`` is not a declared tool.
        ValidationError:    If the arguments do not fit the tool, e.g. a
                            date that is not ``YYYY-MM-DD``.
    """
    action_type = _ACTION_TYPES.get(name)
    if action_type is None:
        raise UnknownActionError(f"Unknown assistant action {name!r}")
    return action_type.model_validate(arguments or {})


def execute_action(
    profile: UserProfile | None,
    action: AssistantAction,
    as_of_date: DateInput | None = None,
    config: CycleConfig | None = None,
) -> ActionResult:
    """Run a typed action against the profile.  Never raises for a missing profile."""
    try:
        if isinstance(action, UpdatePeriodDate):
            record_period_start(profile, action.date, config=config)
            return ActionResult(
                True, "Period date updated successfully. Cycle length recalculated."
            )
        entry = log_symptom(profile, action.symptom_name, as_of_date=as_of_date, config=config)
        return ActionResult(
            True, f"Symptom '{entry.symptom}' logged successfully for today."
        )
    except NoActiveProfileError as exc:
        logger.warning("Assistant action %s rejected: %s", action.kind, exc)
        return ActionResult(False, "No profile found. Please complete onboarding first.")


def dispatch_tool_call(
    profile: UserProfile | None,
    name: str,
    arguments: dict[str, Any],
    as_of_date: DateInput | None = None,
    config: CycleConfig | None = None,
) -> ActionResult:
    """Parse and execute a raw tool call, reporting bad input as a failure."""
    try:
        action = parse_action(name, arguments)
    except UnknownActionError as exc:
        logger.warning("%s", exc)
        return ActionResult(False, str(exc))
    except ValidationError as exc:
        logger.warning("Invalid arguments for %s: %s", name, exc)
        return ActionResult(False, f"Invalid arguments for {name}: {exc.errors()[0]['msg']}")
    return execute_action(profile, action, as_of_date=as_of_date, config=config)
