"""System context and transcript seeding for assistant sessions."""

from __future__ import annotations

from datetime import date
from typing import Any

from src.cycle.dates import DateInput, to_date
from src.models.profile import ChatMessage, MessageRole, UserProfile

SYSTEM_INSTRUCTION = """\
You are "Sakhi" (सखी), a friendly women's health companion designed for Indian women. \
You help women track their menstrual cycles, give daily health tips, and offer \
immediate symptom relief guidance.

PERSONALITY & TONE:
- Warm, caring, and supportive like a trusted female friend (sakhi/saheli)
- Reply in the user's preferred language (English, Hindi, Telugu, Tamil, Kannada)
- Empathetic, non-judgmental, encouraging
- Professional about health but conversational in style
- Use emojis moderately (🌸💙🩸🥬🚶‍♀️)

CORE CAPABILITIES:
1. PERIOD TRACKING: give insights based on the user's cycle day.
2. DAILY HEALTH TIPS: tips for the current phase (Menstrual, Follicular, Ovulation, \
Luteal), adapted to a vegetarian or non-vegetarian diet.
3. SYMPTOM RELIEF: acknowledge discomfort with empathy, give 3-4 home remedies \
(Indian context), and say when to consult a doctor.

IMPORTANT GUIDELINES:
- Keep responses SHORT (2-4 lines typically) with bullet points (✅/•).
- Code-mixing English medical terms into Indian languages is fine when natural.
- Never give a medical diagnosis.
"""


def _format_recent_symptoms(profile: UserProfile, limit: int) -> str:
    recent = profile.symptom_history[:limit]
    if not recent:
        return "None logged yet"
    return ", ".join(f"{s.symptom} (Day {s.cycle_day})" for s in recent)


def build_system_context(
    profile: UserProfile,
    as_of_date: DateInput | None = None,
    recent_limit: int = 5,
) -> str:
    """Return the system prompt for a session with ``profile``."""
    today = to_date(as_of_date) if as_of_date is not None else date.today()
    return (
        f"{SYSTEM_INSTRUCTION}\n"
        "CURRENT USER CONTEXT:\n"
        f"- Last Period Date: {profile.last_period_date.isoformat()}\n"
        f"- Cycle Length: {profile.cycle_length} days\n"
        f"- Diet: {profile.diet_preference.value}\n"
        f"- Language: {profile.language.value}\n"
        f"- Recent Symptoms: {_format_recent_symptoms(profile, recent_limit)}\n"
        f"- Today's Date: {today.isoformat()}\n\n"
        "If the user reports a symptom, acknowledge it, give advice, and log it with "
        "the log_symptom tool. If the user says their period started, record it with "
        "the update_period_date tool using a YYYY-MM-DD date.\n"
    )


def to_assistant_history(
    messages: list[ChatMessage], window: int = 15
) -> list[dict[str, Any]]:
    """Convert the stored transcript into Messages API turns.

    Empty messages are dropped, only the last ``window`` are kept, and the
    result always starts with a user turn.
    """
    valid = [m for m in messages if m.text and m.text.strip()]
    recent = valid[-window:] if window > 0 else []
    turns = [
        {
            "role": "assistant" if m.role == MessageRole.assistant else "user",
            "content": m.text,
        }
        for m in recent
    ]
    while turns and turns[0]["role"] != "user":
        turns.pop(0)
    return turns
