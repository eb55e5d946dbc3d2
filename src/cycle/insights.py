"""Phase-based daily insight texts, localized per profile language."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import yaml

from src.cycle.phases import CyclePhase
from src.models.profile import Language

logger = logging.getLogger("sakhi.cycle.insights")

_INSIGHTS_PATH = Path(__file__).parent / "insights.yaml"


@dataclass(frozen=True)
class DailyInsight:
    title: str
    phase: CyclePhase
    tip: str


@lru_cache
def _load_insights(path: Path = _INSIGHTS_PATH) -> dict[str, dict[str, str]]:
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def daily_insight(phase: CyclePhase, language: Language | str = Language.english) -> DailyInsight:
    """Return today's tip for ``phase`` in ``language``, falling back to English."""
    texts = _load_insights()
    lang = language.value if isinstance(language, Language) else str(language)
    table = texts.get(lang)
    if table is None:
        logger.warning("No insight texts for language %r, using english", lang)
        table = texts[Language.english.value]
    return DailyInsight(
        title=table["title"],
        phase=phase,
        tip=table[phase.name],
    )
