"""Gemini-backed athlete feed and scouting reports."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Sequence

import google.generativeai as genai

from pyauction.config import LeagueRules, get_rules
from pyauction.errors import FeedError
from pyauction.ingest.feed import parse_feed_payload, rows_to_athletes
from pyauction.models import Athlete, Franchise


logger = logging.getLogger(__name__)

DEFAULT_FEED_MODEL = "gemini-3-pro-preview"
DEFAULT_SCOUTING_MODEL = "gemini-3-flash-preview"
SCOUTING_FALLBACK = "The scouting engine is offline. Use your instinct."
EMPTY_REPORT = "Report unavailable."

ModelFactory = Callable[[str], Any]


def resolve_api_key() -> Optional[str]:
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def _extract_text_from_gemini_response(resp: Any) -> str:
    text = getattr(resp, "text", None)
    if text:
        return text

    try:
        parts = resp.candidates[0].content.parts
        texts = [t for t in (getattr(p, "text", None) for p in parts) if t]
        if texts:
            return "\n".join(texts)
    except (AttributeError, IndexError, TypeError):
        logger.warning("Unexpected Gemini response shape: %s", type(resp).__name__)

    return ""


def _strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else ""
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3]
    return cleaned.strip()


def _feed_prompt(rules: LeagueRules) -> str:
    return (
        f"List the real players signed by the franchises of the {rules.name} {rules.season} season. "
        "Return ONLY a JSON array. Each element must be an object with keys: "
        '"id" (string), "name", "country", "skill" (one of Batter, Bowler, All-Rounder, WK-Batter), '
        '"rating" (0-100), "originalTeam", and "stats" with "matches", "runs", "wickets", '
        '"strikeRate", "economy", "fifties", "thirties".'
    )


def _format_stats(athlete: Athlete) -> str:
    stats = athlete.stats
    if stats is None:
        return "no stats on record"
    pieces = [f"{stats.matches} matches"]
    if stats.runs is not None:
        pieces.append(f"{stats.runs} runs")
    if stats.strike_rate is not None:
        pieces.append(f"SR {stats.strike_rate}")
    if stats.wickets is not None:
        pieces.append(f"{stats.wickets} wickets")
    if stats.economy is not None:
        pieces.append(f"economy {stats.economy}")
    return ", ".join(pieces)


def _scouting_prompt(athlete: Athlete, franchises: Sequence[Franchise]) -> str:
    standings = "\n".join(
        f"- {franchise.name}: budget {franchise.budget}, squad {len(franchise.roster)}"
        for franchise in franchises
    )
    return (
        f"You are an auction analyst. {athlete.name} ({athlete.role}, {athlete.country or 'unknown country'}, "
        f"rating {athlete.rating:g}) is on the block with {_format_stats(athlete)}.\n"
        f"Franchises:\n{standings}\n"
        "In at most three sentences, say which franchise needs this player most and a fair price."
    )


class AthleteOracle:
    """Remote source of athlete data and per-athlete scouting text.

    ``model_factory`` builds a model object exposing ``generate_content``; it
    defaults to configuring :mod:`google.generativeai` with ``api_key``.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        feed_model: str = DEFAULT_FEED_MODEL,
        scouting_model: str = DEFAULT_SCOUTING_MODEL,
        rules: Optional[LeagueRules] = None,
        model_factory: Optional[ModelFactory] = None,
    ) -> None:
        self.api_key = api_key or resolve_api_key()
        self.feed_model = feed_model
        self.scouting_model = scouting_model
        self.rules = rules or get_rules()
        self._model_factory = model_factory or self._gemini_model
        self._models: Dict[str, Any] = {}

    def _gemini_model(self, name: str) -> Any:
        if not self.api_key:
            raise FeedError("No Gemini API key configured (set GEMINI_API_KEY)")
        genai.configure(api_key=self.api_key)
        return genai.GenerativeModel(name)

    def _model(self, name: str) -> Any:
        if name not in self._models:
            self._models[name] = self._model_factory(name)
        return self._models[name]

    def fetch_athletes(self) -> List[Athlete]:
        """
        Ask the model for the current season's athletes.

        Raises:
            FeedError: On transport failure, malformed JSON or an empty list
        """
        try:
            resp = self._model(self.feed_model).generate_content(
                _feed_prompt(self.rules),
                generation_config={"response_mime_type": "application/json"},
            )
            text = _strip_code_fence(_extract_text_from_gemini_response(resp))
            payload = json.loads(text or "[]")
        except FeedError:
            raise
        except Exception as exc:
            logger.warning("Athlete feed request failed: %s", exc, exc_info=True)
            raise FeedError(f"Athlete feed unavailable: {exc}") from exc

        rows, _rejected = parse_feed_payload(payload)
        athletes = rows_to_athletes(rows, self.rules)
        logger.info("Fetched %d athletes from %s", len(athletes), self.feed_model)
        return athletes

    def scouting_report(self, athlete: Athlete, franchises: Sequence[Franchise]) -> str:
        """Short analysis of ``athlete``; never raises."""

        try:
            resp = self._model(self.scouting_model).generate_content(
                _scouting_prompt(athlete, franchises)
            )
            text = _extract_text_from_gemini_response(resp).strip()
        except Exception as exc:
            logger.warning("Scouting report for %s failed: %s", athlete.athlete_id, exc)
            return SCOUTING_FALLBACK
        return text or EMPTY_REPORT


__all__ = [
    "AthleteOracle",
    "EMPTY_REPORT",
    "SCOUTING_FALLBACK",
    "resolve_api_key",
]
