"""Normalise untrusted athlete-feed payloads and merge them into the roster."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Tuple

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator
from pydantic.config import ConfigDict

from pyauction.config import LeagueRules, get_rules
from pyauction.errors import FeedError
from pyauction.models import Athlete, AthleteStats, AuctionState, Franchise


logger = logging.getLogger(__name__)


class FeedAthleteRow(BaseModel):
    """One athlete as returned by the feed. Sale fields and prices are ignored."""

    raw_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("id", "athlete_id"))
    name: str = Field(..., min_length=1)
    role: str = Field(default="", validation_alias=AliasChoices("skill", "role"))
    country: str = ""
    rating: float = 0.0
    original_team: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("originalTeam", "original_team")
    )
    stats: Any = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("raw_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("name", "role", "country", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("rating", mode="before")
    @classmethod
    def _clamp_rating(cls, value: Any) -> float:
        try:
            rating = float(value)
        except (TypeError, ValueError):
            return 0.0
        return max(0.0, min(100.0, rating))

    def parsed_stats(self) -> Optional[AthleteStats]:
        if not isinstance(self.stats, dict) or not self.stats:
            return None
        data = {
            "matches": self.stats.get("matches"),
            "runs": self.stats.get("runs"),
            "wickets": self.stats.get("wickets"),
            "strike_rate": self.stats.get("strikeRate", self.stats.get("strike_rate")),
            "economy": self.stats.get("economy"),
            "fifties": self.stats.get("fifties"),
            "thirties": self.stats.get("thirties"),
        }
        try:
            return AthleteStats.model_validate(data)
        except ValidationError:
            logger.debug("Dropping malformed stats for %s: %s", self.name, self.stats)
            return None


def parse_feed_payload(payload: Any) -> Tuple[List[FeedAthleteRow], List[str]]:
    """
    Validate a decoded feed payload.

    Returns:
        Parsed rows and a list of descriptions for rows that were rejected.

    Raises:
        FeedError: If the payload is not a non-empty list or no row is usable
    """
    if not isinstance(payload, list):
        raise FeedError(f"Feed returned {type(payload).__name__}, expected a list of athletes")
    if not payload:
        raise FeedError("No athlete data retrieved")

    rows: List[FeedAthleteRow] = []
    rejected: List[str] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            rejected.append(f"#{index}: not an object")
            continue
        try:
            rows.append(FeedAthleteRow.model_validate(item))
        except ValidationError as exc:
            rejected.append(f"#{index}: {exc.error_count()} validation error(s)")
    if not rows:
        raise FeedError("Feed returned no usable athlete records", details={"rejected": rejected})
    if rejected:
        logger.warning("Skipped %d malformed feed rows", len(rejected))
    return rows, rejected


def rows_to_athletes(rows: Sequence[FeedAthleteRow], rules: Optional[LeagueRules] = None) -> List[Athlete]:
    rules = rules or get_rules()
    athletes: List[Athlete] = []
    for index, row in enumerate(rows):
        athletes.append(
            Athlete(
                athlete_id=row.raw_id or f"p-{rules.season}-{index}",
                name=row.name,
                country=row.country,
                role=row.role,
                base_price=rules.feed_base_price,
                rating=row.rating,
                stats=row.parsed_stats(),
                original_team=row.original_team,
            )
        )
    return athletes


def _name_key(name: str) -> str:
    return " ".join(name.split()).casefold()


@dataclass(frozen=True)
class FeedMergeReport:
    retained_sold: int
    added: int
    skipped_sold_names: List[str]
    skipped_duplicates: List[str]
    renamed_ids: List[str]


def merge_incoming(
    existing: Sequence[Athlete],
    incoming: Iterable[Athlete],
    rules: Optional[LeagueRules] = None,
) -> Tuple[List[Athlete], FeedMergeReport]:
    """
    Replace the unsold pool with ``incoming`` while keeping sold athletes intact.

    Sold athletes come first, unchanged. Incoming athletes whose name matches a
    sold athlete are dropped; the rest are forced unsold at the feed base price.
    """
    rules = rules or get_rules()
    sold = [athlete for athlete in existing if athlete.is_sold]
    excluded_names = {_name_key(athlete.name) for athlete in sold}
    taken_ids = {athlete.athlete_id for athlete in sold}

    added: List[Athlete] = []
    skipped_sold: List[str] = []
    skipped_duplicates: List[str] = []
    renamed: List[str] = []
    seen_names: set[str] = set()

    for athlete in incoming:
        key = _name_key(athlete.name)
        if key in excluded_names:
            skipped_sold.append(athlete.name)
            continue
        if key in seen_names:
            skipped_duplicates.append(athlete.name)
            continue
        seen_names.add(key)

        athlete_id = athlete.athlete_id
        if athlete_id in taken_ids:
            suffix = 2
            while f"{athlete_id}-{suffix}" in taken_ids:
                suffix += 1
            renamed.append(athlete_id)
            athlete_id = f"{athlete_id}-{suffix}"
        taken_ids.add(athlete_id)

        normalized = athlete.cleared().model_dump()
        normalized.update(athlete_id=athlete_id, base_price=rules.feed_base_price)
        added.append(Athlete.model_validate(normalized))

    report = FeedMergeReport(
        retained_sold=len(sold),
        added=len(added),
        skipped_sold_names=skipped_sold,
        skipped_duplicates=skipped_duplicates,
        renamed_ids=renamed,
    )
    return [*sold, *added], report


class AthleteSource(Protocol):
    def fetch_athletes(self) -> List[Athlete]:
        ...


class ScoutingSource(AthleteSource, Protocol):
    def scouting_report(self, athlete: Athlete, franchises: Sequence[Franchise]) -> str:
        ...


def fetch_incoming(source: AthleteSource) -> List[Athlete]:
    incoming = source.fetch_athletes()
    if not incoming:
        raise FeedError("No athlete data retrieved")
    return incoming


def apply_incoming(
    state: AuctionState,
    incoming: Sequence[Athlete],
    rules: Optional[LeagueRules] = None,
) -> Tuple[AuctionState, FeedMergeReport]:
    """Merge already fetched athletes into ``state``."""

    athletes, report = merge_incoming(state.athletes, incoming, rules)
    new_state = AuctionState(athletes=athletes, franchises=state.franchises)
    new_state.check_invariants()
    logger.info(
        "Feed sync: kept %d sold, added %d, skipped %d sold names",
        report.retained_sold,
        report.added,
        len(report.skipped_sold_names),
    )
    return new_state, report


def sync_feed(
    state: AuctionState,
    source: AthleteSource,
    rules: Optional[LeagueRules] = None,
) -> Tuple[AuctionState, FeedMergeReport]:
    """Fetch fresh athletes and merge them; on any feed failure the state is untouched."""

    return apply_incoming(state, fetch_incoming(source), rules)
