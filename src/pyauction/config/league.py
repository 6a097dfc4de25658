"""League rules for supported auction formats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple


@dataclass(frozen=True)
class FranchiseSeed:
    franchise_id: str
    name: str
    color: str


@dataclass(frozen=True)
class LeagueRules:
    key: str
    name: str
    season: int
    franchise_budget: int
    opening_bid: int
    bid_increment: int
    min_squad_size: int
    feed_base_price: int
    keeper_tag: str
    franchises: Tuple[FranchiseSeed, ...]


_FRANCHISE_COLORS: Tuple[str, ...] = (
    "#f97316",
    "#0ea5e9",
    "#facc15",
    "#dc2626",
    "#7c3aed",
    "#2563eb",
    "#db2777",
    "#06b6d4",
    "#1e3a8a",
    "#e11d48",
)


def _numbered_franchises(count: int) -> Tuple[FranchiseSeed, ...]:
    return tuple(
        FranchiseSeed(
            franchise_id=f"f{idx}",
            name=f"Franchise {idx}",
            color=_FRANCHISE_COLORS[(idx - 1) % len(_FRANCHISE_COLORS)],
        )
        for idx in range(1, count + 1)
    )


_LEAGUE_RULES: Dict[str, LeagueRules] = {
    "SPL": LeagueRules(
        key="SPL",
        name="Super Premier League",
        season=2026,
        franchise_budget=5_000,
        opening_bid=50,
        bid_increment=10,
        min_squad_size=11,
        feed_base_price=50,
        keeper_tag="keeper",
        franchises=_numbered_franchises(10),
    ),
    "SPL_MINI": LeagueRules(
        key="SPL_MINI",
        name="Super Premier League (mini auction)",
        season=2026,
        franchise_budget=1_500,
        opening_bid=20,
        bid_increment=5,
        min_squad_size=11,
        feed_base_price=20,
        keeper_tag="keeper",
        franchises=_numbered_franchises(4),
    ),
}

DEFAULT_LEAGUE = "SPL"


def iter_rules() -> Iterable[LeagueRules]:
    """Return an iterator of all configured rule sets."""

    return _LEAGUE_RULES.values()


def get_rules(key: str = DEFAULT_LEAGUE) -> LeagueRules:
    """Fetch rules for a league key, raising KeyError if missing."""

    normalized = key.strip().upper()
    if normalized not in _LEAGUE_RULES:
        raise KeyError(f"No league rules configured for key={key!r}")
    return _LEAGUE_RULES[normalized]


LEAGUE_CONFIG: Mapping[str, LeagueRules] = dict(_LEAGUE_RULES)
