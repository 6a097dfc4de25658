"""Squad qualification, derived on demand from a franchise's roster."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Mapping, Optional, Tuple

from pyauction.config import LeagueRules, get_rules
from pyauction.models import AuctionState, Franchise


DEFAULT_ROLE_KEYWORDS: Mapping[str, Tuple[str, ...]] = {
    "keeper": ("wk", "keeper"),
    "all_rounder": ("all-rounder", "allrounder", "all rounder"),
    "batter": ("bat",),
    "bowler": ("bowl",),
}


class QualificationStatus(str, Enum):
    QUALIFIED = "QUALIFIED"
    DISQUALIFIED = "DISQUALIFIED"
    PENDING = "PENDING"


@dataclass(frozen=True)
class RoleClassifier:
    """Keyword classifier over free-text role labels (case-insensitive substrings)."""

    keywords: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_ROLE_KEYWORDS))

    def tags(self, label: str) -> FrozenSet[str]:
        text = (label or "").lower()
        return frozenset(
            tag for tag, needles in self.keywords.items() if any(needle in text for needle in needles)
        )

    def has_tag(self, label: str, tag: str) -> bool:
        return tag in self.tags(label)

    def badge(self, label: str) -> str:
        """Single display tag; keeper wins over batter for labels like 'WK-Batter'."""

        tags = self.tags(label)
        for tag in self.keywords:
            if tag in tags:
                return tag
        return "other"


@dataclass(frozen=True)
class QualificationReport:
    franchise_id: str
    squad_size: int
    budget: int
    has_required_role: bool
    meets_size: bool
    status: QualificationStatus


def evaluate(
    franchise: Franchise,
    rules: Optional[LeagueRules] = None,
    classifier: Optional[RoleClassifier] = None,
) -> QualificationReport:
    rules = rules or get_rules()
    classifier = classifier or RoleClassifier()
    has_required_role = any(classifier.has_tag(athlete.role, rules.keeper_tag) for athlete in franchise.roster)
    meets_size = len(franchise.roster) >= rules.min_squad_size

    if has_required_role and meets_size:
        status = QualificationStatus.QUALIFIED
    elif franchise.budget <= 0:
        status = QualificationStatus.DISQUALIFIED
    else:
        status = QualificationStatus.PENDING

    return QualificationReport(
        franchise_id=franchise.franchise_id,
        squad_size=len(franchise.roster),
        budget=franchise.budget,
        has_required_role=has_required_role,
        meets_size=meets_size,
        status=status,
    )


def evaluate_all(
    state: AuctionState,
    rules: Optional[LeagueRules] = None,
    classifier: Optional[RoleClassifier] = None,
) -> List[QualificationReport]:
    return [evaluate(franchise, rules, classifier) for franchise in state.franchises]
