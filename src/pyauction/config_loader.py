"""Persist and load league profiles (custom franchise names, colours, purse)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from pyauction.config import LeagueRules, get_rules
from pyauction.models import Franchise


@dataclass
class LeagueProfile:
    league: str = "SPL"
    franchise_names: Dict[str, str] = field(default_factory=dict)
    franchise_colors: Dict[str, str] = field(default_factory=dict)
    budget: Optional[int] = None

    @classmethod
    def load(cls, path: Path) -> "LeagueProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        budget = data.get("budget")
        if budget is not None and (not isinstance(budget, int) or isinstance(budget, bool) or budget < 0):
            raise ValueError(f"profile budget must be a non-negative integer, got {budget!r}")
        return cls(
            league=data.get("league", "SPL"),
            franchise_names=data.get("franchise_names", {}),
            franchise_colors=data.get("franchise_colors", {}),
            budget=budget,
        )

    def save(self, path: Path) -> None:
        payload = {
            "league": self.league,
            "franchise_names": self.franchise_names,
            "franchise_colors": self.franchise_colors,
            "budget": self.budget,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def rules(self) -> LeagueRules:
        return get_rules(self.league)

    def franchises(self) -> List[Franchise]:
        rules = self.rules()
        budget = self.budget if self.budget is not None else rules.franchise_budget
        return [
            Franchise(
                franchise_id=seed.franchise_id,
                name=self.franchise_names.get(seed.franchise_id, seed.name),
                color=self.franchise_colors.get(seed.franchise_id, seed.color),
                initial_budget=budget,
                budget=budget,
                roster=[],
            )
            for seed in rules.franchises
        ]
