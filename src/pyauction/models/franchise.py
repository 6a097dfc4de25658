"""Franchise model: purse plus the denormalised roster of acquired athletes."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from pyauction.models.athlete import Athlete


class Franchise(BaseModel):
    franchise_id: str = Field(..., min_length=1)
    name: str
    color: str = "#64748b"
    initial_budget: int = Field(..., ge=0)
    budget: int
    roster: List[Athlete] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def spent(self) -> int:
        return sum(athlete.sold_price or 0 for athlete in self.roster)

    def roster_entry(self, athlete_id: str) -> Optional[Athlete]:
        for athlete in self.roster:
            if athlete.athlete_id == athlete_id:
                return athlete
        return None

    def holds(self, athlete_id: str) -> bool:
        return self.roster_entry(athlete_id) is not None

    def can_afford(self, amount: int) -> bool:
        return self.budget >= amount
