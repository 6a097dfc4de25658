"""Roster Store and Franchise Store, held together as one immutable snapshot."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from pyauction.errors import InconsistentStateError, UnknownEntity
from pyauction.models.athlete import Athlete
from pyauction.models.franchise import Franchise


class AuctionState(BaseModel):
    """Canonical athletes plus franchises.

    The athlete list is the source of truth for sale records; franchise rosters
    are copies that must stay field-equal to it.
    """

    athletes: List[Athlete] = Field(default_factory=list)
    franchises: List[Franchise] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def find_athlete(self, athlete_id: str) -> Optional[Athlete]:
        for athlete in self.athletes:
            if athlete.athlete_id == athlete_id:
                return athlete
        return None

    def athlete(self, athlete_id: str) -> Athlete:
        athlete = self.find_athlete(athlete_id)
        if athlete is None:
            raise UnknownEntity(f"Unknown athlete: {athlete_id}", details={"athlete_id": athlete_id})
        return athlete

    def find_franchise(self, franchise_id: str) -> Optional[Franchise]:
        for franchise in self.franchises:
            if franchise.franchise_id == franchise_id:
                return franchise
        return None

    def franchise(self, franchise_id: str) -> Franchise:
        franchise = self.find_franchise(franchise_id)
        if franchise is None:
            raise UnknownEntity(
                f"Unknown franchise: {franchise_id}", details={"franchise_id": franchise_id}
            )
        return franchise

    def available(self) -> List[Athlete]:
        return [athlete for athlete in self.athletes if not athlete.is_sold]

    def sold(self) -> List[Athlete]:
        return [athlete for athlete in self.athletes if athlete.is_sold]

    def total_initial_budget(self) -> int:
        return sum(franchise.initial_budget for franchise in self.franchises)

    def total_budget(self) -> int:
        return sum(franchise.budget for franchise in self.franchises)

    def total_committed(self) -> int:
        return sum(athlete.sold_price or 0 for athlete in self.sold())

    def check_invariants(self) -> None:
        """
        Validate store consistency.

        Raises:
            InconsistentStateError: If money is not conserved, a roster copy
                drifted from its canonical athlete, or ids are duplicated.
        """
        athlete_ids = [athlete.athlete_id for athlete in self.athletes]
        if len(set(athlete_ids)) != len(athlete_ids):
            raise InconsistentStateError("Duplicate athlete ids in roster store")
        franchise_ids = [franchise.franchise_id for franchise in self.franchises]
        if len(set(franchise_ids)) != len(franchise_ids):
            raise InconsistentStateError("Duplicate franchise ids in franchise store")

        if self.total_budget() + self.total_committed() != self.total_initial_budget():
            raise InconsistentStateError(
                f"Money mismatch: budgets {self.total_budget()} + committed "
                f"{self.total_committed()} != initial {self.total_initial_budget()}"
            )

        rostered: dict[str, str] = {}
        for franchise in self.franchises:
            if franchise.budget != franchise.initial_budget - franchise.spent():
                raise InconsistentStateError(
                    f"Franchise {franchise.franchise_id} budget {franchise.budget} does not match "
                    f"{franchise.initial_budget} - {franchise.spent()}"
                )
            for copy in franchise.roster:
                if copy.athlete_id in rostered:
                    raise InconsistentStateError(
                        f"Athlete {copy.athlete_id} appears on rosters "
                        f"{rostered[copy.athlete_id]} and {franchise.franchise_id}"
                    )
                rostered[copy.athlete_id] = franchise.franchise_id
                canonical = self.find_athlete(copy.athlete_id)
                if canonical is None or canonical != copy:
                    raise InconsistentStateError(
                        f"Roster copy of {copy.athlete_id} on {franchise.franchise_id} "
                        "differs from the canonical record"
                    )

        for athlete in self.sold():
            if rostered.get(athlete.athlete_id) != athlete.team_id:
                raise InconsistentStateError(
                    f"Sold athlete {athlete.athlete_id} is not on the roster of {athlete.team_id}"
                )
