"""Canonical athlete model shared by the engine, feed adapter and API."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class AthleteStats(BaseModel):
    """Career numbers; only ``matches`` is guaranteed, the rest depend on role."""

    matches: int = Field(..., ge=0)
    runs: Optional[int] = Field(default=None, ge=0)
    wickets: Optional[int] = Field(default=None, ge=0)
    strike_rate: Optional[float] = Field(default=None, ge=0.0)
    economy: Optional[float] = Field(default=None, ge=0.0)
    fifties: Optional[int] = Field(default=None, ge=0)
    thirties: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(frozen=True)


class Athlete(BaseModel):
    """Auctionable athlete plus its sale record.

    ``is_sold`` holds exactly when both ``team_id`` and ``sold_price`` are set.
    Instances are frozen; the ``with_*`` helpers return validated copies.
    """

    athlete_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    country: str = ""
    role: str = ""
    base_price: int = Field(..., ge=0)
    rating: float = Field(default=0.0, ge=0.0, le=100.0)
    stats: Optional[AthleteStats] = None
    original_team: Optional[str] = None
    is_sold: bool = False
    team_id: Optional[str] = None
    sold_price: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_sale_fields(self) -> "Athlete":
        has_sale = self.team_id is not None and self.sold_price is not None
        if self.is_sold != has_sale:
            raise ValueError(
                f"athlete {self.athlete_id!r}: is_sold={self.is_sold} requires "
                "team_id and sold_price to be both set when sold and both unset otherwise"
            )
        if not self.is_sold and (self.team_id is not None or self.sold_price is not None):
            raise ValueError(f"athlete {self.athlete_id!r} carries sale fields while unsold")
        return self

    def _rebuild(self, **changes: Any) -> "Athlete":
        payload = self.model_dump()
        payload.update(changes)
        return type(self).model_validate(payload)

    def with_sale(self, team_id: str, price: int) -> "Athlete":
        return self._rebuild(is_sold=True, team_id=team_id, sold_price=price)

    def with_price(self, price: int) -> "Athlete":
        return self._rebuild(sold_price=price)

    def with_team(self, team_id: str) -> "Athlete":
        return self._rebuild(team_id=team_id)

    def cleared(self) -> "Athlete":
        return self._rebuild(is_sold=False, team_id=None, sold_price=None)

    @property
    def purse_value(self) -> int:
        """Sold price when sold, otherwise the base price."""

        return self.sold_price if self.is_sold and self.sold_price is not None else self.base_price
