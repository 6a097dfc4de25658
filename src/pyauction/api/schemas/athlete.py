from __future__ import annotations

from pydantic import BaseModel


class AthleteStatsResponse(BaseModel):
    matches: int
    runs: int | None = None
    wickets: int | None = None
    strike_rate: float | None = None
    economy: float | None = None
    fifties: int | None = None
    thirties: int | None = None


class AthleteResponse(BaseModel):
    athlete_id: str
    name: str
    country: str
    role: str
    badge: str
    base_price: int
    rating: float
    original_team: str | None
    stats: AthleteStatsResponse | None
    is_sold: bool
    team_id: str | None
    sold_price: int | None
    purse_value: int


class PriceRequest(BaseModel):
    price: int


class TradeRequest(BaseModel):
    franchise_id: str
