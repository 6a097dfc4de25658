from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .athlete import AthleteResponse


class BidResponse(BaseModel):
    franchise_id: str
    amount: int


class SessionResponse(BaseModel):
    phase: str
    athlete: AthleteResponse | None = None
    current_bid: int
    leader_id: str | None = None
    confirm_price: int | None = None
    next_required_bid: int | None = None
    history: List[BidResponse] = Field(default_factory=list)
    last_sale: dict | None = None


class StartSessionRequest(BaseModel):
    athlete_id: str


class BidRequest(BaseModel):
    franchise_id: str


class FinalizeRequest(BaseModel):
    price: int | None = None


class ScoutingResponse(BaseModel):
    athlete_id: str
    report: str | None
    stale: bool = False


class SyncResponse(BaseModel):
    retained_sold: int
    added: int
    skipped_sold_names: List[str]
    skipped_duplicates: List[str]
    renamed_ids: List[str]
    total_athletes: int
