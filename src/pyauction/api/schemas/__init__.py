"""Pydantic models for API I/O."""

from .athlete import AthleteResponse, AthleteStatsResponse, PriceRequest, TradeRequest
from .franchise import FranchiseResponse, QualificationResponse
from .session import (
    BidRequest,
    BidResponse,
    FinalizeRequest,
    ScoutingResponse,
    SessionResponse,
    StartSessionRequest,
    SyncResponse,
)

__all__ = [
    "AthleteResponse",
    "AthleteStatsResponse",
    "PriceRequest",
    "TradeRequest",
    "FranchiseResponse",
    "QualificationResponse",
    "BidRequest",
    "BidResponse",
    "FinalizeRequest",
    "ScoutingResponse",
    "SessionResponse",
    "StartSessionRequest",
    "SyncResponse",
]
