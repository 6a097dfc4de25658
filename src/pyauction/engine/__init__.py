"""Auction engine: bidding sessions, settlement and qualification."""

from .settlement import SaleEvent, apply_price_edit, apply_sale, apply_trade, reset, settle
from .bidding import (
    Bid,
    BiddingSession,
    SessionPhase,
    draw_next,
    finalize,
    place_bid,
    skip,
    stage_price,
    start_session,
)
from .qualification import (
    QualificationReport,
    QualificationStatus,
    RoleClassifier,
    evaluate,
    evaluate_all,
)

__all__ = [
    "SaleEvent",
    "apply_price_edit",
    "apply_sale",
    "apply_trade",
    "reset",
    "settle",
    "Bid",
    "BiddingSession",
    "SessionPhase",
    "draw_next",
    "finalize",
    "place_bid",
    "skip",
    "stage_price",
    "start_session",
    "QualificationReport",
    "QualificationStatus",
    "RoleClassifier",
    "evaluate",
    "evaluate_all",
]
