"""Per-athlete bidding session.

The session is a frozen value threaded through the functions below; nothing
is stored globally. A rejected call raises and the caller keeps its previous
session, which is how a refused bid leaves the auction floor unchanged.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from pyauction.config import LeagueRules, get_rules
from pyauction.engine.settlement import SaleEvent
from pyauction.errors import (
    AlreadySold,
    InsufficientFunds,
    PoolExhausted,
    SelfBid,
    SessionStateError,
    UnknownEntity,
    require_amount,
)
from pyauction.models import Athlete, AuctionState, Franchise


logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    IDLE = "IDLE"
    OPEN = "OPEN"


@dataclass(frozen=True)
class Bid:
    franchise_id: str
    amount: int


@dataclass(frozen=True)
class BiddingSession:
    phase: SessionPhase = SessionPhase.IDLE
    athlete_id: Optional[str] = None
    current_bid: int = 0
    leader_id: Optional[str] = None
    confirm_price: Optional[int] = None
    opening_bid: int = 50
    bid_increment: int = 10
    history: Tuple[Bid, ...] = field(default_factory=tuple)

    @classmethod
    def idle(cls, rules: Optional[LeagueRules] = None) -> "BiddingSession":
        rules = rules or get_rules()
        return cls(opening_bid=rules.opening_bid, bid_increment=rules.bid_increment)

    @property
    def is_open(self) -> bool:
        return self.phase is SessionPhase.OPEN

    def next_required_bid(self) -> int:
        """Amount the next bidder must commit; the first bid claims the floor."""

        if self.leader_id is None:
            return self.current_bid
        return self.current_bid + self.bid_increment

    def can_bid(self, franchise: Franchise) -> bool:
        return (
            self.is_open
            and franchise.franchise_id != self.leader_id
            and franchise.budget >= self.next_required_bid()
        )


def _closed(session: BiddingSession) -> BiddingSession:
    return BiddingSession(opening_bid=session.opening_bid, bid_increment=session.bid_increment)


def _require_open(session: BiddingSession) -> None:
    if not session.is_open:
        raise SessionStateError("No athlete is on the block")


def _lookup(franchises: Sequence[Franchise], franchise_id: str) -> Franchise:
    for franchise in franchises:
        if franchise.franchise_id == franchise_id:
            return franchise
    raise UnknownEntity(f"Unknown franchise: {franchise_id}", details={"franchise_id": franchise_id})


def start_session(session: BiddingSession, athlete: Athlete) -> BiddingSession:
    """Put ``athlete`` on the block at the opening bid."""

    if session.is_open:
        raise SessionStateError(
            f"Bidding for {session.athlete_id} is still open",
            details={"athlete_id": session.athlete_id},
        )
    if athlete.is_sold:
        raise AlreadySold(f"{athlete.name} has already been sold", details={"athlete_id": athlete.athlete_id})
    logger.debug("Opened bidding for %s at %s", athlete.name, session.opening_bid)
    return replace(
        _closed(session),
        phase=SessionPhase.OPEN,
        athlete_id=athlete.athlete_id,
        current_bid=session.opening_bid,
        confirm_price=session.opening_bid,
    )


def draw_next(
    session: BiddingSession,
    state: AuctionState,
    rng: Optional[random.Random] = None,
) -> BiddingSession:
    """Open bidding on a random unsold athlete."""

    pool = state.available()
    if not pool:
        raise PoolExhausted("No athletes left in the pool")
    chooser = rng or random
    return start_session(session, chooser.choice(pool))


def place_bid(
    session: BiddingSession,
    franchises: Sequence[Franchise],
    franchise_id: str,
) -> BiddingSession:
    """
    Register a bid from ``franchise_id`` at the next required amount.

    Raises:
        SessionStateError: If no athlete is on the block
        UnknownEntity: If the franchise does not exist
        SelfBid: If the franchise already leads
        InsufficientFunds: If the franchise cannot cover the next amount
    """
    _require_open(session)
    franchise = _lookup(franchises, franchise_id)
    if session.leader_id == franchise_id:
        raise SelfBid(f"{franchise.name} is already leading", details={"franchise_id": franchise_id})

    amount = session.next_required_bid()
    if franchise.budget < amount:
        raise InsufficientFunds(
            f"{franchise.name} doesn't have the funds ({franchise.budget}) for a {amount} bid",
            details={"franchise_id": franchise_id, "budget": franchise.budget, "amount": amount},
        )

    return replace(
        session,
        current_bid=amount,
        leader_id=franchise_id,
        confirm_price=amount,
        history=(*session.history, Bid(franchise_id=franchise_id, amount=amount)),
    )


def stage_price(session: BiddingSession, price: int) -> BiddingSession:
    """Operator override of the price that ``finalize`` will commit."""

    _require_open(session)
    return replace(session, confirm_price=require_amount(price))


def finalize(
    session: BiddingSession,
    franchises: Sequence[Franchise],
    price_override: Optional[int] = None,
) -> Tuple[BiddingSession, SaleEvent]:
    """
    Close the session with a sale to the leading franchise.

    Uses ``price_override`` when given, otherwise the staged confirm price.

    Returns:
        The idle session and the sale event to settle.
    """
    _require_open(session)
    if session.leader_id is None or session.athlete_id is None:
        raise SessionStateError("Cannot finalize without a leading bid")

    price = price_override if price_override is not None else session.confirm_price
    price = require_amount(price)
    leader = _lookup(franchises, session.leader_id)
    if leader.budget < price:
        raise InsufficientFunds(
            f"{leader.name} cannot afford {price} (budget {leader.budget})",
            details={"franchise_id": leader.franchise_id, "budget": leader.budget, "price": price},
        )

    event = SaleEvent(athlete_id=session.athlete_id, franchise_id=leader.franchise_id, price=price)
    logger.info("Hammer: %s to %s for %s", event.athlete_id, leader.name, price)
    return _closed(session), event


def skip(session: BiddingSession) -> BiddingSession:
    """Withdraw the athlete on the block; it stays unsold in the pool."""

    _require_open(session)
    logger.debug("Skipped %s", session.athlete_id)
    return _closed(session)


__all__ = [
    "Bid",
    "BiddingSession",
    "SessionPhase",
    "draw_next",
    "finalize",
    "place_bid",
    "skip",
    "stage_price",
    "start_session",
]
