"""State transitions that settle sales, price edits and trades.

Every function takes an :class:`AuctionState` and returns a new one. Updated
athletes and franchises are built as full replacement values and swapped in
together, so a rejected operation leaves the caller's state untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from pyauction.errors import (
    AlreadySold,
    DuplicateTarget,
    InconsistentStateError,
    InsufficientFunds,
    NotSold,
    require_amount,
)
from pyauction.models import Athlete, AuctionState, Franchise


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaleEvent:
    """Terminal output of a bidding session."""

    athlete_id: str
    franchise_id: str
    price: int


def _replace_athlete(athletes: Sequence[Athlete], updated: Athlete) -> List[Athlete]:
    return [updated if athlete.athlete_id == updated.athlete_id else athlete for athlete in athletes]


def _replace_franchises(franchises: Sequence[Franchise], *updated: Franchise) -> List[Franchise]:
    by_id = {franchise.franchise_id: franchise for franchise in updated}
    return [by_id.get(franchise.franchise_id, franchise) for franchise in franchises]


def _commit(athletes: List[Athlete], franchises: List[Franchise]) -> AuctionState:
    new_state = AuctionState(athletes=athletes, franchises=franchises)
    try:
        new_state.check_invariants()
    except InconsistentStateError as exc:
        logger.error("Invariant check failed, keeping previous state: %s", exc)
        raise
    return new_state


def apply_sale(state: AuctionState, athlete_id: str, franchise_id: str, price: int) -> AuctionState:
    """
    Mark an athlete sold to a franchise and debit its purse.

    Raises:
        UnknownEntity: If the athlete or franchise does not exist
        AlreadySold: If the athlete has already been sold
        InvalidAmount: If ``price`` is not a non-negative integer
        InsufficientFunds: If the franchise cannot cover ``price``
    """
    price = require_amount(price)
    athlete = state.athlete(athlete_id)
    franchise = state.franchise(franchise_id)

    if athlete.is_sold:
        raise AlreadySold(
            f"{athlete.name} was already sold to {athlete.team_id} for {athlete.sold_price}",
            details={"athlete_id": athlete_id, "team_id": athlete.team_id},
        )
    if not franchise.can_afford(price):
        raise InsufficientFunds(
            f"{franchise.name} cannot afford {price} (budget {franchise.budget})",
            details={"franchise_id": franchise_id, "budget": franchise.budget, "price": price},
        )

    sold = athlete.with_sale(franchise_id, price)
    buyer = franchise.model_copy(
        update={
            "budget": franchise.budget - price,
            "roster": [*franchise.roster, sold],
        }
    )
    new_state = _commit(
        _replace_athlete(state.athletes, sold),
        _replace_franchises(state.franchises, buyer),
    )
    logger.debug("Sold %s to %s for %s (budget %s)", athlete.name, franchise.name, price, buyer.budget)
    return new_state


def settle(state: AuctionState, event: SaleEvent) -> AuctionState:
    """Apply a sale event produced by a bidding session."""

    return apply_sale(state, event.athlete_id, event.franchise_id, event.price)


def apply_price_edit(state: AuctionState, athlete_id: str, new_price: int) -> AuctionState:
    """
    Correct the sale price of a sold athlete.

    The owning franchise absorbs ``new_price - old_price``; a decrease refunds it.

    Raises:
        NotSold: If the athlete is not sold
        InsufficientFunds: If the owner cannot absorb the increase
    """
    new_price = require_amount(new_price)
    athlete = state.athlete(athlete_id)
    if not athlete.is_sold or athlete.team_id is None or athlete.sold_price is None:
        raise NotSold(f"{athlete.name} has not been sold", details={"athlete_id": athlete_id})

    owner = state.franchise(athlete.team_id)
    delta = new_price - athlete.sold_price
    if owner.budget < delta:
        raise InsufficientFunds(
            f"{owner.name} has insufficient funds to raise {athlete.name} to {new_price}",
            details={"franchise_id": owner.franchise_id, "budget": owner.budget, "delta": delta},
        )

    repriced = athlete.with_price(new_price)
    updated_owner = owner.model_copy(
        update={
            "budget": owner.budget - delta,
            "roster": [repriced if entry.athlete_id == athlete_id else entry for entry in owner.roster],
        }
    )
    new_state = _commit(
        _replace_athlete(state.athletes, repriced),
        _replace_franchises(state.franchises, updated_owner),
    )
    logger.debug("Repriced %s: %s -> %s", athlete.name, athlete.sold_price, new_price)
    return new_state


def apply_trade(state: AuctionState, athlete_id: str, target_franchise_id: str) -> AuctionState:
    """
    Move a sold athlete to another franchise at the same price.

    Raises:
        NotSold: If the athlete is not sold
        DuplicateTarget: If the target already owns the athlete
        InsufficientFunds: If the target cannot cover the sale price
    """
    athlete = state.athlete(athlete_id)
    if not athlete.is_sold or athlete.team_id is None or athlete.sold_price is None:
        raise NotSold(f"{athlete.name} has not been sold", details={"athlete_id": athlete_id})
    target = state.franchise(target_franchise_id)
    if target.franchise_id == athlete.team_id:
        raise DuplicateTarget(
            f"{athlete.name} already belongs to {target.name}",
            details={"athlete_id": athlete_id, "franchise_id": target_franchise_id},
        )

    price = athlete.sold_price
    if not target.can_afford(price):
        raise InsufficientFunds(
            f"{target.name} cannot afford {price}",
            details={"franchise_id": target.franchise_id, "budget": target.budget, "price": price},
        )

    source = state.franchise(athlete.team_id)
    moved = athlete.with_team(target.franchise_id)
    updated_source = source.model_copy(
        update={
            "budget": source.budget + price,
            "roster": [entry for entry in source.roster if entry.athlete_id != athlete_id],
        }
    )
    updated_target = target.model_copy(
        update={
            "budget": target.budget - price,
            "roster": [*target.roster, moved],
        }
    )
    new_state = _commit(
        _replace_athlete(state.athletes, moved),
        _replace_franchises(state.franchises, updated_source, updated_target),
    )
    logger.debug("Traded %s from %s to %s for %s", athlete.name, source.name, target.name, price)
    return new_state


def reset(state: AuctionState) -> AuctionState:
    """Clear every sale and restore every franchise to its full purse."""

    athletes = [athlete.cleared() for athlete in state.athletes]
    franchises = [
        franchise.model_copy(update={"budget": franchise.initial_budget, "roster": []})
        for franchise in state.franchises
    ]
    logger.info("Reset %d athletes and %d franchises", len(athletes), len(franchises))
    return AuctionState(athletes=athletes, franchises=franchises)


__all__ = [
    "SaleEvent",
    "apply_sale",
    "apply_price_edit",
    "apply_trade",
    "reset",
    "settle",
]
