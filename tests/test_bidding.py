import random

import pytest

from pyauction.config import create_initial_state, get_rules
from pyauction.engine import (
    BiddingSession,
    SessionPhase,
    apply_sale,
    draw_next,
    finalize,
    place_bid,
    settle,
    skip,
    stage_price,
    start_session,
)
from pyauction.errors import (
    AlreadySold,
    InsufficientFunds,
    InvalidAmount,
    PoolExhausted,
    SelfBid,
    SessionStateError,
    UnknownEntity,
)
from pyauction.models import AuctionState


@pytest.fixture
def state() -> AuctionState:
    return create_initial_state(get_rules("SPL"))


@pytest.fixture
def session(state: AuctionState) -> BiddingSession:
    return start_session(BiddingSession.idle(get_rules("SPL")), state.athlete("p1"))


def test_start_session_opens_at_opening_bid(session: BiddingSession):
    assert session.phase is SessionPhase.OPEN
    assert session.athlete_id == "p1"
    assert session.current_bid == 50
    assert session.leader_id is None
    assert session.confirm_price == 50
    assert session.history == ()


def test_start_session_rejects_sold_athlete_and_open_session(state: AuctionState, session: BiddingSession):
    sold = apply_sale(state, "p2", "f1", 50)
    with pytest.raises(AlreadySold):
        start_session(BiddingSession.idle(), sold.athlete("p2"))
    with pytest.raises(SessionStateError):
        start_session(session, state.athlete("p3"))


def test_first_bid_claims_the_floor(state: AuctionState, session: BiddingSession):
    assert session.next_required_bid() == 50
    bid = place_bid(session, state.franchises, "f1")
    assert bid.current_bid == 50
    assert bid.leader_id == "f1"
    assert bid.confirm_price == 50


def test_bid_escalation(state: AuctionState, session: BiddingSession):
    after_g = place_bid(session, state.franchises, "f7")
    assert after_g.current_bid == 50 and after_g.leader_id == "f7"

    after_f = place_bid(after_g, state.franchises, "f6")
    assert after_f.current_bid == 60
    assert after_f.leader_id == "f6"
    assert [(b.franchise_id, b.amount) for b in after_f.history] == [("f7", 50), ("f6", 60)]


def test_leader_cannot_outbid_itself(state: AuctionState, session: BiddingSession):
    leading = place_bid(session, state.franchises, "f1")
    with pytest.raises(SelfBid):
        place_bid(leading, state.franchises, "f1")
    assert leading.current_bid == 50
    assert not leading.can_bid(state.franchise("f1"))
    assert leading.can_bid(state.franchise("f2"))


def test_bid_rejected_when_budget_too_small(state: AuctionState, session: BiddingSession):
    poor = apply_sale(state, "p2", "f2", 4_955)
    leading = place_bid(session, poor.franchises, "f1")
    assert leading.next_required_bid() == 60
    with pytest.raises(InsufficientFunds):
        place_bid(leading, poor.franchises, "f2")


def test_bid_rejections_without_session_or_franchise(state: AuctionState, session: BiddingSession):
    with pytest.raises(SessionStateError):
        place_bid(BiddingSession.idle(), state.franchises, "f1")
    with pytest.raises(UnknownEntity):
        place_bid(session, state.franchises, "f404")


def test_finalize_uses_confirm_price_and_settles(state: AuctionState, session: BiddingSession):
    bidding = place_bid(place_bid(session, state.franchises, "f1"), state.franchises, "f2")
    idle, event = finalize(bidding, state.franchises)

    assert idle.phase is SessionPhase.IDLE
    assert idle.opening_bid == 50 and idle.bid_increment == 10
    assert (event.athlete_id, event.franchise_id, event.price) == ("p1", "f2", 60)

    settled = settle(state, event)
    assert settled.franchise("f2").budget == 4_940


def test_finalize_with_override_and_staged_price(state: AuctionState, session: BiddingSession):
    leading = place_bid(session, state.franchises, "f1")

    _, overridden = finalize(leading, state.franchises, price_override=0)
    assert overridden.price == 0

    staged = stage_price(leading, 275)
    _, event = finalize(staged, state.franchises)
    assert event.price == 275


def test_finalize_rejections(state: AuctionState, session: BiddingSession):
    with pytest.raises(SessionStateError):
        finalize(session, state.franchises)

    leading = place_bid(session, state.franchises, "f1")
    with pytest.raises(InvalidAmount):
        finalize(leading, state.franchises, price_override=-10)
    with pytest.raises(InsufficientFunds):
        finalize(leading, state.franchises, price_override=5_001)
    with pytest.raises(InvalidAmount):
        stage_price(leading, -1)


def test_skip_leaves_athlete_unsold(state: AuctionState, session: BiddingSession):
    idle = skip(place_bid(session, state.franchises, "f1"))
    assert idle.phase is SessionPhase.IDLE
    assert idle.athlete_id is None
    assert state.athlete("p1").is_sold is False
    with pytest.raises(SessionStateError):
        skip(idle)


def test_draw_next_picks_an_unsold_athlete(state: AuctionState):
    sold = state
    for athlete in state.athletes[:-1]:
        sold = apply_sale(sold, athlete.athlete_id, "f1", 0)

    drawn = draw_next(BiddingSession.idle(), sold, random.Random(7))
    assert drawn.athlete_id == state.athletes[-1].athlete_id

    everyone = apply_sale(sold, state.athletes[-1].athlete_id, "f2", 0)
    with pytest.raises(PoolExhausted):
        draw_next(BiddingSession.idle(), everyone, random.Random(7))


def test_draw_next_is_reproducible_with_seeded_rng(state: AuctionState):
    first = draw_next(BiddingSession.idle(), state, random.Random(42))
    second = draw_next(BiddingSession.idle(), state, random.Random(42))
    assert first.athlete_id == second.athlete_id
