"""REST API for running a live auction."""

from __future__ import annotations

import logging
import random
import sqlite3
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from pyauction.api.schemas import (
    AthleteResponse,
    AthleteStatsResponse,
    BidRequest,
    BidResponse,
    FinalizeRequest,
    FranchiseResponse,
    PriceRequest,
    QualificationResponse,
    ScoutingResponse,
    SessionResponse,
    StartSessionRequest,
    SyncResponse,
    TradeRequest,
)
from pyauction.config import LeagueRules, create_initial_state, get_rules
from pyauction.config_loader import LeagueProfile
from pyauction.engine import (
    BiddingSession,
    RoleClassifier,
    SaleEvent,
    apply_price_edit,
    apply_trade,
    draw_next,
    evaluate,
    finalize,
    place_bid,
    reset,
    settle,
    skip,
    stage_price,
    start_session,
)
from pyauction.errors import AuctionError, FeedError, SessionStateError, UnknownEntity
from pyauction.ingest import AthleteOracle, ScoutingSource, apply_incoming, fetch_incoming
from pyauction.models import Athlete, AuctionState, Franchise
from pyauction.persistence import StateStore
from pyauction.reports import ExportError, export_registry_csv, export_sale_report_csv


logger = logging.getLogger(__name__)


def _status_for(exc: AuctionError) -> int:
    if isinstance(exc, UnknownEntity):
        return 404
    if isinstance(exc, FeedError):
        return 502
    return 400


def _athlete_response(athlete: Athlete, classifier: RoleClassifier) -> AthleteResponse:
    return AthleteResponse(
        athlete_id=athlete.athlete_id,
        name=athlete.name,
        country=athlete.country,
        role=athlete.role,
        badge=classifier.badge(athlete.role),
        base_price=athlete.base_price,
        rating=athlete.rating,
        original_team=athlete.original_team,
        stats=AthleteStatsResponse.model_validate(athlete.stats.model_dump()) if athlete.stats else None,
        is_sold=athlete.is_sold,
        team_id=athlete.team_id,
        sold_price=athlete.sold_price,
        purse_value=athlete.purse_value,
    )


def _franchise_response(
    franchise: Franchise,
    rules: LeagueRules,
    classifier: RoleClassifier,
) -> FranchiseResponse:
    report = evaluate(franchise, rules, classifier)
    return FranchiseResponse(
        franchise_id=franchise.franchise_id,
        name=franchise.name,
        color=franchise.color,
        initial_budget=franchise.initial_budget,
        budget=franchise.budget,
        spent=franchise.spent(),
        squad_size=report.squad_size,
        roster=[_athlete_response(athlete, classifier) for athlete in franchise.roster],
        qualification=QualificationResponse(
            status=report.status.value,
            has_required_role=report.has_required_role,
            meets_size=report.meets_size,
        ),
    )


def _session_response(
    session: BiddingSession,
    state: AuctionState,
    classifier: RoleClassifier,
    last_sale: SaleEvent | None = None,
) -> SessionResponse:
    athlete = state.find_athlete(session.athlete_id) if session.athlete_id else None
    return SessionResponse(
        phase=session.phase.value,
        athlete=_athlete_response(athlete, classifier) if athlete is not None else None,
        current_bid=session.current_bid,
        leader_id=session.leader_id,
        confirm_price=session.confirm_price,
        next_required_bid=session.next_required_bid() if session.is_open else None,
        history=[BidResponse(franchise_id=bid.franchise_id, amount=bid.amount) for bid in session.history],
        last_sale=(
            {"athlete_id": last_sale.athlete_id, "franchise_id": last_sale.franchise_id, "price": last_sale.price}
            if last_sale is not None
            else None
        ),
    )


def create_app(
    db_path: Path | str | None = None,
    *,
    oracle: Optional[ScoutingSource] = None,
    rules: Optional[LeagueRules] = None,
    profile: Optional[LeagueProfile] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    rules = rules or (profile.rules() if profile is not None else get_rules())
    app = FastAPI(title="pyauction")
    store = StateStore(db_path or Path(__file__).resolve().parent.parent / "pyauction.sqlite")
    seed = create_initial_state(rules, franchises=profile.franchises() if profile is not None else None)
    classifier = RoleClassifier()

    app.state.store = store
    app.state.rules = rules
    app.state.auction = store.load_state(seed)
    app.state.session = BiddingSession.idle(rules)
    app.state.oracle = oracle if oracle is not None else AthleteOracle(rules=rules)
    app.state.rng = rng or random.Random()

    def _commit(state: AuctionState) -> None:
        app.state.auction = state
        try:
            store.save_state(state)
        except sqlite3.Error as exc:
            logger.warning("Failed to persist auction state: %s", exc)

    def _session_view(last_sale: SaleEvent | None = None) -> SessionResponse:
        return _session_response(app.state.session, app.state.auction, classifier, last_sale)

    @app.exception_handler(AuctionError)
    async def auction_error_handler(request: Request, exc: AuctionError) -> JSONResponse:
        status = _status_for(exc)
        if status >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status, content=exc.to_dict())

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/athletes", response_model=list[AthleteResponse])
    async def list_athletes(available: bool = Query(False)):
        state: AuctionState = app.state.auction
        athletes = state.available() if available else state.athletes
        return [_athlete_response(athlete, classifier) for athlete in athletes]

    @app.get("/athletes/{athlete_id}", response_model=AthleteResponse)
    async def get_athlete(athlete_id: str):
        return _athlete_response(app.state.auction.athlete(athlete_id), classifier)

    @app.patch("/athletes/{athlete_id}/price", response_model=AthleteResponse)
    async def edit_price(athlete_id: str, body: PriceRequest):
        state = apply_price_edit(app.state.auction, athlete_id, body.price)
        _commit(state)
        return _athlete_response(state.athlete(athlete_id), classifier)

    @app.post("/athletes/{athlete_id}/trade", response_model=AthleteResponse)
    async def trade(athlete_id: str, body: TradeRequest):
        state = apply_trade(app.state.auction, athlete_id, body.franchise_id)
        _commit(state)
        return _athlete_response(state.athlete(athlete_id), classifier)

    @app.get("/franchises", response_model=list[FranchiseResponse])
    async def list_franchises():
        return [
            _franchise_response(franchise, rules, classifier)
            for franchise in app.state.auction.franchises
        ]

    @app.get("/franchises/{franchise_id}", response_model=FranchiseResponse)
    async def get_franchise(franchise_id: str):
        return _franchise_response(app.state.auction.franchise(franchise_id), rules, classifier)

    @app.get("/session", response_model=SessionResponse)
    async def get_session():
        return _session_view()

    @app.post("/session/start", response_model=SessionResponse)
    async def start(body: StartSessionRequest):
        athlete = app.state.auction.athlete(body.athlete_id)
        app.state.session = start_session(app.state.session, athlete)
        return _session_view()

    @app.post("/session/draw", response_model=SessionResponse)
    async def draw():
        app.state.session = draw_next(app.state.session, app.state.auction, app.state.rng)
        return _session_view()

    @app.post("/session/bid", response_model=SessionResponse)
    async def bid(body: BidRequest):
        app.state.session = place_bid(app.state.session, app.state.auction.franchises, body.franchise_id)
        return _session_view()

    @app.put("/session/price", response_model=SessionResponse)
    async def set_confirm_price(body: PriceRequest):
        app.state.session = stage_price(app.state.session, body.price)
        return _session_view()

    @app.post("/session/finalize", response_model=SessionResponse)
    async def finalize_sale(body: FinalizeRequest | None = None):
        price = body.price if body is not None else None
        session, event = finalize(app.state.session, app.state.auction.franchises, price)
        state = settle(app.state.auction, event)
        app.state.session = session
        _commit(state)
        return _session_view(last_sale=event)

    @app.post("/session/skip", response_model=SessionResponse)
    async def skip_athlete():
        app.state.session = skip(app.state.session)
        return _session_view()

    @app.get("/session/scouting", response_model=ScoutingResponse)
    def scouting():
        session: BiddingSession = app.state.session
        if not session.is_open or session.athlete_id is None:
            raise SessionStateError("No athlete is on the block")
        state: AuctionState = app.state.auction
        athlete = state.athlete(session.athlete_id)
        report = app.state.oracle.scouting_report(athlete, state.franchises)
        if app.state.session.athlete_id != athlete.athlete_id:
            logger.debug("Discarding scouting report for %s, no longer on the block", athlete.athlete_id)
            return ScoutingResponse(athlete_id=athlete.athlete_id, report=None, stale=True)
        return ScoutingResponse(athlete_id=athlete.athlete_id, report=report)

    @app.post("/reset", response_model=SessionResponse)
    async def reset_auction():
        app.state.session = BiddingSession.idle(rules)
        _commit(reset(app.state.auction))
        return _session_view()

    def _require_idle_for_sync() -> None:
        if app.state.session.is_open:
            raise SessionStateError("Close the open bidding session before syncing the feed")

    @app.post("/sync", response_model=SyncResponse)
    async def sync():
        _require_idle_for_sync()
        incoming = await run_in_threadpool(fetch_incoming, app.state.oracle)
        # the auction may have moved on during the fetch; merge into the current state
        _require_idle_for_sync()
        state, report = apply_incoming(app.state.auction, incoming, rules)
        _commit(state)
        return SyncResponse(
            retained_sold=report.retained_sold,
            added=report.added,
            skipped_sold_names=report.skipped_sold_names,
            skipped_duplicates=report.skipped_duplicates,
            renamed_ids=report.renamed_ids,
            total_athletes=len(state.athletes),
        )

    @app.get("/export/registry.csv")
    async def export_registry(sort: str = Query("name"), order: str = Query("asc")):
        try:
            csv_text = export_registry_csv(app.state.auction.athletes, sort, order)
        except ExportError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=registry.csv"},
        )

    @app.get("/export/report.csv")
    async def export_report():
        return Response(
            content=export_sale_report_csv(app.state.auction),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=auction_report.csv"},
        )

    return app


__all__ = ["create_app"]
