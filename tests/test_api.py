import csv
import random
from io import StringIO
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from pyauction.api import create_app
from pyauction.engine import apply_sale, start_session
from pyauction.errors import FeedError
from pyauction.models import Athlete


class FakeOracle:
    def __init__(self, athletes=None, report="Take him."):
        self.athletes = athletes or []
        self.report = report
        self.scouted: list[str] = []

    def fetch_athletes(self):
        if not self.athletes:
            raise FeedError("feed down")
        return list(self.athletes)

    def scouting_report(self, athlete, franchises):
        self.scouted.append(athlete.athlete_id)
        return self.report


@pytest.fixture
async def client(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("PYAUCTION_DB_PATH", raising=False)
    oracle = FakeOracle(athletes=[Athlete(athlete_id="n1", name="Newcomer", role="Bowler", base_price=1)])
    app = create_app(tmp_path / "auction.sqlite", oracle=oracle, rng=random.Random(3))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


async def _open_on(client: AsyncClient, athlete_id: str = "p1") -> dict:
    resp = await client.post("/session/start", json={"athlete_id": athlete_id})
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_listings(client: AsyncClient):
    athletes = (await client.get("/athletes")).json()
    assert len(athletes) == 24
    keeper = next(a for a in athletes if a["athlete_id"] == "p3")
    assert keeper["badge"] == "keeper"
    assert keeper["purse_value"] == 50

    franchises = (await client.get("/franchises")).json()
    assert len(franchises) == 10
    assert franchises[0]["budget"] == 5000
    assert franchises[0]["qualification"]["status"] == "PENDING"

    missing = await client.get("/athletes/nobody")
    assert missing.status_code == 404
    assert missing.json()["code"] == "UNKNOWN_ENTITY"


@pytest.mark.anyio
async def test_full_bidding_round(client: AsyncClient):
    session = await _open_on(client)
    assert session["phase"] == "OPEN"
    assert session["current_bid"] == 50
    assert session["next_required_bid"] == 50

    first = (await client.post("/session/bid", json={"franchise_id": "f7"})).json()
    assert first["leader_id"] == "f7" and first["current_bid"] == 50

    second = (await client.post("/session/bid", json={"franchise_id": "f6"})).json()
    assert second["leader_id"] == "f6" and second["current_bid"] == 60

    self_bid = await client.post("/session/bid", json={"franchise_id": "f6"})
    assert self_bid.status_code == 400
    assert self_bid.json()["code"] == "SELF_BID"
    assert (await client.get("/session")).json()["current_bid"] == 60

    sold = await client.post("/session/finalize", json={})
    assert sold.status_code == 200
    body = sold.json()
    assert body["phase"] == "IDLE"
    assert body["last_sale"] == {"athlete_id": "p1", "franchise_id": "f6", "price": 60}

    franchise = (await client.get("/franchises/f6")).json()
    assert franchise["budget"] == 4940
    assert [a["athlete_id"] for a in franchise["roster"]] == ["p1"]

    again = await client.post("/session/start", json={"athlete_id": "p1"})
    assert again.status_code == 400
    assert again.json()["code"] == "ALREADY_SOLD"


@pytest.mark.anyio
async def test_staged_price_and_override(client: AsyncClient):
    await _open_on(client, "p2")
    await client.post("/session/bid", json={"franchise_id": "f1"})

    staged = await client.put("/session/price", json={"price": 125})
    assert staged.json()["confirm_price"] == 125

    negative = await client.put("/session/price", json={"price": -5})
    assert negative.status_code == 400
    assert negative.json()["code"] == "INVALID_AMOUNT"

    sold = await client.post("/session/finalize", json={"price": 90})
    assert sold.json()["last_sale"]["price"] == 90


@pytest.mark.anyio
async def test_finalize_without_leader_rejected(client: AsyncClient):
    await _open_on(client)
    resp = await client.post("/session/finalize", json={})
    assert resp.status_code == 400
    assert resp.json()["code"] == "SESSION_STATE"


@pytest.mark.anyio
async def test_draw_and_skip(client: AsyncClient):
    drawn = (await client.post("/session/draw")).json()
    assert drawn["phase"] == "OPEN"
    assert drawn["athlete"]["is_sold"] is False

    skipped = (await client.post("/session/skip")).json()
    assert skipped["phase"] == "IDLE"
    assert (await client.post("/session/skip")).status_code == 400


@pytest.mark.anyio
async def test_price_edit_and_trade(client: AsyncClient):
    await _open_on(client, "p3")
    await client.post("/session/bid", json={"franchise_id": "f1"})
    await client.post("/session/finalize", json={"price": 200})

    edited = await client.patch("/athletes/p3/price", json={"price": 350})
    assert edited.status_code == 200
    assert edited.json()["sold_price"] == 350

    too_much = await client.patch("/athletes/p3/price", json={"price": 6000})
    assert too_much.status_code == 400
    assert too_much.json()["code"] == "INSUFFICIENT_FUNDS"

    traded = await client.post("/athletes/p3/trade", json={"franchise_id": "f2"})
    assert traded.json()["team_id"] == "f2"

    franchises = {f["franchise_id"]: f for f in (await client.get("/franchises")).json()}
    assert franchises["f1"]["budget"] == 5000
    assert franchises["f2"]["budget"] == 4650
    assert franchises["f2"]["qualification"]["has_required_role"] is True

    unsold = await client.patch("/athletes/p4/price", json={"price": 10})
    assert unsold.json()["code"] == "NOT_SOLD"


@pytest.mark.anyio
async def test_state_is_persisted_between_apps(client: AsyncClient, tmp_path: Path):
    await _open_on(client, "p5")
    await client.post("/session/bid", json={"franchise_id": "f9"})
    await client.post("/session/finalize", json={})

    restarted = create_app(tmp_path / "auction.sqlite", oracle=FakeOracle())
    assert restarted.state.auction.athlete("p5").team_id == "f9"
    assert restarted.state.auction.franchise("f9").budget == 4950


@pytest.mark.anyio
async def test_reset(client: AsyncClient):
    await _open_on(client, "p1")
    await client.post("/session/bid", json={"franchise_id": "f1"})
    await client.post("/session/finalize", json={})
    await _open_on(client, "p2")

    resp = await client.post("/reset")
    assert resp.json()["phase"] == "IDLE"
    franchises = (await client.get("/franchises")).json()
    assert all(f["budget"] == 5000 and f["roster"] == [] for f in franchises)


@pytest.mark.anyio
async def test_scouting(client: AsyncClient):
    assert (await client.get("/session/scouting")).status_code == 400

    await _open_on(client, "p8")
    resp = await client.get("/session/scouting")
    assert resp.json() == {"athlete_id": "p8", "report": "Take him.", "stale": False}


@pytest.mark.anyio
async def test_sync(client: AsyncClient):
    await _open_on(client, "p1")
    await client.post("/session/bid", json={"franchise_id": "f1"})
    await client.post("/session/finalize", json={})

    resp = await client.post("/sync")
    assert resp.status_code == 200
    assert resp.json()["retained_sold"] == 1
    assert resp.json()["added"] == 1

    athletes = (await client.get("/athletes")).json()
    assert [a["athlete_id"] for a in athletes] == ["p1", "n1"]
    assert athletes[1]["base_price"] == 50


@pytest.mark.anyio
async def test_sync_failure_maps_to_bad_gateway(client: AsyncClient):
    client.app.state.oracle = FakeOracle()
    resp = await client.post("/sync")
    assert resp.status_code == 502
    assert resp.json()["code"] == "FEED_UNAVAILABLE"
    assert len((await client.get("/athletes")).json()) == 24


@pytest.mark.anyio
async def test_exports(client: AsyncClient):
    await _open_on(client, "p2")
    await client.post("/session/bid", json={"franchise_id": "f4"})
    await client.post("/session/finalize", json={"price": 500})

    registry = await client.get("/export/registry.csv", params={"sort": "price", "order": "desc"})
    assert registry.headers["content-type"].startswith("text/csv")
    rows = list(csv.reader(StringIO(registry.text)))
    assert rows[0] == ["Name", "Role", "Purse Value", "Status"]
    assert rows[1] == ["Jasprit Bumrah", "Bowler", "500", "Acquired"]

    bad = await client.get("/export/registry.csv", params={"sort": "rating"})
    assert bad.status_code == 400

    report = await client.get("/export/report.csv")
    assert list(csv.reader(StringIO(report.text))) == [
        ["Player", "Role", "Purchaser", "Value"],
        ["Jasprit Bumrah", "Bowler", "Franchise 4", "500"],
    ]


class _SellDuringFetch(FakeOracle):
    def __init__(self, app):
        super().__init__(athletes=[Athlete(athlete_id="n2", name="Late Arrival", role="Batter", base_price=1)])
        self.app = app

    def fetch_athletes(self):
        self.app.state.auction = apply_sale(self.app.state.auction, "p1", "f1", 300)
        return super().fetch_athletes()


class _OpenDuringFetch(FakeOracle):
    def __init__(self, app):
        super().__init__(athletes=[Athlete(athlete_id="n3", name="Someone", role="Bowler", base_price=1)])
        self.app = app

    def fetch_athletes(self):
        self.app.state.session = start_session(self.app.state.session, self.app.state.auction.athlete("p2"))
        return super().fetch_athletes()


@pytest.mark.anyio
async def test_sync_keeps_sale_made_during_fetch(client: AsyncClient):
    client.app.state.oracle = _SellDuringFetch(client.app)

    resp = await client.post("/sync")
    assert resp.status_code == 200
    assert resp.json()["retained_sold"] == 1

    sold = [a["athlete_id"] for a in (await client.get("/athletes")).json() if a["is_sold"]]
    assert sold == ["p1"]
    assert (await client.get("/franchises/f1")).json()["budget"] == 4700


@pytest.mark.anyio
async def test_sync_rejected_when_session_opens_during_fetch(client: AsyncClient):
    client.app.state.oracle = _OpenDuringFetch(client.app)

    resp = await client.post("/sync")
    assert resp.status_code == 400
    assert resp.json()["code"] == "SESSION_STATE"

    athletes = (await client.get("/athletes")).json()
    assert len(athletes) == 24
    assert (await client.get("/session")).json()["athlete"]["athlete_id"] == "p2"
