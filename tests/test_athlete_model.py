import pytest
from pydantic import ValidationError

from pyauction.models import Athlete, AthleteStats, Franchise


def _athlete(**overrides) -> Athlete:
    data = {"athlete_id": "a1", "name": "Test Player", "role": "Batter", "base_price": 50}
    data.update(overrides)
    return Athlete(**data)


def test_athlete_is_frozen():
    athlete = _athlete()
    with pytest.raises((TypeError, ValidationError)):
        athlete.name = "Other"  # type: ignore[misc]


def test_sale_fields_must_be_consistent():
    with pytest.raises(ValidationError):
        _athlete(is_sold=True, team_id="f1")
    with pytest.raises(ValidationError):
        _athlete(is_sold=False, team_id="f1", sold_price=60)
    with pytest.raises(ValidationError):
        _athlete(is_sold=True, sold_price=60)


def test_negative_prices_rejected():
    with pytest.raises(ValidationError):
        _athlete(base_price=-1)
    with pytest.raises(ValidationError):
        _athlete(is_sold=True, team_id="f1", sold_price=-5)


def test_with_sale_and_cleared_round_trip():
    athlete = _athlete(stats=AthleteStats(matches=10, runs=300))
    sold = athlete.with_sale("f1", 120)
    assert sold.is_sold and sold.team_id == "f1" and sold.sold_price == 120
    assert sold.purse_value == 120
    assert athlete.is_sold is False

    cleared = sold.cleared()
    assert cleared == athlete
    assert cleared.purse_value == 50


def test_franchise_spent_and_affordability():
    sold = _athlete().with_sale("f1", 300)
    franchise = Franchise(franchise_id="f1", name="F", initial_budget=1_000, budget=700, roster=[sold])
    assert franchise.spent() == 300
    assert franchise.holds("a1")
    assert franchise.can_afford(700)
    assert not franchise.can_afford(701)
