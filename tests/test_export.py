import csv
from io import StringIO

import pytest

from pyauction.config import create_initial_state
from pyauction.engine import apply_sale
from pyauction.models import Athlete
from pyauction.reports import ExportError, export_registry_csv, export_sale_report_csv, sort_registry


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(StringIO(text)))


def _athletes() -> list[Athlete]:
    return [
        Athlete(athlete_id="a", name="bravo", role="Bowler", base_price=50, original_team="RR"),
        Athlete(athlete_id="b", name="Alpha", role="batter", base_price=80, original_team="csk"),
        Athlete(athlete_id="c", name="Charlie", role="All-Rounder", base_price=50, original_team=None).with_sale(
            "f1", 300
        ),
    ]


def test_registry_export_headers_and_values():
    rows = _rows(export_registry_csv(_athletes()))
    assert rows[0] == ["Name", "Role", "Purse Value", "Status"]
    assert rows[1:] == [
        ["Alpha", "batter", "80", "Free Agent"],
        ["bravo", "Bowler", "50", "Free Agent"],
        ["Charlie", "All-Rounder", "300", "Acquired"],
    ]


@pytest.mark.parametrize(
    "key, order, expected",
    [
        ("name", "desc", ["c", "a", "b"]),
        ("price", "desc", ["c", "b", "a"]),
        ("role", "asc", ["c", "b", "a"]),
        ("original_team", "asc", ["c", "b", "a"]),
    ],
)
def test_sort_registry(key, order, expected):
    assert [a.athlete_id for a in sort_registry(_athletes(), key, order)] == expected


def test_sort_registry_rejects_unknown_options():
    with pytest.raises(ExportError):
        sort_registry(_athletes(), "rating")
    with pytest.raises(ExportError):
        sort_registry(_athletes(), "name", "sideways")


def test_sale_report_lists_only_sold_athletes():
    state = apply_sale(apply_sale(create_initial_state(), "p2", "f3", 650), "p1", "f1", 900)
    rows = _rows(export_sale_report_csv(state))
    assert rows == [
        ["Player", "Role", "Purchaser", "Value"],
        ["Virat Kohli", "Batter", "Franchise 1", "900"],
        ["Jasprit Bumrah", "Bowler", "Franchise 3", "650"],
    ]


def test_sale_report_empty_auction():
    assert _rows(export_sale_report_csv(create_initial_state())) == [["Player", "Role", "Purchaser", "Value"]]
