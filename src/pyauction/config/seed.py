"""Seed roster and franchise factory used when no stored state is available."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from pyauction.config.league import LeagueRules, get_rules
from pyauction.models import Athlete, AthleteStats, AuctionState, Franchise


def _athlete(
    athlete_id: str,
    name: str,
    country: str,
    role: str,
    rating: float,
    original_team: str,
    stats: AthleteStats,
    base_price: int = 50,
) -> Athlete:
    return Athlete(
        athlete_id=athlete_id,
        name=name,
        country=country,
        role=role,
        base_price=base_price,
        rating=rating,
        stats=stats,
        original_team=original_team,
    )


SEED_ATHLETES: tuple[Athlete, ...] = (
    _athlete("p1", "Virat Kohli", "India", "Batter", 95, "RCB",
             AthleteStats(matches=252, runs=8004, strike_rate=131.9, fifties=55)),
    _athlete("p2", "Jasprit Bumrah", "India", "Bowler", 96, "MI",
             AthleteStats(matches=133, wickets=165, economy=7.3)),
    _athlete("p3", "Rishabh Pant", "India", "WK-Batter", 90, "LSG",
             AthleteStats(matches=111, runs=3284, strike_rate=148.9, fifties=18)),
    _athlete("p4", "Hardik Pandya", "India", "All-Rounder", 89, "MI",
             AthleteStats(matches=137, runs=2525, wickets=64, strike_rate=145.2, economy=9.0)),
    _athlete("p5", "Rashid Khan", "Afghanistan", "Bowler", 93, "GT",
             AthleteStats(matches=121, wickets=149, economy=6.8)),
    _athlete("p6", "Heinrich Klaasen", "South Africa", "WK-Batter", 91, "SRH",
             AthleteStats(matches=35, runs=993, strike_rate=168.4, fifties=7)),
    _athlete("p7", "Shubman Gill", "India", "Batter", 88, "GT",
             AthleteStats(matches=103, runs=3216, strike_rate=135.9, fifties=20)),
    _athlete("p8", "Ravindra Jadeja", "India", "All-Rounder", 87, "CSK",
             AthleteStats(matches=240, runs=2959, wickets=160, economy=7.6)),
    _athlete("p9", "Pat Cummins", "Australia", "Bowler", 88, "SRH",
             AthleteStats(matches=58, wickets=63, economy=8.8)),
    _athlete("p10", "Sanju Samson", "India", "WK-Batter", 86, "RR",
             AthleteStats(matches=168, runs=4419, strike_rate=139.0, fifties=26)),
    _athlete("p11", "Suryakumar Yadav", "India", "Batter", 90, "MI",
             AthleteStats(matches=150, runs=3594, strike_rate=145.3, fifties=24)),
    _athlete("p12", "Kagiso Rabada", "South Africa", "Bowler", 86, "GT",
             AthleteStats(matches=80, wickets=117, economy=8.4)),
    _athlete("p13", "Andre Russell", "West Indies", "All-Rounder", 87, "KKR",
             AthleteStats(matches=127, runs=2484, wickets=115, strike_rate=174.9, economy=9.5)),
    _athlete("p14", "KL Rahul", "India", "WK-Batter", 87, "DC",
             AthleteStats(matches=132, runs=4683, strike_rate=134.6, fifties=38)),
    _athlete("p15", "Yuzvendra Chahal", "India", "Bowler", 85, "PBKS",
             AthleteStats(matches=160, wickets=205, economy=7.8)),
    _athlete("p16", "Travis Head", "Australia", "Batter", 88, "SRH",
             AthleteStats(matches=38, runs=1144, strike_rate=168.6, fifties=8)),
    _athlete("p17", "Axar Patel", "India", "All-Rounder", 84, "DC",
             AthleteStats(matches=150, runs=1653, wickets=123, economy=7.3)),
    _athlete("p18", "Mohammed Siraj", "India", "Bowler", 82, "GT",
             AthleteStats(matches=93, wickets=93, economy=8.6)),
    _athlete("p19", "Ishan Kishan", "India", "WK-Batter", 81, "SRH",
             AthleteStats(matches=105, runs=2644, strike_rate=136.4, fifties=16)),
    _athlete("p20", "Sunil Narine", "West Indies", "All-Rounder", 88, "KKR",
             AthleteStats(matches=177, runs=1534, wickets=180, economy=6.7)),
    _athlete("p21", "Yashasvi Jaiswal", "India", "Batter", 87, "RR",
             AthleteStats(matches=52, runs=1607, strike_rate=150.6, fifties=10)),
    _athlete("p22", "Arshdeep Singh", "India", "Bowler", 83, "PBKS",
             AthleteStats(matches=65, wickets=76, economy=8.9)),
    _athlete("p23", "Nicholas Pooran", "West Indies", "WK-Batter", 86, "LSG",
             AthleteStats(matches=76, runs=2293, strike_rate=168.5, fifties=14)),
    _athlete("p24", "Marcus Stoinis", "Australia", "All-Rounder", 80, "PBKS",
             AthleteStats(matches=96, runs=1866, wickets=43, economy=9.6)),
)


def seed_franchises(rules: Optional[LeagueRules] = None) -> List[Franchise]:
    rules = rules or get_rules()
    return [
        Franchise(
            franchise_id=seed.franchise_id,
            name=seed.name,
            color=seed.color,
            initial_budget=rules.franchise_budget,
            budget=rules.franchise_budget,
            roster=[],
        )
        for seed in rules.franchises
    ]


def seed_athletes() -> List[Athlete]:
    return list(SEED_ATHLETES)


def create_initial_state(
    rules: Optional[LeagueRules] = None,
    *,
    athletes: Optional[Iterable[Athlete]] = None,
    franchises: Optional[Sequence[Franchise]] = None,
) -> AuctionState:
    """
    Create the pre-auction state: every athlete unsold, every purse full.

    Args:
        rules: League rules (defaults to the default league)
        athletes: Optional athlete pool (defaults to the seed roster)
        franchises: Optional franchise list (defaults to the rules' franchises)
    """
    pool = [athlete.cleared() for athlete in (athletes if athletes is not None else SEED_ATHLETES)]
    teams = list(franchises) if franchises is not None else seed_franchises(rules)
    return AuctionState(athletes=pool, franchises=teams)
