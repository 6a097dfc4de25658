"""Configuration helpers for league rules and seed data."""

from .league import DEFAULT_LEAGUE, FranchiseSeed, LeagueRules, get_rules, iter_rules
from .seed import SEED_ATHLETES, create_initial_state, seed_athletes, seed_franchises

__all__ = [
    "DEFAULT_LEAGUE",
    "FranchiseSeed",
    "LeagueRules",
    "get_rules",
    "iter_rules",
    "SEED_ATHLETES",
    "create_initial_state",
    "seed_athletes",
    "seed_franchises",
]
