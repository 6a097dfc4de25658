"""Domain models for athletes, franchises and the auction stores."""

from .athlete import Athlete, AthleteStats
from .franchise import Franchise
from .state import AuctionState

__all__ = ["Athlete", "AthleteStats", "Franchise", "AuctionState"]
