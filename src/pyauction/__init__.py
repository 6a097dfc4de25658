"""Live player auction: bidding, settlement, qualification and feeds."""

__version__ = "0.1.0"
