"""Input adapters that normalize raw athlete feeds."""

from .feed import (
    AthleteSource,
    FeedAthleteRow,
    FeedMergeReport,
    ScoutingSource,
    apply_incoming,
    fetch_incoming,
    merge_incoming,
    parse_feed_payload,
    rows_to_athletes,
    sync_feed,
)
from .oracle import AthleteOracle, SCOUTING_FALLBACK

__all__ = [
    "AthleteOracle",
    "AthleteSource",
    "FeedAthleteRow",
    "FeedMergeReport",
    "SCOUTING_FALLBACK",
    "ScoutingSource",
    "apply_incoming",
    "fetch_incoming",
    "merge_incoming",
    "parse_feed_payload",
    "rows_to_athletes",
    "sync_feed",
]
