"""Error taxonomy shared by the auction engine, adapters and API."""

from __future__ import annotations

from typing import Any, Optional


INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
SELF_BID = "SELF_BID"
INVALID_AMOUNT = "INVALID_AMOUNT"
ALREADY_SOLD = "ALREADY_SOLD"
NOT_SOLD = "NOT_SOLD"
SESSION_STATE = "SESSION_STATE"
DUPLICATE_TARGET = "DUPLICATE_TARGET"
POOL_EXHAUSTED = "POOL_EXHAUSTED"
UNKNOWN_ENTITY = "UNKNOWN_ENTITY"
FEED_UNAVAILABLE = "FEED_UNAVAILABLE"
INCONSISTENT_STATE = "INCONSISTENT_STATE"


class AuctionError(Exception):
    """Base class for every error raised by pyauction."""

    default_code = "AUCTION_ERROR"

    def __init__(self, message: str, *, code: str | None = None, details: Optional[Any] = None):
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationRejected(AuctionError):
    """An operation's preconditions were not met; state is unchanged."""

    default_code = "VALIDATION_REJECTED"


class InsufficientFunds(ValidationRejected):
    default_code = INSUFFICIENT_FUNDS


class SelfBid(ValidationRejected):
    default_code = SELF_BID


class InvalidAmount(ValidationRejected):
    default_code = INVALID_AMOUNT


class AlreadySold(ValidationRejected):
    default_code = ALREADY_SOLD


class NotSold(ValidationRejected):
    default_code = NOT_SOLD


class SessionStateError(ValidationRejected):
    default_code = SESSION_STATE


class DuplicateTarget(ValidationRejected):
    default_code = DUPLICATE_TARGET


class PoolExhausted(ValidationRejected):
    default_code = POOL_EXHAUSTED


class UnknownEntity(ValidationRejected):
    default_code = UNKNOWN_ENTITY


class FeedError(AuctionError):
    """The athlete feed could not be reached or returned unusable data."""

    default_code = FEED_UNAVAILABLE


class InconsistentStateError(AuctionError):
    """A store invariant does not hold."""

    default_code = INCONSISTENT_STATE


def require_amount(value: Any, *, field: str = "price") -> int:
    """Return ``value`` if it is a non-negative integer, else reject it."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"{field} must be an integer, got {value!r}", details={field: value})
    if value < 0:
        raise InvalidAmount(f"{field} must be non-negative, got {value}", details={field: value})
    return value


__all__ = [
    "AuctionError",
    "ValidationRejected",
    "InsufficientFunds",
    "SelfBid",
    "InvalidAmount",
    "AlreadySold",
    "NotSold",
    "SessionStateError",
    "DuplicateTarget",
    "PoolExhausted",
    "UnknownEntity",
    "FeedError",
    "InconsistentStateError",
    "require_amount",
]
