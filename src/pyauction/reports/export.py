"""CSV exports for the athlete registry and the sale report."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Callable, Dict, List, Sequence

from pyauction.models import Athlete, AuctionState


REGISTRY_HEADERS: tuple[str, ...] = ("Name", "Role", "Purse Value", "Status")
SALE_REPORT_HEADERS: tuple[str, ...] = ("Player", "Role", "Purchaser", "Value")

SORT_ORDERS = ("asc", "desc")


class ExportError(ValueError):
    """Raised when an export is requested with an unsupported sort."""


_SORT_KEYS: Dict[str, Callable[[Athlete], object]] = {
    "name": lambda athlete: athlete.name.casefold(),
    "original_team": lambda athlete: (athlete.original_team or "").casefold(),
    "role": lambda athlete: athlete.role.casefold(),
    "price": lambda athlete: athlete.purse_value,
}


def sort_registry(athletes: Sequence[Athlete], sort_key: str = "name", order: str = "asc") -> List[Athlete]:
    """Return athletes sorted case-insensitively by ``sort_key``."""

    key_func = _SORT_KEYS.get(sort_key)
    if key_func is None:
        raise ExportError(f"Unsupported sort key {sort_key!r}; expected one of {sorted(_SORT_KEYS)}")
    if order not in SORT_ORDERS:
        raise ExportError(f"Unsupported sort order {order!r}; expected 'asc' or 'desc'")
    return sorted(athletes, key=key_func, reverse=order == "desc")


def export_registry_csv(athletes: Sequence[Athlete], sort_key: str = "name", order: str = "asc") -> str:
    """Every athlete with its current purse value and acquisition status."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(REGISTRY_HEADERS)
    for athlete in sort_registry(athletes, sort_key, order):
        writer.writerow(
            [
                athlete.name,
                athlete.role,
                athlete.purse_value,
                "Acquired" if athlete.is_sold else "Free Agent",
            ]
        )
    return buffer.getvalue()


def export_sale_report_csv(state: AuctionState) -> str:
    """Sold athletes only, in roster-store order, with the purchasing franchise."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(SALE_REPORT_HEADERS)
    for athlete in state.sold():
        owner = state.find_franchise(athlete.team_id) if athlete.team_id else None
        writer.writerow(
            [
                athlete.name,
                athlete.role,
                owner.name if owner is not None else athlete.team_id,
                athlete.sold_price,
            ]
        )
    return buffer.getvalue()


__all__ = [
    "ExportError",
    "REGISTRY_HEADERS",
    "SALE_REPORT_HEADERS",
    "export_registry_csv",
    "export_sale_report_csv",
    "sort_registry",
]
