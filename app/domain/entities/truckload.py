"""Truckload entity — one driver's run of stops."""

from dataclasses import dataclass
from datetime import date


@dataclass
class Truckload:
    id: int | None
    driver_name: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_completed: bool = False
