"""Domain models for active level projections."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class LevelPoint:
    """Active level of one substance at a point in time."""

    time: datetime
    level: float
