from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Iterable, Optional

IMDB = "Internet Movie Database"
ROTTEN_TOMATOES = "Rotten Tomatoes"
METACRITIC = "Metacritic"

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
# wide enough to hold any finite float to one decimal place
_ROUNDING_CONTEXT = Context(prec=400)


@dataclass
class Rating:
    source: str
    value: str


def normalize_rating(rating: Rating) -> Optional[float]:
    """Convert a single rating to the 0-10 scale, or None when it can't be used."""
    if rating.source == IMDB:
        # "8.3/10"
        return _leading_float(rating.value.split("/")[0])
    if rating.source == ROTTEN_TOMATOES:
        # "89%"
        value = _leading_float(rating.value)
        return value / 10 if value is not None else None
    if rating.source == METACRITIC:
        # "82/100"
        value = _leading_float(rating.value.split("/")[0])
        return value / 10 if value is not None else None
    return None


def average_rating(ratings: Optional[Iterable[Rating]]) -> float:
    """
    Mean of every usable rating on a 0-10 scale, rounded to one decimal.

    Unknown sources and unparsable values are skipped. Returns 0.0 when no
    rating survives parsing.
    """
    values = [value for value in (normalize_rating(r) for r in ratings or []) if value is not None]
    if not values:
        return 0.0
    total = sum(values)
    if math.isfinite(total):
        mean = total / len(values)
    else:
        mean = sum(value / len(values) for value in values)
    rounded = Decimal(mean).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT)
    return float(rounded)


def _leading_float(text: Optional[str]) -> Optional[float]:
    if not text:
        return None
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None
