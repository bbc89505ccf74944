"""Small helpers shared by the game: initialisation checks and random numbers."""

from __future__ import annotations

import random
from typing import TypeVar

T = TypeVar("T")


class InitError(RuntimeError):
    """Raised when a resource the game needs could not be set up."""


def must_init(value: T, description: str) -> T:
    """Return *value* if it is truthy, otherwise raise :class:`InitError`."""
    if value:
        return value
    raise InitError(f"couldn't initialize {description}")


def between(lo: int, hi: int) -> int:
    """Return a random integer in the half-open range ``[lo, hi)``."""
    return random.randrange(lo, hi)


def between_f(lo: float, hi: float) -> float:
    """Return a random float between *lo* and *hi*."""
    return lo + random.random() * (hi - lo)