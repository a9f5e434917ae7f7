"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: types.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, TypeAlias

LookupValue: TypeAlias = str | None


class _Missing:
    """Marker type for cache misses; a cached ``None`` is still a hit."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


@dataclass(frozen=True, slots=True)
class Coordinates:
    """Lookup key: a latitude/longitude pair compared component-wise."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "latitude", float(self.latitude))
        object.__setattr__(self, "longitude", float(self.longitude))

    @property
    def index(self) -> str:
        """Stable comma-joined text form used for logs and stats."""
        return f"{self.latitude!r},{self.longitude!r}"

    def __str__(self) -> str:
        return self.index

    @classmethod
    def parse(cls, raw: str) -> "Coordinates":
        """Parse ``"lat,lon"`` text into a key."""
        parts = [part.strip() for part in raw.split(",")]
        if len(parts) != 2:
            raise ValueError(f"Expected 'lat,lon', got {raw!r}")
        return cls(float(parts[0]), float(parts[1]))
