# regsynth/zones.py
"""
Register-zone allocation.

A *zone* is a contiguous window of register indices reserved for one
embedded sub-program.  Zones for ``count`` copies of a sub-program
whose footprint is ``size`` are laid out directly after the caller's
own registers::

    base_k = caller_max + 1 + (k - 1) * size        (k = 1 .. count)

Scratch registers are taken afterwards with :func:`next_free`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class Zone:
    """Registers ``base .. base + size - 1``."""

    base: int
    size: int

    @property
    def end(self) -> int:
        """Last register index in the zone."""
        return self.base + self.size - 1

    @property
    def delta(self) -> int:
        """Shift that moves a program's register ``1`` onto ``base``."""
        return self.base - 1

    @property
    def registers(self) -> range:
        return range(self.base, self.end + 1)

    def register(self, slot: int) -> int:
        """Absolute index of the zone's 1-based ``slot``."""
        if not 1 <= slot <= self.size:
            raise IndexError(f"slot {slot} outside zone of size {self.size}")
        return self.base + slot - 1

    def overlaps(self, other: "Zone") -> bool:
        return self.base <= other.end and other.base <= self.end


def allocate_zones(caller_max: int, size: int, count: int) -> List[Zone]:
    """Lay out ``count`` disjoint zones of ``size`` after ``caller_max``."""
    zones = [Zone(caller_max + 1 + k * size, size) for k in range(count)]
    assert all(
        not a.overlaps(b) for i, a in enumerate(zones) for b in zones[i + 1:]
    ), f"overlapping zones: {zones}"
    assert all(z.base > caller_max for z in zones)
    return zones


def next_free(zones: Sequence[Zone], caller_max: int) -> int:
    """First register index after every zone and the caller's registers."""
    return max([caller_max] + [z.end for z in zones]) + 1


__all__ = ["Zone", "allocate_zones", "next_free"]
