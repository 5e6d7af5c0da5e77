# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""31-bit linear congruential generator owned by a single generation run."""

from __future__ import annotations

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
MASK_31_BIT = 0x7FFF_FFFF

_SEED_MIN = -(1 << 31)
_SEED_MAX = (1 << 31) - 1


class Lcg:
    """state = (state * 1103515245 + 12345) mod 2**31, advanced on every draw."""

    def __init__(self, seed: int | None = None) -> None:
        self._state = 1
        if seed is not None:
            self.seed(seed)

    @property
    def state(self) -> int:
        return self._state

    def seed(self, value: int) -> None:
        """Set the state directly. The value is not run through the recurrence."""
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Seed must be an int, got {type(value)}")
        if value == 0:
            raise ValueError("Seed 0 is not supported; use a non-zero seed")
        if not _SEED_MIN <= value <= _SEED_MAX:
            raise ValueError(f"Seed {value} outside signed 32-bit range")
        self._state = value

    def draw(self) -> int:
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) & MASK_31_BIT
        return self._state
