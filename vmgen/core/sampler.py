# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""Weighted opcode sampler driven by the LCG."""

from __future__ import annotations

from typing import Sequence

from vmgen.core.opcodes import NUM_WEIGHTS, SAMPLED_OPCODES, OpCode
from vmgen.core.prng import Lcg


def validate_weights(weights: Sequence[int]) -> tuple[int, ...]:
    """Check there is one non-negative int weight per sampled opcode and a positive total."""
    out = tuple(weights)
    if len(out) != NUM_WEIGHTS:
        raise ValueError(f"Expected {NUM_WEIGHTS} weights, got {len(out)}")
    for i, w in enumerate(out):
        if not isinstance(w, int) or isinstance(w, bool):
            raise TypeError(f"Weight for opcode {i + 1} must be an int, got {type(w)}")
        if w < 0:
            raise ValueError(f"Weight for opcode {i + 1} is negative: {w}")
    if sum(out) <= 0:
        raise ValueError("Sum of weights must be > 0")
    return out


def prefix_sums(weights: Sequence[int]) -> list[int]:
    """ps[i] = sum of weights up to opcode i+1, e.g. 5-1-2-1-1 gives [5, 6, 8, 9, 10]."""
    out: list[int] = []
    total = 0
    for w in weights:
        total += w
        out.append(total)
    return out


class WeightedOpcodeSampler:
    """Pick an opcode in 1..5 with probability proportional to its weight."""

    def __init__(self, weights: Sequence[int]) -> None:
        self.weights = validate_weights(weights)
        self.ps = prefix_sums(self.weights)

    def sample(self, rng: Lcg) -> OpCode:
        v = rng.draw() % self.ps[-1]
        # Scan all but the last bucket; anything left over is BACK7.
        for i in range(NUM_WEIGHTS - 1):
            if v < self.ps[i]:
                return SAMPLED_OPCODES[i]
        return SAMPLED_OPCODES[-1]
