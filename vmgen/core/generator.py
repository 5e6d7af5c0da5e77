# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""Opcode sequence construction with BACK7/SETL placement rules."""

from __future__ import annotations

import logging
from typing import Sequence

from vmgen.core.opcodes import BACK7_MIN_POSITION, SETL_LOOKBACK, OpCode
from vmgen.core.prng import Lcg
from vmgen.core.sampler import WeightedOpcodeSampler, validate_weights
from vmgen.program import Program

# Redraws allowed per expected redraw before a position counts as hung.
MAX_RESAMPLES = 10_000
LCG_PERIOD = 1 << 31

# Weight indices (weights start at CLRA).
_SETL = OpCode.SETL - 1
_BACK7 = OpCode.BACK7 - 1


class GenerationError(RuntimeError):
    """Raised when sequence construction cannot make progress."""


def check_terminates(weights: Sequence[int], size: int) -> None:
    """Reject weightings for which the placement rules can never be satisfied."""
    if weights[_BACK7] == 0:
        return
    if sum(weights[:_BACK7]) == 0:
        raise ValueError(
            "Only BACK7 has non-zero weight; the first "
            f"{BACK7_MIN_POSITION} positions can never be filled"
        )
    # BACK7 is only placed from position 7 on, so shorter programs never redraw SETL.
    if size > BACK7_MIN_POSITION and weights[_SETL] > 0 and sum(weights[:_SETL]) == 0:
        raise ValueError(
            "SETL and BACK7 need a non-zero weight for one of CLRA/INC3A/DECA "
            "to replace SETL before a BACK7"
        )


def check_generation_params(weights: Sequence[int], seed: int, size: int) -> tuple[int, ...]:
    """Validate everything a generation run needs before any draw. Returns the weights."""
    out = validate_weights(weights)
    if not isinstance(size, int) or isinstance(size, bool) or size < 1:
        raise ValueError(f"Program size must be a positive int, got {size!r}")
    check_terminates(out, size)
    Lcg(seed)
    return out


def resample_limit(total: int, accepted: int) -> int:
    """Consecutive redraws allowed when `accepted` of `total` weight ends the redraw loop."""
    if accepted <= 0:
        return MAX_RESAMPLES
    expected = -(-total // accepted)
    return min(LCG_PERIOD, MAX_RESAMPLES * expected)


class SequenceGenerator:
    """
    Fill a program buffer left to right from a weighted sampler.

    Placement rules:
    - BACK7 drawn at a position below 7 is discarded and the position redrawn.
    - When BACK7 is placed at i, every SETL in [i-6, i-1] is redrawn until it
      is neither SETL nor BACK7.
    - The last byte is always HALT.

    Every position is drawn, including the last, before HALT overwrites it.
    Redraw loops give up with GenerationError only after many times the
    expected number of redraws for the configured weights.
    """

    def __init__(
        self,
        weights: Sequence[int],
        seed: int,
        size: int,
        log: logging.Logger | None = None,
    ) -> None:
        self.sampler = WeightedOpcodeSampler(check_generation_params(weights, seed, size))
        self.seed = seed
        self.size = size
        self.rng = Lcg(seed)
        self.log = log if log is not None else logging.getLogger("vmgen.generator")
        w = self.sampler.weights
        total = self.sampler.ps[-1]
        self.max_back7_rejections = resample_limit(total, total - w[_BACK7])
        self.max_setl_resamples = resample_limit(total, sum(w[:_SETL]))
        self.back7_rejections = 0
        self.lookback_corrections = 0

    def _resample_setl(self, buf: bytearray, pos: int) -> None:
        for _ in range(self.max_setl_resamples):
            if buf[pos] not in (OpCode.SETL, OpCode.BACK7):
                return
            buf[pos] = self.sampler.sample(self.rng)
        raise GenerationError(f"Potentially hung - cannot replace SETL at position {pos}")

    def generate(self) -> Program:
        self.rng.seed(self.seed)
        self.back7_rejections = 0
        self.lookback_corrections = 0
        r_a = self.rng.draw() & 7
        r_l = self.rng.draw() & 7

        buf = bytearray(self.size)
        i = 0
        rejected = 0
        while i < self.size:
            opc = self.sampler.sample(self.rng)
            if opc == OpCode.BACK7:
                if i < BACK7_MIN_POSITION:
                    self.back7_rejections += 1
                    rejected += 1
                    if rejected > self.max_back7_rejections:
                        raise GenerationError(
                            f"Potentially hung - BACK7 rejected {rejected} times at position {i}"
                        )
                    continue
                for j in range(i - SETL_LOOKBACK, i):
                    if buf[j] == OpCode.SETL:
                        self._resample_setl(buf, j)
                        self.lookback_corrections += 1
                        self.log.debug(
                            f"BACK7 at {i}: replaced SETL at {j} with {OpCode(buf[j]).name}"
                        )
            if rejected:
                self.log.debug(f"Rejected BACK7 {rejected} times at position {i}")
            buf[i] = opc
            i += 1
            rejected = 0
        buf[self.size - 1] = OpCode.HALT

        return Program(code=bytes(buf), r_a=r_a, r_l=r_l)


def generate_program(
    weights: Sequence[int],
    seed: int,
    size: int,
    log: logging.Logger | None = None,
) -> Program:
    """Generate one program with a freshly seeded PRNG."""
    return SequenceGenerator(weights, seed, size, log=log).generate()
