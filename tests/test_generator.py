# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""Tests for opcode sequence construction and its placement rules."""

from __future__ import annotations

import pytest

from vmgen.core.generator import (
    LCG_PERIOD,
    GenerationError,
    SequenceGenerator,
    generate_program,
    resample_limit,
)
from vmgen.core.opcodes import OpCode
from vmgen.program import Program

MIXED_WEIGHTS = (1, 9, 1, 5, 5)


def _assert_placement_rules(program: Program) -> None:
    code = program.code
    assert code[-1] == OpCode.HALT
    assert OpCode.HALT not in code[:-1]
    assert all(1 <= b <= 5 for b in code[:-1])
    if len(code) >= 7:
        assert OpCode.BACK7 not in code[:7]
    for i in range(7, len(code)):
        if code[i] == OpCode.BACK7:
            window = code[i - 6 : i]
            assert OpCode.SETL not in window, f"SETL before BACK7 at {i}"


def test_golden_vector_three_opcodes():
    program = generate_program([1, 1, 1, 0, 0], seed=1, size=10000)
    assert (program.r_a, program.r_l) == (6, 7)
    assert list(program.code[:16]) == [2, 2, 2, 1, 3, 1, 3, 2, 3, 3, 2, 3, 3, 3, 2, 2]


def test_golden_vector_early_back7_rejected():
    gen = SequenceGenerator(MIXED_WEIGHTS, seed=1, size=10000)
    program = gen.generate()
    assert (program.r_a, program.r_l) == (6, 7)
    assert list(program.code[:7]) == [4, 2, 4, 2, 2, 2, 2]
    assert gen.back7_rejections == 2


def test_deterministic_for_fixed_seed():
    a = generate_program(MIXED_WEIGHTS, seed=1234, size=5000)
    b = generate_program(MIXED_WEIGHTS, seed=1234, size=5000)
    assert a == b


def test_generate_twice_on_same_instance_is_identical():
    gen = SequenceGenerator(MIXED_WEIGHTS, seed=99, size=2000)
    assert gen.generate() == gen.generate()


def test_different_seeds_differ():
    a = generate_program(MIXED_WEIGHTS, seed=1, size=1000)
    b = generate_program(MIXED_WEIGHTS, seed=2, size=1000)
    assert a.code != b.code


@pytest.mark.parametrize("seed", [1, 2, 42, 0x7FFF_FFFF, -5])
def test_register_seeds_in_range(seed):
    program = generate_program([1, 1, 1, 1, 1], seed=seed, size=16)
    assert 0 <= program.r_a <= 7
    assert 0 <= program.r_l <= 7


@pytest.mark.parametrize("size", [10000, 50000])
def test_placement_rules_hold_for_mixed_weights(size):
    gen = SequenceGenerator(MIXED_WEIGHTS, seed=1, size=size)
    program = gen.generate()
    assert len(program) == size
    _assert_placement_rules(program)
    assert gen.lookback_corrections > 0


@pytest.mark.parametrize("seed", [3, 17, 2024])
def test_placement_rules_hold_for_other_seeds(seed):
    _assert_placement_rules(generate_program([2, 1, 1, 4, 6], seed=seed, size=3000))


def test_single_opcode_weights():
    program = generate_program([0, 1, 0, 0, 0], seed=1, size=10000)
    assert set(program.code[:-1]) == {OpCode.INC3A}
    assert program.code[-1] == OpCode.HALT


def test_size_one_is_just_halt():
    program = generate_program([1, 1, 1, 1, 1], seed=1, size=1)
    assert program.code == b"\x00"


def test_short_program_with_back7_weight_terminates():
    program = generate_program(MIXED_WEIGHTS, seed=1, size=5)
    assert len(program) == 5
    assert OpCode.BACK7 not in program.code
    assert program.code[-1] == OpCode.HALT


@pytest.mark.parametrize("size", [0, -1])
def test_non_positive_size_rejected(size):
    with pytest.raises(ValueError, match="size"):
        SequenceGenerator(MIXED_WEIGHTS, seed=1, size=size)


def test_all_zero_weights_rejected():
    with pytest.raises(ValueError, match="Sum of weights"):
        SequenceGenerator([0, 0, 0, 0, 0], seed=1, size=10)


def test_only_back7_weight_rejected():
    with pytest.raises(ValueError, match="Only BACK7"):
        SequenceGenerator([0, 0, 0, 0, 1], seed=1, size=10)


def test_setl_back7_without_replacement_rejected():
    with pytest.raises(ValueError, match="SETL and BACK7"):
        SequenceGenerator([0, 0, 0, 2, 1], seed=1, size=10)


def test_setl_without_back7_allowed():
    program = generate_program([0, 0, 0, 1, 0], seed=1, size=10)
    assert set(program.code[:-1]) == {OpCode.SETL}


def test_seed_zero_rejected():
    with pytest.raises(ValueError, match="Seed 0"):
        SequenceGenerator(MIXED_WEIGHTS, seed=0, size=10)


def test_hung_early_position_raises(monkeypatch):
    monkeypatch.setattr("vmgen.core.generator.MAX_RESAMPLES", 50)
    gen = SequenceGenerator(MIXED_WEIGHTS, seed=1, size=10)
    monkeypatch.setattr(gen.sampler, "sample", lambda rng: OpCode.BACK7)
    with pytest.raises(GenerationError, match="Potentially hung"):
        gen.generate()


def test_hung_lookback_correction_raises(monkeypatch):
    monkeypatch.setattr("vmgen.core.generator.MAX_RESAMPLES", 50)
    gen = SequenceGenerator(MIXED_WEIGHTS, seed=1, size=20)
    # Seven SETLs, then only BACK7 from there on: the SETL can never be replaced.
    draws = iter([OpCode.SETL] * 7)
    monkeypatch.setattr(gen.sampler, "sample", lambda rng: next(draws, OpCode.BACK7))
    with pytest.raises(GenerationError, match="cannot replace SETL"):
        gen.generate()


def test_setl_back7_only_allowed_when_back7_never_placed():
    # Positions 0..6 reject BACK7, so a 7-byte program never redraws a SETL.
    program = generate_program([0, 0, 0, 2, 1], seed=1, size=7)
    assert list(program.code) == [OpCode.SETL] * 6 + [OpCode.HALT]


def test_setl_back7_only_rejected_once_back7_can_be_placed():
    with pytest.raises(ValueError, match="SETL and BACK7"):
        SequenceGenerator([0, 0, 0, 2, 1], seed=1, size=8)


def test_heavy_back7_weight_finishes():
    program = generate_program([1, 0, 0, 0, 60000], seed=1, size=10)
    _assert_placement_rules(program)
    assert list(program.code[:7]) == [OpCode.CLRA] * 7


def test_heavy_setl_and_back7_weights_finish():
    gen = SequenceGenerator([1, 0, 0, 30000, 30000], seed=1, size=20)
    program = gen.generate()
    _assert_placement_rules(program)
    assert gen.lookback_corrections > 0


def test_resample_limit_scales_with_weights():
    assert resample_limit(21, 16) == 20_000
    assert resample_limit(60001, 1) == 60001 * 10_000
    assert resample_limit(10**6, 1) == LCG_PERIOD
