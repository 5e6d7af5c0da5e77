# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""Opcodes of the target VM."""

from enum import IntEnum


class OpCode(IntEnum):
    HALT = 0x00
    CLRA = 0x01
    INC3A = 0x02
    DECA = 0x03
    SETL = 0x04
    BACK7 = 0x05


# Opcodes the sampler can return, in weight order.
SAMPLED_OPCODES = (OpCode.CLRA, OpCode.INC3A, OpCode.DECA, OpCode.SETL, OpCode.BACK7)
NUM_WEIGHTS = len(SAMPLED_OPCODES)

# BACK7 jumps back 7 instructions, so it may not appear before this position.
BACK7_MIN_POSITION = 7
# No SETL within this many instructions before a BACK7.
SETL_LOOKBACK = 6


def mnemonic(value: int) -> str:
    """Mnemonic for a raw opcode byte; UKN for anything outside the instruction set."""
    try:
        return OpCode(value).name
    except ValueError:
        return "UKN"
