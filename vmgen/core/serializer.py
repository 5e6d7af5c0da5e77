# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""Binary program record: rA (int32 LE), rL (int32 LE), then the opcode bytes."""

from __future__ import annotations

import struct
from pathlib import Path

from vmgen.program import Program

# Little-endian regardless of host so fixtures are byte-identical everywhere.
HEADER = struct.Struct("<ii")


class ShortWriteError(OSError):
    """Fewer bytes reached the destination than were requested."""


def pack_program(program: Program) -> bytes:
    return HEADER.pack(program.r_a, program.r_l) + bytes(program.code)


def unpack_program(data: bytes) -> Program:
    if len(data) < HEADER.size:
        raise ValueError(f"Program record too short: {len(data)} bytes (need {HEADER.size})")
    r_a, r_l = HEADER.unpack_from(data)
    return Program(code=bytes(data[HEADER.size :]), r_a=r_a, r_l=r_l)


def write_program(program: Program, path: Path) -> int:
    """Write the record to path. Returns bytes written.

    OSError propagates if path cannot be opened. A short write leaves the
    truncated file in place and raises ShortWriteError.
    """
    data = pack_program(program)
    with open(path, "wb") as f:
        written = f.write(data)
    if written is None or written < len(data):
        raise ShortWriteError(
            f"Short write to {path}: {written or 0} of {len(data)} bytes"
        )
    return written


def read_program(path: Path) -> Program:
    with open(path, "rb") as f:
        data = f.read()
    try:
        return unpack_program(data)
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from e
