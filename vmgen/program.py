# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""Program: generated opcode sequence plus initial register values."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from vmgen.core.opcodes import OpCode, mnemonic


@dataclass(frozen=True)
class Program:
    """Opcode bytes and the start values for registers A and L."""

    code: bytes
    r_a: int
    r_l: int

    def __len__(self) -> int:
        return len(self.code)

    def histogram(self) -> dict[str, int]:
        """Opcode mnemonic -> count, in opcode order."""
        counts = Counter(self.code)
        out = {op.name: counts.get(op.value, 0) for op in OpCode}
        known = {op.value for op in OpCode}
        unknown = sum(n for v, n in counts.items() if v not in known)
        if unknown:
            out["UKN"] = unknown
        return out

    def listing(self) -> str:
        """One line per instruction (1-based address), then the register footer."""
        lines = [f"{i:#06x}:\t{mnemonic(b)}" for i, b in enumerate(self.code, start=1)]
        lines.append("---")
        lines.append(f"ACC: {self.r_a}, LC: {self.r_l}, Size: {len(self.code)}")
        return "\n".join(lines) + "\n"
