# regsynth/splice.py
"""
Relabeling, splicing and the value-transfer micro-programs.

The machine only has ``Inc`` and ``Dec``, so moving or copying a value
between registers is itself a small program.  Each helper below returns
a self-contained :class:`Program` with local labels; the
:class:`Assembler` places such blocks back-to-back in a larger program,
turning each block's halt exit into "continue with the next phase"
through :func:`relabel`.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from regsynth.instructions import Dec, Inc, Instruction, Program


# ═══════════════════════════════════════════════════════════════════════
#  Relabeling
# ═══════════════════════════════════════════════════════════════════════

def relabel(
    program: Program, start: int, continuation: int, shift: int = 0
) -> List[Instruction]:
    """
    Rewrite ``program`` for placement at absolute address ``start``.

    Parameters
    ----------
    program:
        The block to embed, addressed ``1 .. len``.
    start:
        Absolute address its first instruction will occupy.
    continuation:
        Absolute address replacing the block's halt label ``len + 1``.
    shift:
        Added to every register index (the zone delta).

    Internal labels ``l <= len`` become ``start + l - 1``.  The input
    program is left untouched; new instruction objects are returned.
    An empty program yields no instructions.
    """
    size = len(program)

    def absolute(label: int) -> int:
        return start + label - 1 if label <= size else continuation

    return [instr.relabel(absolute).shifted(shift) for instr in program]


def shifted(program: Program, delta: int) -> Program:
    """``program`` with every register index moved up by ``delta``."""
    return Program(tuple(relabel(program, 1, program.halt, delta)))


# ═══════════════════════════════════════════════════════════════════════
#  Transfer micro-programs
# ═══════════════════════════════════════════════════════════════════════

def clear(register: int) -> Program:
    """``register := 0``."""
    return Program((Dec(register, 1, 2),))


def clear_range(registers: Iterable[int]) -> Program:
    """Zero every register in ``registers``, one spin loop each."""
    return Program(
        tuple(Dec(r, i, i + 1) for i, r in enumerate(registers, start=1))
    )


def increment(register: int) -> Program:
    return Program((Inc(register, 2),))


def move(src: int, dsts: Sequence[int]) -> Program:
    """
    Destructive transfer: add ``src`` to every register in ``dsts`` and
    leave ``src`` at zero.
    """
    assert src not in dsts, f"move source R{src} is also a destination"
    if not dsts:
        return clear(src)
    k = len(dsts)
    code: List[Instruction] = [Dec(src, 2, k + 2)]
    for i, dst in enumerate(dsts, start=2):
        code.append(Inc(dst, i + 1 if i <= k else 1))
    return Program(tuple(code))


def copy(src: int, dsts: Sequence[int], mem: int) -> Program:
    """
    Non-destructive transfer through the scratch register ``mem``.

    ::

        1:     Dec src -> 2 else k+3     pull one unit
        2..:   Inc dst_i                 push to each destination
        k+2:   Inc mem -> 1              and to scratch, loop
        k+3:   Dec mem -> k+4 else halt  drain scratch back
        k+4:   Inc src -> k+3

    ``src`` ends with its starting value, each destination gains it and
    ``mem`` returns to its prior value.
    """
    assert src not in dsts and mem not in dsts and mem != src, (
        f"copy R{src} -> {list(dsts)} via R{mem}: registers must be distinct"
    )
    k = len(dsts)
    code: List[Instruction] = [Dec(src, 2, k + 3)]
    for i, dst in enumerate(dsts, start=2):
        code.append(Inc(dst, i + 1))
    code.append(Inc(mem, 1))
    code.append(Dec(mem, k + 4, k + 5))
    code.append(Inc(src, k + 3))
    return Program(tuple(code))


def copy_many(pairs: Iterable[tuple], mem: int) -> Program:
    """Chain :func:`copy` for ``(src, dsts)`` pairs into one block."""
    asm = Assembler()
    for src, dsts in pairs:
        asm.splice(copy(src, dsts, mem))
    return asm.finish()


def move_many(pairs: Iterable[tuple]) -> Program:
    """Chain :func:`move` for ``(src, dsts)`` pairs into one block."""
    asm = Assembler()
    for src, dsts in pairs:
        asm.splice(move(src, dsts))
    return asm.finish()


# ═══════════════════════════════════════════════════════════════════════
#  Assembler
# ═══════════════════════════════════════════════════════════════════════

class Assembler:
    """
    Flat instruction buffer with absolute addressing.

    Blocks are spliced at :attr:`here`.  By default a block falls through
    to the address right after it, so the final block's exit becomes the
    finished program's halt label.
    """

    def __init__(self) -> None:
        self._code: List[Instruction] = []

    @property
    def here(self) -> int:
        """Address the next spliced instruction will occupy."""
        return len(self._code) + 1

    def splice(
        self,
        program: Program,
        shift: int = 0,
        continuation: Optional[int] = None,
    ) -> int:
        """Append ``program``; return the address it starts at."""
        start = self.here
        if continuation is None:
            continuation = start + len(program)
        self._code.extend(relabel(program, start, continuation, shift))
        return start

    def sequence(
        self, blocks: Sequence[Program], continuation: Optional[int] = None
    ) -> int:
        """
        Splice ``blocks`` back-to-back, the last non-empty one exiting to
        ``continuation`` (or falling through when ``None``).
        """
        start = self.here
        filled = [i for i, b in enumerate(blocks) if len(b)]
        if not filled:
            assert continuation is None or continuation == start, (
                "an empty sequence cannot jump"
            )
            return start
        last = filled[-1]
        for i, block in enumerate(blocks[: last + 1]):
            self.splice(block, continuation=continuation if i == last else None)
        return start

    def emit(self, instr: Instruction) -> int:
        """Append an instruction whose labels are already absolute."""
        self._code.append(instr)
        return len(self._code)

    def finish(self) -> Program:
        halt = len(self._code) + 1
        assert all(
            1 <= label <= halt for instr in self._code for label in instr.labels()
        ), "assembled program has a label outside [1, halt]"
        return Program(tuple(self._code))


def sequence(*blocks: Program) -> Program:
    """Concatenate ``blocks`` so each one's halt runs the next."""
    asm = Assembler()
    asm.sequence(blocks)
    return asm.finish()


__all__ = [
    "relabel",
    "shifted",
    "clear",
    "clear_range",
    "increment",
    "move",
    "copy",
    "copy_many",
    "move_many",
    "Assembler",
    "sequence",
]
