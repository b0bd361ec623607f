# regsynth/combinators.py
"""
Program-synthesis combinators.

Each combinator takes finished register-machine programs and returns a
single new :class:`~regsynth.instructions.Program`; nothing is executed.

Calling convention
------------------
A program computing ``f(x1, ..., xk)`` reads ``xi`` from register ``i``
and leaves the result in register 1.  It may assume every register
beyond its arguments starts at zero.  The combinators keep that promise
for every sub-program they embed: a zone is scrubbed before each run so
that only the input slots are nonzero, which is what makes combinator
output safe to feed back into another combinator.

The empty program is the identity on its first argument (it halts
immediately, leaving register 1 unchanged) and is accepted in every
position.

Register layouts
----------------
``compose(h, g1..gn)``::

    1 .. base                 inputs, then h's registers (base = max(n, |h|, gmax))
    zone_k  (k = 1..n)        gmax registers each, one per g_k
    mem                       copy scratch

``primrec(g, h)`` with ``m = max(|g|, |h|)``::

    1 .. m+1                  inputs (y, x1 .. xm)
    m+2                       y_down, countdown of the original y
    m+3                       y_up, depth built up from 0
    xs                        m preserved arguments
    zone                      m+2 registers: (y_up, value, xs...) for h
    mem                       copy scratch

``minimize(h)`` with ``m = |h| - 1``::

    1 .. max(m, 1)            inputs (x1 .. xm)
    y                         candidate
    xs                        m preserved arguments
    zone                      |h| registers: (y, xs...)
    mem                       copy scratch

``|p|`` is a program's footprint (highest register it touches).
"""

from __future__ import annotations

import logging

from regsynth.errors import ArityError
from regsynth.instructions import Dec, Inc, Program
from regsynth.splice import (
    Assembler,
    clear_range,
    copy,
    copy_many,
    increment,
    move,
    move_many,
    shifted,
)
from regsynth.zones import allocate_zones, next_free

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
#  Composition
# ═══════════════════════════════════════════════════════════════════════

def compose(h: Program, *gs: Program) -> Program:
    """
    Synthesize ``f(x) = h(g1(x), ..., gn(x))``.

    Phases: scrub the zones, fan every shared input out to all zones
    from a single pull, clear the caller registers, run each ``g_k`` in
    its zone, gather the results into registers ``1..n`` and run ``h``.

    Raises
    ------
    ArityError
        If no inner programs are given.
    """
    if not gs:
        raise ArityError("compose() needs at least one inner program")
    n = len(gs)
    g_max = max(g.footprint for g in gs)
    base = max(n, h.footprint, g_max)
    zones = allocate_zones(base, g_max, n)
    mem = next_free(zones, base)

    fan_out = [(j, [z.register(j) for z in zones]) for j in range(1, g_max + 1)]

    asm = Assembler()
    asm.sequence([
        clear_range(range(g_max + 1, mem + 1)),
        copy_many(fan_out, mem),
        clear_range(range(1, base + 1)),
    ])
    for g, zone in zip(gs, zones):
        asm.splice(g, shift=zone.delta)
    asm.splice(move_many((z.base, [k]) for k, z in enumerate(zones, start=1)))
    asm.splice(h)
    program = asm.finish()

    logger.debug(
        "compose: %d inner programs, zones %s, scratch R%d -> %d instructions",
        n, [(z.base, z.end) for z in zones], mem, len(program),
    )
    return program


# ═══════════════════════════════════════════════════════════════════════
#  Primitive recursion
# ═══════════════════════════════════════════════════════════════════════

def primrec(g: Program, h: Program) -> Program:
    """
    Synthesize ``f`` with ``f(0, xs) = g(xs)`` and
    ``f(y + 1, xs) = h(y, f(y, xs), xs)``.

    ``y`` is moved into a countdown register.  Each loop iteration shifts
    the running value into the zone's second slot, copies the current
    depth and the preserved ``xs`` around it, bumps the depth and runs
    ``h``.  When the countdown hits zero the value is moved to register 1.
    """
    m = max(g.footprint, h.footprint)
    width = m + 1
    y_down = width + 1
    y_up = width + 2
    xs, = allocate_zones(y_up, m, 1)
    zone, = allocate_zones(xs.end, m + 2, 1)
    mem = next_free([zone], xs.end)

    asm = Assembler()
    asm.sequence([
        clear_range(range(width + 1, mem + 1)),
        move(1, [y_down]),
        move_many((i + 1, [xs.register(i)]) for i in range(1, m + 1)),
        copy_many(((xs.register(i), [zone.register(i)]) for i in range(1, m + 1)), mem),
        shifted(g, zone.delta),
    ])

    body = [
        clear_range(range(zone.register(2), zone.end + 1)),
        move(zone.base, [zone.register(2)]),
        copy(y_up, [zone.base], mem),
        copy_many(((xs.register(i), [zone.register(i + 2)]) for i in range(1, m + 1)), mem),
        increment(y_up),
        shifted(h, zone.delta),
    ]
    test = asm.here
    done = test + 1 + sum(len(block) for block in body)
    asm.emit(Dec(y_down, test + 1, done))
    asm.sequence(body, continuation=test)
    assert asm.here == done

    asm.splice(move(zone.base, [1]))
    program = asm.finish()

    logger.debug(
        "primrec: y_down R%d, y_up R%d, xs R%d-R%d, zone R%d-R%d, scratch R%d "
        "-> %d instructions",
        y_down, y_up, xs.base, xs.end, zone.base, zone.end, mem, len(program),
    )
    return program


# ═══════════════════════════════════════════════════════════════════════
#  Minimization
# ═══════════════════════════════════════════════════════════════════════

def minimize(h: Program) -> Program:
    """
    Synthesize ``f(xs) = min { y >= 0 : h(y, xs) = 0 }``.

    The result is a partial function: when ``h`` has no root for the
    given ``xs`` the synthesized program never halts.  That is its
    defined semantics, not a fault.
    """
    m = h.footprint - 1
    width = max(m, 1)
    y_reg = width + 1
    xs, = allocate_zones(y_reg, m, 1)
    zone, = allocate_zones(xs.end, h.footprint, 1)
    mem = next_free([zone], xs.end)

    asm = Assembler()
    asm.sequence([
        clear_range(range(y_reg, mem + 1)),
        move_many((i, [xs.register(i)]) for i in range(1, m + 1)),
        clear_range(range(m + 1, width + 1)),
    ])

    trial = asm.here
    asm.sequence([
        clear_range(zone.registers),
        copy(y_reg, [zone.base], mem),
        copy_many(((xs.register(i), [zone.register(i + 1)]) for i in range(1, m + 1)), mem),
        shifted(h, zone.delta),
    ])
    test = asm.here
    asm.emit(Dec(zone.base, test + 1, test + 2))
    asm.emit(Inc(y_reg, trial))
    asm.splice(move(y_reg, [1]))
    program = asm.finish()

    logger.debug(
        "minimize: y R%d, xs R%d-R%d, zone R%d-R%d, scratch R%d -> %d instructions",
        y_reg, xs.base, xs.end, zone.base, zone.end, mem, len(program),
    )
    return program


__all__ = ["compose", "primrec", "minimize"]
