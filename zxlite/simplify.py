# PyZX - Python library for quantum circuit rewriting
#        and optimization using the ZX-calculus
# Copyright (C) 2018 - Aleks Kissinger and John van de Wetering

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at

#    http://www.apache.org/licenses/LICENSE-2.0

# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Simplification strategies for in-memory ZX-diagrams.

Every strategy is built on the same driver, :func:`simp`: scan the diagram for
the first place a rule applies, apply it, and start scanning again, until a
full scan finds nothing. Matches are never reused across iterations because
every rewrite can invalidate them.

Main procedures:
- :func:`simplify_spiders`: spider fusion
- :func:`simplify_edges`: self-loop removal and parallel edge reduction
- :func:`simplify_identities`: removal of phase-free degree-2 spiders
- :func:`simplify_local_comp`: local complementation of +-pi/2 spiders
- :func:`simplify_pivots`: pivoting on pairs of 0/pi spiders
- :func:`simplify_clifford`: all of the above until none applies
- :func:`simplify_full`: Clifford simplification plus cleanup rules

Callers that need to bound the time spent can use :func:`step`, which applies
at most one rewrite and returns.

Example usage:
    from zxlite import Diagram, VertexType, EdgeType
    from zxlite.simplify import simplify_clifford

    g = Diagram()
    ...
    simplify_clifford(g, quiet=False)
"""

__all__ = [
    'simplify_spiders',
    'full_spider_fusion',
    'simplify_edges',
    'simplify_identities',
    'simplify_local_comp',
    'simplify_pivots',
    'simplify_clifford',
    'simplify_full',
    'simp',
    'step',
    'Stats',
]

from typing import Dict, Optional

from .graph.diagram import Diagram
from .rules import (
    IDENTITY_REMOVAL,
    ISOLATED_REMOVAL,
    LOCAL_COMPLEMENT,
    PARALLEL_EDGE_MERGE,
    PIVOT,
    SELF_LOOP_REMOVAL,
    SPIDER_FUSION,
    Rule,
    apply_rule,
    match_first,
    to_gh,
)


class Stats:
    """Statistics tracker for rewrite operations."""

    def __init__(self) -> None:
        self.num_rewrites: Dict[str, int] = {}

    def count_rewrites(self, rule: str, n: int) -> None:
        """Record that n rewrites of the given rule were applied."""
        if rule in self.num_rewrites:
            self.num_rewrites[rule] += n
        else:
            self.num_rewrites[rule] = n

    def total(self) -> int:
        return sum(self.num_rewrites.values())

    def __str__(self) -> str:
        s = "REWRITES\n"
        nt = 0
        for r, n in self.num_rewrites.items():
            nt += n
            s += "%s %s\n" % (str(n).rjust(6), r)
        s += "%s TOTAL" % str(nt).rjust(6)
        return s


def step(g: Diagram, rule: Rule) -> bool:
    """Applies ``rule`` at its first match, if there is one.

    Returns:
        True if a rewrite was applied, False if the diagram is stable under ``rule``
    """
    m = match_first(g, rule)
    if m is None:
        return False
    apply_rule(g, rule, m)
    return True


def simp(
    g: Diagram,
    rule: Rule,
    quiet: bool = True,
    stats: Optional[Stats] = None
) -> int:
    """
    Applies ``rule`` until it no longer matches anywhere in ``g``.

    Args:
        g: The diagram to simplify
        rule: One of the rules of :mod:`zxlite.rules`
        quiet: If False, print the number of rewrites
        stats: Optional statistics tracker

    Returns:
        Number of rewrites applied
    """
    count = 0
    while step(g, rule):
        count += 1

    if not quiet and count > 0:
        print(f"{rule.name}: {count} rewrites")
    if stats is not None and count > 0:
        stats.count_rewrites(rule.name, count)

    return count


def simplify_spiders(
    g: Diagram,
    quiet: bool = True,
    stats: Optional[Stats] = None
) -> bool:
    """
    Fuses adjacent spiders of the same colour until none are left.
    Parallel edges and self-loops created by a fusion are reduced as part
    of that fusion.

    Returns:
        True if any fusion was applied, False otherwise
    """
    return simp(g, SPIDER_FUSION, quiet, stats) > 0


def full_spider_fusion(
    g: Diagram,
    quiet: bool = True,
    stats: Optional[Stats] = None
) -> int:
    """
    Same as :func:`simplify_spiders`, but returns the number of fusions.
    """
    return simp(g, SPIDER_FUSION, quiet, stats)


def simplify_edges(
    g: Diagram,
    quiet: bool = True,
    stats: Optional[Stats] = None
) -> bool:
    """
    Removes self-loops from spiders and reduces parallel edges between
    spiders until at most one edge joins any two of them.

    Returns:
        True if any edge was removed, False otherwise
    """
    applied_any = False
    while True:
        c1 = simp(g, SELF_LOOP_REMOVAL, quiet, stats)
        c2 = simp(g, PARALLEL_EDGE_MERGE, quiet, stats)
        if c1 + c2 == 0:
            break
        applied_any = True
    return applied_any


def simplify_identities(
    g: Diagram,
    quiet: bool = True,
    stats: Optional[Stats] = None
) -> bool:
    """
    Removes identity spiders (phase 0 and degree 2).

    Returns:
        True if any rewrites were applied, False otherwise
    """
    return simp(g, IDENTITY_REMOVAL, quiet, stats) > 0


def simplify_local_comp(
    g: Diagram,
    quiet: bool = True,
    stats: Optional[Stats] = None
) -> bool:
    """
    Removes +-pi/2 Z-spiders by local complementation.

    Returns:
        True if any rewrites were applied, False otherwise
    """
    return simp(g, LOCAL_COMPLEMENT, quiet, stats) > 0


def simplify_pivots(
    g: Diagram,
    quiet: bool = True,
    stats: Optional[Stats] = None
) -> bool:
    """
    Removes pairs of adjacent 0/pi Z-spiders by pivoting.

    Returns:
        True if any rewrites were applied, False otherwise
    """
    return simp(g, PIVOT, quiet, stats) > 0


def simplify_clifford(
    g: Diagram,
    quiet: bool = True,
    stats: Optional[Stats] = None
) -> bool:
    """
    Repeatedly runs edge cleanup, spider fusion, identity removal, local complementation
    and pivoting until a whole round changes nothing.

    Returns:
        True if any rewrites were applied, False otherwise
    """
    if not quiet:
        print("Starting simplify_clifford...")

    applied_any = False
    iteration = 0

    while True:
        iteration += 1
        if not quiet:
            print(f"  Iteration {iteration}")

        i0 = simplify_edges(g, quiet, stats)
        i1 = simplify_spiders(g, quiet, stats)
        i2 = simplify_identities(g, quiet, stats)
        i3 = simplify_local_comp(g, quiet, stats)
        i4 = simplify_pivots(g, quiet, stats)

        if not (i0 or i1 or i2 or i3 or i4):
            break

        applied_any = True

    if not quiet:
        print(f"Completed simplify_clifford after {iteration} iterations")

    return applied_any


def simplify_full(
    g: Diagram,
    quiet: bool = True,
    stats: Optional[Stats] = None
) -> bool:
    """
    The main simplification routine.

    The algorithm:
    1. Recolour every X-spider to Z (:func:`zxlite.rules.to_gh`)
    2. Main loop:
       - Clifford simplification
       - Removal of isolated spiders into the scalar
       - Repeat until no changes

    Returns:
        True if the diagram changed, False otherwise
    """
    if not quiet:
        print(f"Starting simplify_full on {g.stats()}...")

    recoloured = to_gh(g)
    if not quiet and recoloured:
        print(f"to_gh: {recoloured} spiders recoloured")

    applied_any = recoloured > 0
    while True:
        i1 = simplify_clifford(g, quiet, stats)
        i2 = simp(g, ISOLATED_REMOVAL, quiet, stats) > 0
        if not (i1 or i2):
            break
        applied_any = True

    if not quiet:
        print(f"Completed simplify_full: {g.stats()}")
        if stats:
            print(stats)

    return applied_any
