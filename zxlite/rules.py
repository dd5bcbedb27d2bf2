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
Rewrite rules on ZX-diagrams.

Each rewrite rule consists of two functions: a checker and a rewriter.
The checker is a pure predicate that tells whether the rule applies at a given
vertex (``check_x(g, v)``) or at a given pair of adjacent vertices
(``check_x(g, v0, v1)``). The rewriter performs the rewrite in place and
assumes the checker has just returned True for the same arguments; it does
not validate again.

Both are bundled in a :class:`Rule`, and :func:`match_first` finds the first
place a rule applies, scanning vertices in ascending id order. Edge rules
visit each pair ``(v, n)`` with ``v < n`` once, neighbours in ascending order.

Every rewriter removes at least one vertex or at least one edge and never
adds vertices, which is what makes the strategies in :mod:`zxlite.simplify`
terminate.
"""

from fractions import Fraction
from typing import Callable, List, NamedTuple, Optional, Tuple

from typing_extensions import Literal

from .errors import InvariantError
from .graph.diagram import Diagram, VT
from .utils import (
    EdgeType,
    FractionLike,
    VertexType,
    compose_edge_types,
    effective_edge_type,
    phase_is_clifford,
    phase_is_pauli,
    phase_is_proper_clifford,
    toggle_edge,
    vertex_is_zx,
)

MatchObject = Tuple[VT, ...]


class Rule(NamedTuple):
    name: str
    target: Literal["vertex", "edge"]
    check: Callable[..., bool]
    apply: Callable[..., None]


def _add_power(g: Diagram, n: int) -> None:
    if g.track_scalar:
        g.scalar.add_power(n)


def _add_phase(g: Diagram, phase: FractionLike) -> None:
    if g.track_scalar:
        g.scalar.add_phase(phase)


def _is_single_hadamard(g: Diagram, v: VT, n: VT) -> bool:
    tys = g.edge_kinds(v, n)
    return len(tys) == 1 and effective_edge_type(tys[0]) == EdgeType.HADAMARD


def match_first(g: Diagram, rule: Rule) -> Optional[MatchObject]:
    """Returns the first match of ``rule`` in ``g``, or None."""
    vertices = g.vertex_set()
    for v in g.vertices():
        if rule.target == "vertex":
            if rule.check(g, v):
                return (v,)
            continue
        for n in sorted(g.neighbors(v)):
            if n not in vertices:
                raise InvariantError(f"Edge ({v}, {n}) references a missing vertex")
            if n <= v:
                continue
            if rule.check(g, v, n):
                return (v, n)
    return None


def apply_rule(g: Diagram, rule: Rule, m: MatchObject) -> None:
    rule.apply(g, *m)


# Edge normalisation

def check_parallel(g: Diagram, v0: VT, v1: VT) -> bool:
    """Two distinct spiders connected by more than one edge."""
    if v0 == v1:
        return False
    if not (vertex_is_zx(g.kind(v0)) and vertex_is_zx(g.kind(v1))):
        return False
    return len(g.edge_kinds(v0, v1)) > 1


def merge_parallel(g: Diagram, v0: VT, v1: VT) -> None:
    """Reduces the edges between two spiders to at most one.

    Between spiders of the same colour regular edges fuse while Hadamard
    edges cancel in pairs. Between spiders of different colours it is the
    other way around. If one edge of each type is left, they combine into a
    single edge plus a pi phase."""
    tys = g.remove_all_edges(v0, v1)
    n1 = sum(1 for t in tys if effective_edge_type(t) == EdgeType.SIMPLE)
    n2 = len(tys) - n1
    new_type: Optional[EdgeType]
    if g.kind(v0) == g.kind(v1):
        n1 = 1 if n1 else 0
        pairs, n2 = divmod(n2, 2)
        _add_power(g, -2 * pairs)
        if n1 and n2:
            new_type = EdgeType.SIMPLE
            g.add_to_phase(v0, 1)
            _add_power(g, -1)
        elif n1:
            new_type = EdgeType.SIMPLE
        elif n2:
            new_type = EdgeType.HADAMARD
        else:
            new_type = None
    else:
        pairs, n1 = divmod(n1, 2)
        n2 = 1 if n2 else 0
        _add_power(g, -2 * pairs)
        if n1 and n2:
            new_type = EdgeType.HADAMARD
            g.add_to_phase(v0, 1)
            _add_power(g, -1)
        elif n1:
            new_type = EdgeType.SIMPLE
        elif n2:
            new_type = EdgeType.HADAMARD
        else:
            new_type = None
    if new_type is not None:
        g.add_edge(v0, v1, new_type)


def check_self_loop(g: Diagram, v: VT) -> bool:
    return vertex_is_zx(g.kind(v)) and g.connected(v, v)


def remove_self_loops(g: Diagram, v: VT) -> None:
    """Removes every self-loop on a spider. A regular loop is an identity,
    a Hadamard loop adds pi to the phase and a factor 1/sqrt(2)."""
    tys = g.remove_all_edges(v, v)
    h = sum(1 for t in tys if effective_edge_type(t) == EdgeType.HADAMARD)
    if h:
        g.add_to_phase(v, h)
        _add_power(g, -h)


def add_edge_smart(g: Diagram, s: VT, t: VT, edgetype: EdgeType) -> None:
    """Adds an edge and immediately reduces the parallel edges or self-loop
    this creates when both ends are spiders."""
    g.add_edge(s, t, edgetype)
    if s == t:
        if check_self_loop(g, s):
            remove_self_loops(g, s)
    elif check_parallel(g, s, t):
        merge_parallel(g, s, t)


# Spider fusion

def check_fuse(g: Diagram, v0: VT, v1: VT) -> bool:
    """Two distinct spiders of the same colour joined by a regular edge."""
    if v0 == v1:
        return False
    t0 = g.kind(v0)
    if not vertex_is_zx(t0) or g.kind(v1) != t0:
        return False
    return any(effective_edge_type(t) == EdgeType.SIMPLE for t in g.edge_kinds(v0, v1))


def fuse(g: Diagram, v0: VT, v1: VT) -> None:
    """Fuses ``v1`` into ``v0``. The phases add up, ``v0`` takes over every
    edge of ``v1``, and edges left between the two become self-loops."""
    g.add_to_phase(v0, g.phase(v1))

    between = g.remove_all_edges(v0, v1)
    for i, t in enumerate(between):
        if effective_edge_type(t) == EdgeType.SIMPLE:
            del between[i]
            break
    if g.connected(v1, v1):
        between.extend(g.remove_all_edges(v1, v1))

    moved: List[Tuple[VT, EdgeType]] = []
    for n in sorted(g.neighbors(v1)):
        for t in g.edge_kinds(v1, n):
            moved.append((n, t))
    g.remove_vertex(v1)

    for n, t in moved:
        g.add_edge(v0, n, t)
    for t in between:
        g.add_edge(v0, v0, t)

    if check_self_loop(g, v0):
        remove_self_loops(g, v0)
    for n in sorted(set(n for n, _ in moved)):
        if check_parallel(g, v0, n):
            merge_parallel(g, v0, n)


# Identity removal

def check_remove_id(g: Diagram, v: VT) -> bool:
    """A phase-free spider with exactly two distinct neighbours."""
    if not vertex_is_zx(g.kind(v)) or g.phase(v) != 0:
        return False
    if g.degree(v) != 2:
        return False
    vn = g.neighbors(v)
    return len(vn) == 2 and v not in vn


def remove_id(g: Diagram, v: VT) -> None:
    """Removes an identity spider and joins its two neighbours directly."""
    n0, n1 = sorted(g.neighbors(v))
    et = compose_edge_types(g.edge_kind(v, n0), g.edge_kind(v, n1))
    g.remove_vertex(v)
    add_edge_smart(g, n0, n1, et)


# Local complementation

def check_lcomp(g: Diagram, v: VT) -> bool:
    """A Z-spider with phase +-pi/2 whose neighbours are all Z-spiders,
    each connected to it by a single Hadamard edge."""
    if g.kind(v) != VertexType.Z or not phase_is_proper_clifford(g.phase(v)):
        return False
    vn = g.neighbors(v)
    if v in vn:
        return False
    return all(g.kind(n) == VertexType.Z and _is_single_hadamard(g, v, n) for n in vn)


def lcomp(g: Diagram, v: VT) -> None:
    """Removes ``v`` by local complementation: the Hadamard edges between its
    neighbours are toggled and every neighbour gets ``-phase(v)``. See
    "Graph Theoretic Simplification of Quantum Circuits using the ZX calculus"
    (arXiv:1902.03178)."""
    p = g.phase(v)
    vn = sorted(g.neighbors(v))
    n = len(vn)
    g.remove_vertex(v)

    if p == Fraction(1, 2):
        _add_phase(g, Fraction(1, 4))
    else:
        _add_phase(g, Fraction(7, 4))
    _add_power(g, (n - 2) * (n - 1) // 2)

    for i in range(n):
        g.add_to_phase(vn[i], -p)
        for j in range(i + 1, n):
            add_edge_smart(g, vn[i], vn[j], EdgeType.HADAMARD)


# Pivoting

def check_pivot(g: Diagram, v0: VT, v1: VT) -> bool:
    """Two Z-spiders with phase 0 or pi joined by a single Hadamard edge, all
    of whose other neighbours are Z-spiders joined by single Hadamard edges."""
    if v0 == v1:
        return False
    for v in (v0, v1):
        if g.kind(v) != VertexType.Z or not phase_is_pauli(g.phase(v)):
            return False
    if not _is_single_hadamard(g, v0, v1):
        return False
    for v, other in ((v0, v1), (v1, v0)):
        for n in g.neighbors(v):
            if n == other:
                continue
            if n == v:
                return False
            if g.kind(n) != VertexType.Z or not _is_single_hadamard(g, v, n):
                return False
    return True


def pivot(g: Diagram, v0: VT, v1: VT) -> None:
    """Removes both vertices of a pivot edge.

    The remaining neighbours split into those of ``v0`` only (``a``), those of
    ``v1`` only (``b``) and the shared ones (``c``). Hadamard edges are
    toggled between every pair taken from two different groups. The phase
    of ``v0`` goes onto ``b`` and ``c``, the phase of ``v1`` onto ``a`` and
    ``c``, and ``c`` additionally gets pi."""
    n0 = g.neighbors(v0) - {v1}
    n1 = g.neighbors(v1) - {v0}
    c = n0 & n1
    a = n0 - c
    b = n1 - c
    k0, k1, k2 = len(a), len(b), len(c)
    p0, p1 = g.phase(v0), g.phase(v1)

    _add_power(g, k0 * k2 + k1 * k2 + k0 * k1)
    _add_power(g, -(k0 + k1 + 2 * k2 - 1))
    if p0 and p1:
        _add_phase(g, 1)

    for v in c:
        g.add_to_phase(v, 1)
    if p0:
        for v in b | c:
            g.add_to_phase(v, p0)
    if p1:
        for v in a | c:
            g.add_to_phase(v, p1)

    g.remove_vertex(v0)
    g.remove_vertex(v1)

    sa, sb, sc = sorted(a), sorted(b), sorted(c)
    pairs = ([(s, t) for s in sa for t in sb] +
             [(s, t) for s in sb for t in sc] +
             [(s, t) for s in sa for t in sc])
    for s, t in pairs:
        add_edge_smart(g, s, t, EdgeType.HADAMARD)


# Cleanup

def check_isolated(g: Diagram, v: VT) -> bool:
    """A spider without edges whose value is exactly representable."""
    if not vertex_is_zx(g.kind(v)) or g.degree(v) != 0:
        return False
    return phase_is_clifford(g.phase(v))


def remove_isolated(g: Diagram, v: VT) -> None:
    """Removes an isolated spider, multiplying its value into the scalar."""
    if g.track_scalar:
        g.scalar.add_spider(g.phase(v))
    g.remove_vertex(v)


def to_gh(g: Diagram) -> int:
    """Turns every X-spider into a Z-spider by toggling the type of every edge
    with exactly one X-spider end. Returns the number of recoloured spiders."""
    xs = set(v for v in g.vertices() if g.kind(v) == VertexType.X)
    if not xs:
        return 0
    flipped = set()
    for s, t, _ in g.edges():
        if s != t and (s in xs) != (t in xs):
            flipped.add((s, t))
    for s, t in sorted(flipped):
        for et in g.remove_all_edges(s, t):
            g.add_edge(s, t, toggle_edge(et))
    for v in xs:
        g.set_kind(v, VertexType.Z)
    return len(xs)


SPIDER_FUSION = Rule("spider_fusion", "edge", check_fuse, fuse)
SELF_LOOP_REMOVAL = Rule("self_loop_removal", "vertex", check_self_loop, remove_self_loops)
PARALLEL_EDGE_MERGE = Rule("parallel_edge_merge", "edge", check_parallel, merge_parallel)
IDENTITY_REMOVAL = Rule("identity_removal", "vertex", check_remove_id, remove_id)
LOCAL_COMPLEMENT = Rule("local_complement", "vertex", check_lcomp, lcomp)
PIVOT = Rule("pivot", "edge", check_pivot, pivot)
ISOLATED_REMOVAL = Rule("isolated_removal", "vertex", check_isolated, remove_isolated)

ALL_RULES = {
    r.name: r
    for r in (
        SPIDER_FUSION,
        SELF_LOOP_REMOVAL,
        PARALLEL_EDGE_MERGE,
        IDENTITY_REMOVAL,
        LOCAL_COMPLEMENT,
        PIVOT,
        ISOLATED_REMOVAL,
    )
}
