import threading
from contextlib import contextmanager
from fractions import Fraction
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple, Union

from ..config import get_settings
from ..errors import InvalidArgumentError, InvariantError, NotFoundError
from ..utils import (
    EdgeType,
    FloatInt,
    FractionLike,
    VertexType,
    edge_type_from_code,
    normalize_phase,
    parse_phase,
    vertex_type_from_code,
)
from .scalar import Scalar

VT = int
ET = Tuple[int, int]
EdgeRecord = Tuple[VT, VT, EdgeType]
PhaseLike = Union[FractionLike, str]


class VData:
    """Per-vertex record."""

    __slots__ = ("ty", "phase", "row", "col")

    def __init__(self, ty: VertexType, phase: Fraction, row: float, col: float) -> None:
        self.ty = ty
        self.phase = phase
        self.row = row
        self.col = col

    def copy(self) -> "VData":
        return VData(self.ty, self.phase, self.row, self.col)


class Diagram:
    """In-memory ZX-diagram.

    Vertices are addressed by integer ids that are handed out in increasing
    order and never reused. The adjacency structure is a multigraph:
    ``_adj[u][v]`` is the list of types of the edges between ``u`` and ``v``,
    oldest first, and a self-loop on ``v`` is stored once in ``_adj[v][v]``.
    """

    backend = "memory"

    def __init__(self, track_scalar: bool = True) -> None:
        self._vindex: int = 0
        self._vdata: Dict[VT, VData] = {}
        self._adj: Dict[VT, Dict[VT, List[EdgeType]]] = {}
        self._nedges: int = 0
        self.track_scalar = track_scalar
        self.scalar = Scalar()
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Diagram({self.stats()})"

    @contextmanager
    def exclusive(self) -> Iterator["Diagram"]:
        """Holds the diagram's lock for a sequence of mutations.

        The diagram itself is not thread-safe; callers sharing a diagram
        between threads must wrap every access in this context manager."""
        with self._lock:
            yield self

    def copy(self) -> "Diagram":
        g = Diagram(track_scalar=self.track_scalar)
        g._vindex = self._vindex
        g._vdata = {v: d.copy() for v, d in self._vdata.items()}
        g._adj = {v: {n: list(tys) for n, tys in nhd.items()} for v, nhd in self._adj.items()}
        g._nedges = self._nedges
        g.scalar = self.scalar.copy()
        return g

    def stats(self) -> str:
        return f"{self.num_vertices()} vertices, {self.num_edges()} edges"

    def _check_vertex(self, v: VT) -> VData:
        try:
            return self._vdata[v]
        except (KeyError, TypeError):
            raise NotFoundError(f"Vertex {v!r} does not exist") from None

    @staticmethod
    def _check_vertex_type(ty: Union[VertexType, int]) -> VertexType:
        return vertex_type_from_code(ty)

    @staticmethod
    def _check_edge_type(ty: Union[EdgeType, int]) -> EdgeType:
        return edge_type_from_code(ty)

    # Vertices

    def vindex(self) -> int:
        """The id the next added vertex will receive."""
        return self._vindex

    def add_vertex(
        self,
        ty: Union[VertexType, int] = VertexType.BOUNDARY,
        row: FloatInt = 0,
        col: FloatInt = 0,
        phase: Optional[PhaseLike] = None,
    ) -> VT:
        """Adds a single vertex and returns its id."""
        ty = self._check_vertex_type(ty)
        p = self._to_phase(phase)
        r, c = self._to_coords(row, col)
        v = self._vindex
        self._vindex += 1
        self._vdata[v] = VData(ty, p, r, c)
        self._adj[v] = {}
        return v

    def add_vertex_at(self, ty: Union[VertexType, int], row: FloatInt, col: FloatInt) -> VT:
        return self.add_vertex(ty, row, col)

    def add_vertex_indexed(
        self,
        v: VT,
        ty: Union[VertexType, int] = VertexType.BOUNDARY,
        row: FloatInt = 0,
        col: FloatInt = 0,
        phase: Optional[PhaseLike] = None,
    ) -> None:
        """Adds a vertex with a prescribed id. Used when loading a stored
        diagram whose ids must be preserved."""
        if not isinstance(v, int) or isinstance(v, bool) or v < 0:
            raise InvalidArgumentError(f"Vertex id must be a non-negative int, not {v!r}")
        if v in self._vdata:
            raise InvalidArgumentError(f"Vertex {v} already exists")
        ty = self._check_vertex_type(ty)
        p = self._to_phase(phase)
        r, c = self._to_coords(row, col)
        self._vdata[v] = VData(ty, p, r, c)
        self._adj[v] = {}
        if v >= self._vindex:
            self._vindex = v + 1

    def add_vertices(self, amount: int) -> List[VT]:
        """Adds ``amount`` boundary vertices and returns their ids."""
        if amount < 0:
            raise InvalidArgumentError("Amount of vertices added must be >= 0")
        return [self.add_vertex() for _ in range(amount)]

    def remove_vertex(self, v: VT) -> None:
        """Removes a vertex together with every edge touching it."""
        self._check_vertex(v)
        for n, tys in self._adj[v].items():
            self._nedges -= len(tys)
            if n != v:
                del self._adj[n][v]
        del self._adj[v]
        del self._vdata[v]

    def remove_vertices(self, vertices: Iterable[VT]) -> None:
        vs = list(dict.fromkeys(vertices))
        for v in vs:
            self._check_vertex(v)
        for v in vs:
            self.remove_vertex(v)

    def vertices(self) -> List[VT]:
        """All vertex ids in ascending order."""
        return sorted(self._vdata)

    def vertex_set(self) -> Set[VT]:
        return set(self._vdata)

    def num_vertices(self) -> int:
        return len(self._vdata)

    def contains(self, v: VT) -> bool:
        return v in self._vdata

    def kind(self, v: VT) -> VertexType:
        return self._check_vertex(v).ty

    def set_kind(self, v: VT, ty: Union[VertexType, int]) -> None:
        d = self._check_vertex(v)
        d.ty = self._check_vertex_type(ty)

    def phase(self, v: VT) -> Fraction:
        return self._check_vertex(v).phase

    def set_phase(self, v: VT, phase: PhaseLike) -> None:
        """Sets the phase of a vertex. Strings of the form ``N`` or ``N/D``
        are parsed as multiples of pi."""
        d = self._check_vertex(v)
        d.phase = self._to_phase(phase)

    def add_to_phase(self, v: VT, phase: FractionLike) -> None:
        d = self._check_vertex(v)
        d.phase = normalize_phase(d.phase + phase)

    def row(self, v: VT) -> float:
        return self._check_vertex(v).row

    def col(self, v: VT) -> float:
        return self._check_vertex(v).col

    def position(self, v: VT) -> Tuple[float, float]:
        d = self._check_vertex(v)
        return (d.row, d.col)

    def set_position(self, v: VT, row: FloatInt, col: FloatInt) -> None:
        d = self._check_vertex(v)
        d.row, d.col = self._to_coords(row, col)

    def types(self) -> Dict[VT, VertexType]:
        return {v: d.ty for v, d in self._vdata.items()}

    def phases(self) -> Dict[VT, Fraction]:
        return {v: d.phase for v, d in self._vdata.items()}

    @staticmethod
    def _to_coords(row: FloatInt, col: FloatInt) -> Tuple[float, float]:
        coords = []
        for x in (row, col):
            if isinstance(x, bool) or not isinstance(x, (int, float)):
                raise InvalidArgumentError(f"Vertex position must be a number, not {x!r}")
            coords.append(float(x))
        return coords[0], coords[1]

    @staticmethod
    def _to_phase(phase: Optional[PhaseLike]) -> Fraction:
        if phase is None:
            return Fraction(0)
        if isinstance(phase, str):
            return parse_phase(phase)
        return normalize_phase(phase)

    # Edges

    def add_edge(self, s: VT, t: VT, edgetype: Union[EdgeType, int] = EdgeType.SIMPLE) -> ET:
        """Adds an edge between ``s`` and ``t``. If the two are already
        connected this creates a parallel edge."""
        self._check_vertex(s)
        self._check_vertex(t)
        et = self._check_edge_type(edgetype)
        self._adj[s].setdefault(t, []).append(et)
        if s != t:
            self._adj[t].setdefault(s, []).append(et)
        self._nedges += 1
        return (s, t)

    def add_edge_with_kind(self, s: VT, t: VT, edgetype: Union[EdgeType, int]) -> ET:
        return self.add_edge(s, t, edgetype)

    def add_edges(self, edges: Iterable[ET], edgetype: Union[EdgeType, int] = EdgeType.SIMPLE) -> None:
        es = list(edges)
        et = self._check_edge_type(edgetype)
        for s, t in es:
            self._check_vertex(s)
            self._check_vertex(t)
        for s, t in es:
            self.add_edge(s, t, et)

    def _edge_list(self, s: VT, t: VT) -> List[EdgeType]:
        self._check_vertex(s)
        self._check_vertex(t)
        tys = self._adj[s].get(t)
        if not tys:
            raise NotFoundError(f"Edge ({s}, {t}) does not exist")
        return tys

    def remove_edge(self, s: VT, t: VT, edgetype: Optional[Union[EdgeType, int]] = None) -> None:
        """Removes one edge between ``s`` and ``t``. When ``edgetype`` is
        given, the oldest edge of that type is removed, otherwise the oldest edge."""
        tys = self._edge_list(s, t)
        if edgetype is None:
            idx = 0
        else:
            et = self._check_edge_type(edgetype)
            if et not in tys:
                raise NotFoundError(f"Edge ({s}, {t}) of type {et.name} does not exist")
            idx = tys.index(et)
        del tys[idx]
        if s != t:
            del self._adj[t][s][idx]
        if not tys:
            del self._adj[s][t]
            if s != t:
                del self._adj[t][s]
        self._nedges -= 1

    def remove_all_edges(self, s: VT, t: VT) -> List[EdgeType]:
        """Removes every edge between ``s`` and ``t`` and returns their types."""
        tys = list(self._edge_list(s, t))
        del self._adj[s][t]
        if s != t:
            del self._adj[t][s]
        self._nedges -= len(tys)
        return tys

    def set_edge_kind(self, s: VT, t: VT, edgetype: Union[EdgeType, int]) -> None:
        """Changes the type of the oldest edge between ``s`` and ``t``."""
        tys = self._edge_list(s, t)
        et = self._check_edge_type(edgetype)
        tys[0] = et
        if s != t:
            self._adj[t][s][0] = et

    def edge_kind(self, s: VT, t: VT) -> EdgeType:
        """Type of the oldest edge between ``s`` and ``t``."""
        return self._edge_list(s, t)[0]

    def edge_kinds(self, s: VT, t: VT) -> List[EdgeType]:
        """Types of all the edges between ``s`` and ``t``, possibly empty."""
        self._check_vertex(s)
        self._check_vertex(t)
        return list(self._adj[s].get(t, ()))

    def connected(self, s: VT, t: VT) -> bool:
        self._check_vertex(s)
        self._check_vertex(t)
        return t in self._adj[s]

    def neighbors(self, v: VT) -> Set[VT]:
        """Vertices sharing at least one edge with ``v``. Contains ``v``
        itself when it has a self-loop."""
        self._check_vertex(v)
        return set(self._adj[v])

    def degree(self, v: VT) -> int:
        """Number of edge ends at ``v``: parallel edges count separately and
        a self-loop counts twice."""
        self._check_vertex(v)
        return sum(len(tys) * (2 if n == v else 1) for n, tys in self._adj[v].items())

    def edges(self) -> List[EdgeRecord]:
        """Every edge once, as ``(source, target, type)`` with ``source <= target``,
        ordered by source then target."""
        es: List[EdgeRecord] = []
        for v in sorted(self._adj):
            for n in sorted(self._adj[v]):
                if n < v:
                    continue
                for et in self._adj[v][n]:
                    es.append((v, n, et))
        return es

    def num_edges(self) -> int:
        return self._nedges

    def check_invariants(self) -> None:
        """Raises :class:`InvariantError` if the adjacency structure is
        inconsistent."""
        count = 0
        for v, nhd in self._adj.items():
            if v not in self._vdata:
                raise InvariantError(f"Adjacency entry for missing vertex {v}")
            for n, tys in nhd.items():
                if n not in self._vdata:
                    raise InvariantError(f"Edge ({v}, {n}) references a missing vertex")
                if not tys:
                    raise InvariantError(f"Empty edge list between {v} and {n}")
                if n != v and self._adj[n].get(v) != tys:
                    raise InvariantError(f"Asymmetric adjacency between {v} and {n}")
                if n >= v:
                    count += len(tys)
        if count != self._nedges:
            raise InvariantError(f"Edge count {self._nedges} does not match adjacency ({count})")
        for v, d in self._vdata.items():
            if not (0 <= d.phase < 2):
                raise InvariantError(f"Phase of vertex {v} is not normalised: {d.phase}")


def new_diagram(track_scalar: Optional[bool] = None) -> Diagram:
    """Creates an empty diagram. Whether the scalar is tracked defaults to
    the ``ZXLITE_TRACK_SCALAR`` setting."""
    if track_scalar is None:
        track_scalar = get_settings().track_scalar
    return Diagram(track_scalar=track_scalar)
