"""
JSON interchange format for diagrams.

Payload layout::

    {
      "vertices": [{"id": 0, "vertex_type": 1, "phase": "1/2", "row": 1.0, "col": 0.0}, ...],
      "edges": [{"source": 0, "target": 1, "edge_type": 0}, ...],
      "scalar": {"power2": 0, "phase": "0", "is_zero": false}
    }

Vertex type codes are 0-3 (Boundary, Z, X, H-box) and edge type codes 0-2
(Simple, Hadamard, Wire). Phases are written as ``"N"`` or ``"N/D"``
strings. Parallel edges are written as separate entries, so a multigraph
round-trips with its multiplicities. Vertex ids are preserved.
"""

import json
from typing import Any, Dict, List, Mapping

from ..errors import InvalidArgumentError
from ..graph.diagram import Diagram
from ..graph.scalar import Scalar
from ..utils import edge_type_from_code, phase_to_str, vertex_type_from_code


def to_dict(g: Diagram) -> Dict[str, Any]:
    vertices: List[Dict[str, Any]] = []
    for v in g.vertices():
        row, col = g.position(v)
        vertices.append({
            "id": v,
            "vertex_type": int(g.kind(v)),
            "phase": phase_to_str(g.phase(v)),
            "row": row,
            "col": col,
        })
    edges = [
        {"source": s, "target": t, "edge_type": int(et)}
        for s, t, et in g.edges()
    ]
    return {
        "vertices": vertices,
        "edges": edges,
        "scalar": g.scalar.to_dict(),
    }


def _require(entry: Any, key: str, what: str) -> Any:
    if not isinstance(entry, Mapping):
        raise InvalidArgumentError(f"{what} must be an object, got {entry!r}")
    if key not in entry:
        raise InvalidArgumentError(f"{what} is missing required field '{key}'")
    return entry[key]


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{what} must be an integer, got {value!r}")
    return value


def _as_float(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{what} must be a number, got {value!r}")
    return float(value)


def from_dict(d: Mapping[str, Any], track_scalar: bool = True) -> Diagram:
    """Builds a new diagram from a payload produced by :func:`to_dict`.

    Raises:
        InvalidArgumentError: if a required field is missing or malformed
    """
    vertices = _require(d, "vertices", "Diagram")
    edges = _require(d, "edges", "Diagram")
    if not isinstance(vertices, list) or not isinstance(edges, list):
        raise InvalidArgumentError("'vertices' and 'edges' must be lists")

    g = Diagram(track_scalar=track_scalar)
    for entry in vertices:
        v = _as_int(_require(entry, "id", "Vertex"), "Vertex id")
        ty = vertex_type_from_code(_as_int(_require(entry, "vertex_type", "Vertex"), "Vertex type"))
        phase = entry.get("phase", "0")
        if not isinstance(phase, str):
            raise InvalidArgumentError(f"Phase of vertex {v} must be a string, got {phase!r}")
        row = _as_float(entry.get("row", 0), "Vertex row")
        col = _as_float(entry.get("col", 0), "Vertex col")
        g.add_vertex_indexed(v, ty, row, col, phase)

    for entry in edges:
        s = _as_int(_require(entry, "source", "Edge"), "Edge source")
        t = _as_int(_require(entry, "target", "Edge"), "Edge target")
        et = edge_type_from_code(_as_int(entry.get("edge_type", 0), "Edge type"))
        if not (g.contains(s) and g.contains(t)):
            raise InvalidArgumentError(f"Edge ({s}, {t}) references an unknown vertex")
        g.add_edge(s, t, et)

    if "scalar" in d:
        scalar = d["scalar"]
        if not isinstance(scalar, Mapping):
            raise InvalidArgumentError(f"Malformed scalar: {scalar!r}")
        g.scalar = Scalar.from_dict(scalar)
    return g


def to_json(g: Diagram, indent: int = 2) -> str:
    return json.dumps(to_dict(g), indent=indent)


def from_json(s: str, track_scalar: bool = True) -> Diagram:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(f"Diagram is not valid JSON: {e}") from e
    if not isinstance(d, dict):
        raise InvalidArgumentError("Diagram JSON must be an object")
    return from_dict(d, track_scalar=track_scalar)
