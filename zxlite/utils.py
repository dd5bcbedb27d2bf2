import re
from enum import IntEnum
from fractions import Fraction
from typing import Union

from .errors import InvalidArgumentError, PhaseParseError

FractionLike = Union[Fraction, int]
FloatInt = Union[float, int]

_PHASE_RE = re.compile(r"([+-]?[0-9]+)(?:/([+-]?[0-9]+))?")


class VertexType(IntEnum):
    """Type of a vertex in the diagram. The values double as the interchange codes."""
    BOUNDARY = 0
    Z = 1
    X = 2
    H_BOX = 3


class EdgeType(IntEnum):
    """Type of an edge in the diagram.

    ``WIRE`` is a catch-all kind kept so that diagrams written by newer tools
    can still be loaded. Every rewrite rule treats it as ``SIMPLE``."""
    SIMPLE = 0
    HADAMARD = 1
    WIRE = 2


def vertex_type_from_code(code: int) -> VertexType:
    try:
        return VertexType(int(code))
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Unknown vertex type code: {code!r}") from None


def edge_type_from_code(code: int) -> EdgeType:
    try:
        return EdgeType(int(code))
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Unknown edge type code: {code!r}") from None


def vertex_is_zx(ty: VertexType) -> bool:
    """Check if a vertex type corresponds to a green or red spider."""
    if ty == VertexType.Z or ty == VertexType.X:
        return True
    if ty == VertexType.BOUNDARY or ty == VertexType.H_BOX:
        return False
    raise InvalidArgumentError(f"Unknown vertex type: {ty!r}")


def effective_edge_type(ty: EdgeType) -> EdgeType:
    """The edge type as seen by the rewrite rules."""
    if ty == EdgeType.SIMPLE or ty == EdgeType.WIRE:
        return EdgeType.SIMPLE
    if ty == EdgeType.HADAMARD:
        return EdgeType.HADAMARD
    raise InvalidArgumentError(f"Unknown edge type: {ty!r}")


def toggle_edge(ty: EdgeType) -> EdgeType:
    """Swap the regular and Hadamard edge types."""
    if effective_edge_type(ty) == EdgeType.SIMPLE:
        return EdgeType.HADAMARD
    return EdgeType.SIMPLE


def compose_edge_types(t1: EdgeType, t2: EdgeType) -> EdgeType:
    """Type of the single wire obtained by plugging two wires together.
    Hadamards compose by parity: two of them cancel."""
    h1 = effective_edge_type(t1) == EdgeType.HADAMARD
    h2 = effective_edge_type(t2) == EdgeType.HADAMARD
    return EdgeType.HADAMARD if h1 != h2 else EdgeType.SIMPLE


def normalize_phase(phase: FractionLike) -> Fraction:
    """Reduces a phase (a multiple of pi) into the interval [0, 2)."""
    if isinstance(phase, bool) or not isinstance(phase, (Fraction, int)):
        raise InvalidArgumentError(f"Phase must be a Fraction or an int, not {type(phase).__name__}")
    return Fraction(phase) % 2


def parse_phase(s: str) -> Fraction:
    """Parses a phase given as ``"N"`` or ``"N/D"`` (a multiple of pi).

    Both parts must be signed integers and ``D`` must be positive."""
    if not isinstance(s, str):
        raise PhaseParseError(f"Phase must be a string, not {type(s).__name__}")
    if s.count("/") > 1:
        raise PhaseParseError(f"Phase {s!r} contains more than one '/'")
    m = _PHASE_RE.fullmatch(s.strip())
    if m is None:
        raise PhaseParseError(f"Phase {s!r} is not of the form N or N/D")
    numerator = int(m.group(1))
    denominator = int(m.group(2)) if m.group(2) is not None else 1
    if denominator <= 0:
        raise PhaseParseError(f"Phase {s!r} has a non-positive denominator")
    return normalize_phase(Fraction(numerator, denominator))


def phase_to_str(phase: FractionLike) -> str:
    """Inverse of :func:`parse_phase`."""
    p = Fraction(phase)
    if p.denominator == 1:
        return str(p.numerator)
    return f"{p.numerator}/{p.denominator}"


def phase_is_pauli(phase: FractionLike) -> bool:
    return phase == 0 or phase == 1


def phase_is_proper_clifford(phase: FractionLike) -> bool:
    return phase == Fraction(1, 2) or phase == Fraction(3, 2)


def phase_is_clifford(phase: FractionLike) -> bool:
    return (Fraction(phase) * 2).denominator == 1
