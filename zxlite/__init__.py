"""zxlite: in-memory ZX-diagrams and their simplification."""

__version__ = "0.1.0"

from .errors import InvalidArgumentError, InvariantError, NotFoundError, PhaseParseError, ZXError
from .graph.diagram import Diagram, new_diagram
from .graph.scalar import Scalar
from .simplify import (
    Stats,
    full_spider_fusion,
    simplify_edges,
    simplify_clifford,
    simplify_full,
    simplify_identities,
    simplify_local_comp,
    simplify_pivots,
    simplify_spiders,
)
from .utils import EdgeType, VertexType, parse_phase, phase_to_str
