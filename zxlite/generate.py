"""Ready-made diagrams."""

from .graph.diagram import Diagram
from .utils import EdgeType, VertexType

# (index, qubit, type) of the spiders of the example diagram, in placement order
_EXAMPLE_VLIST = [
    (0, 0, 1), (1, 1, 2), (2, 2, 1), (3, 3, 1),
    (4, 0, 1), (5, 1, 1), (6, 2, 2), (7, 3, 1),
    (8, 0, 1), (9, 1, 2), (10, 2, 1), (11, 3, 1),
    (12, 0, 2), (13, 1, 2), (14, 2, 1), (15, 3, 2),
]

# (spider, spider, edge type)
_EXAMPLE_ELIST = [
    (0, 1, 0), (0, 4, 0), (1, 5, 0), (1, 6, 0),
    (2, 6, 0), (3, 7, 0), (4, 8, 0), (5, 9, 1),
    (6, 10, 0), (7, 11, 0), (8, 12, 0), (8, 13, 0),
    (9, 13, 1), (9, 14, 1), (10, 13, 0), (10, 14, 0),
    (11, 14, 0), (11, 15, 0),
]


def example_diagram(track_scalar: bool = True) -> Diagram:
    """The 4-qubit example diagram shown by ZXLive on startup.

    Inputs get ids 0-3, the 16 spiders ids 4-19 and the outputs ids 20-23.
    Vertex rows follow the qubit wires left to right."""
    qubits = 4
    g = Diagram(track_scalar=track_scalar)
    cur_row = [1.0] * qubits

    inputs = []
    for q in range(qubits):
        inputs.append(g.add_vertex(VertexType.BOUNDARY, cur_row[q], q))
        cur_row[q] += 1

    spiders = []
    for _, q, ty in _EXAMPLE_VLIST:
        spiders.append(g.add_vertex(ty, cur_row[q], q))
        cur_row[q] += 1

    outputs = []
    for q in range(qubits):
        outputs.append(g.add_vertex(VertexType.BOUNDARY, cur_row[q], q))

    for s, t, et in _EXAMPLE_ELIST:
        g.add_edge(spiders[s], spiders[t], et)
    for q in range(qubits):
        g.add_edge(inputs[q], spiders[q])
    for q in range(qubits):
        g.add_edge(spiders[len(spiders) - qubits + q], outputs[q])
    return g


def identity_chain(n: int, edgetype: EdgeType = EdgeType.SIMPLE) -> Diagram:
    """A single wire from an input to an output passing through ``n``
    phase-free Z-spiders, every edge of type ``edgetype``."""
    g = Diagram()
    prev = g.add_vertex(VertexType.BOUNDARY, 0, 0)
    for i in range(n):
        v = g.add_vertex(VertexType.Z, 0, i + 1)
        g.add_edge(prev, v, edgetype)
        prev = v
    out = g.add_vertex(VertexType.BOUNDARY, 0, n + 1)
    g.add_edge(prev, out, edgetype)
    return g
