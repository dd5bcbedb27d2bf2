import json
from fractions import Fraction

from zxlite.errors import InvalidArgumentError, PhaseParseError
from zxlite.generate import example_diagram
from zxlite.io.jsonformat import from_dict, from_json, to_dict, to_json
from zxlite.utils import EdgeType, VertexType

from tests.test_simple_backend._base_unittest import SimpleUnitTestCase, B, Z, X, S, H


def _payload(vertices, edges):
    return {"vertices": vertices, "edges": edges}


class TestJsonFormat(SimpleUnitTestCase):
    def test_round_trip_example(self):
        g = example_diagram()
        g.set_phase(5, "1/2")
        g.set_phase(6, "7/4")

        h = from_json(to_json(g))
        self.g = h

        self.assertEqual(h.vertices(), g.vertices())
        self.assertEqual(h.edges(), g.edges())
        self.assertEqual(h.types(), g.types())
        self.assertEqual(h.phases(), g.phases())
        self.assertEqual(h.position(23), g.position(23))
        self.assertEqual(h.vindex(), g.vindex())

    def test_parallel_edges_and_self_loops_are_kept(self):
        g = self.g
        self.build([(Z, 0), (X, 0)], [(0, 1, S), (0, 1, H), (0, 0, H)])

        h = from_dict(to_dict(g))

        self.assertEqual(h.num_edges(), 3)
        self.assertEqual(h.edge_kinds(0, 1), [EdgeType.SIMPLE, EdgeType.HADAMARD])
        self.assertEqual(h.edge_kinds(0, 0), [EdgeType.HADAMARD])
        h.check_invariants()

    def test_scalar_round_trip(self):
        g = self.g
        g.scalar.add_power(-3)
        g.scalar.add_phase(Fraction(1, 4))

        d = to_dict(g)
        self.assertEqual(d["scalar"], {"power2": -3, "phase": "1/4", "is_zero": False})
        self.assertEqual(from_dict(d).scalar, g.scalar)

    def test_ids_are_preserved(self):
        g = from_dict(_payload(
            [
                {"id": 3, "vertex_type": 1, "phase": "1/2", "row": 0, "col": 1},
                {"id": 7, "vertex_type": 0},
            ],
            [{"source": 7, "target": 3, "edge_type": 1}],
        ))
        self.g = g

        self.assertEqual(g.vertices(), [3, 7])
        self.assertEqual(g.kind(3), VertexType.Z)
        self.assertEqual(g.phase(3), Fraction(1, 2))
        self.assertEqual(g.edge_kind(3, 7), EdgeType.HADAMARD)
        self.assertEqual(g.add_vertex(), 8)

    def test_wire_kind_is_accepted(self):
        g = from_dict(_payload(
            [{"id": 0, "vertex_type": 1}, {"id": 1, "vertex_type": 1}],
            [{"source": 0, "target": 1, "edge_type": 2}],
        ))
        self.g = g

        self.assertEqual(g.edge_kind(0, 1), EdgeType.WIRE)

    def test_malformed_payloads(self):
        bad = [
            {"edges": []},
            _payload([{"vertex_type": 1}], []),
            _payload([{"id": 0, "vertex_type": 7}], []),
            _payload([{"id": "a", "vertex_type": 1}], []),
            _payload([{"id": 0, "vertex_type": 1, "phase": 0.5}], []),
            _payload([{"id": 0, "vertex_type": 1}], [{"source": 0, "target": 4}]),
            _payload([{"id": 0, "vertex_type": 1}], [{"source": 0}]),
            _payload([{"id": 0, "vertex_type": 1}, {"id": 1, "vertex_type": 1}],
                     [{"source": 0, "target": 1, "edge_type": 5}]),
            _payload([{"id": 0, "vertex_type": 1}, {"id": 0, "vertex_type": 1}], []),
            {"vertices": {}, "edges": []},
        ]
        for d in bad:
            with self.assertRaises(InvalidArgumentError, msg=json.dumps(d)):
                from_dict(d)

    def test_malformed_phase(self):
        with self.assertRaises(PhaseParseError):
            from_dict(_payload([{"id": 0, "vertex_type": 1, "phase": "1/0"}], []))

    def test_malformed_json(self):
        with self.assertRaises(InvalidArgumentError):
            from_json("{not json")
        with self.assertRaises(InvalidArgumentError):
            from_json("[]")

    def test_string_zero_flag_is_rejected(self):
        d = _payload([], [])
        d["scalar"] = {"power2": 0, "phase": "0", "is_zero": "false"}

        with self.assertRaises(InvalidArgumentError):
            from_dict(d)
