# tests/test_graph_neo4j/test_store.py
from fractions import Fraction

import pytest

from zxlite.errors import NotFoundError
from zxlite.generate import example_diagram
from zxlite.graph.diagram import Diagram
from zxlite.io.jsonformat import to_dict
from zxlite.utils import EdgeType, VertexType

from tests.test_graph_neo4j._base_unittest import Neo4jE2ETestCase, Neo4jUnitTestCase


class _FakeResult:
    def __init__(self, rows):
        self.rows = rows

    def data(self):
        return list(self.rows)

    def single(self):
        return self.rows[0] if self.rows else None


class _FakeTx:
    def __init__(self, rows_by_marker=None):
        self.calls = []
        self.rows_by_marker = rows_by_marker or {}

    def run(self, query, **params):
        self.calls.append((query, params))
        for marker, rows in self.rows_by_marker.items():
            if marker in query:
                return _FakeResult(rows)
        return _FakeResult([])


class _FakeSession:
    def __init__(self, rows_by_marker=None):
        self.tx = _FakeTx(rows_by_marker)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute_write(self, fn):
        return fn(self.tx)

    def execute_read(self, fn):
        return fn(self.tx)


class TestNeo4jStoreUnit(Neo4jUnitTestCase):
    def test_save_writes_nodes_wires_and_scalar(self):
        store = self.store
        fake_session = _FakeSession()
        store._get_session = lambda: fake_session

        g = Diagram()
        b = g.add_vertex(VertexType.BOUNDARY, 0, 0)
        z = g.add_vertex(VertexType.Z, 0, 1, "1/2")
        g.add_edge(b, z, EdgeType.HADAMARD)
        g.add_edge(z, z)

        self.assertEqual(store.save(g), 2)

        queries = [q for (q, _) in fake_session.tx.calls]
        self.assertEqual(len(queries), 4)
        self.assertIn("DETACH DELETE", queries[0])
        self.assertIn("UNWIND $vertices", queries[1])
        self.assertIn(":Wire", queries[2])
        self.assertIn("i: e.i", queries[2])
        self.assertIn(":Scalar", queries[3])

        params = [p for (_, p) in fake_session.tx.calls]
        self.assertTrue(all(p["graph_id"] == self.graph_id for p in params))
        self.assertEqual(params[1]["vertices"][1]["phase"], "1/2")
        self.assertEqual(params[1]["vertices"][1]["t"], 1)
        self.assertEqual(
            params[2]["edges"],
            [{"s": b, "t": z, "et": 1, "i": 0}, {"s": z, "t": z, "et": 0, "i": 1}],
        )

    def test_save_empty_diagram(self):
        store = self.store
        fake_session = _FakeSession()
        store._get_session = lambda: fake_session

        self.assertEqual(store.save(Diagram()), 0)
        self.assertEqual(len(fake_session.tx.calls), 2)

    def test_load(self):
        store = self.store
        fake_session = _FakeSession({
            "RETURN n.id AS id": [
                {"id": 0, "t": 0, "phase": "0", "row": 0.0, "col": 0.0},
                {"id": 4, "t": 2, "phase": "3/4", "row": 1.0, "col": 2.0},
            ],
            "r.t AS et": [{"s": 0, "t": 4, "et": 1}],
            "c.power2": [{"power2": 2, "phase": "1/4", "is_zero": False}],
        })
        store._get_session = lambda: fake_session

        g = store.load()

        self.assertEqual(g.vertices(), [0, 4])
        self.assertEqual(g.kind(4), VertexType.X)
        self.assertEqual(g.phase(4), Fraction(3, 4))
        self.assertEqual(g.position(4), (1.0, 2.0))
        self.assertEqual(g.edge_kind(0, 4), EdgeType.HADAMARD)
        self.assertEqual(g.scalar.power2, 2)
        self.assertEqual(g.scalar.phase, Fraction(1, 4))

    def test_load_keeps_parallel_edge_order(self):
        store = self.store
        fake_session = _FakeSession({
            "RETURN n.id AS id": [
                {"id": 0, "t": 1, "phase": "0", "row": 0.0, "col": 0.0},
                {"id": 1, "t": 1, "phase": "0", "row": 0.0, "col": 1.0},
            ],
            "r.t AS et": [
                {"s": 0, "t": 1, "et": 1, "i": 0},
                {"s": 0, "t": 1, "et": 0, "i": 1},
            ],
        })
        store._get_session = lambda: fake_session

        g = store.load()

        wire_query = next(q for (q, _) in fake_session.tx.calls if "r.t AS et" in q)
        self.assertIn("ORDER BY s, t, i", wire_query)
        self.assertEqual(g.edge_kinds(0, 1), [EdgeType.HADAMARD, EdgeType.SIMPLE])
        self.assertEqual(g.edge_kind(0, 1), EdgeType.HADAMARD)

    def test_load_missing_graph(self):
        store = self.store
        store._get_session = lambda: _FakeSession()

        with self.assertRaises(NotFoundError):
            store.load()

    def test_num_vertices_and_delete(self):
        store = self.store
        store._get_session = lambda: _FakeSession({"count(n) AS count": [{"count": 5}]})

        self.assertEqual(store.num_vertices(), 5)
        self.assertEqual(store.delete(), 5)

    def test_list_graph_ids(self):
        store = self.store
        store._get_session = lambda: _FakeSession({"DISTINCT n.graph_id": [{"graph_id": "a"}, {"graph_id": "b"}]})

        self.assertEqual(store.list_graph_ids(), ["a", "b"])

    def test_driver_is_lazy(self):
        self.assertIsNone(self.store._driver)
        self.store.close()
        self.assertIsNone(self.store._driver)


def test_default_graph_id_is_unique(neo4j_store_unit):
    from zxlite.graph.graph_neo4j import Neo4jDiagramStore

    other = Neo4jDiagramStore(uri="bolt://unit-test-does-not-connect", user="u", password="p")
    try:
        assert other.graph_id.startswith("graph_")
        assert other.graph_id != neo4j_store_unit.graph_id
    finally:
        other.close()


class TestNeo4jStoreE2E(Neo4jE2ETestCase):
    def test_save_and_load_round_trip(self):
        g = example_diagram()
        g.set_phase(7, "1/2")
        g.add_edge(5, 6, EdgeType.HADAMARD)
        g.scalar.add_power(3)

        self.assertEqual(self.store.save(g), 24)
        self.assertEqual(self.store.num_vertices(), 24)

        h = self.store.load()
        self.assertEqual(to_dict(h), to_dict(g))

    def test_parallel_edges_keep_their_order(self):
        g = Diagram()
        a = g.add_vertex(VertexType.Z)
        b = g.add_vertex(VertexType.Z)
        g.add_edge(a, b, EdgeType.HADAMARD)
        g.add_edge(a, b, EdgeType.SIMPLE)
        g.add_edge(a, b, EdgeType.HADAMARD)

        self.store.save(g)
        h = self.store.load()

        self.assertEqual(h.edge_kinds(a, b), g.edge_kinds(a, b))

    def test_save_replaces_previous_content(self):
        g = example_diagram()
        self.store.save(g)

        small = Diagram()
        small.add_vertex(VertexType.Z)
        self.store.save(small)

        self.assertEqual(self.store.num_vertices(), 1)
        self.assertEqual(self.store.load().num_edges(), 0)


def test_e2e_delete(neo4j_store_e2e):
    g = example_diagram()
    neo4j_store_e2e.save(g)

    assert neo4j_store_e2e.delete() == 25
    assert neo4j_store_e2e.num_vertices() == 0
    with pytest.raises(NotFoundError):
        neo4j_store_e2e.load()
