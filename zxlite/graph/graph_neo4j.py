from typing import Any, Dict, List, Optional

from neo4j import Driver, GraphDatabase

from ..config import Neo4jSettings
from ..errors import NotFoundError
from ..io.jsonformat import from_dict
from ..utils import phase_to_str
from .diagram import Diagram


class Neo4jDiagramStore:
    """Persists diagrams in a Neo4j database.

    A diagram is stored under a ``graph_id`` as ``(:Node {graph_id, id, t,
    phase, row, col})`` nodes joined by ``[:Wire {t, i}]`` relationships, one
    relationship per edge. ``i`` is the position of the edge in
    :meth:`Diagram.edges`, so parallel edges load back oldest first.
    The scalar is kept on a single ``(:Scalar {graph_id, power2, phase, is_zero})`` node.
    Connection settings default to the ``NEO4J_*`` environment variables.
    """

    backend = "neo4j"

    def __init__(
        self,
        uri: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        graph_id: Optional[str] = None,
        database: Optional[str] = None,
    ):
        settings = Neo4jSettings.from_env()
        self.uri = uri if uri is not None else settings.uri
        self.user = user if user is not None else settings.user
        self.password = password if password is not None else settings.password
        self.database = database if database is not None else settings.database
        self._driver: Optional[Driver] = None

        self.graph_id = graph_id if graph_id is not None else "graph_" + str(id(self))

    @property
    def driver(self):
        """Create driver only when needed"""
        if self._driver is None:
            self._driver = GraphDatabase.driver(
                self.uri, auth=(self.user, self.password)
            )
        return self._driver

    def _get_session(self):
        if self.database:
            return self.driver.session(database=self.database)
        return self.driver.session()

    def close(self):
        """Explicitly close the driver"""
        if self._driver is not None:
            self._driver.close()
            self._driver = None

    def __enter__(self) -> "Neo4jDiagramStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def save(self, g: Diagram) -> int:
        """Writes ``g`` under this store's ``graph_id``, replacing whatever was
        stored there before. Everything happens in one write transaction.

        Returns:
            Number of nodes written
        """
        all_vertices = []
        for v in g.vertices():
            row, col = g.position(v)
            all_vertices.append(
                {
                    "id": v,
                    "t": int(g.kind(v)),
                    "phase": phase_to_str(g.phase(v)),
                    "row": row,
                    "col": col,
                }
            )

        all_edges = [
            {"s": s, "t": t, "et": int(et), "i": i}
            for i, (s, t, et) in enumerate(g.edges())
        ]
        scalar = g.scalar.to_dict()
        graph_id = self.graph_id

        with self._get_session() as session:

            def write_full_graph(tx):
                tx.run(
                    """
                    MATCH (n {graph_id: $graph_id})
                    WHERE n:Node OR n:Scalar
                    DETACH DELETE n
                """,
                    graph_id=graph_id,
                )

                if all_vertices:
                    tx.run(
                        """
                        UNWIND $vertices AS v
                        CREATE (n:Node {
                            graph_id: $graph_id,
                            id: v.id,
                            t: v.t,
                            phase: v.phase,
                            row: v.row,
                            col: v.col
                        })
                    """,
                        graph_id=graph_id,
                        vertices=all_vertices,
                    )

                if all_edges:
                    tx.run(
                        """
                        UNWIND $edges AS e
                        MATCH (n1:Node {graph_id: $graph_id, id: e.s})
                        MATCH (n2:Node {graph_id: $graph_id, id: e.t})
                        CREATE (n1)-[:Wire {t: e.et, i: e.i}]->(n2)
                    """,
                        graph_id=graph_id,
                        edges=all_edges,
                    )

                tx.run(
                    """
                    CREATE (:Scalar {
                        graph_id: $graph_id,
                        power2: $power2,
                        phase: $phase,
                        is_zero: $is_zero
                    })
                """,
                    graph_id=graph_id,
                    **scalar,
                )

            session.execute_write(write_full_graph)

        return len(all_vertices)

    def load(self, track_scalar: bool = True) -> Diagram:
        """Reads the diagram stored under this store's ``graph_id``.

        Raises:
            NotFoundError: if nothing is stored under the ``graph_id``
        """
        graph_id = self.graph_id

        def read_full_graph(tx) -> Dict[str, Any]:
            nodes = tx.run(
                """
                MATCH (n:Node {graph_id: $graph_id})
                RETURN n.id AS id, n.t AS t, n.phase AS phase, n.row AS row, n.col AS col
                ORDER BY n.id
            """,
                graph_id=graph_id,
            ).data()
            wires = tx.run(
                """
                MATCH (n1:Node {graph_id: $graph_id})-[r:Wire]->(n2:Node {graph_id: $graph_id})
                RETURN n1.id AS s, n2.id AS t, r.t AS et, r.i AS i
                ORDER BY s, t, i
            """,
                graph_id=graph_id,
            ).data()
            scalars = tx.run(
                """
                MATCH (c:Scalar {graph_id: $graph_id})
                RETURN c.power2 AS power2, c.phase AS phase, c.is_zero AS is_zero
            """,
                graph_id=graph_id,
            ).data()
            return {"nodes": nodes, "wires": wires, "scalars": scalars}

        with self._get_session() as session:
            result = session.execute_read(read_full_graph)

        if not result["nodes"] and not result["scalars"]:
            raise NotFoundError(f"No diagram stored under graph_id '{graph_id}'")

        payload: Dict[str, Any] = {
            "vertices": [
                {
                    "id": n["id"],
                    "vertex_type": n["t"],
                    "phase": n["phase"] if n["phase"] is not None else "0",
                    "row": n["row"] if n["row"] is not None else 0,
                    "col": n["col"] if n["col"] is not None else 0,
                }
                for n in result["nodes"]
            ],
            "edges": [
                {"source": w["s"], "target": w["t"], "edge_type": w["et"]}
                for w in result["wires"]
            ],
        }
        if result["scalars"]:
            payload["scalar"] = result["scalars"][0]
        return from_dict(payload, track_scalar=track_scalar)

    def delete(self) -> int:
        """Removes everything stored under this store's ``graph_id``.

        Returns:
            Number of nodes deleted
        """
        query = """
        MATCH (n {graph_id: $graph_id})
        WHERE n:Node OR n:Scalar
        DETACH DELETE n
        RETURN count(n) AS count
        """
        with self._get_session() as session:
            rec = session.execute_write(
                lambda tx: tx.run(query, graph_id=self.graph_id).single()
            )
        return rec["count"] if rec else 0

    def num_vertices(self) -> int:
        query = "MATCH (n:Node {graph_id: $graph_id}) RETURN count(n) AS count"
        with self._get_session() as session:
            result = session.execute_read(
                lambda tx: tx.run(query, graph_id=self.graph_id).single()
            )
        return result["count"] if result else 0

    def list_graph_ids(self) -> List[str]:
        query = "MATCH (n:Node) RETURN DISTINCT n.graph_id AS graph_id ORDER BY graph_id"
        with self._get_session() as session:
            result = session.execute_read(
                lambda tx: tx.run(query).data()
            )
        return [r["graph_id"] for r in result]
