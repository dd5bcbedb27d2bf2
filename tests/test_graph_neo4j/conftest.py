# tests/test_graph_neo4j/conftest.py
import os
import uuid

import pytest

from zxlite.graph.graph_neo4j import Neo4jDiagramStore


def _neo4j_env_present() -> bool:
    return all(os.getenv(k) for k in ("NEO4J_URI", "NEO4J_USER", "NEO4J_PASSWORD"))


@pytest.fixture
def unique_graph_id() -> str:
    return f"test_graph_{uuid.uuid4().hex}"


@pytest.fixture
def neo4j_store_unit(unique_graph_id):
    """
    Unit-test store: DB calls should be mocked per-test.
    """
    store = Neo4jDiagramStore(
        uri="bolt://unit-test-does-not-connect",
        user="neo4j",
        password="password",
        graph_id=unique_graph_id,
    )
    yield store
    store.close()


@pytest.fixture
def neo4j_store_e2e(unique_graph_id):
    """
    End-to-end store: requires reachable Neo4j; skips if not available.
    """
    if not _neo4j_env_present():
        pytest.skip("Neo4j env vars missing (NEO4J_URI/NEO4J_USER/NEO4J_PASSWORD).")

    store = Neo4jDiagramStore(graph_id=unique_graph_id)

    # sanity-check connection
    try:
        with store._get_session() as session:
            session.run("RETURN 1").single()
    except Exception as e:
        store.close()
        pytest.skip(f"Neo4j not reachable: {e}")

    yield store

    store.delete()
    store.close()
