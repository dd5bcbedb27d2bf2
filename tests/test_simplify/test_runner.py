import os
from unittest import mock

from zxlite.errors import InvalidArgumentError
from zxlite.generate import example_diagram, identity_chain
from zxlite.runner import (
    SimplificationResult,
    list_available_strategies,
    run_strategies,
    run_strategy,
)

from tests.test_simple_backend._base_unittest import SimpleUnitTestCase, B, S


class TestRunner(SimpleUnitTestCase):
    def test_list_available_strategies(self):
        self.assertEqual(
            list_available_strategies(),
            [
                "simplify_spiders",
                "simplify_identities",
                "simplify_local_comp",
                "simplify_pivots",
                "simplify_clifford",
                "simplify_full",
            ],
        )

    def test_clifford_result(self):
        g = identity_chain(3)
        self.g = g

        result = run_strategy(g, "simplify_clifford")

        self.assertIsInstance(result, SimplificationResult)
        self.assertTrue(result.applied)
        self.assertEqual(result.vertex_reduction, 3)
        self.assertEqual(result.edge_reduction, 3)
        self.assertEqual(
            result.message,
            "Clifford simplification complete!\n"
            "Vertices: 5 → 2 (-3)\n"
            "Edges: 4 → 1 (-3)",
        )
        self.assertIsNotNone(result.elapsed_sec)

        again = run_strategy(g, "simplify_clifford", measure_time=False)
        self.assertFalse(again.applied)
        self.assertEqual(again.message, "Graph is already fully simplified!")
        self.assertIsNone(again.elapsed_sec)

    def test_single_rule_messages(self):
        g = self.g
        self.build([(B, 0), (B, 0)], [(0, 1, S)])

        result = run_strategy(g, "simplify_spiders")
        self.assertEqual(result.message, "Spider Fusion: No matches found")

        g2 = identity_chain(1)
        result = run_strategy(g2, "simplify_identities")
        self.assertEqual(result.message, "Identity Removal applied successfully!")

    def test_unknown_strategy(self):
        with self.assertRaises(InvalidArgumentError):
            run_strategy(self.g, "simplify_everything")

    def test_run_strategies_collects_errors(self):
        g = example_diagram()
        self.g = g

        results = run_strategies(g, ["simplify_spiders", "bogus"], quiet=True)

        self.assertEqual([r["strategy"] for r in results], ["simplify_spiders", "bogus"])
        self.assertTrue(results[0]["success"])
        self.assertTrue(results[0]["applied"])
        self.assertFalse(results[1]["success"])
        self.assertIn("bogus", results[1]["error"])

    def test_run_strategies_default_from_env(self):
        g = identity_chain(2)
        self.g = g

        with mock.patch.dict(os.environ, {"ZXLITE_STRATEGIES": "simplify_identities, simplify_spiders"}):
            results = run_strategies(g, quiet=True)

        self.assertEqual(
            [r["strategy"] for r in results],
            ["simplify_identities", "simplify_spiders"],
        )
        self.assertTrue(all(r["success"] for r in results))

    def test_run_strategy_inside_exclusive(self):
        g = identity_chain(2)
        self.g = g

        with g.exclusive():
            result = run_strategy(g, "simplify_full")

        self.assertTrue(result.applied)
        self.assertTrue(result.message.startswith("Full simplification complete!"))
