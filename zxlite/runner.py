"""
Strategy runner for in-memory ZX-diagrams.

Run simplification strategies by name with:
- Run individual strategies or sequences of them
- Performance timing for each strategy
- Result collection with vertex and edge reductions

Example usage:
    from zxlite.generate import example_diagram
    from zxlite.runner import run_strategy, run_strategies

    g = example_diagram()

    # Run a single strategy
    result = run_strategy(g, "simplify_clifford")
    print(result.message)

    # Run multiple strategies
    results = run_strategies(
        g,
        names=["simplify_spiders", "simplify_identities"],
        measure_time=True
    )
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .config import get_settings
from .errors import InvalidArgumentError, ZXError
from .graph.diagram import Diagram
from .simplify import (
    Stats,
    simplify_clifford,
    simplify_full,
    simplify_identities,
    simplify_local_comp,
    simplify_pivots,
    simplify_spiders,
)

Strategy = Callable[..., bool]

STRATEGIES: Dict[str, Strategy] = {
    "simplify_spiders": simplify_spiders,
    "simplify_identities": simplify_identities,
    "simplify_local_comp": simplify_local_comp,
    "simplify_pivots": simplify_pivots,
    "simplify_clifford": simplify_clifford,
    "simplify_full": simplify_full,
}

# Strategies that report a summary instead of a per-rule message
_SUMMARY_TITLES = {
    "simplify_clifford": "Clifford simplification",
    "simplify_full": "Full simplification",
}

_RULE_TITLES = {
    "simplify_spiders": "Spider Fusion",
    "simplify_identities": "Identity Removal",
    "simplify_local_comp": "Local Complementation",
    "simplify_pivots": "Pivot",
}


@dataclass
class SimplificationResult:
    strategy: str
    applied: bool
    message: str
    vertex_reduction: int = 0
    edge_reduction: int = 0
    elapsed_sec: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "applied": self.applied,
            "message": self.message,
            "vertex_reduction": self.vertex_reduction,
            "edge_reduction": self.edge_reduction,
            "elapsed_sec": self.elapsed_sec,
        }


def list_available_strategies() -> List[str]:
    """
    List all available strategy names.

    Returns:
        List of strategy names that can be used with run_strategy()
    """
    return list(STRATEGIES)


def _message(name: str, applied: bool, start_v: int, end_v: int, start_e: int, end_e: int) -> str:
    if name in _SUMMARY_TITLES:
        if not applied:
            return "Graph is already fully simplified!"
        return (
            f"{_SUMMARY_TITLES[name]} complete!\n"
            f"Vertices: {start_v} → {end_v} (-{start_v - end_v})\n"
            f"Edges: {start_e} → {end_e} (-{start_e - end_e})"
        )
    title = _RULE_TITLES[name]
    if applied:
        return f"{title} applied successfully!"
    return f"{title}: No matches found"


def run_strategy(
    g: Diagram,
    name: str,
    measure_time: bool = True,
    quiet: bool = True,
    stats: Optional[Stats] = None,
) -> SimplificationResult:
    """
    Run a single simplification strategy on a diagram.

    The diagram is locked for the whole run, so concurrent callers sharing
    ``g`` through :meth:`Diagram.exclusive` are serialised.

    Args:
        g: The diagram to simplify, modified in place
        name: Name of the strategy (e.g., 'simplify_clifford')
        measure_time: If True, measure the execution time
        quiet: If False, print execution details
        stats: Optional statistics tracker

    Returns:
        A SimplificationResult describing what happened

    Raises:
        InvalidArgumentError: If name is not a known strategy
    """
    if name not in STRATEGIES:
        raise InvalidArgumentError(
            f"Unknown strategy: '{name}'. "
            f"Available strategies: {list_available_strategies()}"
        )
    strategy = STRATEGIES[name]

    with g.exclusive():
        start_v, start_e = g.num_vertices(), g.num_edges()
        start = time.perf_counter() if measure_time else 0.0

        applied = strategy(g, quiet, stats)

        elapsed = (time.perf_counter() - start) if measure_time else None
        end_v, end_e = g.num_vertices(), g.num_edges()

    result = SimplificationResult(
        strategy=name,
        applied=applied,
        message=_message(name, applied, start_v, end_v, start_e, end_e),
        vertex_reduction=start_v - end_v,
        edge_reduction=start_e - end_e,
        elapsed_sec=elapsed,
    )

    if not quiet:
        print(f"Strategy '{name}': {'applied' if applied else 'no change'}", end="")
        if elapsed is not None:
            print(f" ({elapsed:.3f}s)")
        else:
            print()

    return result


def run_strategies(
    g: Diagram,
    names: Optional[List[str]] = None,
    measure_time: bool = True,
    quiet: bool = False,
) -> List[Dict[str, Any]]:
    """
    Run several strategies one after the other on the same diagram.

    Args:
        g: The diagram to simplify
        names: Strategies to run (default: the ZXLITE_STRATEGIES setting)
        measure_time: If True, measure execution time for each strategy
        quiet: If False, print progress information

    Returns:
        List of dictionaries with the keys of SimplificationResult.to_dict()
        plus 'success', and 'error' for strategies that failed
    """
    strategy_list = names if names is not None else get_settings().strategies

    if not quiet:
        print(f"Running {len(strategy_list)} strategies on {g.stats()}...")

    results = []
    for name in strategy_list:
        try:
            result = run_strategy(g, name, measure_time=measure_time, quiet=quiet)
        except ZXError as e:
            if not quiet:
                print(f"Error running strategy '{name}': {e}")
            results.append({
                "strategy": name,
                "applied": False,
                "success": False,
                "error": str(e),
            })
            continue
        entry = result.to_dict()
        entry["success"] = True
        results.append(entry)

    if not quiet:
        successful = sum(1 for r in results if r["success"])
        print(f"Completed {successful}/{len(results)} strategies")

    return results
