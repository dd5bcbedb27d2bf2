"""
Configuration read from the environment (and from a ``.env`` file, if present).

Variables:
- ``NEO4J_URI``, ``NEO4J_USER``, ``NEO4J_PASSWORD``, ``NEO4J_DATABASE``:
  connection settings for :class:`zxlite.graph.graph_neo4j.Neo4jDiagramStore`
- ``ZXLITE_TRACK_SCALAR``: whether new diagrams track their global scalar
  (default: on)
- ``ZXLITE_STRATEGIES``: comma separated list of strategies the runner uses
  when none is given (default: ``simplify_clifford``)
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

_FALSE_VALUES = ("0", "false", "no", "off")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() not in _FALSE_VALUES


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Neo4jSettings:
    uri: str = ""
    user: str = ""
    password: str = ""
    database: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Neo4jSettings":
        return cls(
            uri=os.getenv("NEO4J_URI", ""),
            user=os.getenv("NEO4J_USER", ""),
            password=os.getenv("NEO4J_PASSWORD", ""),
            database=os.getenv("NEO4J_DATABASE") or None,
        )

    def is_complete(self) -> bool:
        return bool(self.uri and self.user and self.password)


@dataclass
class Settings:
    track_scalar: bool = True
    strategies: List[str] = field(default_factory=lambda: ["simplify_clifford"])
    neo4j: Neo4jSettings = field(default_factory=Neo4jSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            track_scalar=_env_flag("ZXLITE_TRACK_SCALAR", True),
            strategies=_env_list("ZXLITE_STRATEGIES", ["simplify_clifford"]),
            neo4j=Neo4jSettings.from_env(),
        )


def get_settings() -> Settings:
    """Reads the settings from the current environment."""
    return Settings.from_env()
