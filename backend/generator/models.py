"""Data models for the code generation client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class GeneratedCode:
    """A SQL schema and a matching server route, both as opaque text."""

    sql_schema: str
    node_route: str

    def to_dict(self) -> dict[str, str]:
        """Wire shape used by the API and the CLI (camelCase keys)."""
        return {"sqlSchema": self.sql_schema, "nodeRoute": self.node_route}
