"""Result dataclasses for graph runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["GraphRunResult"]


@dataclass(frozen=True, slots=True)
class GraphRunResult:
    """Outcome of a completed graph run.

    Attributes:
        exit_code: Exit code set by the end node or end executor that fired
            (0 if none did).
        state: Copy of the final run state.
        nodes_executed: Names of the nodes reached, in execution order,
            including the end node that stopped the run.
        duration_ms: Wall-clock duration of the run in milliseconds.
    """

    exit_code: int
    state: dict[str, Any]
    nodes_executed: tuple[str, ...]
    duration_ms: int

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.duration_ms < 0:
            raise ValueError("duration_ms must be non-negative")

    @property
    def success(self) -> bool:
        """True when the run finished with exit code 0."""
        return self.exit_code == 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging/persistence.

        Returns:
            JSON-serializable dictionary.
        """
        return {
            "exit_code": self.exit_code,
            "state": self.state,
            "nodes_executed": list(self.nodes_executed),
            "duration_ms": self.duration_ms,
        }
