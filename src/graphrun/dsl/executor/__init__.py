"""Graph execution: the node loop and executor handlers."""

from __future__ import annotations

from graphrun.dsl.executor.context import RunContext
from graphrun.dsl.executor.executor import (
    GraphExecutor,
    execute_from_config,
    execute_from_file,
)

__all__ = [
    "GraphExecutor",
    "RunContext",
    "execute_from_config",
    "execute_from_file",
]
