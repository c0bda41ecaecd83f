"""Graph DSL for graphrun.

A graph document describes nodes (HTTP calls, delays, terminal nodes)
wired together with conditional edges. This package loads such documents,
evaluates the expressions and conditions they contain, and runs them.

Module Structure
----------------
- types.py: Dynamic value helpers (UNDEFINED, comparison, display)
- errors.py: DSL error hierarchy
- expressions/: ``{{ }}`` expression language
- interpolation.py: Variable, secret and expression substitution
- conditions.py: Edge condition evaluation
- serialization/: Document schema and JSON/YAML loading
- executor/: Node loop and executor handlers
- results.py: Run outcome

Example:
    ```python
    from graphrun.dsl import GraphExecutor, load_graph_file

    result = await GraphExecutor(load_graph_file("graph.yaml")).execute()
    ```
"""

from __future__ import annotations

from graphrun.dsl.conditions import ConditionEvaluator
from graphrun.dsl.errors import (
    DSLError,
    GraphDefinitionError,
    GraphExecutionError,
    GraphParseError,
    HttpExecutorError,
    NodeNotFoundError,
    UnknownConditionError,
    UnknownExecutorError,
    UnknownOperatorError,
)
from graphrun.dsl.executor import (
    GraphExecutor,
    execute_from_config,
    execute_from_file,
)
from graphrun.dsl.interpolation import Interpolator
from graphrun.dsl.results import GraphRunResult
from graphrun.dsl.serialization import (
    GraphConfig,
    load_graph,
    load_graph_file,
)
from graphrun.dsl.types import UNDEFINED

__all__ = [
    # Errors
    "DSLError",
    "GraphDefinitionError",
    "GraphParseError",
    "GraphExecutionError",
    "NodeNotFoundError",
    "UnknownConditionError",
    "UnknownExecutorError",
    "UnknownOperatorError",
    "HttpExecutorError",
    # Values
    "UNDEFINED",
    # Engine
    "ConditionEvaluator",
    "Interpolator",
    "GraphExecutor",
    "GraphRunResult",
    "execute_from_config",
    "execute_from_file",
    # Documents
    "GraphConfig",
    "load_graph",
    "load_graph_file",
]
