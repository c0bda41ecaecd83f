"""Error types for the graphrun DSL.

Exception Hierarchy:
    DSLError (base for all DSL errors)
    ├── GraphDefinitionError (errors in the graph document)
    │   └── GraphParseError (JSON/YAML decoding or schema failures)
    └── GraphExecutionError (errors that abort a run)
        ├── NodeNotFoundError (edge or start node names an unknown node)
        ├── UnknownConditionError (edge references an unknown named condition)
        ├── UnknownExecutorError (executor type has no handler)
        ├── UnknownOperatorError (comparison operator is not supported)
        └── HttpExecutorError (transport or JSON decoding failure)

Expression errors (tokenizer, parser, evaluator) live in
``graphrun.dsl.expressions.errors`` and also derive from GraphRunError.
"""

from __future__ import annotations

from collections.abc import Iterable

from graphrun.exceptions import GraphRunError

__all__ = [
    "DSLError",
    "GraphDefinitionError",
    "GraphParseError",
    "GraphExecutionError",
    "NodeNotFoundError",
    "UnknownConditionError",
    "UnknownExecutorError",
    "UnknownOperatorError",
    "HttpExecutorError",
]


class DSLError(GraphRunError):
    """Base exception for all DSL-related errors."""

    pass


# ============================================================================
# Definition Errors
# ============================================================================


class GraphDefinitionError(DSLError):
    """Errors in the graph document itself."""

    pass


class GraphParseError(GraphDefinitionError):
    """Exception raised when a graph document cannot be loaded.

    Raised for invalid JSON/YAML syntax, documents that are not a mapping,
    and documents that do not match the GraphConfig schema.

    Attributes:
        message: Human-readable error message.
        file_path: Path to the file being parsed (if loaded from a file).
        line_number: Line number where the parse error occurred (if known).
        parse_error: The underlying error from the JSON/YAML library.
        detail: The message without location information.

    Examples:
        ```python
        raise GraphParseError(
            "YAML syntax error: mapping values are not allowed here",
            file_path="graph.yaml",
            line_number=12,
        )
        ```
    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        line_number: int | None = None,
        parse_error: Exception | None = None,
    ) -> None:
        self.detail = message
        self.file_path = file_path
        self.line_number = line_number
        self.parse_error = parse_error
        location = ""
        if file_path:
            location = f" in {file_path}"
            if line_number is not None:
                location += f":{line_number}"
        elif line_number is not None:
            location = f" at line {line_number}"
        super().__init__(f"{message}{location}")


# ============================================================================
# Execution Errors
# ============================================================================


class GraphExecutionError(DSLError):
    """Errors raised while a graph is running.

    These abort the current run; the caller decides whether to retry.
    """

    pass


class NodeNotFoundError(GraphExecutionError):
    """Exception raised when the run reaches a node the graph does not define.

    Attributes:
        node_name: The missing node name.
        available: Node names defined by the graph.
    """

    def __init__(self, node_name: str, available: Iterable[str] = ()) -> None:
        self.node_name = node_name
        self.available = tuple(sorted(available))
        message = f"Node not found: {node_name}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class UnknownConditionError(GraphExecutionError):
    """Exception raised when an edge references an undefined named condition.

    Attributes:
        condition_name: The unknown condition name.
        available: Named conditions defined by the graph.
    """

    def __init__(self, condition_name: str, available: Iterable[str] = ()) -> None:
        self.condition_name = condition_name
        self.available = tuple(sorted(available))
        message = f"Unknown condition: {condition_name}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class UnknownExecutorError(GraphExecutionError):
    """Exception raised when no handler exists for an executor type."""

    def __init__(self, executor_type: str) -> None:
        self.executor_type = executor_type
        super().__init__(f"Unknown executor type: {executor_type}")


class UnknownOperatorError(GraphExecutionError):
    """Exception raised for an unsupported comparison operator."""

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(f"Unknown operator: {operator}")


class HttpExecutorError(GraphExecutionError):
    """Exception raised when an ``http`` executor cannot complete.

    Covers transport failures, timeouts and responses whose body is not JSON.

    Attributes:
        method: HTTP method of the failed request.
        url: Interpolated request URL.
        status: Response status code, if a response was received.
    """

    def __init__(
        self,
        message: str,
        method: str,
        url: str,
        status: int | None = None,
    ) -> None:
        self.method = method
        self.url = url
        self.status = status
        super().__init__(f"HTTP {method} {url} failed: {message}")
