"""Executor handlers for graph execution.

This package contains one handler per executor type. All handlers conform
to the ExecutorHandler protocol.
"""

from __future__ import annotations

from graphrun.dsl.errors import UnknownExecutorError
from graphrun.dsl.executor.handlers import (
    end_executor,
    http_executor,
    none_executor,
    sleep_executor,
)
from graphrun.dsl.executor.handlers.base import (
    ExecutorHandler,
    with_error_handling,
)

# Handler registry: maps executor types to their handlers
EXECUTOR_HANDLERS: dict[str, ExecutorHandler] = {
    "http": http_executor.execute_http,  # type: ignore[dict-item]
    "sleep": sleep_executor.execute_sleep,  # type: ignore[dict-item]
    "none": none_executor.execute_none,  # type: ignore[dict-item]
    "end": end_executor.execute_end,  # type: ignore[dict-item]
}


def get_handler(executor_type: str) -> ExecutorHandler:
    """Get the handler for an executor type.

    Raises:
        UnknownExecutorError: If no handler exists for the type.

    Example:
        ```python
        handler = get_handler(node.executor.type)
        await handler(node.executor, context, node_name)
        ```
    """
    if executor_type not in EXECUTOR_HANDLERS:
        raise UnknownExecutorError(executor_type)
    return EXECUTOR_HANDLERS[executor_type]


__all__ = [
    "ExecutorHandler",
    "with_error_handling",
    "get_handler",
    "EXECUTOR_HANDLERS",
    "end_executor",
    "http_executor",
    "none_executor",
    "sleep_executor",
]
