"""Base interface for executor handlers.

Every executor type has a handler coroutine with the ExecutorHandler
signature. Handlers act on the RunContext directly: they read and mutate
run state and may set the exit code or stop the run.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any, Protocol, runtime_checkable

from graphrun.dsl.executor.context import RunContext
from graphrun.dsl.expressions import ExpressionError
from graphrun.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class ExecutorHandler(Protocol):
    """Protocol that all executor handlers implement."""

    async def __call__(
        self,
        executor: Any,
        context: RunContext,
        label: str,
    ) -> Any:
        """Run an executor.

        Args:
            executor: Executor record (HttpExecutorRecord, SleepExecutorRecord,
                etc.). Type varies based on handler specialization.
            context: The run's context, mutated in place.
            label: Node or hook name, for logging.

        Returns:
            Handler output (the parsed response for ``http``, else None).
        """
        ...


async def with_error_handling(
    executor_type: str,
    label: str,
    handler_fn: Callable[..., Coroutine[Any, Any, Any]],
    *args: Any,
    **kwargs: Any,
) -> Any:
    """Run a handler, logging failures consistently before re-raising.

    Example:
        ```python
        result = await with_error_handling(
            "http", "fetch_user", execute_http, executor, context, "fetch_user"
        )
        ```
    """
    try:
        return await handler_fn(*args, **kwargs)
    except ExpressionError as e:
        logger.error(
            f"{executor_type} executor failed: invalid expression",
            node=label,
            expression=e.expression,
        )
        raise
    except Exception as e:
        logger.error(
            f"{executor_type} executor failed: {type(e).__name__}",
            node=label,
            error=str(e),
        )
        raise


__all__ = [
    "ExecutorHandler",
    "with_error_handling",
]
