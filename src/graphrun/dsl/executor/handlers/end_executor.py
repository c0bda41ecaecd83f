"""End executor handler."""

from __future__ import annotations

from graphrun.dsl.executor.context import RunContext
from graphrun.dsl.serialization.schema import EndExecutorRecord
from graphrun.logging import get_logger

logger = get_logger(__name__)


async def execute_end(
    executor: EndExecutorRecord,
    context: RunContext,
    label: str,
) -> None:
    """Set the exit code and stop the run.

    The node loop checks ``running`` before consulting the current node's
    edges, so no further node executes.
    """
    context.exit_code = executor.code
    context.running = False
    logger.log(
        context.trace_level,
        f"End executor for {label} with exit code {executor.code}",
    )
