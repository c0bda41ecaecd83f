"""No-op executor handler."""

from __future__ import annotations

from graphrun.dsl.executor.context import RunContext
from graphrun.dsl.serialization.schema import NoneExecutorRecord
from graphrun.logging import get_logger

logger = get_logger(__name__)


async def execute_none(
    executor: NoneExecutorRecord,
    context: RunContext,
    label: str,
) -> None:
    logger.log(context.trace_level, f"No-op executor for {label}")
