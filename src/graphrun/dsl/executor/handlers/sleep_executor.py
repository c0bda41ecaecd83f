"""Sleep executor handler."""

from __future__ import annotations

import asyncio

from graphrun.dsl.executor.context import RunContext
from graphrun.dsl.serialization.schema import SleepExecutorRecord
from graphrun.logging import get_logger

logger = get_logger(__name__)


async def execute_sleep(
    executor: SleepExecutorRecord,
    context: RunContext,
    label: str,
) -> None:
    """Suspend the run for ``executor.value`` milliseconds."""
    logger.log(context.trace_level, f"Sleeping for {executor.value:g}ms", node=label)
    await asyncio.sleep(executor.value / 1000)
