"""Graph executor: the node loop.

GraphExecutor runs one GraphConfig once:

1. Build the run state from ``initialState`` plus ``var`` (the document's
   ``variables``).
2. Run the ``start`` before-hooks once.
3. Pop node names from the front of a queue seeded with the start node.
   An end-typed node sets the exit code and stops the run without running
   its executor. Any other node runs its executor, then every edge is
   evaluated in order (``all`` before-hooks run before each conditional
   edge) and the selected targets are pushed to the front of the queue,
   which makes traversal depth-first.
4. Stop when the queue is empty or an ``end`` executor clears ``running``.

Errors from executors, conditions and missing nodes propagate out of
``execute()``; only before-hook failures are logged and skipped.
"""

from __future__ import annotations

import copy
import logging
import time
import uuid
from collections import deque
from pathlib import Path
from typing import Any

from graphrun.config import RunnerSettings
from graphrun.dsl.conditions import ConditionEvaluator
from graphrun.dsl.errors import NodeNotFoundError
from graphrun.dsl.executor.context import RunContext
from graphrun.dsl.executor.handlers import get_handler, with_error_handling
from graphrun.dsl.interpolation import Interpolator, SecretResolver
from graphrun.dsl.results import GraphRunResult
from graphrun.dsl.serialization.parser import load_graph_file
from graphrun.dsl.serialization.schema import (
    ExecutorRecord,
    GraphConfig,
    NodeRecord,
)
from graphrun.logging import bind_context, clear_context, get_logger

__all__ = [
    "GraphExecutor",
    "execute_from_config",
    "execute_from_file",
]

logger = get_logger(__name__)


class GraphExecutor:
    """Executes a graph document against a mutable run state.

    One instance performs one run. The run state is owned by the instance
    and shared by reference with handlers and the condition evaluator.

    Example:
        ```python
        executor = GraphExecutor(load_graph_file("graph.yaml"))
        result = await executor.execute()
        print(result.exit_code, result.state)
        ```
    """

    def __init__(
        self,
        config: GraphConfig,
        *,
        settings: RunnerSettings | None = None,
        secret_resolver: SecretResolver | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            config: Validated graph document.
            settings: Runner settings; defaults are loaded when omitted.
            secret_resolver: Lookup for ``${secret.NAME}`` placeholders;
                defaults to the process environment.
        """
        self._config = config
        self._settings = settings if settings is not None else RunnerSettings()

        state: dict[str, Any] = copy.deepcopy(config.initial_state)
        state["var"] = copy.deepcopy(config.variables)

        self._context = RunContext(
            state=state,
            options=config.options,
            settings=self._settings,
            interpolator=Interpolator(
                secret_resolver=secret_resolver,
                max_passes=self._settings.max_interpolation_passes,
            ),
            trace_level=logging.INFO if config.options.verbose else logging.DEBUG,
        )
        self._conditions = ConditionEvaluator(
            config.conditions, state, trace_level=self._context.trace_level
        )

    @property
    def running(self) -> bool:
        """True while a run is in progress and has not been stopped."""
        return self._context.running

    def stop(self) -> None:
        """Stop the run at the next loop check."""
        self._context.running = False
        self._trace("Graph execution stopped")

    def get_state(self) -> dict[str, Any]:
        """Return a deep copy of the run state."""
        return copy.deepcopy(self._context.state)

    def get_exit_code(self) -> int:
        return self._context.exit_code

    async def execute(self, start_node: str | None = None) -> GraphRunResult:
        """Run the graph.

        Args:
            start_node: Name of the first node; defaults to
                ``settings.default_start_node``.

        Returns:
            GraphRunResult with the exit code and a copy of the final state.

        Raises:
            NodeNotFoundError: If the run reaches a node the graph lacks.
            GraphRunError: Any fatal error raised by an executor or
                condition.
        """
        start = start_node or self._settings.default_start_node
        context = self._context
        graph = self._config.graph
        nodes_executed: list[str] = []
        started = time.perf_counter()

        bind_context(run_id=uuid.uuid4().hex[:8])
        context.running = True
        self._trace(f"Starting graph execution at '{start}'")

        try:
            await self._run_before_hooks("start")

            queue: deque[str] = deque([start])
            while context.running and queue:
                node_name = queue.popleft()
                node = graph.get(node_name)
                if node is None:
                    raise NodeNotFoundError(node_name, graph.keys())

                bind_context(node=node_name)
                nodes_executed.append(node_name)
                self._trace(f"Executing node: {node_name}")
                if node.description:
                    self._trace(f"Description: {node.description}")

                if node.is_end:
                    context.exit_code = node.code if node.code is not None else 0
                    self._trace(
                        f"Reached end node, stopping with exit code {context.exit_code}"
                    )
                    break

                try:
                    await self._run_executor(node.executor, node_name)
                    if not context.running:
                        break

                    next_nodes = await self._find_next_nodes(node)
                except Exception:
                    logger.error(f"Error executing node {node_name}")
                    raise

                if next_nodes:
                    self._trace(f"Next nodes: {', '.join(next_nodes)}")
                    queue.extendleft(reversed(next_nodes))
                else:
                    self._trace("No next nodes found, continuing with remaining queue")
        finally:
            context.running = False
            duration_ms = int((time.perf_counter() - started) * 1000)
            self._trace(
                f"Graph execution finished in {duration_ms}ms "
                f"with exit code {context.exit_code}"
            )
            clear_context()

        return GraphRunResult(
            exit_code=context.exit_code,
            state=self.get_state(),
            nodes_executed=tuple(nodes_executed),
            duration_ms=duration_ms,
        )

    async def _run_executor(self, executor: ExecutorRecord, label: str) -> Any:
        handler = get_handler(executor.type)
        return await with_error_handling(
            executor.type, label, handler, executor, self._context, label
        )

    async def _run_before_hooks(self, kind: str) -> None:
        hooks = self._config.before.start if kind == "start" else self._config.before.all
        if not hooks:
            return

        self._trace(f"Executing before hooks ({kind})")
        for hook_name, hook in hooks.items():
            label = f"before:{kind}:{hook_name}"
            self._trace(f"Executing {kind} before hook: {hook_name}")
            try:
                await self._run_executor(hook.executor, label)
            except Exception as e:
                logger.warning(
                    f"Error in {kind} before hook {hook_name}: {e}",
                    hook=hook_name,
                )

    async def _find_next_nodes(self, node: NodeRecord) -> list[str]:
        next_nodes: list[str] = []

        for edge in node.edges:
            if edge.condition is None:
                next_nodes.append(edge.to)
                continue

            # Hooks refresh the state right before every conditional decision
            await self._run_before_hooks("all")

            condition_met = self._conditions.evaluate(edge.condition)
            target = edge.to if condition_met else edge.fallback
            self._trace(f"Edge condition result: {condition_met} -> {target or 'no fallback'}")
            if target is not None:
                next_nodes.append(target)

        return next_nodes

    def _trace(self, message: str) -> None:
        logger.log(self._context.trace_level, message)


async def execute_from_config(
    config: GraphConfig,
    start_node: str | None = None,
    *,
    settings: RunnerSettings | None = None,
) -> GraphRunResult:
    """Run a validated graph document once."""
    return await GraphExecutor(config, settings=settings).execute(start_node)


async def execute_from_file(
    path: str | Path,
    start_node: str | None = None,
    *,
    settings: RunnerSettings | None = None,
) -> GraphRunResult:
    """Load a graph file and run it once.

    Raises:
        GraphParseError: If the file cannot be loaded.
    """
    config = load_graph_file(path)
    return await execute_from_config(config, start_node, settings=settings)
