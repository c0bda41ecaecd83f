"""Mutable per-run context shared by the graph executor and its handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from graphrun.config import RunnerSettings
from graphrun.dsl.interpolation import Interpolator
from graphrun.dsl.serialization.schema import GraphOptions

__all__ = ["RunContext"]


@dataclass(slots=True)
class RunContext:
    """State owned by one graph run.

    Handlers receive this object and mutate ``state``, ``exit_code`` and
    ``running`` in place; nothing else holds a copy of the state.

    Attributes:
        state: The run state.
        options: The document's run-wide options (``config`` key).
        settings: Runner settings.
        interpolator: Interpolator for executor payloads.
        exit_code: Current exit code.
        running: Cleared to stop the node loop.
        trace_level: Log level for trace messages (INFO when verbose).
    """

    state: dict[str, Any]
    options: GraphOptions
    settings: RunnerSettings
    interpolator: Interpolator
    exit_code: int = 0
    running: bool = False
    trace_level: int = field(default=logging.DEBUG)
