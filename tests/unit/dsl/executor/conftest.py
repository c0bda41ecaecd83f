from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from graphrun.config import RunnerSettings
from graphrun.dsl.executor.context import RunContext
from graphrun.dsl.interpolation import Interpolator
from graphrun.dsl.serialization.schema import GraphOptions


@pytest.fixture
def make_context() -> Callable[..., RunContext]:
    """Factory for a RunContext with no-op secrets and default settings."""

    def factory(
        state: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
        secrets: dict[str, str] | None = None,
        **settings: Any,
    ) -> RunContext:
        secret_values = secrets or {}
        return RunContext(
            state=state if state is not None else {},
            options=GraphOptions.model_validate(options or {}),
            settings=RunnerSettings(**settings),
            interpolator=Interpolator(secret_resolver=secret_values.get),
            running=True,
        )

    return factory
