"""Pydantic schema models for graph documents.

This module defines the schema for YAML/JSON graph files, including:
- GraphConfig: Top-level graph document
- GraphOptions / HttpOptions: Run-wide options (``config`` key)
- BeforeHooks / BeforeHook: Executors run at start and before conditions
- NodeRecord / EdgeRecord: The graph itself
- ExecutorRecord: Discriminated union of executor types
- ConditionRecord: Simple, AND, OR or named conditions

Wire names are kept through aliases (``initialState``, ``config``, ``and``,
``or``); models can also be built from Python field names. All models are
frozen once validated.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)

__all__ = [
    # Executors
    "HttpExecutorRecord",
    "SleepExecutorRecord",
    "NoneExecutorRecord",
    "EndExecutorRecord",
    "ExecutorRecord",
    # Conditions
    "ComparisonOperator",
    "SimpleCondition",
    "AndCondition",
    "OrCondition",
    "ConditionRecord",
    # Graph
    "EdgeRecord",
    "NodeRecord",
    "BeforeHook",
    "BeforeHooks",
    "HttpOptions",
    "GraphOptions",
    "GraphConfig",
]


# YAML reads `X-Page: 2` as an int; header values are always sent as text
HeaderValue = Annotated[str, BeforeValidator(str)]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# =============================================================================
# Executors
# =============================================================================


class HttpExecutorRecord(_Record):
    """HTTP request executor.

    Fields:
        method: HTTP method, normalized to upper case.
        endpoint: Path appended to ``config.http.base_url``.
        body: Optional JSON body; interpolated recursively before sending.
        mutate: Run state key receiving the parsed JSON response.
        headers: Headers overriding the global ``config.http.headers``.
    """

    type: Literal["http"] = "http"
    method: str = Field(..., min_length=1)
    endpoint: str
    body: Any = None
    mutate: str | None = None
    headers: dict[str, HeaderValue] = Field(default_factory=dict)

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        return v.upper()


class SleepExecutorRecord(_Record):
    """Delay executor; ``value`` is in milliseconds."""

    type: Literal["sleep"] = "sleep"
    value: float = Field(..., ge=0)


class NoneExecutorRecord(_Record):
    """No-op executor."""

    type: Literal["none"] = "none"


class EndExecutorRecord(_Record):
    """Executor that sets the exit code and stops the run."""

    type: Literal["end"] = "end"
    code: int = 0


ExecutorRecord = Annotated[
    HttpExecutorRecord | SleepExecutorRecord | NoneExecutorRecord | EndExecutorRecord,
    Field(discriminator="type"),
]


# =============================================================================
# Conditions
# =============================================================================

ComparisonOperator = Literal["=", "!=", ">", "<", ">=", "<="]


class SimpleCondition(_Record):
    """Compare the value at ``path`` with ``value``.

    A string ``value`` that starts with a letter or underscore is first
    tried as a path into the run state.
    """

    path: str = Field(..., min_length=1)
    operator: ComparisonOperator
    value: Any = None


class AndCondition(_Record):
    """True when every sub-condition is true (an empty list is true)."""

    and_: list[ConditionRecord] = Field(alias="and")


class OrCondition(_Record):
    """True when any sub-condition is true (an empty list is false)."""

    or_: list[ConditionRecord] = Field(alias="or")


def _condition_kind(value: Any) -> str | None:
    """Select the condition variant for raw data or a model instance."""
    if isinstance(value, str):
        return "named"
    if isinstance(value, dict):
        if "and" in value or "and_" in value:
            return "and"
        if "or" in value or "or_" in value:
            return "or"
        return "simple"
    if isinstance(value, AndCondition):
        return "and"
    if isinstance(value, OrCondition):
        return "or"
    if isinstance(value, SimpleCondition):
        return "simple"
    return None


ConditionRecord = Annotated[
    Annotated[SimpleCondition, Tag("simple")]
    | Annotated[AndCondition, Tag("and")]
    | Annotated[OrCondition, Tag("or")]
    | Annotated[str, Tag("named")],
    Discriminator(_condition_kind),
]

AndCondition.model_rebuild()
OrCondition.model_rebuild()


# =============================================================================
# Graph
# =============================================================================


class EdgeRecord(_Record):
    """Outgoing edge of a node.

    Without a condition ``to`` is always selected. With one, ``to`` is
    selected when it holds and ``fallback`` (if any) when it does not.
    """

    to: str = Field(..., min_length=1)
    condition: ConditionRecord | None = None
    fallback: str | None = None


class NodeRecord(_Record):
    """A node of the graph.

    Fields:
        description: Free text.
        executor: Executor run when the node is reached.
        edges: Outgoing edges, all evaluated in order.
        type: ``"end"`` marks a terminal node whose executor is skipped.
        code: Exit code of a terminal node (default 0).
    """

    description: str = ""
    executor: ExecutorRecord = Field(default_factory=NoneExecutorRecord)
    edges: list[EdgeRecord] = Field(default_factory=list)
    type: Literal["end"] | None = None
    code: int | None = None

    @property
    def is_end(self) -> bool:
        return self.type == "end"


class BeforeHook(_Record):
    """A single before-hook. A bare executor mapping is also accepted."""

    executor: ExecutorRecord

    @model_validator(mode="before")
    @classmethod
    def wrap_bare_executor(cls, data: Any) -> Any:
        if isinstance(data, dict) and "executor" not in data and "type" in data:
            return {"executor": data}
        return data


class BeforeHooks(_Record):
    """Hooks run once at start (``start``) and before every conditional edge (``all``).

    Hooks listed directly under ``before`` (no ``all``/``start`` keys) are
    treated as ``all`` hooks.
    """

    all: dict[str, BeforeHook] = Field(default_factory=dict)
    start: dict[str, BeforeHook] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_layout(cls, data: Any) -> Any:
        if isinstance(data, dict) and "all" not in data and "start" not in data:
            return {"all": data}
        return data


class HttpOptions(_Record):
    """Global HTTP options shared by every ``http`` executor."""

    base_url: str = ""
    headers: dict[str, HeaderValue] = Field(default_factory=dict)


class GraphOptions(_Record):
    """Run-wide options (the document's ``config`` key)."""

    verbose: bool = False
    http: HttpOptions = Field(default_factory=HttpOptions)


class GraphConfig(_Record):
    """Top-level graph document.

    Fields:
        initial_state: Seed of the run state (``initialState``).
        options: Run-wide options (``config``).
        variables: Values exposed as ``var`` in the run state.
        before: Before-hooks.
        conditions: Named conditions referenced from edges by name.
        graph: Node name to node.
    """

    initial_state: dict[str, Any] = Field(default_factory=dict, alias="initialState")
    options: GraphOptions = Field(default_factory=GraphOptions, alias="config")
    variables: dict[str, Any] = Field(default_factory=dict)
    before: BeforeHooks = Field(default_factory=BeforeHooks)
    conditions: dict[str, ConditionRecord] = Field(default_factory=dict)
    graph: dict[str, NodeRecord]

    @field_validator("before", mode="before")
    @classmethod
    def default_missing_before(cls, v: Any) -> Any:
        return {} if v is None else v
