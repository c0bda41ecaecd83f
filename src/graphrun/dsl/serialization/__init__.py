"""Graph document serialization.

Graph documents are JSON or YAML files describing a GraphConfig:

    initialState:
      attempts: 0
    config:
      verbose: true
      http:
        base_url: https://api.example.com
        headers:
          Authorization: Bearer ${secret.API_TOKEN}
    variables:
      region: eu-west-1
    graph:
      start:
        executor: {type: http, method: GET, endpoint: /status, mutate: status}
        edges:
          - to: done
            condition: {path: status.ok, operator: "=", value: true}
            fallback: failed
      done: {type: end, code: 0}
      failed: {type: end, code: 2}

- schema.py: Pydantic models defining the document format
- parser.py: JSON/YAML decoding and schema validation
"""

from __future__ import annotations

from graphrun.dsl.serialization.parser import (
    find_reference_warnings,
    load_graph,
    load_graph_file,
    parse_document,
    parse_json,
    parse_yaml,
    validate_schema,
)
from graphrun.dsl.serialization.schema import (
    AndCondition,
    BeforeHook,
    BeforeHooks,
    ConditionRecord,
    EdgeRecord,
    EndExecutorRecord,
    ExecutorRecord,
    GraphConfig,
    GraphOptions,
    HttpExecutorRecord,
    HttpOptions,
    NodeRecord,
    NoneExecutorRecord,
    OrCondition,
    SimpleCondition,
    SleepExecutorRecord,
)

__all__ = [
    # Schema
    "GraphConfig",
    "GraphOptions",
    "HttpOptions",
    "BeforeHooks",
    "BeforeHook",
    "NodeRecord",
    "EdgeRecord",
    "ExecutorRecord",
    "HttpExecutorRecord",
    "SleepExecutorRecord",
    "NoneExecutorRecord",
    "EndExecutorRecord",
    "ConditionRecord",
    "SimpleCondition",
    "AndCondition",
    "OrCondition",
    # Parser
    "parse_json",
    "parse_yaml",
    "parse_document",
    "validate_schema",
    "load_graph",
    "load_graph_file",
    "find_reference_warnings",
]
