"""Graph document parser.

This module provides functions for loading and validating graph documents:
- parse_json / parse_yaml: Decode a document to a dict with error handling
- parse_document: Decode with an explicit or auto-detected format
- validate_schema: Validate a dict against the GraphConfig schema
- load_graph / load_graph_file: Main entry points
- find_reference_warnings: Report edges and conditions that point nowhere

Auto-detection tries JSON first (the stricter format) and falls back to
YAML.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import ValidationError

from graphrun.dsl.errors import GraphParseError
from graphrun.dsl.serialization.schema import (
    AndCondition,
    ConditionRecord,
    GraphConfig,
    OrCondition,
)
from graphrun.logging import get_logger

__all__ = [
    "DocumentFormat",
    "parse_json",
    "parse_yaml",
    "parse_document",
    "validate_schema",
    "load_graph",
    "load_graph_file",
    "find_reference_warnings",
]

logger = get_logger(__name__)

DocumentFormat = Literal["json", "yaml"]

EXTENSION_FORMATS: dict[str, DocumentFormat] = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


class GraphYamlLoader(yaml.SafeLoader):
    """SafeLoader that keeps unquoted dates and times as strings."""


GraphYamlLoader.yaml_implicit_resolvers = {
    first: [
        (tag, pattern)
        for tag, pattern in resolvers
        if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


# =============================================================================
# Decoding
# =============================================================================


def _ensure_mapping(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise GraphParseError(
            f"Graph document must be an object (dict), got {type(data).__name__}"
        )
    return data


def parse_json(content: str) -> dict[str, Any]:
    """Parse a JSON document to a dict.

    Raises:
        GraphParseError: If the content is empty, not valid JSON, or not an
            object.

    Examples:
        >>> parse_json('{"graph": {}}')
        {'graph': {}}
    """
    if not content or content.isspace():
        raise GraphParseError("Empty graph document")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise GraphParseError(
            f"JSON syntax error: {e.msg}",
            line_number=e.lineno,
            parse_error=e,
        ) from e

    return _ensure_mapping(data)


def parse_yaml(content: str) -> dict[str, Any]:
    """Parse a YAML document to a dict.

    Raises:
        GraphParseError: If the content is empty, not valid YAML, or not a
            mapping.

    Examples:
        >>> parse_yaml("graph:\\n  start: {}\\n")
        {'graph': {'start': {}}}
    """
    if not content or content.isspace():
        raise GraphParseError("Empty graph document")

    try:
        data = yaml.load(content, Loader=GraphYamlLoader)
    except yaml.YAMLError as e:
        line_number = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line_number = mark.line + 1

        raise GraphParseError(
            f"YAML syntax error: {e}",
            line_number=line_number,
            parse_error=e,
        ) from e

    return _ensure_mapping(data)


def parse_document(content: str, format: DocumentFormat | None = None) -> dict[str, Any]:
    """Parse a document in the given format, or auto-detect it.

    Args:
        content: Document text.
        format: ``"json"``, ``"yaml"``, or None to try JSON then YAML.

    Raises:
        GraphParseError: If the document cannot be decoded. For auto-detect,
            the YAML error is reported.
    """
    if format == "json":
        return parse_json(content)
    if format == "yaml":
        return parse_yaml(content)

    try:
        return parse_json(content)
    except GraphParseError as e:
        logger.debug(f"Not a JSON document, trying YAML: {e}")
        return parse_yaml(content)


# =============================================================================
# Schema Validation
# =============================================================================


def validate_schema(data: dict[str, Any]) -> GraphConfig:
    """Validate a dict against the GraphConfig schema.

    Raises:
        GraphParseError: If validation fails; all pydantic errors are
            collapsed into one message.

    Examples:
        >>> config = validate_schema({"graph": {"start": {"type": "end"}}})
        >>> config.graph["start"].is_end
        True
    """
    try:
        return GraphConfig.model_validate(data)
    except ValidationError as e:
        error_details = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            error_details.append(f"{loc}: {error['msg']}")

        raise GraphParseError(
            f"Schema validation failed: {'; '.join(error_details)}",
            parse_error=e,
        ) from e


# =============================================================================
# Entry Points
# =============================================================================


def load_graph(content: str, format: DocumentFormat | None = None) -> GraphConfig:
    """Decode and validate a graph document."""
    return validate_schema(parse_document(content, format))


def load_graph_file(path: str | Path) -> GraphConfig:
    """Load a graph document from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        GraphParseError: If the file is missing, has an unsupported
            extension, or does not contain a valid graph.
    """
    file_path = Path(path)
    format = EXTENSION_FORMATS.get(file_path.suffix.lower())
    if format is None:
        raise GraphParseError(
            f"Unsupported file extension '{file_path.suffix}' "
            f"(expected one of: {', '.join(EXTENSION_FORMATS)})",
            file_path=str(file_path),
        )

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise GraphParseError(
            f"Cannot read graph file: {e.strerror or e}",
            file_path=str(file_path),
            parse_error=e,
        ) from e

    try:
        return load_graph(content, format)
    except GraphParseError as e:
        if e.file_path is not None:
            raise
        raise GraphParseError(
            e.detail,
            file_path=str(file_path),
            line_number=e.line_number,
            parse_error=e.parse_error,
        ) from e


def _condition_names(condition: ConditionRecord) -> list[str]:
    if isinstance(condition, str):
        return [condition]
    if isinstance(condition, AndCondition):
        children = condition.and_
    elif isinstance(condition, OrCondition):
        children = condition.or_
    else:
        return []
    names: list[str] = []
    for child in children:
        names.extend(_condition_names(child))
    return names


def find_reference_warnings(
    config: GraphConfig, start_node: str = "start"
) -> list[str]:
    """List edges whose targets or named conditions do not exist.

    These are not schema errors; a run only fails if it actually reaches
    a dangling reference.
    """
    warnings: list[str] = []
    nodes = config.graph

    if start_node not in nodes:
        warnings.append(f"Graph has no '{start_node}' node; runs need an explicit start node")

    for condition_name, condition in config.conditions.items():
        for name in _condition_names(condition):
            if name not in config.conditions:
                warnings.append(
                    f"Condition '{condition_name}' references unknown condition '{name}'"
                )

    for node_name, node in nodes.items():
        for index, edge in enumerate(node.edges):
            for target in (edge.to, edge.fallback):
                if target is not None and target not in nodes:
                    warnings.append(
                        f"Edge {index} of node '{node_name}' targets unknown node '{target}'"
                    )
            if edge.condition is not None:
                for name in _condition_names(edge.condition):
                    if name not in config.conditions:
                        warnings.append(
                            f"Edge {index} of node '{node_name}' uses unknown "
                            f"condition '{name}'"
                        )

    return warnings
