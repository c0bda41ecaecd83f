"""Tests for graph document loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from graphrun.dsl.errors import GraphParseError
from graphrun.dsl.serialization.parser import (
    find_reference_warnings,
    load_graph,
    load_graph_file,
    parse_document,
    parse_json,
    parse_yaml,
    validate_schema,
)

YAML_GRAPH = """
initialState:
  attempts: 0
graph:
  start:
    executor:
      type: none
    edges:
      - to: done
  done:
    type: end
    code: 4
"""


class TestDecoding:
    """Tests for JSON/YAML decoding."""

    def test_parse_json(self) -> None:
        assert parse_json('{"graph": {}}') == {"graph": {}}

    def test_parse_json_reports_line(self) -> None:
        with pytest.raises(GraphParseError) as exc_info:
            parse_json('{\n  "graph": {,\n}')
        assert exc_info.value.line_number == 2

    def test_parse_yaml(self) -> None:
        assert parse_yaml(YAML_GRAPH)["graph"]["done"]["code"] == 4

    def test_parse_yaml_reports_line(self) -> None:
        with pytest.raises(GraphParseError) as exc_info:
            parse_yaml("graph:\n  a: b: c\n")
        assert exc_info.value.line_number is not None

    @pytest.mark.parametrize("content", ["", "   \n"])
    def test_empty_document(self, content: str) -> None:
        with pytest.raises(GraphParseError, match="Empty"):
            parse_document(content)

    def test_non_mapping_document(self) -> None:
        with pytest.raises(GraphParseError, match="must be an object"):
            parse_yaml("- a\n- b\n")

    def test_auto_detect_json(self) -> None:
        assert parse_document('{"a": 1}') == {"a": 1}

    def test_auto_detect_falls_back_to_yaml(self) -> None:
        assert parse_document("a: 1\n") == {"a": 1}

    def test_explicit_format(self) -> None:
        with pytest.raises(GraphParseError, match="JSON syntax error"):
            parse_document("a: 1\n", format="json")


class TestValidation:
    """Tests for schema validation."""

    def test_validate_schema_collapses_errors(self) -> None:
        with pytest.raises(GraphParseError) as exc_info:
            validate_schema({"graph": {"a": {"executor": {"type": "sleep"}}}})
        assert "Schema validation failed" in str(exc_info.value)
        assert "value" in str(exc_info.value)

    def test_load_graph(self) -> None:
        config = load_graph(YAML_GRAPH)
        assert config.initial_state == {"attempts": 0}
        assert config.graph["done"].code == 4

    def test_yaml_dates_stay_strings(self) -> None:
        config = load_graph(
            "initialState:\n"
            "  since: 2024-01-01\n"
            "  at: 2024-01-01T10:00:00Z\n"
            "graph:\n"
            "  start:\n"
            "    executor:\n"
            "      type: http\n"
            "      method: POST\n"
            "      endpoint: /search\n"
            "      body: {since: 2024-01-01}\n",
            format="yaml",
        )
        assert config.initial_state == {
            "since": "2024-01-01",
            "at": "2024-01-01T10:00:00Z",
        }
        assert config.graph["start"].executor.body == {"since": "2024-01-01"}
        assert json.loads(json.dumps(config.initial_state)) == config.initial_state


class TestLoadGraphFile:
    """Tests for load_graph_file()."""

    def test_yaml_and_json_files(
        self, tmp_path: Path, minimal_graph_dict: dict[str, Any]
    ) -> None:
        yaml_file = tmp_path / "graph.yml"
        yaml_file.write_text(YAML_GRAPH)
        json_file = tmp_path / "graph.json"
        json_file.write_text(json.dumps(minimal_graph_dict))

        assert load_graph_file(yaml_file).graph["done"].code == 4
        assert "start" in load_graph_file(str(json_file)).graph

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "graph.toml"
        path.write_text("")
        with pytest.raises(GraphParseError, match="Unsupported file extension"):
            load_graph_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(GraphParseError, match="Cannot read graph file"):
            load_graph_file(tmp_path / "nope.yaml")

    def test_errors_carry_file_path(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"graph": ')
        with pytest.raises(GraphParseError) as exc_info:
            load_graph_file(path)
        assert exc_info.value.file_path == str(path)
        assert str(path) in str(exc_info.value)


class TestReferenceWarnings:
    """Tests for find_reference_warnings()."""

    def test_clean_graph(self, minimal_graph_dict: dict[str, Any]) -> None:
        assert find_reference_warnings(validate_schema(minimal_graph_dict)) == []

    def test_dangling_targets_and_conditions(self) -> None:
        config = validate_schema(
            {
                "conditions": {"ok": {"or": ["missing_named"]}},
                "graph": {
                    "begin": {
                        "edges": [
                            {"to": "ghost", "condition": "unknown", "fallback": "begin"},
                        ]
                    }
                },
            }
        )
        warnings = find_reference_warnings(config)
        assert any("'start'" in w for w in warnings)
        assert any("missing_named" in w for w in warnings)
        assert any("'ghost'" in w for w in warnings)
        assert any("'unknown'" in w for w in warnings)
        assert len(warnings) == 4
