"""Unit tests for utility functions (template_engine.utils).

Tests cover:
- read_template (success, missing file)
- load_context_file (JSON, YAML, wrapping, full contexts, bad input)
- write_output
- Rich output helpers
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from template_engine.utils import (
    TemplateEngineError,
    load_context_file,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    read_template,
    write_output,
)


# ---------------------------------------------------------------------------
# read_template
# ---------------------------------------------------------------------------


class TestReadTemplate:
    @pytest.mark.unit
    def test_reads_utf8(self, write_file):
        path = write_file("t.txt", "héllo {{name}}")
        assert read_template(path) == "héllo {{name}}"

    @pytest.mark.unit
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(TemplateEngineError, match="not found"):
            read_template(tmp_path / "nope.txt")

    @pytest.mark.unit
    def test_directory_is_not_a_template(self, tmp_path: Path):
        with pytest.raises(TemplateEngineError):
            read_template(tmp_path)


# ---------------------------------------------------------------------------
# load_context_file
# ---------------------------------------------------------------------------


class TestLoadContextFile:
    @pytest.mark.unit
    def test_plain_json_is_wrapped(self, write_file):
        path = write_file("ctx.json", json.dumps({"name": "Sam"}))
        assert load_context_file(path) == {"variables": {"name": "Sam"}}

    @pytest.mark.unit
    def test_full_context_passes_through(self, write_file):
        data = {"variables": {"name": "Sam"}, "partials": {"p": "text"}}
        path = write_file("ctx.json", json.dumps(data))
        assert load_context_file(path) == data

    @pytest.mark.unit
    def test_non_mapping_variables_key_is_wrapped(self, write_file):
        path = write_file("ctx.json", json.dumps({"variables": "x"}))
        assert load_context_file(path) == {"variables": {"variables": "x"}}

    @pytest.mark.unit
    def test_yaml(self, write_file):
        path = write_file("ctx.yaml", "name: Sam\nitems:\n  - a\n  - b\n")
        assert load_context_file(path) == {"variables": {"name": "Sam", "items": ["a", "b"]}}

    @pytest.mark.unit
    def test_yml_extension(self, write_file):
        path = write_file("ctx.yml", "flag: true\n")
        assert load_context_file(path) == {"variables": {"flag": True}}

    @pytest.mark.unit
    def test_empty_yaml_is_empty_context(self, write_file):
        path = write_file("ctx.yaml", "")
        assert load_context_file(path) == {"variables": {}}

    @pytest.mark.unit
    def test_non_mapping_rejected(self, write_file):
        path = write_file("ctx.json", "[1, 2]")
        with pytest.raises(TemplateEngineError, match="must contain a mapping"):
            load_context_file(path)

    @pytest.mark.unit
    def test_invalid_json(self, write_file):
        path = write_file("ctx.json", "{not json")
        with pytest.raises(TemplateEngineError, match="Invalid context file"):
            load_context_file(path)

    @pytest.mark.unit
    def test_invalid_yaml(self, write_file):
        path = write_file("ctx.yaml", "key: [unclosed\n")
        with pytest.raises(TemplateEngineError, match="Invalid context file"):
            load_context_file(path)

    @pytest.mark.unit
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(TemplateEngineError, match="not found"):
            load_context_file(tmp_path / "missing.json")


# ---------------------------------------------------------------------------
# write_output
# ---------------------------------------------------------------------------


class TestWriteOutput:
    @pytest.mark.unit
    def test_creates_parent_dirs(self, tmp_path: Path):
        target = tmp_path / "a" / "b" / "Button.tsx"
        written = write_output(target, "export {};\n")
        assert written == target
        assert target.read_text(encoding="utf-8") == "export {};\n"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestRichOutputHelpers:
    @pytest.mark.unit
    def test_print_summary_table(self):
        # Should not raise
        print_summary_table({"Version": "1.0.0", "Tags": "[ui]"}, title="Template")

    @pytest.mark.unit
    def test_print_success(self, capsys):
        print_success("Rendered ok")
        assert "Rendered ok" in capsys.readouterr().out

    @pytest.mark.unit
    def test_print_error_goes_to_stderr(self, capsys):
        print_error("Something failed")
        captured = capsys.readouterr()
        assert "Something failed" in captured.err
        assert captured.out == ""

    @pytest.mark.unit
    def test_markup_is_escaped(self, capsys):
        print_warning("Expression 'items[9]' could not be resolved")
        assert "items[9]" in capsys.readouterr().err
