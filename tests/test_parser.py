"""Tests for template static analysis (template_engine.parser).

Covers:
- Variable extraction and first-occurrence type inference
- Exclusion of helper and partial tokens
- Default values per inferred type
- Dependency extraction from import statements
- Metadata parsing (JSDoc layout, single-line layout, defaults)
- Purity and totality on malformed input
"""

from __future__ import annotations

import textwrap

import pytest

from template_engine.models import Complexity, VariableType
from template_engine.parser import (
    base_variable_name,
    default_value_for,
    extract_dependencies,
    extract_metadata,
    extract_variables,
    infer_variable_type,
    parse_template,
)


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Type inference
# ---------------------------------------------------------------------------


class TestInferVariableType:
    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("items[0]", VariableType.ARRAY),
            ("user.name", VariableType.OBJECT),
            ("isAdmin ? 'yes' : 'no'", VariableType.BOOLEAN),
            ("onClick()", VariableType.FUNCTION),
            ("title", VariableType.STRING),
        ],
    )
    def test_inference_rules(self, expression, expected):
        assert infer_variable_type(expression) is expected

    def test_index_wins_over_dot(self):
        assert infer_variable_type("rows[0].id") is VariableType.ARRAY

    def test_dotted_ternary_is_boolean(self):
        assert infer_variable_type("user.admin ? 'a' : 'b'") is VariableType.BOOLEAN

    def test_question_without_colon_is_string(self):
        assert infer_variable_type("maybe ?") is VariableType.STRING


class TestBaseVariableName:
    def test_stops_at_dot(self):
        assert base_variable_name("user.profile.name") == "user"

    def test_stops_at_bracket(self):
        assert base_variable_name("items[3]") == "items"

    def test_stops_at_question_mark(self):
        assert base_variable_name("isAdmin ? 'a' : 'b'") == "isAdmin"

    def test_plain_name(self):
        assert base_variable_name("  title  ") == "title"


class TestDefaultValues:
    def test_zero_values(self):
        assert default_value_for(VariableType.STRING) == ""
        assert default_value_for(VariableType.BOOLEAN) is False
        assert default_value_for(VariableType.ARRAY) == []
        assert default_value_for(VariableType.OBJECT) == {}

    def test_function_default_is_callable_noop(self):
        fn = default_value_for(VariableType.FUNCTION)
        assert callable(fn)
        assert fn() == ""
        assert fn(1, key="value") == ""

    def test_container_defaults_are_not_shared(self):
        first = default_value_for(VariableType.ARRAY)
        first.append("x")
        assert default_value_for(VariableType.ARRAY) == []


# ---------------------------------------------------------------------------
# Variable extraction
# ---------------------------------------------------------------------------


class TestExtractVariables:
    def test_one_entry_per_base_name(self):
        variables = extract_variables("{{user.name}} {{user.email}} {{title}}")
        assert [v.name for v in variables] == ["user", "title"]

    def test_first_occurrence_determines_type(self):
        variables = extract_variables("{{user}} then {{user.name}}")
        assert len(variables) == 1
        assert variables[0].type is VariableType.STRING

    def test_types_and_defaults(self):
        variables = extract_variables(
            "{{items[0]}} {{user.name}} {{isAdmin ? 'a' : 'b'}} {{title}}"
        )
        by_name = {v.name: v for v in variables}
        assert by_name["items"].type is VariableType.ARRAY
        assert by_name["items"].default_value == []
        assert by_name["user"].type is VariableType.OBJECT
        assert by_name["user"].default_value == {}
        assert by_name["isAdmin"].type is VariableType.BOOLEAN
        assert by_name["isAdmin"].default_value is False
        assert by_name["title"].type is VariableType.STRING
        assert by_name["title"].default_value == ""

    def test_function_call_keeps_parentheses_in_name(self):
        variables = extract_variables("{{onClick()}}")
        assert variables[0].name == "onClick()"
        assert variables[0].type is VariableType.FUNCTION

    def test_all_variables_required_with_description(self):
        variables = extract_variables("{{name}}")
        assert variables[0].required is True
        assert variables[0].description == "Template variable: name"
        assert variables[0].validation == []

    def test_helper_and_partial_tokens_excluded(self):
        variables = extract_variables("{{#uppercase word}} {{> header}} {{name}}")
        assert [v.name for v in variables] == ["name"]

    def test_whitespace_inside_token_ignored(self):
        variables = extract_variables("{{   spaced   }}")
        assert variables[0].name == "spaced"

    def test_malformed_tokens_are_not_variables(self):
        assert extract_variables("{{ }} {{.leading}} {{[0]}} {{}}") == []


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


class TestExtractDependencies:
    def test_external_modules_only(self):
        source = textwrap.dedent("""\
            import React from 'react';
            import { z } from "zod";
            import { helper } from './helper';
            import config from '/abs/config';
            import { cn } from '@/lib/utils';
        """)
        assert extract_dependencies(source) == ["react", "zod", "@/lib/utils"]

    def test_duplicates_removed_in_first_seen_order(self):
        source = "import a from 'b';\nimport c from 'a';\nimport d from 'b';\n"
        assert extract_dependencies(source) == ["b", "a"]

    def test_no_imports(self):
        assert extract_dependencies("const x = 1;") == []


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


class TestExtractMetadata:
    def test_jsdoc_layout(self, component_template):
        meta = extract_metadata(component_template)
        assert meta.version == "2.1.0"
        assert meta.author == "Jane Doe"
        assert meta.description == "Button component"
        assert meta.tags == ["ui", "button", "form"]
        assert meta.complexity is Complexity.SIMPLE
        assert meta.estimated_lines == len(component_template.split("\n"))

    def test_single_line_layout(self):
        source = (
            "/** @version 3.0.0 @author dev@example.com @description Card list "
            "@tags x, y @complexity advanced */\nconst a = 1;"
        )
        meta = extract_metadata(source)
        assert meta.version == "3.0.0"
        assert meta.author == "dev@example.com"
        assert meta.description == "Card list"
        assert meta.tags == ["x", "y"]
        assert meta.complexity is Complexity.ADVANCED

    def test_defaults_without_comment(self):
        meta = extract_metadata("a\nb\nc")
        assert meta.version == "1.0.0"
        assert meta.author == "AI Template Engine"
        assert meta.description == "Generated template"
        assert meta.tags == []
        assert meta.complexity is Complexity.INTERMEDIATE
        assert meta.estimated_lines == 3

    def test_comment_not_at_start_is_ignored(self):
        source = "const x = 1;\n/**\n * @version 9.9.9\n */\n"
        assert extract_metadata(source).version == "1.0.0"

    def test_leading_whitespace_allowed(self):
        assert extract_metadata("\n\n/** @version 4.0.0 */\n").version == "4.0.0"

    def test_unknown_complexity_keeps_default(self):
        meta = extract_metadata("/** @complexity extreme */")
        assert meta.complexity is Complexity.INTERMEDIATE

    def test_partial_tags_keep_other_defaults(self):
        meta = extract_metadata("/**\n * @author Sam\n */")
        assert meta.author == "Sam"
        assert meta.version == "1.0.0"

    def test_blank_tags_dropped(self):
        meta = extract_metadata("/** @tags a,, b , */")
        assert meta.tags == ["a", "b"]


# ---------------------------------------------------------------------------
# parse_template
# ---------------------------------------------------------------------------


class TestParseTemplate:
    def test_component_template(self, component_template):
        parsed = parse_template(component_template)
        assert parsed.content == component_template
        assert parsed.variable_names() == [
            "componentName",
            "className",
            "disabled",
            "children",
        ]
        assert parsed.variable("disabled").type is VariableType.BOOLEAN
        assert parsed.variable("children").type is VariableType.OBJECT
        assert parsed.variable("missing") is None
        assert parsed.dependencies == ["react", "@/lib/utils"]
        assert parsed.metadata.version == "2.1.0"

    def test_parse_is_pure(self, component_template):
        source = component_template + "{{handler()}}"
        assert parse_template(source) == parse_template(source)

    @pytest.mark.parametrize(
        "source",
        ["", "{{", "}}{{", "{{{{}}}}", "/** unterminated", "/**/", "{{a ? }}", "\x00{{\n}}"],
    )
    def test_parse_is_total(self, source):
        parsed = parse_template(source)
        assert parsed.content == source
