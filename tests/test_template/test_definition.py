"""Unit tests for template.toml parsing (kickoff.template.definition).

Tests cover:
- TemplateDefinition.from_str / from_file
- Scalar defaults keep their TOML type
- validate_file reporting
- Cross-field problems()
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from conftest import SAMPLE_TEMPLATE_TOML
from kickoff.errors import TemplateError
from kickoff.template.definition import TemplateDefinition

pytestmark = pytest.mark.unit


def _definition(body: str) -> TemplateDefinition:
    return TemplateDefinition.from_str('name = "T"\n' + textwrap.dedent(body))


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParsing:
    def test_sample(self):
        definition = TemplateDefinition.from_str(SAMPLE_TEMPLATE_TOML)
        assert definition.name == "Sample"
        assert definition.directory == "template"
        assert [var.name for var in definition.variables] == [
            "project_name", "package", "database", "use_docker", "port",
        ]
        assert [hook.name for hook in definition.post_gen_hooks] == ["post", "docker-only"]
        assert definition.cleanup[0].paths == ["{{ project_name }}/Dockerfile"]

    def test_defaults_keep_type(self):
        definition = TemplateDefinition.from_str(SAMPLE_TEMPLATE_TOML)
        defaults = {var.name: var.default for var in definition.variables}
        assert defaults["use_docker"] is False
        assert defaults["port"] == 8080 and not isinstance(defaults["port"], bool)
        assert defaults["project_name"] == "my-app"

    def test_minimal(self):
        definition = TemplateDefinition.from_str('name = "Bare"\n')
        assert definition.variables == []
        assert definition.kickstart_version == 1
        assert definition.follow_symlinks is False

    def test_invalid_toml(self):
        with pytest.raises(TemplateError, match="Invalid TOML"):
            TemplateDefinition.from_str("name = ")

    def test_missing_name(self):
        with pytest.raises(TemplateError, match="Invalid template definition"):
            TemplateDefinition.from_str('description = "no name"\n')

    def test_float_default_rejected(self):
        with pytest.raises(TemplateError):
            _definition(
                """
                [[variables]]
                name = "ratio"
                default = 1.5
                prompt = "Ratio?"
                """
            )

    def test_unsupported_version(self):
        with pytest.raises(TemplateError):
            TemplateDefinition.from_str('name = "T"\nkickstart_version = 2\n')

    def test_from_file_missing(self, tmp_path: Path):
        with pytest.raises(TemplateError, match="No template.toml"):
            TemplateDefinition.from_file(tmp_path / "template.toml")

    def test_from_file(self, template_dir: Path):
        definition = TemplateDefinition.from_file(template_dir / "template.toml")
        assert definition.name == "Sample"


# ---------------------------------------------------------------------------
# validate_file
# ---------------------------------------------------------------------------


class TestValidateFile:
    def test_valid(self, template_dir: Path):
        assert TemplateDefinition.validate_file(template_dir / "template.toml") == []

    def test_missing(self, tmp_path: Path):
        errors = TemplateDefinition.validate_file(tmp_path / "nope.toml")
        assert len(errors) == 1
        assert "does not exist" in errors[0]

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "template.toml"
        path.write_text("name = [", encoding="utf-8")
        errors = TemplateDefinition.validate_file(path)
        assert errors[0].startswith("Invalid TOML")

    def test_schema_errors_have_location(self, tmp_path: Path):
        path = tmp_path / "template.toml"
        path.write_text(
            'name = "T"\n[[variables]]\nname = "x"\nprompt = "X?"\n', encoding="utf-8"
        )
        errors = TemplateDefinition.validate_file(path)
        assert any(err.startswith("variables.0.default") for err in errors)


# ---------------------------------------------------------------------------
# problems()
# ---------------------------------------------------------------------------


class TestProblems:
    def test_sample_has_none(self):
        assert TemplateDefinition.from_str(SAMPLE_TEMPLATE_TOML).problems() == []

    def test_duplicate_variable(self):
        definition = _definition(
            """
            [[variables]]
            name = "a"
            default = "x"
            prompt = "A?"

            [[variables]]
            name = "a"
            default = "y"
            prompt = "A again?"
            """
        )
        assert definition.problems() == ["Variable `a` is declared more than once"]

    def test_condition_on_later_variable(self):
        definition = _definition(
            """
            [[variables]]
            name = "port"
            default = 80
            prompt = "Port?"
            only_if = { name = "use_docker", value = true }

            [[variables]]
            name = "use_docker"
            default = false
            prompt = "Docker?"
            """
        )
        problems = definition.problems()
        assert len(problems) == 1
        assert "depends on `use_docker`" in problems[0]

    def test_default_not_in_choices(self):
        definition = _definition(
            """
            [[variables]]
            name = "db"
            default = "oracle"
            prompt = "DB?"
            choices = ["postgres", "mysql"]
            """
        )
        assert "not in its choices" in definition.problems()[0]

    def test_choices_on_boolean(self):
        definition = _definition(
            """
            [[variables]]
            name = "flag"
            default = true
            prompt = "Flag?"
            choices = ["yes"]
            """
        )
        assert "default is not a string" in definition.problems()[0]

    def test_empty_choices(self):
        definition = _definition(
            """
            [[variables]]
            name = "db"
            default = "x"
            prompt = "DB?"
            choices = []
            """
        )
        assert "empty list of choices" in definition.problems()[0]

    def test_invalid_regex(self):
        definition = _definition(
            """
            [[variables]]
            name = "n"
            default = "x"
            prompt = "N?"
            validation = "(["
            """
        )
        assert "invalid validation regex" in definition.problems()[0]

    def test_default_not_matching_regex(self):
        definition = _definition(
            """
            [[variables]]
            name = "n"
            default = "Bad Name"
            prompt = "N?"
            validation = "^[a-z]+$"
            """
        )
        assert "not matching its validation regex" in definition.problems()[0]

    def test_templated_default_not_checked(self):
        definition = _definition(
            """
            [[variables]]
            name = "a"
            default = "x"
            prompt = "A?"

            [[variables]]
            name = "n"
            default = "{{ a | upper }}"
            prompt = "N?"
            validation = "^[a-z]+$"
            """
        )
        assert definition.problems() == []

    def test_hook_and_cleanup_on_undeclared_variable(self):
        definition = _definition(
            """
            [[cleanup]]
            name = "ghost"
            value = true
            paths = ["x"]

            [[post_gen_hooks]]
            name = "h"
            path = "h.sh"
            only_if = { name = "phantom", value = 1 }
            """
        )
        problems = definition.problems()
        assert "Hook `h` depends on undeclared variable `phantom`" in problems
        assert "Cleanup entry depends on undeclared variable `ghost`" in problems
