"""Shared pytest fixtures for the kickoff test suite.

Provides reusable fixtures for:
- In-memory evaluators standing in for a loaded template
- A scripted prompter that records every question asked
- Executable hook scripts
- A complete template directory on disk
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

import pytest

from kickoff import utils
from kickoff.errors import PromptError
from kickoff.resolver.models import VariableDeclaration
from kickoff.values import BooleanValue, IntegerValue, StringValue, Value


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep Rich from wrapping long messages (temp paths) in captured output."""
    monkeypatch.setattr(utils.console, "width", 400)


# ---------------------------------------------------------------------------
# In-memory evaluator
# ---------------------------------------------------------------------------

@dataclass
class FakeVariable:
    name: str
    default: Value | Callable[[Mapping[str, Value]], Value]
    only_if: Optional[Callable[[Mapping[str, Value]], bool]] = None
    choices: Optional[list[str]] = None
    validation: Optional[str] = None
    prompt: str = ""


class FakeEvaluator:
    """A ``VariableEvaluator`` driven by plain Python callables.

    Every call is recorded together with a snapshot of the values it was
    given, so tests can check what each step could see.
    """

    def __init__(self, variables: Sequence[FakeVariable]) -> None:
        self._defs = {var.name: var for var in variables}
        self.variables = [
            VariableDeclaration(
                name=var.name,
                prompt=var.prompt or f"{var.name}?",
                choices=var.choices,
                validation=var.validation,
            )
            for var in variables
        ]
        self.calls: list[tuple[str, str, dict[str, Value]]] = []

    def should_ask(self, name: str, resolved: Mapping[str, Value]) -> bool:
        self.calls.append(("should_ask", name, dict(resolved)))
        condition = self._defs[name].only_if
        return True if condition is None else condition(resolved)

    def default_for(self, name: str, resolved: Mapping[str, Value]) -> Value:
        self.calls.append(("default_for", name, dict(resolved)))
        default = self._defs[name].default
        return default(resolved) if callable(default) else default


# ---------------------------------------------------------------------------
# Scripted prompter
# ---------------------------------------------------------------------------

@dataclass
class ScriptedPrompter:
    """A ``Prompter`` answering from a ``{prompt: answer}`` mapping.

    Prompts without a scripted answer return the default.  An answer that is
    an exception instance is raised instead.
    """

    answers: dict[str, Any] = field(default_factory=dict)
    asked: list[tuple[str, str, Any]] = field(default_factory=list)

    def _answer(self, kind: str, prompt: str, default: Any) -> Any:
        self.asked.append((kind, prompt, default))
        answer = self.answers.get(prompt, default)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def ask_boolean(self, prompt: str, default: bool) -> bool:
        return self._answer("boolean", prompt, default)

    def ask_string(self, prompt: str, default: str, validation: Optional[str]) -> str:
        return self._answer("string", prompt, default)

    def ask_choice(self, prompt: str, default: str, choices: Sequence[str]) -> str:
        return self._answer("choice", prompt, default)

    def ask_integer(self, prompt: str, default: int) -> int:
        return self._answer("integer", prompt, default)


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def aborting_prompter() -> ScriptedPrompter:
    """A prompter whose every question is aborted."""

    class _Aborting(ScriptedPrompter):
        def _answer(self, kind: str, prompt: str, default: Any) -> Any:
            self.asked.append((kind, prompt, default))
            raise PromptError(f"Prompt aborted: {prompt}")

    return _Aborting()


# ---------------------------------------------------------------------------
# Evaluators
# ---------------------------------------------------------------------------

@pytest.fixture
def docker_evaluator() -> FakeEvaluator:
    """``name`` / ``use_docker`` / ``port`` (only when use_docker is true)."""
    return FakeEvaluator(
        [
            FakeVariable("name", StringValue("demo")),
            FakeVariable("use_docker", BooleanValue(False)),
            FakeVariable(
                "port",
                IntegerValue(8080),
                only_if=lambda vals: vals.get("use_docker") == BooleanValue(True),
            ),
        ]
    )


@pytest.fixture
def mixed_evaluator() -> FakeEvaluator:
    """One variable of every prompt kind, with a default depending on an earlier value."""
    return FakeEvaluator(
        [
            FakeVariable("project_name", StringValue("my-app"), validation=r"^[a-z][a-z0-9-]*$"),
            FakeVariable(
                "database",
                StringValue("postgres"),
                choices=["postgres", "mysql", "sqlite"],
            ),
            FakeVariable("with_tests", BooleanValue(True)),
            FakeVariable(
                "package",
                lambda vals: StringValue(vals["project_name"].value.replace("-", "_")),
            ),
            FakeVariable("workers", IntegerValue(4)),
        ]
    )


# ---------------------------------------------------------------------------
# Hook scripts
# ---------------------------------------------------------------------------

@pytest.fixture
def make_script(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing an executable ``/bin/sh`` script under ``tmp_path/scripts``."""
    scripts = tmp_path / "scripts"
    scripts.mkdir()

    def _make(name: str, body: str) -> Path:
        path = scripts / name
        path.write_text("#!/bin/sh\n" + textwrap.dedent(body), encoding="utf-8")
        path.chmod(0o755)
        return path

    return _make


# ---------------------------------------------------------------------------
# Template on disk
# ---------------------------------------------------------------------------

SAMPLE_TEMPLATE_TOML = textwrap.dedent(
    """\
    name = "Sample"
    description = "A sample template"
    kickstart_version = 1
    directory = "template"
    ignore = ["ignored.txt"]
    copy_without_render = ["*/raw/*"]

    [[cleanup]]
    name = "use_docker"
    value = false
    paths = ["{{ project_name }}/Dockerfile"]

    [[pre_gen_hooks]]
    name = "pre"
    path = "hooks/pre.sh"

    [[post_gen_hooks]]
    name = "post"
    path = "hooks/post.sh"

    [[post_gen_hooks]]
    name = "docker-only"
    path = "hooks/docker.sh"
    only_if = { name = "use_docker", value = true }

    [[variables]]
    name = "project_name"
    default = "my-app"
    prompt = "Project name?"
    validation = "^[a-z][a-z0-9-]*$"

    [[variables]]
    name = "package"
    default = "{{ project_name | snake_case }}"
    prompt = "Python package name?"

    [[variables]]
    name = "database"
    default = "postgres"
    prompt = "Database?"
    choices = ["postgres", "sqlite"]

    [[variables]]
    name = "use_docker"
    default = false
    prompt = "Use docker?"

    [[variables]]
    name = "port"
    default = 8080
    prompt = "Port?"
    only_if = { name = "use_docker", value = true }
    """
)


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A complete template directory: ``template.toml``, files and hooks."""
    root = tmp_path / "sample-template"
    files = root / "template" / "{{ project_name }}"
    (files / "{{ package }}").mkdir(parents=True)
    (files / "raw").mkdir()
    (root / "hooks").mkdir()

    (root / "template.toml").write_text(SAMPLE_TEMPLATE_TOML, encoding="utf-8")
    (files / "README.md").write_text(
        "# {{ project_name }}\n\nDatabase: {{ database }}\n", encoding="utf-8"
    )
    (files / "{{ package }}" / "__init__.py").write_text(
        '__name__ = "{{ package }}"\n', encoding="utf-8"
    )
    (files / "Dockerfile").write_text("EXPOSE {{ port | default(80) }}\n", encoding="utf-8")
    (files / "raw" / "snippet.txt").write_text("{{ not rendered }}\n", encoding="utf-8")
    (root / "template" / "ignored.txt").write_text("ignored\n", encoding="utf-8")

    for name, marker in (("pre.sh", "pre"), ("post.sh", "post"), ("docker.sh", "docker")):
        script = root / "hooks" / name
        script.write_text(
            f"#!/bin/sh\necho {marker}-{{{{ project_name }}}} >> hooks.log\n",
            encoding="utf-8",
        )
        script.chmod(0o755)

    return root
