"""Pydantic v2 models for ``template.toml``.

A template definition lists the variables to ask for, the hooks to run
around generation and a few options controlling which files are rendered.
Structural validation is left to Pydantic; :meth:`TemplateDefinition.problems`
adds the cross-field checks Pydantic cannot express (defaults matching their
choices, conditions referencing earlier variables, ...).
"""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr, ValidationError

from kickoff.errors import TemplateError
from kickoff.resolver.models import VariableDeclaration

# StrictBool first: a TOML boolean must never be read as an integer.
Scalar = Union[StrictBool, StrictInt, StrictStr]

TEMPLATE_FILENAME = "template.toml"


# ---------------------------------------------------------------------------
# Sub models
# ---------------------------------------------------------------------------

class Condition(BaseModel):
    """``only_if = { name = "database", value = "postgres" }``"""
    name: str = Field(..., description="Variable the condition looks at")
    value: Scalar = Field(..., description="Value that variable must have")


class VariableDefinition(VariableDeclaration):
    """A ``[[variables]]`` entry."""
    default: Scalar = Field(..., description="Default value; a string default is a Jinja2 template")
    only_if: Optional[Condition] = Field(default=None)


class HookDefinition(BaseModel):
    """A ``[[pre_gen_hooks]]`` or ``[[post_gen_hooks]]`` entry."""
    name: str
    path: str = Field(..., description="Script path relative to the template root")
    only_if: Optional[Condition] = Field(default=None)


class CleanupDefinition(BaseModel):
    """Paths to delete after generation when ``name`` resolved to ``value``."""
    name: str
    value: Scalar
    paths: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Template definition
# ---------------------------------------------------------------------------

class TemplateDefinition(BaseModel):
    """The parsed contents of a ``template.toml`` file."""

    name: str
    description: Optional[str] = None
    kickstart_version: Literal[1] = 1
    version: Optional[str] = None
    url: Optional[str] = None
    authors: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    directory: Optional[str] = Field(
        default=None, description="Sub directory holding the files to render"
    )
    follow_symlinks: bool = False
    ignore: list[str] = Field(default_factory=list)
    copy_without_render: list[str] = Field(default_factory=list)
    cleanup: list[CleanupDefinition] = Field(default_factory=list)
    pre_gen_hooks: list[HookDefinition] = Field(default_factory=list)
    post_gen_hooks: list[HookDefinition] = Field(default_factory=list)
    variables: list[VariableDefinition] = Field(default_factory=list)

    @classmethod
    def from_str(cls, content: str) -> "TemplateDefinition":
        """Parse and validate TOML text.

        Raises:
            TemplateError: If the text is not valid TOML or not a valid
                template definition.
        """
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise TemplateError(f"Invalid TOML: {exc}") from exc
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise TemplateError(f"Invalid template definition:\n{exc}") from exc

    @classmethod
    def from_file(cls, path: str | Path) -> "TemplateDefinition":
        file_path = Path(path)
        if not file_path.is_file():
            raise TemplateError(f"No {TEMPLATE_FILENAME} found at `{file_path}`")
        return cls.from_str(file_path.read_text(encoding="utf-8"))

    @classmethod
    def validate_file(cls, path: str | Path) -> list[str]:
        """Return every problem found in the file at *path*; empty if valid."""
        file_path = Path(path)
        if not file_path.is_file():
            return [f"File `{file_path}` does not exist"]
        try:
            data = tomllib.loads(file_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            return [f"Invalid TOML: {exc}"]
        try:
            definition = cls.model_validate(data)
        except ValidationError as exc:
            return [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            ]
        return definition.problems()

    def problems(self) -> list[str]:
        """Cross-field checks on an otherwise well-formed definition."""
        errors: list[str] = []
        seen: dict[str, VariableDefinition] = {}

        for var in self.variables:
            if var.name in seen:
                errors.append(f"Variable `{var.name}` is declared more than once")

            if var.only_if is not None and var.only_if.name not in seen:
                errors.append(
                    f"Variable `{var.name}` depends on `{var.only_if.name}`, "
                    "which is not declared before it"
                )

            is_string = isinstance(var.default, str)
            if var.choices is not None:
                if not is_string:
                    errors.append(f"Variable `{var.name}` has choices but its default is not a string")
                elif not var.choices:
                    errors.append(f"Variable `{var.name}` has an empty list of choices")
                elif var.default not in var.choices:
                    errors.append(
                        f"Variable `{var.name}` has a default `{var.default}` "
                        "which is not in its choices"
                    )

            if var.validation is not None:
                if not is_string:
                    errors.append(
                        f"Variable `{var.name}` has a validation regex but its default is not a string"
                    )
                else:
                    try:
                        pattern = re.compile(var.validation)
                    except re.error as exc:
                        errors.append(f"Variable `{var.name}` has an invalid validation regex: {exc}")
                    else:
                        # Templated defaults can only be checked at run time.
                        if "{{" not in var.default and not pattern.search(var.default):
                            errors.append(
                                f"Variable `{var.name}` has a default `{var.default}` "
                                f"not matching its validation regex `{var.validation}`"
                            )

            seen[var.name] = var

        for hook in [*self.pre_gen_hooks, *self.post_gen_hooks]:
            if hook.only_if is not None and hook.only_if.name not in seen:
                errors.append(f"Hook `{hook.name}` depends on undeclared variable `{hook.only_if.name}`")

        for entry in self.cleanup:
            if entry.name not in seen:
                errors.append(f"Cleanup entry depends on undeclared variable `{entry.name}`")

        return errors
