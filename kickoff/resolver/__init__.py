"""kickoff resolver -- gives every applicable template variable a value.

Three input sources share one contract: interactive prompts, a JSON input
file, or the template's defaults.  Whatever the source, declarations are
handled in template order and only applicable variables end up in the result.

Quick usage::

    from kickoff.config import InputMode
    from kickoff.resolver import resolve_variables

    resolution = resolve_variables(template, InputMode.AUTOMATIC)
    resolution.values    # {"name": StringValue("demo"), ...}
    resolution.warnings  # [] unless read from JSON
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from kickoff.config import InputMode
from kickoff.resolver.driver import ask_questions
from kickoff.resolver.json_input import load_values_from_json, load_values_from_json_file
from kickoff.resolver.models import (
    Resolution,
    ResolutionWarning,
    VariableDeclaration,
    WarningKind,
)
from kickoff.resolver.protocols import Prompter, VariableEvaluator


def resolve_variables(
    evaluator: VariableEvaluator,
    mode: InputMode,
    *,
    prompter: Optional[Prompter] = None,
    input_file: str | Path | None = None,
) -> Resolution:
    """Resolve the variables of *evaluator* from the source selected by *mode*.

    The caller guarantees only one source is active; ``Config`` enforces it
    for the CLI.
    """
    if mode is InputMode.JSON_FILE:
        if input_file is None:
            raise ValueError("input_file is required in JSON_FILE mode")
        return load_values_from_json_file(evaluator, input_file)
    if mode is InputMode.AUTOMATIC:
        return ask_questions(evaluator, no_input=True)
    return ask_questions(evaluator, prompter)


__all__ = [
    "Prompter",
    "Resolution",
    "ResolutionWarning",
    "VariableDeclaration",
    "VariableEvaluator",
    "WarningKind",
    "ask_questions",
    "load_values_from_json",
    "load_values_from_json_file",
    "resolve_variables",
]
