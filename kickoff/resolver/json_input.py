"""Variable values supplied by a JSON input file.

The document must be a single flat object mapping variable names to strings,
booleans or integers.  Declarations are walked in the same order as the
interactive flow so conditions see the same earlier values; every applicable
variable must be present because there is no fallback to defaults here.

Values read from JSON are trusted once their type matches: they are *not*
checked against a variable's ``choices`` or ``validation`` rule, unlike
answers typed at a prompt.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from kickoff.errors import InputFileError, InputShapeError, MissingVariableError
from kickoff.resolver.models import Resolution, ResolutionWarning, WarningKind
from kickoff.resolver.protocols import VariableEvaluator
from kickoff.values import Value, value_from_json


def load_values_from_json(evaluator: VariableEvaluator, document: Any) -> Resolution:
    """Resolve variables from an already-decoded JSON document.

    Args:
        evaluator: Source of declarations and conditions.
        document: Result of :func:`json.loads` on the input file.

    Returns:
        The resolved values plus warnings for unknown keys and for values
        given to variables whose condition is not met.

    Raises:
        InputShapeError: If *document* is not an object.
        UnsupportedValueError: If a supplied value is a float, null, array or
            object.
        MissingVariableError: If an applicable variable is not supplied.
        EvaluationError: If a condition fails to evaluate.
    """
    if not isinstance(document, dict):
        raise InputShapeError(
            "Input JSON must be an object mapping variable names to simple values "
            "(strings, booleans, integers)"
        )

    warnings: list[ResolutionWarning] = []
    known = {var.name for var in evaluator.variables}
    for key in document:
        if key not in known:
            warnings.append(
                ResolutionWarning(
                    kind=WarningKind.UNKNOWN_VARIABLE,
                    name=key,
                    message=f"Variable `{key}` not defined in template",
                )
            )

    values: dict[str, Value] = {}

    for var in evaluator.variables:
        supplied = var.name in document

        if not evaluator.should_ask(var.name, values):
            if supplied:
                warnings.append(
                    ResolutionWarning(
                        kind=WarningKind.CONDITION_NOT_MET,
                        name=var.name,
                        message=(
                            f"Variable `{var.name}` provided in input but its "
                            "`only_if` condition is not satisfied"
                        ),
                    )
                )
            continue

        if not supplied:
            raise MissingVariableError(var.name)

        values[var.name] = value_from_json(document[var.name], var.name)

    return Resolution(values=values, warnings=warnings)


def load_values_from_json_file(evaluator: VariableEvaluator, path: str | Path) -> Resolution:
    """Read *path* and resolve variables from it.

    Raises:
        InputFileError: If the file does not exist or is not valid JSON.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise InputFileError(f"Input file `{file_path}` does not exist", path=file_path)

    raw = file_path.read_text(encoding="utf-8")
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InputFileError(f"Invalid JSON in input file: {exc}", path=file_path) from exc

    return load_values_from_json(evaluator, document)
