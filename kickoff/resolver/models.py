"""Pydantic v2 models shared by the resolution pipeline.

Defines the variable declaration seen by the driver, the structured warnings
collected while reading a JSON input document, and the result of one run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from kickoff.values import Value


class VariableDeclaration(BaseModel):
    """One template variable, as far as the resolution driver is concerned.

    The applicability condition and the default expression belong to the
    evaluator and are deliberately absent here.
    """
    name: str = Field(..., description="Unique variable name")
    prompt: str = Field(..., description="Question shown to the user")
    choices: Optional[list[str]] = Field(
        default=None, description="Allowed answers for a string variable"
    )
    validation: Optional[str] = Field(
        default=None, description="Regex a free-form string answer must match"
    )


class WarningKind(str, Enum):
    """Non-fatal problems found while reading a JSON input document."""
    UNKNOWN_VARIABLE = "unknown_variable"
    CONDITION_NOT_MET = "condition_not_met"


class ResolutionWarning(BaseModel):
    """A non-fatal notice returned alongside the resolved values."""
    model_config = ConfigDict(frozen=True)

    kind: WarningKind
    name: str
    message: str


@dataclass
class Resolution:
    """Outcome of resolving every variable of a template once."""

    values: dict[str, Value] = field(default_factory=dict)
    warnings: list[ResolutionWarning] = field(default_factory=list)
