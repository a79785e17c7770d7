"""Contracts the resolution pipeline consumes from its collaborators.

The driver never imports a concrete template or prompt implementation; it
only relies on these two protocols.  ``kickoff.template.Template`` and
``kickoff.prompt.RichPrompter`` are the implementations used by the CLI.
"""

from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from kickoff.resolver.models import VariableDeclaration
from kickoff.values import Value


class VariableEvaluator(Protocol):
    """Decides applicability and defaults of declared variables."""

    @property
    def variables(self) -> Sequence[VariableDeclaration]:
        """Declarations in template order."""
        ...

    def should_ask(self, name: str, resolved: Mapping[str, Value]) -> bool:
        """Whether *name* applies given the values resolved so far.

        Raises:
            EvaluationError: If the condition cannot be evaluated.
        """
        ...

    def default_for(self, name: str, resolved: Mapping[str, Value]) -> Value:
        """The default value of *name*; its variant is the variable's type.

        Raises:
            EvaluationError: If the default cannot be computed.
        """
        ...


class Prompter(Protocol):
    """Interactive prompt primitives.  Each raises ``PromptError`` on abort."""

    def ask_boolean(self, prompt: str, default: bool) -> bool: ...

    def ask_string(self, prompt: str, default: str, validation: Optional[str]) -> str: ...

    def ask_choice(self, prompt: str, default: str, choices: Sequence[str]) -> str: ...

    def ask_integer(self, prompt: str, default: int) -> int: ...
