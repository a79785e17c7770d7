"""Terminal prompts built on ``rich.prompt``.

``RichPrompter`` implements the ``Prompter`` protocol used by the resolution
driver.  Malformed answers (a non-integer for an integer prompt, a value
outside the choices, a string not matching the validation regex) are
re-prompted here; only an aborted interaction escapes, as ``PromptError``.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt, PromptBase

from kickoff.errors import PromptError
from kickoff.utils import console as default_console


class RichPrompter:
    """Asks questions on a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def ask_boolean(self, prompt: str, default: bool) -> bool:
        return self._ask(Confirm, prompt, default=default)

    def ask_string(self, prompt: str, default: str, validation: Optional[str]) -> str:
        try:
            pattern = re.compile(validation) if validation else None
        except re.error as exc:
            raise PromptError(f"Invalid validation regex `{validation}`: {exc}") from exc

        while True:
            answer = self._ask(Prompt, prompt, default=default)
            # Accepting the default is always allowed.
            if pattern is None or answer == default or pattern.search(answer):
                return answer
            self.console.print(
                f"[prompt.invalid]Invalid value: it must match the regex `{validation}`",
                highlight=False,
            )

    def ask_choice(self, prompt: str, default: str, choices: Sequence[str]) -> str:
        return self._ask(Prompt, prompt, default=default, choices=list(choices))

    def ask_integer(self, prompt: str, default: int) -> int:
        return self._ask(IntPrompt, prompt, default=default)

    def _ask(self, prompt_cls: type[PromptBase], prompt: str, **kwargs: Any) -> Any:
        try:
            return prompt_cls.ask(prompt, console=self.console, **kwargs)
        except (EOFError, KeyboardInterrupt) as exc:
            raise PromptError(f"Prompt aborted: {prompt}") from exc
