"""Interactive and automatic variable resolution.

Walks the template's declarations in order and gives each applicable
variable exactly one value, either from a prompt or, in automatic mode, from
its computed default.
"""

from __future__ import annotations

from typing import Optional

from kickoff.resolver.models import Resolution, VariableDeclaration
from kickoff.resolver.protocols import Prompter, VariableEvaluator
from kickoff.values import BooleanValue, IntegerValue, StringValue, Value


def ask_questions(
    evaluator: VariableEvaluator,
    prompter: Optional[Prompter] = None,
    no_input: bool = False,
) -> Resolution:
    """Resolve every applicable variable of *evaluator*.

    Declarations are processed strictly in template order.  When declaration
    *i* is evaluated, ``values`` holds exactly the results of the applicable
    declarations before it, so conditions and defaults can only see earlier
    variables.  Inapplicable declarations leave no entry.

    Args:
        evaluator: Source of declarations, conditions and defaults.
        prompter: Prompt primitives; unused (and optional) when *no_input*.
        no_input: Take every default without prompting.

    Returns:
        A ``Resolution`` with no warnings.

    Raises:
        EvaluationError: If a condition or default fails to evaluate.
        PromptError: If a prompt is aborted.
    """
    if prompter is None and not no_input:
        raise ValueError("A prompter is required unless no_input is set")

    values: dict[str, Value] = {}

    for var in evaluator.variables:
        if not evaluator.should_ask(var.name, values):
            continue
        default = evaluator.default_for(var.name, values)
        if no_input:
            values[var.name] = default
        else:
            values[var.name] = _prompt_for(var, default, prompter)

    return Resolution(values=values)


def _prompt_for(var: VariableDeclaration, default: Value, prompter: Prompter) -> Value:
    """Ask for *var* with the prompt matching the variant of its default."""
    if isinstance(default, StringValue):
        if var.choices:
            return StringValue(prompter.ask_choice(var.prompt, default.value, var.choices))
        return StringValue(prompter.ask_string(var.prompt, default.value, var.validation))
    if isinstance(default, BooleanValue):
        return BooleanValue(prompter.ask_boolean(var.prompt, default.value))
    if isinstance(default, IntegerValue):
        return IntegerValue(prompter.ask_integer(var.prompt, default.value))
    raise TypeError(f"Unsupported default for variable `{var.name}`: {default!r}")
