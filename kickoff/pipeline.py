"""kickoff pipeline orchestrator.

Runs one scaffolding job end to end:

1. RESOLVE   -- give every applicable variable a value (prompts, JSON file or defaults).
2. PRE-GEN   -- run the template's pre-generation hooks.
3. GENERATE  -- render the template into the output directory.
4. POST-GEN  -- run the template's post-generation hooks.

Each step starts only after the previous one succeeded; the first failure
stops the run and nothing already written is rolled back.

Usage::

    kickoff ./my-template -o ./out
    kickoff ./my-template --no-input
    kickoff ./my-template --input-file values.json
    kickoff validate ./my-template/template.toml
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import NoReturn, Optional, Protocol, Sequence

from pydantic import ValidationError

from kickoff import __version__
from kickoff.config import Config, InputMode
from kickoff.errors import ConfigError, KickoffError
from kickoff.hooks import HookFile, HookPhase, run_hook_phase
from kickoff.prompt import RichPrompter
from kickoff.resolver import Prompter, Resolution, VariableEvaluator, resolve_variables
from kickoff.template import Template, TemplateDefinition
from kickoff.utils import (
    format_error_chain,
    print_error,
    print_success,
    print_warning,
)
from kickoff.values import Value


class ProjectTemplate(VariableEvaluator, Protocol):
    """Everything the pipeline needs from a template."""

    def set_variables(self, values: dict[str, Value]) -> None: ...

    async def generate(self, output_dir: Path) -> object: ...

    def get_pre_gen_hooks(self) -> list[HookFile]: ...

    def get_post_gen_hooks(self) -> list[HookFile]: ...


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives resolution, hooks and generation for one template.

    Attributes:
        config: Run configuration (input source, output directory, hooks).
        template: The template to resolve and render.
        prompter: Prompt primitives used in interactive mode.
    """

    def __init__(
        self,
        config: Config,
        template: ProjectTemplate,
        prompter: Optional[Prompter] = None,
    ) -> None:
        self.config = config
        self.template = template
        self.prompter = prompter

    def resolve(self) -> Resolution:
        """Resolve the template's variables from the configured source.

        Warnings are printed here; the resolver itself only returns them.
        """
        prompter = self.prompter
        if prompter is None and self.config.input_mode is InputMode.INTERACTIVE:
            prompter = RichPrompter()

        resolution = resolve_variables(
            self.template,
            self.config.input_mode,
            prompter=prompter,
            input_file=self.config.input_file,
        )
        for warning in resolution.warnings:
            print_warning(warning.message)
        return resolution

    async def run(self) -> Resolution:
        """Run every step in order.

        Returns:
            The resolution that was used to render the project.

        Raises:
            KickoffError: From the first step that fails.
        """
        resolution = self.resolve()
        self.template.set_variables(resolution.values)

        output_dir = self.config.output_dir
        run_hooks = self.config.run_hooks

        if run_hooks:
            await run_hook_phase(
                HookPhase.PRE_GEN, self.template.get_pre_gen_hooks(), output_dir
            )

        await self.template.generate(output_dir)

        if run_hooks:
            await run_hook_phase(
                HookPhase.POST_GEN, self.template.get_post_gen_hooks(), output_dir
            )

        return resolution


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser(defaults: Optional[Config] = None) -> argparse.ArgumentParser:
    """Build the main parser; *defaults* (usually from ``KICKOFF_*``) fill omitted options."""
    defaults = defaults or Config()
    parser = argparse.ArgumentParser(
        prog="kickoff",
        description="Scaffold a project from a template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  kickoff ./my-template -o ./my-project\n"
            "  kickoff https://github.com/me/templates -d python --no-input\n"
            "  kickoff ./my-template --input-file values.json\n"
            "  kickoff validate ./my-template/template.toml\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"kickoff {__version__}")
    parser.add_argument(
        "template",
        nargs="?",
        default=defaults.template or None,
        help="Template to use: a local path or a URL pointing to a git repository",
    )
    parser.add_argument(
        "--output-dir", "-o",
        default=str(defaults.output_dir),
        help="Where to output the project (default: current directory)",
    )
    parser.add_argument(
        "--directory", "-d",
        default=defaults.directory,
        help="Sub directory of the template source containing template.toml",
    )
    parser.add_argument(
        "--input-file", "-i",
        default=str(defaults.input_file) if defaults.input_file else None,
        help="JSON file with variable values; cannot be combined with --no-input",
    )
    parser.add_argument(
        "--no-input",
        action="store_true",
        default=defaults.no_input,
        help="Do not prompt and use the template defaults; cannot be combined with --input-file",
    )
    parser.add_argument(
        "--no-hooks",
        action="store_true",
        default=not defaults.run_hooks,
        help="Do not run pre/post generation hooks",
    )
    return parser


def _build_validate_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kickoff validate",
        description="Validate a template.toml file",
    )
    parser.add_argument("path", help="Path to the template.toml")
    return parser


def _config_from_args(args: argparse.Namespace) -> Config:
    try:
        return Config(
            template=args.template,
            directory=args.directory,
            output_dir=Path(args.output_dir),
            input_file=Path(args.input_file) if args.input_file else None,
            no_input=args.no_input,
            run_hooks=not args.no_hooks,
        )
    except ValidationError as exc:
        raise ConfigError(_validation_message(exc)) from None


def _env_defaults() -> Config:
    try:
        return Config.from_env()
    except ValidationError as exc:
        raise ConfigError(f"Invalid KICKOFF_* environment: {_validation_message(exc)}") from None


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(err["msg"].removeprefix("Value error, ") for err in exc.errors())


def validate(path: str | Path) -> list[str]:
    """Print and return the problems found in a ``template.toml``."""
    errors = TemplateDefinition.validate_file(path)
    if errors:
        print_error("The template.toml is invalid:")
        for err in errors:
            print_error(f"- {err}")
    else:
        print_success("The template.toml file is valid!")
    return errors


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``kickoff`` and ``python -m kickoff.pipeline``."""
    args_list = list(sys.argv[1:] if argv is None else argv)

    if args_list and args_list[0] == "validate":
        args = _build_validate_parser().parse_args(args_list[1:])
        if validate(args.path):
            sys.exit(1)
        return

    try:
        defaults = _env_defaults()
    except KickoffError as exc:
        _exit_with(exc)

    parser = _build_parser(defaults)
    args = parser.parse_args(args_list)
    if not args.template:
        parser.error("the following arguments are required: template")

    try:
        config = _config_from_args(args)
        with Template.from_input(config.template, config.directory) as template:
            asyncio.run(Pipeline(config, template).run())
    except KickoffError as exc:
        _exit_with(exc)

    print_success("\nEverything done, ready to go!")


def _exit_with(exc: KickoffError) -> NoReturn:
    for line in format_error_chain(exc):
        print_error(line)
    sys.exit(1)


if __name__ == "__main__":
    main()
