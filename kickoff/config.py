"""kickoff run configuration.

Typed configuration for one scaffolding run.  Uses a Pydantic v2 model so the
combination of options is validated once, at construction time, and so the
same settings can be read from the command line or from environment
variables.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class InputMode(str, Enum):
    """Where variable values come from."""
    INTERACTIVE = "interactive"
    JSON_FILE = "json_file"
    AUTOMATIC = "automatic"


_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Settings for a single run of the pipeline.

    Exactly one input source is active per run: a JSON input file, automatic
    defaults (``no_input``) or interactive prompts.  Asking for both a JSON
    file and automatic defaults is rejected here, so the resolution pipeline
    never has to check it again.
    """

    template: str = Field(default="", description="Local path or git URL of the template")
    directory: Optional[str] = Field(
        default=None, description="Sub directory of the template source holding template.toml"
    )
    output_dir: Path = Field(default=Path("."))
    input_file: Optional[Path] = Field(
        default=None, description="JSON file with a value for every applicable variable"
    )
    no_input: bool = Field(default=False, description="Use template defaults without prompting")
    run_hooks: bool = Field(default=True, description="Run pre/post generation hooks")

    @model_validator(mode="after")
    def _single_input_source(self) -> "Config":
        if self.input_file is not None and self.no_input:
            raise ValueError("--input-file and --no-input cannot be used together")
        return self

    @property
    def input_mode(self) -> InputMode:
        """The input source selected by ``input_file`` and ``no_input``."""
        if self.input_file is not None:
            return InputMode.JSON_FILE
        if self.no_input:
            return InputMode.AUTOMATIC
        return InputMode.INTERACTIVE

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            KICKOFF_TEMPLATE, KICKOFF_DIRECTORY, KICKOFF_OUTPUT_DIR,
            KICKOFF_INPUT_FILE, KICKOFF_NO_INPUT, KICKOFF_RUN_HOOKS.
        """
        input_file = os.environ.get("KICKOFF_INPUT_FILE")
        return cls(
            template=os.environ.get("KICKOFF_TEMPLATE", ""),
            directory=os.environ.get("KICKOFF_DIRECTORY") or None,
            output_dir=Path(os.environ.get("KICKOFF_OUTPUT_DIR", ".")),
            input_file=Path(input_file) if input_file else None,
            no_input=os.environ.get("KICKOFF_NO_INPUT", "").lower() in _TRUTHY,
            run_hooks=os.environ.get("KICKOFF_RUN_HOOKS", "true").lower() in _TRUTHY,
        )
