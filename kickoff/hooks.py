"""Pre- and post-generation hook execution.

Hooks are executables shipped with a template.  They run one at a time, in
declaration order, with the output directory as working directory when it
exists.  The first hook that cannot be started or exits non-zero stops the
phase and the whole run; hooks that already ran are not undone.  There is no
timeout: a hook that never exits blocks the run.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

from kickoff.errors import HookError
from kickoff.utils import console, print_bold


class HookPhase(str, Enum):
    PRE_GEN = "pre-gen"
    POST_GEN = "post-gen"


@dataclass(frozen=True)
class HookFile:
    """An executable hook: display name plus path to run."""

    name: str
    path: Path


async def execute_hook(hook: HookFile, output_dir: str | Path) -> None:
    """Run a single hook and wait for it to exit.

    Stdout and stderr are inherited from the parent so hook output shows up
    directly in the terminal.

    Raises:
        HookError: If the process cannot be spawned or exits non-zero.
    """
    print_bold(f"  - {hook.name}")
    out = Path(output_dir)
    cwd = str(out) if out.exists() else None

    try:
        process = await asyncio.create_subprocess_exec(str(hook.path), cwd=cwd)
    except OSError as exc:
        raise HookError(hook, f"Hook `{hook.name}` could not be started: {exc}") from exc

    returncode = await process.wait()
    if returncode != 0:
        raise HookError(
            hook,
            f"Hook `{hook.name}` exited with a non 0 code ({returncode})",
            returncode=returncode,
        )


async def run_hooks(hooks: Sequence[HookFile], output_dir: str | Path) -> None:
    """Run *hooks* in order, stopping at the first failure."""
    for hook in hooks:
        await execute_hook(hook, output_dir)


async def run_hook_phase(
    phase: HookPhase,
    hooks: Sequence[HookFile],
    output_dir: str | Path,
    enabled: bool = True,
) -> None:
    """Run one hook phase.

    Nothing is printed and nothing is spawned when hooks are disabled or the
    phase has no hooks.

    Raises:
        HookError: From the first failing hook.
    """
    if not enabled or not hooks:
        return
    print_bold(f"Running {phase.value} hooks...")
    await run_hooks(hooks, output_dir)
    console.print()
