"""Shared console helpers for kickoff.

All user-facing output goes through a single Rich ``Console`` so tests can
swap it out and so colours stay consistent between the CLI, the pipeline and
the hook runner.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

console = Console()


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}", highlight=False)


def print_bold(message: str) -> None:
    """Print a message in bold without Rich's automatic highlighting."""
    console.print(f"[bold]{escape(message)}[/bold]", highlight=False)


def format_error_chain(exc: BaseException) -> list[str]:
    """Return the message of *exc* followed by each of its causes.

    Examples::

        format_error_chain(err) -> ["Error: hook failed", "Reason: exit 2"]
    """
    lines = [f"Error: {exc}"]
    cause = exc.__cause__
    while cause is not None:
        lines.append(f"Reason: {cause}")
        cause = cause.__cause__
    return lines


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Args:
        path: Directory path.

    Returns:
        The resolved ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()
