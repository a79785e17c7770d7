"""Jinja2 rendering for kickoff templates.

Provides the TemplateRenderer class which renders default-value expressions,
file paths and file contents of a template directory with the resolved
variables as context.  Supports string rendering and batch tree rendering
with ignore and copy-without-render glob lists.
"""

from __future__ import annotations

import asyncio
import fnmatch
import re
import shutil
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError as JinjaError

from kickoff.errors import TemplateError


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders a template directory with Jinja2.

    Undefined variables are errors (``StrictUndefined``) so a default that
    refers to a later or inapplicable variable fails loudly instead of
    rendering as an empty string.
    """

    def __init__(self, template_dir: str | Path, follow_symlinks: bool = False) -> None:
        self.template_dir = Path(template_dir)
        self.follow_symlinks = follow_symlinks
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir), followlinks=follow_symlinks),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        # Register custom filters
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter
        self.env.filters["camel_case"] = _camel_case_filter

    # -- String rendering --------------------------------------------------

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context.

        Raises:
            jinja2.TemplateError: Left to the caller, which knows what the
                string belongs to.
        """
        template = self.env.from_string(template_string)
        return template.render(**context)

    def render_path(self, relative: str, context: dict[str, Any]) -> str:
        """Render every component of a relative path, e.g. ``{{ name }}/main.py``."""
        if "{" not in relative:
            return relative
        try:
            return self.render_string(relative, context)
        except JinjaError as exc:
            raise TemplateError(f"Could not render path `{relative}`: {exc}") from exc

    # -- Tree rendering (async) --------------------------------------------

    async def render_tree(
        self,
        output_dir: str | Path,
        context: dict[str, Any],
        *,
        ignore: list[str] | None = None,
        copy_without_render: list[str] | None = None,
    ) -> list[Path]:
        """Render every file under the template directory into *output_dir*.

        The directory structure is preserved and paths are rendered too, so
        ``{{ project_name }}/README.md`` is written to ``my-app/README.md``.

        Args:
            output_dir: Target directory where rendered files are written.
            context: Template context variables.
            ignore: Glob patterns (relative POSIX paths) of files to skip.
            copy_without_render: Glob patterns of files copied verbatim.

        Returns:
            List of written file paths.
        """
        ignore = ignore or []
        copy_without_render = copy_without_render or []
        out_base = Path(output_dir)
        written: list[Path] = []

        for source in self._iter_files():
            rel = source.relative_to(self.template_dir).as_posix()
            if _matches_any(rel, ignore):
                continue

            target = out_base / self.render_path(rel, context)
            if _matches_any(rel, copy_without_render):
                await asyncio.to_thread(_copy_file, source, target)
            else:
                await self.render_to_file(rel, target, context)
            written.append(target)

        return written

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Files that are not valid UTF-8 (images, archives, ...) are copied
        unchanged.  Parent directories are created automatically.
        """
        out = Path(output_path)
        try:
            template = self.env.get_template(template_path)
        except UnicodeDecodeError:
            await asyncio.to_thread(_copy_file, self.template_dir / template_path, out)
            return out
        except JinjaError as exc:
            raise TemplateError(f"Could not parse `{template_path}`: {exc}") from exc

        try:
            content = template.render(**context)
        except JinjaError as exc:
            raise TemplateError(f"Could not render `{template_path}`: {exc}") from exc
        await asyncio.to_thread(_write_file, out, content, self.template_dir / template_path)
        return out

    # -- Utility -----------------------------------------------------------

    def _iter_files(self) -> list[Path]:
        files: list[Path] = []
        for path in sorted(self.template_dir.rglob("*")):
            if ".git" in path.relative_to(self.template_dir).parts:
                continue
            if path.is_symlink() and not self.follow_symlinks:
                continue
            if path.is_file():
                files.append(path)
        return files


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: Any) -> str:
    """Convert a string to a URL/filename-safe slug."""
    # str() makes an undefined variable raise UndefinedError.
    value = str(value)
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: Any) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    value = str(value)
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def _snake_case_filter(value: Any) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    value = str(value)
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def _camel_case_filter(value: Any) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _matches_any(rel_path: str, patterns: list[str]) -> bool:
    """Whether *rel_path* matches a glob or lies under a matching directory."""
    for pattern in patterns:
        if fnmatch.fnmatch(rel_path, pattern):
            return True
        if rel_path.startswith(pattern.rstrip("/") + "/"):
            return True
    return False


def _write_file(path: Path, content: str, source: Path) -> None:
    """Synchronous helper: create parent dirs, write content, keep permissions."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    shutil.copymode(source, path)


def _copy_file(source: Path, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)
