"""A loaded kickoff template.

``Template`` is the concrete collaborator the CLI hands to the resolution
pipeline: it exposes the declared variables, evaluates ``only_if`` conditions
and Jinja2 default expressions, renders the project, and prepares hook
scripts.
"""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from jinja2 import TemplateError as JinjaError

from kickoff.errors import EvaluationError, TemplateError, UnsupportedValueError
from kickoff.hooks import HookFile
from kickoff.template.definition import (
    TEMPLATE_FILENAME,
    Condition,
    HookDefinition,
    TemplateDefinition,
    VariableDefinition,
)
from kickoff.template.renderer import TemplateRenderer
from kickoff.utils import ensure_dir
from kickoff.values import Value, value_from_json, values_to_context

_REMOTE_PREFIXES = ("http://", "https://", "git@", "ssh://", "git://")


def is_remote(source: str) -> bool:
    """Whether *source* looks like a git URL rather than a local path."""
    return source.startswith(_REMOTE_PREFIXES)


def clone_repository(url: str, destination: Path) -> None:
    """Shallow-clone *url* into *destination*.

    Raises:
        TemplateError: If git is missing or the clone fails.
    """
    cmd = ["git", "clone", "--depth", "1", url, str(destination)]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as exc:
        raise TemplateError(f"Could not run git: {exc}") from exc
    if result.returncode != 0:
        raise TemplateError(f"Could not clone `{url}`:\n{result.stderr.strip()}")


class Template:
    """A template definition plus the directory it was loaded from.

    Attributes:
        definition: Parsed ``template.toml``.
        root: Directory containing ``template.toml``.
        values: Resolved variables, set by :meth:`set_variables` before
            generation.
    """

    def __init__(self, definition: TemplateDefinition, root: str | Path) -> None:
        self.definition = definition
        self.root = Path(root)
        self.values: dict[str, Value] = {}
        self._variables = {var.name: var for var in definition.variables}
        self._hooks_dir: Optional[Path] = None
        self._clone_dir: Optional[Path] = None
        self.renderer = TemplateRenderer(self.files_dir, follow_symlinks=definition.follow_symlinks)

    # -- Loading -----------------------------------------------------------

    @classmethod
    def from_path(cls, path: str | Path) -> "Template":
        """Load the template whose ``template.toml`` lives in *path*."""
        root = Path(path)
        definition = TemplateDefinition.from_file(root / TEMPLATE_FILENAME)
        return cls(definition, root)

    @classmethod
    def from_input(cls, source: str, directory: Optional[str] = None) -> "Template":
        """Load a template from a local path or a git URL.

        Args:
            source: Local directory or git URL.
            directory: Sub directory of *source* holding ``template.toml``.
        """
        if not is_remote(source):
            base = Path(source)
            if not base.is_dir():
                raise TemplateError(f"Template directory `{base}` does not exist")
            return cls.from_path(base / directory if directory else base)

        base = Path(tempfile.mkdtemp(prefix="kickoff-template-"))
        try:
            clone_repository(source, base)
            template = cls.from_path(base / directory if directory else base)
        except TemplateError:
            shutil.rmtree(base, ignore_errors=True)
            raise
        template._clone_dir = base
        return template

    # -- Temporary files ---------------------------------------------------

    def close(self) -> None:
        """Remove the git clone and the rendered hook scripts, if any."""
        for path in (self._hooks_dir, self._clone_dir):
            if path is not None:
                shutil.rmtree(path, ignore_errors=True)
        self._hooks_dir = None
        self._clone_dir = None

    def __enter__(self) -> "Template":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def files_dir(self) -> Path:
        """Directory whose contents are rendered into the output."""
        if self.definition.directory:
            return self.root / self.definition.directory
        return self.root

    # -- VariableEvaluator -------------------------------------------------

    @property
    def variables(self) -> list[VariableDefinition]:
        return self.definition.variables

    def should_ask(self, name: str, resolved: Mapping[str, Value]) -> bool:
        var = self._get_variable(name)
        if var.only_if is None:
            return True
        return self._condition_holds(var.only_if, resolved)

    def default_for(self, name: str, resolved: Mapping[str, Value]) -> Value:
        var = self._get_variable(name)
        default = var.default
        if isinstance(default, str):
            try:
                default = self.renderer.render_string(default, values_to_context(dict(resolved)))
            except JinjaError as exc:
                raise EvaluationError(name, f"could not render default: {exc}") from exc
        try:
            return value_from_json(default, name)
        except UnsupportedValueError as exc:
            raise EvaluationError(name, str(exc)) from exc

    # -- Generation --------------------------------------------------------

    def set_variables(self, values: Mapping[str, Value]) -> None:
        self.values = dict(values)

    async def generate(self, output_dir: str | Path) -> list[Path]:
        """Render the template into *output_dir*, then apply ``cleanup``.

        Returns:
            Paths of the files written (before cleanup).

        Raises:
            TemplateError: If rendering fails or the output cannot be written.
        """
        context = values_to_context(self.values)
        ignore = [TEMPLATE_FILENAME, *self.definition.ignore]
        ignore.extend(self._relative_to_files_dir(hook.path) for hook in self._all_hooks())

        try:
            out = ensure_dir(output_dir)
            written = await self.renderer.render_tree(
                out,
                context,
                ignore=[pattern for pattern in ignore if pattern],
                copy_without_render=self.definition.copy_without_render,
            )
            self._cleanup(out, context)
        except OSError as exc:
            raise TemplateError(f"Could not write project to `{output_dir}`: {exc}") from exc
        return written

    def _cleanup(self, output_dir: Path, context: dict) -> None:
        for entry in self.definition.cleanup:
            if not self._condition_holds(Condition(name=entry.name, value=entry.value), self.values):
                continue
            for raw_path in entry.paths:
                target = output_dir / self.renderer.render_path(raw_path, context)
                if target.is_dir():
                    shutil.rmtree(target)
                elif target.exists():
                    target.unlink()

    # -- Hooks -------------------------------------------------------------

    def get_pre_gen_hooks(self) -> list[HookFile]:
        return self._prepare_hooks(self.definition.pre_gen_hooks)

    def get_post_gen_hooks(self) -> list[HookFile]:
        return self._prepare_hooks(self.definition.post_gen_hooks)

    def _prepare_hooks(self, hooks: list[HookDefinition]) -> list[HookFile]:
        """Render applicable hook scripts into a temporary directory.

        Scripts are templates too, so they can use the resolved variables.
        The rendered copies are made executable.
        """
        prepared: list[HookFile] = []
        context = values_to_context(self.values)
        for hook in hooks:
            if hook.only_if is not None and not self._condition_holds(hook.only_if, self.values):
                continue

            source = self.root / hook.path
            if not source.is_file():
                raise TemplateError(f"Hook `{hook.name}` points to missing file `{hook.path}`")
            try:
                content = self.renderer.render_string(source.read_text(encoding="utf-8"), context)
            except JinjaError as exc:
                raise TemplateError(f"Could not render hook `{hook.name}`: {exc}") from exc

            target = self._hook_dir() / f"{len(prepared):02d}-{source.name}"
            target.write_text(content, encoding="utf-8")
            target.chmod(0o755)
            prepared.append(HookFile(name=hook.name, path=target))
        return prepared

    def _hook_dir(self) -> Path:
        if self._hooks_dir is None:
            self._hooks_dir = Path(tempfile.mkdtemp(prefix="kickoff-hooks-"))
        return self._hooks_dir

    def _all_hooks(self) -> list[HookDefinition]:
        return [*self.definition.pre_gen_hooks, *self.definition.post_gen_hooks]

    # -- Internal helpers --------------------------------------------------

    def _get_variable(self, name: str) -> VariableDefinition:
        try:
            return self._variables[name]
        except KeyError:
            raise EvaluationError(name, "not declared in template") from None

    @staticmethod
    def _condition_holds(condition: Condition, resolved: Mapping[str, Value]) -> bool:
        current = resolved.get(condition.name)
        if current is None:
            return False
        return current == value_from_json(condition.value, condition.name)

    def _relative_to_files_dir(self, raw_path: str) -> str:
        try:
            return (self.root / raw_path).relative_to(self.files_dir).as_posix()
        except ValueError:
            # Hook lives outside the rendered directory; nothing to ignore.
            return ""
