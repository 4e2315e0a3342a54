"""Generator execution: dynamic suggestions of an argument.

Template generators only request a path listing from the host. Script
generators run an external command and hand its output to their
post-processor. A failing generator contributes nothing; it never aborts the
request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .constants import DEFAULT_GENERATOR_TIMEOUT
from .process import CapturedProcess
from .specs.models import ArgSpec, ScriptGenerator, Suggestion, Template, TemplateGenerator

if TYPE_CHECKING:
    import logging

__all__ = ["GeneratorExecutor", "GeneratorResult"]


@dataclass
class GeneratorResult:
    """What the generators of one argument produced."""

    suggestions: list[Suggestion] = field(default_factory=list)
    files_requested: bool = False
    folders_requested: bool = False


class GeneratorExecutor:
    """Evaluates the generators of an `ArgSpec`, in declaration order."""

    def __init__(self, log: logging.Logger, timeout: float = DEFAULT_GENERATOR_TIMEOUT) -> None:
        """Initialize.

        Args:
            log: Logger for generator failures
            timeout: Seconds a script generator may run
        """
        self.log = log
        self.timeout = timeout

    async def execute(self, arg: ArgSpec, tokens: list[str], cwd: str | None = None) -> GeneratorResult:
        """Run every generator of `arg`.

        Args:
            arg: The argument being completed
            tokens: Texts of the tokens of the current command
            cwd: Directory script generators run in

        Returns:
            The generated suggestions and the path-listing flags
        """
        result = GeneratorResult()
        for generator in arg.generators:
            if isinstance(generator, TemplateGenerator):
                if generator.kind == Template.FILEPATHS:
                    result.files_requested = True
                elif generator.kind == Template.FOLDERS:
                    result.folders_requested = True
            elif isinstance(generator, ScriptGenerator):
                result.suggestions.extend(await self._run_script(generator, tokens, cwd))
        return result

    async def _run_script(self, generator: ScriptGenerator, tokens: list[str], cwd: str | None) -> list[Suggestion]:
        try:
            output = await CapturedProcess(self.timeout).run(generator.command, *generator.args, cwd=cwd)
        except OSError as e:
            self.log.debug("Generator %s failed to start: %s", generator.command, e)
            return []
        except TimeoutError:
            self.log.warning("Generator %s timed out after %ss", generator.command, self.timeout)
            return []
        if not output.ok:
            self.log.debug("Generator %s exited with %d: %s", generator.command, output.returncode, output.stderr.strip())
            return []
        if not output.stdout.strip():
            return []
        return self._post_process(generator, output.stdout, tokens)

    def _post_process(self, generator: ScriptGenerator, output: str, tokens: list[str]) -> list[Suggestion]:
        if generator.post_process is None:
            separator = generator.split_on or "\n"
            return [Suggestion(part.strip(), part.strip()) for part in output.split(separator) if part.strip()]
        try:
            items = generator.post_process(output, tokens)
        except Exception:  # pylint: disable=W0718
            self.log.warning("Post-processing output of %s failed", generator.command, exc_info=True)
            return []
        if not items:
            return []
        suggestions: list[Suggestion] = []
        for item in items:
            if isinstance(item, str):
                if item:
                    suggestions.append(Suggestion(item, item))  # a plain string documents itself
            elif isinstance(item, Suggestion) and item.labels:
                suggestions.append(item)
        return suggestions
