"""Generator result type and the shared generate() flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generic, TypeVar

import structlog

from archbase_cli.exceptions import ArchbaseError
from archbase_cli.generators.rendering import HelperRegistry, TemplateRenderer, default_helpers

log = structlog.get_logger("archbase_cli.generators")

OptionsT = TypeVar("OptionsT")


@dataclass
class GenerationResult:
    files: list[str] = field(default_factory=list)
    success: bool = True
    errors: list[str] = field(default_factory=list)

    @classmethod
    def failed(cls, message: str) -> GenerationResult:
        return cls(files=[], success=False, errors=[message])


def write_file(path: Path, content: str) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    log.info("generator.file_written", path=str(path))
    return str(path)


class BaseGenerator(Generic[OptionsT]):
    """validate -> build context -> render -> write.

    ``validate`` raises ``GeneratorError`` for unusable options. Anything that
    goes wrong after that (missing template, unreadable input, I/O) comes
    back as a failed ``GenerationResult``.
    """

    name: str = ""

    def __init__(self, template_dirs: list[Path] | None = None) -> None:
        self._template_dirs = template_dirs

    def helpers(self) -> HelperRegistry:
        return default_helpers()

    def renderer(self) -> TemplateRenderer:
        return TemplateRenderer(self.helpers(), self._template_dirs)

    def validate(self, options: OptionsT) -> None:
        pass

    def generate(self, options: OptionsT) -> GenerationResult:
        self.validate(options)
        try:
            files = self._generate(options, self.renderer())
        except (ArchbaseError, OSError) as exc:
            log.error("generator.failed", generator=self.name, error=str(exc))
            return GenerationResult.failed(str(exc))
        log.info("generator.done", generator=self.name, files=len(files))
        return GenerationResult(files=files)

    def _generate(self, options: OptionsT, renderer: TemplateRenderer) -> list[str]:
        raise NotImplementedError

    @staticmethod
    def render_to(renderer: TemplateRenderer, template: str, context: dict[str, Any], path: Path) -> str:
        return write_file(path, renderer.render(template, context))
