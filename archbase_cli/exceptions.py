"""Custom exceptions for archbase-cli."""


class ArchbaseError(Exception):
    """Base exception for all archbase-cli errors."""


class AnalyzerError(ArchbaseError):
    """Raised when an analyzer cannot run at all (bad root path, unknown analyzer)."""


class GeneratorError(ArchbaseError):
    """Raised when generator options are invalid or generation fails."""


class TemplateNotFoundError(GeneratorError):
    """Raised when a template cannot be resolved in any template directory."""

    def __init__(self, name: str, searched: list[str]):
        self.name = name
        self.searched = searched
        super().__init__(f"Template '{name}' not found (searched: {', '.join(searched)})")


class CommandError(ArchbaseError):
    """Raised by CLI commands for user-facing failures."""
