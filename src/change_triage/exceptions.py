"""Custom exceptions for change triage."""


class TriageError(Exception):
    """Base exception for all change triage errors."""


class ConfigError(TriageError):
    """Invalid review tier configuration."""


class ProfileError(TriageError):
    """Review profile frontmatter could not be parsed."""


class FanInAnalysisError(TriageError):
    """Raised when import fan-in data cannot be computed."""

    def __init__(self, project_root: str, cause: Exception):
        self.project_root = project_root
        self.cause = cause
        super().__init__(
            f"Import fan-in analysis failed for '{project_root}': {cause}"
        )
