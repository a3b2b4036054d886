"""
Data models for change triage.

Defines all types shared by the tier classifier and the critical file selector.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ReviewTier(str, Enum):
    """How much review ceremony a change deserves."""

    SKIP = "skip"  # Pure documentation
    QUICK = "quick"  # Small test/config changes
    STANDARD = "standard"  # Normal implementation changes
    FULL = "full"  # Critical paths or large changes

    @property
    def rank(self) -> int:
        """Position in review intensity order (skip lowest)."""
        return _TIER_ORDER.index(self)


_TIER_ORDER = [ReviewTier.SKIP, ReviewTier.QUICK, ReviewTier.STANDARD, ReviewTier.FULL]


class FileType(str, Enum):
    """Category of a changed file."""

    IMPLEMENTATION = "implementation"
    TEST = "test"
    DOCUMENTATION = "documentation"
    CONFIG = "config"


class SeverityLevel(str, Enum):
    """Severity of a tool diagnostic."""

    BLOCKER = "blocker"
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


def empty_severity_counts() -> dict[SeverityLevel, int]:
    """Severity counts with every level present and zeroed."""
    return {level: 0 for level in SeverityLevel}


@dataclass(frozen=True)
class ChangedFile:
    """A single changed file with its line counts."""

    path: str
    lines_added: int = 0
    lines_deleted: int = 0
    lines_changed: int | None = None  # Derived from added + deleted when omitted

    def __post_init__(self) -> None:
        if self.lines_changed is None:
            object.__setattr__(self, "lines_changed", self.lines_added + self.lines_deleted)


@dataclass
class ChangeMetrics:
    """Aggregate metrics for a batch of changed files."""

    total_files: int = 0
    total_lines: int = 0
    file_type_breakdown: dict[FileType, int] = field(
        default_factory=lambda: {file_type: 0 for file_type in FileType}
    )
    has_critical_paths: bool = False

    @property
    def present_types(self) -> list[FileType]:
        """File types with at least one changed file."""
        return [t for t, count in self.file_type_breakdown.items() if count > 0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_lines": self.total_lines,
            "file_type_breakdown": {
                t.value: count for t, count in self.file_type_breakdown.items()
            },
            "has_critical_paths": self.has_critical_paths,
        }


@dataclass
class TierRecommendation:
    """Recommended review tier with its justification."""

    tier: ReviewTier
    reason: str
    metrics: ChangeMetrics

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for manifest output."""
        return {
            "tier": self.tier.value,
            "reason": self.reason,
            "metrics": self.metrics.to_dict(),
        }


@dataclass
class RawToolResult:
    """Captured output of one quality tool run."""

    type: str  # linting, type_checking, testing, ...
    tool: str
    success: bool
    skipped: bool = False
    reason: str | None = None  # Why the tool was skipped
    stdout: str | None = None
    stderr: str | None = None
    exit_code: int | None = None

    @property
    def output(self) -> str:
        """Combined stdout and stderr."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawToolResult":
        """Build from a toolchain result mapping (camelCase keys accepted)."""
        return cls(
            type=data.get("type", ""),
            tool=data.get("tool", ""),
            success=bool(data.get("success", False)),
            skipped=bool(data.get("skipped", False)),
            reason=data.get("reason"),
            stdout=data.get("stdout"),
            stderr=data.get("stderr"),
            exit_code=data.get("exit_code", data.get("exitCode")),
        )


@dataclass
class FileScore:
    """Risk score for a single changed file."""

    path: str
    score: int
    risk_factors: list[str] = field(default_factory=list)
    lines_changed: int = 0
    import_fan_in: int = 0  # Number of files importing this file
    severity_counts: dict[SeverityLevel, int] = field(default_factory=empty_severity_counts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "score": self.score,
            "risk_factors": list(self.risk_factors),
            "lines_changed": self.lines_changed,
            "import_fan_in": self.import_fan_in,
            "severity_counts": {
                level.value: count for level, count in self.severity_counts.items()
            },
        }


@dataclass
class CriticalFileConfig:
    """Caller policy for critical file selection."""

    max_files: int | None = None  # None selects the default cap
    critical_paths: list[str] = field(default_factory=list)


@dataclass
class CriticalFilesReport:
    """Complete critical files analysis."""

    # Top N files selected for deep review
    top_files: list[FileScore] = field(default_factory=list)

    # All changed files, highest score first
    all_files: list[FileScore] = field(default_factory=list)

    # Files with high import fan-in, highest first
    inferred_critical_paths: list[str] = field(default_factory=list)

    # Glob patterns supplied by the caller
    configured_critical_paths: list[str] = field(default_factory=list)

    # Scoring algorithm version
    algorithm: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for manifest output."""
        return {
            "top_files": [f.to_dict() for f in self.top_files],
            "all_files": [f.to_dict() for f in self.all_files],
            "inferred_critical_paths": list(self.inferred_critical_paths),
            "configured_critical_paths": list(self.configured_critical_paths),
            "algorithm": self.algorithm,
        }
