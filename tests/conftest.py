"""Pytest configuration and fixtures for change triage tests."""

from pathlib import Path
from textwrap import dedent

import pytest

from change_triage.models import ChangedFile, RawToolResult


# =============================================================================
# HELPERS
# =============================================================================

def make_change(
    path: str, lines_added: int = 6, lines_deleted: int = 4, lines_changed: int | None = None
) -> ChangedFile:
    """Create a ChangedFile; defaults to a 10-line modification."""
    return ChangedFile(
        path=path,
        lines_added=lines_added,
        lines_deleted=lines_deleted,
        lines_changed=lines_changed,
    )


def make_tool_result(
    stdout: str = "",
    stderr: str = "",
    tool: str = "eslint",
    skipped: bool = False,
) -> RawToolResult:
    """Create a RawToolResult for a linting run."""
    return RawToolResult(
        type="linting",
        tool=tool,
        success=not (stdout or stderr),
        skipped=skipped,
        reason="tool not installed" if skipped else None,
        stdout=stdout,
        stderr=stderr,
    )


def write_profile(profiles_dir: Path, relative: str, applies_to: list[str]) -> Path:
    """Write a markdown review profile with an applies_to frontmatter list."""
    profile = profiles_dir / relative
    profile.parent.mkdir(parents=True, exist_ok=True)
    patterns = "\n".join(f'  - "{p}"' for p in applies_to)
    profile.write_text(
        f"---\nfrontmatter_version: \"1.0.0\"\nscope: reusable\n"
        f"applies_to:\n{patterns}\n---\n\n# {profile.stem}\n\nReview guidance.\n"
    )
    return profile


class StubFanInAnalyzer:
    """Fan-in analyzer returning a fixed map."""

    def __init__(self, fan_in: dict[str, int] | None = None):
        self.fan_in = fan_in or {}
        self.roots: list[Path] = []

    def analyze_fan_in(self, project_root):
        self.roots.append(Path(project_root))
        return dict(self.fan_in)


class FailingFanInAnalyzer:
    """Fan-in analyzer that always fails."""

    def analyze_fan_in(self, project_root):
        raise RuntimeError("import graph unavailable")


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def triage_project(tmp_path: Path) -> Path:
    """
    Project with review profiles and a custom tier config.

    Returns:
        Path to the project root
    """
    profiles_dir = tmp_path / ".triage" / "review-profiles"
    write_profile(profiles_dir, "languages/python.md", ["**/*.py"])
    write_profile(profiles_dir, "testing/pytest.md", ["**/test_*.py", "**/conftest.py"])
    write_profile(profiles_dir, "frameworks/fastapi.md", ["**/routes/*.py"])
    write_profile(profiles_dir, "universal/general.md", ["**/*"])

    (tmp_path / ".triage" / "review-tier-config.yaml").write_text(dedent(
        """\
        version: "2.0"
        critical_paths:
          - "app/security/**"
          - ".triage/standards.md"
        tier_thresholds:
          quick:
            max_files: 2
            max_lines: 30
            allowed_types: [test]
          standard:
            max_files: 5
            max_lines: 100
          full:
            min_files: 6
            min_lines: 101
        """
    ))
    return tmp_path


@pytest.fixture
def stub_analyzer() -> StubFanInAnalyzer:
    return StubFanInAnalyzer()
