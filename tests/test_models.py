"""Tests for shared data models."""

from dataclasses import FrozenInstanceError

import pytest

from change_triage.models import (
    ChangedFile,
    ChangeMetrics,
    FileScore,
    FileType,
    RawToolResult,
    ReviewTier,
    SeverityLevel,
    TierRecommendation,
    empty_severity_counts,
)


class TestChangedFile:
    def test_lines_changed_derived(self):
        change = ChangedFile(path="src/a.py", lines_added=7, lines_deleted=3)

        assert change.lines_changed == 10

    def test_explicit_lines_changed_kept(self):
        change = ChangedFile(path="src/a.py", lines_added=7, lines_deleted=3, lines_changed=4)

        assert change.lines_changed == 4

    def test_frozen(self):
        change = ChangedFile(path="src/a.py")

        with pytest.raises(FrozenInstanceError):
            change.path = "src/b.py"


def test_tier_rank_order():
    tiers = sorted(ReviewTier, key=lambda t: t.rank)

    assert tiers == [ReviewTier.SKIP, ReviewTier.QUICK, ReviewTier.STANDARD, ReviewTier.FULL]


class TestRawToolResult:
    def test_output_joins_streams(self):
        result = RawToolResult(type="linting", tool="eslint", success=False, stdout="a", stderr="b")

        assert result.output == "a\nb"

    def test_output_skips_missing_streams(self):
        assert RawToolResult(type="testing", tool="pytest", success=True, stderr="x").output == "x"
        assert RawToolResult(type="testing", tool="pytest", success=True).output == ""

    def test_from_dict_accepts_camel_case(self):
        result = RawToolResult.from_dict({
            "type": "type_checking",
            "tool": "tsc",
            "success": False,
            "stdout": "error TS2322",
            "exitCode": 2,
        })

        assert result.tool == "tsc"
        assert result.exit_code == 2
        assert result.skipped is False


class TestSerialization:
    def test_metrics_to_dict_uses_enum_values(self):
        metrics = ChangeMetrics(total_files=1, total_lines=5)
        metrics.file_type_breakdown[FileType.TEST] = 1

        data = TierRecommendation(tier=ReviewTier.QUICK, reason="r", metrics=metrics).to_dict()

        assert data["tier"] == "quick"
        assert data["metrics"]["file_type_breakdown"] == {
            "implementation": 0,
            "test": 1,
            "documentation": 0,
            "config": 0,
        }
        assert metrics.present_types == [FileType.TEST]

    def test_file_score_to_dict(self):
        counts = empty_severity_counts()
        counts[SeverityLevel.WARNING] = 2

        data = FileScore(path="a.ts", score=50, severity_counts=counts).to_dict()

        assert data["severity_counts"] == {"blocker": 0, "critical": 0, "warning": 2, "info": 0}
        assert data["risk_factors"] == []
