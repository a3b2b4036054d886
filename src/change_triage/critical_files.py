"""
Critical File Selector

Ranks changed files by composite risk and selects a bounded subset for deep
review. Risk combines tool diagnostics, import fan-in, change size, new-file
status and critical path matches.
"""

import math
from pathlib import Path

import structlog

from .exceptions import FanInAnalysisError
from .globs import compile_globs, first_match
from .import_analyzer import HIGH_FAN_IN_THRESHOLD, FanInAnalyzer, ImportAnalyzer
from .models import (
    ChangedFile,
    CriticalFileConfig,
    CriticalFilesReport,
    FileScore,
    RawToolResult,
    SeverityLevel,
    empty_severity_counts,
)
from .severity import SeverityExtractor

logger = structlog.get_logger(__name__)

ALGORITHM_VERSION = "risk-weighted-v1.0"
DEFAULT_MAX_FILES = 10

MEDIUM_FAN_IN_THRESHOLD = 5

LARGE_CHANGE_LINES = 200
LARGE_CHANGE_POINTS = 50
MEDIUM_CHANGE_LINES = 100
MEDIUM_CHANGE_POINTS = 25
POINTS_PER_LINE = 0.5

NEW_FILE_POINTS = 50
CRITICAL_PATH_POINTS = 50
TEST_FILE_PENALTY = 50


def _plural(count: int, suffix: str = "s") -> str:
    return suffix if count > 1 else ""


class CriticalFileSelector:
    """Select the riskiest changed files for focused review."""

    def __init__(
        self,
        import_analyzer: FanInAnalyzer | None = None,
        severity_extractor: SeverityExtractor | None = None,
        project_root: str | Path | None = None,
    ):
        """
        Initialize the selector.

        Args:
            import_analyzer: Source of the project-wide fan-in map
            severity_extractor: Turns tool output into severity counts
            project_root: Root passed to the import analyzer (defaults to cwd)
        """
        self.import_analyzer = import_analyzer or ImportAnalyzer()
        self.severity_extractor = severity_extractor or SeverityExtractor()
        self.project_root = Path(project_root) if project_root else Path.cwd()

    def select_critical_files(
        self,
        changed_files: list[ChangedFile],
        quality_check_results: list[RawToolResult],
        config: CriticalFileConfig | None = None,
    ) -> CriticalFilesReport:
        """
        Score every changed file and select the top ones for deep review.

        Args:
            changed_files: Files in the change
            quality_check_results: Raw output of quality tools
            config: Selection cap and caller critical path globs

        Returns:
            Report with the top files, all scored files and critical paths

        Raises:
            FanInAnalysisError: If the import analyzer fails
        """
        config = config or CriticalFileConfig()
        max_files = DEFAULT_MAX_FILES if config.max_files is None else config.max_files
        if max_files < 0:
            raise ValueError(f"max_files must be non-negative, got {max_files}")

        configured_paths = list(config.critical_paths)
        usable_paths = compile_globs(configured_paths)

        logger.debug(
            "Selecting critical files",
            changed_files_count=len(changed_files),
            max_files=max_files,
        )

        fan_in_map = self._analyze_fan_in()
        inferred_critical_paths = self.infer_critical_paths(fan_in_map)
        inferred_set = set(inferred_critical_paths)

        unique_files = self._unique_by_path(changed_files)

        scored_files = [
            self.score_file(
                changed, fan_in_map, quality_check_results, usable_paths, inferred_set
            )
            for changed in unique_files
        ]

        # sorted() is stable: input order breaks score ties
        ranked = sorted(scored_files, key=lambda f: f.score, reverse=True)
        top_files = ranked[:max_files]

        logger.info(
            "Critical file selection complete",
            total_files=len(unique_files),
            top_files=len(top_files),
            inferred_critical_paths=len(inferred_critical_paths),
        )

        return CriticalFilesReport(
            top_files=top_files,
            all_files=ranked,
            inferred_critical_paths=inferred_critical_paths,
            configured_critical_paths=configured_paths,
            algorithm=ALGORITHM_VERSION,
        )

    def score_file(
        self,
        changed: ChangedFile,
        fan_in_map: dict[str, int],
        quality_check_results: list[RawToolResult],
        configured_paths: list[str],
        inferred_paths: set[str],
    ) -> FileScore:
        """Score a single file from independent risk contributions."""
        risk_factors: list[str] = []

        severity_counts = self.extract_severity_for_file(changed.path, quality_check_results)
        import_fan_in = fan_in_map.get(changed.path, 0)

        score = 0.0
        score += self._score_severity(severity_counts, risk_factors)
        score += self._score_fan_in(import_fan_in, risk_factors)
        score += self._score_lines_changed(changed.lines_changed, risk_factors)
        score += self._score_new_file(changed, risk_factors)
        score += self._score_critical_path(changed.path, configured_paths, risk_factors)

        # Signal only: the fan-in contribution already covers it
        if changed.path in inferred_paths:
            risk_factors.append("inferred critical (high fan-in)")

        score = self._adjust_for_test_file(changed.path, score, risk_factors)

        return FileScore(
            path=changed.path,
            score=math.floor(score + 0.5),
            risk_factors=risk_factors,
            lines_changed=changed.lines_changed,
            import_fan_in=import_fan_in,
            severity_counts=severity_counts,
        )

    @staticmethod
    def infer_critical_paths(fan_in_map: dict[str, int]) -> list[str]:
        """Files imported by more than 20 others, highest fan-in first."""
        candidates = [
            (path, count) for path, count in fan_in_map.items() if count > HIGH_FAN_IN_THRESHOLD
        ]
        candidates.sort(key=lambda item: item[1], reverse=True)
        return [path for path, _ in candidates]

    def extract_severity_for_file(
        self, file_path: str, results: list[RawToolResult]
    ) -> dict[SeverityLevel, int]:
        """Sum severities from the output lines of each tool that mention the file."""
        counts = empty_severity_counts()

        for result in results:
            if result.skipped:
                continue

            output = result.output
            if file_path not in output:
                continue

            file_output = "\n".join(line for line in output.split("\n") if file_path in line)
            severities = self.severity_extractor.extract_severity(file_output)

            for level, count in severities.items():
                counts[level] += count

        return counts

    @staticmethod
    def _unique_by_path(changed_files: list[ChangedFile]) -> list[ChangedFile]:
        # First occurrence of a path wins
        unique: dict[str, ChangedFile] = {}
        for changed in changed_files:
            if changed.path in unique:
                logger.debug("Ignoring repeated changed file", path=changed.path)
                continue
            unique[changed.path] = changed
        return list(unique.values())

    def _analyze_fan_in(self) -> dict[str, int]:
        try:
            return self.import_analyzer.analyze_fan_in(self.project_root)
        except Exception as e:
            logger.error(
                "Import fan-in analysis failed",
                project_root=str(self.project_root),
                error=str(e),
            )
            raise FanInAnalysisError(str(self.project_root), e) from e

    def _score_severity(self, counts: dict[SeverityLevel, int], risk_factors: list[str]) -> int:
        weight = self.severity_extractor.get_score_multiplier
        score = 0
        blockers = counts.get(SeverityLevel.BLOCKER, 0)
        criticals = counts.get(SeverityLevel.CRITICAL, 0)
        warnings = counts.get(SeverityLevel.WARNING, 0)

        # Info notes carry no score
        if blockers > 0:
            score += blockers * weight(SeverityLevel.BLOCKER)
            risk_factors.append(f"{blockers} blocker issue{_plural(blockers)}")
        if criticals > 0:
            score += criticals * weight(SeverityLevel.CRITICAL)
            risk_factors.append(f"{criticals} critical issue{_plural(criticals)}")
        if warnings > 0:
            score += warnings * weight(SeverityLevel.WARNING)
            risk_factors.append(f"{warnings} warning{_plural(warnings)}")
        return score

    @staticmethod
    def _score_fan_in(import_fan_in: int, risk_factors: list[str]) -> int:
        if import_fan_in > HIGH_FAN_IN_THRESHOLD:
            risk_factors.append(f"high impact ({import_fan_in} imports)")
            return import_fan_in * 2
        if import_fan_in > MEDIUM_FAN_IN_THRESHOLD:
            risk_factors.append(f"medium impact ({import_fan_in} imports)")
            return import_fan_in
        return 0

    @staticmethod
    def _score_lines_changed(lines_changed: int, risk_factors: list[str]) -> float:
        if lines_changed > LARGE_CHANGE_LINES:
            risk_factors.append(f"large change ({lines_changed} lines)")
            return LARGE_CHANGE_POINTS
        if lines_changed > MEDIUM_CHANGE_LINES:
            risk_factors.append(f"medium change ({lines_changed} lines)")
            return MEDIUM_CHANGE_POINTS
        return lines_changed * POINTS_PER_LINE

    @staticmethod
    def _score_new_file(changed: ChangedFile, risk_factors: list[str]) -> int:
        if changed.lines_deleted == 0 and changed.lines_added > 0:
            risk_factors.append("new file")
            return NEW_FILE_POINTS
        return 0

    @staticmethod
    def _score_critical_path(
        file_path: str, configured_paths: list[str], risk_factors: list[str]
    ) -> int:
        pattern = first_match(file_path, configured_paths)
        if pattern is not None:
            risk_factors.append(f"critical path: {pattern}")
            return CRITICAL_PATH_POINTS
        return 0

    @staticmethod
    def _adjust_for_test_file(file_path: str, score: float, risk_factors: list[str]) -> float:
        if ".test." in file_path or ".spec." in file_path:
            risk_factors.append("test file (lower priority)")
            return max(0.0, score - TEST_FILE_PENALTY)
        return score
