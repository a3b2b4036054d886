"""
Review Tier Classifier

Classifies a batch of changed files into a review tier (skip, quick,
standard, full) using configurable thresholds, file types and critical path
detection.
"""

from pathlib import Path

import structlog

from .config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_PROFILES_DIR,
    ReviewTierConfig,
    load_tier_config,
)
from .file_classifier import FileTypeClassifier
from .globs import compile_globs, matches_any
from .models import ChangedFile, ChangeMetrics, FileType, ReviewTier, TierRecommendation
from .profiles import load_profile_patterns

logger = structlog.get_logger(__name__)


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


class ReviewTierClassifier:
    """
    Decide how much review a change needs and explain why.

    Rules, first match wins:
    1. Any critical path -> full
    2. File or line count at the full thresholds -> full
    3. Only documentation, none critical -> skip
    4. Only quick-allowed types within quick thresholds -> quick
    5. Within standard thresholds -> standard
    6. Otherwise -> full
    """

    def __init__(
        self,
        base_path: str | Path | None = None,
        config_path: str | Path = DEFAULT_CONFIG_PATH,
        profiles_dir: str | Path = DEFAULT_PROFILES_DIR,
        config: ReviewTierConfig | None = None,
    ):
        """
        Initialize the classifier.

        Configuration and profile patterns are loaded once here and are
        read-only afterwards.

        Args:
            base_path: Project root (defaults to the current directory)
            config_path: Tier config YAML, relative to base_path
            profiles_dir: Review profiles directory, relative to base_path
            config: Explicit configuration; skips loading config_path
        """
        self.base_path = Path(base_path) if base_path else Path.cwd()
        self.config = config or load_tier_config(self.base_path / config_path)
        self.critical_paths = compile_globs(self.config.critical_paths)
        self.file_classifier = FileTypeClassifier(
            load_profile_patterns(self.base_path / profiles_dir)
        )

    def classify_changes(self, changed_files: list[ChangedFile]) -> TierRecommendation:
        """
        Classify changes into a review tier.

        Args:
            changed_files: Changed files with line counts

        Returns:
            Tier recommendation with reasoning and metrics
        """
        logger.debug("Classifying changes", file_count=len(changed_files))

        metrics = self.calculate_metrics(changed_files)
        tier = self._determine_tier(changed_files, metrics)
        reason = self._build_reason(tier, metrics, changed_files)

        logger.debug("Classification complete", tier=tier.value, reason=reason)
        return TierRecommendation(tier=tier, reason=reason, metrics=metrics)

    def analyze_file_type(self, file_path: str) -> FileType:
        """Classify a path using review profile patterns, then heuristics."""
        return self.file_classifier.classify(file_path)

    def is_critical_path(self, file_path: str) -> bool:
        """Check whether a path matches a configured critical path glob."""
        return matches_any(file_path, self.critical_paths)

    def get_matching_profiles(self, file_path: str) -> list[str]:
        """Review profiles whose ``applies_to`` globs match the path."""
        return self.file_classifier.matching_profiles(file_path)

    def calculate_metrics(self, changed_files: list[ChangedFile]) -> ChangeMetrics:
        """Aggregate file counts, line counts and critical path presence."""
        metrics = ChangeMetrics(total_files=len(changed_files))

        for changed in changed_files:
            file_type = self.analyze_file_type(changed.path)
            metrics.file_type_breakdown[file_type] += 1
            metrics.total_lines += changed.lines_changed

            if self.is_critical_path(changed.path):
                metrics.has_critical_paths = True

        return metrics

    def _determine_tier(
        self, changed_files: list[ChangedFile], metrics: ChangeMetrics
    ) -> ReviewTier:
        thresholds = self.config.tier_thresholds
        total_files = metrics.total_files
        total_lines = metrics.total_lines

        # Critical path override (highest priority)
        if metrics.has_critical_paths:
            return ReviewTier.FULL

        if total_files >= thresholds.full.min_files or total_lines >= thresholds.full.min_lines:
            return ReviewTier.FULL

        only_docs = (
            total_files > 0
            and metrics.file_type_breakdown[FileType.DOCUMENTATION] == total_files
        )
        if only_docs:
            # standards.md and principles.md are documentation but never skippable
            has_non_skippable_docs = any(self.is_critical_path(f.path) for f in changed_files)
            if not has_non_skippable_docs:
                return ReviewTier.SKIP

        only_allowed_types = all(
            file_type in thresholds.quick.allowed_types for file_type in metrics.present_types
        )
        if (
            only_allowed_types
            and total_files <= thresholds.quick.max_files
            and total_lines <= thresholds.quick.max_lines
        ):
            return ReviewTier.QUICK

        if (
            total_files <= thresholds.standard.max_files
            and total_lines <= thresholds.standard.max_lines
        ):
            return ReviewTier.STANDARD

        return ReviewTier.FULL

    def _build_reason(
        self,
        tier: ReviewTier,
        metrics: ChangeMetrics,
        changed_files: list[ChangedFile],
    ) -> str:
        total_files = metrics.total_files
        total_lines = metrics.total_lines

        if metrics.has_critical_paths:
            critical = [f.path for f in changed_files if self.is_critical_path(f.path)]
            return f"Critical path changes detected: {', '.join(critical)}"

        if tier == ReviewTier.SKIP:
            return f"Pure documentation changes ({total_files} file{_plural(total_files)})"

        if total_files == 0:
            return f"No files changed ({tier.value} review)"

        if tier == ReviewTier.QUICK:
            types = "/".join(t.value for t in metrics.present_types)
            return (
                f"{types} only: {total_files} file{_plural(total_files)}, "
                f"{total_lines} lines"
            )

        if tier == ReviewTier.STANDARD:
            return (
                f"Implementation changes: {total_files} file{_plural(total_files)}, "
                f"{total_lines} lines"
            )

        full = self.config.tier_thresholds.full
        if total_files >= full.min_files:
            return f"Large change: {total_files} files (threshold: {full.min_files})"
        if total_lines >= full.min_lines:
            return f"Large change: {total_lines} lines (threshold: {full.min_lines})"

        return "Comprehensive review recommended"
