"""
Severity Extractor

Counts diagnostic severities in raw tool output using keyword matching.
"""

import re

from .models import SeverityLevel, empty_severity_counts

SCORE_MULTIPLIERS = {
    SeverityLevel.BLOCKER: 100,
    SeverityLevel.CRITICAL: 75,
    SeverityLevel.WARNING: 25,
    SeverityLevel.INFO: 5,
}


class SeverityExtractor:
    """Classify tool output lines by severity keyword."""

    # Checked in order; the first match decides a line's severity
    KEYWORDS = [
        (SeverityLevel.BLOCKER, re.compile(r"\b(error|blocker|critical|fail)\b")),
        (SeverityLevel.WARNING, re.compile(r"\b(warn|warning)\b")),
        (SeverityLevel.INFO, re.compile(r"\b(info|note|hint)\b")),
    ]

    def extract_severity(self, output: str) -> dict[SeverityLevel, int]:
        """
        Count severities in tool output, one per line at most.

        Args:
            output: Raw output from a quality check tool

        Returns:
            Count per severity level; every level is present
        """
        counts = empty_severity_counts()

        for line in output.split("\n"):
            lower = line.lower()
            for level, pattern in self.KEYWORDS:
                if pattern.search(lower):
                    counts[level] += 1
                    break

        return counts

    def get_score_multiplier(self, level: SeverityLevel) -> int:
        """Weight of one issue at the given level."""
        return SCORE_MULTIPLIERS[level]
