"""
File Type Classifier

Classifies changed files as implementation, test, documentation or config.
Review profile globs decide first; regex heuristics cover everything else.
"""

import re

from .globs import compile_globs, matches_any, normalize_path
from .models import FileType

# Profile directory prefix -> file type it implies, in lookup order.
# Testing globs are narrower than language globs, so they are consulted first.
PROFILE_DIRECTORY_TYPES = [
    ("testing/", FileType.TEST),
    ("frameworks/", FileType.IMPLEMENTATION),
    ("languages/", FileType.IMPLEMENTATION),
]


def _profile_order(profile_path: str) -> tuple[int, str]:
    for index, (prefix, _) in enumerate(PROFILE_DIRECTORY_TYPES):
        if profile_path.startswith(prefix):
            return index, profile_path
    return len(PROFILE_DIRECTORY_TYPES), profile_path


class FileTypeClassifier:
    """Classify file paths by type for tier metrics."""

    # Test files
    TEST_PATTERNS = [
        r"\.(test|spec)\.(ts|js|tsx|jsx)$",
        r"(^|/)test_[^/]*\.py$",
        r"_test\.(py|go)$",
    ]

    # Documentation
    DOC_PATTERNS = [
        r"\.md$",
        r"\.rst$",
    ]

    # Build, lint and test runner configuration
    CONFIG_PATTERNS = [
        r"package\.json",
        r"tsconfig",
        r"\.config\.",
        r"vitest\.config",
        r"eslint",
        r"(^|/)pyproject\.toml$",
        r"(^|/)setup\.cfg$",
        r"(^|/)tox\.ini$",
        r"(^|/)pytest\.ini$",
        r"(^|/)mypy\.ini$",
        r"(^|/)ruff\.toml$",
        r"(^|/)\.flake8$",
        r"(^|/)\.pre-commit-config\.ya?ml$",
    ]

    def __init__(self, profile_patterns: dict[str, list[str]] | None = None):
        """
        Initialize classifier.

        Args:
            profile_patterns: Profile path -> ``applies_to`` globs
        """
        self.profile_patterns: dict[str, list[str]] = {}
        ordered = sorted((profile_patterns or {}).items(), key=lambda item: _profile_order(item[0]))
        for profile_path, patterns in ordered:
            usable = compile_globs(patterns)
            if usable:
                self.profile_patterns[profile_path] = usable

        self._tests = [re.compile(p) for p in self.TEST_PATTERNS]
        self._docs = [re.compile(p) for p in self.DOC_PATTERNS]
        self._configs = [re.compile(p) for p in self.CONFIG_PATTERNS]

    def classify(self, path: str) -> FileType:
        """Classify a single file path."""
        path = normalize_path(path)

        for profile_path, patterns in self.profile_patterns.items():
            if not matches_any(path, patterns):
                continue
            profile_type = self._profile_type(profile_path)
            if profile_type is not None:
                return profile_type

        if any(pattern.search(path) for pattern in self._tests):
            return FileType.TEST
        if any(pattern.search(path) for pattern in self._docs):
            return FileType.DOCUMENTATION
        if any(pattern.search(path) for pattern in self._configs):
            return FileType.CONFIG

        return FileType.IMPLEMENTATION

    def matching_profiles(self, path: str) -> list[str]:
        """All profiles whose ``applies_to`` globs match the path."""
        path = normalize_path(path)
        return [
            profile_path
            for profile_path, patterns in self.profile_patterns.items()
            if matches_any(path, patterns)
        ]

    @staticmethod
    def _profile_type(profile_path: str) -> FileType | None:
        for prefix, file_type in PROFILE_DIRECTORY_TYPES:
            if profile_path.startswith(prefix):
                return file_type
        return None
