"""
Glob Matching

Thin wrapper over wcmatch so every component matches paths the same way.
"""

import re

import structlog
from wcmatch import glob

logger = structlog.get_logger(__name__)

# ** may span zero or more directories, {a,b} and @(a|b) are supported
GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB


def normalize_path(path: str) -> str:
    """Use forward slashes and drop a leading ./ prefix."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def _expand(pattern: str) -> str:
    pattern = normalize_path(pattern)
    # A trailing slash names a directory: match everything beneath it
    if pattern.endswith("/"):
        return pattern + "**"
    return pattern


def compile_globs(patterns: list[str] | tuple[str, ...]) -> list[str]:
    """
    Validate glob patterns, dropping the ones that cannot be compiled.

    Returns:
        The usable patterns in their original order and spelling
    """
    usable: list[str] = []
    for pattern in patterns:
        if not isinstance(pattern, str) or not pattern.strip():
            logger.warning("Skipping empty or non-string glob pattern", pattern=pattern)
            continue
        try:
            glob.translate(_expand(pattern), flags=GLOB_FLAGS)
        except (ValueError, re.error) as e:
            logger.warning("Skipping invalid glob pattern", pattern=pattern, error=str(e))
            continue
        usable.append(pattern)
    return usable


def matches_glob(path: str, pattern: str) -> bool:
    """Check a single path against a single glob pattern."""
    try:
        return glob.globmatch(normalize_path(path), _expand(pattern), flags=GLOB_FLAGS)
    except (ValueError, re.error) as e:
        logger.warning("Glob pattern failed to match", pattern=pattern, error=str(e))
        return False


def first_match(path: str, patterns: list[str] | tuple[str, ...]) -> str | None:
    """Return the first pattern that matches the path, if any."""
    for pattern in patterns:
        if matches_glob(path, pattern):
            return pattern
    return None


def matches_any(path: str, patterns: list[str] | tuple[str, ...]) -> bool:
    """Check whether any pattern matches the path."""
    return first_match(path, patterns) is not None
