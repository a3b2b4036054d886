"""
Review Profile Patterns

Reads the ``applies_to`` globs declared in the YAML frontmatter of markdown
review profiles. Its only contract is "profile file -> glob patterns", so the
rest of the package never touches frontmatter directly.
"""

import re
from pathlib import Path
from typing import Any

import structlog
import yaml

from .exceptions import ProfileError

logger = structlog.get_logger(__name__)

FRONTMATTER = re.compile(r"\A---\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def parse_frontmatter(content: str) -> dict[str, Any] | None:
    """
    Parse the leading ``---`` delimited YAML block of a markdown document.

    Returns:
        The frontmatter mapping, or None when the document has none

    Raises:
        ProfileError: If the block is not valid YAML or not a mapping
    """
    match = FRONTMATTER.match(content)
    if not match:
        return None

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise ProfileError(f"Invalid frontmatter YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ProfileError("Frontmatter must be a mapping")
    return data


def extract_applies_to(content: str) -> list[str] | None:
    """Return the profile's ``applies_to`` patterns, or None if it declares none."""
    frontmatter = parse_frontmatter(content)
    if not frontmatter:
        return None

    applies_to = frontmatter.get("applies_to")
    if not isinstance(applies_to, list):
        return None
    return [pattern for pattern in applies_to if isinstance(pattern, str)]


def load_profile_patterns(profiles_dir: str | Path) -> dict[str, list[str]]:
    """
    Load ``applies_to`` patterns for every profile under a directory.

    Keys are POSIX paths relative to ``profiles_dir`` (``testing/vitest.md``)
    in sorted order. Missing directories and broken profiles are logged and
    skipped.
    """
    root = Path(profiles_dir)
    patterns: dict[str, list[str]] = {}

    if not root.is_dir():
        logger.warning("Review profiles directory not found", path=str(root))
        return patterns

    for profile_file in sorted(root.rglob("*.md")):
        relative = profile_file.relative_to(root).as_posix()
        try:
            content = profile_file.read_text(encoding="utf-8")
            applies_to = extract_applies_to(content)
        except (OSError, UnicodeDecodeError, ProfileError) as e:
            logger.warning("Failed to parse profile", file=relative, error=str(e))
            continue

        if applies_to:
            patterns[relative] = applies_to

    logger.debug("Loaded profile patterns", count=len(patterns), path=str(root))
    return patterns
