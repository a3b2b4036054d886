"""Tests for review profile frontmatter loading."""

import pytest

from change_triage.exceptions import ProfileError
from change_triage.profiles import extract_applies_to, load_profile_patterns, parse_frontmatter

from conftest import write_profile


class TestParseFrontmatter:
    """Tests for the frontmatter adapter."""

    def test_parses_leading_block(self):
        content = "---\nname: Python\napplies_to:\n  - '**/*.py'\n---\n\n# Python\n"

        assert parse_frontmatter(content) == {"name": "Python", "applies_to": ["**/*.py"]}

    def test_windows_line_endings(self):
        content = "---\r\nname: Python\r\n---\r\nbody\r\n"

        assert parse_frontmatter(content) == {"name": "Python"}

    @pytest.mark.parametrize("content", [
        "",
        "# Just markdown\n",
        "\n---\nname: late\n---\n",
        "---\nname: unterminated\n",
    ])
    def test_no_frontmatter(self, content):
        assert parse_frontmatter(content) is None

    def test_empty_block(self):
        assert parse_frontmatter("---\n\n---\n") == {}

    def test_invalid_yaml_raises(self):
        with pytest.raises(ProfileError):
            parse_frontmatter("---\napplies_to: [unclosed\n---\n")

    def test_non_mapping_raises(self):
        with pytest.raises(ProfileError):
            parse_frontmatter("---\n- just\n- a list\n---\n")


class TestExtractAppliesTo:
    def test_returns_string_patterns(self):
        content = "---\napplies_to:\n  - '**/*.ts'\n  - 42\n  - '**/*.tsx'\n---\n"

        assert extract_applies_to(content) == ["**/*.ts", "**/*.tsx"]

    @pytest.mark.parametrize("content", [
        "# no frontmatter",
        "---\nname: x\n---\n",
        "---\napplies_to: '**/*.py'\n---\n",
    ])
    def test_missing_or_malformed(self, content):
        assert extract_applies_to(content) is None


class TestLoadProfilePatterns:
    """Tests for scanning a profiles directory."""

    def test_missing_directory_is_empty(self, tmp_path):
        assert load_profile_patterns(tmp_path / "nope") == {}

    def test_relative_posix_keys(self, tmp_path):
        write_profile(tmp_path, "testing/vitest.md", ["**/*.test.ts"])
        write_profile(tmp_path, "languages/typescript.md", ["**/*.ts"])

        patterns = load_profile_patterns(tmp_path)

        assert patterns == {
            "languages/typescript.md": ["**/*.ts"],
            "testing/vitest.md": ["**/*.test.ts"],
        }
        assert list(patterns) == sorted(patterns)

    def test_broken_profile_is_skipped(self, tmp_path):
        write_profile(tmp_path, "languages/python.md", ["**/*.py"])
        broken = tmp_path / "languages" / "broken.md"
        broken.write_text("---\napplies_to: [oops\n---\n")

        assert load_profile_patterns(tmp_path) == {"languages/python.md": ["**/*.py"]}

    def test_profiles_without_patterns_are_omitted(self, tmp_path):
        (tmp_path / "notes.md").write_text("# Notes without frontmatter\n")
        (tmp_path / "readme.txt").write_text("---\napplies_to: ['*']\n---\n")

        assert load_profile_patterns(tmp_path) == {}
