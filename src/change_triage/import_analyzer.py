"""
Import Analyzer

Measures import fan-in (how many files import a given file) across a project
to estimate the architectural impact of changing it.

Python sources are read with the ast module; JavaScript and TypeScript
sources are scanned for relative ``from '...'`` and ``require('...')``
specifiers.
"""

import ast
import os
import re
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)

# Files imported by more than this many files are critical infrastructure
HIGH_FAN_IN_THRESHOLD = 20


class FanInAnalyzer(Protocol):
    """Anything that can produce a path -> fan-in map for a project."""

    def analyze_fan_in(self, project_root: str | Path) -> dict[str, int]: ...


class ImportAnalyzer:
    """Compute import fan-in for Python and JS/TS projects."""

    EXCLUDED_DIRS = {
        "node_modules",
        "dist",
        "build",
        ".git",
        "__pycache__",
        ".venv",
        "venv",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
    }

    PYTHON_EXTENSIONS = {".py"}
    SCRIPT_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx"}

    # Test files import a lot and would inflate fan-in
    TEST_FILE = re.compile(r"(\.(test|spec)\.)|(^test_.*\.py$)|(_test\.py$)")

    FROM_SPECIFIER = re.compile(r"""from\s+['"]([^'"]+)['"]""")
    REQUIRE_SPECIFIER = re.compile(r"""require\(\s*['"]([^'"]+)['"]\s*\)""")

    SCRIPT_RESOLUTION_SUFFIXES = [".ts", ".tsx", ".js", ".jsx", "/index.ts", "/index.js"]

    def analyze_fan_in(self, project_root: str | Path) -> dict[str, int]:
        """
        Analyze import fan-in across an entire project.

        Args:
            project_root: Root directory of the project

        Returns:
            Map of POSIX path relative to the root -> number of files importing it
        """
        root = Path(project_root)
        fan_in: dict[str, int] = {}

        if not root.is_dir():
            logger.debug("Project root not found, no fan-in data", project_root=str(root))
            return fan_in

        source_files = self._collect_files(root)
        logger.debug("Analyzing import fan-in", project_root=str(root), files=len(source_files))

        python_roots = [root]
        if (root / "src").is_dir():
            python_roots.append(root / "src")

        for rel_path in source_files:
            suffix = Path(rel_path).suffix
            if suffix in self.PYTHON_EXTENSIONS:
                targets = self._python_imports(root, rel_path, python_roots)
            else:
                targets = self._script_imports(root, rel_path)

            # Count each importer once per target, never itself
            for target in targets - {rel_path}:
                fan_in[target] = fan_in.get(target, 0) + 1

        critical_files = sum(1 for count in fan_in.values() if count > HIGH_FAN_IN_THRESHOLD)
        logger.debug(
            "Import fan-in analysis complete",
            total_files=len(source_files),
            files_with_imports=len(fan_in),
            critical_files=critical_files,
        )
        return fan_in

    def _collect_files(self, root: Path) -> list[str]:
        files: list[str] = []
        extensions = self.PYTHON_EXTENSIONS | self.SCRIPT_EXTENSIONS

        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in self.EXCLUDED_DIRS)
            rel_dir = Path(dirpath).relative_to(root)

            for filename in sorted(filenames):
                if Path(filename).suffix not in extensions:
                    continue
                if self.TEST_FILE.search(filename):
                    continue
                files.append((rel_dir / filename).as_posix())

        return files

    # -- Python ---------------------------------------------------------------

    def _python_imports(self, root: Path, rel_path: str, search_roots: list[Path]) -> set[str]:
        full_path = root / rel_path
        try:
            source = full_path.read_text(encoding="utf-8", errors="replace")
            tree = ast.parse(source, filename=rel_path)
        except (OSError, SyntaxError, ValueError) as e:
            logger.debug("Skipping unparsable source", file=rel_path, error=str(e))
            return set()

        package_dir = full_path.parent
        targets: set[str] = set()

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    resolved = self._resolve_module(alias.name.split("."), search_roots)
                    if resolved:
                        targets.add(self._relative(root, resolved))

            elif isinstance(node, ast.ImportFrom):
                module_parts = node.module.split(".") if node.module else []

                if node.level:
                    base = package_dir
                    for _ in range(node.level - 1):
                        base = base.parent
                    bases = [base]
                else:
                    bases = search_roots

                found_submodule = False
                for alias in node.names:
                    if alias.name == "*":
                        continue
                    # from pkg import submodule
                    resolved = self._resolve_module(module_parts + [alias.name], bases)
                    if resolved:
                        targets.add(self._relative(root, resolved))
                        found_submodule = True

                if module_parts or not found_submodule:
                    resolved = self._resolve_module(module_parts, bases)
                    if resolved and not (found_submodule and resolved.name == "__init__.py"):
                        targets.add(self._relative(root, resolved))

        return {t for t in targets if not t.startswith("..")}

    @staticmethod
    def _resolve_module(parts: list[str], bases: list[Path]) -> Path | None:
        for base in bases:
            module_path = base.joinpath(*parts) if parts else base
            if parts and module_path.with_suffix(".py").is_file():
                return module_path.with_suffix(".py")
            if (module_path / "__init__.py").is_file():
                return module_path / "__init__.py"
        return None

    # -- JavaScript / TypeScript ----------------------------------------------

    def _script_imports(self, root: Path, rel_path: str) -> set[str]:
        full_path = root / rel_path
        try:
            content = full_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Skipping unreadable source", file=rel_path, error=str(e))
            return set()

        specifiers = self.FROM_SPECIFIER.findall(content) + self.REQUIRE_SPECIFIER.findall(content)
        targets: set[str] = set()

        for specifier in specifiers:
            # Package imports and path aliases are not resolved
            if not specifier.startswith("."):
                continue
            resolved = self._resolve_script(full_path.parent, specifier)
            if resolved is None:
                continue
            relative = self._relative(root, resolved)
            if not relative.startswith(".."):
                targets.add(relative)

        return targets

    def _resolve_script(self, from_dir: Path, specifier: str) -> Path | None:
        candidate = Path(os.path.normpath(from_dir / specifier))

        if candidate.is_file():
            return candidate

        # ESM TypeScript imports name the compiled .js file
        if candidate.suffix in (".js", ".jsx"):
            for ts_suffix in (".ts", ".tsx"):
                ts_candidate = candidate.with_suffix(ts_suffix)
                if ts_candidate.is_file():
                    return ts_candidate

        for suffix in self.SCRIPT_RESOLUTION_SUFFIXES:
            resolved = Path(f"{candidate}{suffix}")
            if resolved.is_file():
                return resolved

        return None

    @staticmethod
    def _relative(root: Path, path: Path) -> str:
        return Path(os.path.relpath(path, root)).as_posix()
