#!/usr/bin/env python3
"""Enforce the layer boundaries of the secure_estate package.

    domain          imports no other layer
    application     domain
    infrastructure  domain, application
    api             domain, application

bootstrap/, config/ and workers/ wire the layers together and are not
checked. Relative imports are resolved against the importing module, so
``from ..infrastructure import x`` inside application/ is caught too.

Usage:
    python scripts/check_imports.py [package_directory]

Exits 1 when any violation is found.
"""
import ast
import sys
from pathlib import Path
from typing import NamedTuple

PACKAGE = "secure_estate"

# 0 is innermost
LAYER_HIERARCHY: dict[str, int] = {
    "domain": 0,
    "application": 1,
    "infrastructure": 2,
    "api": 3,
}

ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "application": {"domain"},
    "infrastructure": {"domain", "application"},
    "api": {"domain", "application"},
}


class Violation(NamedTuple):
    path: str
    line: int
    message: str


def _package_parts(py_file: Path, package_dir: Path) -> list[str]:
    """Dotted-name parts of the package that contains ``py_file``."""
    return [PACKAGE, *py_file.relative_to(package_dir).parent.parts]


def imported_modules(
    node: ast.Import | ast.ImportFrom, package_parts: list[str] | None = None
) -> list[str]:
    """Absolute module names referenced by an import statement.

    ``package_parts`` is the package holding the importing file; without
    it relative imports cannot be resolved and are skipped.
    """
    if isinstance(node, ast.Import):
        return [alias.name for alias in node.names]
    if node.level == 0:
        return [node.module] if node.module else []
    if package_parts is None:
        return []

    # level 1 is package_parts itself
    base = package_parts[: len(package_parts) - node.level + 1]
    if not base:
        return []
    if node.module:
        return [".".join([*base, node.module])]
    return [".".join([*base, alias.name]) for alias in node.names]


def get_import_module(node: ast.Import | ast.ImportFrom) -> str | None:
    """First absolute module named by ``node``; None for relative imports."""
    modules = imported_modules(node)
    return modules[0] if modules else None


def _layer_of(module: str) -> str | None:
    parts = module.split(".")
    if len(parts) < 2 or parts[0] != PACKAGE:
        return None
    return parts[1] if parts[1] in LAYER_HIERARCHY else None


def check_file_imports(py_file: Path, package_dir: Path) -> list[Violation]:
    """Boundary violations in one file; unlayered files yield none."""
    try:
        package_parts = _package_parts(py_file, package_dir)
    except ValueError:
        return []
    if len(package_parts) < 2 or package_parts[1] not in LAYER_HIERARCHY:
        return []
    file_layer = package_parts[1]

    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: could not parse {py_file}: {e}", file=sys.stderr)
        return []

    allowed = ALLOWED_IMPORTS[file_layer]
    violations: list[Violation] = []
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Import, ast.ImportFrom)):
            continue
        for module in imported_modules(node, package_parts):
            target = _layer_of(module)
            if target is None or target == file_layer or target in allowed:
                continue
            violations.append(
                Violation(
                    str(py_file),
                    node.lineno,
                    f"{file_layer} layer cannot import from {target} ({module})",
                )
            )
    return violations


def check_import_boundaries(package_dir: Path) -> list[Violation]:
    if not package_dir.is_dir():
        print(f"Error: package directory '{package_dir}' does not exist", file=sys.stderr)
        return []
    violations: list[Violation] = []
    for py_file in sorted(package_dir.rglob("*.py")):
        violations.extend(check_file_imports(py_file, package_dir))
    return violations


def format_violations(violations: list[Violation]) -> str:
    if not violations:
        return ""
    lines = ["Import boundary violations found:", ""]
    lines.extend(f"  {v.path}:{v.line}: {v.message}" for v in sorted(violations))
    lines += ["", f"Total: {len(violations)} violation(s)"]
    return "\n".join(lines)


def main() -> int:
    package_dir = (
        Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent.parent / PACKAGE
    )
    violations = check_import_boundaries(package_dir)
    if violations:
        print(format_violations(violations))
        return 1
    print("No import boundary violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
