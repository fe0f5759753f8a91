"""
bracelint.tools - Running rules over files

- lint: the linter engine, reports and fix write-back
"""

from .lint import (
    Linter,
    LintOptions,
    LintReport,
    Problem,
    iter_manifests,
    lint_paths,
    write_fixes,
)

__all__ = [
    "Linter",
    "LintOptions",
    "LintReport",
    "Problem",
    "iter_manifests",
    "lint_paths",
    "write_fixes",
]
