"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bracelint.tools.lint import Linter, LintOptions


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def manifest_dir(tmp_path):
    """A scratch directory holding one clean and one dirty manifest."""
    (tmp_path / "clean.pp").write_text("class example {\n  include foo\n}\n", encoding="utf-8")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "dirty.pp").write_text("class example{\n  include foo\n}\n", encoding="utf-8")
    (nested / "notes.txt").write_text("class example{\n", encoding="utf-8")
    return tmp_path


# =============================================================================
# LINT FIXTURES
# =============================================================================

@pytest.fixture
def run_check():
    """Run a single check over source text and return the report."""
    def _run(code: str, check: str, fix: bool = False):
        linter = Linter(LintOptions(fix=fix, only=(check,)))
        return linter.lint_source(code, "init.pp")
    return _run
