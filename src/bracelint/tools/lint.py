"""
Manifest Linter

Runs token-stream rules over manifests and, in fix mode, applies each
rule's fixer to the findings it produced.

For every enabled rule, in registration order:
1. ``check`` runs over the current stream.
2. If fixing, each finding is handed to ``fix`` in discovery order. A
   finding whose fixer raises NoFixError stays reported as an error; the
   remaining findings are still processed.

Usage:
    linter = Linter(LintOptions(fix=True))
    report = linter.lint_file(Path("init.pp"))
    print(report.manifest)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..parser import LexerError, StaleTokenError, TokenStream, decode_source
from ..rules import Finding, NoFixError, Rule, Severity, all_rules, get_rule

logger = logging.getLogger(__name__)


@dataclass
class LintOptions:
    """Per-run settings. ``fix`` gates every mutation of the stream."""
    fix: bool = False
    only: Tuple[str, ...] = ()
    disabled: Tuple[str, ...] = ()
    file_pattern: str = "*.pp"


@dataclass
class Problem:
    """A finding as reported for one file, with its fix outcome."""
    finding: Finding
    path: str
    kind: str               # "error", "warning" or "fixed"
    reason: str = ""        # why a fix was refused

    @property
    def check(self) -> str:
        return self.finding.check

    @property
    def message(self) -> str:
        return self.finding.message

    @property
    def line(self) -> int:
        return self.finding.line

    @property
    def column(self) -> int:
        return self.finding.column

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "kind": self.kind,
            "check": self.check,
            "message": self.message,
            "reason": self.reason,
        }

    def __str__(self):
        msg = f"{self.path}:{self.line}:{self.column}: {self.kind.upper()}: {self.message} [{self.check}]"
        if self.reason:
            msg += f"\n    -> not fixed: {self.reason}"
        return msg


@dataclass
class LintReport:
    """Outcome of linting one source."""
    path: str
    source: str
    problems: List[Problem] = field(default_factory=list)
    stream: Optional[TokenStream] = None
    encoding: str = "utf-8"    # used when fixes are written back

    @property
    def manifest(self) -> str:
        """The (possibly fixed) source text."""
        if self.stream is None:
            return self.source
        return self.stream.render()

    @property
    def changed(self) -> bool:
        return self.manifest != self.source

    def _count(self, kind: str) -> int:
        return sum(1 for p in self.problems if p.kind == kind)

    @property
    def error_count(self) -> int:
        return self._count("error")

    @property
    def warning_count(self) -> int:
        return self._count("warning")

    @property
    def fixed_count(self) -> int:
        return self._count("fixed")


class Linter:
    """
    Main linter class that runs rules against token streams.
    """

    def __init__(self, options: LintOptions = None):
        self.options = options or LintOptions()
        self.rules = self._select_rules()

    def _select_rules(self) -> List[Rule]:
        # Unknown names raise UnknownRuleError here rather than being ignored
        if self.options.only:
            rules = [get_rule(name) for name in self.options.only]
        else:
            rules = all_rules()
        for name in self.options.disabled:
            get_rule(name)
        return [rule for rule in rules if rule.name not in self.options.disabled]

    def run(self, stream: TokenStream, path: str = "<string>") -> List[Problem]:
        """Check (and in fix mode, fix) ``stream`` in place."""
        problems = []
        for rule in self.rules:
            findings = rule.check(stream)
            logger.debug(f"{rule.name}: {len(findings)} findings in {path}")
            for finding in findings:
                problems.append(self._resolve(rule, stream, finding, path))
        return problems

    def _resolve(self, rule: Rule, stream: TokenStream, finding: Finding, path: str) -> Problem:
        kind = "error" if finding.severity == Severity.ERROR else "warning"
        if not self.options.fix or not rule.fixable:
            return Problem(finding, path, kind)

        try:
            rule.fix(stream, finding)
        except NoFixError as e:
            logger.warning(f"{path}:{finding.line}:{finding.column}: {e}")
            return Problem(finding, path, kind, reason=e.reason or str(e))
        except StaleTokenError as e:
            # An earlier fix in this batch already rewrote the site
            logger.warning(f"{path}:{finding.line}:{finding.column}: {e}")
            return Problem(finding, path, kind, reason=str(e))

        logger.info(f"{path}:{finding.line}:{finding.column}: fixed {rule.name}")
        return Problem(finding, path, "fixed")

    def lint_source(self, source: str, path: str = "<string>") -> LintReport:
        """Lint source text and return the report."""
        report = LintReport(path=path, source=source)
        try:
            report.stream = TokenStream.from_source(source, filename=path)
        except LexerError as e:
            finding = Finding(
                check="syntax",
                severity=Severity.ERROR,
                message=str(e),
                line=e.line,
                column=e.column,
            )
            report.problems.append(Problem(finding, path, "error"))
            return report

        report.problems = self.run(report.stream, path)
        return report

    def lint_file(self, file_path: Path) -> LintReport:
        """Lint a file and return the report. The file itself is not written."""
        source, encoding = decode_source(str(file_path))
        report = self.lint_source(source, str(file_path))
        report.encoding = encoding
        return report


def iter_manifests(paths: Iterable[Path], pattern: str = "*.pp") -> List[Path]:
    """Expand directories to the matching files beneath them."""
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob(pattern) if p.is_file()))
        elif path.is_file():
            files.append(path)
        else:
            raise FileNotFoundError(f"{path} not found")
    return files


def lint_paths(paths: Iterable[Path], options: LintOptions = None) -> List[LintReport]:
    """Lint every manifest under ``paths``."""
    linter = Linter(options)
    reports = []
    for file_path in iter_manifests(paths, linter.options.file_pattern):
        reports.append(linter.lint_file(file_path))
    return reports


def write_fixes(report: LintReport) -> bool:
    """
    Write a fixed manifest back to disk in the encoding it was read with.
    Returns True if the file changed.
    """
    if not report.changed:
        return False
    with open(report.path, 'w', encoding=report.encoding, newline='') as f:
        f.write(report.manifest)
    logger.info(f"Wrote {report.fixed_count} fixes to {report.path}")
    return True
