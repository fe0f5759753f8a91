"""
Lint Rule Registry

A rule is a pair of free functions over a TokenStream:

    check(stream) -> List[Finding]        pure, never mutates
    fix(stream, finding) -> None          mutates in place or raises NoFixError

Rules register themselves by name:

    @register_rule("my_check")
    def check(stream): ...

    @check.fixer
    def fix(stream, finding): ...

Nothing is shared between rules except the stream they are handed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional

from bracelint.parser.stream import Token, TokenStream


class Severity(Enum):
    """Finding severity levels."""
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Finding:
    """A single style violation. Line/column are a snapshot taken at check time.

    ``token`` is the fixer's mutation anchor; it is None only for findings
    raised before a stream existed (lexer errors).
    """
    check: str
    severity: Severity
    message: str
    line: int
    column: int
    token: Optional[Token] = None

    def __str__(self):
        return f"{self.line}:{self.column}: {self.severity.value}: {self.message} [{self.check}]"


class NoFixError(Exception):
    """A finding cannot be corrected safely; the stream was left untouched."""
    def __init__(self, finding: Finding, reason: str = ""):
        self.finding = finding
        self.reason = reason
        message = f"no safe fix for {finding.check} at {finding.line}:{finding.column}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnknownRuleError(KeyError):
    """Requested a rule name that was never registered."""


CheckFunc = Callable[[TokenStream], List[Finding]]
FixFunc = Callable[[TokenStream, Finding], None]


@dataclass(frozen=True)
class Rule:
    name: str
    check: CheckFunc
    fix: Optional[FixFunc] = None

    @property
    def fixable(self) -> bool:
        return self.fix is not None


_RULES: Dict[str, Rule] = {}


class _CheckHandle:
    """Returned by ``register_rule`` so the check can attach its fixer."""

    def __init__(self, name: str, func: CheckFunc):
        self.name = name
        self.func = func

    def __call__(self, stream: TokenStream) -> List[Finding]:
        return self.func(stream)

    def fixer(self, fix: FixFunc) -> FixFunc:
        _RULES[self.name] = replace(_RULES[self.name], fix=fix)
        return fix


def register_rule(name: str) -> Callable[[CheckFunc], _CheckHandle]:
    """Decorator registering ``func`` as the check of rule ``name``."""
    def decorator(func: CheckFunc) -> _CheckHandle:
        if name in _RULES:
            raise ValueError(f"Rule '{name}' is already registered")
        _RULES[name] = Rule(name=name, check=func)
        return _CheckHandle(name, func)
    return decorator


def get_rule(name: str) -> Rule:
    try:
        return _RULES[name]
    except KeyError:
        raise UnknownRuleError(name) from None


def all_rules() -> List[Rule]:
    """Registered rules in registration order."""
    return list(_RULES.values())


def finding_at(check: str, token: Token, message: str,
               severity: Severity = Severity.ERROR) -> Finding:
    """Build a finding reported at ``token``'s own position."""
    return Finding(
        check=check,
        severity=severity,
        message=message,
        line=token.line,
        column=token.column,
        token=token,
    )
