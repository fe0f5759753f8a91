"""
bracelint.rules - Token-stream lint rules

Importing this package registers every bundled rule:
- manifest_whitespace_opening_brace_before
- manifest_whitespace_opening_brace_after
- manifest_whitespace_class_name_single_space_before
- manifest_whitespace_class_name_single_space_after
"""

from bracelint.rules.registry import (
    Severity,
    Finding,
    Rule,
    NoFixError,
    UnknownRuleError,
    register_rule,
    get_rule,
    all_rules,
    finding_at,
)

# Rule modules register on import
from bracelint.rules import opening_brace, class_header  # noqa: F401

__all__ = [
    "Severity",
    "Finding",
    "Rule",
    "NoFixError",
    "UnknownRuleError",
    "register_rule",
    "get_rule",
    "all_rules",
    "finding_at",
]
