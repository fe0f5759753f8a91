"""
Whitespace in class and defined resource headers.

    class mymodule::example inherits base {
         ^                 ^
         |                 manifest_whitespace_class_name_single_space_after
         manifest_whitespace_class_name_single_space_before

Resource-style declarations (``class { 'name': }``) have no name token
after the keyword and are left alone.
"""

from typing import List, Tuple

from bracelint.parser.lexer import TokenType
from bracelint.parser.navigation import SPACE_TYPES, is_single_space, next_non_space_token
from bracelint.parser.stream import Token, TokenStream
from bracelint.rules.registry import Finding, NoFixError, finding_at, register_rule

NAME_BEFORE = "manifest_whitespace_class_name_single_space_before"
NAME_AFTER = "manifest_whitespace_class_name_single_space_after"

NAME_BEFORE_MESSAGE = (
    "there should be a single space between the class or defined resource "
    "statement and the name"
)
NAME_AFTER_MESSAGE = "there should be a single space between the class or resource name and the next item"

HEADER_KEYWORDS = (TokenType.CLASS, TokenType.DEFINE)


def _headers(stream: TokenStream) -> List[Tuple[Token, Token]]:
    """(keyword, name) pairs for every named class/define header."""
    headers = []
    for keyword in stream.of_type(*HEADER_KEYWORDS):
        name = next_non_space_token(stream, keyword)
        if name is not None and name.type == TokenType.IDENTIFIER:
            headers.append((keyword, name))
    return headers


def _single_spaced(stream: TokenStream, left: Token, right: Token) -> bool:
    between = stream.next_token(left)
    return stream.index(right) == stream.index(left) + 2 and is_single_space(between)


def _collapse_between(stream: TokenStream, finding: Finding, left: Token, right: Token) -> None:
    """Replace whatever spacing sits between ``left`` and ``right`` with one space."""
    doomed = []
    current = stream.next_token(left)
    while current is not right:
        if current is None or current.type not in SPACE_TYPES:
            raise NoFixError(finding, f"unexpected {current!r} in header")
        doomed.append(current)
        current = stream.next_token(current)

    for token in doomed:
        stream.remove(token)
    stream.insert_before(right, stream.new_single_space(right.line, right.column))


@register_rule(NAME_BEFORE)
def check_name_before(stream: TokenStream) -> List[Finding]:
    findings = []
    for keyword, name in _headers(stream):
        if _single_spaced(stream, keyword, name):
            continue
        findings.append(finding_at(NAME_BEFORE, stream.next_token(keyword), NAME_BEFORE_MESSAGE))
    return findings


@check_name_before.fixer
def fix_name_before(stream: TokenStream, finding: Finding) -> None:
    # The finding sits on whatever directly follows the keyword
    keyword = stream.prev_token(finding.token)
    if keyword is None or keyword.type not in HEADER_KEYWORDS:
        raise NoFixError(finding, "header keyword not found")

    name = next_non_space_token(stream, keyword)
    _collapse_between(stream, finding, keyword, name)


@register_rule(NAME_AFTER)
def check_name_after(stream: TokenStream) -> List[Finding]:
    findings = []
    for _, name in _headers(stream):
        item = next_non_space_token(stream, name)
        if item is None or _single_spaced(stream, name, item):
            continue
        findings.append(finding_at(NAME_AFTER, name, NAME_AFTER_MESSAGE))
    return findings


@check_name_after.fixer
def fix_name_after(stream: TokenStream, finding: Finding) -> None:
    name = finding.token
    item = next_non_space_token(stream, name)
    if item is None:
        raise NoFixError(finding, "nothing follows the name")
    _collapse_between(stream, finding, name, item)
