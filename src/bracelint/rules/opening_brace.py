"""
Whitespace around opening braces.

- manifest_whitespace_opening_brace_before: exactly one space between the
  preceding code token and ``{``.
- manifest_whitespace_opening_brace_after: exactly one space, or a single
  newline, after ``{``.
"""

from typing import List

from bracelint.parser.lexer import TokenType
from bracelint.parser.navigation import SPACE_TYPES, is_single_space, prev_non_space_token
from bracelint.parser.stream import TokenStream
from bracelint.rules.registry import Finding, NoFixError, finding_at, register_rule

BEFORE = "manifest_whitespace_opening_brace_before"
AFTER = "manifest_whitespace_opening_brace_after"

BEFORE_MESSAGE = "there should be a single space before an opening brace"
AFTER_MESSAGE = "there should be a single space or single newline after an opening brace"

# A brace directly after one of these needs no separating space
BEFORE_EXEMPT = frozenset({
    TokenType.LBRACKET,
    TokenType.LBRACE,
    TokenType.COLON,
    TokenType.COMMA,
    TokenType.COMMENT,
})

AFTER_EXEMPT = frozenset({
    TokenType.LBRACKET,
    TokenType.LBRACE,
    TokenType.RBRACE,
})


@register_rule(BEFORE)
def check_before(stream: TokenStream) -> List[Finding]:
    findings = []
    for brace in stream.of_type(TokenType.LBRACE):
        prev = stream.prev_token(brace)
        prev_code = prev_non_space_token(stream, brace)

        if prev is None or prev_code is None:
            continue
        if prev_code.type in BEFORE_EXEMPT:
            continue
        if stream.index(prev_code) == stream.index(brace) - 2 and is_single_space(prev):
            continue

        findings.append(finding_at(BEFORE, brace, BEFORE_MESSAGE))
    return findings


@check_before.fixer
def fix_before(stream: TokenStream, finding: Finding) -> None:
    brace = finding.token
    prev = stream.prev_token(brace)
    prev_code = prev_non_space_token(stream, brace)

    # Validate the whole run first so a refusal leaves the stream untouched
    doomed = []
    while prev is not prev_code:
        if prev is None or prev.type not in SPACE_TYPES:
            raise NoFixError(finding, f"unexpected {prev!r} before brace")
        doomed.append(prev)
        prev = stream.prev_token(prev)

    for token in doomed:
        stream.remove(token)
    stream.insert_before(brace, stream.new_single_space(brace.line, brace.column))


@register_rule(AFTER)
def check_after(stream: TokenStream) -> List[Finding]:
    findings = []
    for brace in stream.of_type(TokenType.LBRACE):
        following = stream.next_token(brace)

        if following is None or is_single_space(following):
            continue
        if following.type in AFTER_EXEMPT:
            continue

        if following.type == TokenType.NEWLINE:
            # One newline opens a multi-line block; a second one is a blank line
            following = stream.next_token(following)
            if following is None or following.type != TokenType.NEWLINE:
                continue

        findings.append(finding_at(AFTER, following, AFTER_MESSAGE))
    return findings


@check_after.fixer
def fix_after(stream: TokenStream, finding: Finding) -> None:
    token = finding.token

    if token.type == TokenType.WHITESPACE:
        token.value = ' '
        return

    if token.type == TokenType.NEWLINE:
        # The first newline after the brace stays; drop every directly
        # consecutive one starting at the anchored (second) newline
        while token is not None and token.type == TokenType.NEWLINE:
            following = stream.next_token(token)
            stream.remove(token)
            token = following
        return

    stream.insert_before(token, stream.new_single_space(token.line, token.column))
