"""
Token navigation helpers.

Pure queries over a TokenStream. They never mutate and return None (or
False) instead of raising when a neighbour does not exist.
"""

from typing import FrozenSet, Optional

from bracelint.parser.lexer import TokenType
from bracelint.parser.stream import Token, TokenStream


# Tokens that only carry spacing
SPACE_TYPES: FrozenSet[TokenType] = frozenset({
    TokenType.WHITESPACE,
    TokenType.INDENT,
    TokenType.NEWLINE,
})

# Spacing plus comments
TRIVIA_TYPES: FrozenSet[TokenType] = SPACE_TYPES | {TokenType.COMMENT}


def prev_token(stream: TokenStream, token: Token) -> Optional[Token]:
    return stream.prev_token(token)


def next_token(stream: TokenStream, token: Token) -> Optional[Token]:
    return stream.next_token(token)


def _walk(token: Token, step, skip: FrozenSet[TokenType]) -> Optional[Token]:
    current = step(token)
    while current is not None and current.type in skip:
        current = step(current)
    return current


def prev_non_space_token(stream: TokenStream, token: Token) -> Optional[Token]:
    """Closest preceding token that is not whitespace, indent or newline.

    Comments are returned, not skipped.
    """
    return _walk(token, stream.prev_token, SPACE_TYPES)


def next_non_space_token(stream: TokenStream, token: Token) -> Optional[Token]:
    return _walk(token, stream.next_token, SPACE_TYPES)


def prev_code_token(stream: TokenStream, token: Token) -> Optional[Token]:
    """Closest preceding token that is not trivia (comments skipped too)."""
    return _walk(token, stream.prev_token, TRIVIA_TYPES)


def next_code_token(stream: TokenStream, token: Token) -> Optional[Token]:
    return _walk(token, stream.next_token, TRIVIA_TYPES)


def is_single_space(token: Optional[Token]) -> bool:
    return (
        token is not None
        and token.type == TokenType.WHITESPACE
        and token.value == ' '
    )
