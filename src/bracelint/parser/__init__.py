"""
bracelint.parser - Manifest tokenization

Lossless lexer plus the mutable token stream lint rules operate on.
"""

from bracelint.parser.lexer import Lexer, TokenType, LexerError, decode_source, read_source
from bracelint.parser.stream import Token, TokenStream, StaleTokenError
from bracelint.parser.navigation import (
    SPACE_TYPES,
    TRIVIA_TYPES,
    prev_token,
    next_token,
    prev_non_space_token,
    next_non_space_token,
    prev_code_token,
    next_code_token,
    is_single_space,
)

__all__ = [
    # Lexer
    "Lexer",
    "TokenType",
    "LexerError",
    "read_source",
    "decode_source",
    # Stream
    "Token",
    "TokenStream",
    "StaleTokenError",
    # Navigation
    "SPACE_TYPES",
    "TRIVIA_TYPES",
    "prev_token",
    "next_token",
    "prev_non_space_token",
    "next_non_space_token",
    "prev_code_token",
    "next_code_token",
    "is_single_space",
]
