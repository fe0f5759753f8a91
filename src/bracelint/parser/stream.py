"""
Token Stream

The ordered, mutable sequence of tokens that lint rules check and fix.

Tokens live in an arena keyed by an integer handle. Ordering is kept in a
separate list of handles, and each token's position is cached in a
handle -> index map. Inserting or removing a token only invalidates the
cached positions from the edit point onward; they are refreshed lazily on
the next ``index()`` lookup.

Tokens never point at each other. "Previous" and "next" are always
answered through the stream, so a removed token can't leave a dangling
link behind, and asking about one raises ``StaleTokenError``.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from bracelint.parser.lexer import Lexer, TokenType, read_source


@dataclass(eq=False)
class Token:
    """A single token. Position is fixed at tokenization, value is mutable."""
    type: TokenType
    value: str
    line: int
    column: int
    handle: int = -1

    def __repr__(self):
        if self.type == TokenType.NEWLINE:
            return f"Token({self.type.name}, '\\n', L{self.line}:{self.column})"
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.column})"


class StaleTokenError(Exception):
    """A token was used with a stream it does not (or no longer) belong to."""
    def __init__(self, token: Token):
        self.token = token
        super().__init__(f"{token!r} is not part of this token stream")


class TokenStream:
    """
    Arena-backed token sequence.

    Usage:
        stream = TokenStream.from_source("class example {\\n}\\n")
        for brace in stream.of_type(TokenType.LBRACE):
            before = stream.prev_token(brace)
    """

    def __init__(self, tokens: Optional[List[Token]] = None, filename: str = "<unknown>"):
        self.filename = filename
        self._arena: Dict[int, Token] = {}
        self._order: List[int] = []
        self._positions: Dict[int, int] = {}
        self._stale_from: Optional[int] = None
        self._next_handle = 0
        for token in tokens or []:
            self.insert(len(self._order), token)

    @classmethod
    def from_source(cls, source: str, filename: str = "<unknown>") -> "TokenStream":
        """Tokenize source text into a stream (the trailing EOF marker is dropped)."""
        tokens = [
            Token(kind, value, line, column)
            for kind, value, line, column in Lexer(source, filename).tokenize()
            if kind != TokenType.EOF
        ]
        return cls(tokens, filename=filename)

    @classmethod
    def from_file(cls, filepath: str) -> "TokenStream":
        return cls.from_source(read_source(filepath), filename=filepath)

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Token]:
        # Iterate over a snapshot so rules may mutate while walking
        return iter([self._arena[handle] for handle in self._order])

    def __getitem__(self, index: int) -> Token:
        return self._arena[self._order[index]]

    def __contains__(self, token: object) -> bool:
        return isinstance(token, Token) and self.is_live(token)

    def is_live(self, token: Token) -> bool:
        """True if ``token`` currently belongs to this stream."""
        return self._arena.get(token.handle) is token

    def index(self, token: Token) -> int:
        """Position of ``token`` in the stream."""
        if not self.is_live(token):
            raise StaleTokenError(token)
        if self._stale_from is not None:
            for position in range(self._stale_from, len(self._order)):
                self._positions[self._order[position]] = position
            self._stale_from = None
        return self._positions[token.handle]

    def of_type(self, *types: TokenType) -> List[Token]:
        """Snapshot of all tokens whose type is one of ``types``."""
        return [token for token in self if token.type in types]

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def prev_token(self, token: Token) -> Optional[Token]:
        position = self.index(token)
        if position == 0:
            return None
        return self[position - 1]

    def next_token(self, token: Token) -> Optional[Token]:
        position = self.index(token)
        if position + 1 >= len(self._order):
            return None
        return self[position + 1]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _invalidate_from(self, position: int) -> None:
        if self._stale_from is None or position < self._stale_from:
            self._stale_from = position

    def insert(self, index: int, token: Token) -> Token:
        """Insert ``token`` so that it ends up at position ``index``."""
        if self.is_live(token):
            raise ValueError(f"{token!r} is already part of this stream")
        if not 0 <= index <= len(self._order):
            raise IndexError(f"insert position {index} out of range")

        token.handle = self._next_handle
        self._next_handle += 1
        self._arena[token.handle] = token
        self._order.insert(index, token.handle)
        self._positions[token.handle] = index
        self._invalidate_from(index + 1)
        return token

    def insert_before(self, anchor: Token, token: Token) -> Token:
        return self.insert(self.index(anchor), token)

    def remove(self, token: Token) -> int:
        """Remove ``token`` from the stream and return the position it held."""
        position = self.index(token)
        del self._order[position]
        del self._arena[token.handle]
        del self._positions[token.handle]
        self._invalidate_from(position)
        return position

    @staticmethod
    def new_single_space(line: int = 0, column: int = 0) -> Token:
        """A fresh, unattached WHITESPACE token holding one space."""
        return Token(TokenType.WHITESPACE, ' ', line, column)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def render(self) -> str:
        """Concatenate every token value back into source text."""
        return ''.join(token.value for token in self)

    def __repr__(self):
        return f"TokenStream({self.filename!r}, {len(self)} tokens)"
