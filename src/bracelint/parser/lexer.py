"""
Manifest Lexer (Tokenizer)

Converts raw manifest source into a lossless stream of tokens.
Handles: identifiers, keywords, variables, operators, braces, strings,
numbers, comments and the whitespace between them.

Unlike a parser-oriented lexer, nothing is skipped: concatenating the
``value`` of every token reproduces the source byte for byte. Lint rules
depend on that to reason about (and rewrite) the spacing between tokens.
"""

import codecs
from enum import Enum, auto
from typing import Iterator, List, Optional, Tuple


class TokenType(Enum):
    """Types of tokens in a manifest."""
    IDENTIFIER = auto()      # foo, bar_baz, mymodule::example
    CLASS = auto()           # class
    DEFINE = auto()          # define
    INHERITS = auto()        # inherits
    VARIABLE = auto()        # $param1
    STRING = auto()          # "quoted" or 'quoted' (quotes kept)
    NUMBER = auto()          # 123, -0.5
    EQUALS = auto()          # =
    FARROW = auto()          # =>
    LBRACE = auto()          # {
    RBRACE = auto()          # }
    LBRACKET = auto()        # [
    RBRACKET = auto()        # ]
    LPAREN = auto()          # (
    RPAREN = auto()          # )
    LESS_THAN = auto()       # <
    GREATER_THAN = auto()    # >
    LESS_EQUAL = auto()      # <=
    GREATER_EQUAL = auto()   # >=
    NOT_EQUAL = auto()       # !=
    COMPARE_EQUAL = auto()   # ==
    NOT = auto()             # !
    QUESTION = auto()        # ?
    COLON = auto()           # :
    COMMA = auto()           # ,
    SEMICOLON = auto()       # ;
    AT = auto()              # @
    PLUS = auto()            # +
    MINUS = auto()           # - (standalone, not part of number)
    STAR = auto()            # *
    SLASH = auto()           # /
    MODULO = auto()          # %
    AMPERSAND = auto()       # &
    TILDE = auto()           # ~
    DOT = auto()             # . (method call after ] or ))
    PIPE = auto()            # | (lambda parameters)
    MATCH = auto()           # =~
    NOMATCH = auto()         # !~
    IN_EDGE = auto()         # ->
    IN_EDGE_SUB = auto()     # ~>
    OUT_EDGE = auto()        # <-
    OUT_EDGE_SUB = auto()    # <~
    LCOLLECT = auto()        # <|
    RCOLLECT = auto()        # |>
    LLCOLLECT = auto()       # <<|
    RRCOLLECT = auto()       # |>>
    REGEX = auto()           # /pattern/ (slashes kept)
    COMMENT = auto()         # # comment to end of line (with the #)
    WHITESPACE = auto()      # spaces/tabs between tokens
    INDENT = auto()          # spaces/tabs at the start of a line
    NEWLINE = auto()         # \n or \r\n
    EOF = auto()             # End of file


KEYWORDS = {
    "class": TokenType.CLASS,
    "define": TokenType.DEFINE,
    "inherits": TokenType.INHERITS,
}

# Longest operators are matched first. '->' is read with the minus sign.
OPERATORS: List[Tuple[str, TokenType]] = [
    ("<<|", TokenType.LLCOLLECT),
    ("|>>", TokenType.RRCOLLECT),
    ("<|", TokenType.LCOLLECT),
    ("|>", TokenType.RCOLLECT),
    ("=>", TokenType.FARROW),
    ("==", TokenType.COMPARE_EQUAL),
    ("=~", TokenType.MATCH),
    ("!=", TokenType.NOT_EQUAL),
    ("!~", TokenType.NOMATCH),
    ("<=", TokenType.LESS_EQUAL),
    (">=", TokenType.GREATER_EQUAL),
    ("~>", TokenType.IN_EDGE_SUB),
    ("<-", TokenType.OUT_EDGE),
    ("<~", TokenType.OUT_EDGE_SUB),
    ("=", TokenType.EQUALS),
    ("|", TokenType.PIPE),
    ("~", TokenType.TILDE),
    ("%", TokenType.MODULO),
    ("&", TokenType.AMPERSAND),
    (".", TokenType.DOT),
    ("{", TokenType.LBRACE),
    ("}", TokenType.RBRACE),
    ("[", TokenType.LBRACKET),
    ("]", TokenType.RBRACKET),
    ("(", TokenType.LPAREN),
    (")", TokenType.RPAREN),
    ("<", TokenType.LESS_THAN),
    (">", TokenType.GREATER_THAN),
    ("!", TokenType.NOT),
    ("?", TokenType.QUESTION),
    (":", TokenType.COLON),
    (",", TokenType.COMMA),
    (";", TokenType.SEMICOLON),
    ("@", TokenType.AT),
    ("+", TokenType.PLUS),
    ("*", TokenType.STAR),
    ("/", TokenType.SLASH),
]

# A '/' after one of these opens a regex literal rather than a division
REGEX_PRECEDERS = {
    TokenType.MATCH,
    TokenType.NOMATCH,
    TokenType.COMMA,
    TokenType.LBRACKET,
    TokenType.LPAREN,
    TokenType.LBRACE,
    TokenType.RBRACE,
}

TRIVIA = {TokenType.WHITESPACE, TokenType.INDENT, TokenType.NEWLINE, TokenType.COMMENT}


class LexerError(Exception):
    """Error during lexical analysis."""
    def __init__(self, message: str, line: int, column: int):
        self.line = line
        self.column = column
        super().__init__(f"Lexer error at line {line}, column {column}: {message}")


class Lexer:
    """
    Lossless tokenizer for brace-delimited manifests.

    Usage:
        lexer = Lexer(source_text)
        for token_type, value, line, column in lexer.tokenize():
            ...

    The lexer yields plain tuples; ``TokenStream.from_source`` wraps them
    into linked tokens.
    """

    # Characters that can continue an identifier (besides alphanumerics).
    # ':' is only accepted as part of a '::' scope separator.
    IDENT_SPECIAL = set("_-.")

    @staticmethod
    def _is_ident_start(ch: str) -> bool:
        """Check if character can start an identifier (letter or underscore)."""
        return ch == '_' or ch.isalpha()

    @staticmethod
    def _is_ident_cont(ch: str) -> bool:
        """Check if character can continue an identifier."""
        return ch.isalnum() or ch in Lexer.IDENT_SPECIAL

    def __init__(self, source: str, filename: str = "<unknown>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.length = len(source)
        self._last_code: Optional[Tuple[TokenType, str]] = None

    def _current(self) -> Optional[str]:
        """Get current character or None if at end."""
        if self.pos >= self.length:
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> Optional[str]:
        """Peek ahead by offset characters."""
        pos = self.pos + offset
        if pos >= self.length:
            return None
        return self.source[pos]

    def _advance(self) -> Optional[str]:
        """Advance one character and return it."""
        ch = self._current()
        if ch is not None:
            self.pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return ch

    def _read_while(self, predicate) -> str:
        start = self.pos
        while self._current() is not None and predicate(self._current()):
            self._advance()
        return self.source[start:self.pos]

    def _read_blank(self) -> str:
        """Read a run of spaces and tabs (a lone \\r counts as blank too)."""
        result = []
        while True:
            ch = self._current()
            if ch in (' ', '\t'):
                result.append(self._advance())
            elif ch == '\r' and self._peek() != '\n':
                result.append(self._advance())
            else:
                break
        return ''.join(result)

    def _read_string(self, quote_char: str) -> str:
        """Read a quoted string verbatim, quotes and escapes included."""
        start_line = self.line
        start_col = self.column
        start = self.pos

        # Skip opening quote
        self._advance()

        while True:
            ch = self._current()
            if ch is None:
                raise LexerError("Unterminated string", start_line, start_col)
            if ch == '\\':
                self._advance()
                if self._current() is not None:
                    self._advance()
                continue
            self._advance()
            if ch == quote_char:
                break

        return self.source[start:self.pos]

    def _read_identifier(self) -> str:
        """Read an identifier, including '::' scoped names like mod::thing."""
        result = []
        while True:
            ch = self._current()
            if ch is None:
                break
            if self._is_ident_cont(ch):
                result.append(ch)
                self._advance()
            elif ch == ':' and self._peek() == ':' and self._peek(2) is not None \
                    and self._is_ident_start(self._peek(2)):
                result.append(self._advance())
                result.append(self._advance())
            else:
                break
        return ''.join(result)

    def _read_number(self) -> str:
        """Read a number (integer or decimal, optionally negative)."""
        result = []
        if self._current() == '-':
            result.append(self._advance())

        has_dot = False
        while True:
            ch = self._current()
            if ch is None:
                break
            if ch.isdigit():
                result.append(ch)
                self._advance()
            elif ch == '.' and not has_dot and (self._peek() or '').isdigit():
                has_dot = True
                result.append(ch)
                self._advance()
            else:
                break

        return ''.join(result)

    def _read_comment(self) -> str:
        """Read a comment from # to end of line (the # is kept)."""
        return self._read_while(lambda ch: ch not in ('\n', '\r'))

    def _regex_end(self) -> Optional[int]:
        """Offset just past the closing '/' of a regex on this line, or None."""
        pos = self.pos + 1
        while pos < self.length:
            ch = self.source[pos]
            if ch == '\\':
                pos += 2
                continue
            if ch in ('\n', '\r'):
                return None
            if ch == '/':
                return pos + 1
            pos += 1
        return None

    def _regex_allowed(self) -> bool:
        last = self._last_code
        if last is None:
            return True
        # node /^web\d+$/ { ... }
        return last[0] in REGEX_PRECEDERS or last == (TokenType.IDENTIFIER, 'node')

    def _emit(self, kind: TokenType, value: str, line: int, column: int) -> Tuple[TokenType, str, int, int]:
        if kind not in TRIVIA:
            self._last_code = (kind, value)
        return (kind, value, line, column)

    def tokenize(self) -> Iterator[Tuple[TokenType, str, int, int]]:
        """Generate ``(type, value, line, column)`` tuples from the source."""
        at_line_start = True

        while True:
            ch = self._current()
            start_line = self.line
            start_col = self.column

            if ch is None:
                yield (TokenType.EOF, '', start_line, start_col)
                break

            # Blank runs: INDENT at the start of a line, WHITESPACE elsewhere
            if ch in (' ', '\t') or (ch == '\r' and self._peek() != '\n'):
                value = self._read_blank()
                kind = TokenType.INDENT if at_line_start else TokenType.WHITESPACE
                yield (kind, value, start_line, start_col)
                at_line_start = False
                continue

            at_line_start = False

            # Newline (\n or \r\n)
            if ch == '\n' or ch == '\r':
                value = self._advance()
                if value == '\r':
                    value += self._advance()
                yield (TokenType.NEWLINE, value, start_line, start_col)
                at_line_start = True
                continue

            if ch == '#':
                yield (TokenType.COMMENT, self._read_comment(), start_line, start_col)
                continue

            if ch in ('"', "'"):
                yield self._emit(TokenType.STRING, self._read_string(ch), start_line, start_col)
                continue

            if ch == '$':
                self._advance()
                name = self._read_identifier()
                yield self._emit(TokenType.VARIABLE, '$' + name, start_line, start_col)
                continue

            if ch == '-':
                # Negative number, '->' or standalone minus
                if self._peek() and self._peek().isdigit():
                    yield self._emit(TokenType.NUMBER, self._read_number(), start_line, start_col)
                elif self._peek() == '>':
                    self._advance()
                    self._advance()
                    yield self._emit(TokenType.IN_EDGE, '->', start_line, start_col)
                else:
                    self._advance()
                    yield self._emit(TokenType.MINUS, '-', start_line, start_col)
                continue

            if ch.isdigit():
                yield self._emit(TokenType.NUMBER, self._read_number(), start_line, start_col)
                continue

            if ch == '/' and self._regex_allowed():
                end = self._regex_end()
                if end is not None:
                    value = self.source[self.pos:end]
                    for _ in value:
                        self._advance()
                    yield self._emit(TokenType.REGEX, value, start_line, start_col)
                    continue

            # Leading '::' for top-scope names (::example)
            if ch == ':' and self._peek() == ':':
                self._advance()
                self._advance()
                value = '::' + self._read_identifier()
                yield self._emit(TokenType.IDENTIFIER, value, start_line, start_col)
                continue

            if self._is_ident_start(ch):
                value = self._read_identifier()
                kind = KEYWORDS.get(value, TokenType.IDENTIFIER)
                yield self._emit(kind, value, start_line, start_col)
                continue

            for text, kind in OPERATORS:
                if self.source.startswith(text, self.pos):
                    for _ in text:
                        self._advance()
                    yield self._emit(kind, text, start_line, start_col)
                    break
            else:
                raise LexerError(f"Unexpected character {ch!r}", start_line, start_col)

    def tokenize_all(self) -> List[Tuple[TokenType, str, int, int]]:
        """Convenience method to get all tokens as a list."""
        return list(self.tokenize())


def decode_source(filepath: str) -> Tuple[str, str]:
    """
    Read a manifest file and return ``(text, encoding)``.

    The encoding is what the file should be written back with: 'utf-8-sig'
    when it starts with a BOM, otherwise 'utf-8', falling back to 'latin-1'.
    Line endings are kept as they are.
    """
    with open(filepath, 'rb') as f:
        raw = f.read()

    encoding = 'utf-8-sig' if raw.startswith(codecs.BOM_UTF8) else 'utf-8'
    try:
        return raw.decode(encoding), encoding
    except UnicodeDecodeError:
        return raw.decode('latin-1'), 'latin-1'


def read_source(filepath: str) -> str:
    """Read a manifest file. Handles encoding fallback."""
    return decode_source(filepath)[0]
