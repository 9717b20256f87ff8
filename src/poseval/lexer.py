"""
Lexer for poseval expressions.

Converts expression text into a stream of tokens for the parser.
Supports:
- Decimal number literals (digits, optionally followed by '.' digits)
- Identifiers and the `new` keyword
- Member access, call and grouping punctuation: . ( ) ,
- Arithmetic operators: + - * /

Unlike the parser, the lexer never raises: characters it cannot match are
recorded as diagnostics and skipped, so callers can still inspect the
identifiers that did lex.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Iterator
from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, KEYWORDS, SINGLE_CHAR_TOKENS,
)
from .errors import (
    Diagnostic,
    DiagnosticCollector,
    error_unexpected_character,
)

logger = logging.getLogger(__name__)


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def _is_ident_start(ch: str) -> bool:
    return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')


def _is_ident_char(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)


@dataclass
class LexResult:
    """Tokens produced by the lexer plus any lexical diagnostics."""
    tokens: List[Token]
    errors: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class Lexer:
    """
    Tokenizer for poseval expressions.

    Usage:
        lexer = Lexer(text)
        result = lexer.tokenize()
        if result.ok:
            tree = parse(result.tokens)
    """

    def __init__(self, source: str, filename: Optional[str] = None,
                 max_errors: int = 20):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list
        self.diagnostics = DiagnosticCollector(max_errors=max_errors)

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        """Create a span from start to current position."""
        return SourceSpan(start, self._location())

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_at_end(self) -> bool:
        """Check if we've reached end of source."""
        return self.pos >= len(self.source)

    def _skip_whitespace(self) -> None:
        while not self._is_at_end() and self._peek().isspace():
            self._advance()

    def _make_token(self, token_type: TokenType, value, start: SourceLocation,
                    lexeme: Optional[str] = None) -> Token:
        """Create a token from start to current position."""
        if lexeme is None:
            lexeme = self.source[start.offset:self.pos]
        return Token(token_type, value, lexeme, self._span(start))

    def _scan_number(self) -> Token:
        """Scan a number literal: digits, optionally followed by '.' digits."""
        start = self._location()

        while _is_digit(self._peek()):
            self._advance()

        # A '.' only belongs to the number when digits follow it
        if self._peek() == '.' and _is_digit(self._peek(1)):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()

        lexeme = self.source[start.offset:self.pos]
        return self._make_token(TokenType.NUMBER, float(lexeme), start, lexeme)

    def _scan_identifier_or_keyword(self) -> Token:
        """Scan an identifier or keyword."""
        start = self._location()

        while _is_ident_char(self._peek()):
            self._advance()

        lexeme = self.source[start.offset:self.pos]

        if lexeme in KEYWORDS:
            return self._make_token(KEYWORDS[lexeme], lexeme, start, lexeme)

        return self._make_token(TokenType.IDENTIFIER, lexeme, start, lexeme)

    def _scan_token(self) -> Optional[Token]:
        """Scan the next token, or return None after recording a bad character."""
        self._skip_whitespace()

        if self._is_at_end():
            return self._make_token(TokenType.EOF, None, self._location(), "")

        start = self._location()
        ch = self._peek()

        if _is_digit(ch):
            return self._scan_number()

        if _is_ident_start(ch):
            return self._scan_identifier_or_keyword()

        self._advance()

        if ch in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[ch], ch, start)

        # Unknown character
        self.diagnostics.add_error(error_unexpected_character(
            ch, self._span(start), self.get_source_line(start.line)
        ))
        return None

    def tokenize(self) -> LexResult:
        """Tokenize the entire source, collecting errors instead of raising."""
        tokens = []
        for token in self:
            tokens.append(token)
        if self.diagnostics.has_errors:
            logger.debug("lexing %r produced %d error(s)",
                         self.source, self.diagnostics.error_count)
        return LexResult(tokens, list(self.diagnostics.diagnostics))

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens, ending with EOF."""
        while True:
            if self.diagnostics.should_stop:
                # Give up on the rest of the input once the error limit is hit
                self.pos = len(self.source)
            token = self._scan_token()
            if token is None:
                continue
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str, filename: Optional[str] = None) -> LexResult:
    """
    Convenience function to tokenize an expression.

    Args:
        source: The expression text to tokenize
        filename: Optional filename for error messages

    Returns:
        LexResult holding the tokens (always ending in EOF) and any
        lexical diagnostics
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize()


def get_identifiers(source: str) -> List[Token]:
    """Return the identifier tokens of an expression, in source order."""
    result = tokenize(source)
    return [tok for tok in result.tokens if tok.type == TokenType.IDENTIFIER]
