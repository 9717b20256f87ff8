"""
Recursive descent parser for poseval expressions.

Converts a token stream into an Abstract Syntax Tree (AST). There is one
method per grammar production:

    expression     := addition EOF
    addition       := multiplication (('+' | '-') multiplication)*
    multiplication := unary (('*' | '/') unary)*
    unary          := ('+' | '-') unary | primary
    primary        := atomic chain_link*
    atomic         := NUMBER
                    | 'new' IDENT ('.' IDENT)* arguments
                    | IDENT arguments?
                    | '(' addition ')'
    chain_link     := '.' IDENT arguments?
    arguments      := '(' (addition (',' addition)*)? ')'

The parser does not recover from errors: the first problem raises a
ParserError and no partial tree is produced.
"""

from typing import List, Optional
from .tokens import Token, TokenType, SourceSpan
from .ast import (
    Expression, Addition, Multiplication, SignedUnary, Primary,
    NumberLiteral, Identifier, Parenthesized, Construction, ChainLink,
    Atom, Unary,
)
from .errors import (
    ParserError,
    error_unexpected_token,
    error_unexpected_eof,
    error_invalid_expression,
    error_trailing_input,
    error_nesting_too_deep,
)


class Parser:
    """
    Recursive descent parser for poseval expressions.

    Usage:
        parser = Parser(tokens)
        tree = parser.parse_expression()

    Precedence, lowest to highest:
        + -
        * /
        unary + -
        member access and calls
    """

    ADDITIVE = (TokenType.PLUS, TokenType.MINUS)
    MULTIPLICATIVE = (TokenType.STAR, TokenType.SLASH)

    ## signs, groups and argument lists deeper than this are rejected
    MAX_NESTING = 64

    def __init__(self, tokens: List[Token], source: Optional[str] = None):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token list must end with an EOF token")
        self.tokens = tokens
        self.source = source  # Original text, used for error source lines
        self.pos = 0
        self.depth = 0

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _is_at_end(self) -> bool:
        """Check if at end of tokens."""
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self._current().type == token_type

    def _check_any(self, *token_types: TokenType) -> bool:
        """Check if current token is any of given types."""
        return self._current().type in token_types

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        """Consume token of expected type, or raise error."""
        if self._check(token_type):
            return self._advance()
        self._error(expected)

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self._current().type in token_types:
            return self._advance()
        return None

    def _source_line(self, token: Token) -> Optional[str]:
        if self.source is None:
            return None
        lines = self.source.splitlines()
        line = token.span.start.line
        if 1 <= line <= len(lines):
            return lines[line - 1]
        return None

    def _describe(self, token: Token) -> str:
        if token.type in (TokenType.NUMBER, TokenType.IDENTIFIER):
            return f"{token.type.name} '{token.lexeme}'"
        return f"'{token.lexeme}'"

    def _error(self, expected: str) -> None:
        """Raise a parser error."""
        token = self._current()
        if token.type == TokenType.EOF:
            raise error_unexpected_eof(expected, token.span)
        raise error_unexpected_token(expected, self._describe(token), token.span,
                                     self._source_line(token))

    def _enter(self) -> None:
        """Track one more level of nesting, failing past MAX_NESTING."""
        if self.depth >= self.MAX_NESTING:
            token = self._current()
            raise error_nesting_too_deep(self.MAX_NESTING, token.span,
                                         self._source_line(token))
        self.depth += 1

    def _span_from(self, start: Token) -> SourceSpan:
        """Create a span from start token to the end of the last consumed token."""
        prev_pos = max(0, self.pos - 1)
        end_token = self.tokens[prev_pos]
        return SourceSpan(start.span.start, end_token.span.end)

    # =========================================================================
    # Expressions
    # =========================================================================

    def parse_expression(self) -> Expression:
        """Parse a complete expression; all input must be consumed."""
        start = self._current()
        if self._is_at_end():
            raise error_invalid_expression(start.span)
        root = self._parse_addition()
        if not self._is_at_end():
            token = self._current()
            raise error_trailing_input(self._describe(token), token.span,
                                       self._source_line(token))
        return Expression(span=self._span_from(start), root=root)

    def _parse_addition(self) -> Addition:
        start = self._current()
        self._enter()
        terms = [self._parse_multiplication()]
        operators = []
        while self._check_any(*self.ADDITIVE):
            operators.append(self._advance().type)
            terms.append(self._parse_multiplication())
        self.depth -= 1
        return Addition(span=self._span_from(start), terms=terms, operators=operators)

    def _parse_multiplication(self) -> Multiplication:
        start = self._current()
        terms = [self._parse_unary()]
        operators = []
        while self._check_any(*self.MULTIPLICATIVE):
            operators.append(self._advance().type)
            terms.append(self._parse_unary())
        return Multiplication(span=self._span_from(start), terms=terms, operators=operators)

    def _parse_unary(self) -> Unary:
        start = self._current()
        sign = self._match(*self.ADDITIVE)
        if sign:
            self._enter()
            operand = self._parse_unary()
            self.depth -= 1
            return SignedUnary(span=self._span_from(start), sign=sign.type, operand=operand)
        return self._parse_primary()

    def _parse_primary(self) -> Primary:
        start = self._current()
        atom = self._parse_atomic()
        chain = []
        while self._check(TokenType.DOT):
            chain.append(self._parse_chain_link())
        return Primary(span=self._span_from(start), atom=atom, chain=chain)

    def _parse_atomic(self) -> Atom:
        start = self._current()

        # Number literal
        if self._check(TokenType.NUMBER):
            token = self._advance()
            return NumberLiteral(span=token.span, value=token.value)

        # Object construction: new Type(args) or new pkg.Type(args)
        if self._match(TokenType.NEW):
            type_path = [self._consume(TokenType.IDENTIFIER, "type name").value]
            while self._match(TokenType.DOT):
                type_path.append(self._consume(TokenType.IDENTIFIER, "type name").value)
            arguments = self._parse_arguments()
            return Construction(span=self._span_from(start), type_path=type_path,
                                arguments=arguments)

        # Identifier, optionally called
        if self._check(TokenType.IDENTIFIER):
            token = self._advance()
            arguments = None
            if self._check(TokenType.LPAREN):
                arguments = self._parse_arguments()
            return Identifier(span=self._span_from(start), name=token.value,
                              arguments=arguments, name_span=token.span)

        # Grouped expression
        if self._match(TokenType.LPAREN):
            inner = self._parse_addition()
            self._consume(TokenType.RPAREN, "')'")
            return Parenthesized(span=self._span_from(start), expression=inner)

        self._error("expression")

    def _parse_chain_link(self) -> ChainLink:
        start = self._consume(TokenType.DOT, "'.'")
        member = self._consume(TokenType.IDENTIFIER, "member name")
        arguments = None
        if self._check(TokenType.LPAREN):
            arguments = self._parse_arguments()
        return ChainLink(span=self._span_from(start), member=member.value,
                         arguments=arguments, member_span=member.span)

    def _parse_arguments(self) -> List[Addition]:
        """Parse a parenthesized, comma-separated argument list."""
        self._consume(TokenType.LPAREN, "'('")
        arguments = []
        if not self._check(TokenType.RPAREN):
            arguments.append(self._parse_addition())
            while self._match(TokenType.COMMA):
                arguments.append(self._parse_addition())
        self._consume(TokenType.RPAREN, "')' or ','")
        return arguments


def parse(tokens: List[Token], source: Optional[str] = None) -> Expression:
    """
    Convenience function to parse tokens into an expression tree.

    Args:
        tokens: List of tokens from the lexer, ending with EOF
        source: Optional original text for error messages

    Returns:
        Parsed Expression AST

    Raises:
        ParserError: If parsing fails
    """
    parser = Parser(tokens, source)
    return parser.parse_expression()


__all__ = ["Parser", "parse", "ParserError"]
