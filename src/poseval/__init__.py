"""
poseval - evaluate Java-style 2D geometry expressions.

This package provides:
- Geometry: immutable Rotation2d, Translation2d and Pose2d value types
- Lexer: Tokenizes expression text
- Parser: Builds an AST from tokens
- Evaluator: Computes a number or geometry value from the AST
- Resolver: Follows identifiers to their definitions through host services

Usage:
    from poseval import evaluate_expression

    evaluate_expression("2 + 3 * 4")                          # 14.0
    evaluate_expression("Rotation2d.fromDegrees(90)")         # Rotation2d(...)
    evaluate_expression("new Pose2d(1, 2, Rotation2d.kZero).getX()")  # 1.0
    evaluate_expression("foo")                                # None

    # Names the evaluator does not know can be supplied by the caller
    text = "pose.getRotation().getDegrees()"
    evaluate_expression(text, lambda start, end: my_values.get(text[start:end]))
"""

from .geometry import (
    Rotation2d,
    Translation2d,
    Pose2d,
)

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
)

from .lexer import (
    Lexer,
    LexResult,
    tokenize,
    get_identifiers,
)

from .parser import (
    Parser,
    parse,
)

from .ast import (
    AstNode,
    AstVisitor,
    Expression,
    Addition,
    Multiplication,
    SignedUnary,
    Primary,
    NumberLiteral,
    Identifier,
    Parenthesized,
    Construction,
    ChainLink,
    print_ast,
    format_ast,
)

from .errors import (
    Diagnostic,
    DiagnosticCollector,
    ErrorSeverity,
    ExprError,
    LexerError,
    ParserError,
)

from .runtime import (
    Value,
    ValueKind,
    UNRESOLVED,
    NULL,
    Evaluator,
    EvaluationResult,
    evaluate_source,
    evaluate_expression,
    resolve_and_evaluate,
    resolve_and_evaluate_expression,
)

from .source import (
    Position,
    Location,
    DocumentSpan,
    TextDocumentReader,
    HostServices,
    find_assignment_rhs,
)

from .config import (
    EvaluatorConfig,
    get_config,
)

__version__ = "0.1.0"

__all__ = [
    # Geometry
    'Rotation2d',
    'Translation2d',
    'Pose2d',

    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',
    'SourceSpan',

    # Lexer
    'Lexer',
    'LexResult',
    'tokenize',
    'get_identifiers',

    # Parser
    'Parser',
    'parse',

    # AST
    'AstNode',
    'AstVisitor',
    'Expression',
    'Addition',
    'Multiplication',
    'SignedUnary',
    'Primary',
    'NumberLiteral',
    'Identifier',
    'Parenthesized',
    'Construction',
    'ChainLink',
    'print_ast',
    'format_ast',

    # Errors
    'Diagnostic',
    'DiagnosticCollector',
    'ErrorSeverity',
    'ExprError',
    'LexerError',
    'ParserError',

    # Runtime
    'Value',
    'ValueKind',
    'UNRESOLVED',
    'NULL',
    'Evaluator',
    'EvaluationResult',
    'evaluate_source',
    'evaluate_expression',
    'resolve_and_evaluate',
    'resolve_and_evaluate_expression',

    # Source helpers
    'Position',
    'Location',
    'DocumentSpan',
    'TextDocumentReader',
    'HostServices',
    'find_assignment_rhs',

    # Config
    'EvaluatorConfig',
    'get_config',
]
