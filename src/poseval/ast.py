"""
Abstract Syntax Tree (AST) node definitions for poseval expressions.

The tree mirrors the grammar one node per production, so the evaluator can
walk it directly:

    Expression -> Addition -> Multiplication -> SignedUnary | Primary
    Primary    -> atom (NumberLiteral | Identifier | Parenthesized |
                  Construction) followed by a chain of ChainLinks
"""

from dataclasses import dataclass, field
from typing import Optional, List, Union, Any
from abc import ABC
from .tokens import SourceSpan, TokenType


# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode(ABC):
    """Base class for all AST nodes."""
    span: SourceSpan  # Source location for error reporting

    @property
    def start_offset(self) -> int:
        return self.span.start.offset

    @property
    def end_offset(self) -> int:
        return self.span.end.offset

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


# =============================================================================
# Atoms
# =============================================================================

@dataclass
class NumberLiteral(AstNode):
    """A decimal number literal (e.g., 42, 3.5)."""
    value: float


@dataclass
class Identifier(AstNode):
    """
    A bare name, optionally called.

    `arguments` is None for a plain reference (`pose`) and a list, possibly
    empty, for a call (`foo()`, `foo(1, 2)`).
    """
    name: str
    arguments: Optional[List["Addition"]] = None
    name_span: Optional[SourceSpan] = None  # span of the name token alone

    @property
    def is_call(self) -> bool:
        return self.arguments is not None


@dataclass
class Parenthesized(AstNode):
    """A grouped sub-expression: ( addition )."""
    expression: "Addition"


@dataclass
class Construction(AstNode):
    """An object construction: new Type(args) or new pkg.Type(args)."""
    type_path: List[str]
    arguments: List["Addition"] = field(default_factory=list)

    @property
    def type_name(self) -> str:
        """The dotted type name, e.g. 'Rotation2d' or 'geometry.Pose2d'."""
        return ".".join(self.type_path)


Atom = Union[NumberLiteral, Identifier, Parenthesized, Construction]


# =============================================================================
# Postfix chains
# =============================================================================

@dataclass
class ChainLink(AstNode):
    """
    One member access in a chain: .name or .name(args).

    As with Identifier, `arguments` is None for field access and a list for
    a method call.
    """
    member: str
    arguments: Optional[List["Addition"]] = None
    member_span: Optional[SourceSpan] = None  # span of the member name token

    @property
    def is_call(self) -> bool:
        return self.arguments is not None


@dataclass
class Primary(AstNode):
    """An atom followed by zero or more chain links."""
    atom: Atom
    chain: List[ChainLink] = field(default_factory=list)


# =============================================================================
# Operators
# =============================================================================

@dataclass
class SignedUnary(AstNode):
    """A unary plus or minus applied to another unary expression."""
    sign: TokenType  # PLUS or MINUS
    operand: Union["SignedUnary", Primary]


Unary = Union[SignedUnary, Primary]


@dataclass
class Multiplication(AstNode):
    """A left-associative chain of * and / over unary expressions."""
    terms: List[Unary]
    operators: List[TokenType] = field(default_factory=list)  # STAR or SLASH

    def __post_init__(self):
        if len(self.operators) != len(self.terms) - 1:
            raise ValueError(
                f"Multiplication needs {len(self.terms) - 1} operator(s), "
                f"got {len(self.operators)}"
            )


@dataclass
class Addition(AstNode):
    """A left-associative chain of + and - over multiplications."""
    terms: List[Multiplication]
    operators: List[TokenType] = field(default_factory=list)  # PLUS or MINUS

    def __post_init__(self):
        if len(self.operators) != len(self.terms) - 1:
            raise ValueError(
                f"Addition needs {len(self.terms) - 1} operator(s), "
                f"got {len(self.operators)}"
            )


@dataclass
class Expression(AstNode):
    """The root of a parsed expression."""
    root: Addition


# =============================================================================
# Visitor Helpers
# =============================================================================

class PrintVisitor(AstVisitor):
    """Debug visitor that renders the AST structure as indented lines."""

    def __init__(self, indent: int = 0, lines: Optional[List[str]] = None):
        self.indent = indent
        self.lines = lines if lines is not None else []

    def _print(self, text: str) -> None:
        self.lines.append("  " * self.indent + text)

    def _child(self) -> "PrintVisitor":
        return PrintVisitor(self.indent + 2, self.lines)

    def generic_visit(self, node: AstNode) -> None:
        self._print(f"{node.__class__.__name__}")
        for name, value in node.__dict__.items():
            if name.endswith("span"):
                continue
            if isinstance(value, AstNode):
                self._print(f"  {name}:")
                value.accept(self._child())
            elif isinstance(value, list):
                self._print(f"  {name}: [")
                for item in value:
                    if isinstance(item, AstNode):
                        item.accept(self._child())
                    elif isinstance(item, TokenType):
                        self._print(f"    {item.name}")
                    else:
                        self._print(f"    {item!r}")
                self._print("  ]")
            elif isinstance(value, TokenType):
                self._print(f"  {name}: {value.name}")
            else:
                self._print(f"  {name}: {value!r}")


def format_ast(node: AstNode) -> str:
    """Render an AST node as an indented multi-line string."""
    visitor = PrintVisitor()
    node.accept(visitor)
    return "\n".join(visitor.lines)


def print_ast(node: AstNode) -> None:
    """Print an AST node for debugging."""
    print(format_ast(node))
