"""
Tree-walking evaluator for poseval expressions.

Evaluates AST nodes to numbers and geometry values. Names the evaluator
does not know are handed to a host-supplied resolve callback; anything that
still cannot be determined becomes UNRESOLVED and absorbs the rest of the
computation. The evaluator never raises for a well-formed tree.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional
import logging

from .values import (
    Value, ValueKind, PendingName, UNRESOLVED,
    number_val, pending_val, wrap_value, to_python,
)
from .context import EvaluationContext, ResolveFn, create_context
from .builtins import (
    call_builtin, call_constructor, call_method, get_builtin_registry,
)

from ..ast import (
    AstNode, Expression, Addition, Multiplication, SignedUnary, Primary,
    NumberLiteral, Identifier, Parenthesized, Construction, ChainLink,
)
from ..errors import Diagnostic, ExprError
from ..geometry import fdiv
from ..lexer import tokenize, get_identifiers
from ..parser import parse
from ..tokens import TokenType

logger = logging.getLogger(__name__)

## errors raised by geometry or math operations that mean "no value"
OPERATION_ERRORS = (ArithmeticError, ValueError, TypeError)

## plain fields readable on live values without a call
VALUE_FIELDS = {
    ValueKind.ROTATION: ("value", "cos", "sin"),
    ValueKind.TRANSLATION: ("x", "y"),
    ValueKind.POSE: ("translation", "rotation"),
}


@dataclass
class EvaluationResult:
    """Result of evaluating an expression."""
    success: bool
    value: Value = UNRESOLVED
    diagnostics: List[Diagnostic] = field(default_factory=list)
    unresolved_names: List[str] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def data(self) -> Any:
        """The Python result (float or geometry object), or None."""
        return to_python(self.value)


class Evaluator:
    """
    Tree-walking evaluator.

    Evaluates AST nodes by dispatching to node-specific methods. An
    Evaluator holds no per-call state and can be reused.
    """

    def __init__(self):
        self.registry = get_builtin_registry()

    def evaluate(self, tree: AstNode, resolve: Optional[ResolveFn] = None,
                 source: str = "") -> Value:
        """Evaluate a parsed tree, using `resolve` for unknown names."""
        return self.evaluate_in(tree, create_context(resolve, source))

    def evaluate_in(self, tree: AstNode, ctx: EvaluationContext) -> Value:
        """Evaluate a parsed tree in an existing context."""
        return self._evaluate(tree, ctx)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _evaluate(self, node: AstNode, ctx: EvaluationContext) -> Value:
        if isinstance(node, Expression):
            return self._evaluate(node.root, ctx)
        elif isinstance(node, Addition):
            return self._eval_addition(node, ctx)
        elif isinstance(node, Multiplication):
            return self._eval_multiplication(node, ctx)
        elif isinstance(node, SignedUnary):
            return self._eval_signed_unary(node, ctx)
        elif isinstance(node, Primary):
            return self._eval_primary(node, ctx)
        elif isinstance(node, NumberLiteral):
            return number_val(node.value)
        elif isinstance(node, Identifier):
            return self._eval_identifier(node, ctx)
        elif isinstance(node, Parenthesized):
            return self._evaluate(node.expression, ctx)
        elif isinstance(node, Construction):
            return self._eval_construction(node, ctx)
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def _eval_addition(self, node: Addition, ctx: EvaluationContext) -> Value:
        result = self._evaluate(node.terms[0], ctx)
        for op, term in zip(node.operators, node.terms[1:]):
            right = self._evaluate(term, ctx)
            if not (result.is_number and right.is_number):
                return UNRESOLVED
            if op == TokenType.PLUS:
                result = number_val(result.data + right.data)
            else:
                result = number_val(result.data - right.data)
        return result

    def _eval_multiplication(self, node: Multiplication, ctx: EvaluationContext) -> Value:
        result = self._evaluate(node.terms[0], ctx)
        for op, term in zip(node.operators, node.terms[1:]):
            right = self._evaluate(term, ctx)
            if not (result.is_number and right.is_number):
                return UNRESOLVED
            if op == TokenType.STAR:
                result = number_val(result.data * right.data)
            else:
                result = number_val(fdiv(result.data, right.data))
        return result

    def _eval_signed_unary(self, node: SignedUnary, ctx: EvaluationContext) -> Value:
        operand = self._evaluate(node.operand, ctx)
        if not operand.is_number:
            return UNRESOLVED
        if node.sign == TokenType.MINUS:
            return number_val(-operand.data)
        return operand

    # =========================================================================
    # Atoms
    # =========================================================================

    def _eval_arguments(self, arguments: List[AstNode],
                        ctx: EvaluationContext) -> Optional[List[Value]]:
        """Evaluate call arguments; None if any of them is not a live value."""
        values = []
        for arg in arguments:
            value = self._evaluate(arg, ctx)
            if not value.is_live:
                return None
            values.append(value)
        return values

    def _guarded(self, what: str, call, *args) -> Value:
        """Run a builtin call, mapping a miss or an operation error to UNRESOLVED."""
        try:
            result = call(*args)
        except OPERATION_ERRORS as e:
            logger.debug("%s failed: %s", what, e)
            return UNRESOLVED
        if result is None:
            logger.debug("no builtin matches %s", what)
            return UNRESOLVED
        return result

    def _eval_identifier(self, ident: Identifier, ctx: EvaluationContext) -> Value:
        if ident.is_call:
            args = self._eval_arguments(ident.arguments, ctx)
            if args is None:
                return UNRESOLVED
            return self._guarded(f"{ident.name}/{len(args)}", call_builtin, ident.name, args)

        constant = self.registry.get_constant(ident.name)
        if constant is not None:
            return constant

        name_span = ident.name_span or ident.span
        resolved = ctx.lookup(name_span.start.offset, name_span.end.offset)
        if resolved is not None:
            return resolved

        return pending_val(ident.name, name_span.start.offset)

    def _eval_construction(self, node: Construction, ctx: EvaluationContext) -> Value:
        args = self._eval_arguments(node.arguments, ctx)
        if args is None:
            return UNRESOLVED
        return self._guarded(f"new {node.type_name}/{len(args)}",
                             call_constructor, node.type_name, args)

    # =========================================================================
    # Chains
    # =========================================================================

    def _eval_primary(self, node: Primary, ctx: EvaluationContext) -> Value:
        value = self._evaluate(node.atom, ctx)
        for link in node.chain:
            if value.kind in (ValueKind.UNRESOLVED, ValueKind.NULL):
                return UNRESOLVED
            if value.kind == ValueKind.PENDING:
                value = self._eval_pending_link(value.data, link, ctx)
            else:
                value = self._eval_live_link(value, link, ctx)
        if value.kind == ValueKind.PENDING:
            ctx.note_unresolved(value.data.name)
        return value

    def _eval_pending_link(self, pending: PendingName, link: ChainLink,
                           ctx: EvaluationContext) -> Value:
        qualified = pending.extend(link.member)

        if link.is_call:
            args = self._eval_arguments(link.arguments, ctx)
            if args is None:
                return UNRESOLVED
            return self._guarded(f"{qualified.name}/{len(args)}",
                                 call_builtin, qualified.name, args)

        member_span = link.member_span or link.span
        resolved = ctx.lookup(qualified.start, member_span.end.offset)
        if resolved is not None:
            return resolved

        constant = self.registry.get_constant(qualified.name)
        if constant is not None:
            return constant

        return Value(qualified, ValueKind.PENDING)

    def _eval_live_link(self, receiver: Value, link: ChainLink,
                        ctx: EvaluationContext) -> Value:
        if link.is_call:
            args = self._eval_arguments(link.arguments, ctx)
            if args is None:
                return UNRESOLVED
            return self._guarded(f"{receiver.kind.value}.{link.member}/{len(args)}",
                                 call_method, receiver, link.member, args)

        if link.member in VALUE_FIELDS.get(receiver.kind, ()):
            return wrap_value(getattr(receiver.data, link.member))
        logger.debug("%s has no field %s", receiver.kind.value, link.member)
        return UNRESOLVED


# Shared evaluator; it holds no per-call state
_evaluator = Evaluator()


def evaluate_source(source: str, resolve: Optional[ResolveFn] = None) -> EvaluationResult:
    """
    Lex, parse and evaluate an expression in one call.

    This is the simplest way to evaluate an expression:

        from poseval import evaluate_source

        result = evaluate_source("new Rotation2d(0).getDegrees()")
        if result.success:
            print(result.data)
        else:
            print(result.error_message)

    Args:
        source: The expression text
        resolve: Optional callback resolve(start, end) returning the value
            of the source range [start, end), or None if unknown

    Returns:
        EvaluationResult with the value and any diagnostics
    """
    # Tokenize
    lexed = tokenize(source)
    if not lexed.ok:
        return EvaluationResult(
            success=False,
            diagnostics=lexed.errors,
            error_message=f"Lexer error: {lexed.errors[0].message}",
        )

    # Parse
    try:
        tree = parse(lexed.tokens, source=source)
    except ExprError as e:
        logger.debug("parse failed for %r: %s", source, e.diagnostic.message)
        return EvaluationResult(
            success=False,
            diagnostics=[e.diagnostic],
            error_message=f"Parser error: {e.diagnostic.message}",
        )

    # Evaluate
    ctx = create_context(resolve, source)
    value = _evaluator.evaluate_in(tree, ctx)
    if not value.is_live:
        return EvaluationResult(
            success=False,
            value=value,
            unresolved_names=ctx.unresolved_names,
            error_message="could not determine value",
        )
    return EvaluationResult(success=True, value=value,
                            unresolved_names=ctx.unresolved_names)


def evaluate_expression(source: str, resolve: Optional[ResolveFn] = None) -> Any:
    """
    Evaluate an expression to a float, Rotation2d, Translation2d or Pose2d.

    Returns None when the text does not lex or parse, or its value cannot be
    determined.
    """
    return evaluate_source(source, resolve).data
