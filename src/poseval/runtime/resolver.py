"""
Recursive definition resolution.

Given an expression taken from a document, look up where each identifier in
it is defined, read the right-hand side of that definition, evaluate it
(recursively, up to a depth bound) and feed the results back into the
evaluation of the original expression.

The host collaborators are typically asynchronous editor services, so the
driver is a coroutine. Identifiers are resolved one at a time, which keeps
at most one request outstanding against the host.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Optional

from .values import Value, UNRESOLVED, to_python
from .interpreter import evaluate_source
from ..config import get_config
from ..lexer import tokenize
from ..source import DocumentSpan, Location
from ..tokens import TokenType

logger = logging.getLogger(__name__)

## lookup_definition(location) -> Location | None, sync or async
LookupDefinition = Callable[[Location], Any]
## read_assignment_rhs(location) -> DocumentSpan | None, sync or async
ReadAssignmentRhs = Callable[[Location], Any]


async def _call_collaborator(name: str, fn: Callable, arg: Any) -> Any:
    """Call a host collaborator; failures are logged and read as 'not found'."""
    try:
        result = fn(arg)
        if inspect.isawaitable(result):
            result = await result
    except Exception:
        logger.warning("%s failed for %s", name, arg, exc_info=True)
        return None
    return result


def _cancelled(cancel: Optional[asyncio.Event]) -> bool:
    return cancel is not None and cancel.is_set()


async def resolve_and_evaluate(
    span: DocumentSpan,
    lookup_definition: LookupDefinition,
    read_assignment_rhs: ReadAssignmentRhs,
    max_depth: Optional[int] = None,
    cancel: Optional[asyncio.Event] = None,
) -> Value:
    """
    Evaluate the expression in `span`, resolving identifiers through their
    definitions.

    Args:
        span: The expression text and where it sits in its document
        lookup_definition: Maps the location of an identifier to the
            location of its definition, or None
        read_assignment_rhs: Maps a definition location to the span of the
            right-hand side assigned there, or None
        max_depth: How many definition hops to follow; 0 resolves nothing.
            Defaults to the configured POSEVAL_MAX_DEPTH.
        cancel: Optional event; once set, resolution stops at the next
            identifier and the result is UNRESOLVED

    Returns:
        The value of the expression; UNRESOLVED if it cannot be determined
    """
    if max_depth is None:
        max_depth = get_config().max_depth
    if _cancelled(cancel):
        return UNRESOLVED

    lexed = tokenize(span.text)
    if not lexed.ok:
        logger.debug("not resolving %r: it does not lex", span.text)
        return UNRESOLVED

    # Keyed by the end offset of the identifier. A qualified range such as
    # `Constants.kSpeed` ends where its last segment does, and that segment
    # is where the definition lookup lands.
    resolved: Dict[int, Value] = {}
    identifiers = [tok for tok in lexed.tokens if tok.type == TokenType.IDENTIFIER]

    if max_depth <= 0:
        if identifiers:
            logger.debug("depth limit reached; %d identifier(s) left unresolved in %r",
                         len(identifiers), span.text)
    else:
        for token in identifiers:
            if _cancelled(cancel):
                logger.debug("resolution of %r cancelled", span.text)
                return UNRESOLVED

            definition = await _call_collaborator(
                "lookup_definition", lookup_definition, span.location_at(token.start_offset))
            if definition is None:
                continue

            rhs = await _call_collaborator(
                "read_assignment_rhs", read_assignment_rhs, definition)
            if rhs is None:
                continue

            value = await resolve_and_evaluate(
                rhs, lookup_definition, read_assignment_rhs, max_depth - 1, cancel)
            if value.is_live:
                resolved[token.end_offset] = value

        if _cancelled(cancel):
            logger.debug("resolution of %r cancelled", span.text)
            return UNRESOLVED

    result = evaluate_source(span.text, lambda start, end: resolved.get(end))
    if not result.success:
        return UNRESOLVED
    return result.value


async def resolve_and_evaluate_expression(
    span: DocumentSpan,
    lookup_definition: LookupDefinition,
    read_assignment_rhs: ReadAssignmentRhs,
    max_depth: Optional[int] = None,
    cancel: Optional[asyncio.Event] = None,
) -> Any:
    """Like resolve_and_evaluate, but returns the Python result or None."""
    value = await resolve_and_evaluate(
        span, lookup_definition, read_assignment_rhs, max_depth, cancel)
    return to_python(value)
