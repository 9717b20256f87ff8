"""
Evaluation context for the expression evaluator.

Holds the per-call state of one evaluation: the host's resolve callback
and a record of the names that could not be resolved.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional
import logging

from .values import Value, wrap_value

logger = logging.getLogger(__name__)

## resolve(start, end) -> value for the source range [start, end), or None
ResolveFn = Callable[[int, int], Any]


@dataclass
class EvaluationContext:
    """
    Per-evaluation state.

    A fresh context is created for every call, so evaluations never share
    anything but the (immutable) builtin registry.
    """
    resolve: Optional[ResolveFn] = None
    source: str = ""
    unresolved_names: List[str] = field(default_factory=list)

    def lookup(self, start: int, end: int) -> Optional[Value]:
        """
        Ask the host for the value of the source range [start, end).

        Returns None when there is no resolver, the host has no value, or
        the host callback raised. An explicit null from the host comes back
        as the NULL value.
        """
        if self.resolve is None:
            return None
        try:
            result = self.resolve(start, end)
        except Exception:
            logger.warning("resolve callback failed for %r",
                           self.source[start:end], exc_info=True)
            return None
        if result is None:
            return None
        return wrap_value(result)

    def note_unresolved(self, name: str) -> None:
        if name not in self.unresolved_names:
            logger.debug("could not resolve %s", name)
            self.unresolved_names.append(name)


def create_context(resolve: Optional[ResolveFn] = None, source: str = "") -> EvaluationContext:
    """Create a fresh evaluation context."""
    return EvaluationContext(resolve=resolve, source=source)
