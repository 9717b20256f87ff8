"""
poseval runtime - tree-walking evaluation of parsed expressions.

This module provides:
- Evaluator: Evaluates expression trees to numbers and geometry values
- Value: Runtime value wrappers tagged with a ValueKind
- EvaluationContext: Per-call state and the host resolve callback
- BuiltinRegistry: The closed set of constructors, functions and methods
- resolve_and_evaluate: Recursive resolution of identifiers through
  their definitions
"""

from .values import (
    Value,
    ValueKind,
    PendingName,
    UNRESOLVED,
    NULL,
    number_val,
    rotation_val,
    translation_val,
    pose_val,
    pending_val,
    wrap_value,
    is_live,
    to_python,
)

from .context import (
    EvaluationContext,
    ResolveFn,
    create_context,
)

from .builtins import (
    ALLOWED_METHODS,
    BuiltinFunction,
    BuiltinRegistry,
    get_builtin_registry,
    call_builtin,
    call_constructor,
    call_method,
)

from .interpreter import (
    Evaluator,
    EvaluationResult,
    evaluate_source,
    evaluate_expression,
    get_identifiers,
)

from .resolver import (
    resolve_and_evaluate,
    resolve_and_evaluate_expression,
)

__all__ = [
    # Values
    'Value',
    'ValueKind',
    'PendingName',
    'UNRESOLVED',
    'NULL',
    'number_val',
    'rotation_val',
    'translation_val',
    'pose_val',
    'pending_val',
    'wrap_value',
    'is_live',
    'to_python',

    # Context
    'EvaluationContext',
    'ResolveFn',
    'create_context',

    # Builtins
    'ALLOWED_METHODS',
    'BuiltinFunction',
    'BuiltinRegistry',
    'get_builtin_registry',
    'call_builtin',
    'call_constructor',
    'call_method',

    # Evaluator
    'Evaluator',
    'EvaluationResult',
    'evaluate_source',
    'evaluate_expression',
    'get_identifiers',

    # Resolver
    'resolve_and_evaluate',
    'resolve_and_evaluate_expression',
]
