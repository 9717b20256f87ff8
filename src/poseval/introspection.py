"""
Introspection API for tools that need to know what poseval can evaluate.

Usage:
    from poseval.introspection import (
        get_api_reference,
        list_functions,
        describe_function,
    )

    # Every static function, by qualified name
    for name in list_functions():
        print(name)

    # Human-readable overloads of one function
    print(describe_function("Rotation2d.fromDegrees"))
"""

from typing import Any, Dict, List, Optional
import json

from .runtime.builtins import ALLOWED_METHODS, BuiltinFunction, get_builtin_registry
from .runtime.values import ValueKind


def _format_signature(func: BuiltinFunction, prefix: str = "") -> str:
    return f"{prefix}{func.signature}"


def _func_to_dict(func: BuiltinFunction) -> Dict[str, Any]:
    return {
        "name": func.name,
        "arity": func.arity,
        "params": [k.value for k in func.param_kinds] if func.param_kinds is not None else None,
        "signature": func.signature,
        "description": func.doc,
    }


def _format_constant(value) -> str:
    if value.kind == ValueKind.NULL:
        return "null"
    return repr(value.data)


def list_functions() -> List[str]:
    """List the qualified names of all static functions."""
    return sorted({f.name for f in get_builtin_registry().functions()})


def list_constructors() -> List[str]:
    """List the type names that can be built with `new`."""
    return sorted({f.name for f in get_builtin_registry().constructors()})


def list_constants() -> List[str]:
    """List the names of all constants."""
    return sorted(get_builtin_registry().constants())


def list_methods(kind: Optional[ValueKind] = None) -> Dict[str, List[str]]:
    """
    List callable instance methods, grouped by receiver type name.

    Args:
        kind: Restrict the listing to one value kind
    """
    result: Dict[str, List[str]] = {}
    for method_kind, func in get_builtin_registry().methods():
        if kind is not None and method_kind != kind:
            continue
        if func.name not in ALLOWED_METHODS:
            continue
        names = result.setdefault(method_kind.value, [])
        if func.name not in names:
            names.append(func.name)
    return {k: sorted(v) for k, v in result.items()}


def describe_function(name: str) -> Optional[str]:
    """
    Get a human-readable description of a function or constructor.

    Constructors are named with a `new ` prefix, e.g. "new Pose2d".
    Returns None if nothing by that name exists.
    """
    registry = get_builtin_registry()
    if name.startswith("new "):
        type_name = name[4:].strip()
        overloads = [f for f in registry.constructors() if f.name == type_name]
        prefix = "new "
    else:
        overloads = [f for f in registry.functions() if f.name == name]
        prefix = ""
    if not overloads:
        return None

    lines = [f"{prefix}{overloads[0].name}"]
    for func in sorted(overloads, key=lambda f: f.arity):
        line = f"  {_format_signature(func, prefix)}"
        if func.doc:
            line += f": {func.doc}"
        lines.append(line)
    return "\n".join(lines)


def get_api_reference() -> Dict[str, Any]:
    """
    Get the complete API reference as a dictionary.

    Keys: constructors, functions, constants, methods.
    """
    registry = get_builtin_registry()
    methods: Dict[str, List[Dict[str, Any]]] = {}
    for kind, func in registry.methods():
        if func.name in ALLOWED_METHODS:
            methods.setdefault(kind.value, []).append(_func_to_dict(func))
    return {
        "constructors": [_func_to_dict(f) for f in registry.constructors()],
        "functions": [_func_to_dict(f) for f in registry.functions()],
        "constants": {name: _format_constant(v)
                      for name, v in sorted(registry.constants().items())},
        "methods": methods,
    }


def get_api_as_json() -> str:
    """
    Get the complete API reference as a JSON string.

    Useful for tools that prefer to parse JSON directly.
    """
    return json.dumps(get_api_reference(), indent=2)
