#!/usr/bin/env python3
"""
CLI for evaluating poseval expressions.

Usage:
    python -m poseval EXPRESSION...
    python -m poseval --list

The words of the expression are joined with spaces, so quoting is optional
for expressions without shell metacharacters.

Examples:
    python -m poseval "2 + 2"
    python -m poseval "(5 + 3) * 2"
    python -m poseval "Rotation2d.fromDegrees(90).getRadians()"
    python -m poseval --json "new Pose2d(1, 2, Rotation2d.kCCW_90deg)"
"""

import argparse
import json
import logging
import math
import sys
from typing import Any, Dict, List, Optional

from .config import get_config
from .geometry import Rotation2d, Translation2d, Pose2d
from .runtime import evaluate_source, EvaluationResult

EPILOG = """\
Supported: number literals, + - * /, parentheses, unary signs,
new Rotation2d/Translation2d/Pose2d(...), Rotation2d.fromDegrees(...),
Math functions, named constants and getter chains such as .getX().
Use --list to see everything that can be called.
"""


def format_number(x: float) -> str:
    """Format a number, dropping the fractional part when it is integral."""
    if math.isnan(x):
        return "nan"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    if x == int(x):
        return str(int(x))
    return repr(x)


def format_result(data: Any) -> str:
    if isinstance(data, float):
        return format_number(data)
    return repr(data)


def to_json_value(data: Any) -> Dict[str, Any]:
    """Convert an evaluation result to a JSON-friendly dict."""
    if isinstance(data, Rotation2d):
        return {"kind": "Rotation2d",
                "value": {"radians": data.radians, "degrees": data.degrees}}
    if isinstance(data, Translation2d):
        return {"kind": "Translation2d", "value": {"x": data.x, "y": data.y}}
    if isinstance(data, Pose2d):
        return {"kind": "Pose2d",
                "value": {"x": data.x, "y": data.y,
                          "rotation": {"radians": data.rotation.radians,
                                       "degrees": data.rotation.degrees}}}
    return {"kind": "number", "value": data}


def cmd_list(args) -> int:
    """Print everything the evaluator can construct, call or look up."""
    from .introspection import (
        get_api_as_json, list_constructors, list_functions,
        list_constants, list_methods,
    )

    if args.json:
        print(get_api_as_json())
        return 0

    print("Constructors:")
    for name in list_constructors():
        print(f"  new {name}(...)")
    print("Functions:")
    for name in list_functions():
        print(f"  {name}(...)")
    print("Constants:")
    for name in list_constants():
        print(f"  {name}")
    print("Methods:")
    for type_name, methods in list_methods().items():
        print(f"  {type_name}: {', '.join(methods)}")
    return 0


def report_failure(result: EvaluationResult, args) -> int:
    if args.json:
        print(json.dumps({
            "error": result.error_message,
            "diagnostics": [d.to_json() for d in result.diagnostics],
            "unresolved": result.unresolved_names,
        }, indent=2))
        return 1

    if result.diagnostics:
        for diag in result.diagnostics:
            print(diag.format(), file=sys.stderr)
    else:
        msg = result.error_message or "could not determine value"
        if result.unresolved_names:
            msg += f" (unknown: {', '.join(result.unresolved_names)})"
        print(f"Error: {msg}", file=sys.stderr)
    return 1


def cmd_eval(args) -> int:
    """Evaluate the expression and print its value."""
    expression = " ".join(args.expression)
    result = evaluate_source(expression)

    if not result.success:
        return report_failure(result, args)

    if args.json:
        print(json.dumps(to_json_value(result.data)))
    else:
        print(format_result(result.data))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='poseval',
        description='Evaluate a Java-style 2D geometry expression and print the result.',
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('expression', nargs='*',
                        help='Expression to evaluate (words are joined with spaces)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug output to stderr')
    parser.add_argument('--json', action='store_true',
                        help='Print the result as JSON')
    parser.add_argument('--list', action='store_true',
                        help='List the available constructors, functions, constants and methods')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = get_config()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    level = logging.DEBUG if args.verbose else config.logging_level
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    if args.list:
        return cmd_list(args)

    if not args.expression:
        print("Error: No expression provided", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    return cmd_eval(args)


if __name__ == '__main__':
    sys.exit(main())
