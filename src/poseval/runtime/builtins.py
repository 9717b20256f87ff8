"""
Built-in function registry for the expression evaluator.

The evaluator works in a closed world: every static call, construction,
constant and instance method it can perform is listed here. Entries are
keyed by (qualified name, arity); a key may hold several overloads, each
optionally declaring the kinds of its parameters. Lookup picks the first
overload whose declared kinds match the argument kinds exactly.

Implementations take and return plain Python objects (floats and geometry
instances); the registry wraps the result back into a Value.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
import logging
import math

from .values import Value, ValueKind, NULL, wrap_value
from ..geometry import Rotation2d, Translation2d, Pose2d

logger = logging.getLogger(__name__)

NUM = ValueKind.NUMBER
ROT = ValueKind.ROTATION
TRANS = ValueKind.TRANSLATION
POSE = ValueKind.POSE

## instance methods the evaluator is allowed to invoke
ALLOWED_METHODS = frozenset({
    "getX", "getY", "getRotation", "getTranslation",
    "getDegrees", "getRadians", "getSin", "getCos", "getTan", "getRotations",
    "getDistance", "getSquaredDistance", "getNorm", "getSquaredNorm", "getAngle",
    "dot", "cross",
    "plus", "minus", "unaryMinus", "times", "div",
    "rotateBy", "rotateAround",
})


@dataclass(frozen=True)
class BuiltinFunction:
    """
    A built-in callable with its implementation and parameter kinds.

    `param_kinds` of None accepts any live arguments of the right arity.
    For methods, `arity` excludes the receiver.
    """
    name: str
    arity: int
    implementation: Callable[..., Any]
    param_kinds: Optional[Tuple[ValueKind, ...]] = None
    doc: str = ""

    def accepts(self, args: List[Value]) -> bool:
        """Check the arguments against the declared parameter kinds."""
        if len(args) != self.arity:
            return False
        if self.param_kinds is None:
            return True
        return all(a.kind == k for a, k in zip(args, self.param_kinds))

    @property
    def signature(self) -> str:
        if self.param_kinds is None:
            params = ", ".join(f"arg{i}" for i in range(self.arity))
        else:
            params = ", ".join(k.value for k in self.param_kinds)
        return f"{self.name}({params})"


def _nan_on_domain_error(func: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap a math function so a domain error gives NaN, as java.lang.Math does."""
    def wrapper(x: float) -> float:
        try:
            return func(x)
        except ValueError:
            return math.nan
    wrapper.__name__ = func.__name__
    return wrapper


def _java_pow(x: float, y: float) -> float:
    """math.pow with java.lang.Math.pow results for overflow and domain errors."""
    odd_integer = math.isfinite(y) and y == int(y) and int(y) % 2 == 1
    try:
        return math.pow(x, y)
    except OverflowError:
        return -math.inf if (x < 0 and odd_integer) else math.inf
    except ValueError:
        if x == 0:
            # zero to a negative power
            return math.copysign(math.inf, x) if odd_integer else math.inf
        return math.nan


_Key = Tuple[str, int]
_MethodKey = Tuple[ValueKind, str, int]


class BuiltinRegistry:
    """
    Registry of all built-in functions, constructors, constants and methods.

    The registry is populated once on construction and not modified after.
    """

    def __init__(self):
        self._functions: Dict[_Key, List[BuiltinFunction]] = {}
        self._constructors: Dict[_Key, List[BuiltinFunction]] = {}
        self._methods: Dict[_MethodKey, List[BuiltinFunction]] = {}
        self._constants: Dict[str, Value] = {}
        self._register_all()

    # --- Registration ---

    def register(self, func: BuiltinFunction) -> None:
        """Register a static function."""
        self._functions.setdefault((func.name, func.arity), []).append(func)

    def register_constructor(self, func: BuiltinFunction) -> None:
        """Register a `new` constructor for a type name."""
        self._constructors.setdefault((func.name, func.arity), []).append(func)

    def register_method(self, kind: ValueKind, func: BuiltinFunction) -> None:
        """Register an instance method for a value kind."""
        self._methods.setdefault((kind, func.name, func.arity), []).append(func)

    def register_constant(self, name: str, value: Any) -> None:
        self._constants[name] = wrap_value(value)

    # --- Lookup ---

    @staticmethod
    def _select(overloads: Optional[List[BuiltinFunction]],
                args: List[Value]) -> Optional[BuiltinFunction]:
        for func in overloads or ():
            if func.accepts(args):
                return func
        return None

    def get_function(self, name: str, args: List[Value]) -> Optional[BuiltinFunction]:
        """Look up a static function overload matching the arguments."""
        return self._select(self._functions.get((name, len(args))), args)

    def get_constructor(self, type_name: str, args: List[Value]) -> Optional[BuiltinFunction]:
        """Look up a constructor overload matching the arguments."""
        return self._select(self._constructors.get((type_name, len(args))), args)

    def get_method(self, kind: ValueKind, method_name: str,
                   args: List[Value]) -> Optional[BuiltinFunction]:
        """Look up a method overload by receiver kind, name and arguments."""
        return self._select(self._methods.get((kind, method_name, len(args))), args)

    def get_constant(self, name: str) -> Optional[Value]:
        """Look up a named constant."""
        return self._constants.get(name)

    def has_constant(self, name: str) -> bool:
        return name in self._constants

    @staticmethod
    def is_method_allowed(method_name: str) -> bool:
        return method_name in ALLOWED_METHODS

    # --- Enumeration (for introspection) ---

    def functions(self) -> Iterator[BuiltinFunction]:
        for overloads in self._functions.values():
            yield from overloads

    def constructors(self) -> Iterator[BuiltinFunction]:
        for overloads in self._constructors.values():
            yield from overloads

    def methods(self) -> Iterator[Tuple[ValueKind, BuiltinFunction]]:
        for (kind, _, _), overloads in self._methods.items():
            for func in overloads:
                yield kind, func

    def constants(self) -> Dict[str, Value]:
        return dict(self._constants)

    def _register_all(self) -> None:
        """Register all built-ins."""
        self._register_constructors()
        self._register_rotation_statics()
        self._register_math_functions()
        self._register_constants()
        self._register_rotation_methods()
        self._register_translation_methods()
        self._register_pose_methods()

    # --- Constructors ---

    def _register_constructors(self) -> None:
        """Register `new` constructors for the geometry types."""
        ctor = self.register_constructor

        ctor(BuiltinFunction("Rotation2d", 0, Rotation2d, (),
                             "identity rotation"))
        ctor(BuiltinFunction("Rotation2d", 1, Rotation2d, (NUM,),
                             "rotation from an angle in radians"))
        ctor(BuiltinFunction("Rotation2d", 2, Rotation2d.from_vector, (NUM, NUM),
                             "rotation pointing along the vector (x, y)"))

        ctor(BuiltinFunction("Translation2d", 0, Translation2d, (),
                             "the origin"))
        ctor(BuiltinFunction("Translation2d", 2, Translation2d, (NUM, NUM),
                             "translation from x and y"))
        ctor(BuiltinFunction("Translation2d", 2, Translation2d.from_polar, (NUM, ROT),
                             "translation from a distance and an angle"))

        # Pose2d falls back to the identity pose on bad arguments
        for arity in (0, 2, 3):
            ctor(BuiltinFunction("Pose2d", arity, Pose2d.from_args, None,
                                 "pose from (), (translation, rotation) or (x, y, rotation)"))

    # --- Static functions ---

    def _register_rotation_statics(self) -> None:
        """Register the Rotation2d static factories."""
        self.register(BuiltinFunction("Rotation2d.fromDegrees", 1,
                                      Rotation2d.from_degrees, (NUM,),
                                      "rotation from an angle in degrees"))
        self.register(BuiltinFunction("Rotation2d.fromRadians", 1,
                                      Rotation2d.from_radians, (NUM,),
                                      "rotation from an angle in radians"))
        self.register(BuiltinFunction("Rotation2d.fromRotations", 1,
                                      Rotation2d.from_rotations, (NUM,),
                                      "rotation from a number of full turns"))

    def _register_math_functions(self) -> None:
        """Register the java.lang.Math subset."""
        unary = {
            "toRadians": (math.radians, "degrees to radians"),
            "toDegrees": (math.degrees, "radians to degrees"),
            "sin": (_nan_on_domain_error(math.sin), "sine"),
            "cos": (_nan_on_domain_error(math.cos), "cosine"),
            "tan": (_nan_on_domain_error(math.tan), "tangent"),
            "sqrt": (_nan_on_domain_error(math.sqrt), "square root"),
            "abs": (abs, "absolute value"),
        }
        for name, (impl, doc) in unary.items():
            self.register(BuiltinFunction(f"Math.{name}", 1, impl, (NUM,), doc))

        binary = {
            "atan2": (math.atan2, "angle of the vector (x, y), called as atan2(y, x)"),
            "hypot": (math.hypot, "length of the vector (x, y)"),
            "min": (min, "smaller of two numbers"),
            "max": (max, "larger of two numbers"),
            "pow": (_java_pow, "first argument raised to the second"),
        }
        for name, (impl, doc) in binary.items():
            self.register(BuiltinFunction(f"Math.{name}", 2, impl, (NUM, NUM), doc))

    # --- Constants ---

    def _register_constants(self) -> None:
        """Register named constants."""
        const = self.register_constant
        const("PI", math.pi)
        const("TAU", math.tau)
        const("E", math.e)
        const("Math.PI", math.pi)
        const("Math.E", math.e)
        self._constants["null"] = NULL

        const("Rotation2d.kZero", Rotation2d.ZERO)
        const("Rotation2d.kPi", Rotation2d.PI)
        const("Rotation2d.k180deg", Rotation2d.PI)
        const("Rotation2d.kCW_90deg", Rotation2d.CW_90DEG)
        const("Rotation2d.kCW_Pi_2", Rotation2d.CW_90DEG)
        const("Rotation2d.kCCW_90deg", Rotation2d.CCW_90DEG)
        const("Rotation2d.kCCW_Pi_2", Rotation2d.CCW_90DEG)
        const("Translation2d.kZero", Translation2d.ZERO)
        const("Pose2d.kZero", Pose2d.ZERO)

    # --- Instance methods ---

    def _register_rotation_methods(self) -> None:
        """Register Rotation2d methods."""
        m = lambda func: self.register_method(ROT, func)

        m(BuiltinFunction("getDegrees", 0, lambda r: r.degrees, (), "angle in degrees"))
        m(BuiltinFunction("getRadians", 0, lambda r: r.radians, (), "angle in radians"))
        m(BuiltinFunction("getRotations", 0, lambda r: r.rotations, (), "angle in turns"))
        m(BuiltinFunction("getSin", 0, lambda r: r.sin, (), "sine of the angle"))
        m(BuiltinFunction("getCos", 0, lambda r: r.cos, (), "cosine of the angle"))
        m(BuiltinFunction("getTan", 0, lambda r: r.tan, (), "tangent of the angle"))
        m(BuiltinFunction("plus", 1, Rotation2d.plus, (ROT,), "sum of two rotations"))
        m(BuiltinFunction("minus", 1, Rotation2d.minus, (ROT,), "difference of two rotations"))
        m(BuiltinFunction("unaryMinus", 0, Rotation2d.unary_minus, (), "inverse rotation"))
        m(BuiltinFunction("times", 1, Rotation2d.times, (NUM,), "angle scaled by a number"))
        m(BuiltinFunction("div", 1, Rotation2d.div, (NUM,), "angle divided by a number"))
        m(BuiltinFunction("rotateBy", 1, Rotation2d.rotate_by, (ROT,), "rotation composed with another"))

    def _register_translation_methods(self) -> None:
        """Register Translation2d methods."""
        m = lambda func: self.register_method(TRANS, func)

        m(BuiltinFunction("getX", 0, lambda t: t.x, (), "x component"))
        m(BuiltinFunction("getY", 0, lambda t: t.y, (), "y component"))
        m(BuiltinFunction("getNorm", 0, lambda t: t.norm, (), "length"))
        m(BuiltinFunction("getSquaredNorm", 0, lambda t: t.squared_norm, (), "squared length"))
        m(BuiltinFunction("getAngle", 0, lambda t: t.angle, (), "direction as a rotation"))
        m(BuiltinFunction("getDistance", 1, Translation2d.distance, (TRANS,),
                          "distance to another translation"))
        m(BuiltinFunction("getSquaredDistance", 1, Translation2d.squared_distance, (TRANS,),
                          "squared distance to another translation"))
        m(BuiltinFunction("dot", 1, Translation2d.dot, (TRANS,), "dot product"))
        m(BuiltinFunction("cross", 1, Translation2d.cross, (TRANS,), "2D cross product"))
        m(BuiltinFunction("plus", 1, Translation2d.plus, (TRANS,), "vector sum"))
        m(BuiltinFunction("minus", 1, Translation2d.minus, (TRANS,), "vector difference"))
        m(BuiltinFunction("unaryMinus", 0, Translation2d.unary_minus, (), "negated vector"))
        m(BuiltinFunction("times", 1, Translation2d.times, (NUM,), "vector scaled by a number"))
        m(BuiltinFunction("div", 1, Translation2d.div, (NUM,), "vector divided by a number"))
        m(BuiltinFunction("rotateBy", 1, Translation2d.rotate_by, (ROT,),
                          "vector rotated about the origin"))
        m(BuiltinFunction("rotateAround", 2, Translation2d.rotate_around, (TRANS, ROT),
                          "vector rotated about a point"))

    def _register_pose_methods(self) -> None:
        """Register Pose2d methods."""
        m = lambda func: self.register_method(POSE, func)

        m(BuiltinFunction("getX", 0, lambda p: p.x, (), "x coordinate"))
        m(BuiltinFunction("getY", 0, lambda p: p.y, (), "y coordinate"))
        m(BuiltinFunction("getTranslation", 0, lambda p: p.translation, (), "position"))
        m(BuiltinFunction("getRotation", 0, lambda p: p.rotation, (), "heading"))
        m(BuiltinFunction("times", 1, Pose2d.times, (NUM,), "pose scaled by a number"))
        m(BuiltinFunction("div", 1, Pose2d.div, (NUM,), "pose divided by a number"))
        m(BuiltinFunction("rotateBy", 1, Pose2d.rotate_by, (ROT,),
                          "pose rotated about the origin"))
        m(BuiltinFunction("rotateAround", 2, Pose2d.rotate_around, (TRANS, ROT),
                          "pose rotated about a point"))


# Global registry, built once at import
_registry: BuiltinRegistry = BuiltinRegistry()


def get_builtin_registry() -> BuiltinRegistry:
    """Get the global built-in registry."""
    return _registry


def _unwrap_call(func: BuiltinFunction, receiver: Optional[Value],
                 args: List[Value]) -> Value:
    raw = [a.data for a in args]
    if receiver is not None:
        raw.insert(0, receiver.data)
    return wrap_value(func.implementation(*raw))


def call_builtin(name: str, args: List[Value]) -> Optional[Value]:
    """
    Call a static function by qualified name.

    Returns None if no overload matches. Errors raised by the
    implementation propagate to the caller.
    """
    func = _registry.get_function(name, args)
    if func is None:
        return None
    return _unwrap_call(func, None, args)


def call_constructor(type_name: str, args: List[Value]) -> Optional[Value]:
    """Construct a geometry value; None if no constructor matches."""
    func = _registry.get_constructor(type_name, args)
    if func is None:
        return None
    return _unwrap_call(func, None, args)


def call_method(receiver: Value, method_name: str, args: List[Value]) -> Optional[Value]:
    """
    Call a method on a live value.

    Returns None if the method is not allowed or has no matching overload.
    """
    if not BuiltinRegistry.is_method_allowed(method_name):
        logger.debug("method %s is not on the allow-list", method_name)
        return None
    func = _registry.get_method(receiver.kind, method_name, args)
    if func is None:
        return None
    return _unwrap_call(func, receiver, args)
