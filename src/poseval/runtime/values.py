"""
Runtime value wrappers for the expression evaluator.

Values pair a Python object (a float or one of the geometry types) with a
ValueKind tag. Three kinds carry no computed result:

- PENDING: a partially qualified static name such as `Rotation2d` in
  `Rotation2d.kZero`, still waiting for the rest of the chain
- UNRESOLVED: "could not determine value"; absorbs every later operation
- NULL: the `null` literal, or an explicit null handed back by the host
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..geometry import Rotation2d, Translation2d, Pose2d, isgoodnum


class ValueKind(Enum):
    """The kind of a runtime value."""
    NUMBER = "number"
    ROTATION = "Rotation2d"
    TRANSLATION = "Translation2d"
    POSE = "Pose2d"
    PENDING = "pending"
    UNRESOLVED = "unresolved"
    NULL = "null"


## kinds that hold a usable result
LIVE_KINDS = frozenset({
    ValueKind.NUMBER, ValueKind.ROTATION, ValueKind.TRANSLATION, ValueKind.POSE,
})


@dataclass(frozen=True)
class PendingName:
    """A dotted static name accumulated from a chain, plus where it starts."""
    name: str
    start: int   # offset of the first character of the name

    def extend(self, member: str) -> "PendingName":
        return PendingName(f"{self.name}.{member}", self.start)


@dataclass(frozen=True)
class Value:
    """
    A runtime value with its kind.

    The `data` field holds the actual Python object: a float, a geometry
    instance, a PendingName, or None.
    """
    data: Any
    kind: ValueKind

    @property
    def is_live(self) -> bool:
        return self.kind in LIVE_KINDS

    @property
    def is_number(self) -> bool:
        return self.kind == ValueKind.NUMBER

    def __repr__(self) -> str:
        return f"Value({self.data!r}, {self.kind.name})"


## singletons; compare with `is` or by kind
UNRESOLVED = Value(None, ValueKind.UNRESOLVED)
NULL = Value(None, ValueKind.NULL)


# Convenience constructors

def number_val(x: float) -> Value:
    """Create a number value."""
    return Value(float(x), ValueKind.NUMBER)


def rotation_val(rot: Rotation2d) -> Value:
    """Create a Rotation2d value."""
    return Value(rot, ValueKind.ROTATION)


def translation_val(trans: Translation2d) -> Value:
    """Create a Translation2d value."""
    return Value(trans, ValueKind.TRANSLATION)


def pose_val(pose: Pose2d) -> Value:
    """Create a Pose2d value."""
    return Value(pose, ValueKind.POSE)


def pending_val(name: str, start: int) -> Value:
    """Create a pending static-name value."""
    return Value(PendingName(name, start), ValueKind.PENDING)


def wrap_value(obj: Any) -> Value:
    """
    Wrap a raw Python object (typically a host or builtin result) as a Value.

    Values pass through unchanged, None becomes NULL, and anything outside
    the evaluator's vocabulary becomes UNRESOLVED.
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return NULL
    if isgoodnum(obj):
        return number_val(obj)
    if isinstance(obj, Rotation2d):
        return rotation_val(obj)
    if isinstance(obj, Translation2d):
        return translation_val(obj)
    if isinstance(obj, Pose2d):
        return pose_val(obj)
    return UNRESOLVED


def is_live(v: Optional[Value]) -> bool:
    """Does the value hold a usable result?"""
    return v is not None and v.is_live


def to_python(v: Value) -> Any:
    """Extract the Python payload, or None for anything that is not live."""
    if v.is_live:
        return v.data
    return None
