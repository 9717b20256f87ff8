"""
Immutable 2D geometry value types.

Three value objects make up the vocabulary the expression evaluator can
construct and manipulate:

- Rotation2d: an angle, stored as a unit (cos, sin) pair plus radians
- Translation2d: a planar vector (x, y)
- Pose2d: a translation combined with a rotation

Every operation returns a new instance. Equality is approximate, to
within EPSILON.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

## tolerance used by the approximate equality checks
EPSILON = 1e-9


def fdiv(a: float, b: float) -> float:
    """IEEE-754 division: a zero divisor gives +/-inf or nan instead of raising."""
    if b != 0:
        return a / b
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def isgoodnum(n: Any) -> bool:
    """Is the argument a real scalar number (and not a bool)?"""
    return (not isinstance(n, bool)) and isinstance(n, (int, float))


@dataclass(frozen=True, eq=False)
class Rotation2d:
    """
    A rotation in the plane.

    Construct from radians with Rotation2d(value), or from an arbitrary
    vector with Rotation2d.from_vector(x, y).
    """
    value: float = 0.0
    cos: float = field(init=False)
    sin: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))
        object.__setattr__(self, "cos", math.cos(self.value))
        object.__setattr__(self, "sin", math.sin(self.value))

    @classmethod
    def _from_parts(cls, value: float, cos: float, sin: float) -> "Rotation2d":
        rot = object.__new__(cls)
        object.__setattr__(rot, "value", value)
        object.__setattr__(rot, "cos", cos)
        object.__setattr__(rot, "sin", sin)
        return rot

    @classmethod
    def from_vector(cls, x: float, y: float) -> "Rotation2d":
        """Rotation pointing along (x, y). The zero vector gives identity."""
        magnitude = math.hypot(x, y)
        if magnitude > EPSILON:
            sin = y / magnitude
            cos = x / magnitude
        else:
            logger.warning("x and y components of Rotation2d are zero; using identity rotation")
            sin = 0.0
            cos = 1.0
        return cls._from_parts(math.atan2(sin, cos), cos, sin)

    @classmethod
    def from_radians(cls, radians: float) -> "Rotation2d":
        return cls(radians)

    @classmethod
    def from_degrees(cls, degrees: float) -> "Rotation2d":
        return cls(math.radians(degrees))

    @classmethod
    def from_rotations(cls, rotations: float) -> "Rotation2d":
        return cls(rotations * math.tau)

    @property
    def radians(self) -> float:
        return self.value

    @property
    def degrees(self) -> float:
        return math.degrees(self.value)

    @property
    def rotations(self) -> float:
        return self.value / math.tau

    @property
    def tan(self) -> float:
        return fdiv(self.sin, self.cos)

    def plus(self, other: "Rotation2d") -> "Rotation2d":
        return self.rotate_by(other)

    def minus(self, other: "Rotation2d") -> "Rotation2d":
        return self.rotate_by(other.unary_minus())

    def unary_minus(self) -> "Rotation2d":
        return Rotation2d(-self.value)

    def times(self, scalar: float) -> "Rotation2d":
        return Rotation2d(self.value * scalar)

    def div(self, scalar: float) -> "Rotation2d":
        return self.times(fdiv(1.0, scalar))

    def rotate_by(self, other: "Rotation2d") -> "Rotation2d":
        """Adds two rotations, using the angle addition identities."""
        return Rotation2d.from_vector(
            self.cos * other.cos - self.sin * other.sin,
            self.cos * other.sin + self.sin * other.cos,
        )

    __add__ = plus
    __sub__ = minus
    __neg__ = unary_minus
    __mul__ = times
    __truediv__ = div

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rotation2d):
            return NotImplemented
        return math.hypot(self.cos - other.cos, self.sin - other.sin) < EPSILON

    __hash__ = None

    def __repr__(self) -> str:
        return f"Rotation2d(Rads: {self.value:.2f}, Deg: {self.degrees:.2f})"


@dataclass(frozen=True, eq=False)
class Translation2d:
    """A translation (vector) in the plane."""
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @classmethod
    def from_polar(cls, distance: float, angle: Rotation2d) -> "Translation2d":
        return cls(distance * angle.cos, distance * angle.sin)

    @property
    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def squared_norm(self) -> float:
        return self.x * self.x + self.y * self.y

    @property
    def angle(self) -> Rotation2d:
        return Rotation2d.from_vector(self.x, self.y)

    def distance(self, other: "Translation2d") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def squared_distance(self, other: "Translation2d") -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        return dx * dx + dy * dy

    def dot(self, other: "Translation2d") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Translation2d") -> float:
        """z component of the cross product of the two vectors lifted into 3D."""
        return self.x * other.y - self.y * other.x

    def plus(self, other: "Translation2d") -> "Translation2d":
        return Translation2d(self.x + other.x, self.y + other.y)

    def minus(self, other: "Translation2d") -> "Translation2d":
        return Translation2d(self.x - other.x, self.y - other.y)

    def unary_minus(self) -> "Translation2d":
        return Translation2d(-self.x, -self.y)

    def times(self, scalar: float) -> "Translation2d":
        return Translation2d(self.x * scalar, self.y * scalar)

    def div(self, scalar: float) -> "Translation2d":
        return Translation2d(fdiv(self.x, scalar), fdiv(self.y, scalar))

    def rotate_by(self, other: Rotation2d) -> "Translation2d":
        return Translation2d(
            self.x * other.cos - self.y * other.sin,
            self.x * other.sin + self.y * other.cos,
        )

    def rotate_around(self, point: "Translation2d", rot: Rotation2d) -> "Translation2d":
        dx = self.x - point.x
        dy = self.y - point.y
        return Translation2d(
            dx * rot.cos - dy * rot.sin + point.x,
            dx * rot.sin + dy * rot.cos + point.y,
        )

    __add__ = plus
    __sub__ = minus
    __neg__ = unary_minus
    __mul__ = times
    __truediv__ = div

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Translation2d):
            return NotImplemented
        return abs(self.x - other.x) < EPSILON and abs(self.y - other.y) < EPSILON

    __hash__ = None

    def __repr__(self) -> str:
        return f"Translation2d(X: {self.x:.2f}, Y: {self.y:.2f})"


@dataclass(frozen=True, eq=False)
class Pose2d:
    """A 2D pose: a translation plus a heading."""
    translation: Translation2d = field(default_factory=Translation2d)
    rotation: Rotation2d = field(default_factory=Rotation2d)

    @classmethod
    def from_args(cls, *args: Any) -> "Pose2d":
        """
        Build a pose from any of the supported argument shapes:

            ()
            (Translation2d, Rotation2d)
            (x, y, Rotation2d)

        Anything else falls back to the identity pose.
        """
        if not args:
            return cls()
        if len(args) == 2 and isinstance(args[0], Translation2d) \
                and isinstance(args[1], Rotation2d):
            return cls(args[0], args[1])
        if len(args) == 3 and isgoodnum(args[0]) and isgoodnum(args[1]) \
                and isinstance(args[2], Rotation2d):
            return cls(Translation2d(args[0], args[1]), args[2])
        logger.warning("invalid Pose2d arguments %r; using identity pose", args)
        return cls()

    @property
    def x(self) -> float:
        return self.translation.x

    @property
    def y(self) -> float:
        return self.translation.y

    def times(self, scalar: float) -> "Pose2d":
        return Pose2d(self.translation.times(scalar), self.rotation.times(scalar))

    def div(self, scalar: float) -> "Pose2d":
        return self.times(fdiv(1.0, scalar))

    def rotate_by(self, other: Rotation2d) -> "Pose2d":
        return Pose2d(self.translation.rotate_by(other), self.rotation.rotate_by(other))

    def rotate_around(self, point: Translation2d, rot: Rotation2d) -> "Pose2d":
        return Pose2d(self.translation.rotate_around(point, rot), self.rotation.rotate_by(rot))

    __mul__ = times
    __truediv__ = div

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pose2d):
            return NotImplemented
        return self.translation == other.translation and self.rotation == other.rotation

    __hash__ = None

    def __repr__(self) -> str:
        return f"Pose2d({self.translation!r}, {self.rotation!r})"


## shared constants; safe to share because the types are immutable
Rotation2d.ZERO = Rotation2d(0.0)
Rotation2d.PI = Rotation2d(math.pi)
Rotation2d.CW_90DEG = Rotation2d(-math.pi / 2)
Rotation2d.CCW_90DEG = Rotation2d(math.pi / 2)
Translation2d.ZERO = Translation2d(0.0, 0.0)
Pose2d.ZERO = Pose2d(Translation2d.ZERO, Rotation2d.ZERO)
