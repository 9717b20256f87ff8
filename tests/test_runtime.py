"""
Tests for the runtime support modules (values, builtin registry, context).
"""

import pytest
import math
import logging

from poseval.geometry import Rotation2d, Translation2d, Pose2d
from poseval.runtime import (
    Value, ValueKind, PendingName, UNRESOLVED, NULL,
    number_val, rotation_val, translation_val, pose_val, pending_val,
    wrap_value, is_live, to_python,
    ALLOWED_METHODS, BuiltinRegistry, get_builtin_registry,
    call_builtin, call_constructor, call_method,
    EvaluationContext, create_context,
)


# --- Value Tests ---

class TestValues:
    """Test runtime value wrappers."""

    def test_number_value(self):
        v = number_val(3)
        assert v.data == 3.0
        assert isinstance(v.data, float)
        assert v.kind == ValueKind.NUMBER
        assert v.is_live
        assert v.is_number

    def test_geometry_values(self):
        assert rotation_val(Rotation2d.ZERO).kind == ValueKind.ROTATION
        assert translation_val(Translation2d.ZERO).kind == ValueKind.TRANSLATION
        assert pose_val(Pose2d.ZERO).kind == ValueKind.POSE

    def test_pending_value(self):
        v = pending_val("Rotation2d", 4)
        assert v.kind == ValueKind.PENDING
        assert v.data == PendingName("Rotation2d", 4)
        assert not v.is_live

    def test_pending_extend(self):
        name = PendingName("a", 2).extend("b").extend("c")
        assert name.name == "a.b.c"
        assert name.start == 2

    def test_unresolved_and_null_are_distinct(self):
        assert UNRESOLVED.kind == ValueKind.UNRESOLVED
        assert NULL.kind == ValueKind.NULL
        assert UNRESOLVED != NULL
        assert not UNRESOLVED.is_live
        assert not NULL.is_live

    def test_wrap_value(self):
        assert wrap_value(2).kind == ValueKind.NUMBER
        assert wrap_value(2.5).data == 2.5
        assert wrap_value(Rotation2d(1.0)).kind == ValueKind.ROTATION
        assert wrap_value(Translation2d(1.0, 2.0)).kind == ValueKind.TRANSLATION
        assert wrap_value(Pose2d()).kind == ValueKind.POSE
        assert wrap_value(None) is NULL

    def test_wrap_value_passes_values_through(self):
        v = number_val(1)
        assert wrap_value(v) is v

    def test_wrap_value_rejects_foreign_objects(self):
        assert wrap_value(True) is UNRESOLVED
        assert wrap_value("1.0") is UNRESOLVED
        assert wrap_value([1, 2]) is UNRESOLVED

    def test_is_live_and_to_python(self):
        assert is_live(number_val(1))
        assert not is_live(None)
        assert not is_live(UNRESOLVED)
        assert to_python(number_val(2)) == 2.0
        assert to_python(pending_val("x", 0)) is None
        assert to_python(NULL) is None


# --- Builtin Tests ---

class TestBuiltinRegistry:
    """Test the builtin registry lookup rules."""

    def test_global_registry_is_shared(self):
        assert get_builtin_registry() is get_builtin_registry()

    def test_constructor_overloads_by_kind(self):
        registry = get_builtin_registry()
        by_numbers = registry.get_constructor("Translation2d", [number_val(1), number_val(2)])
        by_polar = registry.get_constructor("Translation2d",
                                            [number_val(1), rotation_val(Rotation2d.ZERO)])
        assert by_numbers is not None
        assert by_polar is not None
        assert by_numbers is not by_polar

    def test_constructor_kind_mismatch(self):
        registry = get_builtin_registry()
        assert registry.get_constructor("Rotation2d", [rotation_val(Rotation2d.ZERO)]) is None

    def test_constructor_arity_mismatch(self):
        assert call_constructor("Rotation2d", [number_val(1)] * 3) is None

    def test_call_constructor(self):
        v = call_constructor("Translation2d", [number_val(2), rotation_val(Rotation2d.CCW_90DEG)])
        assert v.kind == ValueKind.TRANSLATION
        assert v.data == Translation2d(0.0, 2.0)

    def test_pose_constructor_falls_back_to_identity(self):
        v = call_constructor("Pose2d", [number_val(1), number_val(2)])
        assert v.kind == ValueKind.POSE
        assert v.data == Pose2d.ZERO

    def test_call_builtin(self):
        v = call_builtin("Rotation2d.fromDegrees", [number_val(180)])
        assert v.data.radians == pytest.approx(math.pi)
        assert call_builtin("Math.max", [number_val(2), number_val(7)]).data == 7.0

    def test_call_builtin_unknown(self):
        assert call_builtin("Math.nope", [number_val(1)]) is None
        assert call_builtin("Math.sin", [number_val(1), number_val(2)]) is None

    def test_math_domain_errors_give_nan(self):
        assert math.isnan(call_builtin("Math.sqrt", [number_val(-1)]).data)
        assert math.isnan(call_builtin("Math.sin", [number_val(math.inf)]).data)
        assert math.isnan(call_builtin("Math.pow", [number_val(-8), number_val(1 / 3)]).data)

    def test_math_pow_overflow(self):
        assert call_builtin("Math.pow", [number_val(10), number_val(400)]).data == math.inf
        assert call_builtin("Math.pow", [number_val(-10), number_val(401)]).data == -math.inf
        assert call_builtin("Math.pow", [number_val(0), number_val(-1)]).data == math.inf
        assert call_builtin("Math.pow", [number_val(-0.0), number_val(-3)]).data == -math.inf

    def test_constants(self):
        registry = get_builtin_registry()
        assert registry.get_constant("Math.PI").data == math.pi
        assert registry.get_constant("Rotation2d.k180deg").data == Rotation2d.PI
        assert registry.get_constant("Rotation2d.kCW_Pi_2").data.degrees == pytest.approx(-90.0)
        assert registry.get_constant("null") is NULL
        assert registry.get_constant("nothing") is None

    def test_call_method(self):
        v = call_method(rotation_val(Rotation2d.from_degrees(30)), "getDegrees", [])
        assert v.data == pytest.approx(30.0)

    def test_call_method_by_receiver_kind(self):
        pose = pose_val(Pose2d.from_args(1.0, 2.0, Rotation2d.ZERO))
        trans = translation_val(Translation2d(3.0, 4.0))
        assert call_method(pose, "getX", []).data == 1.0
        assert call_method(trans, "getX", []).data == 3.0
        assert call_method(trans, "getRotation", []) is None

    def test_method_allow_list(self):
        assert "getX" in ALLOWED_METHODS
        assert "toString" not in ALLOWED_METHODS
        assert not BuiltinRegistry.is_method_allowed("hashCode")
        assert call_method(number_val(1), "toString", []) is None

    def test_every_registered_method_is_allowed(self):
        for _, func in get_builtin_registry().methods():
            assert func.name in ALLOWED_METHODS


# --- Context Tests ---

class TestEvaluationContext:
    """Test the per-call context and its host lookup."""

    def test_no_resolver(self):
        ctx = create_context()
        assert ctx.lookup(0, 1) is None

    def test_lookup_wraps_result(self):
        ctx = create_context(lambda start, end: 2.0 if (start, end) == (0, 1) else None, "x")
        assert ctx.lookup(0, 1) == number_val(2.0)
        assert ctx.lookup(1, 2) is None

    def test_explicit_null(self):
        ctx = create_context(lambda start, end: NULL)
        assert ctx.lookup(0, 1) is NULL

    def test_resolver_exception_is_no_value(self, caplog):
        def boom(start, end):
            raise RuntimeError("host went away")

        ctx = create_context(boom, "abc")
        with caplog.at_level(logging.WARNING, logger="poseval.runtime.context"):
            assert ctx.lookup(0, 3) is None
        assert any("abc" in rec.getMessage() for rec in caplog.records)

    def test_note_unresolved_deduplicates(self):
        ctx = EvaluationContext()
        ctx.note_unresolved("a")
        ctx.note_unresolved("a")
        ctx.note_unresolved("b")
        assert ctx.unresolved_names == ["a", "b"]
