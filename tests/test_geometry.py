"""
Unit tests for the 2D geometry value types.
"""

import pytest
import math
import logging

from poseval.geometry import Rotation2d, Translation2d, Pose2d, fdiv, isgoodnum


class TestHelpers:
    """Test the scalar helpers."""

    def test_fdiv_regular(self):
        assert fdiv(10.0, 4.0) == 2.5

    def test_fdiv_by_zero(self):
        """Division by zero follows IEEE semantics instead of raising."""
        assert fdiv(5.0, 0.0) == math.inf
        assert fdiv(-5.0, 0.0) == -math.inf
        assert fdiv(5.0, -0.0) == -math.inf
        assert math.isnan(fdiv(0.0, 0.0))

    def test_isgoodnum(self):
        assert isgoodnum(1)
        assert isgoodnum(1.5)
        assert not isgoodnum(True)
        assert not isgoodnum("1")
        assert not isgoodnum(None)


class TestRotation2d:
    """Test Rotation2d construction, accessors and algebra."""

    def test_default_is_identity(self):
        r = Rotation2d()
        assert r.radians == 0.0
        assert r.cos == 1.0
        assert r.sin == 0.0

    def test_from_radians(self):
        r = Rotation2d(math.pi / 2)
        assert r.radians == pytest.approx(math.pi / 2)
        assert r.degrees == pytest.approx(90.0)
        assert r.cos == pytest.approx(0.0, abs=1e-12)
        assert r.sin == pytest.approx(1.0)

    def test_from_degrees(self):
        r = Rotation2d.from_degrees(180)
        assert r.radians == pytest.approx(math.pi)

    def test_from_rotations(self):
        r = Rotation2d.from_rotations(0.25)
        assert r.degrees == pytest.approx(90.0)
        assert r.rotations == pytest.approx(0.25)

    def test_from_vector_normalises(self):
        r = Rotation2d.from_vector(3.0, 4.0)
        assert r.cos == pytest.approx(0.6)
        assert r.sin == pytest.approx(0.8)
        assert r.radians == pytest.approx(math.atan2(4.0, 3.0))

    def test_from_zero_vector_is_identity(self, caplog):
        """A zero vector gives the identity rotation and a warning."""
        with caplog.at_level(logging.WARNING, logger="poseval.geometry"):
            r = Rotation2d.from_vector(0.0, 0.0)
        assert r == Rotation2d.ZERO
        assert r.cos == 1.0
        assert any("zero" in rec.message for rec in caplog.records)

    def test_tan(self):
        assert Rotation2d.from_degrees(45).tan == pytest.approx(1.0)

    def test_plus_and_minus(self):
        a = Rotation2d.from_degrees(30)
        b = Rotation2d.from_degrees(60)
        assert a.plus(b).degrees == pytest.approx(90.0)
        assert b.minus(a).degrees == pytest.approx(30.0)
        assert (a + b).degrees == pytest.approx(90.0)
        assert (b - a).degrees == pytest.approx(30.0)

    def test_plus_wraps(self):
        """Rotation addition wraps into (-pi, pi]."""
        r = Rotation2d.from_degrees(170).plus(Rotation2d.from_degrees(20))
        assert r.degrees == pytest.approx(-170.0)

    def test_unary_minus(self):
        r = Rotation2d.from_degrees(30)
        assert r.unary_minus().degrees == pytest.approx(-30.0)
        assert (-r).degrees == pytest.approx(-30.0)

    def test_times_and_div(self):
        r = Rotation2d.from_degrees(30)
        assert r.times(2).degrees == pytest.approx(60.0)
        assert r.div(3).degrees == pytest.approx(10.0)
        assert (r * 3).degrees == pytest.approx(90.0)

    def test_equality_is_approximate(self):
        assert Rotation2d(0.0) == Rotation2d(1e-12)
        assert Rotation2d(math.pi) == Rotation2d(-math.pi)
        assert Rotation2d(0.0) != Rotation2d(0.1)

    def test_immutable(self):
        r = Rotation2d(1.0)
        with pytest.raises(AttributeError):
            r.value = 2.0

    def test_constants(self):
        assert Rotation2d.ZERO.radians == 0.0
        assert Rotation2d.PI.degrees == pytest.approx(180.0)
        assert Rotation2d.CW_90DEG.degrees == pytest.approx(-90.0)
        assert Rotation2d.CCW_90DEG.degrees == pytest.approx(90.0)

    def test_repr(self):
        assert repr(Rotation2d.from_degrees(90)) == "Rotation2d(Rads: 1.57, Deg: 90.00)"


class TestTranslation2d:
    """Test Translation2d construction, accessors and algebra."""

    def test_default_is_origin(self):
        t = Translation2d()
        assert (t.x, t.y) == (0.0, 0.0)

    def test_from_polar(self):
        t = Translation2d.from_polar(2.0, Rotation2d.from_degrees(90))
        assert t.x == pytest.approx(0.0, abs=1e-12)
        assert t.y == pytest.approx(2.0)

    def test_norm(self):
        t = Translation2d(3.0, 4.0)
        assert t.norm == 5.0
        assert t.squared_norm == 25.0

    def test_angle(self):
        assert Translation2d(1.0, 1.0).angle.degrees == pytest.approx(45.0)
        assert Translation2d(0.0, 0.0).angle == Rotation2d.ZERO

    def test_distance(self):
        a = Translation2d(1.0, 1.0)
        b = Translation2d(4.0, 5.0)
        assert a.distance(b) == 5.0
        assert a.squared_distance(b) == 25.0

    def test_dot_and_cross(self):
        a = Translation2d(1.0, 2.0)
        b = Translation2d(3.0, 4.0)
        assert a.dot(b) == 11.0
        assert a.cross(b) == -2.0

    def test_arithmetic(self):
        a = Translation2d(1.0, 2.0)
        b = Translation2d(3.0, 5.0)
        assert a.plus(b) == Translation2d(4.0, 7.0)
        assert b.minus(a) == Translation2d(2.0, 3.0)
        assert a.unary_minus() == Translation2d(-1.0, -2.0)
        assert a.times(2) == Translation2d(2.0, 4.0)
        assert b.div(2) == Translation2d(1.5, 2.5)
        assert a + b == Translation2d(4.0, 7.0)
        assert -a == Translation2d(-1.0, -2.0)

    def test_div_by_zero(self):
        t = Translation2d(1.0, -1.0).div(0)
        assert t.x == math.inf
        assert t.y == -math.inf

    def test_rotate_by(self):
        t = Translation2d(1.0, 0.0).rotate_by(Rotation2d.from_degrees(90))
        assert t == Translation2d(0.0, 1.0)

    def test_rotate_around(self):
        t = Translation2d(2.0, 1.0).rotate_around(Translation2d(1.0, 1.0),
                                                  Rotation2d.from_degrees(90))
        assert t == Translation2d(1.0, 2.0)

    def test_repr(self):
        assert repr(Translation2d(1.0, 2.5)) == "Translation2d(X: 1.00, Y: 2.50)"


class TestPose2d:
    """Test Pose2d construction and transformations."""

    def test_default_is_identity(self):
        p = Pose2d()
        assert p == Pose2d.ZERO
        assert p.x == 0.0 and p.y == 0.0

    def test_from_translation_and_rotation(self):
        p = Pose2d.from_args(Translation2d(1.0, 2.0), Rotation2d.from_degrees(45))
        assert p.x == 1.0
        assert p.y == 2.0
        assert p.rotation.degrees == pytest.approx(45.0)

    def test_from_coordinates(self):
        p = Pose2d.from_args(3.0, 4.0, Rotation2d.PI)
        assert p.translation == Translation2d(3.0, 4.0)
        assert p.rotation == Rotation2d.PI

    def test_invalid_args_give_identity(self, caplog):
        with caplog.at_level(logging.WARNING, logger="poseval.geometry"):
            p = Pose2d.from_args(1.0, 2.0)
        assert p == Pose2d.ZERO
        assert caplog.records

    def test_times_and_div(self):
        p = Pose2d(Translation2d(2.0, 4.0), Rotation2d.from_degrees(40))
        doubled = p.times(2)
        assert doubled.translation == Translation2d(4.0, 8.0)
        assert doubled.rotation.degrees == pytest.approx(80.0)
        halved = p.div(2)
        assert halved.translation == Translation2d(1.0, 2.0)
        assert halved.rotation.degrees == pytest.approx(20.0)

    def test_rotate_by(self):
        p = Pose2d(Translation2d(1.0, 0.0), Rotation2d.ZERO)
        rotated = p.rotate_by(Rotation2d.CCW_90DEG)
        assert rotated.translation == Translation2d(0.0, 1.0)
        assert rotated.rotation == Rotation2d.CCW_90DEG

    def test_rotate_around(self):
        p = Pose2d(Translation2d(2.0, 0.0), Rotation2d.ZERO)
        rotated = p.rotate_around(Translation2d(1.0, 0.0), Rotation2d.PI)
        assert rotated.translation == Translation2d(0.0, 0.0)
        assert rotated.rotation == Rotation2d.PI

    def test_equality(self):
        a = Pose2d(Translation2d(1.0, 2.0), Rotation2d(0.5))
        b = Pose2d(Translation2d(1.0, 2.0 + 1e-12), Rotation2d(0.5))
        assert a == b
        assert a != Pose2d(Translation2d(1.0, 2.1), Rotation2d(0.5))
