"""
Tests for the introspection API.
"""

import json

from poseval.introspection import (
    list_functions, list_constructors, list_constants, list_methods,
    describe_function, get_api_reference, get_api_as_json,
)
from poseval.runtime import ValueKind


class TestListings:
    """Test the listing helpers."""

    def test_functions(self):
        names = list_functions()
        assert "Rotation2d.fromDegrees" in names
        assert "Math.atan2" in names
        assert names == sorted(names)

    def test_constructors(self):
        assert list_constructors() == ["Pose2d", "Rotation2d", "Translation2d"]

    def test_constants(self):
        names = list_constants()
        assert "Rotation2d.kZero" in names
        assert "Pose2d.kZero" in names
        assert "null" in names

    def test_methods(self):
        methods = list_methods()
        assert set(methods) == {"Rotation2d", "Translation2d", "Pose2d"}
        assert "getDegrees" in methods["Rotation2d"]
        assert "rotateAround" in methods["Pose2d"]

    def test_methods_for_one_kind(self):
        methods = list_methods(ValueKind.TRANSLATION)
        assert list(methods) == ["Translation2d"]
        assert "cross" in methods["Translation2d"]


class TestDescribe:
    """Test human-readable descriptions."""

    def test_describe_function(self):
        text = describe_function("Rotation2d.fromDegrees")
        assert text.splitlines()[0] == "Rotation2d.fromDegrees"
        assert "Rotation2d.fromDegrees(number)" in text
        assert "degrees" in text

    def test_describe_constructor(self):
        text = describe_function("new Translation2d")
        assert "new Translation2d()" in text
        assert "new Translation2d(number, number)" in text
        assert "new Translation2d(number, Rotation2d)" in text

    def test_describe_unknown(self):
        assert describe_function("Math.nope") is None
        assert describe_function("new Nope") is None


class TestApiReference:
    """Test the machine-readable reference."""

    def test_reference_sections(self):
        api = get_api_reference()
        assert set(api) == {"constructors", "functions", "constants", "methods"}
        assert api["constants"]["null"] == "null"

    def test_json_round_trip(self):
        api = json.loads(get_api_as_json())
        names = {f["name"] for f in api["functions"]}
        assert "Math.hypot" in names
        pose_ctors = [c for c in api["constructors"] if c["name"] == "Pose2d"]
        assert {c["arity"] for c in pose_ctors} == {0, 2, 3}
        assert all(c["params"] is None for c in pose_ctors)
