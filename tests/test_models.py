"""Unit tests for Pydantic schema models."""

import pytest
from pydantic import ValidationError

from schemas import BuildSpec, DependencyPattern


class TestDependencyPattern:
    """Tests for DependencyPattern model."""

    def test_plain_glob(self):
        """Test pattern without key-expression."""
        pattern = DependencyPattern.parse("src/**/*.go")
        assert pattern.glob == "src/**/*.go"
        assert pattern.key_expression is None

    def test_compound_pattern(self):
        """Test glob paired with a key-expression."""
        pattern = DependencyPattern.parse("package.json#.dependencies")
        assert pattern.glob == "package.json"
        assert pattern.key_expression == ".dependencies"

    def test_splits_at_first_separator(self):
        """Test that the expression may itself contain the separator."""
        pattern = DependencyPattern.parse('deps.json#.["a#b"]')
        assert pattern.glob == "deps.json"
        assert pattern.key_expression == '.["a#b"]'

    def test_empty_expression_is_plain(self):
        """Test that a trailing separator is ignored."""
        pattern = DependencyPattern.parse("deps.json#")
        assert pattern.key_expression is None

    def test_str_round_trip(self):
        """Test string form of a pattern."""
        assert str(DependencyPattern.parse("a.json#.b")) == "a.json#.b"
        assert str(DependencyPattern.parse("*.lock")) == "*.lock"

    def test_empty_glob_rejected(self):
        """Test that a pattern must have a glob."""
        with pytest.raises(ValidationError):
            DependencyPattern.parse("#.version")


class TestBuildSpec:
    """Tests for BuildSpec model."""

    def test_minimal_spec(self):
        """Test spec with only the required field."""
        spec = BuildSpec(architecture="x86_64")
        assert spec.dockerfile == "Dockerfile"
        assert spec.target == ""
        assert spec.build_args == ()
        assert spec.additional_build_args == ""
        assert spec.cache_on == ()
        assert spec.secrets == ()

    def test_architecture_required(self):
        """Test that architecture is required and non-empty."""
        with pytest.raises(ValidationError):
            BuildSpec()  # type: ignore[call-arg]
        with pytest.raises(ValidationError):
            BuildSpec(architecture="")

    def test_none_target_is_empty(self):
        """Test that an unset target equals an explicitly empty one."""
        assert BuildSpec(architecture="arm64", target=None) == BuildSpec(
            architecture="arm64", target=""
        )

    def test_lists_become_tuples(self):
        """Test that list fields keep order and become immutable."""
        spec = BuildSpec(architecture="x86_64", build_args=["B=1", "A=2"])
        assert spec.build_args == ("B=1", "A=2")

    def test_scalar_list_value(self):
        """Test that a single string is accepted for a list field."""
        spec = BuildSpec(architecture="x86_64", cache_on="go.sum")
        assert spec.cache_on == ("go.sum",)

    def test_frozen(self):
        """Test that specs cannot be modified."""
        spec = BuildSpec(architecture="x86_64")
        with pytest.raises(ValidationError):
            spec.target = "build"  # type: ignore[misc]

    def test_unknown_field_rejected(self):
        """Test that unknown settings are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            BuildSpec(architecture="x86_64", cache_from="x")  # type: ignore[call-arg]
        assert "cache_from" in str(exc_info.value)

    @pytest.mark.parametrize("arg", ["FOO", "FOO=bar", "FOO=", "FOO=a b=c"])
    def test_valid_build_args(self, arg):
        """Test accepted build argument forms."""
        assert BuildSpec(architecture="x86_64", build_args=[arg]).build_args == (arg,)

    @pytest.mark.parametrize("arg", ["", "=bar", "MY VAR=1"])
    def test_invalid_build_args(self, arg):
        """Test rejected build argument forms."""
        with pytest.raises(ValidationError) as exc_info:
            BuildSpec(architecture="x86_64", build_args=[arg])
        assert "Invalid build argument" in str(exc_info.value)

    def test_invalid_cache_on(self):
        """Test that cache-on patterns need a glob."""
        with pytest.raises(ValidationError) as exc_info:
            BuildSpec(architecture="x86_64", cache_on=["#.version"])
        assert "has no glob" in str(exc_info.value)

    def test_invalid_secret(self):
        """Test that secret shorthand must be a variable name."""
        with pytest.raises(ValidationError) as exc_info:
            BuildSpec(architecture="x86_64", secrets=["not a name"])
        assert "Invalid secret" in str(exc_info.value)

    def test_dependency_patterns(self):
        """Test parsed cache-on patterns keep their order."""
        spec = BuildSpec(
            architecture="x86_64", cache_on=["go.sum", "package.json#.version"]
        )
        assert [str(p) for p in spec.dependency_patterns] == [
            "go.sum",
            "package.json#.version",
        ]
        assert spec.dependency_patterns[1].key_expression == ".version"
