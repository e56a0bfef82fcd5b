"""Tests for function_resolver module."""

import pytest

from dialogknobs_controls.exceptions import ConfigurationError
from dialogknobs_controls.function_resolver import (
    resolve_callable,
    resolve_callables,
    resolve_function,
)


class TestResolveFunction:
    """Tests for resolve_function."""

    def test_resolve_colon_reference(self) -> None:
        """Test resolving a function from a standard library module."""
        func = resolve_function("os.path:exists")
        assert callable(func)

    def test_resolve_dotted_reference(self) -> None:
        """Test the dotted form splits on the last dot."""
        import os.path

        assert resolve_function("os.path.exists") is os.path.exists

    def test_resolve_package_function(self) -> None:
        """Test resolving a function from this package."""
        func = resolve_function("dialogknobs_controls.function_resolver:resolve_function")
        assert func is resolve_function

    def test_whitespace_stripped(self) -> None:
        """Test that surrounding whitespace is ignored."""
        assert callable(resolve_function("  os.path:exists  "))

    @pytest.mark.parametrize("ref", ["", "   "])
    def test_empty_reference(self, ref: str) -> None:
        """Test that blank references are rejected."""
        with pytest.raises(ConfigurationError):
            resolve_function(ref)

    def test_no_separator(self) -> None:
        """Test that a bare name without a module is rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_function("exists")

        assert exc_info.value.context["reference"] == "exists"

    def test_missing_function_name(self) -> None:
        """Test that a reference ending in a colon is rejected."""
        with pytest.raises(ConfigurationError):
            resolve_function("os.path:")

    def test_nonexistent_module(self) -> None:
        """Test that an unknown module is reported in the context."""
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_function("nonexistent_module_xyz:some_func")

        assert exc_info.value.context["module"] == "nonexistent_module_xyz"

    def test_nonexistent_function(self) -> None:
        """Test that an unknown attribute is rejected."""
        with pytest.raises(ConfigurationError):
            resolve_function("os.path:nonexistent_function_xyz")

    def test_not_callable(self) -> None:
        """Test that a non-callable attribute is rejected."""
        with pytest.raises(ConfigurationError):
            resolve_function("os.path:sep")


class TestResolveCallable:
    """Tests for resolve_callable and resolve_callables."""

    def test_literals_pass_through(self) -> None:
        """Test that non-string literals are returned unchanged."""
        assert resolve_callable(True) is True
        assert resolve_callable(["a"]) == ["a"]

    def test_callable_pass_through(self) -> None:
        """Test that callables are returned unchanged."""
        def func():
            pass

        assert resolve_callable(func) is func

    def test_resolve_list(self) -> None:
        """Test resolving a mixed list of callables and references."""
        def func():
            pass

        resolved = resolve_callables([func, "os.path:exists"])

        assert resolved[0] is func
        assert callable(resolved[1])

    def test_resolve_list_rejects_non_callable(self) -> None:
        """Test that a list entry that is not callable is rejected."""
        with pytest.raises(ConfigurationError):
            resolve_callables([42])
