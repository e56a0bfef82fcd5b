"""Tests for guard results and custom handlers."""

import logging

import pytest

from dialogknobs_controls.guards import (
    CustomHandler,
    Matched,
    Unmatched,
    evaluate_custom_handlers,
    first_failed_check,
    log_if_both_matched,
)
from dialogknobs_controls.input import ControlInput, ParsedIntent


def _noop(control_input, result):
    return None


class TestGuardResult:
    """Tests for Matched/Unmatched."""

    def test_truthiness(self) -> None:
        """Test that Matched is truthy and Unmatched is falsy."""
        assert Matched(_noop, "add")
        assert not Unmatched("add", "no values")

    def test_first_failed_check(self) -> None:
        """Test that the first failing check name is returned."""
        assert first_failed_check(("a", True), ("b", False), ("c", False)) == "b"
        assert first_failed_check(("a", True)) is None
        assert first_failed_check() is None


class TestCustomHandler:
    """Tests for CustomHandler construction."""

    def test_from_config_with_references(self) -> None:
        """Test building a handler from function references."""
        handler = CustomHandler.from_config(
            {
                "name": "exists",
                "can_handle": "os.path:exists",
                "handle": "os.path:isdir",
            }
        )

        assert handler.name == "exists"
        assert callable(handler.can_handle)
        assert callable(handler.handle)

    def test_from_config_passes_instances_through(self) -> None:
        """Test that an existing handler is returned as is."""
        handler = CustomHandler(lambda i: True, _noop)
        assert CustomHandler.from_config(handler) is handler

    def test_default_name(self) -> None:
        """Test the name given to an unnamed handler."""
        handler = CustomHandler.from_config({"can_handle": lambda i: True, "handle": _noop})
        assert handler.name == "custom"


class TestEvaluateCustomHandlers:
    """Tests for evaluate_custom_handlers."""

    @pytest.mark.asyncio
    async def test_first_match_wins(self) -> None:
        """Test that handlers are tried in order."""
        handlers = [
            CustomHandler(lambda i: False, _noop, name="never"),
            CustomHandler(lambda i: True, _noop, name="first"),
            CustomHandler(lambda i: True, _noop, name="second"),
        ]

        outcome = await evaluate_custom_handlers(handlers, ControlInput())

        assert isinstance(outcome, Matched)
        assert outcome.name == "first"

    @pytest.mark.asyncio
    async def test_async_predicate(self) -> None:
        """Test that async predicates are awaited."""
        async def is_help(control_input):
            return control_input.intent_name == "HelpIntent"

        handlers = [CustomHandler(is_help, _noop, name="help")]

        matched = await evaluate_custom_handlers(
            handlers, ControlInput(intent=ParsedIntent(name="HelpIntent"))
        )
        unmatched = await evaluate_custom_handlers(handlers, ControlInput())

        assert isinstance(matched, Matched)
        assert isinstance(unmatched, Unmatched)

    @pytest.mark.asyncio
    async def test_no_handlers(self) -> None:
        """Test that no handlers gives an Unmatched result."""
        outcome = await evaluate_custom_handlers((), ControlInput())
        assert isinstance(outcome, Unmatched)


class TestDisagreementLogging:
    """Tests for advisory logging when custom and built-in both match."""

    def test_warns_when_both_match(self, caplog) -> None:
        """Test the warning when custom and built-in guards both match."""
        with caplog.at_level(logging.WARNING, logger="dialogknobs_controls.guards"):
            log_if_both_matched(Matched(_noop, "help"), Matched(_noop, "add_with_value"))

        assert "both matched" in caplog.text

    def test_silent_otherwise(self, caplog) -> None:
        """Test that nothing is logged when only one side matched."""
        with caplog.at_level(logging.WARNING, logger="dialogknobs_controls.guards"):
            log_if_both_matched(Unmatched("custom", "none"), Matched(_noop, "add"))
            log_if_both_matched(Matched(_noop, "help"), Unmatched("builtin", "none"))

        assert caplog.text == ""
