"""Shared fixtures for dialogknobs control tests."""

import pytest

from dialogknobs_controls.input import ControlInput
from dialogknobs_controls.list_control import MultiValueListControl
from dialogknobs_controls.results import ControlResultBuilder
from tests.helpers import CHOICES, make_control


@pytest.fixture
def choices() -> list[str]:
    return list(CHOICES)


@pytest.fixture
def control() -> MultiValueListControl:
    """Required control with confirmation, page size 3, choices a..e."""
    return make_control()


@pytest.fixture
def unconfirmed_control() -> MultiValueListControl:
    """Control that does not ask for confirmation."""
    return make_control(confirmation_required=False)


@pytest.fixture
def result() -> ControlResultBuilder:
    return ControlResultBuilder()


@pytest.fixture
def empty_input() -> ControlInput:
    return ControlInput()
