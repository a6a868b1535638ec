"""Shared fixtures."""

from collections.abc import Generator

import pytest

from unitree.context import TestContext


@pytest.fixture
def ctx() -> Generator[TestContext]:
    """Context whose teardowns run when the test ends."""
    with TestContext(path="suite/case") as context:
        yield context
