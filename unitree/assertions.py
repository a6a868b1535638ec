"""Assertions signalling failures from inside a test."""

import math
from collections.abc import Callable
from typing import TYPE_CHECKING, NoReturn, TypeVar

from unitree.errors import AssertionFailure, SkipSignal, TestControlSignal, TodoSignal

if TYPE_CHECKING:
    from unitree.context import TestContext

DEFAULT_EPSILON = 1e-5

T = TypeVar("T")
R = TypeVar("R")


def fail(message: str) -> NoReturn:
    """Signal a failure unconditionally."""
    raise AssertionFailure(message)


def assert_bool(message: str, condition: bool) -> None:
    """Signal a failure with ``message`` when ``condition`` is false."""
    if not condition:
        fail(message)


def assert_string(message: str) -> None:
    """Signal a failure when ``message`` is non-empty."""
    if message:
        fail(message)


def assert_equal(
    expected: T,
    actual: T,
    *,
    cmp: Callable[[T, T], bool] | None = None,
    printer: Callable[[T], str] | None = None,
    pp_diff: Callable[[T, T], str] | None = None,
    msg: str | None = None,
) -> None:
    """Signal a failure when ``expected`` and ``actual`` differ.

    Args:
        expected: Expected value
        actual: Value produced by the code under test
        cmp: Equality predicate (default: ``==``)
        printer: Renders a value for the failure message
        pp_diff: Renders the difference between both values; takes
            precedence over ``printer``
        msg: Context prepended to the failure message

    Raises:
        AssertionFailure: If ``cmp(expected, actual)`` does not hold

    """
    equal = cmp(expected, actual) if cmp is not None else expected == actual
    if equal:
        return

    lines = [msg] if msg else []
    if pp_diff is not None:
        lines.append(f"differences: {pp_diff(expected, actual)}")
    elif printer is not None:
        lines.append(f"expected: {printer(expected)} but got: {printer(actual)}")
    else:
        lines.append("not equal")
    fail("\n".join(lines))


def assert_raises(
    expected: BaseException,
    thunk: Callable[[], object],
    *,
    msg: str | None = None,
) -> None:
    """Signal a failure unless ``thunk`` raises an exception equal to ``expected``.

    Exceptions are equal when they have the same type and the same ``args``.
    Interrupts and skip/todo signals that were not expected propagate.
    """
    prefix = f"{msg}\n" if msg else ""
    try:
        thunk()
    except BaseException as e:
        if type(e) is type(expected) and e.args == expected.args:
            return
        if isinstance(e, (KeyboardInterrupt, TestControlSignal)):
            raise
        fail(
            f"{prefix}expected exception {expected!r}, "
            f"but exception {e!r} was raised"
        )
    fail(f"{prefix}expected exception {expected!r}, but no exception was raised")


def cmp_float(a: float, b: float, epsilon: float = DEFAULT_EPSILON) -> bool:
    """Compare floats within an absolute tolerance."""
    if a == b:
        return True
    if math.isnan(a) or math.isnan(b):
        return False
    return abs(a - b) <= epsilon


def skip_if(condition: bool, reason: str) -> None:
    """End the current test as skipped when ``condition`` is true."""
    if condition:
        raise SkipSignal(reason)


def todo(reason: str) -> NoReturn:
    """End the current test as still to be done."""
    raise TodoSignal(reason)


def non_fatal(ctx: "TestContext", thunk: Callable[[], R]) -> R | None:
    """Run a check whose failure is recorded but does not stop the test.

    Returns:
        The check's return value, or None when it failed

    """
    try:
        return thunk()
    except AssertionError as e:
        ctx.record_failure(e)
        return None
