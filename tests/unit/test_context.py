"""Tests for the test context."""

import logging
import sys

import pytest

from unitree.context import TestContext
from unitree.errors import AssertionFailure, ConfigError, SkipSignal
from unitree.models.config import RunConfig


def test_teardowns_run_in_reverse_order() -> None:
    """Last registered teardown runs first."""
    calls: list[str] = []
    context = TestContext(path="t")
    for name in ("b1", "b2", "b3"):
        context.register_teardown(lambda name=name: calls.append(name))

    assert context.run_teardowns() == []
    assert calls == ["b3", "b2", "b1"]


def test_failing_teardown_does_not_stop_others() -> None:
    """All teardowns run and their errors are returned in order."""
    calls: list[str] = []
    context = TestContext(path="t")

    def broken() -> None:
        calls.append("b2")
        raise OSError("disk gone")

    context.register_teardown(lambda: calls.append("b1"))
    context.register_teardown(broken)
    context.register_teardown(lambda: calls.append("b3"))

    errors = context.run_teardowns()

    assert calls == ["b3", "b2", "b1"]
    assert len(errors) == 1
    assert isinstance(errors[0], OSError)


def test_run_teardowns_empties_queue() -> None:
    """Teardowns run only once."""
    calls: list[str] = []
    context = TestContext(path="t")
    context.register_teardown(lambda: calls.append("once"))

    context.run_teardowns()
    context.run_teardowns()

    assert calls == ["once"]


def test_context_manager_raises_exception_group() -> None:
    """Leaving the context surfaces every teardown failure."""

    def broken(message: str) -> None:
        raise RuntimeError(message)

    with pytest.raises(ExceptionGroup) as exc_info:
        with TestContext(path="suite/case") as context:
            context.register_teardown(lambda: broken("first"))
            context.register_teardown(lambda: broken("second"))

    assert "suite/case" in str(exc_info.value)
    assert [str(e) for e in exc_info.value.exceptions] == ["second", "first"]


def test_context_manager_runs_teardowns_after_error() -> None:
    """Teardowns run even when the body raises."""
    calls: list[str] = []

    with pytest.raises(ValueError):
        with TestContext(path="t") as context:
            context.register_teardown(lambda: calls.append("released"))
            raise ValueError("body failed")

    assert calls == ["released"]


def test_failures_are_recorded_in_order(ctx: TestContext) -> None:
    """Recorded failures keep their order."""
    ctx.record_failure(AssertionFailure("one"))
    ctx.record_failure(AssertionError("two"))

    assert len(ctx.failures) == 2
    assert ctx.failure_message() == "one\ntwo"


def test_logf_prefixes_path(ctx: TestContext, caplog: pytest.LogCaptureFixture) -> None:
    """Log records name the test they come from."""
    with caplog.at_level(logging.INFO, logger="unitree.test"):
        ctx.logf("warning", "value is %d", 3)

    assert caplog.records[0].levelno == logging.WARNING
    assert caplog.records[0].getMessage() == "[suite/case] value is 3"


def test_conf_lookups_use_defaults() -> None:
    """Missing settings fall back to defaults."""
    context = TestContext(path="t")

    assert context.conf_string("name", "dflt") == "dflt"
    assert context.conf_string_opt("name") is None
    assert context.conf_int("count", 3) == 3
    assert context.conf_bool("flag", True) is True


def test_conf_lookups_parse_values() -> None:
    """Stored strings are converted to the requested kind."""
    config = RunConfig(
        conf={"name": "db", "count": "12", "flag": "Yes", "off": "0"}
    )
    context = TestContext(path="t", config=config)

    assert context.conf_string("name", "dflt") == "db"
    assert context.conf_string_opt("name") == "db"
    assert context.conf_int("count", 3) == 12
    assert context.conf_bool("flag", False) is True
    assert context.conf_bool("off", True) is False


@pytest.mark.parametrize(
    ("lookup", "value"),
    [("conf_int", "twelve"), ("conf_bool", "maybe")],
)
def test_conf_lookups_reject_bad_values(lookup: str, value: str) -> None:
    """Unparseable values raise ConfigError naming the setting."""
    context = TestContext(path="t", config=RunConfig(conf={"key": value}))

    with pytest.raises(ConfigError, match="'key'"):
        getattr(context, lookup)("key", 0)


def test_signal_in_teardown_does_not_stop_others() -> None:
    """Teardowns raising BaseException are recorded like any failure."""
    calls: list[str] = []
    context = TestContext(path="t")

    def skipping() -> None:
        raise SkipSignal("t")

    context.register_teardown(lambda: calls.append("b1"))
    context.register_teardown(skipping)
    context.register_teardown(lambda: sys.exit(3))

    errors = context.run_teardowns()

    assert calls == ["b1"]
    assert [type(e) for e in errors] == [SystemExit, SkipSignal]


def test_keyboard_interrupt_in_teardown_raised_after_others() -> None:
    """An interrupt is re-raised only once every teardown has run."""
    calls: list[str] = []
    context = TestContext(path="t")

    def interrupted() -> None:
        raise KeyboardInterrupt

    context.register_teardown(lambda: calls.append("b1"))
    context.register_teardown(interrupted)

    with pytest.raises(KeyboardInterrupt):
        context.run_teardowns()

    assert calls == ["b1"]
