"""Per-test execution context."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from types import TracebackType
from typing import Literal, TypeAlias

from unitree.errors import ConfigError
from unitree.models.config import RunConfig

log = logging.getLogger("unitree.test")

Severity: TypeAlias = Literal["error", "warning", "info"]

SEVERITY_LEVELS: dict[Severity, int] = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
}

TRUE_VALUES = frozenset({"true", "yes", "on", "1"})
FALSE_VALUES = frozenset({"false", "no", "off", "0"})


@dataclass(kw_only=True, eq=False)
class TestContext:
    """State owned by one test execution.

    Holds the pending teardown actions registered by brackets and the
    failures recorded by non-fatal checks. A context is created right before
    the test function runs and its teardowns fire right after, whatever the
    outcome.
    """

    __test__ = False

    path: str
    config: RunConfig = field(default_factory=RunConfig)
    _teardowns: list[Callable[[], object]] = field(
        default_factory=list, init=False, repr=False
    )
    _failures: list[AssertionError] = field(
        default_factory=list, init=False, repr=False
    )

    def __enter__(self) -> "TestContext":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if errors := self.run_teardowns():
            raise BaseExceptionGroup(f"teardown failed for {self.path}", errors)

    def register_teardown(self, action: Callable[[], object]) -> None:
        """Queue an action to run when the test ends."""
        self._teardowns.append(action)

    def run_teardowns(self) -> list[BaseException]:
        """Run queued teardowns, last registered first.

        Every teardown is attempted even when an earlier one raises. A
        KeyboardInterrupt is re-raised once all teardowns have run.

        Returns:
            Exceptions raised by teardowns, in the order they ran

        """
        errors: list[BaseException] = []
        interrupt: KeyboardInterrupt | None = None
        while self._teardowns:
            action = self._teardowns.pop()
            try:
                action()
            except KeyboardInterrupt as e:
                interrupt = interrupt or e
            except BaseException as e:
                log.debug("Teardown failed in %s", self.path, exc_info=e)
                errors.append(e)
        if interrupt is not None:
            raise interrupt
        return errors

    def record_failure(self, failure: AssertionError) -> None:
        """Record a failure without aborting the test."""
        self._failures.append(failure)

    @property
    def failures(self) -> Sequence[AssertionError]:
        return tuple(self._failures)

    def failure_message(self) -> str:
        """Join recorded failure messages in recording order."""
        return "\n".join(str(failure) for failure in self._failures)

    def logf(self, severity: Severity, fmt: str, *args: object) -> None:
        """Log a message attributed to this test."""
        log.log(SEVERITY_LEVELS[severity], "[%s] " + fmt, self.path, *args)

    def conf_string(self, name: str, default: str) -> str:
        """Look up a string setting."""
        return self.config.conf.get(name, default)

    def conf_string_opt(self, name: str, default: str | None = None) -> str | None:
        """Look up an optional string setting."""
        return self.config.conf.get(name, default)

    def conf_int(self, name: str, default: int) -> int:
        """Look up an integer setting."""
        if (value := self.config.conf.get(name)) is None:
            return default
        try:
            return int(value)
        except ValueError as e:
            raise ConfigError(f"Setting '{name}' is not an integer: {value!r}") from e

    def conf_bool(self, name: str, default: bool) -> bool:
        """Look up a boolean setting."""
        if (value := self.config.conf.get(name)) is None:
            return default
        normalized = value.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
        raise ConfigError(f"Setting '{name}' is not a boolean: {value!r}")
