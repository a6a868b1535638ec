"""Signals raised from inside a test body."""


class AssertionFailure(AssertionError):
    """Raised when an assertion does not hold."""


class TestControlSignal(BaseException):
    """Base for signals that end a test without being a failure.

    Derived from BaseException so that a test body catching ``Exception``
    cannot swallow them.
    """

    __test__ = False

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SkipSignal(TestControlSignal):
    """Raised by ``skip_if`` to end the current test as skipped."""


class TodoSignal(TestControlSignal):
    """Raised by ``todo`` to end the current test as still to be done."""


class ConfigError(ValueError):
    """Raised for invalid configuration files or values."""
