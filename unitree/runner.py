"""Test runner walking a test tree and executing its leaves."""

import logging
import time
from dataclasses import dataclass, field

from unitree.check_env import EnvSnapshot, check, snapshot
from unitree.context import TestContext
from unitree.errors import SkipSignal, TodoSignal
from unitree.models.config import RunConfig
from unitree.models.result import LeafResult, RunResult, Status
from unitree.tree import Leaf, TestNode, iter_leaves, matches_filters

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestRunner:
    """Runs the leaves of a test tree one at a time, in traversal order."""

    __test__ = False

    config: RunConfig = field(default_factory=RunConfig)

    def run(self, test: TestNode) -> RunResult:
        """Run every selected leaf of ``test`` and aggregate the outcomes."""
        selected = [
            (path, leaf)
            for path, leaf in iter_leaves(test)
            if matches_filters(path, self.config.only_tests)
        ]
        log.info("Running %d test(s)...", len(selected))

        results = [self.run_leaf(path, leaf) for path, leaf in selected]
        log.info("Test execution completed")

        return RunResult(results=results)

    def run_leaf(self, path: str, leaf: Leaf) -> LeafResult:
        """Run one leaf in a fresh context and classify its outcome."""
        log.debug("Starting %s", path)
        start = time.monotonic()

        ctx = TestContext(path=path, config=self.config)
        before = snapshot() if self.config.check_env else None

        try:
            status, message = _run_body(ctx, leaf)
        except BaseException:
            # Interrupted run; release resources before unwinding.
            ctx.run_teardowns()
            raise
        status, message = _fold_teardowns(ctx, status, message)
        if before is not None:
            status, message = _fold_env_check(ctx, before, status, message)

        result = LeafResult(
            path=path,
            status=status,
            duration=time.monotonic() - start,
            message=message,
        )
        log.info(
            "Test completed: path=%s status=%s duration=%.3fs",
            result.path,
            result.status,
            result.duration,
        )
        return result


def _run_body(ctx: TestContext, leaf: Leaf) -> tuple[Status, str | None]:
    status: Status
    message: str | None
    try:
        leaf.func(ctx)
    except SkipSignal as signal:
        status, message = "skipped", signal.reason
    except TodoSignal as signal:
        return "todo", signal.reason
    except AssertionError as e:
        ctx.record_failure(e)
        return "failed", ctx.failure_message()
    except KeyboardInterrupt:
        raise
    except BaseException as e:
        # SystemExit from code under test is an error, not the end of the run.
        log.debug("Unexpected error in %s", ctx.path, exc_info=e)
        return "error", _join(_describe(e), ctx.failure_message())
    else:
        status, message = "passed", None

    if ctx.failures:
        return "failed", ctx.failure_message()
    return status, message


def _fold_teardowns(
    ctx: TestContext, status: Status, message: str | None
) -> tuple[Status, str | None]:
    if not (errors := ctx.run_teardowns()):
        return status, message
    return "error", _join(message, *(f"teardown: {_describe(e)}" for e in errors))


def _fold_env_check(
    ctx: TestContext, before: EnvSnapshot, status: Status, message: str | None
) -> tuple[Status, str | None]:
    recorded = len(ctx.failures)
    check(ctx, before)
    violations = ctx.failures[recorded:]
    if not violations:
        return status, message

    details = "\n".join(str(violation) for violation in violations)
    if status == "passed":
        return "failed", details
    return status, _join(message, details)


def _describe(error: BaseException) -> str:
    return f"{type(error).__name__}: {error}"


def _join(*parts: str | None) -> str:
    return "\n".join(part for part in parts if part)
