"""Detect tests that leave the working directory or environment changed."""

import os
from dataclasses import dataclass

from unitree.assertions import assert_equal, non_fatal
from unitree.context import TestContext


@dataclass(frozen=True, kw_only=True)
class EnvSnapshot:
    """Working directory and environment entries at a point in time."""

    pwd: str
    env: frozenset[str]


def snapshot() -> EnvSnapshot:
    """Capture the current working directory and environment."""
    return EnvSnapshot(
        pwd=os.getcwd(),
        env=frozenset(f"{key}={value}" for key, value in os.environ.items()),
    )


def check(ctx: TestContext, before: EnvSnapshot) -> None:
    """Record a failure for each difference from the ``before`` snapshot."""
    after = snapshot()
    non_fatal(
        ctx,
        lambda: assert_equal(
            before.pwd,
            after.pwd,
            printer=str,
            msg="Current working dir (check env).",
        ),
    )
    non_fatal(
        ctx,
        lambda: assert_equal(
            before.env,
            after.env,
            pp_diff=diff_entries,
            msg="Environment (check env).",
        ),
    )


def diff_entries(expected: frozenset[str], actual: frozenset[str]) -> str:
    """Render entries added (+) and removed (-) between two sets."""
    changes = [f"+{entry}" for entry in sorted(actual - expected)]
    changes.extend(f"-{entry}" for entry in sorted(expected - actual))
    return ", ".join(changes)
