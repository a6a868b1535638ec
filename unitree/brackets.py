"""Setup/teardown pairs scoped to a test context."""

import functools
import os
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import IO, Any, TypeVar

from unitree.context import TestContext

DEFAULT_PREFIX = "unitree-"

R = TypeVar("R")


def bracket(
    setup: Callable[[TestContext], R],
    teardown: Callable[[R, TestContext], object],
    ctx: TestContext,
) -> R:
    """Set up a resource and register its teardown on the context.

    If ``setup`` raises, nothing is registered and the error propagates.
    """
    resource = setup(ctx)
    ctx.register_teardown(functools.partial(teardown, resource, ctx))
    return resource


def bracket_tmpfile(
    ctx: TestContext,
    prefix: str = DEFAULT_PREFIX,
    suffix: str = ".txt",
    mode: str = "w+",
) -> tuple[Path, IO[Any]]:
    """Create a temporary file removed when the test ends.

    Returns:
        The file path and a handle opened with ``mode``

    """

    def setup(_: TestContext) -> tuple[Path, IO[Any]]:
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix)
        try:
            handle = os.fdopen(fd, mode)
        except Exception:
            os.close(fd)
            os.unlink(name)
            raise
        ctx.logf("info", "Created temporary file %s", name)
        return Path(name), handle

    def teardown(resource: tuple[Path, IO[Any]], _: TestContext) -> None:
        path, handle = resource
        handle.close()
        path.unlink(missing_ok=True)

    return bracket(setup, teardown, ctx)


def bracket_tmpdir(
    ctx: TestContext,
    prefix: str = DEFAULT_PREFIX,
    suffix: str = "",
) -> Path:
    """Create a temporary directory removed recursively when the test ends."""

    def setup(_: TestContext) -> Path:
        path = Path(tempfile.mkdtemp(prefix=prefix, suffix=suffix))
        ctx.logf("info", "Created temporary directory %s", path)
        return path

    def teardown(path: Path, _: TestContext) -> None:
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            pass

    return bracket(setup, teardown, ctx)
