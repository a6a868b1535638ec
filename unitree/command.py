"""Assertion running an external command and checking its outcome."""

import asyncio
import shlex
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Literal, TypeAlias

from unitree.context import TestContext
from unitree.errors import AssertionFailure

StdinSource: TypeAlias = str | bytes | Iterable[str | bytes]


@dataclass(frozen=True, kw_only=True)
class ProcessStatus:
    """How a process terminated."""

    kind: Literal["exited", "signaled", "stopped"]
    code: int

    @classmethod
    def exited(cls, code: int) -> "ProcessStatus":
        return cls(kind="exited", code=code)

    @classmethod
    def signaled(cls, signal: int) -> "ProcessStatus":
        return cls(kind="signaled", code=signal)

    @classmethod
    def stopped(cls, signal: int) -> "ProcessStatus":
        return cls(kind="stopped", code=signal)

    @classmethod
    def from_returncode(cls, returncode: int) -> "ProcessStatus":
        """Convert a subprocess return code; negative means killed by a signal."""
        if returncode < 0:
            return cls.signaled(-returncode)
        return cls.exited(returncode)

    def __str__(self) -> str:
        match self.kind:
            case "exited":
                return f"exited with code {self.code}"
            case "signaled":
                return f"killed by signal {self.code}"
            case "stopped":
                return f"stopped by signal {self.code}"


@dataclass(frozen=True, kw_only=True)
class CommandResult:
    """Termination status and captured output of a command."""

    status: ProcessStatus
    stdout: str
    stderr: str


def assert_command(
    ctx: TestContext,
    program: str,
    args: Sequence[str] = (),
    *,
    exit_code: ProcessStatus = ProcessStatus.exited(0),
    stdin: StdinSource = "",
    foutput: Callable[[Iterator[str]], object] | None = None,
    use_stderr: bool = False,
    env: Mapping[str, str] | None = None,
    verbose: bool = False,
) -> CommandResult:
    """Run a command and assert on its output and termination status.

    Synchronous only: it drives its own event loop, so it cannot be called
    from inside a running one.

    Args:
        ctx: Context of the running test
        program: Program to execute
        args: Program arguments
        exit_code: Expected termination status
        stdin: Data fed to the process's standard input
        foutput: Verifier called with the captured output characters,
            before the status is checked
        use_stderr: Merge stderr into stdout
        env: Environment of the process (default: inherited)
        verbose: Append captured output to the failure message

    Returns:
        The captured result, when every check passed

    Raises:
        AssertionFailure: If the verifier fails or the status differs
        RuntimeError: If called while an event loop is running

    """
    if _has_running_loop():
        raise RuntimeError("assert_command cannot be called from a running event loop")

    command_line = shlex.join([program, *args])
    ctx.logf("info", "Starting command '%s'", command_line)

    result = asyncio.run(
        _run_process(program, args, _encode_stdin(stdin), use_stderr, env)
    )
    ctx.logf("info", "Command '%s' %s", command_line, result.status)

    try:
        if foutput is not None:
            foutput(iter(result.stdout))
        if result.status != exit_code:
            raise AssertionFailure(
                f"Command '{command_line}' {result.status}, expected {exit_code}"
            )
    except AssertionError as e:
        if verbose:
            raise AssertionFailure(f"{e}\n{_dump_output(result)}") from e
        raise

    return result


async def _run_process(
    program: str,
    args: Sequence[str],
    stdin: bytes,
    use_stderr: bool,
    env: Mapping[str, str] | None,
) -> CommandResult:
    process = await asyncio.create_subprocess_exec(
        program,
        *args,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT if use_stderr else asyncio.subprocess.PIPE,
        env=dict(env) if env is not None else None,
    )
    # communicate() feeds stdin and drains both pipes concurrently.
    stdout, stderr = await process.communicate(input=stdin)
    returncode = await process.wait()

    return CommandResult(
        status=ProcessStatus.from_returncode(returncode),
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace") if stderr else "",
    )


def _has_running_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def _encode_stdin(stdin: StdinSource) -> bytes:
    if isinstance(stdin, bytes):
        return stdin
    if isinstance(stdin, str):
        return stdin.encode()
    return b"".join(
        chunk if isinstance(chunk, bytes) else chunk.encode() for chunk in stdin
    )


def _dump_output(result: CommandResult) -> str:
    return f"stdout:\n{result.stdout}\nstderr:\n{result.stderr}"
