"""Models for test execution results."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from unitree.tree import PATH_SEPARATOR

Status = Literal["passed", "failed", "error", "skipped", "todo"]

UNSUCCESSFUL_STATUSES: frozenset[Status] = frozenset({"failed", "error", "todo"})


@dataclass(frozen=True, kw_only=True)
class LeafResult:
    """Outcome of a single leaf execution."""

    path: str
    status: Status
    duration: float
    message: str | None = None

    @property
    def successful(self) -> bool:
        """Skipped counts as success, todo does not."""
        return self.status not in UNSUCCESSFUL_STATUSES


@dataclass(frozen=True, kw_only=True)
class RunResult:
    """Aggregated outcomes of every leaf that ran, in traversal order."""

    results: Sequence[LeafResult]

    def count(self, status: Status) -> int:
        """Count leaves with the given status."""
        return sum(1 for result in self.results if result.status == status)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return self.count("passed")

    @property
    def failed(self) -> int:
        return self.count("failed")

    @property
    def errors(self) -> int:
        return self.count("error")

    @property
    def skipped(self) -> int:
        return self.count("skipped")

    @property
    def todos(self) -> int:
        return self.count("todo")

    @property
    def was_successful(self) -> bool:
        """True when no leaf failed, errored or is still todo."""
        return all(result.successful for result in self.results)

    @property
    def unsuccessful_paths(self) -> Sequence[str]:
        return [result.path for result in self.results if not result.successful]

    def for_group(self, path: str) -> "RunResult":
        """Return the outcomes of the leaves under a group path.

        A group has no outcome of its own; it is the multiset of its
        descendants' outcomes, so a todo anywhere below makes every
        enclosing group unsuccessful.
        """
        prefix = path + PATH_SEPARATOR
        return RunResult(
            results=[
                result
                for result in self.results
                if result.path == path or result.path.startswith(prefix)
            ]
        )
