"""Test tree: leaves, groups and their traversal."""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from unitree.context import TestContext

PATH_SEPARATOR = "/"

TestFunc: TypeAlias = Callable[["TestContext"], object]


@dataclass(frozen=True)
class Leaf:
    """A single executable test case."""

    func: TestFunc
    label: str | None = None


@dataclass(frozen=True)
class Group:
    """A named, ordered collection of sub-tests."""

    tests: Sequence["TestNode"] = field(default=())
    label: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tests", tuple(self.tests))


TestNode: TypeAlias = Leaf | Group


def test_case(func: TestFunc) -> Leaf:
    """Create an unlabeled test case."""
    return Leaf(func)


def test_list(tests: Sequence[TestNode]) -> Group:
    """Create an unlabeled test list."""
    return Group(tests)


def leaf(name: str, func: TestFunc) -> Leaf:
    """Create a labeled test case."""
    return Leaf(func, label=name)


def group(name: str, tests: Sequence[TestNode]) -> Group:
    """Create a labeled test list."""
    return Group(tests, label=name)


def label(name: str, test: TestNode) -> TestNode:
    """Label a pre-built test.

    An unlabeled test takes the label directly; an already labeled one is
    wrapped so both labels appear in its qualified path.
    """
    if test.label is None:
        return replace(test, label=name)
    return Group((test,), label=name)


# Keep pytest from collecting the constructors when test modules import them.
test_case.__test__ = False  # type: ignore[attr-defined]
test_list.__test__ = False  # type: ignore[attr-defined]


def iter_leaves(test: TestNode) -> Iterator[tuple[str, Leaf]]:
    """Yield ``(qualified_path, leaf)`` pairs, pre-order, in declaration order."""
    root = [test.label] if test.label is not None else []
    yield from _walk(test, root)


def _walk(test: TestNode, parts: list[str]) -> Iterator[tuple[str, Leaf]]:
    match test:
        case Leaf():
            yield PATH_SEPARATOR.join(parts), test
        case Group(tests=tests):
            for index, child in enumerate(tests):
                name = child.label if child.label is not None else str(index)
                yield from _walk(child, [*parts, name])


def matches_filters(path: str, filters: Sequence[str]) -> bool:
    """Check whether a qualified path is selected by any of the filters.

    No filters selects everything. A filter selects the path itself and
    everything beneath it.
    """
    if not filters:
        return True
    return any(
        path == selected or path.startswith(selected + PATH_SEPARATOR)
        for selected in filters
    )
