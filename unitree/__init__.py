"""Unit testing engine: test trees, brackets, assertions and a runner."""

from unitree.assertions import (
    assert_bool,
    assert_equal,
    assert_raises,
    assert_string,
    cmp_float,
    fail,
    non_fatal,
    skip_if,
    todo,
)
from unitree.brackets import bracket, bracket_tmpdir, bracket_tmpfile
from unitree.cli import run_test_tt_main
from unitree.command import CommandResult, ProcessStatus, assert_command
from unitree.context import TestContext
from unitree.errors import AssertionFailure, ConfigError, SkipSignal, TodoSignal
from unitree.models.config import RunConfig
from unitree.models.result import LeafResult, RunResult
from unitree.runner import TestRunner
from unitree.tree import Group, Leaf, group, label, leaf, test_case, test_list

__all__ = [
    "AssertionFailure",
    "CommandResult",
    "ConfigError",
    "Group",
    "Leaf",
    "LeafResult",
    "ProcessStatus",
    "RunConfig",
    "RunResult",
    "SkipSignal",
    "TestContext",
    "TestRunner",
    "TodoSignal",
    "assert_bool",
    "assert_command",
    "assert_equal",
    "assert_raises",
    "assert_string",
    "bracket",
    "bracket_tmpdir",
    "bracket_tmpfile",
    "cmp_float",
    "fail",
    "group",
    "label",
    "leaf",
    "non_fatal",
    "run_test_tt_main",
    "skip_if",
    "test_case",
    "test_list",
    "todo",
]
