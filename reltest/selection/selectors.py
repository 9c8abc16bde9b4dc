##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Change-driven test selection.

Given the files changed in a package (e.g. from a diff between git branches, with
paths relative to the package directory), compute the smallest set of suites and
tests that must run again:

    >>> compute_selectors(["model/std/common.rel", "test/std/graph/test-bfs.rel"])
    {TestSelector(suite='std/common', tests=frozenset()),
     TestSelector(suite='std/graph', tests=frozenset({'test-bfs.rel'}))}

An empty result means no filtering at all: every suite runs.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, Optional, Set

from reltest.conventions import (
    MODEL_ROOT,
    RUN_EVERYTHING_MARKERS,
    SCRIPT_EXTENSION,
    TEST_ROOT,
    TESTITEM_EXTENSION,
    is_test_file,
)


LOG = logging.getLogger(__name__)

# The top element of a suite's selection: every test of the suite
ALL_TESTS: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class TestSelector:
    """
    Identifies a suite, optionally narrowed to specific test files.

    Attributes:
        suite: The suite key, the suite directory relative to the test root (e.g. `std/common`).
        tests: Basenames of the tests to run; empty means every test of the suite.
    """

    __test__ = False  # not a pytest test class

    suite: str
    tests: FrozenSet[str] = field(default=ALL_TESTS)

    @property
    def all_tests(self) -> bool:
        """True if the selector covers every test of its suite."""
        return not self.tests

    def matches(self, test_dir: str) -> bool:
        """
        Check whether the suite in `test_dir` is the one this selector designates.

        The suite key must be a path suffix of the directory, on a component
        boundary. The empty key (a test file directly under the test root)
        matches every suite.

        Args:
            test_dir: A suite directory.

        Returns:
            True if the directory is selected.
        """
        if not self.suite:
            return True
        test_dir = os.path.normpath(test_dir)
        return test_dir == self.suite or test_dir.endswith(os.sep + self.suite)


def merge_selection(current: Optional[FrozenSet[str]], incoming: FrozenSet[str]) -> FrozenSet[str]:
    """
    Join two selections of the same suite.

    Selections form a small lattice: nothing selected (None) is the bottom,
    `ALL_TESTS` is the top, and specific test sets are ordered by inclusion in
    between. Once a suite is fully selected it stays fully selected.

    Args:
        current: The selection recorded so far, or None if the suite was not selected yet.
        incoming: The selection to add.

    Returns:
        The least selection covering both.
    """
    if current is None:
        return incoming
    if current == ALL_TESTS or incoming == ALL_TESTS:
        return ALL_TESTS
    return current | incoming


def _relative_to(path: str, root: str) -> Optional[str]:
    prefix = root + "/"
    if path.startswith(prefix):
        return path[len(prefix) :]
    return None


def _selection_for(path: str):
    """
    Map one changed path to a (suite key, selection) pair, or None if the path selects nothing.
    """
    model_path = _relative_to(path, MODEL_ROOT)
    if model_path is not None:
        if model_path.endswith(SCRIPT_EXTENSION):
            # model/std/common.rel -> std/common
            return model_path[: -len(SCRIPT_EXTENSION)], ALL_TESTS
        return None

    test_path = _relative_to(path, TEST_ROOT)
    if test_path is not None:
        # test/std/common/test-foo.rel -> std/common
        suite, basename = os.path.split(test_path)
        if is_test_file(basename):
            return suite, frozenset((basename,))
        return suite, ALL_TESTS

    return None


def compute_selectors(changes: Iterable[str]) -> Set[TestSelector]:
    """
    Compute the selectors of the suites and tests affected by a list of changed files.

    Args:
        changes: Changed paths, relative to the package directory.

    Returns:
        The set of selectors. It is empty when nothing should be filtered, which is
        the case when a file that affects every suite (`before-install.rel` or
        `before-package.rel`) changed.
    """
    selection: Dict[str, FrozenSet[str]] = {}
    for path in changes:
        path = os.path.normpath(path)
        if path.endswith(RUN_EVERYTHING_MARKERS):
            LOG.debug(f"'{path}' affects every suite, selecting all tests.")
            return set()

        entry = _selection_for(path)
        if entry is None:
            LOG.debug(f"Ignoring change to '{path}'")
            continue
        suite, tests = entry
        selection[suite] = merge_selection(selection.get(suite), tests)

    return {TestSelector(suite, tests) for suite, tests in selection.items()}


def has_script_changes(changes: Iterable[str]) -> bool:
    """
    Check whether any of the changed files could select a test: a Rel script or a test item file.

    Args:
        changes: Changed paths.

    Returns:
        True if at least one path is script-relevant.
    """
    return any(path.endswith((SCRIPT_EXTENSION, TESTITEM_EXTENSION)) for path in changes)


def make_suite_filter(selectors: Iterable[TestSelector]) -> Callable[[str], bool]:
    """
    Return a predicate telling whether a suite directory is matched by any of the selectors.

    Args:
        selectors: Selectors as returned by `compute_selectors`.

    Returns:
        A function of a suite directory. It accepts every directory when there are no selectors.
    """
    selectors = list(selectors)
    return lambda test_dir: not selectors or any(selector.matches(test_dir) for selector in selectors)


def tests_for_suite(selectors: Iterable[TestSelector], test_dir: str) -> Optional[FrozenSet[str]]:
    """
    Combine the tests that the selectors request for the suite in `test_dir`.

    Args:
        selectors: Selectors as returned by `compute_selectors`.
        test_dir: A suite directory.

    Returns:
        The basenames of the tests to run, or None if every test of the suite must run.
    """
    selection = None
    for selector in selectors:
        if selector.matches(test_dir):
            selection = merge_selection(selection, selector.tests)
    if not selection:
        return None
    return selection
