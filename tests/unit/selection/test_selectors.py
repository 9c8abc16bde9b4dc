##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Tests for the `selectors.py` module.
"""

import os
from typing import List

import pytest

from reltest import selection
from reltest.selection import (
    ALL_TESTS,
    TestSelector,
    compute_selectors,
    has_script_changes,
    make_suite_filter,
    merge_selection,
)


class TestTestSelector:
    """
    Tests for the `TestSelector` class.
    """

    def test_all_tests(self):
        """Test that a selector without tests covers the whole suite."""
        assert TestSelector("std/common").all_tests
        assert not TestSelector("std/common", frozenset({"test-foo.rel"})).all_tests

    @pytest.mark.parametrize(
        "suite, test_dir, expected",
        [
            ("std/common", "/repos/std-rel/test/std/common", True),
            ("std/common", "/repos/std-rel/test/std/common/", True),
            ("std/common", "std/common", True),
            ("common", "/repos/std-rel/test/std/common", True),
            ("std/common", "/repos/std-rel/test/std/common/nested", False),
            ("mon", "/repos/std-rel/test/std/common", False),
            ("", "/repos/std-rel/test/anything", True),
        ],
    )
    def test_matches(self, suite: str, test_dir: str, expected: bool):
        """
        Test that suite keys match path suffixes on component boundaries.

        Args:
            suite: The suite key of the selector.
            test_dir: The suite directory to match.
            expected: Whether the directory should be matched.
        """
        assert TestSelector(suite).matches(test_dir.replace("/", os.sep)) == expected


class TestMergeSelection:
    """
    Tests for the `merge_selection` function.
    """

    def test_nothing_is_the_bottom(self):
        """Test that merging into an unselected suite gives the incoming selection."""
        assert merge_selection(None, frozenset({"a"})) == frozenset({"a"})
        assert merge_selection(None, ALL_TESTS) == ALL_TESTS

    def test_all_tests_is_the_top(self):
        """Test that a fully selected suite stays fully selected."""
        assert merge_selection(ALL_TESTS, frozenset({"a"})) == ALL_TESTS
        assert merge_selection(frozenset({"a"}), ALL_TESTS) == ALL_TESTS

    def test_union(self):
        """Test that specific selections are merged by union."""
        assert merge_selection(frozenset({"a"}), frozenset({"b"})) == frozenset({"a", "b"})


class TestComputeSelectors:
    """
    Tests for the `compute_selectors` function.
    """

    def test_no_changes(self):
        """Test that no changes means no selectors."""
        assert compute_selectors([]) == set()

    @pytest.mark.parametrize("marker", ["test/before-install.rel", "test/before-package.rel"])
    def test_run_everything_markers(self, marker: str):
        """
        Test that a change to a package-wide script removes all filtering.

        Args:
            marker: The changed package-wide script.
        """
        changes = ["model/std/common.rel", marker, "test/std/graph/test-bfs.rel"]
        assert compute_selectors(changes) == set()

    def test_model_change(self):
        """Test that a model change selects every test of the suite with the same key."""
        assert compute_selectors(["model/std/common.rel"]) == {TestSelector("std/common")}

    def test_test_change(self):
        """Test that a test change selects only that test."""
        assert compute_selectors(["test/std/graph/test-bfs.rel", "./test/std/graph/helpers_test.py"]) == {
            TestSelector("std/graph", frozenset({"test-bfs.rel", "helpers_test.py"}))
        }

    def test_suite_script_change(self):
        """Test that a change to a non-test file of a suite selects the whole suite."""
        assert compute_selectors(["test/std/graph/before-suite.rel"]) == {TestSelector("std/graph")}

    def test_irrelevant_changes(self):
        """Test that changes outside the model and test roots select nothing."""
        assert compute_selectors(["README.md", "model/std/notes.txt", "docs/test/foo.rel"]) == set()

    @pytest.mark.parametrize(
        "changes",
        [
            ["model/std/common.rel", "test/std/common/test-foo.rel"],
            ["test/std/common/test-foo.rel", "model/std/common.rel"],
        ],
    )
    def test_whole_suite_subsumes_single_tests(self, changes: List[str]):
        """
        Test that selecting a whole suite wins over single tests, whatever the order of the changes.

        Args:
            changes: The changed paths.
        """
        assert compute_selectors(changes) == {TestSelector("std/common")}

    def test_idempotent(self):
        """Test that duplicated changes do not change the result."""
        changes = ["model/std/common.rel", "test/std/graph/test-bfs.rel"]
        assert compute_selectors(changes + changes) == compute_selectors(changes)
        assert compute_selectors(changes) == {
            TestSelector("std/common"),
            TestSelector("std/graph", frozenset({"test-bfs.rel"})),
        }

    def test_has_script_changes(self):
        """Test the detection of script-relevant changes."""
        assert has_script_changes(["README.md", "model/std/common.rel"])
        assert has_script_changes(["test/std/helpers_test.py"])
        assert not has_script_changes(["README.md", "rel-package.json"])
        assert not has_script_changes([])


class TestFilters:
    """
    Tests for the `make_suite_filter` and `tests_for_suite` functions.
    """

    def test_no_selectors_accept_everything(self):
        """Test that no selectors means no filtering."""
        assert make_suite_filter([])("/repos/std-rel/test/std/common")
        assert selection.tests_for_suite([], "/repos/std-rel/test/std/common") is None

    def test_suite_filter(self):
        """Test that only matched suites are accepted."""
        suite_filter = make_suite_filter({TestSelector("std/common")})
        assert suite_filter(os.path.join("pkg", "test", "std", "common"))
        assert not suite_filter(os.path.join("pkg", "test", "std", "graph"))

    def test_tests_for_suite(self):
        """Test combining the tests that several selectors request for a suite."""
        selectors = {
            TestSelector("std/graph", frozenset({"test-bfs.rel"})),
            TestSelector("", frozenset({"test-dfs.rel"})),
            TestSelector("std/common"),
        }
        graph_dir = os.path.join("pkg", "test", "std", "graph")
        common_dir = os.path.join("pkg", "test", "std", "common")
        assert selection.tests_for_suite(selectors, graph_dir) == frozenset({"test-bfs.rel", "test-dfs.rel"})
        assert selection.tests_for_suite(selectors, common_dir) is None
