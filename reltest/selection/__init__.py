##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
The `selection` package maps changed files to the suites and tests they affect.

Modules:
    selectors: `TestSelector`, the selection merge lattice and suite filters.
"""
from reltest.selection.selectors import (
    ALL_TESTS,
    TestSelector,
    compute_selectors,
    has_script_changes,
    make_suite_filter,
    merge_selection,
    tests_for_suite,
)


__all__ = [
    "ALL_TESTS",
    "TestSelector",
    "compute_selectors",
    "has_script_changes",
    "make_suite_filter",
    "merge_selection",
    "tests_for_suite",
]
