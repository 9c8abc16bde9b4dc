##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Tests for the `conventions.py` module.
"""

import pytest

from reltest.conventions import is_script, is_test_file, is_test_script, is_testitem_file


@pytest.mark.parametrize(
    "filename, script, test_script, testitem",
    [
        ("test-foo.rel", True, True, False),
        ("before-suite.rel", True, False, False),
        ("model/std/common.rel", True, False, False),
        ("test-foo.py", False, False, False),
        ("helpers_test.py", False, False, True),
        ("helpers.py", False, False, False),
        ("test-foo.rel.bak", False, False, False),
    ],
)
def test_file_classification(filename: str, script: bool, test_script: bool, testitem: bool):
    """
    Test how file names are classified.

    Args:
        filename: The file name to classify.
        script: Whether the file is a Rel script.
        test_script: Whether the file is a Rel test script.
        testitem: Whether the file holds non-script test items.
    """
    assert is_script(filename) == script
    assert is_test_script(filename) == test_script
    assert is_testitem_file(filename) == testitem
    assert is_test_file(filename) == (test_script or testitem)
