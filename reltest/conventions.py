##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
File-naming conventions shared by test discovery, change selection and package
preparation.

A package directory looks like this:

    my-pkg-rel/
        rel-package.json
        model/
            std/common.rel
        test/
            before-install.rel
            before-package.rel
            std/common/
                before-suite.rel
                before-test.rel
                validate-test.rel
                test-foo.rel
                helpers_test.py

Any directory holding at least one `test-*.rel` file is a suite; there is no
separate suite manifest.
"""

# Roots, relative to the package directory
MODEL_ROOT = "model"
TEST_ROOT = "test"

# Scripts
SCRIPT_EXTENSION = ".rel"
TEST_FILE_PREFIX = "test-"

# Non-script test items (run by a pluggable runner)
TESTITEM_EXTENSION = ".py"
TESTITEM_SUFFIX = "_test.py"

# Package metadata
PACKAGE_SUFFIX = "-rel"
PACKAGE_MANIFEST = "rel-package.json"

# Special scripts recognized at scope boundaries
BEFORE_INSTALL_SCRIPT = "before-install.rel"
BEFORE_PACKAGE_SCRIPT = "before-package.rel"
BEFORE_SUITE_SCRIPT = "before-suite.rel"
BEFORE_TEST_SCRIPT = "before-test.rel"
VALIDATE_TEST_SCRIPT = "validate-test.rel"

# A change to any of these invalidates every suite of the package
RUN_EVERYTHING_MARKERS = (BEFORE_INSTALL_SCRIPT, BEFORE_PACKAGE_SCRIPT)

# Directive syntax of the script parser
DIRECTIVE_MARKER = "// %%"
LINE_COMMENT = "//"

# Default prefix for generated database and engine names
DEFAULT_NAME_PREFIX = "RelTest"


def is_script(filename: str) -> bool:
    """
    Check whether a file name (or path) is a Rel script.

    Args:
        filename: The file name or path to check.

    Returns:
        True if the name carries the script extension.
    """
    return filename.endswith(SCRIPT_EXTENSION)


def is_test_script(filename: str) -> bool:
    """
    Check whether a file basename follows the `test-*.rel` naming convention.

    Args:
        filename: The basename of the file.

    Returns:
        True if the file is a Rel test script.
    """
    return filename.startswith(TEST_FILE_PREFIX) and filename.endswith(SCRIPT_EXTENSION)


def is_testitem_file(filename: str) -> bool:
    """
    Check whether a file basename is a non-script test item file.

    Args:
        filename: The basename of the file.

    Returns:
        True if the file holds non-script test items.
    """
    return filename.endswith(TESTITEM_SUFFIX)


def is_test_file(filename: str) -> bool:
    """Check whether a basename is any kind of test file (script or test item)."""
    return is_test_script(filename) or is_testitem_file(filename)
