##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Filesystem discovery of packages, suites and test files.
"""

import os
from typing import Callable, Iterable, List, Optional

from reltest.conventions import TEST_ROOT, is_test_script, is_testitem_file
from reltest.database.package import has_manifest


def find_test_dirs(base_dir: str = ".", filter_fn: Optional[Callable[[str], bool]] = None) -> List[str]:
    """
    Find all directories under `base_dir` that hold Rel test suites, i.e. at least one `test-*.rel` file.

    Args:
        base_dir: The directory to search. If it is a file, its directory is searched.
        filter_fn: If given, only directories for which it returns True are kept.

    Returns:
        The sorted suite directories.
    """
    if os.path.isfile(base_dir):
        return find_test_dirs(os.path.dirname(base_dir), filter_fn)

    test_dirs = set()
    for root, _, files in os.walk(base_dir):
        if any(is_test_script(f) for f in files):
            test_dirs.add(root)

    if filter_fn is not None:
        test_dirs = {d for d in test_dirs if filter_fn(d)}
    return sorted(test_dirs)


def find_all_test_dirs(base_dirs: Iterable[str], filter_fn: Optional[Callable[[str], bool]] = None) -> List[str]:
    """
    Find all suite directories under any of the `base_dirs`.

    Args:
        base_dirs: The directories to search.
        filter_fn: If given, only directories for which it returns True are kept.

    Returns:
        The sorted suite directories, without duplicates.
    """
    test_dirs = set()
    for base_dir in base_dirs:
        test_dirs.update(find_test_dirs(base_dir, filter_fn))
    return sorted(test_dirs)


def find_test_files(directory: str) -> List[str]:
    """
    Find all files in this `directory` that are Rel test scripts.

    Args:
        directory: A suite directory.

    Returns:
        The sorted basenames of the test scripts.
    """
    return sorted(f for f in os.listdir(directory) if is_test_script(f) and os.path.isfile(os.path.join(directory, f)))


def find_nearest_test_dirs(path: str) -> List[str]:
    """
    Find the suites nearest to `path`: those under it, or under its closest ancestor holding any suite.

    Args:
        path: A file or directory.

    Returns:
        The sorted suite directories; empty if `path` does not exist.
    """
    if not os.path.exists(path):
        return []
    if os.path.isfile(path):
        return find_nearest_test_dirs(os.path.dirname(os.path.abspath(path)))

    test_dirs = find_test_dirs(path)
    parent = os.path.dirname(os.path.abspath(path))
    if not test_dirs and parent != os.path.abspath(path):
        return find_nearest_test_dirs(parent)
    return test_dirs


def find_all_nearest_test_dirs(paths: Iterable[str]) -> List[str]:
    """Find the nearest suites of every path in `paths`, without duplicates."""
    test_dirs = set()
    for path in paths:
        test_dirs.update(find_nearest_test_dirs(path))
    return sorted(test_dirs)


def find_package_dir(path: str) -> Optional[str]:
    """
    Find the package directory (the closest ancestor with a `rel-package.json`) of `path`.

    Args:
        path: A file or directory inside a package.

    Returns:
        The package directory, or None if `path` is not inside a package.
    """
    if not os.path.exists(path):
        return None
    directory = os.path.realpath(path)
    if os.path.isfile(directory):
        directory = os.path.dirname(directory)
    while True:
        if has_manifest(directory):
            return directory
        parent = os.path.dirname(directory)
        if parent == directory:
            return None
        directory = parent


def has_testitem_files(package_dir: str) -> bool:
    """
    Check whether the package has non-script test items (`*_test.py` files) under its test root.

    Args:
        package_dir: The package directory.

    Returns:
        True if at least one test item file exists.
    """
    for _, _, files in os.walk(os.path.join(package_dir, TEST_ROOT)):
        if any(is_testitem_file(f) for f in files):
            return True
    return False
