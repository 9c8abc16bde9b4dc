##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Module for project-wide utility functions: naming of databases, packages, suites
and tests, plus context-aware progress logging.
"""
import logging
import os
import uuid

from reltest.conventions import PACKAGE_SUFFIX, SCRIPT_EXTENSION, TEST_ROOT


LOG = logging.getLogger(__name__)


def gen_safe_name(basename: str) -> str:
    """
    Generate a safe name for a database or engine by appending a random value to the basename.

    Args:
        basename: The prefix of the generated name.

    Returns:
        A name of the form `<basename>-<12 hex characters>`.
    """
    return f"{basename}-{uuid.uuid4().hex[-12:]}"


def progress(ctx: str, msg: str):
    """
    Log an info message in this context.

    Args:
        ctx: The package/suite/test context the message belongs to.
        msg: The message to log.
    """
    LOG.info(f"[{ctx}] {msg}")


def warn(ctx: str, msg: str):
    """
    Log a warning in this context.

    Args:
        ctx: The package/suite/test context the message belongs to.
        msg: The message to log.
    """
    LOG.warning(f"[{ctx}] {msg}")


def unix_basename(path: str) -> str:
    """
    Return the basename of this path, according to unix's basename semantics.

    The main difference with `os.path.basename` is that a trailing separator is
    ignored, so `os.path.basename("foo/bar/baz/")` is "" whereas
    `unix_basename("foo/bar/baz/")` is "baz".

    Args:
        path: The path to get the basename of.

    Returns:
        The last component of the path.
    """
    return os.path.basename(os.path.normpath(path))


def canonical(path: str) -> str:
    """
    Resolve the path against the filesystem and remove any trailing separator.

    Paths that cannot be resolved are only normalized.

    Args:
        path: The path to canonicalize.

    Returns:
        The canonical form of the path.
    """
    try:
        path = os.path.realpath(path, strict=True)
    except OSError:
        LOG.debug(f"Could not resolve '{path}', using it as is.")
    return os.path.normpath(path)


def pkg_name(directory: str) -> str:
    """
    Extract the package name from a package directory.

    Packages conventionally live in directories called `<pkgname>-rel`, so that
    suffix is stripped when present.

    Args:
        directory: The package directory (may be relative or have a trailing separator).

    Returns:
        The logical package name.
    """
    basename = unix_basename(canonical(directory))
    if basename.endswith(PACKAGE_SUFFIX):
        return basename[: -len(PACKAGE_SUFFIX)]
    return basename


def suite_name(directory: str) -> str:
    """
    Get the name of the suite in this directory.

    If the path has a `/test/` component, the suite name is the path after it,
    otherwise it is the basename of the directory.

    Args:
        directory: The suite directory.

    Returns:
        The suite name, e.g. `std/common` for `pkg/test/std/common`.
    """
    marker = f"/{TEST_ROOT}/"
    if marker in directory:
        return os.path.normpath(directory.split(marker)[-1])
    return unix_basename(directory)


def test_name(file: str) -> str:
    """
    Get the name of the test in this script file: the suite name of the file without its extension.

    Args:
        file: The path to the test script.

    Returns:
        The test name, e.g. `std/common/test-foo` for `pkg/test/std/common/test-foo.rel`.
    """
    name = suite_name(file)
    if file.endswith(SCRIPT_EXTENSION):
        return name[: -len(SCRIPT_EXTENSION)]
    return name
