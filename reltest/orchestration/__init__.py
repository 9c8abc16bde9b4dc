##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
The `orchestration` package drives test runs.

Modules:
    discovery: Filesystem discovery of packages, suites and test files.
    package_tester: `PackageTester`, running the package, suite and test hierarchy.
"""
