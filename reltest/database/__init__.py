##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
The `database` package manages the databases of a test run.

Modules:
    lifecycle: `DatabaseManager`, creating, cloning and deleting databases.
    package: Package manifests and install code generation.
"""
