##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
The `backends` package describes the database service RelTest depends on.

Modules:
    database_service: The abstract `DatabaseService` and its response types.
    dry_run: `DryRunService`, an in-memory implementation used for dry runs.
    service_factory: `ServiceFactory`, which instantiates services by name.
"""
