##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
The `engines` package hands out the engines that execute transactions.

Modules:
    pool: `EnginePool`, `EngineHandle` and the `engine_for`/`with_engine`/`with_pool` helpers.
"""
