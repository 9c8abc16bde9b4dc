##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
The `execution` package runs transactions, code blocks and test steps.

Modules:
    transactions: `execute_transaction`, `execute_block` and `execute_blocks`.
    runner: The `StepRunner` interface and the default `CloningStepRunner`.
"""
