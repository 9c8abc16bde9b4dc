##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""This module provides enumerations shared across RelTest."""
from enum import Enum


__all__ = ("AllowUnexpected", "TransactionState")


class TransactionState(str, Enum):
    """
    Final state of a transaction as reported by the database service.

    Attributes:
        COMMITTED (str): The transaction completed and its effects are visible.
        ABORTED (str): The transaction was aborted.
    """

    COMMITTED = "COMMITTED"
    ABORTED = "ABORTED"


class AllowUnexpected(str, Enum):
    """
    Which unexpected problems a test step tolerates.

    Attributes:
        NONE (str): Any reported problem fails the step.
        WARNING (str): Warnings are tolerated, errors fail the step.
        ERRORS (str): Both warnings and errors are tolerated.
    """

    NONE = "none"
    WARNING = "warning"
    ERRORS = "errors"
