##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
RelTest: isolated, clone-based testing of Rel packages.

This module contains the source code for RelTest.
"""


__version__ = "0.1.0"
VERSION = __version__
