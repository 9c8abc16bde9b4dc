##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
The `cli` package contains the command-line interface of RelTest.

Modules:
    argparse_main: Builds the main argument parser with every command.
    utils: Helpers shared by the command handlers.
    commands: One `CommandEntryPoint` per command.
"""
