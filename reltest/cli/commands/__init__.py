##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
RelTest CLI Commands Package.

Each module encapsulates the logic and argument parsing for related commands,
built around the `CommandEntryPoint` interface.

Modules:
    command_entry_point: Defines the abstract base class `CommandEntryPoint` for all CLI commands.
    package: Implements the `test-package`, `install-package` and `prepare-package` commands.
    script: Implements the `run-script` command.
    suite: Implements the `run-suite`, `run-test` and `prepare-suite` commands.
"""

from reltest.cli.commands.package import InstallPackageCommand, PreparePackageCommand, TestPackageCommand
from reltest.cli.commands.script import RunScriptCommand
from reltest.cli.commands.suite import PrepareSuiteCommand, RunSuiteCommand, RunTestCommand


# Keep these in alphabetical order
ALL_COMMANDS = [
    InstallPackageCommand(),
    PreparePackageCommand(),
    PrepareSuiteCommand(),
    RunScriptCommand(),
    RunSuiteCommand(),
    RunTestCommand(),
    TestPackageCommand(),
]
