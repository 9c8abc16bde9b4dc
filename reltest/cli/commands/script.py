##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
CLI module for running an arbitrary Rel script on a database.

This module defines the `RunScriptCommand` class, which implements the
`run-script` subcommand of the RelTest CLI. Each block of the script runs as
its own transaction.
"""

import logging
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace

from reltest.cli.commands.command_entry_point import CommandEntryPoint
from reltest.cli.utils import get_tester
from reltest.exceptions import RelTestError


LOG = logging.getLogger("reltest")


class RunScriptCommand(CommandEntryPoint):
    """
    Handles `run-script` CLI command.

    Methods:
        add_parser: Adds the `run-script` command to the CLI parser.
        process_command: Runs the script.
    """

    pool_size = 1

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `run-script` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `run-script` command parser will be added.
        """
        run_script: ArgumentParser = subparsers.add_parser(
            "run-script",
            help="Run the blocks of a Rel script on a database, each as its own transaction.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        run_script.set_defaults(func=self.process_command)
        run_script.add_argument("script", type=str, help="Path to the Rel script")
        run_script.add_argument("database", type=str, help="The database to run the script on")

    def process_command(self, args: Namespace):
        """
        CLI command for running a script.

        Args:
            args: Parsed CLI arguments.

        Raises:
            RelTestError: If a block of the script did not satisfy its expectations.
        """
        tester = get_tester(args)
        with self.engines(tester):
            succeeded = tester.run_script(args.script, args.database)
        if not succeeded:
            raise RelTestError(f"Running '{args.script}' on '{args.database}' failed.")
        LOG.info(f"Script '{args.script}' executed on '{args.database}'.")
