##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
CLI module for the suite-level commands.

This module defines the `run-suite`, `run-test` and `prepare-suite` subcommands
of the RelTest CLI. They all work on a prototype database prepared beforehand,
e.g. with `prepare-package`.
"""

# pylint: disable=duplicate-code

import logging
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace

from reltest.cli.commands.command_entry_point import CommandEntryPoint
from reltest.cli.utils import conclude, get_tester
from reltest.utils import unix_basename


LOG = logging.getLogger("reltest")


class RunSuiteCommand(CommandEntryPoint):
    """
    Handles `run-suite` CLI command for running every test of a suite.

    Methods:
        add_parser: Adds the `run-suite` command to the CLI parser.
        process_command: Runs the suite and displays the results.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `run-suite` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `run-suite` command parser will be added.
        """
        run_suite: ArgumentParser = subparsers.add_parser(
            "run-suite",
            help="Run all tests of a suite against a prepared package database.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        run_suite.set_defaults(func=self.process_command)
        run_suite.add_argument("suite_dir", type=str, help="Path to the suite directory")
        run_suite.add_argument("prototype", type=str, help="The package database, prepared with prepare-package")
        run_suite.add_argument(
            "--database",
            type=str,
            default=None,
            help="Name of the suite database cloned when the suite has a before-suite.rel",
        )
        run_suite.add_argument(
            "--skip-prepare",
            action="store_true",
            default=False,
            help="Assume the prototype is already prepared for the suite",
        )

    def process_command(self, args: Namespace):
        """
        CLI command for running a suite.

        Args:
            args: Parsed CLI arguments.
        """
        tester = get_tester(args)
        with self.engines(tester):
            tester.run_suite(args.suite_dir, args.prototype, database=args.database, skip_prepare=args.skip_prepare)
        conclude(tester.report)


class RunTestCommand(CommandEntryPoint):
    """
    Handles `run-test` CLI command for running a single test script.

    Methods:
        add_parser: Adds the `run-test` command to the CLI parser.
        process_command: Runs the test and displays the results.
    """

    __test__ = False  # not a pytest test class
    pool_size = 1

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `run-test` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `run-test` command parser will be added.
        """
        run_test: ArgumentParser = subparsers.add_parser(
            "run-test",
            help="Run a single test script on a clone of a prototype database.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        run_test.set_defaults(func=self.process_command)
        run_test.add_argument("test_file", type=str, help="Path to the test-*.rel script")
        run_test.add_argument("prototype", type=str, help="The database the test starts from")
        run_test.add_argument(
            "--with-before-suite",
            action="store_true",
            default=False,
            help="Run the suite's before-suite.rel as part of the test",
        )

    def process_command(self, args: Namespace):
        """
        CLI command for running a test.

        Args:
            args: Parsed CLI arguments.
        """
        tester = get_tester(args)
        with self.engines(tester):
            tester.run_test(args.test_file, args.prototype, with_before_suite=args.with_before_suite)
        conclude(tester.report)


class PrepareSuiteCommand(CommandEntryPoint):
    """
    Handles `prepare-suite` CLI command for preparing the prototype database of a suite.

    Methods:
        add_parser: Adds the `prepare-suite` command to the CLI parser.
        process_command: Prepares the suite database and prints its name.
    """

    pool_size = 1

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `prepare-suite` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `prepare-suite` command parser will be added.
        """
        prepare: ArgumentParser = subparsers.add_parser(
            "prepare-suite",
            help="Clone a package database and run a suite's before-suite.rel on the clone. "
            "Prints the database to run the suite's tests on.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        prepare.set_defaults(func=self.process_command)
        prepare.add_argument("suite_dir", type=str, help="Path to the suite directory")
        prepare.add_argument("prototype", type=str, help="The package database, prepared with prepare-package")
        prepare.add_argument(
            "--database",
            type=str,
            default=None,
            help="Name of the suite database. Defaults to '<prototype>-<suite directory name>'.",
        )

    def process_command(self, args: Namespace):
        """
        CLI command for preparing a suite database.

        Args:
            args: Parsed CLI arguments.
        """
        database = args.database or f"{args.prototype}-{unix_basename(args.suite_dir)}"
        tester = get_tester(args)
        with self.engines(tester):
            database = tester.prepare_suite(args.suite_dir, args.prototype, database)
        print(database)
