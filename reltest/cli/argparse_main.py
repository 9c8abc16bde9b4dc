##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Main CLI parser setup for the RelTest command-line interface.

This module defines the primary argument parser for the `reltest` CLI tool,
including the options shared by every command and the integration of all
available subcommands.
"""

import sys
from argparse import ArgumentParser, RawDescriptionHelpFormatter

from reltest import VERSION
from reltest.cli.commands import ALL_COMMANDS


DEFAULT_LOG_LEVEL = "INFO"
DESCRIPTION = "RelTest: run Rel test suites against clones of prepared package databases."


class HelpParser(ArgumentParser):
    """
    This class overrides the error message of the argument parser to
    print the help message when an error happens.

    Methods:
        error: Override the error message of the `ArgumentParser` class.
    """

    def error(self, message: str):
        """
        Override the error message of the `ArgumentParser` class.

        Args:
            message: The error message to log.
        """
        sys.stderr.write(f"error: {message}\n")
        self.print_help()
        sys.exit(2)


def add_config_arguments(parser: ArgumentParser):
    """
    Add the options that override the configuration of every command.

    Args:
        parser: The main parser.
    """
    parser.add_argument(
        "-e",
        "--engine",
        type=str,
        default=None,
        help="The engine to use. Without an engine, a pool of engines is provisioned for the command.",
    )
    parser.add_argument("--pool-size", type=int, default=None, help="The number of engines in the pool [Default: 1]")
    parser.add_argument("--engine-size", type=str, default=None, help="The size of pool engines [Default: S]")
    parser.add_argument("--profile", type=str, default=None, help="The profile to use from the app file")
    parser.add_argument("--service", type=str, default=None, help="The database service implementation to use")


def build_main_parser() -> ArgumentParser:
    """
    Set up the command-line argument parser for the RelTest package.

    Returns:
        An `ArgumentParser` object with every parser defined in RelTest's codebase.
    """
    parser = HelpParser(
        prog="reltest",
        description=DESCRIPTION,
        formatter_class=RawDescriptionHelpFormatter,
        epilog="See reltest <command> --help for more info",
    )
    parser.add_argument("-v", "--version", action="version", version=VERSION)
    parser.add_argument(
        "-lvl",
        "--level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        help="Set log level: DEBUG, INFO, WARNING, ERROR [Default: %(default)s]",
    )
    add_config_arguments(parser)
    subparsers = parser.add_subparsers(dest="subparsers", required=True)

    for command in ALL_COMMANDS:
        command.add_parser(subparsers)

    return parser
