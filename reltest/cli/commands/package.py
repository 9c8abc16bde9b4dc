##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
CLI module for the package-level commands.

This module defines the `test-package`, `install-package` and `prepare-package`
subcommands of the RelTest CLI.
"""

# pylint: disable=duplicate-code

import logging
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace

from reltest.cli.commands.command_entry_point import CommandEntryPoint
from reltest.cli.utils import conclude, get_tester
from reltest.exceptions import PackageError


LOG = logging.getLogger("reltest")


class TestPackageCommand(CommandEntryPoint):
    """
    Handles `test-package` CLI command for running every test of one or more packages.

    Methods:
        add_parser: Adds the `test-package` command to the CLI parser.
        process_command: Runs the tests and displays the results.
    """

    __test__ = False  # not a pytest test class

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `test-package` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `test-package` command parser will be added.
        """
        test_package: ArgumentParser = subparsers.add_parser(
            "test-package",
            help="Run all Rel tests of the packages.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        test_package.set_defaults(func=self.process_command)
        test_package.add_argument("package_dirs", type=str, nargs="+", help="Paths to the package directories")
        test_package.add_argument(
            "--database",
            type=str,
            default=None,
            help="Prefix of the package database names. Defaults to the package name.",
        )
        test_package.add_argument("--skip-suites", action="store_true", default=False, help="Do not run Rel test suites")
        test_package.add_argument(
            "--skip-testitems", action="store_true", default=False, help="Do not run non-script test items"
        )
        test_package.add_argument(
            "--changes",
            type=str,
            nargs="+",
            default=None,
            help="Files changed in the package, relative to the package directory. "
            "Only the suites and tests affected by the changes run.",
        )

    def process_command(self, args: Namespace):
        """
        CLI command for running the tests of packages.

        Args:
            args: Parsed CLI arguments.
        """
        tester = get_tester(args)
        report = tester.test_packages(
            args.package_dirs,
            db_prefix=args.database,
            skip_suites=args.skip_suites,
            skip_testitems=args.skip_testitems,
            changes=args.changes,
        )
        conclude(report)


class InstallPackageCommand(CommandEntryPoint):
    """
    Handles `install-package` CLI command for installing a package in an existing database.

    Methods:
        add_parser: Adds the `install-package` command to the CLI parser.
        process_command: Installs the package.
    """

    pool_size = 1

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `install-package` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `install-package` command parser will be added.
        """
        install: ArgumentParser = subparsers.add_parser(
            "install-package",
            help="Install the sources of a package in a database.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        install.set_defaults(func=self.process_command)
        install.add_argument("package_dir", type=str, help="Path to the package directory")
        install.add_argument("database", type=str, help="The database to install the package in")
        install.add_argument(
            "--with-deps",
            action="store_true",
            default=False,
            help="Also install the dependencies of the package (requires the package manager in the database)",
        )

    def process_command(self, args: Namespace):
        """
        CLI command for installing a package.

        Args:
            args: Parsed CLI arguments.
        """
        tester = get_tester(args)
        with self.engines(tester):
            if not tester.install_package(args.package_dir, args.database, args.with_deps):
                raise PackageError(f"Installation of package in '{args.package_dir}' failed.")
        LOG.info(f"Package installed in '{args.database}'.")


class PreparePackageCommand(CommandEntryPoint):
    """
    Handles `prepare-package` CLI command for creating a database ready to run the tests of a package.

    Methods:
        add_parser: Adds the `prepare-package` command to the CLI parser.
        process_command: Creates and prepares the database.
    """

    pool_size = 1

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `prepare-package` command parser to the CLI argument parser.

        Parameters:
            subparsers: The subparsers object to which the `prepare-package` command parser will be added.
        """
        prepare: ArgumentParser = subparsers.add_parser(
            "prepare-package",
            help="Create a database, install a package in it and run the package's setup scripts.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        prepare.set_defaults(func=self.process_command)
        prepare.add_argument("package_dir", type=str, help="Path to the package directory")
        prepare.add_argument("database", type=str, help="The name of the database to create")
        prepare.add_argument(
            "--with-deps",
            action="store_true",
            default=False,
            help="Also install the dependencies of the package (requires the package manager in the database)",
        )

    def process_command(self, args: Namespace):
        """
        CLI command for preparing a package database.

        Args:
            args: Parsed CLI arguments.
        """
        tester = get_tester(args)
        with self.engines(tester):
            database = tester.prepare_package(args.package_dir, args.database, args.with_deps)
        print(database)
