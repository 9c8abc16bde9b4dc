##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Utility functions to support RelTest CLI command handlers.
"""

import logging
from argparse import Namespace
from typing import Dict, Optional

from reltest.config import Config
from reltest.config.configfile import load_config
from reltest.display import display_report
from reltest.exceptions import RelTestError
from reltest.orchestration.package_tester import PackageTester
from reltest.reporting import TestReport


LOG = logging.getLogger("reltest")

# Global CLI options that map to `Config` fields
CONFIG_OPTIONS = ("service", "engine", "engine_size", "pool_size", "profile")


def config_args(args: Namespace) -> Dict[str, Optional[str]]:
    """
    Extract the configuration values given on the command line.

    Args:
        args: Parsed CLI arguments.

    Returns:
        A dictionary of the config options, None for the ones not given.
    """
    return {option: getattr(args, option, None) for option in CONFIG_OPTIONS}


def get_config(args: Namespace) -> Config:
    """
    Load the configuration, giving precedence to the values on the command line.

    Args:
        args: Parsed CLI arguments.

    Returns:
        The resulting `Config`.
    """
    return load_config(config_args(args))


def get_tester(args: Namespace) -> PackageTester:
    """
    Create the `PackageTester` a command runs with.

    Args:
        args: Parsed CLI arguments.

    Returns:
        A `PackageTester` for the configuration of the command line.
    """
    return PackageTester(get_config(args))


def conclude(report: TestReport, colors: bool = True):
    """
    Display a test report and fail the command if any check failed.

    Args:
        report: The report of the command.
        colors: If True, color the output.

    Raises:
        RelTestError: If at least one check failed.
    """
    display_report(report, colors=colors)
    failures = len(report.failures)
    if failures:
        raise RelTestError(f"{failures} check(s) failed.")
