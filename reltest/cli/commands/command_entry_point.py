##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Defines the abstract base class for RelTest CLI commands.

Besides the parser and handler hooks, the base class owns the engines a command
runs on: commands that need an engine wrap their work in `engines`, which starts
a pool for the duration of the command unless an engine is configured.
"""

from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace
from contextlib import contextmanager
from typing import Generator, Optional

from reltest.engines.pool import with_pool
from reltest.orchestration.package_tester import PackageTester


class CommandEntryPoint(ABC):
    """
    Abstract base class for a RelTest CLI command entry point.

    Attributes:
        pool_size: Number of engines to provision when no engine is configured;
            `Config.pool_size` if None.

    Methods:
        add_parser: Adds the parser for a specific command to the main `ArgumentParser`.
        process_command: Executes the logic for this CLI command.
        engines: Provides the engines the command runs on.
    """

    pool_size: Optional[int] = None

    @abstractmethod
    def add_parser(self, subparsers: ArgumentParser):
        """Add the parser for this command to the main `ArgumentParser`."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement an `add_parser` method.")

    @abstractmethod
    def process_command(self, args: Namespace):
        """Execute the logic for this CLI command."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement a `process_command` method.")

    @contextmanager
    def engines(self, tester: PackageTester) -> Generator[PackageTester, None, None]:
        """
        Start the pool of `tester` with `pool_size` engines for a `with` block.

        Nothing is provisioned when the configuration names an engine. The engines
        are deprovisioned on every exit path.

        Args:
            tester: The tester the command runs with.

        Yields:
            The tester, ready to borrow engines.
        """
        with with_pool(tester.config, tester.pool, size=self.pool_size):
            yield tester
