##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Tests for the `command_entry_point.py` file.
"""

from argparse import ArgumentParser, Namespace

import pytest

from reltest.backends.dry_run import DryRunService
from reltest.cli.commands.command_entry_point import CommandEntryPoint
from reltest.config import Config
from reltest.orchestration.package_tester import PackageTester


class DummyCommand(CommandEntryPoint):
    """A command with two engines."""

    pool_size = 2

    def add_parser(self, subparsers: ArgumentParser):
        pass

    def process_command(self, args: Namespace):
        pass


def test_cannot_instantiate_without_hooks():
    """Test that a command must implement `add_parser` and `process_command`."""
    with pytest.raises(TypeError):
        CommandEntryPoint()  # pylint: disable=abstract-class-instantiated


def test_engines_starts_pool_of_command_size(dry_service: DryRunService):
    """
    Test that `engines` provisions `pool_size` engines and deprovisions them afterwards.

    Args:
        dry_service: A fresh in-memory database service.
    """
    tester = PackageTester(Config(service=dry_service))
    with DummyCommand().engines(tester) as borrowed:
        assert borrowed is tester
        assert len(dry_service.engines) == 2
    assert not dry_service.engines


def test_engines_with_configured_engine(dry_service: DryRunService):
    """
    Test that nothing is provisioned when an engine is configured.

    Args:
        dry_service: A fresh in-memory database service.
    """
    tester = PackageTester(Config(service=dry_service, engine="my-engine"))
    with DummyCommand().engines(tester):
        assert not tester.pool.started
    assert not dry_service.operations
