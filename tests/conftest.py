##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
This module contains pytest fixtures to be used throughout the entire test suite.
"""
import os
from glob import glob

import pytest

from reltest.backends.dry_run import DryRunService
from reltest.config import Config


# pylint: disable=redefined-outer-name


#######################################
# Loading in Module Specific Fixtures #
#######################################

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
fixture_glob = os.path.join(ROOT_DIR, "tests", "fixtures", "**", "*.py")
pytest_plugins = [
    os.path.relpath(fixture_file, ROOT_DIR).replace(os.sep, ".")[: -len(".py")]
    for fixture_file in glob(fixture_glob, recursive=True)
    if not fixture_file.endswith("__init__.py")
]


#######################################
######### Fixture Definitions #########
#######################################


@pytest.fixture
def dry_service() -> DryRunService:
    """
    A fresh in-memory database service.

    Returns:
        A `DryRunService` with no databases and no engines.
    """
    return DryRunService()


@pytest.fixture
def dry_config(dry_service: DryRunService) -> Config:
    """
    A configuration using the `dry_service` fixture and an explicit engine.

    Returns:
        A `Config` whose engine is "test-engine".
    """
    return Config(service=dry_service, engine="test-engine")
