##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Tests for the `utils.py` file of the `cli/` folder.
"""

from argparse import Namespace

import pytest
from pytest_mock import MockerFixture

from reltest.backends.dry_run import DryRunService
from reltest.cli.utils import conclude, config_args, get_config, get_tester
from reltest.config import Config
from reltest.exceptions import RelTestError
from reltest.orchestration.package_tester import PackageTester
from reltest.reporting import TestReport


def test_config_args():
    """Test that only the configuration options are extracted, with None for missing ones."""
    args = Namespace(engine="my-engine", pool_size=2, level="INFO", package_dirs=["std-rel"])
    assert config_args(args) == {
        "service": None,
        "engine": "my-engine",
        "engine_size": None,
        "pool_size": 2,
        "profile": None,
    }


def test_get_config(mocker: MockerFixture):
    """
    Test that the command line values are passed to `load_config`.

    Args:
        mocker: PyTest mocker fixture.
    """
    load_mock = mocker.patch("reltest.cli.utils.load_config")
    get_config(Namespace(service="dry", engine=None))
    load_mock.assert_called_once_with(
        {"service": "dry", "engine": None, "engine_size": None, "pool_size": None, "profile": None}
    )


def test_get_tester(mocker: MockerFixture, dry_service: DryRunService):
    """
    Test that the tester runs with the loaded configuration.

    Args:
        mocker: PyTest mocker fixture.
        dry_service: A fresh in-memory database service.
    """
    config = Config(service=dry_service)
    mocker.patch("reltest.cli.utils.get_config", return_value=config)
    tester = get_tester(Namespace())
    assert isinstance(tester, PackageTester)
    assert tester.config is config


def test_conclude_passing_report(mocker: MockerFixture):
    """
    Test that a passing report is displayed and does not raise.

    Args:
        mocker: PyTest mocker fixture.
    """
    display_mock = mocker.patch("reltest.cli.utils.display_report")
    report = TestReport()
    report.record("check", True)
    conclude(report, colors=False)
    display_mock.assert_called_once_with(report, colors=False)


def test_conclude_failing_report(mocker: MockerFixture):
    """
    Test that a report with failures makes the command fail.

    Args:
        mocker: PyTest mocker fixture.
    """
    mocker.patch("reltest.cli.utils.display_report")
    report = TestReport()
    report.record("check", False)
    report.record("other check", False)
    with pytest.raises(RelTestError, match="2 check\\(s\\) failed."):
        conclude(report)
