##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Tests for the `main.py` module.
"""

import pytest
from _pytest.capture import CaptureFixture
from pytest_mock import MockerFixture

from reltest import main as main_module
from reltest.exceptions import RelTestError


@pytest.fixture(autouse=True)
def no_logging_setup(mocker: MockerFixture):
    """
    Keep `main` from reconfiguring the `reltest` logger during the tests.

    Args:
        mocker: PyTest mocker fixture.
    """
    return mocker.patch("reltest.main.setup_logging")


def test_no_arguments_prints_help(mocker: MockerFixture, capsys: CaptureFixture):
    """
    Test that running `reltest` without arguments prints the help and returns 1.

    Args:
        mocker: PyTest mocker fixture.
        capsys: PyTest capsys fixture.
    """
    mocker.patch("sys.argv", ["reltest"])
    assert main_module.main() == 1
    assert "usage: reltest" in capsys.readouterr().out


def test_successful_command(mocker: MockerFixture, no_logging_setup):
    """
    Test that a successful command exits normally with the requested log level.

    Args:
        mocker: PyTest mocker fixture.
        no_logging_setup: The mocked `setup_logging`.
    """
    process_mock = mocker.patch("reltest.cli.commands.script.RunScriptCommand.process_command")
    mocker.patch("sys.argv", ["reltest", "-lvl", "debug", "run-script", "fix.rel", "db"])
    with pytest.raises(SystemExit) as excinfo:
        main_module.main()
    assert excinfo.value.code is None
    process_mock.assert_called_once()
    assert no_logging_setup.call_args.kwargs["log_level"] == "DEBUG"
    # Output is captured, so it is not a terminal
    assert no_logging_setup.call_args.kwargs["colors"] is False


def test_failing_command(mocker: MockerFixture, caplog: pytest.LogCaptureFixture):
    """
    Test that an error raised by a command is logged and exits with code 1.

    Args:
        mocker: PyTest mocker fixture.
        caplog: PyTest caplog fixture.
    """
    mocker.patch(
        "reltest.cli.commands.script.RunScriptCommand.process_command",
        side_effect=RelTestError("Running 'fix.rel' on 'db' failed."),
    )
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["run-script", "fix.rel", "db"])
    assert excinfo.value.code == 1
    assert "Running 'fix.rel' on 'db' failed." in caplog.text
