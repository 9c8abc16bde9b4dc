##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Tests for the `runner.py` module.
"""

from typing import Dict

import pytest

from reltest.backends.database_service import TransactionResponse
from reltest.backends.dry_run import DryRunService
from reltest.common.enums import AllowUnexpected
from reltest.config import Config
from reltest.execution.runner import CloningStepRunner, StepRunner, check_step
from reltest.reporting import TestReport
from reltest.scripts.steps import Step


class TestCheckStep:
    """
    Tests for the `check_step` function.
    """

    @pytest.mark.parametrize(
        "outcome, allow_unexpected, expect_abort, passes",
        [
            ("ok", AllowUnexpected.NONE, False, True),
            ("warnings", AllowUnexpected.NONE, False, False),
            ("warnings", AllowUnexpected.WARNING, False, True),
            ("warnings", AllowUnexpected.ERRORS, False, True),
            ("errors", AllowUnexpected.WARNING, False, False),
            ("errors", AllowUnexpected.ERRORS, False, True),
            ("abort", AllowUnexpected.NONE, False, False),
            ("abort", AllowUnexpected.NONE, True, True),
            ("abort_errors", AllowUnexpected.NONE, True, True),
            ("ok", AllowUnexpected.NONE, True, False),
        ],
    )
    def test_check_step(
        self,
        responses_by_outcome: Dict[str, TransactionResponse],
        outcome: str,
        allow_unexpected: AllowUnexpected,
        expect_abort: bool,
        passes: bool,
    ):
        """
        Test the outcome of a step against its expectations.

        Args:
            responses_by_outcome: One transaction response per kind of outcome.
            outcome: The outcome of the transaction.
            allow_unexpected: The problems the step tolerates.
            expect_abort: Whether the step expects to abort.
            passes: Whether the step should pass.
        """
        step = Step("step", "query", allow_unexpected=allow_unexpected, expect_abort=expect_abort)
        failure = check_step(step, responses_by_outcome[outcome])
        assert (failure == "") == passes

    def test_failure_reason(self, responses_by_outcome: Dict[str, TransactionResponse]):
        """
        Test that the reason of a failure is given.

        Args:
            responses_by_outcome: One transaction response per kind of outcome.
        """
        assert check_step(Step("step", "query"), responses_by_outcome["abort"]) == (
            "expected aborted=False, got state ABORTED"
        )
        assert check_step(Step("step", "query"), responses_by_outcome["errors"]).startswith("unexpected errors")


class TestCloningStepRunner:
    """
    Tests for the `CloningStepRunner` class.
    """

    def test_is_a_step_runner(self, dry_config: Config):
        """
        Test that the runner implements the `StepRunner` interface.

        Args:
            dry_config: A configuration using the dry service and an explicit engine.
        """
        assert isinstance(CloningStepRunner(dry_config, TestReport()), StepRunner)

    def test_runs_on_a_clone(self, dry_config: Config, dry_service: DryRunService):
        """
        Test that the steps run on a clone of the prototype, which is deleted afterwards.

        Args:
            dry_config: A configuration using the dry service and an explicit engine.
            dry_service: The service of `dry_config`.
        """
        dry_service.create_database("proto")
        dry_service.execute("proto", "engine", "def insert:x = 1")
        report = TestReport()
        steps = [Step("1 - setup", "def insert:y = 1", readonly=False), Step("2 - check", "def output = y")]

        assert CloningStepRunner(dry_config, report).run("std/common/test-foo", steps, "proto", "test-engine")

        clone_ops = [op for op in dry_service.operations if op[0] == "clone"]
        assert len(clone_ops) == 1
        _, source, clone = clone_ops[0]
        assert source == "proto"
        assert clone.startswith("proto-")
        executed = [op for op in dry_service.operations if op[0] == "execute" and op[1] == clone]
        assert [(op[3], op[4]) for op in executed] == [("def insert:y = 1", False), ("def output = y", True)]
        assert set(dry_service.databases) == {"proto"}
        assert [(r.context, r.name, r.passed) for r in report.records] == [
            ("std/common/test-foo", "1 - setup", True),
            ("std/common/test-foo", "2 - check", True),
        ]

    def test_stops_at_first_failure(self, responses_config: Config):
        """
        Test that the steps after a failed one are not executed, and that the clone is still deleted.

        Args:
            responses_config: A configuration whose service answers with scripted responses.
        """
        report = TestReport()
        steps = [Step("1", 'def output = "ok"'), Step("2", 'def output = "errors"'), Step("3", 'def output = "ok"')]

        assert not CloningStepRunner(responses_config, report).run("test-foo", steps, "proto", "engine")

        service = responses_config.service
        assert service.execute.call_count == 2
        service.delete_database.assert_called_once()
        assert [(r.name, r.passed) for r in report.records] == [("1", True), ("2", False)]

    def test_clone_failure_is_recorded(self, dry_config: Config, dry_service: DryRunService):
        """
        Test that a failure to clone the prototype fails the test without raising.

        Args:
            dry_config: A configuration using the dry service and an explicit engine.
            dry_service: The service of `dry_config`.
        """
        report = TestReport()
        assert not CloningStepRunner(dry_config, report).run("test-foo", [Step("1", "q")], "missing", "test-engine")
        assert report.failures[0].name == "test-foo"
        assert "DatabaseNotFoundError" in report.failures[0].detail
        assert not dry_service.databases
