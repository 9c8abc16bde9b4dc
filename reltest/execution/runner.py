##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
This module contains the runners that execute the steps of one test.

A runner receives the ordered steps of a test, a prototype database and an
engine. It runs the steps against a fresh clone of the prototype, so the
prototype can be reused by every test of the suite, and reports each step
through a `TestReport`.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from reltest.backends.database_service import TransactionResponse
from reltest.common.enums import AllowUnexpected
from reltest.config import Config
from reltest.database.lifecycle import DatabaseManager
from reltest.exceptions import RelTestError
from reltest.execution.transactions import READ_TIMEOUT, log_abort_diagnostics
from reltest.reporting import TestReport
from reltest.scripts.steps import Step
from reltest.utils import gen_safe_name, progress


LOG = logging.getLogger(__name__)


def check_step(step: Step, response: TransactionResponse) -> str:
    """
    Compare the outcome of a step with its expectations.

    Errors are tolerated when the step allows them or expects to abort; warnings
    are tolerated when the step allows warnings or errors.

    Args:
        step: The executed step.
        response: The response of the service.

    Returns:
        An empty string if the step passed, otherwise the reason of the failure.
    """
    if response.aborted != step.expect_abort:
        return f"expected aborted={step.expect_abort}, got state {response.state.value}"
    if response.errored and step.allow_unexpected != AllowUnexpected.ERRORS and not step.expect_abort:
        return f"unexpected errors: {response.problems}"
    if response.warned and step.allow_unexpected == AllowUnexpected.NONE:
        return f"unexpected warnings: {response.problems}"
    return ""


class StepRunner(ABC):
    """
    Abstract base class for the collaborator that executes the steps of a test.

    Methods:
        run:
            Execute the steps of a test against a prototype database on an engine.
    """

    @abstractmethod
    def run(self, name: str, steps: List[Step], prototype: str, engine: str) -> bool:
        """
        Execute the steps of one test.

        Args:
            name: The name of the test.
            steps: The steps, in order.
            prototype: The database the test starts from. It must not be modified.
            engine: The engine executing the steps.

        Returns:
            True if every step passed.
        """
        raise NotImplementedError("Subclasses of `StepRunner` must implement a `run` method.")


class CloningStepRunner(StepRunner):
    """
    Runs each test against its own clone of the prototype database, deleting the
    clone afterwards.

    Steps run in order and the test stops at the first step that fails.

    Attributes:
        config: The configuration holding the service.
        report: Where step results are recorded.
        databases: Manager of the cloned databases.
    """

    def __init__(self, config: Config, report: TestReport):
        self.config = config
        self.report = report
        self.databases = DatabaseManager(config.service)

    def run(self, name: str, steps: List[Step], prototype: str, engine: str) -> bool:
        with self.report.testset(name):
            try:
                with self.databases.temporary_database(gen_safe_name(prototype), source=prototype) as clone:
                    progress(name, f"Running {len(steps)} step(s) on '{clone}'...")
                    return self._run_steps(steps, clone, engine)
            except RelTestError as exc:
                self.report.record(name, False, f"{type(exc).__name__}: {exc}")
        return False

    def _run_steps(self, steps: List[Step], database: str, engine: str) -> bool:
        for step in steps:
            response = self.config.service.execute(
                database, engine, step.query, readonly=step.readonly, timeout=READ_TIMEOUT
            )
            failure = check_step(step, response)
            if response.aborted and not step.expect_abort:
                log_abort_diagnostics(step.name, response)
            if not self.report.record(step.name, not failure, failure):
                return False
        return True
