##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Collection of test results.

A `TestReport` records one pass/fail entry per checked outcome, under the
package/suite/test context that was open when the check happened:

    report = TestReport()
    with report.testset("std"):
        with report.testset("std/common/test-foo"):
            report.record("1 - setup", True)
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Generator, List

from reltest.exceptions import RelTestError


LOG = logging.getLogger(__name__)

CONTEXT_SEPARATOR = " > "


@dataclass(frozen=True)
class TestRecord:
    """
    The result of one check.

    Attributes:
        context: The nested test sets open at the time of the check.
        name: The name of the check (e.g. a step name).
        passed: Whether the check passed.
        detail: Additional information, usually the reason of a failure.
    """

    __test__ = False  # not a pytest test class

    context: str
    name: str
    passed: bool
    detail: str = ""


class TestReport:
    """
    Records the results of a run under nested test sets.

    A `RelTestError` raised inside a test set is recorded as a failure of that
    test set and does not propagate, so the run moves on to the next test set.

    Attributes:
        records (List[TestRecord]): Every result, in order.
    """

    __test__ = False  # not a pytest test class

    def __init__(self):
        self.records: List[TestRecord] = []
        self._stack: List[str] = []

    @property
    def context(self) -> str:
        """The names of the open test sets, outermost first."""
        return CONTEXT_SEPARATOR.join(self._stack)

    @contextmanager
    def testset(self, name: str) -> Generator["TestReport", None, None]:
        """
        Open a nested test set for the duration of a `with` block.

        Args:
            name: The name of the test set.

        Yields:
            This report.
        """
        self._stack.append(name)
        try:
            yield self
        except RelTestError as exc:
            LOG.error(f"[{name}] {exc}")
            failure = f"{type(exc).__name__}: {exc}"
        else:
            return
        finally:
            self._stack.pop()
        # Recorded in the enclosing test set, under the name of the failed one
        self.record(name, False, failure)

    def record(self, name: str, passed: bool, detail: str = "") -> bool:
        """
        Record the result of a check in the current test set.

        Args:
            name: The name of the check.
            passed: Whether the check passed.
            detail: Additional information.

        Returns:
            `passed`, for convenience.
        """
        self.records.append(TestRecord(self.context, name, passed, detail))
        if not passed:
            LOG.error(f"FAILED: {self.context}{CONTEXT_SEPARATOR if self._stack else ''}{name} {detail}".rstrip())
        return passed

    @property
    def failures(self) -> List[TestRecord]:
        """Records of the checks that failed."""
        return [record for record in self.records if not record.passed]

    @property
    def passed(self) -> bool:
        """True if no check failed."""
        return not self.failures

    def summary(self) -> Dict[str, Dict[str, int]]:
        """
        Count passed and failed checks per context.

        Returns:
            A mapping of context to `{"passed": n, "failed": m}`, in order of first appearance.
        """
        counts: Dict[str, Dict[str, int]] = {}
        for record in self.records:
            entry = counts.setdefault(record.context, {"passed": 0, "failed": 0})
            entry["passed" if record.passed else "failed"] += 1
        return counts
