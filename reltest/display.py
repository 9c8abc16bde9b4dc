##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Manages formatting for displaying test results to the console.
"""
import logging

from tabulate import tabulate

from reltest.reporting import TestReport


LOG = logging.getLogger("reltest")

# Colors here are chosen based on the Bang Wong color palette (https://www.nature.com/articles/nmeth.1618)
ANSI_COLORS = {
    "RESET": "\033[0m",
    "GREEN": "\033[38;2;0;158;115m",
    "RED": "\033[38;2;213;94;0m",
}


def _colored(text: str, color: str, colors: bool) -> str:
    if not colors:
        return text
    return f"{ANSI_COLORS[color]}{text}{ANSI_COLORS['RESET']}"


def display_report(report: TestReport, colors: bool = True):
    """
    Print a summary of a test report: the number of passed and failed checks per
    test set, followed by the details of every failure.

    Args:
        report: The report to display.
        colors: If True, color the counts and the final verdict.
    """
    summary = report.summary()
    if not summary:
        print("\nNo tests were run.\n")
        return

    rows = []
    for context, counts in summary.items():
        failed = counts["failed"]
        rows.append(
            [
                context or "-",
                _colored(str(counts["passed"]), "GREEN", colors),
                _colored(str(failed), "RED", colors) if failed else failed,
            ]
        )
    print("\nSUMMARY:")
    print(tabulate(rows, headers=["Test Set", "Passed", "Failed"]))

    failures = report.failures
    if failures:
        print("\nFAILURES:")
        print(tabulate([[f.context, f.name, f.detail] for f in failures], headers=["Test Set", "Check", "Detail"]))

    total = len(report.records)
    verdict = f"{total - len(failures)}/{total} checks passed"
    print(f"\n{_colored(verdict, 'RED' if failures else 'GREEN', colors)}\n")
