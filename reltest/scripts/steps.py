##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Conversion of code blocks into the named steps of a test.
"""

import os
from dataclasses import dataclass
from typing import Dict, List

from reltest.common.enums import AllowUnexpected
from reltest.scripts.code_block import CodeBlock, parse_script_file


@dataclass(frozen=True)
class Step:
    """
    One named step of a test, executed as its own transaction.

    Attributes:
        name: The name the step is reported with.
        query: The source of the transaction.
        readonly: True unless the block declared `write`.
        allow_unexpected: Which unexpected problems the step tolerates.
        expect_abort: The step is expected to abort.
    """

    name: str
    query: str
    readonly: bool = True
    allow_unexpected: AllowUnexpected = AllowUnexpected.NONE
    expect_abort: bool = False


def _allow_unexpected(block: CodeBlock) -> AllowUnexpected:
    if block.expect_errors:
        return AllowUnexpected.ERRORS
    if block.expect_warnings:
        return AllowUnexpected.WARNING
    return AllowUnexpected.NONE


def code_blocks_to_steps(blocks: List[CodeBlock]) -> List[Step]:
    """
    Translate code blocks into steps.

    A lone block is named after its explicit name or its source file. When there
    are several blocks, each name is prefixed with the 1-based position of the block.

    Args:
        blocks: The blocks parsed from one script.

    Returns:
        One step per block, in order.
    """
    steps = []
    for counter, block in enumerate(blocks, start=1):
        name = block.name or block.source_name
        if len(blocks) > 1:
            name = f"{counter} - {name}"
        steps.append(
            Step(
                name=name,
                query=block.code,
                readonly=not block.write,
                allow_unexpected=_allow_unexpected(block),
                expect_abort=block.expect_abort,
            )
        )
    return steps


def parse_steps(source_path: str) -> List[Step]:
    """
    Parse the script at `source_path` as code blocks and translate them into steps.

    Args:
        source_path: Path to the script.

    Returns:
        The steps of the script; empty if the file does not exist.
    """
    return code_blocks_to_steps(parse_script_file(source_path))


class StepCache:
    """
    Memoizes the steps of scripts shared by the tests of a suite
    (`before-suite.rel`, `before-test.rel`, `validate-test.rel`).
    """

    def __init__(self):
        self._steps: Dict[str, List[Step]] = {}

    def get_steps(self, directory: str, filename: str) -> List[Step]:
        """
        Get the steps of `filename` in `directory`, parsing the file on first use.

        Args:
            directory: The directory of the script.
            filename: The name of the script.

        Returns:
            The steps of the script; empty if the file does not exist.
        """
        path = os.path.join(directory, filename)
        if path not in self._steps:
            self._steps[path] = parse_steps(path)
        return self._steps[path]

    def __len__(self) -> int:
        return len(self._steps)
