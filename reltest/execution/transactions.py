##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Execution of transactions and code blocks against a database.

Each block runs as its own transaction, so a block observes the committed
effects of the blocks before it. The outcome of a block is compared with the
expectations its directive declared; a sequence of blocks stops at the first
block whose outcome does not satisfy them.
"""

import logging
from typing import Dict, List, Optional

from reltest.backends.database_service import TransactionResponse
from reltest.config import Config
from reltest.exceptions import TransactionError
from reltest.reporting import TestReport
from reltest.scripts.code_block import CodeBlock
from reltest.utils import progress, warn


LOG = logging.getLogger(__name__)

READ_TIMEOUT = 1800


def log_abort_diagnostics(ctx: str, response: TransactionResponse):
    """
    Log the error code and message rows an aborted transaction returned.

    Args:
        ctx: The context of the transaction.
        response: The response of the service.
    """
    for kind, value in response.abort_diagnostics():
        warn(ctx, f"Error {kind}: {value}")


def execute_transaction(
    code: str,
    database: str,
    engine: str,
    config: Config,
    inputs: Optional[Dict[str, str]] = None,
    readonly: bool = False,
    ctx: str = "transaction",
) -> bool:
    """
    Execute a transaction with this code and optional inputs, and check the response for errors.

    Args:
        code: The source of the transaction.
        database: The database to execute against.
        engine: The engine executing the transaction.
        config: The configuration holding the service.
        inputs: Named inputs of the transaction.
        readonly: Execute as a read-only transaction.
        ctx: The context used in log messages.

    Returns:
        True when the transaction committed without errors.

    Raises:
        TransactionError: If the transaction aborted or reported error problems.
    """
    response = config.service.execute(database, engine, code, inputs=inputs, readonly=readonly, timeout=READ_TIMEOUT)

    if response.aborted:
        log_abort_diagnostics(ctx, response)
        raise TransactionError("Failed to execute transaction: aborted.", response)
    if response.errored:
        raise TransactionError(f"Failed to execute transaction: {response.problems}", response)

    return True


def errors_satisfied(block: CodeBlock, errored: bool) -> bool:
    """
    Check the error outcome of a block against its expectation.

    Deprecated behavior, kept for backward compatibility: a block declaring
    `errors` is satisfied whether or not errors actually occur. `errors` only
    allows errors rather than requiring them, so the exact-match check is skipped.

    Args:
        block: The executed block.
        errored: Whether the transaction reported errors.

    Returns:
        True if the error outcome is acceptable.
    """
    if block.expect_errors:
        return True
    return not errored


def execute_block(
    ctx: str,
    block: CodeBlock,
    database: str,
    engine: str,
    config: Config,
    report: Optional[TestReport] = None,
) -> bool:
    """
    Execute a transaction for this `block` and check its outcome against the block's expectations.

    Args:
        ctx: The context used for logging and reporting.
        block: The block to execute.
        database: The database to execute against.
        engine: The engine executing the transaction.
        config: The configuration holding the service.
        report: Where the abort and error checks are recorded, if given.

    Returns:
        True if the outcome satisfies the expectations of the block.
    """
    response = config.service.execute(database, engine, block.code, readonly=not block.write, timeout=READ_TIMEOUT)

    aborted = response.aborted
    errored = response.errored
    abort_ok = aborted == block.expect_abort
    errors_ok = errors_satisfied(block, errored)

    if (not block.expect_errors and errored) or (not block.expect_abort and aborted):
        LOG.info(
            f"[{ctx}] Executed script\n  state: {response.state.value}\n  source: {block.code}\n"
            f"  problems: {response.problems}"
        )
    if not block.expect_abort and aborted:
        log_abort_diagnostics(ctx, response)

    if report is not None:
        name = block.name or block.source_name
        report.record(f"{name}: abort", abort_ok, f"expected aborted={block.expect_abort}, got {aborted}")
        if not block.expect_errors:
            report.record(f"{name}: errors", errors_ok, f"unexpected errors: {response.problems}")

    return abort_ok and errors_ok


def execute_blocks(
    ctx: str,
    blocks: List[CodeBlock],
    database: str,
    engine: str,
    config: Config,
    report: Optional[TestReport] = None,
) -> bool:
    """
    Execute a series of transactions, one for each code block in `blocks`, stopping at the first failure.

    Args:
        ctx: The context used for logging and reporting.
        blocks: The blocks to execute, in order.
        database: The database to execute against.
        engine: The engine executing the transactions.
        config: The configuration holding the service.
        report: Where the checks of each block are recorded, if given.

    Returns:
        True if every block satisfied its expectations.
    """
    count = len(blocks)
    if count == 0:
        warn(ctx, "Nothing to execute.")
        return True

    progress(ctx, f"Executing {count} transaction(s)...")
    for i, block in enumerate(blocks, start=1):
        progress(ctx, f"Executing transaction {i}/{count}...")
        if not execute_block(ctx, block, database, engine, config, report):
            return False
    return True
