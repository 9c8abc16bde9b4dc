##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Main entry point into RelTest's codebase.
"""

import logging
import sys
import traceback
from typing import List, Optional

from reltest.cli.argparse_main import build_main_parser
from reltest.log_formatter import setup_logging


LOG = logging.getLogger("reltest")


def main(argv: Optional[List[str]] = None):
    """
    Entry point for the RelTest command-line interface (CLI) operations.

    This function sets up the argument parser, handles command-line arguments,
    initializes logging, and executes the appropriate function based on the
    provided command. Any error ends the process with exit code 1.

    Args:
        argv: The command line arguments, without the program name. Read from
            `sys.argv` if None.

    Returns:
        1 if no arguments were given, after printing the help. Otherwise the
        process exits.
    """
    argv = sys.argv[1:] if argv is None else argv
    parser = build_main_parser()
    if not argv:
        parser.print_help(sys.stdout)
        return 1
    args = parser.parse_args(argv)

    # Colors are only useful on a terminal; CI logs get plain lines
    setup_logging(logger=LOG, log_level=args.level.upper(), colors=sys.stdout.isatty())

    try:
        args.func(args)
        # pylint complains that this exception is too broad - being at the literal top of the program stack, it's ok.
    except Exception as excpt:  # pylint: disable=broad-except
        LOG.debug(traceback.format_exc())
        LOG.error(str(excpt))
        sys.exit(1)

    sys.exit()


if __name__ == "__main__":
    main()
