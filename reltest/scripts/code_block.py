##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Splitting of Rel scripts into code blocks.

A script is a sequence of Rel source lines. Lines starting with `// %%` are
directives: each one ends the block accumulated so far and declares how the next
block must be executed:

    // %% write, errors, name="load data"
    def insert:foo = 1

Flags (`write`, `warnings`, `errors`, `abort`) and attributes (`name="..."`,
`load="<relative path>"`) apply to the block that follows the directive only.
A `load` attribute replaces the source of the next block with the contents of
the referenced file, resolved against the directory of the script.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from reltest.conventions import DIRECTIVE_MARKER, LINE_COMMENT, SCRIPT_EXTENSION
from reltest.exceptions import ScriptParseError
from reltest.utils import unix_basename


LOG = logging.getLogger(__name__)

# Keyword flags of a directive mapped to the `Directive` field they set
FLAGS = {
    "write": "write",
    "warnings": "expect_warnings",
    "errors": "expect_errors",
    "abort": "expect_abort",
}
# Accepted for readability, `read` is the default
NO_OP_FLAGS = ("read",)
ATTRIBUTES = ("name", "load")

_TOKEN = re.compile(r'(?P<attr>[A-Za-z_]+)\s*=\s*(?:"(?P<value>[^"]*)"|(?P<bad>[^,\s]*))|(?P<flag>[A-Za-z_]+)')


@dataclass(frozen=True)
class Directive:
    """
    The settings declared by one directive line.

    Attributes:
        write: The block may write to the database.
        expect_warnings: The block is expected to report warnings.
        expect_errors: The block is expected to report errors.
        expect_abort: The block is expected to abort.
        name: Explicit name for the block.
        load: Path, relative to the script, of a file holding the block source.
    """

    write: bool = False
    expect_warnings: bool = False
    expect_errors: bool = False
    expect_abort: bool = False
    name: Optional[str] = None
    load: Optional[str] = None


@dataclass(frozen=True)
class CodeBlock:
    """
    A section of a script to execute as a standalone transaction, along with the
    expectations regarding its results.

    Attributes:
        source_name: Stem of the file the block comes from.
        code: The source of the transaction.
        name: Explicit name for the block, if one was declared.
        write: The block may write to the database.
        expect_warnings: The block is expected to report warnings.
        expect_errors: The block is expected to report errors.
        expect_abort: The block is expected to abort.
    """

    source_name: str
    code: str
    name: Optional[str] = None
    write: bool = False
    expect_warnings: bool = False
    expect_errors: bool = False
    expect_abort: bool = False

    @classmethod
    def from_directive(cls, source_name: str, code: str, directive: Directive) -> "CodeBlock":
        """
        Create a block with the flags and name declared by `directive`.

        Args:
            source_name: Stem of the file the block comes from.
            code: The source of the block.
            directive: The directive preceding the block.

        Returns:
            The new `CodeBlock`.
        """
        return cls(
            source_name=source_name,
            code=code,
            name=directive.name,
            write=directive.write,
            expect_warnings=directive.expect_warnings,
            expect_errors=directive.expect_errors,
            expect_abort=directive.expect_abort,
        )


def is_directive(line: str) -> bool:
    """Check whether a script line is a block directive."""
    return line.startswith(DIRECTIVE_MARKER)


def parse_directive(line: str, script: str = "<script>") -> Directive:
    """
    Tokenize a directive line in a single pass.

    Args:
        line: The directive line, starting with `// %%`.
        script: Name of the script the line belongs to, used in error messages.

    Returns:
        The flags and attributes declared by the line.

    Raises:
        ScriptParseError: If an attribute value is not a quoted literal.
    """
    settings = {}
    for match in _TOKEN.finditer(line[len(DIRECTIVE_MARKER) :]):
        attr = match.group("attr")
        if attr is not None:
            if match.group("value") is None:
                raise ScriptParseError(script, line, f"'{attr}' expects a quoted value, got '{match.group('bad')}'")
            if attr not in ATTRIBUTES:
                LOG.warning(f"{script}: ignoring unknown directive attribute '{attr}'")
                continue
            settings[attr] = match.group("value")
            continue

        flag = match.group("flag")
        if flag in FLAGS:
            settings[FLAGS[flag]] = True
        elif flag not in NO_OP_FLAGS:
            LOG.warning(f"{script}: ignoring unknown directive flag '{flag}'")
    return Directive(**settings)


def all_comments(text: str) -> bool:
    """
    Check if all lines in a string are comments or empty.

    Args:
        text: A line or a multi-line buffer.

    Returns:
        True if every line is blank or starts with `//`.
    """
    return all(not line.strip() or line.lstrip().startswith(LINE_COMMENT) for line in text.split("\n"))


def _load_block_source(cwd: str, script: str, line: str, directive: Directive) -> str:
    """
    Read the file a `load` directive refers to.

    Raises:
        ScriptParseError: If the file does not exist.
    """
    filename = os.path.join(cwd, directive.load)
    if not os.path.isfile(filename):
        raise ScriptParseError(script, line, f"'load' directive points to a file that was not found: {filename}")
    with open(filename, "r") as f:
        return f.read()


def parse_code_blocks(cwd: str, basename: str, lines: Iterable[str]) -> List[CodeBlock]:
    """
    Translate the lines of a script into a series of code blocks suitable for direct execution.

    Source that precedes a directive is only flushed as a block if it holds more
    than comments; otherwise it stays in front of the next block's source.

    Args:
        cwd: Directory from which `load` directives are resolved.
        basename: Stem of the script, used as the blocks' source name.
        lines: The lines of the script, without line terminators.

    Returns:
        The blocks of the script, in source order.

    Raises:
        ScriptParseError: If a directive is malformed or loads a missing file.
    """
    blocks: List[CodeBlock] = []
    src = ""
    directive = Directive()
    for line in lines:
        if is_directive(line):
            if src and not all_comments(src):
                blocks.append(CodeBlock.from_directive(basename, src, directive))
                src = ""
            directive = parse_directive(line, basename)
            if directive.load is not None:
                src = _load_block_source(cwd, basename, line, directive)
            continue
        src += line + "\n"

    src = src.strip()
    if src and not all_comments(src):
        blocks.append(CodeBlock.from_directive(basename, src, directive))

    return blocks


def parse_script_file(source_file: str) -> List[CodeBlock]:
    """
    Parse the script at this path into code blocks.

    Args:
        source_file: Path to the script.

    Returns:
        The blocks of the script, or an empty list if the file does not exist.
    """
    if not os.path.isfile(source_file):
        return []

    basename = unix_basename(source_file)
    if basename.endswith(SCRIPT_EXTENSION):
        basename = basename[: -len(SCRIPT_EXTENSION)]
    with open(source_file, "r") as f:
        lines = f.read().splitlines()

    return parse_code_blocks(os.path.dirname(source_file), basename, lines)


def parse_source_file(directory: str, filename: str) -> List[CodeBlock]:
    """
    Parse the file `filename` in `directory`, returning the resulting blocks.

    Args:
        directory: The directory of the script.
        filename: The name of the script, possibly with subdirectories.

    Returns:
        The blocks of the script, or an empty list if the file does not exist.
    """
    return parse_script_file(os.path.join(directory, filename))
