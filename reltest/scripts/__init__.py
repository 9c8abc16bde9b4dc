##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
The `scripts` package turns Rel scripts into executable units.

Modules:
    code_block: Directive tokenizer and the script parser producing `CodeBlock`s.
    steps: Conversion of blocks into named test `Step`s, and the `StepCache`.
"""
