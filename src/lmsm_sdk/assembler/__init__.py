"""
LMSM Assembler
==============

This package provides a two-phase assembler for the LMSM, an extended
Little-Man-style accumulator machine with a hardware call stack.

Main Components
---------------
- **Assembler**: Runs both phases and returns a CompilationResult
- **Lexer**: Splits source text into located word tokens
- **InstructionListBuilder**: Builds the ordered instruction list and
  assigns memory offsets
- **CodeGenerator**: Resolves labels and encodes the memory image

Assembly Process
----------------
1. **Building (Lexer + InstructionListBuilder)**:
   - Tokenize source on whitespace
   - Recognize ``[label] mnemonic [operand]`` groups
   - Assign each instruction its offset (CALL takes 3 words, SPUSHI 2)

2. **Code Generation (CodeGenerator)**:
   - Resolve label references against the whole list
   - Encode each instruction into one or more words

Example Usage
-------------
>>> from lmsm_sdk.assembler import assemble
>>> result = assemble("loop INP\\n OUT\\n BRA loop")
>>> result.words()
[901, 902, 600]
"""

from lmsm_sdk.assembler.assembler import (
    Assembler,
    CompilationResult,
    assemble,
    assemble_file,
)
from lmsm_sdk.assembler.lexer import Lexer, Token, is_number
from lmsm_sdk.assembler.parser import (
    Instruction,
    InstructionListBuilder,
    build_instruction_list,
)
from lmsm_sdk.assembler.codegen import (
    CodeGenerator,
    LABEL_NOT_FOUND,
    find_label,
    find_similar_labels,
    get_listing,
    get_symbols,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "CompilationResult",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "Token",
    "is_number",
    # Instruction list builder
    "Instruction",
    "InstructionListBuilder",
    "build_instruction_list",
    # Code generator
    "CodeGenerator",
    "LABEL_NOT_FOUND",
    "find_label",
    "find_similar_labels",
    "get_listing",
    "get_symbols",
]
