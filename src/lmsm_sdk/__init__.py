"""
LMSM SDK - Assembler Toolchain for the LMSM
===========================================

This package provides an assembler for the LMSM, an extended
Little-Man-style instructional computer with an accumulator, signed
three-digit decimal words and a hardware call stack.

Main Components
---------------
- **assembler**: LMSM assembler (lmsmasm)
    Converts assembly source files (.asm) into a memory image of
    signed decimal words

- **cpu**: LMSM instruction set
    Mnemonics, instruction widths and the encoding table

Quick Start
-----------
Assemble a program:
    >>> from lmsm_sdk import assemble
    >>> result = assemble("INP\\n SPUSH\\n SPUSHI 2\\n SMUL\\n SPOP\\n OUT\\n HLT")
    >>> result.words()
    [901, 920, 920, 402, 927, 921, 902, 0]

Or use the command-line tool:
    $ lmsmasm program.asm -o program.lmsm
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from lmsm_sdk.assembler import (
    Assembler,
    CompilationResult,
    assemble,
    assemble_file,
)
from lmsm_sdk.config import AssemblerConfig
from lmsm_sdk.cpu import Mnemonic, DEFAULT_MEMORY_SIZE
from lmsm_sdk.errors import (
    LmsmError,
    AssemblerError,
    UnknownInstructionError,
    ArgumentRequiredError,
    BadLabelError,
    OutOfRangeError,
    CapacityError,
    ErrorKind,
    ErrorSlot,
    Diagnostic,
    SourceLocation,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "CompilationResult",
    "AssemblerConfig",
    "assemble",
    "assemble_file",
    # Instruction set
    "Mnemonic",
    "DEFAULT_MEMORY_SIZE",
    # Error values
    "ErrorKind",
    "ErrorSlot",
    "Diagnostic",
    "SourceLocation",
    # Exception hierarchy
    "LmsmError",
    "AssemblerError",
    "UnknownInstructionError",
    "ArgumentRequiredError",
    "BadLabelError",
    "OutOfRangeError",
    "CapacityError",
]
