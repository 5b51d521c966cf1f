"""
LMSM SDK CPU Package
====================

This package contains the LMSM instruction set definitions used by the
assembler: the mnemonic enumeration, per-mnemonic encoding templates,
and the machine word range.

Modules:
    lmsm: Instruction set, encoding table and helper functions.

Usage:
    from lmsm_sdk.cpu import Mnemonic, encode

    encode(Mnemonic.CALL, 7)   # [920, 407, 910]
"""

from lmsm_sdk.cpu.lmsm import (
    # Core types
    Mnemonic,
    InstructionInfo,
    Operand,
    # Master instruction database
    INSTRUCTION_TABLE,
    # Machine constants
    MIN_VALUE,
    MAX_VALUE,
    DEFAULT_MEMORY_SIZE,
    # Encoding functions
    encode,
    clamp_value,
)

__all__ = [
    "Mnemonic",
    "InstructionInfo",
    "Operand",
    "INSTRUCTION_TABLE",
    "MIN_VALUE",
    "MAX_VALUE",
    "DEFAULT_MEMORY_SIZE",
    "encode",
    "clamp_value",
]
