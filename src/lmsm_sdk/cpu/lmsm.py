"""
LMSM Instruction Set Definition
===============================

This module defines the instruction set of the LMSM, an extended
Little-Man-style accumulator machine with a hardware call stack.

Memory holds signed three-digit decimal words (-999..999). An instruction
occupies one word, except for two pseudo-instructions that the assembler
expands into several machine words:

| Mnemonic | Words | Encoding             |
|----------|-------|----------------------|
| ADD      | 1     | 100 + operand        |
| SUB      | 1     | 200 + operand        |
| STA      | 1     | 300 + operand        |
| LDI      | 1     | 400 + operand        |
| LDA      | 1     | 500 + operand        |
| BRA      | 1     | 600 + operand        |
| BRZ      | 1     | 700 + operand        |
| BRP      | 1     | 800 + operand        |
| INP      | 1     | 901                  |
| OUT      | 1     | 902                  |
| HLT, COB | 1     | 000                  |
| DAT      | 1     | operand (raw value)  |
| CALL     | 3     | 920, 400 + op, 910   |
| RET      | 1     | 911                  |
| SPUSH    | 1     | 920                  |
| SPUSHI   | 2     | 920, 400 + op        |
| SPOP     | 1     | 921                  |
| SDUP     | 1     | 922                  |
| SADD     | 1     | 923                  |
| SSUB     | 1     | 924                  |
| SMAX     | 1     | 925                  |
| SMIN     | 1     | 926                  |
| SMUL     | 1     | 927                  |
| SDIV     | 1     | 928                  |

The operand is either a numeric literal or the offset of a labelled
instruction. An instruction's width and whether it takes an operand both
follow from its encoding template, so the table below is the single
source of truth.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


# =============================================================================
# Machine Constants
# =============================================================================

MIN_VALUE = -999
MAX_VALUE = 999

# The LMSM has 200 words of memory (addresses 0..199)
DEFAULT_MEMORY_SIZE = 200


# =============================================================================
# Mnemonic Enumeration
# =============================================================================

class Mnemonic(Enum):
    """
    The closed set of mnemonics the assembler recognizes.

    Recognition is case-sensitive: ``add`` is not a mnemonic, so it is
    read as a label.
    """
    ADD = "ADD"
    SUB = "SUB"
    LDA = "LDA"
    STA = "STA"
    BRA = "BRA"
    BRZ = "BRZ"
    BRP = "BRP"
    INP = "INP"
    OUT = "OUT"
    HLT = "HLT"
    COB = "COB"
    DAT = "DAT"
    LDI = "LDI"
    CALL = "CALL"
    RET = "RET"
    SPUSH = "SPUSH"
    SPUSHI = "SPUSHI"
    SPOP = "SPOP"
    SDUP = "SDUP"
    SADD = "SADD"
    SSUB = "SSUB"
    SMAX = "SMAX"
    SMIN = "SMIN"
    SMUL = "SMUL"
    SDIV = "SDIV"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def lookup(cls, token: Optional[str]) -> Optional["Mnemonic"]:
        """
        Return the mnemonic spelled by ``token``, or None.

        Args:
            token: Source token (may be None at end of input)
        """
        if token is None:
            return None
        return _BY_NAME.get(token)

    @property
    def info(self) -> "InstructionInfo":
        return INSTRUCTION_TABLE[self]

    @property
    def width(self) -> int:
        """Number of memory words this instruction occupies."""
        return self.info.width

    @property
    def requires_operand(self) -> bool:
        return self.info.requires_operand


_BY_NAME: dict[str, Mnemonic] = {m.value: m for m in Mnemonic}


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class Operand:
    """
    Placeholder for an operand-carrying word in an encoding template.

    The emitted word is ``base + operand``.
    """
    base: int


WordTemplate = Union[int, Operand]


@dataclass(frozen=True)
class InstructionInfo:
    """
    Encoding template for one mnemonic.

    Attributes:
        template: One entry per emitted word; either a fixed word value
                  or an Operand placeholder
    """
    template: tuple[WordTemplate, ...]

    @property
    def width(self) -> int:
        return len(self.template)

    @property
    def requires_operand(self) -> bool:
        return any(isinstance(word, Operand) for word in self.template)

    def __repr__(self) -> str:
        words = ", ".join(
            f"{w.base}+op" if isinstance(w, Operand) else str(w)
            for w in self.template
        )
        return f"InstructionInfo([{words}])"


# =============================================================================
# Instruction Table
# =============================================================================
# Master table of LMSM instructions.
# Key: Mnemonic
# Value: InstructionInfo(template)
#
# Codes 900-928 are the privileged I/O, call-link and stack operations.
# =============================================================================

INSTRUCTION_TABLE: dict[Mnemonic, InstructionInfo] = {
    # Memory and arithmetic
    Mnemonic.ADD:    InstructionInfo((Operand(100),)),
    Mnemonic.SUB:    InstructionInfo((Operand(200),)),
    Mnemonic.STA:    InstructionInfo((Operand(300),)),
    Mnemonic.LDI:    InstructionInfo((Operand(400),)),
    Mnemonic.LDA:    InstructionInfo((Operand(500),)),

    # Branches
    Mnemonic.BRA:    InstructionInfo((Operand(600),)),
    Mnemonic.BRZ:    InstructionInfo((Operand(700),)),
    Mnemonic.BRP:    InstructionInfo((Operand(800),)),

    # I/O and halting
    Mnemonic.INP:    InstructionInfo((901,)),
    Mnemonic.OUT:    InstructionInfo((902,)),
    Mnemonic.HLT:    InstructionInfo((0,)),
    Mnemonic.COB:    InstructionInfo((0,)),

    # Raw data word
    Mnemonic.DAT:    InstructionInfo((Operand(0),)),

    # Subroutines: push return address, load target, jump
    Mnemonic.CALL:   InstructionInfo((920, Operand(400), 910)),
    Mnemonic.RET:    InstructionInfo((911,)),

    # Stack operations
    Mnemonic.SPUSH:  InstructionInfo((920,)),
    Mnemonic.SPUSHI: InstructionInfo((920, Operand(400))),
    Mnemonic.SPOP:   InstructionInfo((921,)),
    Mnemonic.SDUP:   InstructionInfo((922,)),
    Mnemonic.SADD:   InstructionInfo((923,)),
    Mnemonic.SSUB:   InstructionInfo((924,)),
    Mnemonic.SMAX:   InstructionInfo((925,)),
    Mnemonic.SMIN:   InstructionInfo((926,)),
    Mnemonic.SMUL:   InstructionInfo((927,)),
    Mnemonic.SDIV:   InstructionInfo((928,)),
}


# =============================================================================
# Encoding Functions
# =============================================================================

def encode(mnemonic: Mnemonic, operand: int = 0) -> list[int]:
    """
    Encode one instruction into machine words.

    Args:
        mnemonic: The instruction to encode
        operand: Resolved operand (label offset or literal value);
                 ignored by mnemonics that take no operand

    Returns:
        List of words, always ``mnemonic.width`` long
    """
    return [
        word.base + operand if isinstance(word, Operand) else word
        for word in INSTRUCTION_TABLE[mnemonic].template
    ]


def clamp_value(value: int) -> tuple[int, bool]:
    """
    Clamp a literal into the machine word range.

    Returns:
        (clamped value, True if clamping changed the value)
    """
    if value > MAX_VALUE:
        return MAX_VALUE, True
    if value < MIN_VALUE:
        return MIN_VALUE, True
    return value, False
