"""
LMSM Instruction List Builder
=============================

This module turns LMSM assembly source into an ordered list of
``Instruction`` records with their memory offsets assigned. It is the
first of the assembler's two phases; the code generator runs second.

Grammar
-------
The source is a flat stream of whitespace-delimited tokens. Each
instruction is written as:

    [label] mnemonic [operand]

where ``operand`` is present only for the operand-taking mnemonics, and
is either a signed decimal literal or the name of another instruction's
label.

```asm
        INP
        STA count
loop    LDA count
        BRZ done
        SUB one
        STA count
        BRA loop
done    HLT
count   DAT 0
one     DAT 1
```

Labels carry no sigil. A token is a label exactly when it is not a
mnemonic, so mnemonic lookup always happens first.

Error Handling
--------------
Errors are recorded in an ``ErrorSlot`` rather than raised. The builder
uses ``set_if_absent``, so the first error it meets is the one reported.

- ``UNKNOWN_INSTRUCTION`` and ``ARG_REQUIRED`` stop the build. The
  instructions built so far are kept.
- ``OUT_OF_RANGE`` clamps the literal to -999 or 999 and the build
  carries on. A later error that stops the build replaces it, so the
  reported error always explains a truncated list.

Label references are not checked here; the code generator resolves them
once the whole list is known.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from lmsm_sdk.assembler.lexer import Lexer, Token
from lmsm_sdk.cpu import Mnemonic, clamp_value
from lmsm_sdk.errors import ErrorKind, ErrorSlot, SourceLocation

logger = logging.getLogger(__name__)

# Errors that do not stop the build and give way to one that does
_RECOVERABLE = (ErrorKind.OUT_OF_RANGE,)


# =============================================================================
# Instruction Record
# =============================================================================

@dataclass
class Instruction:
    """
    One assembly statement with its assigned address.

    Attributes:
        mnemonic: The instruction mnemonic
        label: Label defined by this instruction, if any
        label_reference: Label used as the operand, if the operand is
                         not a numeric literal
        value: Literal operand (0 when absent), already clamped
        offset: Address of the first word this instruction emits
        location: Where the instruction starts in the source
    """
    mnemonic: Mnemonic
    label: Optional[str] = None
    label_reference: Optional[str] = None
    value: int = 0
    offset: int = 0
    location: Optional[SourceLocation] = None

    @property
    def width(self) -> int:
        """Number of words emitted; fixed by the mnemonic."""
        return self.mnemonic.width

    @property
    def next_offset(self) -> int:
        return self.offset + self.width

    def operand_text(self) -> str:
        """Operand as written in source, or an empty string."""
        if self.label_reference is not None:
            return self.label_reference
        if self.mnemonic.requires_operand:
            return str(self.value)
        return ""

    def __str__(self) -> str:
        parts = [self.label or "", self.mnemonic.value, self.operand_text()]
        return " ".join(p for p in parts if p)


# =============================================================================
# Builder Implementation
# =============================================================================

class InstructionListBuilder:
    """
    Builds the instruction list from source text.

    Usage:
        builder = InstructionListBuilder("prog.asm")
        instructions, errors = builder.build(source)
        if errors:
            print(errors.diagnostic)
    """

    def __init__(self, filename: str = "<input>"):
        self._filename = filename
        self._tokens: list[Token] = []
        self._pos = 0

    def build(
        self,
        source: str,
        errors: Optional[ErrorSlot] = None,
    ) -> tuple[list[Instruction], ErrorSlot]:
        """
        Build the instruction list.

        Args:
            source: Assembly source text
            errors: Slot to record errors in (a new one if None)

        Returns:
            (instructions, errors). On a terminal error the list holds the
            instructions built before it.
        """
        if errors is None:
            errors = ErrorSlot()

        self._tokens = list(Lexer(source, self._filename).tokenize())
        self._pos = 0
        instructions: list[Instruction] = []

        while not self._at_end():
            instruction = self._build_instruction(errors, instructions)
            if instruction is None:
                break
            instructions.append(instruction)
            logger.debug(
                "%04d %-20s (%d word%s)",
                instruction.offset, instruction, instruction.width,
                "" if instruction.width == 1 else "s",
            )

        logger.debug("Built %d instructions", len(instructions))
        return instructions, errors

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def _advance(self) -> Optional[Token]:
        """Consume and return the current token, or None at end of input."""
        if self._at_end():
            return None
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    # =========================================================================
    # Instruction Parsing
    # =========================================================================

    def _build_instruction(
        self,
        errors: ErrorSlot,
        instructions: list[Instruction],
    ) -> Optional[Instruction]:
        """
        Parse one ``[label] mnemonic [operand]`` group.

        Returns:
            The new instruction, or None if a terminal error was recorded
        """
        first = self._advance()
        token: Optional[Token] = first
        label: Optional[str] = None

        mnemonic = Mnemonic.lookup(first.value)
        if mnemonic is None:
            label = first.value
            token = self._advance()
            mnemonic = Mnemonic.lookup(token.value if token else None)

        if mnemonic is None:
            # A dangling label at end of input is reported on the label itself
            culprit = token or first
            errors.set_if_absent(
                ErrorKind.UNKNOWN_INSTRUCTION, culprit.location, culprit.value,
                replaces=_RECOVERABLE,
            )
            logger.warning("Unknown instruction '%s' at %s", culprit.value, culprit.location)
            return None

        label_reference: Optional[str] = None
        value = 0
        if mnemonic.requires_operand:
            operand = self._advance()
            if operand is None:
                errors.set_if_absent(
                    ErrorKind.ARG_REQUIRED, token.location, mnemonic.value,
                    replaces=_RECOVERABLE,
                )
                logger.warning("%s at %s requires an argument", mnemonic, token.location)
                return None

            if operand.is_number:
                value, clamped = clamp_value(int(operand.value))
                if clamped:
                    errors.set_if_absent(
                        ErrorKind.OUT_OF_RANGE, operand.location, operand.value
                    )
                    logger.warning(
                        "Value %s at %s is out of range, clamped to %d",
                        operand.value, operand.location, value,
                    )
            else:
                label_reference = operand.value

        offset = instructions[-1].next_offset if instructions else 0
        return Instruction(
            mnemonic=mnemonic,
            label=label,
            label_reference=label_reference,
            value=value,
            offset=offset,
            location=first.location,
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def build_instruction_list(
    source: str,
    filename: str = "<input>",
) -> tuple[list[Instruction], ErrorSlot]:
    """
    Convenience function to build the instruction list for a source text.

    Args:
        source: Assembly source text
        filename: Source filename for error messages

    Returns:
        (instructions, errors)
    """
    return InstructionListBuilder(filename).build(source)
