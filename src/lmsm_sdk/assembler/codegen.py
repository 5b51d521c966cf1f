"""
LMSM Code Generator
===================

This module generates LMSM machine words from a built instruction list.
It is the second of the assembler's two phases.

For each instruction, in list order:

1. Resolve the operand. A label reference is looked up by scanning the
   whole instruction list for the first instruction defining that label,
   so forward and backward references both work. A literal operand is
   used as is.
2. Encode the instruction with the table in ``lmsm_sdk.cpu`` and write
   the words at ``code[offset]``, ``code[offset + 1]``, ...

Error Handling
--------------
Errors are recorded with ``ErrorSlot.set_unconditional``: generation
never stops early, and the error reported is the last one met.

- ``BAD_LABEL``: the reference matched no label. The operand becomes the
  lookup sentinel -1 and the word is still written.
- ``UNKNOWN_INSTRUCTION``: the record's mnemonic is not in the table.
  Only reachable for lists built outside ``InstructionListBuilder``.
- ``CAPACITY_EXCEEDED``: a word falls outside the memory image. That word
  is dropped; the words that fit are still written.

Output
------
``get_symbols`` and ``get_listing`` render the symbol table and a listing
for a generated program.
"""

import logging
from typing import Iterable, Optional

from lmsm_sdk.assembler.parser import Instruction
from lmsm_sdk.cpu import DEFAULT_MEMORY_SIZE, INSTRUCTION_TABLE, encode
from lmsm_sdk.errors import ErrorKind, ErrorSlot

logger = logging.getLogger(__name__)

# Operand used when a label reference cannot be resolved
LABEL_NOT_FOUND = -1


# =============================================================================
# Label Resolution
# =============================================================================

def find_label(instructions: Iterable[Instruction], label: str) -> int:
    """
    Find the offset of the first instruction defining ``label``.

    Duplicate labels are allowed; the first one in list order wins.

    Returns:
        The offset, or LABEL_NOT_FOUND (-1)
    """
    for instruction in instructions:
        if instruction.label is not None and instruction.label == label:
            return instruction.offset
    return LABEL_NOT_FOUND


def find_similar_labels(instructions: Iterable[Instruction], name: str) -> list[str]:
    """
    Find up to three defined labels that look like a misspelling of ``name``.

    A label matches when it equals ``name`` ignoring case, or when its
    length is within one of ``name`` and at most two edits away.
    """
    wanted = name.lower()
    seen: set[str] = set()
    similar: list[str] = []

    for instruction in instructions:
        label = instruction.label
        if label is None or label in seen:
            continue
        seen.add(label)
        candidate = label.lower()
        if candidate == wanted or (
            abs(len(candidate) - len(wanted)) <= 1
            and _edit_distance(wanted, candidate) <= 2
        ):
            similar.append(label)
            if len(similar) == 3:
                break

    return similar


def _edit_distance(a: str, b: str) -> int:
    """Levenshtein distance, keeping one row of the table at a time."""
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            substitution = previous[j - 1] + (char_a != char_b)
            current.append(min(previous[j] + 1, current[j - 1] + 1, substitution))
        previous = current
    return previous[-1]


# =============================================================================
# Symbol Table and Listing
# =============================================================================

def get_symbols(instructions: Iterable[Instruction]) -> dict[str, int]:
    """
    Return the label table (name -> offset).

    When a label is defined more than once, the first definition is
    the one references resolve to, so it is the one reported.
    """
    symbols: dict[str, int] = {}
    for instruction in instructions:
        if instruction.label is not None and instruction.label not in symbols:
            symbols[instruction.label] = instruction.offset
    return symbols


def get_listing(instructions: list[Instruction], code: list[int]) -> str:
    """
    Render an assembly listing.

    Returns:
        The listing showing addresses, generated words, and source,
        followed by the symbol table
    """
    lines = []
    lines.append("LMSM Assembler Listing")
    lines.append("=" * 60)
    lines.append("")
    lines.append("Addr  Code             Line  Source")
    lines.append("-" * 60)
    for instruction in instructions:
        words = " ".join(
            f"{code[addr]:04d}" if 0 <= addr < len(code) else "????"
            for addr in range(instruction.offset, instruction.next_offset)
        )
        line = instruction.location.line if instruction.location else 0
        lines.append(
            f"{instruction.offset:04d}  {words:15s}  {line:4d}  "
            f"{instruction.label or '':10s} {instruction.mnemonic.value:6s} "
            f"{instruction.operand_text()}".rstrip()
        )
    lines.append("")
    lines.append("Symbol Table")
    lines.append("-" * 30)
    for name, offset in sorted(get_symbols(instructions).items()):
        lines.append(f"{name:20s} = {offset:04d}")
    return "\n".join(lines)


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates LMSM machine words from an instruction list.

    Usage:
        codegen = CodeGenerator(memory_size=200)
        code = codegen.new_image()
        errors = codegen.generate(instructions, code)
    """

    def __init__(self, memory_size: int = DEFAULT_MEMORY_SIZE):
        """
        Initialize the code generator.

        Args:
            memory_size: Number of words in the memory image
        """
        if memory_size <= 0:
            raise ValueError(f"memory size must be positive, got {memory_size}")
        self._memory_size = memory_size

    @property
    def memory_size(self) -> int:
        return self._memory_size

    def new_image(self) -> list[int]:
        """Return a zero-filled memory image."""
        return [0] * self._memory_size

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate(
        self,
        instructions: list[Instruction],
        code: list[int],
        errors: Optional[ErrorSlot] = None,
    ) -> ErrorSlot:
        """
        Encode every instruction into ``code``, in place.

        Args:
            instructions: The built instruction list
            code: Memory image to write into
            errors: Slot to record errors in (a new one if None)

        Returns:
            The error slot
        """
        if errors is None:
            errors = ErrorSlot()

        for instruction in instructions:
            self._generate_instruction(instruction, instructions, code, errors)

        logger.debug("Generated code for %d instructions", len(instructions))
        return errors

    # =========================================================================
    # Instruction Encoding
    # =========================================================================

    def _generate_instruction(
        self,
        instruction: Instruction,
        instructions: list[Instruction],
        code: list[int],
        errors: ErrorSlot,
    ) -> None:
        operand = instruction.value
        if instruction.label_reference is not None:
            operand = find_label(instructions, instruction.label_reference)
            if operand == LABEL_NOT_FOUND:
                errors.set_unconditional(
                    ErrorKind.BAD_LABEL,
                    instruction.location,
                    instruction.label_reference,
                )
                logger.warning(
                    "Undefined label '%s' referenced at %s",
                    instruction.label_reference, instruction.location,
                )

        if instruction.mnemonic not in INSTRUCTION_TABLE:
            errors.set_unconditional(
                ErrorKind.UNKNOWN_INSTRUCTION,
                instruction.location,
                str(instruction.mnemonic),
            )
            logger.warning(
                "Unknown instruction '%s' at offset %d",
                instruction.mnemonic, instruction.offset,
            )
            return

        words = encode(instruction.mnemonic, operand)
        for index, word in enumerate(words):
            address = instruction.offset + index
            if 0 <= address < len(code):
                code[address] = word
            else:
                errors.set_unconditional(
                    ErrorKind.CAPACITY_EXCEEDED,
                    instruction.location,
                    f"address {address}",
                )
                logger.warning(
                    "Word %d of %s does not fit in %d words of memory",
                    address, instruction.mnemonic, len(code),
                )
