"""
LMSM Assembler - Main Interface
===============================

This module provides the main Assembler class, which runs the two
assembly phases in sequence over one ``CompilationResult``:

    source --(InstructionListBuilder)--> instructions
           --(CodeGenerator)-----------> code

Both phases always run. If the builder stops on an error, the code
generator still encodes the instructions that were built.

Example Usage
-------------
>>> from lmsm_sdk.assembler import Assembler
>>>
>>> asm = Assembler()
>>> result = asm.assemble_string('''
...     CALL double
...     OUT
...     HLT
... double SDUP
...     SADD
...     RET
... ''')
>>> result.succeeded
True
>>> result.words()
[920, 405, 910, 902, 0, 922, 923, 911]

Errors are values: check ``result.error`` (an ``ErrorKind`` or None), or
call ``result.raise_for_error()`` to get the matching exception.

Command-Line Usage
------------------
    $ lmsmasm program.asm -o program.lmsm -l program.lst -s program.sym
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from lmsm_sdk.assembler.codegen import (
    CodeGenerator,
    find_similar_labels,
    get_listing,
    get_symbols,
)
from lmsm_sdk.assembler.lexer import Lexer
from lmsm_sdk.assembler.parser import Instruction, InstructionListBuilder
from lmsm_sdk.config import AssemblerConfig
from lmsm_sdk.cpu import DEFAULT_MEMORY_SIZE
from lmsm_sdk.errors import ErrorKind, ErrorSlot, error_for

logger = logging.getLogger(__name__)


# =============================================================================
# Compilation Result
# =============================================================================

@dataclass
class CompilationResult:
    """
    Everything produced by one assembly run.

    The instruction list and the memory image belong to this result and
    are never shared with another run.

    Attributes:
        instructions: Built instructions, in source order
        code: Memory image; words not written by the program are 0
        errors: The recorded error, if any
        source: The assembled source text
        filename: Source filename used in diagnostics
    """
    instructions: list[Instruction] = field(default_factory=list)
    code: list[int] = field(default_factory=list)
    errors: ErrorSlot = field(default_factory=ErrorSlot)
    source: str = ""
    filename: str = "<input>"

    @property
    def error(self) -> Optional[ErrorKind]:
        return self.errors.kind

    @property
    def succeeded(self) -> bool:
        return not self.errors

    @property
    def program_size(self) -> int:
        """Number of words the program occupies, from address 0."""
        if not self.instructions:
            return 0
        return self.instructions[-1].next_offset

    def words(self, full: bool = False) -> list[int]:
        """
        Return the generated words.

        Args:
            full: Return the whole memory image instead of just the program
        """
        if full:
            return list(self.code)
        return self.code[:self.program_size]

    def symbols(self) -> dict[str, int]:
        """Return the label table (name -> offset)."""
        return get_symbols(self.instructions)

    def listing(self) -> str:
        """Return the assembly listing as a string."""
        return get_listing(self.instructions, self.code)

    def raise_for_error(self) -> None:
        """
        Raise the exception matching the recorded error, if there is one.

        Raises:
            AssemblerError: subclass matching ``self.error``
        """
        diagnostic = self.errors.diagnostic
        if diagnostic is None:
            return

        source_line = None
        if diagnostic.location is not None:
            lexer = Lexer(self.source, self.filename)
            source_line = lexer.get_line(diagnostic.location.line) or None

        similar = None
        if diagnostic.kind is ErrorKind.BAD_LABEL and diagnostic.detail:
            similar = find_similar_labels(self.instructions, diagnostic.detail)

        raise error_for(diagnostic, source_line=source_line, similar_labels=similar)


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Main LMSM assembler class.

    Each call to ``assemble_string`` or ``assemble_file`` produces a new,
    independent CompilationResult, so assembling the same source twice
    gives identical results.

    Attributes:
        config: Assembler configuration (memory size, output options)
    """

    def __init__(self, config: Optional[AssemblerConfig] = None, verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            config: Assembler configuration (defaults if None)
            verbose: Log progress at INFO level instead of DEBUG
        """
        self.config = config or AssemblerConfig()
        self._verbose = verbose
        self._codegen = CodeGenerator(self.config.memory_size)

    def _log(self, message: str, *args) -> None:
        logger.log(logging.INFO if self._verbose else logging.DEBUG, message, *args)

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> CompilationResult:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            The compilation result (check ``result.error``)
        """
        result = CompilationResult(
            code=self._codegen.new_image(),
            source=source,
            filename=filename,
        )

        builder = InstructionListBuilder(filename)
        result.instructions, _ = builder.build(source, result.errors)
        self._log("Parsed %d instructions from %s", len(result.instructions), filename)

        self._codegen.generate(result.instructions, result.code, result.errors)
        self._log("Generated %d words", result.program_size)

        if result.errors:
            logger.info("Assembly of %s reported: %s", filename, result.errors.diagnostic)

        return result

    def assemble_file(self, filepath: str | Path) -> CompilationResult:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            The compilation result

        Raises:
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._log("Assembling %s...", filepath)
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def write_code(
        self,
        result: CompilationResult,
        filepath: str | Path,
        full: Optional[bool] = None,
    ) -> None:
        """
        Write the generated words, one signed decimal word per line.

        Args:
            result: A compilation result
            filepath: Output file path
            full: Write the whole memory image (defaults to config.full_image)
        """
        if full is None:
            full = self.config.full_image
        words = result.words(full=full)
        Path(filepath).write_text("".join(f"{word}\n" for word in words))
        self._log("Wrote %d words to %s", len(words), filepath)

    def write_listing(self, result: CompilationResult, filepath: str | Path) -> None:
        """Write the assembly listing file."""
        Path(filepath).write_text(result.listing() + "\n")
        self._log("Wrote listing to %s", filepath)

    def write_symbols(self, result: CompilationResult, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name offset (one per line)
        """
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by lmsmasm\n")
            for name, offset in sorted(result.symbols().items()):
                f.write(f"{name} {offset}\n")
        self._log("Wrote symbols to %s", filepath)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, memory_size: int = DEFAULT_MEMORY_SIZE) -> CompilationResult:
    """
    Assemble source text with a fresh assembler.

    Args:
        source: Assembly source code
        memory_size: Words in the memory image

    Returns:
        The compilation result
    """
    return Assembler(AssemblerConfig(memory_size=memory_size)).assemble_string(source)


def assemble_file(
    filepath: str | Path,
    memory_size: int = DEFAULT_MEMORY_SIZE,
) -> CompilationResult:
    """
    Assemble a source file with a fresh assembler.

    Args:
        filepath: Path to assembly source file
        memory_size: Words in the memory image

    Returns:
        The compilation result
    """
    return Assembler(AssemblerConfig(memory_size=memory_size)).assemble_file(filepath)
