"""
LMSM SDK Error Model
====================

This module defines both halves of the SDK's error handling:

1. **Error values** recorded during assembly (``ErrorKind``, ``Diagnostic``,
   ``ErrorSlot``). The assembler never raises while assembling; it records
   at most one diagnostic and keeps going where the rules allow it.

2. **Exceptions** for callers that prefer to fail fast. A recorded
   diagnostic can be turned into the matching exception with ``error_for``
   (``CompilationResult.raise_for_error`` does exactly that).

Exception Hierarchy
-------------------
LmsmError (base)
└── AssemblerError (assembler-related)
    ├── UnknownInstructionError - token is not a recognized mnemonic
    ├── ArgumentRequiredError - operand missing at end of source
    ├── BadLabelError - reference to an undefined label
    ├── OutOfRangeError - numeric literal outside -999..999
    └── CapacityError - program does not fit in memory

Overwrite Policy
----------------
The two assembly phases update the error slot differently:

- the instruction list builder uses ``ErrorSlot.set_if_absent``, so the
  *first* failure while parsing is the one reported. An out-of-range
  literal does not stop parsing, so a later failure that does stop it
  takes its place;
- the code generator uses ``ErrorSlot.set_unconditional``, so the *most
  recent* failure while generating is the one reported.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class LmsmError(Exception):
    """
    Base exception for all LMSM SDK errors.

    Callers can catch all SDK-related errors with a single except clause:

        try:
            result.raise_for_error()
        except LmsmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Recorded Error Values
# =============================================================================

class ErrorKind(Enum):
    """
    The kinds of error the assembler can record.

    The value of each member is the message reported to the user.
    """
    UNKNOWN_INSTRUCTION = "Unknown instruction"
    ARG_REQUIRED = "Argument Required"
    BAD_LABEL = "Bad Label"
    OUT_OF_RANGE = "Number is out of range"
    CAPACITY_EXCEEDED = "Program exceeds memory"

    @property
    def message(self) -> str:
        return self.value


@dataclass(frozen=True)
class Diagnostic:
    """
    One recorded assembly error.

    Attributes:
        kind: What went wrong
        location: Where the offending token is (None at end of input)
        detail: The offending token or extra context, if any
    """
    kind: ErrorKind
    location: Optional[SourceLocation] = None
    detail: Optional[str] = None

    def __str__(self) -> str:
        text = self.kind.message
        if self.detail:
            text = f"{text}: '{self.detail}'"
        if self.location:
            text = f"{self.location}: {text}"
        return text


class ErrorSlot:
    """
    Holds at most one recorded diagnostic.

    The slot is shared by both assembly phases. Each phase uses its own
    update method so the difference in overwrite policy stays visible at
    every call site.
    """

    def __init__(self) -> None:
        self._diagnostic: Optional[Diagnostic] = None

    def set_if_absent(
        self,
        kind: ErrorKind,
        location: Optional[SourceLocation] = None,
        detail: Optional[str] = None,
        replaces: tuple[ErrorKind, ...] = (),
    ) -> bool:
        """
        Record an error unless one is already recorded.

        Args:
            replaces: Kinds that this error may overwrite

        Returns:
            True if the error was recorded
        """
        if self._diagnostic is not None and self._diagnostic.kind not in replaces:
            return False
        self._diagnostic = Diagnostic(kind, location, detail)
        return True

    def set_unconditional(
        self,
        kind: ErrorKind,
        location: Optional[SourceLocation] = None,
        detail: Optional[str] = None,
    ) -> None:
        """Record an error, replacing whatever was recorded before."""
        self._diagnostic = Diagnostic(kind, location, detail)

    @property
    def diagnostic(self) -> Optional[Diagnostic]:
        return self._diagnostic

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self._diagnostic.kind if self._diagnostic else None

    def __bool__(self) -> bool:
        return self._diagnostic is not None

    def __repr__(self) -> str:
        return f"ErrorSlot({self._diagnostic!r})"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(LmsmError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.asm:3:5: error: Bad Label: 'lop'
                BRA lop
                    ^
            hint: did you mean 'loop'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class UnknownInstructionError(AssemblerError):
    """
    A token was required to be a mnemonic and was not one.

    Labels carry no sigil, so a misspelt mnemonic is first taken to be a
    label and the error is reported on the token that follows it.
    """
    kind = ErrorKind.UNKNOWN_INSTRUCTION


class ArgumentRequiredError(AssemblerError):
    """An operand-taking mnemonic was the last token in the source."""
    kind = ErrorKind.ARG_REQUIRED


class BadLabelError(AssemblerError):
    """
    Reference to a label that no instruction defines.

    Suggests similarly-named labels to help catch typos.
    """
    kind = ErrorKind.BAD_LABEL

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.similar_labels = similar_labels or []

        if not hint and self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(message, location=location, hint=hint, source_line=source_line)


class OutOfRangeError(AssemblerError):
    """A numeric literal fell outside -999..999 and was clamped."""
    kind = ErrorKind.OUT_OF_RANGE


class CapacityError(AssemblerError):
    """The assembled program needs more words than memory provides."""
    kind = ErrorKind.CAPACITY_EXCEEDED


_EXCEPTION_TYPES: dict[ErrorKind, type[AssemblerError]] = {
    ErrorKind.UNKNOWN_INSTRUCTION: UnknownInstructionError,
    ErrorKind.ARG_REQUIRED: ArgumentRequiredError,
    ErrorKind.BAD_LABEL: BadLabelError,
    ErrorKind.OUT_OF_RANGE: OutOfRangeError,
    ErrorKind.CAPACITY_EXCEEDED: CapacityError,
}


def error_for(
    diagnostic: Diagnostic,
    source_line: Optional[str] = None,
    hint: Optional[str] = None,
    similar_labels: Optional[list[str]] = None,
) -> AssemblerError:
    """
    Build the exception that corresponds to a recorded diagnostic.

    Args:
        diagnostic: The recorded error
        source_line: Source text of the line the error points at
        hint: Optional hint text
        similar_labels: Candidate labels for BadLabelError suggestions

    Returns:
        An AssemblerError subclass instance (not raised)
    """
    message = diagnostic.kind.message
    if diagnostic.detail:
        message = f"{message}: '{diagnostic.detail}'"

    error_type = _EXCEPTION_TYPES[diagnostic.kind]
    if error_type is BadLabelError:
        return BadLabelError(
            message,
            location=diagnostic.location,
            hint=hint,
            source_line=source_line,
            similar_labels=similar_labels,
        )
    return error_type(
        message,
        location=diagnostic.location,
        hint=hint,
        source_line=source_line,
    )
