# =============================================================================
# test_codegen.py - Code Generator Unit Tests
# =============================================================================
# Tests for the LMSM code generator.
#
# Test coverage includes:
#   - Encoding of built instruction lists into the memory image
#   - Forward and backward label resolution, first match wins
#   - Bad labels: sentinel operand, word still written, last error wins
#   - Externally built lists with unknown mnemonics
#   - Memory capacity handling
#   - Symbol table and listing output
# =============================================================================

import pytest

from lmsm_sdk.assembler.codegen import (
    CodeGenerator,
    LABEL_NOT_FOUND,
    find_label,
    find_similar_labels,
    get_listing,
    get_symbols,
)
from lmsm_sdk.assembler.parser import Instruction, build_instruction_list
from lmsm_sdk.cpu import Mnemonic
from lmsm_sdk.errors import ErrorKind, ErrorSlot


# =============================================================================
# Helper Functions
# =============================================================================

def generate(source: str, memory_size: int = 200):
    """Build and generate ``source``; return (code, errors)."""
    instructions, errors = build_instruction_list(source, "<test>")
    codegen = CodeGenerator(memory_size)
    code = codegen.new_image()
    codegen.generate(instructions, code, errors)
    return code, errors


# =============================================================================
# Basic Generation Tests
# =============================================================================

class TestGeneration:
    """Test encoding of instruction lists into memory."""

    def test_empty_list(self):
        codegen = CodeGenerator()
        code = codegen.new_image()
        errors = codegen.generate([], code)
        assert code == [0] * 200
        assert not errors

    def test_simple_program(self):
        code, errors = generate("INP\nADD 5\nOUT\nHLT")
        assert not errors
        assert code[:4] == [901, 105, 902, 0]

    def test_unwritten_words_are_zero(self):
        code, _ = generate("INP OUT")
        assert code[2:] == [0] * 198

    def test_dat_writes_raw_value(self):
        code, _ = generate("DAT -42 DAT 7")
        assert code[:2] == [-42, 7]

    def test_clamped_literal_is_encoded(self):
        code, errors = generate("DAT 1000 DAT -1500")
        assert code[:2] == [999, -999]
        assert errors.kind is ErrorKind.OUT_OF_RANGE

    def test_stack_program(self):
        code, errors = generate("SPUSHI 6 SPUSHI 7 SMUL SDUP SADD SPOP OUT HLT")
        assert not errors
        assert code[:10] == [920, 406, 920, 407, 927, 922, 923, 921, 902, 0]


# =============================================================================
# Label Resolution Tests
# =============================================================================

class TestLabels:
    """Test label resolution across the whole list."""

    def test_backward_reference(self):
        code, errors = generate("loop INP\nOUT\nBRA loop")
        assert not errors
        assert code[2] == 600

    def test_forward_reference(self):
        code, errors = generate("X BRA Y\nY HLT")
        assert not errors
        assert code[:2] == [601, 0]

    def test_forward_and_backward_agree(self):
        code_a, errors_a = generate("X BRA Y\nY HLT")
        code_b, errors_b = generate("Y BRA X\nX HLT")
        assert not errors_a and not errors_b
        assert code_a == code_b

    def test_data_label(self):
        code, errors = generate("LDA value\nOUT\nHLT\nvalue DAT 17")
        assert not errors
        assert code[:4] == [503, 902, 0, 17]

    def test_dat_with_label_operand(self):
        """DAT of a label stores the label's address."""
        code, _ = generate("HLT\nHLT\nptr DAT ptr")
        assert code[2] == 2

    def test_call_round_trip(self):
        code, errors = generate("CALL target\ntarget HLT")
        assert not errors
        assert code[:4] == [920, 403, 910, 0]

    def test_spushi_label(self):
        code, _ = generate("SPUSHI here\nhere HLT")
        assert code[:3] == [920, 402, 0]

    def test_duplicate_label_first_wins(self):
        code, errors = generate("BRA dup\ndup INP\ndup OUT")
        assert not errors
        assert code[0] == 601

    def test_find_label(self):
        instructions, _ = build_instruction_list("a INP b OUT CALL a c HLT")
        assert find_label(instructions, "a") == 0
        assert find_label(instructions, "c") == 5
        assert find_label(instructions, "zzz") == LABEL_NOT_FOUND

    def test_find_similar_labels(self):
        instructions, _ = build_instruction_list("loop INP\nLoop OUT\nend HLT")
        assert find_similar_labels(instructions, "lop") == ["loop", "Loop"]
        assert find_similar_labels(instructions, "unrelated") == []

    def test_find_similar_labels_skips_duplicates_and_caps(self):
        source = "ab INP\nab OUT\nac OUT\nad OUT\nae OUT\nHLT"
        instructions, _ = build_instruction_list(source)
        assert find_similar_labels(instructions, "ax") == ["ab", "ac", "ad"]


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestErrors:
    """Test error recording during generation."""

    def test_bad_label(self):
        code, errors = generate("BRA nowhere")
        assert errors.kind is ErrorKind.BAD_LABEL
        assert errors.diagnostic.detail == "nowhere"

    def test_bad_label_word_still_written(self):
        """The failed lookup's sentinel (-1) is used as the operand."""
        code, _ = generate("INP\nBRA nowhere\nDAT missing")
        assert code[1] == 600 + LABEL_NOT_FOUND
        assert code[2] == LABEL_NOT_FOUND

    def test_bad_label_generation_continues(self):
        code, errors = generate("BRA nowhere\nOUT\nHLT")
        assert errors.kind is ErrorKind.BAD_LABEL
        assert code[1:3] == [902, 0]

    def test_last_bad_label_wins(self):
        code, errors = generate("BRA first\nBRA second\nHLT")
        assert errors.kind is ErrorKind.BAD_LABEL
        assert errors.diagnostic.detail == "second"

    def test_generation_overwrites_parse_error(self):
        code, errors = generate("DAT 5000\nBRA nowhere")
        assert errors.kind is ErrorKind.BAD_LABEL

    def test_partial_list_is_generated(self):
        code, errors = generate("INP\nOUT\nFROB")
        assert errors.kind is ErrorKind.UNKNOWN_INSTRUCTION
        assert code[:2] == [901, 902]

    def test_unknown_mnemonic_in_external_list(self):
        instructions = [
            Instruction(Mnemonic.INP, offset=0),
            Instruction("FOO", offset=1),
            Instruction(Mnemonic.OUT, offset=2),
        ]
        codegen = CodeGenerator()
        code = codegen.new_image()
        errors = codegen.generate(instructions, code)
        assert errors.kind is ErrorKind.UNKNOWN_INSTRUCTION
        assert code[:3] == [901, 0, 902]

    def test_uses_given_error_slot(self):
        errors = ErrorSlot()
        errors.set_if_absent(ErrorKind.OUT_OF_RANGE)
        instructions, _ = build_instruction_list("BRA nowhere")
        codegen = CodeGenerator()
        result = codegen.generate(instructions, codegen.new_image(), errors)
        assert result is errors
        assert errors.kind is ErrorKind.BAD_LABEL


# =============================================================================
# Capacity Tests
# =============================================================================

class TestCapacity:
    """Test handling of programs larger than memory."""

    def test_exact_fit(self):
        code, errors = generate("INP OUT CALL x x HLT", memory_size=6)
        assert not errors
        assert code == [901, 902, 920, 405, 910, 0]

    def test_overflow_records_error(self):
        code, errors = generate("INP OUT HLT", memory_size=2)
        assert errors.kind is ErrorKind.CAPACITY_EXCEEDED
        assert code == [901, 902]

    def test_multi_word_partially_fits(self):
        code, errors = generate("INP CALL x x HLT", memory_size=3)
        assert errors.kind is ErrorKind.CAPACITY_EXCEEDED
        assert code == [901, 920, 404]

    def test_invalid_memory_size(self):
        with pytest.raises(ValueError):
            CodeGenerator(0)


# =============================================================================
# Output Tests
# =============================================================================

class TestOutput:
    """Test symbol table and listing output."""

    def test_symbols(self):
        instructions, _ = build_instruction_list("start CALL f\nHLT\nf RET\nstart DAT 1")
        symbols = get_symbols(instructions)
        assert symbols == {"start": 0, "f": 4}

    def test_listing(self):
        instructions, _ = build_instruction_list("start CALL f\nHLT\nf RET", "<test>")
        codegen = CodeGenerator()
        code = codegen.new_image()
        codegen.generate(instructions, code)
        listing = get_listing(instructions, code)
        assert "LMSM Assembler Listing" in listing
        assert "0920 0404 0910" in listing
        assert "0004  0911" in listing
        assert "Symbol Table" in listing
        assert "f                    = 0004" in listing
