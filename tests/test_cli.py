# =============================================================================
# test_cli.py - lmsmasm Command-Line Tests
# =============================================================================
# Tests for the lmsmasm CLI tool, run through click's CliRunner.
# =============================================================================

import pytest
from click.testing import CliRunner

from lmsm_sdk.cli.lmsmasm import main
from lmsm_sdk.cli.errors import ExitCode


PROGRAM = """
        INP
        CALL double
        OUT
        HLT
double  SDUP
        SADD
        RET
"""


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "double.asm"
    path.write_text(PROGRAM)
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("LMSM_MEMORY_SIZE", raising=False)
    monkeypatch.delenv("LMSM_FULL_IMAGE", raising=False)


class TestLmsmasmCLI:
    """Tests for the lmsmasm CLI tool."""

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Assemble LMSM source code" in result.output

    def test_cli_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "lmsmasm" in result.output

    def test_default_output_file(self, source_file):
        runner = CliRunner()
        result = runner.invoke(main, [str(source_file)])
        assert result.exit_code == 0
        output = source_file.with_suffix(".lmsm")
        assert output.read_text().split() == [
            "901", "920", "406", "910", "902", "0", "922", "923", "911",
        ]

    def test_output_option(self, source_file, tmp_path):
        output = tmp_path / "out.txt"
        runner = CliRunner()
        result = runner.invoke(main, [str(source_file), "-o", str(output)])
        assert result.exit_code == 0
        assert output.exists()

    def test_listing_and_symbols(self, source_file, tmp_path):
        listing = tmp_path / "out.lst"
        symbols = tmp_path / "out.sym"
        runner = CliRunner()
        result = runner.invoke(
            main, [str(source_file), "-l", str(listing), "-s", str(symbols)]
        )
        assert result.exit_code == 0
        assert "LMSM Assembler Listing" in listing.read_text()
        assert "double 6" in symbols.read_text().splitlines()

    def test_full_image(self, source_file, tmp_path):
        output = tmp_path / "out.lmsm"
        runner = CliRunner()
        result = runner.invoke(
            main, [str(source_file), "-o", str(output), "-m", "20", "--full"]
        )
        assert result.exit_code == 0
        assert len(output.read_text().splitlines()) == 20

    def test_memory_size_from_env(self, source_file, tmp_path, monkeypatch):
        monkeypatch.setenv("LMSM_MEMORY_SIZE", "12")
        monkeypatch.setenv("LMSM_FULL_IMAGE", "1")
        output = tmp_path / "out.lmsm"
        runner = CliRunner()
        result = runner.invoke(main, [str(source_file), "-o", str(output)])
        assert result.exit_code == 0
        assert len(output.read_text().splitlines()) == 12

    def test_verbose(self, source_file):
        runner = CliRunner()
        result = runner.invoke(main, [str(source_file), "-v"])
        assert result.exit_code == 0
        assert "Assembly complete: 7 instructions, 9 words" in result.output

    def test_assembly_error(self, tmp_path):
        path = tmp_path / "bad.asm"
        path.write_text("INP\nBRA nowhere\n")
        output = tmp_path / "bad.lmsm"
        runner = CliRunner()
        result = runner.invoke(main, [str(path), "-o", str(output)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Bad Label" in result.output
        assert not output.exists()

    def test_program_too_large(self, source_file):
        runner = CliRunner()
        result = runner.invoke(main, [str(source_file), "-m", "4"])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Program exceeds memory" in result.output

    def test_missing_input(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path / "missing.asm")])
        assert result.exit_code == 2

    def test_invalid_memory_size(self, source_file):
        runner = CliRunner()
        result = runner.invoke(main, [str(source_file), "-m", "0"])
        assert result.exit_code == 2
