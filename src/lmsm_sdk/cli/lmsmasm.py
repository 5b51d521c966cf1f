"""
lmsmasm - LMSM Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the LMSM assembler.

Usage Examples
--------------
Basic assembly:
    $ lmsmasm countdown.asm

With output file:
    $ lmsmasm countdown.asm -o countdown.lmsm

Generate all output files:
    $ lmsmasm countdown.asm -o countdown.lmsm -l countdown.lst -s countdown.sym

Whole memory image for a smaller machine:
    $ lmsmasm -m 100 --full countdown.asm

Verbose mode:
    $ lmsmasm -v countdown.asm
"""

import logging
from pathlib import Path
from typing import Optional

import click

from lmsm_sdk import __version__
from lmsm_sdk.assembler import Assembler
from lmsm_sdk.cli.errors import handle_cli_exception
from lmsm_sdk.config import AssemblerConfig


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output code file (default: input.lmsm)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-m", "--memory-size",
    type=click.IntRange(min=1),
    default=None,
    help="Words of memory in the image. Default: 200, or $LMSM_MEMORY_SIZE.",
)
@click.option(
    "--full/--program-only",
    default=None,
    help="Write the whole memory image instead of just the program words.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="lmsmasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    memory_size: Optional[int],
    full: Optional[bool],
    verbose: bool,
) -> None:
    """
    Assemble LMSM source code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    The output file holds one signed decimal word per line, starting at
    address 0.

    \b
    Examples:
        lmsmasm prog.asm               # Outputs prog.lmsm
        lmsmasm prog.asm -o out.lmsm   # Specify output file
        lmsmasm prog.asm -l prog.lst   # Also write a listing
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    output_file = output if output is not None else input_file.with_suffix(".lmsm")

    try:
        config = AssemblerConfig.from_env().with_overrides(
            memory_size=memory_size,
            full_image=full,
        )
        asm = Assembler(config=config, verbose=verbose)

        if verbose:
            click.echo(f"Memory size: {config.memory_size} words")
            click.echo(f"Assembling {input_file}...")

        result = asm.assemble_file(input_file)
        result.raise_for_error()

        asm.write_code(result, output_file)
        if verbose:
            count = len(result.words(full=config.full_image))
            click.echo(f"Wrote {count} words to {output_file}")

        if listing:
            asm.write_listing(result, listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(result, symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            click.echo(
                f"Assembly complete: {len(result.instructions)} instructions, "
                f"{result.program_size} words"
            )
            click.echo(f"Defined {len(result.symbols())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
