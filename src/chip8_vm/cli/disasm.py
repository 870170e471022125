"""
chip8-disasm - CHIP-8 Disassembler Command-Line Interface
=========================================================

This module implements the command-line interface for the CHIP-8
disassembler.

Usage Examples
--------------
Disassemble a program (loaded at $200):
    $ chip8-disasm pong.ch8

With a different base address:
    $ chip8-disasm code.bin --address 0x600

Limit number of instructions:
    $ chip8-disasm pong.ch8 --count 20

Output to file:
    $ chip8-disasm pong.ch8 -o pong.asm

Hex dump with disassembly:
    $ chip8-disasm pong.ch8 --hex

Copyright (c) 2026 chip8-vm Contributors
"""

from pathlib import Path
from typing import Optional

import click

from chip8_vm import __version__
from chip8_vm.cli.errors import handle_cli_exception, parse_address
from chip8_vm.disassembler import Chip8Disassembler


def format_hex_dump(data: bytes, base_address: int) -> list[str]:
    """Hex dump as comment lines, 16 bytes per line."""
    lines = ["; Hex dump:", "; " + "-" * 60]
    for i in range(0, len(data), 16):
        chunk = data[i:i + 16]
        hex_str = " ".join(f"{b:02X}" for b in chunk)
        lines.append(f"; ${base_address + i:03X}: {hex_str}")
    lines.append("; " + "-" * 60)
    lines.append("")
    return lines


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
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--address",
    type=str,
    default="0x200",
    help="Base address for disassembly (hex with 0x/$ prefix or decimal). Default: 0x200",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "--hex",
    "show_hex",
    is_flag=True,
    help="Include hex dump before disassembly",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Omit raw bytes from output (show only address and mnemonic)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chip8-disasm")
def main(
    input_file: Path,
    output: Optional[Path],
    address: str,
    count: Optional[int],
    show_hex: bool,
    no_bytes: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a CHIP-8 program.

    INPUT_FILE is the program image to disassemble.

    Examples:

        # Disassemble a ROM
        chip8-disasm pong.ch8

        # First 20 instructions to a file
        chip8-disasm pong.ch8 --count 20 -o pong.asm
    """
    try:
        base_address = parse_address(address)

        data = input_file.read_bytes()
        if len(data) == 0:
            raise click.BadParameter(f"{input_file} is empty", param_hint="INPUT_FILE")

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            click.echo(f"Base address: ${base_address:03X}", err=True)

        output_lines = [
            f"; Disassembly of {input_file.name}",
            f"; Size: {len(data)} bytes",
            f"; Base address: ${base_address:03X}",
            "",
        ]

        if show_hex:
            output_lines.extend(format_hex_dump(data, base_address))

        disasm = Chip8Disassembler()
        instructions = disasm.disassemble(data, start_address=base_address, count=count)

        for instr in instructions:
            if no_bytes:
                line = f"${instr.address:03X}: {instr.text}"
                if instr.comment:
                    line += f"  ; {instr.comment}"
                output_lines.append(line)
            else:
                output_lines.append(str(instr))

        result = "\n".join(output_lines) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            click.echo(f"Instructions disassembled: {len(instructions)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Disassembly")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
