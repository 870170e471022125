"""
chip8-run - Headless CHIP-8 Runner
==================================

Runs a CHIP-8 program without a window and prints the framebuffer as
text when execution stops. Useful for smoke-testing ROMs and for
inspecting machine state at a breakpoint.

Usage Examples
--------------
Run 2000 steps and show the screen:
    $ chip8-run maze.ch8 --steps 2000

Deterministic random numbers:
    $ chip8-run maze.ch8 --seed 42

Stop at an address and dump registers:
    $ chip8-run pong.ch8 -b 0x2F6 --state

Answer key prompts (LD Vx, K) with keys 5 then A:
    $ chip8-run game.ch8 -k 5 -k A

Environment
-----------
CHIP8_LOAD_ADDRESS, CHIP8_SPRITE_WRAP and CHIP8_SEED provide defaults for
options not given on the command line.

Copyright (c) 2026 chip8-vm Contributors
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from chip8_vm import __version__
from chip8_vm.cli.errors import handle_cli_exception, parse_address
from chip8_vm.emulator import BreakReason, Emulator, EmulatorConfig

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def parse_key(ctx: click.Context, param: click.Parameter, values: tuple) -> list[int]:
    """Click callback: hex key digits (0-F) to key codes."""
    keys = []
    for value in values:
        try:
            key = int(value, 16)
        except ValueError:
            raise click.BadParameter(f"invalid key '{value}' (expected 0-F)")
        if not 0 <= key <= 0xF:
            raise click.BadParameter(f"invalid key '{value}' (expected 0-F)")
        keys.append(key)
    return keys


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--steps",
    type=click.IntRange(min=1),
    default=1000,
    show_default=True,
    help="Maximum number of instructions to execute",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the RND instruction",
)
@click.option(
    "--wrap/--no-wrap",
    default=None,
    help="Wrap sprites at the screen edges instead of clipping",
)
@click.option(
    "-b", "--break", "breakpoints",
    multiple=True,
    help="Stop when PC reaches ADDR (repeatable)",
)
@click.option(
    "-k", "--key", "keys",
    multiple=True,
    callback=parse_key,
    help="Hex key (0-F) to press when the program waits for input (repeatable, used in order)",
)
@click.option(
    "--state",
    is_flag=True,
    help="Print the register dump after the framebuffer",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (logs every executed instruction)",
)
@click.version_option(version=__version__, prog_name="chip8-run")
def main(
    rom: Path,
    steps: int,
    seed: Optional[int],
    wrap: Optional[bool],
    breakpoints: tuple,
    keys: list[int],
    state: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 program headless.

    ROM is the .ch8 program to run. When execution stops the framebuffer
    is printed with '#' for lit pixels and '.' for dark ones.
    """
    setup_logging(verbose)

    try:
        config = EmulatorConfig.from_env()
        if seed is not None:
            config = replace(config, seed=seed)
        if wrap is not None:
            config = replace(config, sprite_wrap=wrap)

        beeps = 0

        def on_beep() -> None:
            nonlocal beeps
            beeps += 1
            logger.info("Beep")

        emu = Emulator(config, on_beep=on_beep)
        for text in breakpoints:
            emu.add_breakpoint(parse_address(text))

        emu.load_rom(rom)

        pending_keys = list(keys)
        remaining = steps
        while True:
            event = emu.run(remaining)
            remaining -= event.steps
            if event.reason != BreakReason.WAITING_FOR_KEY or not pending_keys or remaining <= 0:
                break
            key = pending_keys.pop(0)
            logger.info(f"Pressing key {key:X}")
            emu.key_down(key)
            emu.key_up(key)

        if event.reason == BreakReason.ERROR:
            raise event.error

        click.echo("\n".join(emu.display.get_rows()))
        click.echo(f"Stopped: {event} after {steps - remaining} steps (PC=${emu.register_file.pc:03X})")
        if beeps:
            click.echo(f"Beeps: {beeps}")

        if state:
            click.echo(emu.dump_state())

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Runtime")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
