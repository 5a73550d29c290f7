"""
c8run - Headless CHIP-8 Runner
==============================

Loads a CHIP-8 program image, runs it for a fixed number of cycles with no
real-time pacing, and prints the resulting screen. Useful for smoke-testing
program images and for capturing screenshots in scripts.

Usage Examples
--------------
Run for the default 1000 cycles:
    $ c8run ibm_logo.ch8

Run longer and dump registers:
    $ c8run maze.ch8 --cycles 5000 --registers

Hold keypad keys down for the whole run:
    $ c8run game.ch8 -k 5 -k A

Save a PNG screenshot (requires Pillow):
    $ c8run ibm_logo.ch8 --png logo.png --scale 10

Compatibility settings can also come from the environment
(CHIP8_STRICT, CHIP8_SPRITE_WRAP, CHIP8_INDEX_WRAP, CHIP8_SEED).

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import dataclasses
import logging
from pathlib import Path
from typing import Optional

import click

from chip8_vm import __version__
from chip8_vm.cli.errors import ExitCode, handle_cli_exception
from chip8_vm.emulator import Emulator, InterpreterConfig, KeypadLayout, StopReason

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def format_registers(emu: Emulator) -> str:
    """Format the CPU registers as a short multi-line dump."""
    cpu = emu.cpu
    regs = " ".join(f"V{i:X}={value:02X}" for i, value in enumerate(cpu.v))
    stack = " ".join(f"${addr:03X}" for addr in cpu.stack) or "-"
    return "\n".join([
        f"PC=${cpu.pc:03X} I=${cpu.i:03X} SP={cpu.sp} "
        f"DT={cpu.delay_timer:02X} ST={cpu.sound_timer:02X} MODE={cpu.mode.name}",
        regs,
        f"Stack: {stack}",
    ])


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--cycles",
    type=click.IntRange(min=0),
    default=1000,
    help="Number of cycles to execute (default: 1000)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Stop with an error on unknown opcodes instead of skipping them",
)
@click.option(
    "--sprite-wrap",
    is_flag=True,
    help="Wrap sprites around the screen edges instead of clipping",
)
@click.option(
    "--index-wrap",
    is_flag=True,
    help="Mask I to 12 bits after FX1E",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the random number instruction (default: random)",
)
@click.option(
    "-k", "--key",
    "keys",
    multiple=True,
    help="Key to hold down for the whole run (can be repeated)",
)
@click.option(
    "--qwerty",
    is_flag=True,
    help="Interpret --key names as QWERTY host keys (1234/QWER/ASDF/ZXCV)",
)
@click.option(
    "--png",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Save the final screen as a PNG image (requires Pillow)",
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=8,
    help="Pixel scale for --png (default: 8)",
)
@click.option(
    "-r", "--registers",
    is_flag=True,
    help="Print CPU registers after the run",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Do not print the screen",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c8run")
def main(
    input_file: Path,
    cycles: int,
    strict: bool,
    sprite_wrap: bool,
    index_wrap: bool,
    seed: Optional[int],
    keys: tuple[str, ...],
    qwerty: bool,
    png: Optional[Path],
    scale: int,
    registers: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 program headless and print the final screen.

    INPUT_FILE is a raw CHIP-8 program image, loaded at $200.

    \b
    Examples:
        c8run ibm_logo.ch8                 # 1000 cycles, print screen
        c8run maze.ch8 -n 5000 -r          # longer run, dump registers
        c8run game.ch8 --qwerty -k W       # hold keypad 5
        c8run logo.ch8 --png logo.png      # save screenshot
    """
    setup_logging(verbose)

    # Flags given on the command line switch settings on; anything not
    # given keeps its value from the environment
    config = InterpreterConfig.from_env()
    overrides = {
        name: True
        for name, enabled in (
            ("strict", strict),
            ("sprite_wrap", sprite_wrap),
            ("index_wrap", index_wrap),
        )
        if enabled
    }
    if seed is not None:
        overrides["seed"] = seed
    config = dataclasses.replace(config, **overrides)
    layout = KeypadLayout.QWERTY if qwerty else KeypadLayout.HEX

    try:
        emu = Emulator(config, layout=layout)
        logger.debug(f"Config: {config}")
        emu.load_rom(input_file)

        for key in keys:
            try:
                emu.press_key(key)
            except ValueError as e:
                raise click.BadParameter(str(e), param_hint="'--key'")

        event = emu.run(cycles)
    except Exception as e:
        handle_cli_exception(e, verbose, "Load")

    if not quiet:
        click.echo(emu.display_text)

    if registers:
        click.echo(format_registers(emu))

    if verbose:
        click.echo(f"Stopped: {event} after {emu.total_cycles} cycles", err=True)
        if emu.cpu.unknown_opcode_count:
            click.echo(f"Unknown opcodes skipped: {emu.cpu.unknown_opcode_count}", err=True)

    if png:
        image = emu.display.render_image(scale=scale)
        if image is None:
            click.echo("Error: --png requires Pillow (pip install chip8-vm[image])", err=True)
            raise SystemExit(ExitCode.INVALID_ARGS)
        try:
            png.write_bytes(image)
        except OSError as e:
            handle_cli_exception(e, verbose)
        if verbose:
            click.echo(f"Screenshot written to: {png}", err=True)

    if event.reason is StopReason.ERROR:
        handle_cli_exception(event.error, verbose, "Runtime")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
