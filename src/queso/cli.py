"""Command-line interface for queso.

Usage:
    queso render vm.json                # Print the QEMU command line
    queso render --json vm.json | jq .  # argv as a JSON array
    queso run vm.json                   # Run QEMU
    cat vm.json | queso run -           # Description from stdin
    queso version --accelerators        # QEMU version and accelerators
"""

from __future__ import annotations

import asyncio
import json
import logging
import shlex
import sys
from typing import NoReturn

import click
from pydantic import ValidationError

from queso import __version__
from queso import constants
from queso._logging import configure_logging, get_logger
from queso.exceptions import (
    MachineSpecError,
    OptionError,
    QemuExitError,
    QemuNotFoundError,
    QuesoError,
)
from queso.models import MachineSpec, load_machine_spec, parse_machine_spec
from queso.qemu import Qemu
from queso.settings import Settings

logger = get_logger(__name__)


def format_error(title: str, message: str, suggestions: list[str] | None = None) -> str:
    """Format an error message following What → Why → Fix pattern."""
    lines = [
        click.style(f"Error: {title}", fg="red", bold=True),
        "",
        f"  {message}",
    ]

    if suggestions:
        lines.extend(["", "  Suggestions:"])
        lines.extend(f"    • {suggestion}" for suggestion in suggestions)

    return "\n".join(lines)


def fail(exit_code: int, title: str, message: str, suggestions: list[str] | None = None) -> NoReturn:
    click.echo(format_error(title, message, suggestions), err=True)
    sys.exit(exit_code)


def read_machine_spec(machine_file: str) -> MachineSpec:
    """Load a description from a path, or from stdin when the path is "-"."""
    try:
        if machine_file == "-":
            with click.open_file("-", "rb") as stream:
                return parse_machine_spec(stream.read(), source="<stdin>")
        return load_machine_spec(machine_file)
    except MachineSpecError as e:
        fail(
            constants.EXIT_USAGE_ERROR,
            "Invalid machine description",
            e.message,
            [
                "Check the file is valid JSON",
                'Each option needs a "flag"; properties are a list of {key, value} or an object',
            ],
        )


def multiline_command(spec: MachineSpec, qemu: Qemu) -> str:
    """One option per line, joined with shell line continuations."""
    lines = [shlex.quote(qemu.executable)]
    lines.extend(f"  {shlex.join(option.args())}" for option in spec.to_options())
    return " \\\n".join(lines)


def handle_qemu_error(e: QuesoError, executable: str) -> NoReturn:
    if isinstance(e, QemuNotFoundError):
        fail(
            constants.EXIT_NOT_FOUND,
            "QEMU not found",
            e.message,
            [
                "Install QEMU: apt install qemu-system / brew install qemu",
                "Set QUESO_QEMU_BIN or the description's \"executable\" to the binary path",
            ],
        )
    if isinstance(e, OptionError):
        fail(constants.EXIT_USAGE_ERROR, "Invalid option", e.message)
    fail(constants.EXIT_QUESO_ERROR, "QEMU error", f"{e.message} ({executable})")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-q", "--quiet", is_flag=True, help="Only log errors")
@click.version_option(__version__, "-V", "--version", prog_name="queso")
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """Build and run QEMU command lines from machine descriptions."""
    configure_logging(level=logging.DEBUG if verbose else None, quiet=quiet)
    try:
        ctx.obj = Settings()
    except ValidationError as exc:
        raise click.UsageError(f"Invalid QUESO_* environment settings:\n{exc}") from exc


@main.command()
@click.argument("machine_file", type=click.Path(dir_okay=False, allow_dash=True))
@click.option("--json", "json_output", is_flag=True, help="Print argv as a JSON array")
@click.option("--multiline", is_flag=True, help="Print one option per line")
@click.pass_obj
def render(settings: Settings, machine_file: str, json_output: bool, multiline: bool) -> None:
    """Print the QEMU command for MACHINE_FILE ("-" reads stdin)."""
    if json_output and multiline:
        raise click.UsageError("--json and --multiline are mutually exclusive")

    spec = read_machine_spec(machine_file)
    qemu = spec.to_qemu(settings)

    if json_output:
        click.echo(json.dumps(qemu.command(), indent=2))
    elif multiline:
        click.echo(multiline_command(spec, qemu))
    else:
        click.echo(qemu.command_line())


@main.command()
@click.argument("machine_file", type=click.Path(dir_okay=False, allow_dash=True))
@click.option("-n", "--dry-run", is_flag=True, help="Print the command instead of running it")
@click.pass_obj
def run(settings: Settings, machine_file: str, dry_run: bool) -> NoReturn:
    """Run QEMU with the options in MACHINE_FILE.

    The exit status is QEMU's own. queso errors exit with 2 (bad
    description), 127 (QEMU not found) or 125 (anything else).
    """
    spec = read_machine_spec(machine_file)
    qemu = spec.to_qemu(settings)

    if dry_run:
        click.echo(qemu.command_line())
        sys.exit(0)

    if settings.echo_command:
        click.echo(click.style(f"+ {qemu.command_line()}", dim=True), err=True)

    try:
        asyncio.run(qemu.run())
    except QemuExitError as e:
        # QEMU already reported the failure on its own stderr
        sys.exit(e.returncode)
    except QuesoError as e:
        handle_qemu_error(e, qemu.executable)

    sys.exit(0)


@main.command()
@click.option("--qemu", "qemu_bin", type=click.Path(dir_okay=False), help="Also report this QEMU binary's version")
@click.option("--accelerators", is_flag=True, help="List accelerators compiled into QEMU")
@click.pass_obj
def version(settings: Settings, qemu_bin: str | None, accelerators: bool) -> None:
    """Show queso and (optionally) QEMU versions."""
    click.echo(f"queso {__version__}")
    if qemu_bin is None and not accelerators:
        return

    qemu = Qemu(qemu_bin, settings=settings)
    try:
        click.echo(f"{qemu.executable} {asyncio.run(qemu.version())}")
        if accelerators:
            accels = asyncio.run(qemu.accelerators())
            click.echo(f"accelerators: {', '.join(accels) if accels else '(none)'}")
    except QuesoError as e:
        handle_qemu_error(e, qemu.executable)


if __name__ == "__main__":
    main()
