"""abcdecoder CLI entry point."""

import logging
import sys

import click

from abcdecoder import __version__
from abcdecoder.decoder import decode_file
from abcdecoder.errors import AbcError
from abcdecoder.models import Document, Tune
from abcdecoder.serializer import dumps


def _decode_or_exit(abc_file: str, check_magic: bool) -> Document:
    """Decode ``abc_file``, printing the error and exiting with status 1 on failure."""
    try:
        return decode_file(abc_file, check_magic=check_magic)
    except AbcError as exc:
        click.echo(f"  ERROR: Could not decode '{abc_file}': {exc}", err=True)
        sys.exit(1)
    except OSError as exc:
        click.echo(f"  ERROR: Could not read '{abc_file}': {exc}", err=True)
        sys.exit(1)


def _count_units(tune: Tune) -> int:
    return sum(len(group.units) for measure in tune.measures for group in measure.note_groups)


def _one_line(text: str) -> str:
    """Collapse a multi-line title into one display line."""
    return " / ".join(part.strip() for part in text.splitlines())


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="abcdecoder")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Also log skipped text and ignored fields.",
)
def main(verbose: bool) -> None:
    """abcdecoder: decode ABC music notation into structured data."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── decode subcommand ──────────────────────────────────────────────────────────

@main.command("decode")
@click.argument("abc_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination JSON file path. Defaults to standard output.",
)
@click.option(
    "--indent",
    type=click.IntRange(0, 8),
    default=None,
    help="Pretty-print the JSON with this many spaces per level.",
)
@click.option(
    "--no-magic",
    is_flag=True,
    default=False,
    help="Do not require the '%abc-<version>' first line (for tune fragments).",
)
def decode_command(abc_file: str, output: str | None, indent: int | None, no_magic: bool) -> None:
    """
    Decode an ABC file and write the result as JSON.

    ABC_FILE is the path to an existing .abc file.

    \b
    Examples:
      abcdecoder decode tunes.abc
      abcdecoder decode tunes.abc -o tunes.json --indent 2
      abcdecoder decode fragment.abc --no-magic
    """
    document = _decode_or_exit(abc_file, check_magic=not no_magic)
    content = dumps(document, indent=indent)

    if output is None:
        click.echo(content)
        return

    try:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(content)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Wrote {len(document.tunes)} tune(s) to '{output}'.")


# ── info subcommand ────────────────────────────────────────────────────────────

@main.command("info")
@click.argument("abc_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--no-magic",
    is_flag=True,
    default=False,
    help="Do not require the '%abc-<version>' first line (for tune fragments).",
)
def info_command(abc_file: str, no_magic: bool) -> None:
    """
    Print a one-line summary of every tune in an ABC file.

    \b
    Example:
      abcdecoder info tunes.abc
    """
    document = _decode_or_exit(abc_file, check_magic=not no_magic)

    click.echo(f"abcdecoder v{__version__}")
    click.echo(f"  File    : {abc_file}")
    if document.version is not None:
        click.echo(f"  Version : {document.version}")
    click.echo(f"  Tunes   : {len(document.tunes)}")
    click.echo()

    for tune in document.tunes:
        click.echo(
            f"  X:{tune.reference_number:<5} {_one_line(tune.title):<32} "
            f"K:{tune.key:<8} {len(tune.measures)} measure(s), {_count_units(tune)} unit(s)"
        )
