"""
Command-line interface for PDF Stitch.
"""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pdfstitch import __version__
from pdfstitch.exceptions import PdfStitchError
from pdfstitch.job import MergeJob
from pdfstitch.tips import tip_for
from pdfstitch.utils import format_file_size

console = Console()
error_console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    PDF Stitch CLI - Merge PDF files and directories into a single PDF.
    """
    pass


@cli.command(name="merge")
@click.argument('inputs', nargs=-1, type=click.Path())
@click.option(
    '--output', '-o',
    help='Place merged inputs at this pdf file path',
    type=click.Path()
)
@click.option(
    '--override', 'override',
    is_flag=True,
    help='Override the output file if it already exists'
)
@click.option(
    '--allow-repetition',
    is_flag=True,
    help='Accept the same input more than once'
)
@click.option(
    '--depth', '-d',
    metavar='N',
    help='Merge PDFs until the N-th directory layer (use * for no limit)'
)
@click.option(
    '--parent', '-p', 'parent',
    is_flag=True,
    help="Create parent directories of the output file if they don't exist"
)
@click.option(
    '--order-by',
    metavar='ALPHA|DATETIME|DEF',
    help='Order files by name, modification time or input order (default)'
)
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Enable debug logging'
)
def merge(inputs, output, override, allow_repetition, depth, parent, order_by, verbose):
    """
    Merge PDF files (or the PDFs inside directories) into one file.

    Examples:

        pdfstitch merge integrals.pdf derivatives.pdf -o math.pdf

        pdfstitch merge chapters -d 1 -o book.pdf

        pdfstitch merge scans -d '*' --order-by datetime -o scans.pdf --override
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    try:
        job = MergeJob.from_arguments(
            inputs,
            output,
            override=override,
            allow_repetition=allow_repetition,
            create_parent_dirs=parent,
            depth=depth,
            order_by=order_by,
        )
        result = job.run()
    except PdfStitchError as e:
        error_console.print(f"\n[bold red]✗ Error:[/bold red] {escape(e.message)}")
        tip = tip_for(e)
        if tip:
            error_console.print()
            error_console.print(tip)
        sys.exit(1)

    console.print(f"\n[bold green]✓ {escape(str(result))}[/bold green]")

    table = Table(title="Merged files")
    table.add_column("#", style="dim", justify="right")
    table.add_column("File", style="cyan")
    table.add_column("Size", style="green", justify="right")
    for index, path in enumerate(result.files, start=1):
        table.add_row(str(index), escape(str(path)), format_file_size(path.stat().st_size))
    console.print(table)

    console.print(f"[dim]Output file: {escape(str(result.output))}[/dim]")
    console.print(f"[dim]Elapsed: {result.seconds:.2f}s[/dim]")
    console.print()


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
