"""Usage tips shown by the CLI after an error.

Every tip is rich markup. :func:`tip_for` picks the tip matching an error.
"""

from __future__ import annotations

from typing import Dict, Optional, Type

from .exceptions import (
    CatalogIsNoneError,
    CouldNotLoadInputError,
    CouldNotReadEntryError,
    CouldNotReadOrCheckFilePathError,
    CouldNotSaveTheOutputError,
    DepthNotSpecifiedError,
    EntryDoesNotExistError,
    ExpandedInputRepetitionError,
    InputIsDirectoryReferenceError,
    InputIsEmptyError,
    InputIsNotPdfFileError,
    InputIsSingleFileError,
    InputRepetitionWithoutFlagError,
    OutputAlreadyExistsError,
    OutputIsDirectoryError,
    OutputIsDirectoryReferenceError,
    OutputIsEmptyError,
    OutputIsNotPdfFileError,
    ParentOutputWithoutFlagError,
    PdfStitchError,
    RootPageNotFoundError,
    UnparseableDepthError,
    UnparseableOrderModeError,
)

INPUT_OUTPUT = (
    "Input should be at least 1 directory path or 2 pdf file paths.\n"
    "Output must be a single pdf file path.\n"
    "\n"
    "[green]ie[/green]: `[cyan]pdfstitch merge integrals.pdf derivatives.pdf -o math.pdf[/cyan]`"
)

DEPTH_VALUE = (
    "The `[green]--depth[/green]` flag must always be followed by a positive number\n"
    "or the infinity repr (`[green]*[/green]`)."
)

DEPTH_FLAG = (
    "This occurs when trying to access a directory\n"
    "without specifying the `[green]--depth[/green]` flag.\n"
    "\n"
    "The `[green]depth[/green]` must always be greater than [cyan]0[/cyan].\n"
    "Files are collected until the [cyan]N[/cyan]th directory layer."
)

ORDER_BY = (
    "The `[green]--order-by[/green]` flag accepts `[cyan]alpha[/cyan]`, "
    "`[cyan]datetime[/cyan]` or `[cyan]def[/cyan]` (input order)."
)

DIRECTORY_REFERENCES = (
    "Directory references [red]aren't allowed[/red] (this avoids path\n"
    "exploits and endless directory traversal).\n"
    "\n"
    "Avoid '[cyan].[/cyan]' for the current path, use the dir/file name instead.\n"
    "\n"
    "[green]ie[/green]: to merge all PDFs of the current directory, move them\n"
    "    to a new directory and use that directory as [cyan]input[/cyan]."
)

REPETITION_FLAG = (
    "This prevents duplicated content within the output\n"
    "file (works both for [cyan]input[/cyan] and [cyan]collected[/cyan] paths).\n"
    "\n"
    "If you're sure about what you're doing, use the\n"
    "`[green]--allow-repetition[/green]` flag."
)

OVERRIDE_FLAG = (
    "This prevents accidentally overriding a pdf file.\n"
    "\n"
    "If you're sure about what you're doing, use the\n"
    "`[green]--override[/green]` flag."
)

PARENT_FLAG = (
    "The directory of the output file doesn't exist.\n"
    "\n"
    "If you're sure about what you're doing, use\n"
    "the `[green]--parent[/green]` flag."
)

NON_READABLE_PATH = (
    "This occurs when a file/dir path can't be read, usually\n"
    "for [red]timeout[/red] or [red]privileges[/red] reasons."
)

COULD_NOT_HANDLE_PDF = (
    "This occurs when PDF file handling fails (within `[cyan]pypdf[/cyan]`).\n"
    "\n"
    "The reason can be [red]bad formatting[/red], [red]not enough[/red] privileges,\n"
    "an [red]empty[/red] or encrypted file, etc."
)

COULD_NOT_SAVE_PDF = (
    "This usually happens in environments with [red]not enough[/red]\n"
    "privileges or without free disk space."
)

_TIPS: Dict[Type[PdfStitchError], str] = {
    InputIsEmptyError: INPUT_OUTPUT,
    OutputIsEmptyError: INPUT_OUTPUT,
    InputIsSingleFileError: INPUT_OUTPUT,
    InputIsNotPdfFileError: INPUT_OUTPUT,
    OutputIsDirectoryError: INPUT_OUTPUT,
    OutputIsNotPdfFileError: INPUT_OUTPUT,
    UnparseableDepthError: DEPTH_VALUE,
    DepthNotSpecifiedError: DEPTH_FLAG,
    UnparseableOrderModeError: ORDER_BY,
    InputIsDirectoryReferenceError: DIRECTORY_REFERENCES,
    OutputIsDirectoryReferenceError: DIRECTORY_REFERENCES,
    InputRepetitionWithoutFlagError: REPETITION_FLAG,
    ExpandedInputRepetitionError: REPETITION_FLAG,
    OutputAlreadyExistsError: OVERRIDE_FLAG,
    ParentOutputWithoutFlagError: PARENT_FLAG,
    CouldNotReadOrCheckFilePathError: NON_READABLE_PATH,
    CouldNotReadEntryError: NON_READABLE_PATH,
    EntryDoesNotExistError: NON_READABLE_PATH,
    CouldNotLoadInputError: COULD_NOT_HANDLE_PDF,
    RootPageNotFoundError: COULD_NOT_HANDLE_PDF,
    CatalogIsNoneError: COULD_NOT_HANDLE_PDF,
    CouldNotSaveTheOutputError: COULD_NOT_SAVE_PDF,
}


def tip_for(error: PdfStitchError) -> Optional[str]:
    """Return the tip for *error*, or ``None`` when there is none."""

    for cls in type(error).__mro__:
        tip = _TIPS.get(cls)
        if tip is not None:
            return tip
    return None


__all__ = ["tip_for"]
