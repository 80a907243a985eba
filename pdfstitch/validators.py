"""Pre-flight safety checks for a merge request.

Only ``stat`` style calls are made here: nothing is created, listed or read.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Sequence

from .exceptions import (
    CouldNotReadOrCheckFilePathError,
    DepthNotSpecifiedError,
    InputIsDirectoryReferenceError,
    InputIsNotPdfFileError,
    InputIsSingleFileError,
    InputRepetitionWithoutFlagError,
    OutputAlreadyExistsError,
    OutputIsDirectoryError,
    OutputIsDirectoryReferenceError,
    OutputIsNotPdfFileError,
    ParentOutputWithoutFlagError,
)
from .types import MergeOptions
from .utils import (
    PathLike,
    ensure_iterable,
    ensure_path,
    find_repetition,
    has_directory_reference,
    has_pdf_extension,
)

LOGGER = logging.getLogger("pdfstitch.validators")


def _output_exists(output: Path) -> bool:
    try:
        os.stat(output)
    except FileNotFoundError:
        return False
    except OSError as exc:
        LOGGER.error("Failed to check output path %s: %s", output, exc)
        raise CouldNotReadOrCheckFilePathError(output) from exc
    return True


def check_merge(
    inputs: Sequence[PathLike],
    output: PathLike,
    options: MergeOptions,
) -> None:
    """Decide whether merging *inputs* into *output* is safe to run.

    The checks run in a fixed order and the first failure wins:

    1. a single literal file input
    2. ``.``/``..`` components in any input, then in the output
    3. existing input files without the ``.pdf`` extension
    4. directory inputs while no depth was given
    5. output being a directory or lacking the ``.pdf`` extension
    6. literal input repetition (unless ``allow_repetition``)
    7. missing output parent directories (unless ``create_parent_dirs``)
    8. unreadable output path, then existing output (unless ``override``)

    Raises:
        MergeCheckError: The subclass matching the failed check.
    """

    input_paths = ensure_iterable(inputs)
    output_path = ensure_path(output)
    LOGGER.debug("Checking merge of %d input(s) into %s", len(input_paths), output_path)

    if len(input_paths) == 1 and input_paths[0].is_file():
        raise InputIsSingleFileError(input_paths[0])

    # Raw arguments are inspected, Path() would drop "." components.
    for raw, path in zip(inputs, input_paths):
        if has_directory_reference(raw):
            raise InputIsDirectoryReferenceError(path)
    if has_directory_reference(output):
        raise OutputIsDirectoryReferenceError(output_path)

    for path in input_paths:
        if path.is_file() and not has_pdf_extension(path):
            raise InputIsNotPdfFileError(path)

    if not options.depth.is_specified:
        for path in input_paths:
            if path.is_dir():
                raise DepthNotSpecifiedError(path)

    if output_path.is_dir():
        raise OutputIsDirectoryError(output_path)
    if not has_pdf_extension(output_path):
        raise OutputIsNotPdfFileError(output_path)

    if not options.allow_repetition:
        repeated = find_repetition(input_paths)
        if repeated is not None:
            raise InputRepetitionWithoutFlagError(repeated)

    if not options.create_parent_dirs:
        for parent in output_path.parents:
            if not parent.exists():
                raise ParentOutputWithoutFlagError(output_path)

    if _output_exists(output_path) and not options.override:
        raise OutputAlreadyExistsError(output_path)

    LOGGER.info("Merge request passed all checks")


__all__ = ["check_merge"]
