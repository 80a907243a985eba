"""
Custom exceptions for PDF Stitch.

Errors are grouped in three families, one per pipeline stage:

* :class:`MergeBuildError` - the raw arguments have an invalid shape.
* :class:`MergeCheckError` - the pre-flight safety checks rejected the request.
* :class:`MergeRunError` - collecting, merging or saving failed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class PdfStitchError(Exception):
    """Base exception for all PDF Stitch errors."""

    def __init__(
        self,
        message: str = "",
        *,
        path: Optional[Union[str, Path]] = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def default_message(self) -> str:
        if self.path is not None:
            return f"An unknown PDF stitch error occurred (`{self.path}`)."
        return "An unknown PDF stitch error occurred."


# ----------------------------------------------------------------------
# Build-time errors
# ----------------------------------------------------------------------
class MergeBuildError(PdfStitchError):
    """Raised when the merge arguments cannot be turned into a job."""


class InputIsEmptyError(MergeBuildError):
    @property
    def default_message(self) -> str:
        return "input path(s) wasn't provided"


class OutputIsEmptyError(MergeBuildError):
    @property
    def default_message(self) -> str:
        return "output path wasn't provided"


class UnparseableDepthError(MergeBuildError):
    """Raised when the depth token is neither ``*`` nor a positive integer."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__()

    @property
    def default_message(self) -> str:
        return f"couldn't parse the `depth` value (`{self.value}`)"


class UnparseableOrderModeError(MergeBuildError):
    """Raised when the order mode token is unknown."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__()

    @property
    def default_message(self) -> str:
        return f"couldn't parse the `order_by` value (`{self.value}`)"


# ----------------------------------------------------------------------
# Check-time errors
# ----------------------------------------------------------------------
class MergeCheckError(PdfStitchError):
    """Raised when the pre-flight checks reject a merge request."""

    def __init__(self, path: Union[str, Path], message: str = "") -> None:
        super().__init__(message, path=path)


class InputIsSingleFileError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"single file input isn't allowed (`{self.path}`)"


class InputIsDirectoryReferenceError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"directory reference isn't allowed (`{self.path}`)"


class OutputIsDirectoryReferenceError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"directory reference isn't allowed (`{self.path}`)"


class InputIsNotPdfFileError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"non pdf file argument (`{self.path}`)"


class DepthNotSpecifiedError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"directory input requires the `depth` value (`{self.path}`)"


class OutputIsDirectoryError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"output as directory isn't allowed (`{self.path}`)"


class OutputIsNotPdfFileError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"non pdf file argument (`{self.path}`)"


class InputRepetitionWithoutFlagError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"you passed the same input more than once (`{self.path}`)"


class ParentOutputWithoutFlagError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"output contains parent dir (`{self.path}`)"


class CouldNotReadOrCheckFilePathError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"couldn't read/check file path (`{self.path}`)"


class OutputAlreadyExistsError(MergeCheckError):
    @property
    def default_message(self) -> str:
        return f"output already exists (`{self.path}`)"


# ----------------------------------------------------------------------
# Run-time errors
# ----------------------------------------------------------------------
class MergeRunError(PdfStitchError):
    """Raised when collecting, merging or saving fails."""


class EntryDoesNotExistError(MergeRunError):
    @property
    def default_message(self) -> str:
        return f"entry doesn't exist (`{self.path}`)"


class CouldNotReadEntryError(MergeRunError):
    @property
    def default_message(self) -> str:
        return f"couldn't read entry (`{self.path}`)"


class ExpandedInputRepetitionError(MergeRunError):
    @property
    def default_message(self) -> str:
        return f"the same file was collected more than once (`{self.path}`)"


class CouldNotLoadInputError(MergeRunError):
    @property
    def default_message(self) -> str:
        return f"couldn't load pdf file (`{self.path}`)"


class RootPageNotFoundError(MergeRunError):
    @property
    def default_message(self) -> str:
        return "none of the inputs has a page tree root"


class CatalogIsNoneError(MergeRunError):
    @property
    def default_message(self) -> str:
        return "none of the inputs has a document catalog"


class CouldNotSaveTheOutputError(MergeRunError):
    @property
    def default_message(self) -> str:
        return f"couldn't save the output file (`{self.path}`)"


__all__ = [
    "PdfStitchError",
    "MergeBuildError",
    "InputIsEmptyError",
    "OutputIsEmptyError",
    "UnparseableDepthError",
    "UnparseableOrderModeError",
    "MergeCheckError",
    "InputIsSingleFileError",
    "InputIsDirectoryReferenceError",
    "OutputIsDirectoryReferenceError",
    "InputIsNotPdfFileError",
    "DepthNotSpecifiedError",
    "OutputIsDirectoryError",
    "OutputIsNotPdfFileError",
    "InputRepetitionWithoutFlagError",
    "ParentOutputWithoutFlagError",
    "CouldNotReadOrCheckFilePathError",
    "OutputAlreadyExistsError",
    "MergeRunError",
    "EntryDoesNotExistError",
    "CouldNotReadEntryError",
    "ExpandedInputRepetitionError",
    "CouldNotLoadInputError",
    "RootPageNotFoundError",
    "CatalogIsNoneError",
    "CouldNotSaveTheOutputError",
]
