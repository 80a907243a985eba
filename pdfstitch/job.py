"""Merge job: argument building, pre-flight checks and the run pipeline."""

from __future__ import annotations

import logging
import time
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .backends import PDFBackend, PypdfBackend
from .collector import collect_pdf_paths
from .depth import Depth
from .exceptions import (
    CouldNotSaveTheOutputError,
    ExpandedInputRepetitionError,
    InputIsEmptyError,
    OutputIsEmptyError,
    PdfStitchError,
)
from .finalizer import finalize
from .merger import DocumentMerger
from .ordering import OrderMode
from .types import MergeOptions, RunSuccess
from .utils import PathLike, ensure_iterable, ensure_path
from .validators import check_merge

LOGGER = logging.getLogger("pdfstitch.job")


class JobState(str, Enum):
    """Stages a merge run goes through. Terminal states are SAVED and FAILED."""

    PENDING = "pending"
    VALIDATING = "validating"
    COLLECTING = "collecting"
    MERGING = "merging"
    FINALIZING = "finalizing"
    SAVED = "saved"
    FAILED = "failed"


def _find_expanded_repetition(paths: Sequence[Path]) -> Optional[Path]:
    seen: set[Path] = set()
    for path in paths:
        key = path.resolve()
        if key in seen:
            return path
        seen.add(key)
    return None


class MergeJob:
    """A single merge of several inputs into one output file.

    Instances are built from already trimmed paths; use
    :meth:`from_arguments` to build one from raw CLI strings. A job runs at
    most once: :meth:`run` walks through :class:`JobState` and never goes
    back to an earlier state.

    Attributes:
        inputs: Files and directories, in the order they were given
        output: Destination file
        options: Policy flags for this run
        state: Current stage of the run
        files: Files collected from *inputs*, set once collection finished
    """

    def __init__(
        self,
        inputs: Iterable[PathLike],
        output: PathLike,
        options: Optional[MergeOptions] = None,
        backend: Optional[PDFBackend] = None,
    ) -> None:
        self.raw_inputs: List[PathLike] = list(inputs)
        self.raw_output = output
        self.inputs = ensure_iterable(self.raw_inputs)
        self.output = ensure_path(output)
        self.options = options or MergeOptions()
        self.backend: PDFBackend = backend or PypdfBackend()
        self.state = JobState.PENDING
        self.files: List[Path] = []

    @classmethod
    def from_arguments(
        cls,
        inputs: Optional[Sequence[str]],
        output: Optional[str],
        *,
        override: bool = False,
        allow_repetition: bool = False,
        create_parent_dirs: bool = False,
        depth: Optional[str] = None,
        order_by: Optional[str] = None,
        backend: Optional[PDFBackend] = None,
    ) -> "MergeJob":
        """Build a job from raw CLI values.

        Raises:
            InputIsEmptyError: If no input was given.
            OutputIsEmptyError: If the output is missing or blank.
            UnparseableDepthError: If *depth* is neither ``*`` nor a positive integer.
            UnparseableOrderModeError: If *order_by* is not a known mode.
        """

        trimmed_inputs = [value.strip() for value in inputs or ()]
        if not trimmed_inputs:
            raise InputIsEmptyError()
        trimmed_output = (output or "").strip()
        if not trimmed_output:
            raise OutputIsEmptyError()

        options = MergeOptions(
            override=override,
            allow_repetition=allow_repetition,
            create_parent_dirs=create_parent_dirs,
            depth=Depth.parse(depth),
            order=OrderMode.parse(order_by),
        )
        return cls(trimmed_inputs, trimmed_output, options, backend=backend)

    def check(self) -> None:
        """Run the pre-flight checks (see :func:`~pdfstitch.validators.check_merge`)."""

        check_merge(self.raw_inputs, self.raw_output, self.options)

    def collect(self) -> List[Path]:
        """Expand the inputs into the ordered list of files to merge."""

        files = collect_pdf_paths(self.inputs, self.options.depth)
        if not self.options.allow_repetition:
            repeated = _find_expanded_repetition(files)
            if repeated is not None:
                LOGGER.error("File %s was collected more than once", repeated)
                raise ExpandedInputRepetitionError(path=repeated)
        return self.options.order.apply(files)

    def _prepare_output_directory(self) -> None:
        parent = self.output.parent
        if not self.options.create_parent_dirs or parent.exists():
            return
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            LOGGER.error("Failed to create output directory %s: %s", parent, exc)
            raise CouldNotSaveTheOutputError(path=self.output) from exc
        LOGGER.debug("Created output directory %s", parent)

    def run(self) -> RunSuccess:
        """Check, collect, merge, finalize and save.

        Raises:
            MergeCheckError: If the request is rejected before anything is read.
            MergeRunError: If collecting, merging or saving fails.
        """

        if self.state is not JobState.PENDING:
            raise RuntimeError(f"merge job already ran (state: {self.state.value})")

        start = time.perf_counter()
        try:
            self.state = JobState.VALIDATING
            self.check()

            self.state = JobState.COLLECTING
            self.files = self.collect()

            self.state = JobState.MERGING
            document = DocumentMerger(self.backend).merge(self.files)

            self.state = JobState.FINALIZING
            finalize(document)
            self._prepare_output_directory()
            self.backend.save(document, self.output)
        except PdfStitchError:
            self.state = JobState.FAILED
            raise

        self.state = JobState.SAVED
        elapsed = time.perf_counter() - start
        LOGGER.info("Merged %d file(s) into %s in %.3fs", len(self.files), self.output, elapsed)
        return RunSuccess(files=list(self.files), seconds=elapsed, output=self.output)


def merge_pdfs(
    inputs: Sequence[str],
    output: str,
    **options: object,
) -> RunSuccess:
    """Build and run a :class:`MergeJob` in one call.

    Keyword arguments are those of :meth:`MergeJob.from_arguments`.
    """

    return MergeJob.from_arguments(inputs, output, **options).run()  # type: ignore[arg-type]


__all__ = ["JobState", "MergeJob", "merge_pdfs"]
