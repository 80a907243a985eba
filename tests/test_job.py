from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Callable

import pytest
from pypdf import PdfReader

from pdfstitch import merge_pdfs
from pdfstitch.depth import Depth
from pdfstitch.exceptions import (
    CouldNotLoadInputError,
    CouldNotSaveTheOutputError,
    EntryDoesNotExistError,
    ExpandedInputRepetitionError,
    InputIsEmptyError,
    OutputAlreadyExistsError,
    OutputIsEmptyError,
    ParentOutputWithoutFlagError,
    UnparseableDepthError,
    UnparseableOrderModeError,
)
from pdfstitch.job import JobState, MergeJob
from pdfstitch.ordering import OrderMode
from pdfstitch.types import MergeOptions


def _widths(path: Path) -> list[float]:
    return [float(page.mediabox.width) for page in PdfReader(str(path)).pages]


def _outline(path: Path) -> list[tuple[str, int]]:
    reader = PdfReader(str(path))
    return [(item.title, reader.get_destination_page_number(item)) for item in reader.outline]


def test_merge_files_end_to_end(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    output = tmp_path / "merged.pdf"

    result = MergeJob(sample_pdfs, output).run()

    assert result.files == sample_pdfs
    assert result.output == output
    assert result.seconds >= 0
    assert str(result) == "merged successfully (2 files)"

    assert _widths(output) == [100, 100, 200, 200, 200]
    assert _outline(output) == [("Page_1", 0), ("Page_2", 2)]
    assert PdfReader(str(output)).metadata.title == "Document One"


def test_repeated_input_doubles_pages(tmp_path: Path, pdf_factory: Callable[..., Path]) -> None:
    single = pdf_factory("single.pdf", pages=3)
    output = tmp_path / "double.pdf"

    merge_pdfs([str(single), str(single)], str(output), allow_repetition=True)

    assert len(PdfReader(str(output)).pages) == 6
    assert _outline(output) == [("Page_1", 0), ("Page_2", 3)]


def test_zero_page_input_bookmark_targets_first_page(
    tmp_path: Path, empty_pdf: Path, pdf_factory: Callable[..., Path]
) -> None:
    other = pdf_factory("other.pdf", pages=2)
    output = tmp_path / "merged.pdf"

    MergeJob([empty_pdf, other], output).run()

    assert len(PdfReader(str(output)).pages) == 2
    assert _outline(output) == [("Page_1", 0), ("Page_2", 0)]


def test_override(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    output = tmp_path / "merged.pdf"
    MergeJob(sample_pdfs, output).run()

    with pytest.raises(OutputAlreadyExistsError):
        MergeJob(sample_pdfs, output).run()

    MergeJob(list(reversed(sample_pdfs)), output, MergeOptions(override=True)).run()
    assert _widths(output) == [200, 200, 200, 100, 100]


def test_parent_directories(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    output = tmp_path / "out" / "nested" / "merged.pdf"

    with pytest.raises(ParentOutputWithoutFlagError):
        MergeJob(sample_pdfs, output).run()
    assert not (tmp_path / "out").exists()

    MergeJob(sample_pdfs, output, MergeOptions(create_parent_dirs=True)).run()
    assert output.exists()


def test_parent_directory_creation_failure(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, sample_pdfs: list[Path]
) -> None:
    def failing_mkdir(self: Path, *args: object, **kwargs: object) -> None:
        raise PermissionError("denied")

    monkeypatch.setattr(Path, "mkdir", failing_mkdir)
    output = tmp_path / "out" / "merged.pdf"

    with pytest.raises(CouldNotSaveTheOutputError):
        MergeJob(sample_pdfs, output, MergeOptions(create_parent_dirs=True)).run()


@pytest.mark.parametrize(
    ("depth", "expected"),
    [("1", ["a.pdf", "b.pdf"]), ("2", ["a.pdf", "b.pdf", "c.pdf"]), ("*", ["a.pdf", "b.pdf", "c.pdf"])],
)
def test_directory_input(tmp_path: Path, pdf_tree: Path, depth: str, expected: list[str]) -> None:
    output = tmp_path / "tree.pdf"

    result = MergeJob.from_arguments([str(pdf_tree)], str(output), depth=depth).run()

    assert [path.name for path in result.files] == expected
    assert len(PdfReader(str(output)).pages) == len(expected)


def test_expanded_repetition_requires_flag(tmp_path: Path, pdf_tree: Path) -> None:
    inputs = [str(pdf_tree), str(pdf_tree / "a.pdf")]
    output = tmp_path / "tree.pdf"

    job = MergeJob.from_arguments(inputs, str(output), depth="1")
    with pytest.raises(ExpandedInputRepetitionError) as excinfo:
        job.run()
    assert excinfo.value.path.name == "a.pdf"
    assert job.state is JobState.FAILED
    assert not output.exists()

    result = MergeJob.from_arguments(inputs, str(output), depth="1", allow_repetition=True).run()
    assert [path.name for path in result.files] == ["a.pdf", "b.pdf", "a.pdf"]


def test_order_by_alpha(tmp_path: Path, pdf_factory: Callable[..., Path]) -> None:
    second = pdf_factory("b.pdf", width=200)
    first = pdf_factory("a.pdf", width=100)
    output = tmp_path / "ordered.pdf"

    result = MergeJob.from_arguments([str(second), str(first)], str(output), order_by="alpha").run()

    assert result.files == [first, second]
    assert _widths(output) == [100, 200]


def test_entry_removed_after_checks(sample_pdfs: list[Path], tmp_path: Path) -> None:
    job = MergeJob(sample_pdfs, tmp_path / "merged.pdf")
    job.check()
    sample_pdfs[0].unlink()

    with pytest.raises(EntryDoesNotExistError):
        job.collect()


def test_datetime_order_failure_marks_job_failed(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, sample_pdfs: list[Path]
) -> None:
    def vanished(path: object) -> None:
        raise FileNotFoundError(path)

    monkeypatch.setattr("pdfstitch.ordering.os", SimpleNamespace(stat=vanished))
    output = tmp_path / "merged.pdf"

    job = MergeJob.from_arguments([str(path) for path in sample_pdfs], str(output), order_by="datetime")
    with pytest.raises(EntryDoesNotExistError) as excinfo:
        job.run()

    assert excinfo.value.path == sample_pdfs[0]
    assert job.state is JobState.FAILED
    assert not output.exists()


def test_broken_input_leaves_no_output(tmp_path: Path, pdf_factory: Callable[..., Path]) -> None:
    good = pdf_factory("good.pdf")
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"%PDF-1.4 truncated")
    output = tmp_path / "merged.pdf"

    job = MergeJob([good, broken], output)
    with pytest.raises(CouldNotLoadInputError):
        job.run()

    assert job.state is JobState.FAILED
    assert not output.exists()


def test_from_arguments_trims_and_parses() -> None:
    job = MergeJob.from_arguments(
        ["  one.pdf ", "dir\n"], " merged.pdf ", depth=" 2 ", order_by="DateTime", override=True
    )

    assert job.inputs == [Path("one.pdf"), Path("dir")]
    assert job.output == Path("merged.pdf")
    assert job.options == MergeOptions(override=True, depth=Depth.until(2), order=OrderMode.DATETIME)
    assert job.state is JobState.PENDING


def test_from_arguments_build_errors() -> None:
    with pytest.raises(InputIsEmptyError):
        MergeJob.from_arguments([], "merged.pdf")
    with pytest.raises(InputIsEmptyError):
        MergeJob.from_arguments(None, "merged.pdf")
    with pytest.raises(OutputIsEmptyError):
        MergeJob.from_arguments(["a.pdf", "b.pdf"], "   ")
    with pytest.raises(OutputIsEmptyError):
        MergeJob.from_arguments(["a.pdf", "b.pdf"], None)
    with pytest.raises(UnparseableDepthError):
        MergeJob.from_arguments(["a.pdf", "b.pdf"], "merged.pdf", depth="0")
    with pytest.raises(UnparseableOrderModeError):
        MergeJob.from_arguments(["a.pdf", "b.pdf"], "merged.pdf", order_by="size")


def test_job_runs_once(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    job = MergeJob(sample_pdfs, tmp_path / "merged.pdf")
    job.run()
    assert job.state is JobState.SAVED

    with pytest.raises(RuntimeError):
        job.run()
