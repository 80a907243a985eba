from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner
from pypdf import PdfReader

from pdfstitch import __version__
from pdfstitch.cli import cli
from pdfstitch.utils import format_file_size


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def workdir(monkeypatch: pytest.MonkeyPatch, sample_pdfs: list[Path], tmp_path: Path) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_merge_command_success(runner: CliRunner, workdir: Path) -> None:
    result = runner.invoke(cli, ["merge", "one.pdf", "two.pdf", "-o", "merged.pdf"])

    assert result.exit_code == 0, result.output
    assert "merged successfully (2 files)" in result.output
    assert "one.pdf" in result.output
    assert len(PdfReader(str(workdir / "merged.pdf")).pages) == 5


def test_merge_command_directory_with_depth(runner: CliRunner, workdir: Path, pdf_tree: Path) -> None:
    result = runner.invoke(cli, ["merge", "dirX", "--depth", "*", "--order-by", "alpha", "-o", "tree.pdf"])

    assert result.exit_code == 0, result.output
    assert "merged successfully (3 files)" in result.output


def test_merge_command_single_input(runner: CliRunner, workdir: Path) -> None:
    result = runner.invoke(cli, ["merge", "one.pdf", "-o", "merged.pdf"])

    assert result.exit_code == 1
    assert "single file input isn't allowed" in result.output
    assert "at least 1 directory path or 2 pdf file paths" in result.output
    assert not (workdir / "merged.pdf").exists()


def test_merge_command_repetition_tip(runner: CliRunner, workdir: Path) -> None:
    result = runner.invoke(cli, ["merge", "one.pdf", "one.pdf", "-o", "merged.pdf"])

    assert result.exit_code == 1
    assert "--allow-repetition" in result.output

    result = runner.invoke(
        cli, ["merge", "one.pdf", "one.pdf", "-o", "merged.pdf", "--allow-repetition"]
    )
    assert result.exit_code == 0, result.output


def test_merge_command_override(runner: CliRunner, workdir: Path) -> None:
    args = ["merge", "one.pdf", "two.pdf", "-o", "merged.pdf"]
    assert runner.invoke(cli, args).exit_code == 0

    result = runner.invoke(cli, args)
    assert result.exit_code == 1
    assert "output already exists" in result.output
    assert "--override" in result.output

    assert runner.invoke(cli, [*args, "--override"]).exit_code == 0


def test_merge_command_parent_flag(runner: CliRunner, workdir: Path) -> None:
    args = ["merge", "one.pdf", "two.pdf", "-o", "out/merged.pdf"]

    result = runner.invoke(cli, args)
    assert result.exit_code == 1
    assert "--parent" in result.output

    assert runner.invoke(cli, [*args, "-p"]).exit_code == 0
    assert (workdir / "out" / "merged.pdf").exists()


@pytest.mark.parametrize(
    ("args", "message"),
    [
        (["merge", "-o", "merged.pdf"], "Input should be at least"),
        (["merge", "one.pdf", "two.pdf"], "Output must be a single pdf file path"),
        (["merge", "one.pdf", "two.pdf", "-o", "merged.pdf", "-d", "0"], "couldn't parse the `depth` value"),
        (["merge", "one.pdf", "two.pdf", "-o", "m.pdf", "--order-by", "size"], "couldn't parse the `order_by` value"),
        (["merge", "one.pdf", "../two.pdf", "-o", "merged.pdf"], "directory reference isn't allowed"),
    ],
)
def test_merge_command_errors(runner: CliRunner, workdir: Path, args: list[str], message: str) -> None:
    result = runner.invoke(cli, args)

    assert result.exit_code == 1
    assert message in result.output


def test_merge_command_verbose(runner: CliRunner, workdir: Path) -> None:
    result = runner.invoke(cli, ["merge", "one.pdf", "two.pdf", "-o", "merged.pdf", "-v"])

    assert result.exit_code == 0, result.output


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.parametrize(
    "size, expected",
    [(0, "0.0 B"), (512, "512.0 B"), (1536, "1.5 KB"), (5 * 1024**2, "5.0 MB"), (3 * 1024**5, "3.0 PB")],
)
def test_format_file_size(size: int, expected: str) -> None:
    assert format_file_size(size) == expected
