"""Integration tests for complete export-to-Markdown migrations."""

import shutil
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from src.cli.main import app
from src.cli.migrate_command import MigrateCommand
from src.cli.models import ExitCode, MigrationConfig
from tests.fixtures.sample_exports import (
    attachment_object,
    body_object,
    embed,
    entities_xml,
    page_object,
    write_export,
)

requires_pandoc = pytest.mark.skipif(
    shutil.which("pandoc") is None,
    reason="pandoc is not installed",
)


def tree(root: Path):
    return sorted(str(p.relative_to(root)) for p in root.rglob("*"))


class TestLatestRevisionMigration:
    """Only the newest revision of a page reaches the output."""

    def test_output_tree(self, home_export, output_dir, passthrough_converter):
        """Exactly one document and the newest revision's attachment are written."""
        cmd = MigrateCommand(home_export, output_dir, output_handler=MagicMock(),
                             converter=passthrough_converter)

        assert cmd.run() == ExitCode.SUCCESS
        assert tree(output_dir) == ["Home", "Home.md", "Home/logo.png"]
        assert (output_dir / "Home" / "logo.png").read_bytes() == b"\x89PNG logo"

    def test_document_content(self, home_export, output_dir, passthrough_converter):
        """The document holds the newest body with all markup removed."""
        cmd = MigrateCommand(home_export, output_dir, output_handler=MagicMock(),
                             converter=passthrough_converter)
        cmd.run()

        document = (output_dir / "Home.md").read_bytes()
        assert document == b"WelcomeNew home"
        assert b"Old home" not in document
        assert b"<" not in document

    def test_rerun_overwrites_output(self, home_export, output_dir, passthrough_converter):
        """Running twice produces the same tree."""
        for _ in range(2):
            cmd = MigrateCommand(home_export, output_dir, output_handler=MagicMock(),
                                 converter=passthrough_converter)
            assert cmd.run() == ExitCode.SUCCESS

        assert tree(output_dir) == ["Home", "Home.md", "Home/logo.png"]


class TestDegradedPages:
    """Broken references degrade single pages without stopping the run."""

    def test_dangling_body_and_missing_attachment(self, tmp_path, output_dir, passthrough_converter):
        """A page with a dangling body is written empty next to healthy pages."""
        export = write_export(
            tmp_path / "export",
            entities_xml(
                page_object("P1", "Orphan", "1", body_ids=["B404"], attachment_ids=["A404"]),
                page_object("P2", "Release notes", "2", body_ids=["B2"], attachment_ids=["A2"]),
                body_object("B2", f"<p>Shipped</p>{embed('chart.png')}{embed('gone.png')}"),
                attachment_object("A2", "chart.png", "7"),
            ),
            {"P2/A2/7": b"chart"},
        )
        cmd = MigrateCommand(export, output_dir, output_handler=MagicMock(),
                             converter=passthrough_converter)

        assert cmd.run() == ExitCode.SUCCESS
        assert (output_dir / "Orphan.md").read_bytes() == b""
        assert (output_dir / "ReleaseNotes" / "chart.png").read_bytes() == b"chart"
        assert not (output_dir / "Orphan").exists()
        assert b"Shipped" in (output_dir / "ReleaseNotes.md").read_bytes()


class TestRevisionEncoding:
    """The configured revision encoding decides which revision wins."""

    def test_decimal_encoding_compares_numbers(self, tmp_path, output_dir, passthrough_converter):
        """With decimal encoding version 10 beats version 9."""
        export = write_export(
            tmp_path / "export",
            entities_xml(
                page_object("P9", "Home", "9", body_ids=["B9"]),
                body_object("B9", "<p>nine</p>"),
                page_object("P10", "Home", "10", body_ids=["B10"]),
                body_object("B10", "<p>ten</p>"),
            ),
            {},
        )
        cmd = MigrateCommand(export, output_dir, config=MigrationConfig(revision_encoding="decimal"),
                             output_handler=MagicMock(), converter=passthrough_converter)

        cmd.run()

        assert (output_dir / "Home.md").read_bytes() == b"ten"


@requires_pandoc
class TestPandocConversion:
    """End-to-end runs through the command line with the real Pandoc."""

    def test_cli_migration(self, home_export, output_dir):
        """The CLI writes ATX headings and portable image links."""
        result = CliRunner().invoke(app, [str(home_export), str(output_dir), "--no-color"])

        assert result.exit_code == ExitCode.SUCCESS
        document = (output_dir / "Home.md").read_text(encoding="utf-8")
        assert "# Welcome" in document
        assert "![logo.png](Home/logo.png)" in document
        assert "<span" not in document
