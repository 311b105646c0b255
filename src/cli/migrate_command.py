"""Migrate command orchestration for CLI.

This module provides the MigrateCommand class that runs the whole migration
for the CLI: it indexes the export dump, then assembles, rewrites, converts
and writes one page at a time, and translates failures into exit codes.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from src.cli.models import ExitCode, MigrationConfig
from src.cli.output import OutputHandler
from src.content_converter.errors import ConversionError, ConverterNotFoundError
from src.content_converter.markdown_converter import MarkdownConverter
from src.export_reader.dump_parser import ENTITIES_FILENAME
from src.export_reader.entity_index import EntityIndex
from src.export_reader.errors import ExportError
from src.migration.content_rewriter import ContentRewriter
from src.migration.errors import OutputError
from src.migration.models import MigrationReport, PageBundle, PageResult, PageStatus
from src.migration.output_writer import OutputWriter
from src.migration.page_assembler import PageAssembler

logger = logging.getLogger(__name__)

Converter = Callable[[bytes], bytes]


class MigrateCommand:
    """Orchestrates a complete export-to-Markdown migration.

    The migration workflow:
        1. Build the EntityIndex from <export_root>/entities.xml
        2. Assemble a PageBundle for every retained page
        3. For each bundle, in order:
           - rewrite attachment embeds (ContentRewriter)
           - convert the body to Markdown (converter callable)
           - copy attachments and write the document (OutputWriter)
        4. Print a summary and return an exit code

    A ConversionError only fails its own page. Export and output errors
    stop the run at the first occurrence.

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> cmd = MigrateCommand("export/", "wiki/", output_handler=output)
        >>> sys.exit(cmd.run())
    """

    def __init__(
        self,
        export_root: Union[str, Path],
        output_root: Union[str, Path],
        config: Optional[MigrationConfig] = None,
        output_handler: Optional[OutputHandler] = None,
        converter: Optional[Converter] = None,
    ):
        """Initialize migrate command.

        Args:
            export_root: Root directory of the Confluence export
            output_root: Root directory of the migrated wiki
            config: Migration options (defaults used if omitted)
            output_handler: OutputHandler for terminal output (optional)
            converter: bytes -> bytes Markdown converter; a Pandoc-backed
                MarkdownConverter is created on run() if omitted
        """
        self.export_root = Path(export_root)
        self.output_root = Path(output_root)
        self.config = config or MigrationConfig()
        self.output_handler = output_handler or OutputHandler()
        self.converter = converter
        self.rewriter = ContentRewriter(self.export_root, self.output_root)
        self.writer = OutputWriter(self.output_root, self.config.document_extension)

    def run(self) -> ExitCode:
        """Execute the migration.

        Returns:
            ExitCode indicating success or the kind of failure
        """
        if self.converter is None:
            try:
                self.converter = MarkdownConverter(
                    executable=self.config.pandoc_executable,
                    timeout=self.config.pandoc_timeout,
                ).html_to_markdown
            except ConverterNotFoundError as e:
                logger.error(str(e))
                self.output_handler.error(str(e))
                return ExitCode.CONVERTER_MISSING

        entities_path = self.export_root / ENTITIES_FILENAME
        logger.info(f"Reading export dump from {entities_path}")
        self.output_handler.info(f"Reading export dump from {entities_path}")
        try:
            index = EntityIndex.from_file(entities_path, self.config.revision_encoding)
        except ExportError as e:
            logger.error(f"Export could not be read: {e}")
            self.output_handler.error(str(e))
            return ExitCode.MALFORMED_EXPORT

        try:
            self.writer.prepare_output_root()
            report = self.migrate(index)
        except OutputError as e:
            logger.error(f"Migration aborted: {e}")
            self.output_handler.error(f"Migration aborted: {e}")
            return ExitCode.OUTPUT_ERROR

        self.output_handler.print_summary(report)

        if report.failed_count > 0:
            return ExitCode.PAGES_FAILED
        return ExitCode.SUCCESS

    def migrate(self, index: EntityIndex) -> MigrationReport:
        """Migrate every retained page of index.

        Args:
            index: Entity index of the export

        Returns:
            MigrationReport with one PageResult per page

        Raises:
            OutputError: On the first directory, document or attachment
                that cannot be written
        """
        report = MigrationReport()
        assembler = PageAssembler(index)
        total = len(index.pages_by_title)

        logger.info(f"Migrating {total} page(s) to {self.output_root}")
        with self.output_handler.progress_bar(total, "Migrating pages") as progress:
            task = progress.add_task("Migrating pages", total=total)
            for bundle in assembler.iter_bundles():
                report.pages.append(self.migrate_page(bundle))
                progress.update(task, advance=1)

        logger.info(
            f"Migration finished: {report.written_count} written, "
            f"{report.failed_count} failed, {report.attachments_copied} attachment(s) copied"
        )
        return report

    def migrate_page(self, bundle: PageBundle) -> PageResult:
        """Rewrite, convert and write a single page.

        Args:
            bundle: Assembled page

        Returns:
            PageResult; FAILED if conversion failed

        Raises:
            OutputError: If the page's attachments or document cannot be written
        """
        title = bundle.page.title
        rewrite = self.rewriter.rewrite(bundle)
        logger.debug(f"Page '{title}' -> {rewrite.slug}")
        self.output_handler.debug(f"Page '{title}' -> {rewrite.slug}")

        try:
            markdown = self.converter(rewrite.body)
        except ConversionError as e:
            logger.error(f"Skipping page '{title}': {e}")
            self.output_handler.error(f"Skipping page '{title}': {e}")
            return PageResult(title=title, status=PageStatus.FAILED, error=str(e))

        document_path = self.writer.write_page(markdown, rewrite)

        warnings = [str(error) for error in bundle.errors]
        warnings.extend(f"Embedded attachment not found: {name}" for name in rewrite.unresolved)
        if warnings:
            self.output_handler.warning(
                f"Page '{title}' written with {len(warnings)} warning(s): {'; '.join(warnings)}"
            )

        return PageResult(
            title=title,
            status=PageStatus.DEGRADED if warnings else PageStatus.WRITTEN,
            document_path=document_path,
            attachments_copied=len(rewrite.copy_jobs),
            warnings=warnings,
        )
