"""
Field update commands for the reconciler CLI.
Fill CRM custom fields from the CSV export or from task comments.
"""

import click
from pathlib import Path
from typing import Any, Dict, Optional

from ...cli.base import BaseCommand, CsvInputCommand, command_error_handler
from ...cli.config import Config
from ...processors.base import BaseProcessor
from ...processors.comment_fields import CommentFieldProcessor
from ...processors.csv_fields import CsvFieldProcessor


def _processor_options(config: Config, dry_run: bool, overwrite: bool, limit: Optional[int], debug: bool) -> Dict[str, Any]:
    return {
        'dry_run': dry_run,
        'overwrite': overwrite,
        'limit': limit,
        'write_delay': config.write_delay,
        'debug': debug,
    }


def _report(command: BaseCommand, processor: BaseProcessor) -> None:
    """Print a run summary, as JSON or text."""
    summary = processor.get_summary()
    if command.json_output:
        command.emit_json(summary)
        return

    stats = summary['stats']
    click.echo("\nUpdate Summary:")
    click.echo(f"Tasks Processed: {stats['tasks_processed']}")
    click.echo(f"Tasks Without Updates: {stats['tasks_without_updates']}")
    click.echo(f"Skipped (already set): {stats['updates_skipped_existing']}")
    if processor.dry_run:
        click.echo(f"Planned Updates: {stats['updates_planned']}")
    else:
        click.echo(f"Applied Updates: {stats['updates_applied']}")
        if stats['failed_updates']:
            click.secho(f"Failed Updates: {stats['failed_updates']}", fg='red')


class UpdateFromCsvCommand(CsvInputCommand):
    """Fill CRM fields for each task from its matching CSV row."""

    def __init__(
        self,
        config: Config,
        csv_path: Optional[Path] = None,
        dry_run: bool = False,
        overwrite: bool = False,
        limit: Optional[int] = None,
        json_output: bool = False
    ):
        super().__init__(config, csv_path, json_output)
        self.dry_run = dry_run
        self.overwrite = overwrite
        self.limit = limit

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        candidates = self.load_candidates()
        processor = CsvFieldProcessor(
            self.client,
            self.load_fields(),
            candidates,
            **_processor_options(self.config, self.dry_run, self.overwrite, self.limit, self.debug)
        )
        processor.process(self.client.iter_tasks(self.config.crm_list_id, self.config.task_status))
        _report(self, processor)
        if not processor.dry_run and processor.stats.failed_updates:
            raise click.ClickException(f"{processor.stats.failed_updates} updates failed")


class UpdateFromCommentsCommand(BaseCommand):
    """Fill CRM contact fields from labeled details in task comments."""

    def __init__(
        self,
        config: Config,
        dry_run: bool = False,
        overwrite: bool = False,
        limit: Optional[int] = None,
        json_output: bool = False
    ):
        super().__init__(config, json_output)
        self.dry_run = dry_run
        self.overwrite = overwrite
        self.limit = limit

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        processor = CommentFieldProcessor(
            self.client,
            self.load_fields(),
            **_processor_options(self.config, self.dry_run, self.overwrite, self.limit, self.debug)
        )
        processor.process(self.client.iter_tasks(self.config.crm_list_id, self.config.task_status))
        _report(self, processor)
        if not processor.dry_run and processor.stats.failed_updates:
            raise click.ClickException(f"{processor.stats.failed_updates} updates failed")


__all__ = ['UpdateFromCsvCommand', 'UpdateFromCommentsCommand']
