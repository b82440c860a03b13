"""
Match report command: cross-reference CRM tasks with the CSV export by name.
"""

import click
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...cli.base import CsvInputCommand, command_error_handler
from ...cli.config import Config
from ...matcher import NameMatcher


class MatchReportCommand(CsvInputCommand):
    """Report the best CSV match for every CRM task."""

    def __init__(
        self,
        config: Config,
        csv_path: Optional[Path] = None,
        limit: Optional[int] = None,
        json_output: bool = False
    ):
        super().__init__(config, csv_path, json_output)
        self.limit = limit
        self.matcher = NameMatcher()

    def build_report(self) -> List[Dict[str, Any]]:
        candidates = self.load_candidates()
        report = []
        for task in self.client.iter_tasks(self.config.crm_list_id, self.config.task_status):
            if self.limit is not None and len(report) >= self.limit:
                break
            result = self.matcher.match(task.name, candidates)
            report.append({'task_id': task.id, 'task': task.name, **result.to_dict()})
        return report

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        report = self.build_report()
        tiers = Counter(r['tier'] for r in report)

        if self.json_output:
            self.emit_json({'total': len(report), 'tiers': dict(tiers), 'matches': report})
            return

        click.echo(f"{self.config.task_status}: {len(report)}")
        for r in report:
            if r['match']:
                click.echo(f"- {r['task']} -> {r['match']} (score {r['score']}, {r['tier']})")
            else:
                click.secho(f"- {r['task']} -> NO MATCH", fg='yellow')
        click.echo("\nBy tier: " + ', '.join(f"{tier}={count}" for tier, count in sorted(tiers.items())))


__all__ = ['MatchReportCommand']
