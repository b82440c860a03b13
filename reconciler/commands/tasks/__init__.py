"""
Task listing commands for the reconciler CLI.
"""

import click
from typing import Any, Dict, List, Optional

from ...cli.base import BaseCommand, command_error_handler
from ...cli.config import Config
from ...crm.models import CrmTask


class ListTasksCommand(BaseCommand):
    """List CRM tasks with a given status, optionally filtered by a field value."""

    def __init__(
        self,
        config: Config,
        status: Optional[str] = None,
        field_name: Optional[str] = None,
        field_value: Optional[str] = None,
        json_output: bool = False
    ):
        super().__init__(config, json_output)
        self.status = status or config.task_status
        self.field_name = field_name
        self.field_value = field_value

    def validate(self) -> bool:
        if not super().validate():
            return False
        if bool(self.field_name) != bool(self.field_value):
            self.logger.error("--field and --value must be given together")
            return False
        return True

    def _field_filter(self):
        """Build a predicate for the --field/--value filter, or None."""
        if not self.field_name:
            return None

        field = self.load_fields().get(self.field_name)
        if field is None:
            self.logger.warning(f"Field '{self.field_name}' not found on list; no task will match")
            return lambda task: False

        wanted = self.field_value.lower()

        def matches(task: CrmTask) -> bool:
            text = field.value_as_text(task.field_value(field.id)).lower()
            return bool(text) and wanted in text

        return matches

    def collect(self) -> List[Dict[str, Any]]:
        predicate = self._field_filter()
        matched_by = f"field:{self.field_name}" if predicate else f"status:{self.status}"

        results = []
        for task in self.client.iter_tasks(self.config.crm_list_id, self.status):
            if predicate and not predicate(task):
                continue
            results.append({
                'id': task.id,
                'name': task.name,
                'status': task.status,
                'url': task.url,
                'matched_by': matched_by,
            })
        return results

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        results = self.collect()

        if self.json_output:
            self.emit_json({'count': len(results), 'items': results})
            return

        click.echo(f"Found {len(results)} {self.status} records:")
        for r in results:
            click.echo(f"- {r['name']} (id: {r['id']}) [{r['status']}] {r['url']}")


__all__ = ['ListTasksCommand']
