"""
Custom field inspection commands for the reconciler CLI.
"""

import click

from ...cli.base import BaseCommand, command_error_handler
from ...cli.config import Config


class DumpFieldsCommand(BaseCommand):
    """Show every custom field available on the CRM list."""

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        fields = self.load_fields()

        if self.json_output:
            self.emit_json([
                {
                    'id': f.id,
                    'name': f.name,
                    'type': f.type,
                    'options': [{'id': o.id, 'name': o.name} for o in f.options],
                }
                for f in fields.fields
            ])
            return

        click.echo(f"{len(fields)} custom fields on list {self.config.crm_list_id}:")
        for f in fields.fields:
            click.echo(f"- {f.name} [{f.type}] id={f.id}")
            for option in f.options:
                click.echo(f"    * {option.name} ({option.id})")


class FieldOptionsCommand(BaseCommand):
    """Show the drop-down options of a single field."""

    def __init__(self, config: Config, field_name: str, json_output: bool = False):
        super().__init__(config, json_output)
        self.field_name = field_name

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        field = self.load_fields().get(self.field_name)
        if field is None:
            raise click.ClickException(f"Field not found: {self.field_name}")

        if self.json_output:
            self.emit_json({
                'id': field.id,
                'name': field.name,
                'options': [{'id': o.id, 'name': o.name} for o in field.options],
            })
            return

        if not field.options:
            click.echo(f"Field '{field.name}' ({field.type}) has no options")
            return
        click.echo(f"Options for '{field.name}':")
        for option in field.options:
            click.echo(f"- {option.name} ({option.id})")


__all__ = ['DumpFieldsCommand', 'FieldOptionsCommand']
