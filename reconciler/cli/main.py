"""
Core CLI implementation for the reconciler package.
"""

import click
from pathlib import Path

from .config import Config
from .logging import setup_logging, get_logger
from ..commands.tasks import ListTasksCommand
from ..commands.fields import DumpFieldsCommand, FieldOptionsCommand
from ..commands.match import MatchReportCommand
from ..commands.update import UpdateFromCsvCommand, UpdateFromCommentsCommand


def _load_config(ctx: click.Context) -> Config:
    """Load configuration, honoring the group's --env-file option."""
    try:
        config = Config.from_env(ctx.obj.get('env_file'))
    except ValueError as e:
        click.secho(f"Error initializing configuration: {str(e)}", fg='red', err=True)
        ctx.exit(1)

    if not ctx.obj.get('debug'):
        setup_logging(level=config.log_level)
    return config


csv_option = click.option(
    '--csv', 'csv_path',
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    help='CSV export to match against (defaults to CSV_PATH)'
)
json_option = click.option('--json', 'json_output', is_flag=True, help='Print machine-readable output')
limit_option = click.option('--limit', type=click.IntRange(min=0), default=None, help='Maximum number of tasks to process')
dry_run_option = click.option('--dry-run', is_flag=True, help='Only log planned changes, do not write them')
overwrite_option = click.option('--overwrite', is_flag=True, help='Replace fields that already have a value')


@click.group()
@click.option('--debug', is_flag=True, help='Enable detailed debug output')
@click.option('--env-file', type=click.Path(dir_okay=False, path_type=Path), help='Env file with CLICKUP_API_KEY and CRM_LIST_ID')
@click.pass_context
def cli(ctx, debug: bool, env_file: Path | None):
    """Reconcile CRM company records with a CSV export"""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    ctx.obj['env_file'] = env_file

    setup_logging(debug=debug)

    logger = get_logger('cli')
    if debug:
        logger.debug("Debug mode enabled")


# Task Commands Group
@cli.group()
def tasks():
    """CRM task commands"""
    pass


@tasks.command('list')
@click.option('--status', help='Task status to list (defaults to TASK_STATUS)')
@click.option('--field', 'field_name', help='Only tasks whose custom field contains --value')
@click.option('--value', 'field_value', help='Value to look for in --field')
@json_option
@click.pass_context
def list_tasks(ctx, status: str | None, field_name: str | None, field_value: str | None, json_output: bool):
    """List CRM tasks with a given status."""
    config = _load_config(ctx)
    command = ListTasksCommand(config, status, field_name, field_value, json_output)
    command.execute()


# Field Commands Group
@cli.group()
def fields():
    """CRM custom field commands"""
    pass


@fields.command('dump')
@json_option
@click.pass_context
def dump_fields(ctx, json_output: bool):
    """Show all custom fields of the CRM list."""
    config = _load_config(ctx)
    command = DumpFieldsCommand(config, json_output)
    command.execute()


@fields.command('options')
@click.argument('name')
@json_option
@click.pass_context
def field_options(ctx, name: str, json_output: bool):
    """Show the drop-down options of a custom field."""
    config = _load_config(ctx)
    command = FieldOptionsCommand(config, name, json_output)
    command.execute()


# Match Commands Group
@cli.group()
def match():
    """Name matching commands"""
    pass


@match.command('report')
@csv_option
@limit_option
@json_option
@click.pass_context
def match_report(ctx, csv_path: Path | None, limit: int | None, json_output: bool):
    """Report the best CSV match for each CRM task."""
    config = _load_config(ctx)
    command = MatchReportCommand(config, csv_path, limit, json_output)
    command.execute()


# Update Commands Group
@cli.group()
def update():
    """CRM field update commands"""
    pass


@update.command('from-csv')
@csv_option
@dry_run_option
@overwrite_option
@limit_option
@json_option
@click.pass_context
def update_from_csv(ctx, csv_path: Path | None, dry_run: bool, overwrite: bool, limit: int | None, json_output: bool):
    """Fill CRM fields from the matching CSV row."""
    config = _load_config(ctx)
    command = UpdateFromCsvCommand(config, csv_path, dry_run, overwrite, limit, json_output)
    command.execute()


@update.command('from-comments')
@dry_run_option
@overwrite_option
@limit_option
@json_option
@click.pass_context
def update_from_comments(ctx, dry_run: bool, overwrite: bool, limit: int | None, json_output: bool):
    """Fill CRM contact fields from task comments."""
    config = _load_config(ctx)
    command = UpdateFromCommentsCommand(config, dry_run, overwrite, limit, json_output)
    command.execute()
