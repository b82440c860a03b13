"""
Base command infrastructure for the reconciler CLI.
Provides common functionality and utilities for all commands.
"""

import functools
import json
import click
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional

from .config import Config

from ..crm.client import ClickUpClient
from ..crm.fields import COMPANY_NAME_COLUMN, FieldIndex
from ..matcher import CandidateRecord, build_candidates
from ..processors.error_tracker import ErrorTracker
from ..utils.csv_table import read_table, table_to_frame, validate_required_columns


class BaseCommand(ABC):
    """Base class for all CLI commands."""

    def __init__(self, config: Config, json_output: bool = False):
        self.config = config
        self.json_output = json_output or config.output_format == 'json'
        self.logger = logging.getLogger(self.__class__.__name__)
        self.error_tracker = ErrorTracker()
        self._client: Optional[ClickUpClient] = None

        # Get debug status from click context
        ctx = click.get_current_context(silent=True)
        self.debug = bool(ctx and ctx.obj and ctx.obj.get('debug'))
        if self.debug:
            self.logger.debug(f"Debug mode enabled for {self.__class__.__name__}")

    @property
    def client(self) -> ClickUpClient:
        """Get or create the CRM API client."""
        if self._client is None:
            if self.debug:
                self.logger.debug(f"Creating ClickUp client for {self.config.clickup_base_url}")
            self._client = ClickUpClient(
                api_key=self.config.clickup_api_key,
                base_url=self.config.clickup_base_url,
                request_delay=self.config.request_delay,
                rate_limit_backoff=self.config.rate_limit_backoff,
                max_retries=self.config.max_retries,
                timeout=self.config.request_timeout,
            )
        return self._client

    def load_fields(self) -> FieldIndex:
        """Fetch the custom fields of the configured CRM list."""
        fields = FieldIndex(self.client.get_list_fields(self.config.crm_list_id))
        self.logger.debug(f"Loaded {len(fields)} custom fields")
        return fields

    def emit_json(self, data: Any) -> None:
        click.echo(json.dumps(data, indent=2, default=str))

    @abstractmethod
    def execute(self) -> None:
        """Execute the command. Must be implemented by subclasses."""
        pass

    def validate(self) -> bool:
        """Validate command configuration and requirements.

        Returns:
            bool: True if validation passes, False otherwise
        """
        if self.debug:
            self.logger.debug("Validating command configuration")
        return self.config.validate()


class CsvInputCommand(BaseCommand):
    """Base class for commands that match CRM tasks against the CSV export."""

    required_columns = [COMPANY_NAME_COLUMN]

    def __init__(self, config: Config, csv_path: Optional[Path] = None, json_output: bool = False):
        super().__init__(config, json_output)
        self.csv_path = Path(csv_path or config.csv_path)

    def validate(self) -> bool:
        """Validate the CSV file exists and is readable."""
        if not super().validate():
            return False

        if not self.csv_path.exists():
            self.logger.error(f"CSV file not found: {self.csv_path}")
            return False

        if not self.csv_path.is_file():
            self.logger.error(f"CSV path is not a file: {self.csv_path}")
            return False

        return True

    def load_candidates(self) -> List[CandidateRecord]:
        """Read the CSV and build match candidates.

        Raises:
            ValueError: If the header lacks a required column
        """
        header, rows = read_table(self.csv_path, encoding=self.config.csv_encoding)
        missing = validate_required_columns(header, self.required_columns)
        if missing:
            raise ValueError(f"CSV header does not include {', '.join(repr(c) for c in missing)}")
        return build_candidates(table_to_frame(header, rows), COMPANY_NAME_COLUMN)


def command_error_handler(f):
    """Decorator to handle command execution errors consistently."""
    @functools.wraps(f)
    def wrapper(self, *args, **kwargs):
        start = time.time()
        try:
            if self.debug:
                self.logger.debug(f"Starting command execution: {f.__name__}")

            if not self.validate():
                raise click.UsageError(f"{self.__class__.__name__} validation failed")

            result = f(self, *args, **kwargs)

            if self.debug:
                self.logger.debug(f"Command completed in {time.time() - start:.3f}s")

            return result

        except click.ClickException:
            raise
        except Exception as e:
            self.error_tracker.add_error(
                'COMMAND_EXECUTION_ERROR',
                f"Command failed: {str(e)}",
                {
                    'command': self.__class__.__name__,
                    'error': str(e)
                }
            )
            self.logger.error(f"Command failed: {e}", exc_info=self.debug)
            raise click.Abort()
    return wrapper
