"""
Configuration management for the reconciler CLI.
Handles loading and validating configuration from environment variables and files.
"""

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

from ..crm.client import CLICKUP_API_BASE

DEFAULT_ENV_FILE = Path('config.env')


@dataclass
class Config:
    """Configuration settings for the reconciler CLI."""

    # CRM settings
    clickup_api_key: str
    crm_list_id: str
    task_status: str = 'Engaged'
    clickup_base_url: str = CLICKUP_API_BASE

    # Input settings
    csv_path: Path = Path('data/brewery_data.csv')
    csv_encoding: str = 'utf-8'

    # Request pacing
    request_delay: float = 0.1
    write_delay: float = 0.12
    rate_limit_backoff: float = 1.0
    max_retries: int = 3
    request_timeout: float = 30.0

    # Logging settings
    log_level: str = 'INFO'

    # Output settings
    output_format: str = 'text'  # text, json

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> 'Config':
        """Create configuration from environment variables.

        Values from ``env_file`` (or ``config.env`` in the working
        directory, falling back to ``.env``) fill in variables that are not
        already set in the environment.

        Args:
            env_file: Optional path to env file

        Returns:
            Config: Configuration instance

        Raises:
            ValueError: If required environment variables are missing
        """
        if env_file:
            load_dotenv(env_file)
        elif DEFAULT_ENV_FILE.exists():
            load_dotenv(DEFAULT_ENV_FILE)
        else:
            load_dotenv()

        api_key = os.getenv('CLICKUP_API_KEY')
        if not api_key:
            raise ValueError("CLICKUP_API_KEY environment variable is required")
        list_id = os.getenv('CRM_LIST_ID')
        if not list_id:
            raise ValueError("CRM_LIST_ID environment variable is required")

        try:
            return cls(
                clickup_api_key=api_key,
                crm_list_id=list_id,
                task_status=os.getenv('TASK_STATUS', 'Engaged'),
                clickup_base_url=os.getenv('CLICKUP_BASE_URL', CLICKUP_API_BASE),
                csv_path=Path(os.getenv('CSV_PATH', 'data/brewery_data.csv')),
                csv_encoding=os.getenv('CSV_ENCODING', 'utf-8'),
                request_delay=float(os.getenv('REQUEST_DELAY', '0.1')),
                write_delay=float(os.getenv('WRITE_DELAY', '0.12')),
                rate_limit_backoff=float(os.getenv('RATE_LIMIT_BACKOFF', '1.0')),
                max_retries=int(os.getenv('MAX_RETRIES', '3')),
                request_timeout=float(os.getenv('REQUEST_TIMEOUT', '30')),
                log_level=os.getenv('LOG_LEVEL', 'INFO'),
                output_format=os.getenv('OUTPUT_FORMAT', 'text')
            )
        except ValueError as e:
            raise ValueError(f"Invalid numeric setting: {e}") from e

    def validate(self) -> bool:
        """Validate configuration settings.

        Returns:
            bool: True if configuration is valid

        Raises:
            ValueError: If a setting is out of range
        """
        for name in ('request_delay', 'write_delay', 'rate_limit_backoff'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

        valid_formats = ['text', 'json']
        if self.output_format not in valid_formats:
            raise ValueError(f"output_format must be one of: {', '.join(valid_formats)}")

        return True
