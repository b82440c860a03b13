"""
CLI module for the reconciler package.
Provides command-line interface functionality and utilities.

The click group itself lives in ``reconciler.cli.main``.
"""

from .base import BaseCommand, CsvInputCommand
from .config import Config
from .logging import setup_logging, get_logger

__all__ = ['BaseCommand', 'CsvInputCommand', 'Config', 'setup_logging', 'get_logger']
