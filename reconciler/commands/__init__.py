"""
Command implementations for the reconciler CLI.
Each submodule provides specific command functionality.
"""

from .tasks import ListTasksCommand
from .fields import DumpFieldsCommand, FieldOptionsCommand
from .match import MatchReportCommand
from .update import UpdateFromCsvCommand, UpdateFromCommentsCommand

__all__ = [
    'ListTasksCommand',
    'DumpFieldsCommand',
    'FieldOptionsCommand',
    'MatchReportCommand',
    'UpdateFromCsvCommand',
    'UpdateFromCommentsCommand'
]
