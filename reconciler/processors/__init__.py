"""
Processors that plan and apply CRM field updates.
"""

from .base import BaseProcessor, PlannedUpdate, ProcessingStats
from .csv_fields import CsvFieldProcessor
from .comment_fields import CommentFieldProcessor

__all__ = ['BaseProcessor', 'PlannedUpdate', 'ProcessingStats', 'CsvFieldProcessor', 'CommentFieldProcessor']
