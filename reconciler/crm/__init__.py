"""
ClickUp CRM access: API client, payload models and field lookup.
"""

from .client import ClickUpClient, ClickUpError, RateLimitError
from .fields import FieldIndex
from .models import CrmTask, CustomField

__all__ = ['ClickUpClient', 'ClickUpError', 'RateLimitError', 'FieldIndex', 'CrmTask', 'CustomField']
