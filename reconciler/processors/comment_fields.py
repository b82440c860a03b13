"""Processor that fills CRM contact fields from task comments."""
from typing import Any, List, Tuple

from ..crm.client import ClickUpClient
from ..crm.fields import FieldIndex
from ..crm.models import CrmTask
from ..utils.contacts import extract_contact_info
from .base import BaseProcessor, PlannedUpdate


class CommentFieldProcessor(BaseProcessor):
    """Read each task's comments and store the labeled contact details."""

    def __init__(self, client: ClickUpClient, fields: FieldIndex, **kwargs: Any):
        super().__init__(client, fields, **kwargs)
        self.contact_fields = self.fields.preferred_contact_fields()

    def validate(self) -> Tuple[List[str], List[str]]:
        critical_issues = []
        warnings = []
        if not any(self.contact_fields.values()):
            critical_issues.append("CRM list has no contact fields to fill")
        return critical_issues, warnings

    def plan_task(self, task: CrmTask) -> List[PlannedUpdate]:
        comments = self.client.get_task_comments(task.id)
        info = extract_contact_info('\n'.join(comments))
        if not info:
            self.logger.info(f"No contact details in comments of {task.name} ({task.id}).")
            return []

        self.stats.tasks_with_contacts += 1
        updates = []
        for attr, value in info.to_dict().items():
            update = self._plan(task, self.contact_fields.get(attr), value)
            if update:
                updates.append(update)

        if not updates:
            self.logger.info(f"No updates for {task.name} ({task.id}).")
        return updates
