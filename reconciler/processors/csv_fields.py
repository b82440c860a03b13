"""Processor that fills CRM fields from matched CSV rows."""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..crm.client import ClickUpClient
from ..crm.fields import (
    CSV_FIELD_COLUMNS,
    EMPLOYEE_ACTUAL_COLUMN,
    EMPLOYEE_COUNT_FIELD,
    EMPLOYEE_RANGE_COLUMN,
    PHONE_COLUMN,
    PHONE_FIELD,
    FieldIndex,
)
from ..crm.models import CrmTask
from ..matcher import CandidateRecord, MatchResult, NameMatcher
from ..utils.converters import canonical_us_phone, employee_bucket
from .base import BaseProcessor, PlannedUpdate


class CsvFieldProcessor(BaseProcessor):
    """Match each task to a CSV row and copy its details into the task.

    Text and URL fields are copied verbatim. The phone number is converted
    to +1XXXXXXXXXX (US numbers only) and the employee count is mapped to
    the drop-down option of its bucket.
    """

    def __init__(
        self,
        client: ClickUpClient,
        fields: FieldIndex,
        candidates: Sequence[CandidateRecord],
        matcher: Optional[NameMatcher] = None,
        **kwargs: Any
    ):
        """Initialize processor.

        Args:
            client: CRM API client
            fields: Custom fields of the CRM list
            candidates: CSV rows to match against
            matcher: Name matcher (default thresholds if omitted)
            **kwargs: Options passed to BaseProcessor
        """
        super().__init__(client, fields, **kwargs)
        self.candidates = list(candidates)
        self.matcher = matcher or NameMatcher()
        self.matches: Dict[str, MatchResult] = {}

        self.text_fields = {
            name: self.fields.get(name) for name in CSV_FIELD_COLUMNS
        }
        self.phone_field = self.fields.get(PHONE_FIELD)
        self.employee_field = self.fields.get(EMPLOYEE_COUNT_FIELD)

    def validate(self) -> Tuple[List[str], List[str]]:
        critical_issues = []
        warnings = []

        if not self.candidates:
            warnings.append("CSV contains no rows to match against")

        missing = [name for name, f in self.text_fields.items() if f is None]
        if self.phone_field is None:
            missing.append(PHONE_FIELD)
        if self.employee_field is None:
            missing.append(EMPLOYEE_COUNT_FIELD)
        if len(missing) == len(self.text_fields) + 2:
            critical_issues.append("CRM list has none of the fields filled from CSV")
        elif missing:
            warnings.append(f"CRM list is missing fields: {', '.join(missing)}")

        return critical_issues, warnings

    def plan_task(self, task: CrmTask) -> List[PlannedUpdate]:
        result = self.matcher.match(task.name, self.candidates)
        self.matches[task.id] = result
        if not result.matched:
            self.stats.unmatched_tasks += 1
            self.logger.info(f"No CSV match for {task.name}")
            return []

        self.stats.matched_tasks += 1
        row = result.record
        updates = []

        for field_name, column in CSV_FIELD_COLUMNS.items():
            updates.append(self._plan(task, self.text_fields[field_name], row.get(column)))

        phone = canonical_us_phone(row.get(PHONE_COLUMN))
        updates.append(self._plan(task, self.phone_field, phone))

        if self.employee_field is not None:
            bucket = employee_bucket(row.get(EMPLOYEE_ACTUAL_COLUMN), row.get(EMPLOYEE_RANGE_COLUMN))
            if bucket is not None:
                option_id = self.employee_field.option_id(bucket.value)
                if option_id is None:
                    self.logger.warning(f"'{self.employee_field.name}' has no option '{bucket.value}'")
                updates.append(self._plan(task, self.employee_field, option_id))

        updates = [u for u in updates if u is not None]
        if not updates:
            self.logger.info(f"No updates for {task.name} (match: {row.display_name}).")
        return updates
