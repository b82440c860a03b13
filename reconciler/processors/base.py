"""Base processor for CRM field update runs."""
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging
import time

from ..crm.client import ClickUpClient, ClickUpError, RateLimitError
from ..crm.fields import FieldIndex
from ..crm.models import CrmTask, CustomField
from .error_tracker import ErrorTracker


class ProcessingStats:
    """Statistics for processing operations."""

    def __init__(self):
        """Initialize stats with default values."""
        self._stats = {
            'tasks_processed': 0,
            'tasks_without_updates': 0,
            'updates_planned': 0,
            'updates_applied': 0,
            'updates_skipped_existing': 0,
            'failed_updates': 0,
            'total_errors': 0,
            'started_at': datetime.now(timezone.utc),
            'completed_at': None
        }

    def __getitem__(self, key: str) -> Any:
        return self._stats[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._stats[key] = value

    def __getattr__(self, name: str) -> Any:
        """Get stat value by attribute name, creating counters on first use."""
        if name.startswith('__'):
            raise AttributeError(name)
        try:
            return self._stats[name]
        except KeyError:
            self._stats[name] = 0
            return 0

    def __setattr__(self, name: str, value: Any) -> None:
        if name == '_stats':
            super().__setattr__(name, value)
        else:
            self._stats[name] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary format."""
        result = {}
        for key, value in self._stats.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, float):
                result[key] = round(value, 3)
            else:
                result[key] = value
        return result


@dataclass(frozen=True)
class PlannedUpdate:
    """A custom field value to write to one task."""

    task_id: str
    task_name: str
    field_id: str
    field_name: str
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BaseProcessor(ABC):
    """Abstract base class for processors that fill CRM fields.

    Subclasses decide which values a task should receive. The base class
    handles the limit, the overwrite rule, dry runs, write pacing and
    error accounting.
    """

    def __init__(
        self,
        client: ClickUpClient,
        fields: FieldIndex,
        dry_run: bool = False,
        overwrite: bool = False,
        limit: Optional[int] = None,
        write_delay: float = 0.12,
        error_limit: int = 100,
        debug: bool = False
    ):
        """Initialize processor.

        Args:
            client: CRM API client used for writes and lookups
            fields: Custom fields of the CRM list
            dry_run: Plan and log updates without writing them
            overwrite: Replace field values that are already set
            limit: Maximum number of tasks to process
            write_delay: Pause after each write, in seconds
            error_limit: Maximum number of errors before stopping
            debug: Enable debug logging
        """
        self.client = client
        self.fields = fields
        self.dry_run = dry_run
        self.overwrite = overwrite
        self.limit = limit
        self.write_delay = write_delay
        self.error_limit = error_limit
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stats = ProcessingStats()
        self.error_tracker = ErrorTracker()
        self.planned: List[PlannedUpdate] = []

        if self.debug:
            self.logger.debug(
                f"Initialized {self.__class__.__name__} dry_run={dry_run} overwrite={overwrite} limit={limit}"
            )

    @abstractmethod
    def validate(self) -> Tuple[List[str], List[str]]:
        """Check that the run can proceed.

        Returns:
            Tuple of (critical_issues, warnings)
        """
        pass

    @abstractmethod
    def plan_task(self, task: CrmTask) -> List[PlannedUpdate]:
        """Decide which field values a task should receive."""
        pass

    def _plan(self, task: CrmTask, field: Optional[CustomField], value: Any) -> Optional[PlannedUpdate]:
        """Plan one field update unless the field is missing or already set."""
        if field is None or value is None or value == '':
            return None
        if not self.overwrite and task.has_value(field.id):
            self.stats.updates_skipped_existing += 1
            return None
        return PlannedUpdate(task.id, task.name, field.id, field.name, value)

    def process(self, tasks: Iterable[CrmTask]) -> Dict[str, Any]:
        """Plan and apply updates for each task.

        Args:
            tasks: CRM tasks, usually a lazy paginated iterator

        Returns:
            Processing statistics

        Raises:
            ValueError: If validation reports critical issues
        """
        critical_issues, warnings = self.validate()
        for warning in warnings:
            self.logger.warning(warning)
        if critical_issues:
            for issue in critical_issues:
                self.logger.error(issue)
            raise ValueError(f"Cannot process tasks: {'; '.join(critical_issues)}")

        for task in tasks:
            if self.limit is not None and self.stats.tasks_processed >= self.limit:
                self.logger.info(f"Stopping: task limit ({self.limit}) reached")
                break
            self.stats.tasks_processed += 1

            try:
                updates = self.plan_task(task)
            except ClickUpError as e:
                self._record_error('TASK_LOOKUP_FAILED', str(e), task_id=task.id, status=e.status)
            else:
                if not updates:
                    self.stats.tasks_without_updates += 1
                for update in updates:
                    self._apply(update)

            if self.stats.total_errors >= self.error_limit:
                self.logger.error(f"Stopping: error limit ({self.error_limit}) reached")
                break

        self.stats.completed_at = datetime.now(timezone.utc)
        self.logger.info(
            f"Done. Processed: {self.stats.tasks_processed}. "
            f"{'Planned' if self.dry_run else 'Applied'} updates: "
            f"{self.stats.updates_planned if self.dry_run else self.stats.updates_applied}."
        )
        self.error_tracker.log_summary(self.logger)
        return self.get_stats()

    def _apply(self, update: PlannedUpdate) -> None:
        self.planned.append(update)
        self.stats.updates_planned += 1
        self.logger.info(
            f"{'Would update' if self.dry_run else 'Updating'} {update.task_name} ({update.task_id}) "
            f"field '{update.field_name}' -> {update.value!r}"
        )
        if self.dry_run:
            return

        try:
            self.client.set_custom_field(update.task_id, update.field_id, update.value)
        except RateLimitError as e:
            self.stats.failed_updates += 1
            self._record_error('RATE_LIMITED', str(e), task_id=update.task_id, field=update.field_name)
            return
        except ClickUpError as e:
            self.stats.failed_updates += 1
            self._record_error('UPDATE_FAILED', f"{e.status} {e.body}", task_id=update.task_id,
                               field=update.field_name)
            return

        self.stats.updates_applied += 1
        if self.write_delay:
            time.sleep(self.write_delay)

    def _record_error(self, error_type: str, message: str, **context: Any) -> None:
        self.logger.error(f"{error_type}: {message}")
        self.stats.total_errors += 1
        self.error_tracker.add_error(error_type, message, context)

    def get_stats(self) -> Dict[str, Any]:
        """Get processing statistics."""
        return self.stats.to_dict()

    def get_summary(self) -> Dict[str, Any]:
        """Statistics, planned updates and errors as one JSON-ready dict."""
        return {
            'dry_run': self.dry_run,
            'stats': self.get_stats(),
            'updates': [u.to_dict() for u in self.planned],
            'errors': self.error_tracker.get_summary(),
        }
