"""Error tracking and aggregation for CRM update runs."""

from collections import defaultdict
from typing import Any, Dict, List, Optional, Set
import logging


class ErrorTracker:
    """Count errors by type and keep a few samples of each."""

    def __init__(self, max_samples: int = 3):
        """Initialize error tracker.

        Args:
            max_samples: Maximum number of samples to store per error type
        """
        self.error_counts: Dict[str, int] = defaultdict(int)
        self.error_samples: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.max_samples = max_samples
        self._seen: Set[str] = set()

    def add_error(self, error_type: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Record an error occurrence.

        Repeats of the same type and message are counted once.

        Args:
            error_type: Category of error, e.g. UPDATE_FAILED
            message: Error message
            context: Task id, field name and similar details
        """
        key = f"{error_type}:{message}"
        if key in self._seen:
            return
        self._seen.add(key)
        self.error_counts[error_type] += 1
        if len(self.error_samples[error_type]) < self.max_samples:
            self.error_samples[error_type].append({'message': message, 'context': context or {}})

    @property
    def total(self) -> int:
        return sum(self.error_counts.values())

    def get_summary(self) -> Dict[str, Any]:
        return {
            'counts': dict(self.error_counts),
            'samples': dict(self.error_samples)
        }

    def log_summary(self, logger: logging.Logger) -> None:
        """Write counts and samples to a logger as warnings."""
        if not self.error_counts:
            return

        logger.warning("Error summary:")
        for error_type, count in self.error_counts.items():
            logger.warning(f"{error_type} ({count} occurrences)")
            for sample in self.error_samples[error_type]:
                details = ', '.join(f"{k}={v}" for k, v in sample['context'].items())
                logger.warning(f"  - {sample['message']}" + (f" [{details}]" if details else ''))
