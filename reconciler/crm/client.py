"""ClickUp API client.

Requests are issued strictly one at a time. Rate limited responses
(HTTP 429) are retried with exponential backoff; every other non-2xx
response raises ClickUpError.
"""

import logging
import time
from typing import Any, Dict, Iterator, List, Optional

import requests

from .models import CrmTask, CustomField

CLICKUP_API_BASE = 'https://api.clickup.com/api/v2'


class ClickUpError(Exception):
    """Error response from the ClickUp API."""

    def __init__(self, message: str, status: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body


class RateLimitError(ClickUpError):
    """Rate limit still hit after all retries."""


def comment_text(comment: Dict[str, Any]) -> str:
    """Flatten a ClickUp comment into plain text.

    Comments carry either a rich-text segment list in ``comment`` or plain
    text in ``text_content`` / ``text``.
    """
    if not comment:
        return ''
    value = comment.get('comment')
    if value is None:
        value = comment.get('text_content')
    if value is None:
        value = comment.get('text')
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ''.join(str(segment.get('text') or '') for segment in value if isinstance(segment, dict))
    return ''


class ClickUpClient:
    """Minimal ClickUp v2 client for list tasks, fields and comments."""

    def __init__(
        self,
        api_key: str,
        base_url: str = CLICKUP_API_BASE,
        request_delay: float = 0.1,
        rate_limit_backoff: float = 1.0,
        max_retries: int = 3,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """Initialize client.

        Args:
            api_key: Personal API token
            base_url: API root URL
            request_delay: Pause between paginated requests, in seconds
            rate_limit_backoff: First wait after a 429 response, doubled per retry
            max_retries: Retries after a 429 before giving up
            timeout: Per-request timeout in seconds
            session: Optional preconfigured requests session
        """
        self.base_url = base_url.rstrip('/')
        self.request_delay = request_delay
        self.rate_limit_backoff = rate_limit_backoff
        self.max_retries = max_retries
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': api_key,
            'Accept': 'application/json',
        })
        self.logger = logging.getLogger(self.__class__.__name__)

    def _request(self, method: str, endpoint: str, params: Optional[Dict[str, Any]] = None,
                 body: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        for attempt in range(self.max_retries + 1):
            try:
                resp = self.session.request(method, url, params=params, json=body, timeout=self.timeout)
            except requests.RequestException as e:
                raise ClickUpError(f"{method} {endpoint} failed: {e}") from e

            if resp.status_code == 429 and attempt < self.max_retries:
                wait = self.rate_limit_backoff * (2 ** attempt)
                self.logger.warning(f"Rate limited on {method} {endpoint}, retrying in {wait:.1f}s")
                time.sleep(wait)
                continue

            payload = self._parse_body(resp)
            if resp.status_code == 429:
                raise RateLimitError(
                    f"{method} {endpoint} still rate limited after {self.max_retries} retries",
                    status=429, body=payload,
                )
            if not 200 <= resp.status_code < 300:
                raise ClickUpError(
                    f"ClickUp API error: {resp.status_code} on {method} {endpoint}",
                    status=resp.status_code, body=payload,
                )
            return payload

    @staticmethod
    def _parse_body(resp: requests.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def iter_tasks(self, list_id: str, status: Optional[str] = None) -> Iterator[CrmTask]:
        """Yield every task of a list, page by page.

        Args:
            list_id: CRM list id
            status: Only tasks with this status, if given

        Yields:
            CrmTask for each task
        """
        page = 0
        while True:
            params = {'page': str(page), 'order_by': 'created', 'subtasks': 'true'}
            if status:
                params['statuses[]'] = status
            data = self._request('GET', f"list/{list_id}/task", params=params) or {}
            tasks = data.get('tasks') or []
            self.logger.debug(f"Page {page}: {len(tasks)} tasks")
            if not tasks:
                return
            for task in tasks:
                yield CrmTask.from_api(task)
            page += 1
            if self.request_delay:
                time.sleep(self.request_delay)

    def get_list_fields(self, list_id: str) -> List[CustomField]:
        """Custom fields accessible on a list."""
        data = self._request('GET', f"list/{list_id}/field") or {}
        return [CustomField.from_api(f) for f in data.get('fields') or []]

    def get_task_comments(self, task_id: str) -> List[str]:
        """Plain text of every comment on a task."""
        data = self._request('GET', f"task/{task_id}/comment") or {}
        return [comment_text(c) for c in data.get('comments') or []]

    def set_custom_field(self, task_id: str, field_id: str, value: Any) -> None:
        """Set a custom field value on a task."""
        self._request('POST', f"task/{task_id}/field/{field_id}", body={'value': value})
