"""Shared test fixtures and utilities."""

import pytest

from ..crm.client import ClickUpError
from ..crm.fields import FieldIndex
from ..crm.models import CrmTask, CustomField, FieldOption
from ..matcher import build_candidates
from ..utils.csv_table import load_table, table_to_frame

BREWERY_CSV = (
    'Company Name,Address,City,State,ZIP Code,Website,Twitter,Linked-In,Facebook,'
    'Phone Number Combined,Location Employee Size Actual,Location Employee Size Range\r\n'
    '"The Saint Louis Brewery dba Schlafly","2100 Locust St","St. Louis",MO,63103,'
    'https://schlafly.com,,,,314-241-2337,,51-200\r\n'
    '"Urban Chestnut Brewing Company","4465 Manchester Ave","St. Louis",MO,63110,'
    'https://urbanchestnut.com,,,,(314) 222-0143,80,\r\n'
    '"Perennial Artisan Ales","8125 Michigan Ave","St. Louis",MO,63111\r\n'
)


class FakeClient:
    """In-memory stand-in for ClickUpClient."""

    def __init__(self, tasks=None, fields=None, comments=None, fail_fields=(), fail_comments=()):
        self.tasks = list(tasks or [])
        self.fields = list(fields or [])
        self.comments = dict(comments or {})
        self.fail_fields = set(fail_fields)
        self.fail_comments = set(fail_comments)
        self.writes = []

    def iter_tasks(self, list_id, status=None):
        yield from self.tasks

    def get_list_fields(self, list_id):
        return self.fields

    def get_task_comments(self, task_id):
        if task_id in self.fail_comments:
            raise ClickUpError("comments unavailable", status=500, body=None)
        return self.comments.get(task_id, [])

    def set_custom_field(self, task_id, field_id, value):
        if field_id in self.fail_fields:
            raise ClickUpError("update failed", status=400, body={'err': 'Value is invalid'})
        self.writes.append((task_id, field_id, value))


@pytest.fixture
def brewery_csv():
    return BREWERY_CSV


@pytest.fixture
def candidates(brewery_csv):
    header, rows = load_table(brewery_csv)
    return build_candidates(table_to_frame(header, rows), 'Company Name')


@pytest.fixture
def crm_fields():
    """Custom fields of a CRM list with every field the processors fill."""
    return [
        CustomField(id='f-address', name='Address', type='short_text'),
        CustomField(id='f-city', name='City', type='short_text'),
        CustomField(id='f-state', name='State', type='short_text'),
        CustomField(id='f-zip', name='ZIP Code', type='short_text'),
        CustomField(id='f-website', name='Company_Website', type='url'),
        CustomField(id='f-twitter', name='Twitter', type='url'),
        CustomField(id='f-linkedin', name='LinkedIn', type='url'),
        CustomField(id='f-facebook', name='Facebook', type='url'),
        CustomField(id='f-phone', name='Contact (Main) Phone Number', type='phone'),
        CustomField(
            id='f-employees',
            name='Employee Count',
            type='drop_down',
            options=[
                FieldOption(id='opt-small', name='0-25'),
                FieldOption(id='opt-medium', name='26-100'),
                FieldOption(id='opt-large', name='101+'),
            ],
        ),
        CustomField(id='f-contact', name='Contact (Main)', type='short_text'),
        CustomField(id='f-email', name='Contact (Main) Email', type='email'),
        CustomField(id='f-title', name='Contact Title', type='short_text'),
    ]


@pytest.fixture
def field_index(crm_fields):
    return FieldIndex(crm_fields)


@pytest.fixture
def engaged_tasks():
    return [
        CrmTask(id='t1', name='Schlafly Beer', status='Engaged'),
        CrmTask(id='t2', name='Urban Chestnut', status='Engaged', custom_fields={'f-city': 'Existing City'}),
        CrmTask(id='t3', name='Riverside Taproom', status='Engaged'),
    ]


@pytest.fixture
def fake_client(engaged_tasks, crm_fields):
    return FakeClient(tasks=engaged_tasks, fields=crm_fields)
