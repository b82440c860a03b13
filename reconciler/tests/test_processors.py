"""Tests for the CSV and comment field processors."""
import pytest

from ..crm.fields import FieldIndex
from ..crm.models import CrmTask, CustomField
from ..processors.base import ProcessingStats
from ..processors.comment_fields import CommentFieldProcessor
from ..processors.csv_fields import CsvFieldProcessor
from ..processors.error_tracker import ErrorTracker
from .conftest import FakeClient


def csv_processor(fake_client, field_index, candidates, **kwargs):
    kwargs.setdefault('write_delay', 0)
    return CsvFieldProcessor(fake_client, field_index, candidates, **kwargs)


def planned_values(processor, task_id):
    return {u.field_id: u.value for u in processor.planned if u.task_id == task_id}


def test_dry_run_plans_without_writing(fake_client, field_index, candidates, engaged_tasks):
    processor = csv_processor(fake_client, field_index, candidates, dry_run=True)

    stats = processor.process(engaged_tasks)

    assert fake_client.writes == []
    assert planned_values(processor, 't1') == {
        'f-address': '2100 Locust St',
        'f-city': 'St. Louis',
        'f-state': 'MO',
        'f-zip': '63103',
        'f-website': 'https://schlafly.com',
        'f-phone': '+13142412337',
        'f-employees': 'opt-large',
    }
    assert planned_values(processor, 't2') == {
        'f-address': '4465 Manchester Ave',
        'f-state': 'MO',
        'f-zip': '63110',
        'f-website': 'https://urbanchestnut.com',
        'f-phone': '+13142220143',
        'f-employees': 'opt-medium',
    }
    assert stats['tasks_processed'] == 3
    assert stats['updates_planned'] == 13
    assert stats['updates_applied'] == 0
    assert stats['updates_skipped_existing'] == 1
    assert stats['tasks_without_updates'] == 1
    assert stats['matched_tasks'] == 2
    assert stats['unmatched_tasks'] == 1


def test_matches_recorded_per_task(fake_client, field_index, candidates, engaged_tasks):
    processor = csv_processor(fake_client, field_index, candidates, dry_run=True)
    processor.process(engaged_tasks)
    assert processor.matches['t1'].tier.value == 'high-coverage'
    assert processor.matches['t2'].tier.value == 'contains'
    assert not processor.matches['t3'].matched


def test_overwrite_replaces_existing_values(fake_client, field_index, candidates, engaged_tasks):
    processor = csv_processor(fake_client, field_index, candidates, dry_run=True, overwrite=True)
    stats = processor.process(engaged_tasks)
    assert stats['updates_planned'] == 14
    assert planned_values(processor, 't2')['f-city'] == 'St. Louis'


def test_limit_stops_after_n_tasks(fake_client, field_index, candidates, engaged_tasks):
    processor = csv_processor(fake_client, field_index, candidates, dry_run=True, limit=1)
    stats = processor.process(engaged_tasks)
    assert stats['tasks_processed'] == 1
    assert {u.task_id for u in processor.planned} == {'t1'}


def test_updates_written_in_order(fake_client, field_index, candidates, engaged_tasks):
    processor = csv_processor(fake_client, field_index, candidates)
    stats = processor.process(engaged_tasks)
    assert stats['updates_applied'] == 13
    assert fake_client.writes[0] == ('t1', 'f-address', '2100 Locust St')
    assert [w[0] for w in fake_client.writes] == ['t1'] * 7 + ['t2'] * 6


def test_failed_writes_are_counted_and_deduplicated(engaged_tasks, crm_fields, field_index, candidates):
    client = FakeClient(tasks=engaged_tasks, fields=crm_fields, fail_fields={'f-phone'})
    processor = csv_processor(client, field_index, candidates)

    stats = processor.process(engaged_tasks)

    assert stats['updates_applied'] == 11
    assert stats['failed_updates'] == 2
    assert stats['total_errors'] == 2
    errors = processor.get_summary()['errors']
    assert errors['counts'] == {'UPDATE_FAILED': 1}
    assert errors['samples']['UPDATE_FAILED'][0]['message'] == "400 {'err': 'Value is invalid'}"


def test_error_limit_stops_run(engaged_tasks, crm_fields, field_index, candidates):
    client = FakeClient(tasks=engaged_tasks, fields=crm_fields, fail_fields={'f-phone'})
    processor = csv_processor(client, field_index, candidates, error_limit=1)
    stats = processor.process(engaged_tasks)
    assert stats['tasks_processed'] == 1
    assert stats['failed_updates'] == 1


def test_error_limit_counts_task_lookup_failures(crm_fields, field_index):
    tasks = [CrmTask(id=f't{i}', name=f'Brewery {i}') for i in range(5)]
    client = FakeClient(tasks=tasks, fields=crm_fields, fail_comments={t.id for t in tasks})
    processor = CommentFieldProcessor(client, field_index, write_delay=0, error_limit=1)
    stats = processor.process(tasks)
    assert stats['tasks_processed'] == 1
    assert stats['total_errors'] == 1
    assert stats['tasks_without_updates'] == 0


def test_missing_employee_option_is_skipped(fake_client, candidates, engaged_tasks):
    fields = FieldIndex([
        CustomField(id='f-city', name='City', type='short_text'),
        CustomField(id='f-employees', name='Employee Count', type='drop_down'),
    ])
    processor = csv_processor(fake_client, fields, candidates, dry_run=True)
    processor.process(engaged_tasks[:1])
    assert planned_values(processor, 't1') == {'f-city': 'St. Louis'}


def test_list_without_any_csv_field_is_rejected(fake_client, candidates, engaged_tasks):
    processor = csv_processor(fake_client, FieldIndex([]), candidates, dry_run=True)
    with pytest.raises(ValueError, match='none of the fields'):
        processor.process(engaged_tasks)


def test_validate_warns_about_missing_fields(fake_client, candidates):
    fields = FieldIndex([CustomField(id='f-city', name='City')])
    critical, warnings = csv_processor(fake_client, fields, []).validate()
    assert critical == []
    assert warnings[0] == "CSV contains no rows to match against"
    assert 'Employee Count' in warnings[1]


def test_summary_is_json_ready(fake_client, field_index, candidates, engaged_tasks):
    processor = csv_processor(fake_client, field_index, candidates, dry_run=True, limit=1)
    processor.process(engaged_tasks)
    summary = processor.get_summary()
    assert summary['dry_run'] is True
    assert summary['updates'][0] == {
        'task_id': 't1',
        'task_name': 'Schlafly Beer',
        'field_id': 'f-address',
        'field_name': 'Address',
        'value': '2100 Locust St',
    }
    assert isinstance(summary['stats']['started_at'], str)


@pytest.fixture
def comment_client(engaged_tasks, crm_fields):
    return FakeClient(
        tasks=engaged_tasks,
        fields=crm_fields,
        comments={
            't1': ['Name: Dana Reyes', 'Email: dana@schlafly.com\nPhone: 314-555-0101'],
            't2': ['Great tasting room, follow up in May.'],
        },
        fail_comments={'t3'},
    )


def test_comment_processor(comment_client, field_index, engaged_tasks):
    processor = CommentFieldProcessor(comment_client, field_index, write_delay=0)

    stats = processor.process(engaged_tasks)

    assert comment_client.writes == [
        ('t1', 'f-contact', 'Dana Reyes'),
        ('t1', 'f-email', 'dana@schlafly.com'),
        ('t1', 'f-phone', '+13145550101'),
    ]
    assert stats['tasks_processed'] == 3
    assert stats['tasks_with_contacts'] == 1
    assert stats['tasks_without_updates'] == 1
    assert stats['total_errors'] == 1
    assert processor.error_tracker.error_counts['TASK_LOOKUP_FAILED'] == 1


def test_comment_processor_keeps_existing_values(comment_client, field_index):
    task = CrmTask(id='t1', name='Schlafly Beer', custom_fields={'f-email': 'owner@schlafly.com'})
    processor = CommentFieldProcessor(comment_client, field_index, dry_run=True)
    processor.process([task])
    assert {u.field_id for u in processor.planned} == {'f-contact', 'f-phone'}
    assert processor.stats.updates_skipped_existing == 1


def test_comment_processor_needs_contact_fields(comment_client, engaged_tasks):
    processor = CommentFieldProcessor(comment_client, FieldIndex([CustomField(id='f-city', name='City')]))
    with pytest.raises(ValueError, match='no contact fields'):
        processor.process(engaged_tasks)


def test_processing_stats_counters():
    stats = ProcessingStats()
    stats.custom_counter += 2
    assert stats['custom_counter'] == 2
    assert stats.to_dict()['completed_at'] is None
    with pytest.raises(AttributeError):
        stats.__deepcopy__


def test_error_tracker_samples():
    tracker = ErrorTracker(max_samples=2)
    for i in range(4):
        tracker.add_error('UPDATE_FAILED', f'error {i}', {'task_id': f't{i}'})
    tracker.add_error('UPDATE_FAILED', 'error 0')
    assert tracker.total == 4
    assert len(tracker.error_samples['UPDATE_FAILED']) == 2
