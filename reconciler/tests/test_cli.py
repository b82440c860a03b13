"""End-to-end tests for the reconciler CLI with an in-memory CRM."""
import json
import logging
import os

import pytest
from click.testing import CliRunner

from ..cli.main import cli
from .conftest import FakeClient
from .test_config import CONFIG_KEYS


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def env(tmp_path, monkeypatch):
    saved = dict(os.environ)
    for key in CONFIG_KEYS:
        os.environ.pop(key, None)
    os.environ.update({'CLICKUP_API_KEY': 'pk_test', 'CRM_LIST_ID': '901', 'WRITE_DELAY': '0'})
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture
def csv_file(env, brewery_csv):
    path = env / 'brewery_data.csv'
    path.write_text(brewery_csv, encoding='utf-8', newline='')
    return path


@pytest.fixture
def use_client(monkeypatch):
    """Make commands talk to the given fake client."""
    def install(client):
        monkeypatch.setattr('reconciler.cli.base.ClickUpClient', lambda **kwargs: client)
        return client
    return install


def run(*args):
    return CliRunner().invoke(cli, list(args))


def parse_json(output):
    """JSON document printed after any log lines."""
    lines = output.splitlines()
    start = next(i for i, line in enumerate(lines) if line in ('{', '['))
    return json.loads('\n'.join(lines[start:]))


def test_list_tasks(env, use_client, fake_client):
    use_client(fake_client)
    result = run('tasks', 'list')
    assert result.exit_code == 0, result.output
    assert 'Found 3 Engaged records:' in result.output
    assert '- Schlafly Beer (id: t1) [Engaged] https://app.clickup.com/t/t1' in result.output


def test_list_tasks_filtered_by_field(env, use_client, fake_client):
    use_client(fake_client)
    result = run('tasks', 'list', '--field', 'City', '--value', 'existing', '--json')
    assert result.exit_code == 0, result.output
    data = parse_json(result.output)
    assert data['count'] == 1
    assert data['items'][0]['id'] == 't2'
    assert data['items'][0]['matched_by'] == 'field:City'


def test_list_tasks_field_without_value(env, use_client, fake_client):
    use_client(fake_client)
    result = run('tasks', 'list', '--field', 'City')
    assert result.exit_code == 2


def test_dump_fields(env, use_client, fake_client):
    use_client(fake_client)
    result = run('fields', 'dump', '--json')
    assert result.exit_code == 0, result.output
    data = parse_json(result.output)
    assert len(data) == 13
    assert data[9]['options'][1] == {'id': 'opt-medium', 'name': '26-100'}


def test_field_options(env, use_client, fake_client):
    use_client(fake_client)
    result = run('fields', 'options', 'Employee Count')
    assert result.exit_code == 0, result.output
    assert "Options for 'Employee Count':" in result.output
    assert '- 26-100 (opt-medium)' in result.output


def test_field_options_unknown_field(env, use_client, fake_client):
    use_client(fake_client)
    result = run('fields', 'options', 'Nope')
    assert result.exit_code == 1
    assert 'Field not found: Nope' in result.output


def test_match_report(csv_file, use_client, fake_client):
    use_client(fake_client)
    result = run('match', 'report', '--csv', str(csv_file), '--json')
    assert result.exit_code == 0, result.output
    data = parse_json(result.output)
    assert data['total'] == 3
    assert data['tiers'] == {'high-coverage': 1, 'contains': 1, 'none': 1}
    assert data['matches'][0] == {
        'task_id': 't1',
        'task': 'Schlafly Beer',
        'match': 'The Saint Louis Brewery dba Schlafly',
        'score': 1.0,
        'tier': 'high-coverage',
    }


def test_match_report_text(csv_file, use_client, fake_client):
    use_client(fake_client)
    result = run('match', 'report', '--csv', str(csv_file), '--limit', '3')
    assert result.exit_code == 0, result.output
    assert '- Urban Chestnut -> Urban Chestnut Brewing Company (score 0.95, contains)' in result.output
    assert '- Riverside Taproom -> NO MATCH' in result.output


def test_match_report_uses_csv_path_setting(csv_file, use_client, fake_client):
    os.environ['CSV_PATH'] = str(csv_file)
    use_client(fake_client)
    result = run('match', 'report', '--json')
    assert result.exit_code == 0, result.output
    assert parse_json(result.output)['total'] == 3


def test_csv_without_company_column(env, use_client, fake_client):
    use_client(fake_client)
    bad = env / 'bad.csv'
    bad.write_text('Name,City\nSchlafly,St. Louis\n')
    result = run('match', 'report', '--csv', str(bad))
    assert result.exit_code == 1
    assert "CSV header does not include 'Company Name'" in result.output


def test_missing_csv_file(env, use_client, fake_client):
    use_client(fake_client)
    result = run('match', 'report')
    assert result.exit_code == 2


def test_update_from_csv_dry_run(csv_file, use_client, fake_client):
    use_client(fake_client)
    result = run('update', 'from-csv', '--csv', str(csv_file), '--dry-run')
    assert result.exit_code == 0, result.output
    assert 'Planned Updates: 13' in result.output
    assert 'Skipped (already set): 1' in result.output
    assert fake_client.writes == []


def test_update_from_csv_applies_updates(csv_file, use_client, fake_client):
    use_client(fake_client)
    result = run('update', 'from-csv', '--csv', str(csv_file), '--limit', '1', '--json')
    assert result.exit_code == 0, result.output
    data = parse_json(result.output)
    assert data['dry_run'] is False
    assert data['stats']['updates_applied'] == 7
    assert len(fake_client.writes) == 7


def test_update_from_csv_reports_failures(csv_file, use_client, engaged_tasks, crm_fields):
    client = use_client(FakeClient(tasks=engaged_tasks, fields=crm_fields, fail_fields={'f-phone'}))
    result = run('update', 'from-csv', '--csv', str(csv_file))
    assert result.exit_code == 1
    assert 'Applied Updates: 11' in result.output
    assert '2 updates failed' in result.output
    assert len(client.writes) == 11


def test_update_from_comments(env, use_client, engaged_tasks, crm_fields):
    client = use_client(FakeClient(
        tasks=engaged_tasks,
        fields=crm_fields,
        comments={'t1': ['Primary Contact: Dana Reyes\nRole: Head Brewer']},
    ))
    result = run('update', 'from-comments', '--dry-run', '--json')
    assert result.exit_code == 0, result.output
    data = parse_json(result.output)
    assert [(u['task_id'], u['field_name'], u['value']) for u in data['updates']] == [
        ('t1', 'Contact (Main)', 'Dana Reyes'),
        ('t1', 'Contact Title', 'Head Brewer'),
    ]
    assert data['stats']['tasks_with_contacts'] == 1
    assert client.writes == []


def test_missing_configuration(env):
    del os.environ['CLICKUP_API_KEY']
    result = run('tasks', 'list')
    assert result.exit_code == 1
    assert 'CLICKUP_API_KEY environment variable is required' in result.output


def test_output_format_setting(env, use_client, fake_client):
    os.environ['OUTPUT_FORMAT'] = 'json'
    use_client(fake_client)
    result = run('fields', 'options', 'Employee Count')
    assert result.exit_code == 0, result.output
    assert parse_json(result.output)['id'] == 'f-employees'
