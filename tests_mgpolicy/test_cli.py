# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
import json

import pytest
import yaml
from mock import patch

from .common import (FakePolicyDefinitionsApi, MANAGEMENT_GROUP_SCOPE, METADATA, POLICY_ID,
                     POLICY_RULE, definition_attributes, http_error)
from c7n_mgpolicy import cli
from c7n_mgpolicy.commands import load_definition
from c7n_mgpolicy.version import version


@pytest.fixture
def api():
    fake = FakePolicyDefinitionsApi()
    with patch('c7n_mgpolicy.commands.get_api', return_value=fake):
        yield fake


@pytest.fixture
def definition_file(tmp_path):
    def write(**overrides):
        data = definition_attributes(**overrides)
        data['policy_rule'] = POLICY_RULE
        data['metadata'] = METADATA
        data.pop('parameters')
        path = tmp_path / 'definition.yml'
        path.write_text(yaml.safe_dump(data))
        return str(path)
    return write


def existing(api, **properties):
    body = {'properties': {
        'policyType': 'Custom', 'mode': 'All',
        'displayName': 'acctestpol-allowed-locations',
        'description': 'Restrict resource locations',
        'policyRule': POLICY_RULE, 'metadata': METADATA}}
    body['properties'].update(properties)
    api.add('pol1', 'mg1', body)


def run(args, code=None):
    if code is None:
        cli.main(args)
        return
    with pytest.raises(SystemExit) as e:
        cli.main(args)
    assert e.value.code == code


def test_no_command(capsys):
    run([], code=2)
    assert 'usage' in capsys.readouterr().err


def test_version(capsys):
    run(['version'])
    assert capsys.readouterr().out.strip() == version


def test_load_definition_inline_documents(definition_file):
    data = load_definition(definition_file())
    assert json.loads(data['policy_rule']) == POLICY_RULE
    assert data['metadata'] == '{"category":"General"}'


def test_load_definition_not_a_mapping(tmp_path):
    path = tmp_path / 'list.yml'
    path.write_text('- a\n- b\n')
    with pytest.raises(ValueError):
        load_definition(str(path))


def test_validate(definition_file):
    run(['validate', definition_file()])


def test_validate_invalid(definition_file, tmp_path):
    run(['validate', definition_file(mode='Sometimes')], code=1)
    run(['validate', str(tmp_path / 'missing.yml')], code=1)


def test_apply_create(api, definition_file, capsys):
    run(['apply', definition_file(), '--poll-interval', '0'])

    state = yaml.safe_load(capsys.readouterr().out)
    assert state['id'] == POLICY_ID
    assert state['management_group_id'] == MANAGEMENT_GROUP_SCOPE
    assert json.loads(state['policy_rule']) == POLICY_RULE
    assert api.count('create_or_update') == 1
    assert api.count('get') == 12


def test_apply_noop(api, definition_file, capsys):
    existing(api)
    run(['apply', definition_file(), '--id', POLICY_ID, '-o', 'json'])

    state = json.loads(capsys.readouterr().out)
    assert state['id'] == POLICY_ID
    assert api.count('create_or_update') == 0


def test_apply_update(api, definition_file):
    existing(api, displayName='old name')
    run(['apply', definition_file(), '--id', POLICY_ID, '--poll-interval', '0'])

    assert api.count('delete') == 0
    stored = api.definitions[('mg1', 'pol1')]
    assert stored['properties']['displayName'] == 'acctestpol-allowed-locations'


def test_apply_replace(api, definition_file):
    existing(api, mode='Indexed')
    run(['apply', definition_file(), '--id', POLICY_ID, '--poll-interval', '0'])

    assert [c[0] for c in api.calls if c[0] != 'get'] == ['delete', 'create_or_update']
    assert api.definitions[('mg1', 'pol1')]['properties']['mode'] == 'All'


def test_apply_write_error(definition_file):
    fake = FakePolicyDefinitionsApi(write_error=http_error(403, 'AuthorizationFailed'))
    with patch('c7n_mgpolicy.commands.get_api', return_value=fake):
        run(['apply', definition_file(), '--poll-interval', '0'], code=1)


def test_plan(api, definition_file, capsys):
    existing(api, mode='Indexed', description='old')
    run(['plan', definition_file(), '--id', POLICY_ID, '-o', 'json'])

    result = json.loads(capsys.readouterr().out)
    assert result['action'] == 'replace'
    assert result['replace'] == ['mode']
    assert result['changes']['description'] == {
        'old': 'old', 'new': 'Restrict resource locations'}


def test_plan_create(api, definition_file, capsys):
    run(['plan', definition_file()])

    result = yaml.safe_load(capsys.readouterr().out)
    assert result['action'] == 'create'
    assert api.calls == []


def test_show(api, capsys):
    existing(api)
    run(['show', POLICY_ID, '-o', 'json'])

    state = json.loads(capsys.readouterr().out)
    assert state['name'] == 'pol1'
    assert state['policy_type'] == 'Custom'


def test_show_missing(api):
    run(['show', POLICY_ID], code=1)


def test_import(api, capsys):
    existing(api)
    run(['import', POLICY_ID])

    state = yaml.safe_load(capsys.readouterr().out)
    assert state['id'] == POLICY_ID
    assert state['display_name'] == 'acctestpol-allowed-locations'


def test_import_invalid_id(api):
    run(['import', '/subscriptions/x/providers/Microsoft.Authorization/policyDefinitions/p'],
        code=1)
    assert api.calls == []


def test_delete(api):
    existing(api)
    run(['delete', POLICY_ID])
    assert api.definitions == {}
