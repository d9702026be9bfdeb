# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
"""
Declarative surface of the management group policy definition resource.

`FIELDS` describes each attribute the way a provider schema does
(required, immutable, json encoded, enumerated). The json schema used
for validation is generated from it, and so is the diff used to plan
changes against the current state.
"""
import json
import logging

from jsonschema import Draft7Validator as JsonSchemaValidator, FormatChecker

from c7n_mgpolicy import constants
from c7n_mgpolicy.model import PolicyMode, PolicyType
from c7n_mgpolicy.utils import StringUtils, json_equal, management_group_name

log = logging.getLogger('custodian.mgpolicy.schema')


FIELDS = {
    constants.FIELD_NAME: {
        'required': True, 'force_new': True},
    constants.FIELD_POLICY_TYPE: {
        'required': True, 'force_new': True, 'enum': PolicyType.values()},
    constants.FIELD_MODE: {
        'required': True, 'force_new': True, 'enum': PolicyMode.values()},
    constants.FIELD_DISPLAY_NAME: {
        'required': True},
    constants.FIELD_DESCRIPTION: {},
    constants.FIELD_POLICY_RULE: {'json': True},
    constants.FIELD_METADATA: {'json': True},
    constants.FIELD_PARAMETERS: {'json': True},
    constants.FIELD_MANAGEMENT_GROUP_ID: {
        'required': True, 'force_new': True},
}

format_checker = FormatChecker()


@format_checker.checks('json', raises=ValueError)
def is_json_string(value):
    if not isinstance(value, str) or value == '':
        return True
    if not isinstance(json.loads(value), dict):
        raise ValueError("expected a json object")
    return True


def generate():
    properties = {}
    for name, spec in FIELDS.items():
        prop = {'type': 'string'}
        if spec.get('required'):
            prop['minLength'] = 1
        if spec.get('enum'):
            # values are accepted in any case, the api normalizes them
            prop['pattern'] = '(?i)^({})$'.format('|'.join(spec['enum']))
        if spec.get('json'):
            prop['format'] = 'json'
        properties[name] = prop

    return {
        '$schema': 'http://json-schema.org/draft-07/schema#',
        'id': 'http://schema.cloudcustodian.io/v0/%s.json' % constants.RESOURCE_TYPE,
        'type': 'object',
        'additionalProperties': False,
        'required': [name for name, spec in FIELDS.items() if spec.get('required')],
        'properties': properties,
    }


def validate(data, schema=None):
    """Validate resource attributes, returning a list of errors.

    An empty list means the data is valid.
    """
    if schema is None:
        schema = generate()
        JsonSchemaValidator.check_schema(schema)

    validator = JsonSchemaValidator(schema, format_checker=format_checker)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    for e in errors:
        if e.validator == 'format' and e.absolute_path:
            e.message = "{} is not a valid json string: {}".format(
                e.absolute_path[-1], e.cause or e.message)
    return errors


def _blank(value):
    return value is None or value == ''


def field_equal(field, old, new):
    """Equality under the field's diff suppression rules."""
    if _blank(old) and _blank(new):
        return True
    spec = FIELDS.get(field, {})
    if spec.get('json'):
        return json_equal(old, new)
    if spec.get('enum'):
        return StringUtils.equal(old, new)
    if field == constants.FIELD_MANAGEMENT_GROUP_ID:
        return StringUtils.equal(management_group_name(old), management_group_name(new))
    return old == new


def diff(old, new):
    """Changed fields between two attribute sets, as {field: (old, new)}."""
    changes = {}
    for field in FIELDS:
        a, b = old.get(field), new.get(field)
        if not field_equal(field, a, b):
            changes[field] = (a, b)
    return changes


def requires_replacement(changes):
    return [f for f in changes if FIELDS[f].get('force_new')]
