# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
import json

from jsonschema import Draft7Validator

from .common import BaseTest, MANAGEMENT_GROUP_SCOPE, POLICY_RULE, definition_attributes
from c7n_mgpolicy import schema


class SchemaTest(BaseTest):

    def test_generated_schema_is_valid(self):
        generated = schema.generate()
        Draft7Validator.check_schema(generated)
        self.assertEqual(
            sorted(generated['required']),
            ['display_name', 'management_group_id', 'mode', 'name', 'policy_type'])
        self.assertFalse(generated['additionalProperties'])
        self.assertEqual(generated['properties']['policy_rule']['format'], 'json')

    def test_valid(self):
        self.assertEqual(schema.validate(definition_attributes()), [])
        self.assertEqual(
            schema.validate(definition_attributes(
                policy_type='builtin', mode='INDEXED', description='',
                policy_rule='', metadata='', parameters='')),
            [])

    def test_optional_fields_may_be_omitted(self):
        data = definition_attributes()
        for field in ('description', 'policy_rule', 'metadata', 'parameters'):
            data.pop(field)
        self.assertEqual(schema.validate(data), [])

    def test_invalid_enum(self):
        errors = schema.validate(definition_attributes(mode='Sometimes'))
        self.assertEqual(len(errors), 1)
        self.assertEqual(list(errors[0].absolute_path), ['mode'])

    def test_invalid_json_document(self):
        errors = schema.validate(definition_attributes(parameters='{"a": '))
        self.assertEqual(len(errors), 1)
        self.assertIn('parameters is not a valid json string', errors[0].message)

    def test_json_document_must_be_object(self):
        errors = schema.validate(definition_attributes(policy_rule='[1, 2]', parameters='42'))
        self.assertEqual(
            [list(e.absolute_path) for e in errors], [['parameters'], ['policy_rule']])
        self.assertIn('expected a json object', errors[1].message)

    def test_missing_required(self):
        data = definition_attributes()
        data.pop('display_name')
        errors = schema.validate(data)
        self.assertEqual(len(errors), 1)
        self.assertIn("'display_name' is a required property", errors[0].message)

    def test_empty_required(self):
        errors = schema.validate(definition_attributes(name=''))
        self.assertEqual([list(e.absolute_path) for e in errors], [['name']])

    def test_unknown_field(self):
        errors = schema.validate(definition_attributes(location='westeurope'))
        self.assertEqual(len(errors), 1)
        self.assertIn('location', errors[0].message)


class DiffTest(BaseTest):

    def test_json_documents_compare_semantically(self):
        self.assertTrue(schema.field_equal(
            'policy_rule', json.dumps(POLICY_RULE), json.dumps(POLICY_RULE, indent=8)))
        self.assertFalse(schema.field_equal('policy_rule', json.dumps(POLICY_RULE), '{}'))

    def test_blank_values_are_equal(self):
        self.assertTrue(schema.field_equal('description', None, ''))
        self.assertTrue(schema.field_equal('metadata', '', None))
        self.assertFalse(schema.field_equal('description', None, 'text'))

    def test_enums_compare_case_insensitively(self):
        self.assertTrue(schema.field_equal('policy_type', 'custom', 'Custom'))
        self.assertFalse(schema.field_equal('mode', 'All', 'Indexed'))

    def test_management_group_by_name_or_scope(self):
        self.assertTrue(schema.field_equal('management_group_id', MANAGEMENT_GROUP_SCOPE, 'MG1'))
        self.assertFalse(schema.field_equal('management_group_id', MANAGEMENT_GROUP_SCOPE, 'mg2'))

    def test_other_fields_compare_exactly(self):
        self.assertFalse(schema.field_equal('display_name', 'Name', 'name'))

    def test_diff(self):
        old = definition_attributes(management_group_id=MANAGEMENT_GROUP_SCOPE)
        new = definition_attributes(
            display_name='renamed', policy_rule=json.dumps(POLICY_RULE), name='pol2')

        changes = schema.diff(old, new)

        self.assertEqual(sorted(changes), ['display_name', 'name'])
        self.assertEqual(changes['name'], ('pol1', 'pol2'))
        self.assertEqual(schema.requires_replacement(changes), ['name'])

    def test_no_replacement_for_mutable_fields(self):
        changes = schema.diff(
            definition_attributes(),
            definition_attributes(description='', metadata='{"category": "Tags"}'))
        self.assertEqual(sorted(changes), ['description', 'metadata'])
        self.assertEqual(schema.requires_replacement(changes), [])
