# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
from azure.core.exceptions import ResourceNotFoundError
from azure.mgmt.resource.policy import models
from mock import Mock

from .common import BaseTest, MANAGEMENT_GROUP_SCOPE, POLICY_RULE
from c7n_mgpolicy.api import PolicyDefinitionsApi


class PolicyDefinitionsApiTest(BaseTest):

    def setUp(self):
        super(PolicyDefinitionsApiTest, self).setUp()
        self.client = Mock()
        self.operations = self.client.policy_definitions
        self.api = PolicyDefinitionsApi(self.client)

    def test_create_or_update(self):
        self.operations.create_or_update_at_management_group.return_value = \
            models.PolicyDefinition(policy_type='Custom', display_name='allowed locations')

        result = self.api.create_or_update(
            'pol1', MANAGEMENT_GROUP_SCOPE,
            {'name': 'pol1', 'properties': {
                'policyType': 'Custom', 'mode': 'All',
                'displayName': 'allowed locations', 'policyRule': POLICY_RULE}})

        args = self.operations.create_or_update_at_management_group.call_args[1]
        self.assertEqual(args['policy_definition_name'], 'pol1')
        self.assertEqual(args['management_group_id'], 'mg1')
        self.assertIsInstance(args['parameters'], models.PolicyDefinition)
        self.assertEqual(args['parameters'].display_name, 'allowed locations')
        self.assertEqual(args['parameters'].policy_rule, POLICY_RULE)
        self.assertEqual(result['properties']['displayName'], 'allowed locations')

    def test_get(self):
        self.operations.get_at_management_group.return_value = models.PolicyDefinition(
            policy_type='Custom', mode='Indexed', display_name='dn')

        result = self.api.get('pol1', 'mg1')

        self.operations.get_at_management_group.assert_called_once_with(
            policy_definition_name='pol1', management_group_id='mg1')
        self.assertEqual(result['properties']['mode'], 'Indexed')
        self.assertEqual(result['properties']['policyType'], 'Custom')

    def test_get_propagates_errors(self):
        self.operations.get_at_management_group.side_effect = ResourceNotFoundError('gone')

        with self.assertRaises(ResourceNotFoundError):
            self.api.get('pol1', MANAGEMENT_GROUP_SCOPE)

    def test_delete(self):
        self.assertIsNone(self.api.delete('pol1', MANAGEMENT_GROUP_SCOPE + '/'))
        self.operations.delete_at_management_group.assert_called_once_with(
            policy_definition_name='pol1', management_group_id='mg1')

    def test_to_body(self):
        self.assertIsNone(PolicyDefinitionsApi.to_body(None))

        result = Mock()
        result.serialize.return_value = {'id': '/x'}
        self.assertEqual(PolicyDefinitionsApi.to_body(result), {'id': '/x'})
        result.serialize.assert_called_once_with(keep_readonly=True)
