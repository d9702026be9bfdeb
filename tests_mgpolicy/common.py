# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
import copy
import json
import logging
import unittest

from azure.core.exceptions import HttpResponseError

from c7n_mgpolicy.config import Config
from c7n_mgpolicy.ctx import ExecutionContext
from c7n_mgpolicy.utils import management_group_name, policy_definition_id


logging.basicConfig(level=logging.DEBUG, format='%(message)s')
logging.getLogger("urllib3").setLevel(logging.INFO)

MANAGEMENT_GROUP = 'mg1'
MANAGEMENT_GROUP_SCOPE = '/providers/Microsoft.Management/managementGroups/mg1'
POLICY_NAME = 'pol1'
POLICY_ID = (
    '/providers/Microsoft.Management/managementGroups/mg1'
    '/providers/Microsoft.Authorization/policyDefinitions/pol1')

POLICY_RULE = {
    "if": {
        "not": {
            "field": "location",
            "in": "[parameters('allowedLocations')]"
        }
    },
    "then": {
        "effect": "audit"
    }
}

PARAMETERS = {
    "allowedLocations": {
        "type": "Array",
        "metadata": {
            "description": "The list of allowed locations for resources.",
            "displayName": "Allowed locations",
            "strongType": "location"
        }
    }
}

METADATA = {"category": "General"}


def definition_attributes(**overrides):
    attributes = {
        'name': POLICY_NAME,
        'policy_type': 'Custom',
        'mode': 'All',
        'display_name': 'acctestpol-allowed-locations',
        'description': 'Restrict resource locations',
        'policy_rule': json.dumps(POLICY_RULE, indent=2),
        'metadata': json.dumps(METADATA),
        'parameters': json.dumps(PARAMETERS, indent=4),
        'management_group_id': MANAGEMENT_GROUP,
    }
    attributes.update(overrides)
    return attributes


def http_error(status_code, message=None):
    error = HttpResponseError(
        message=message or 'Operation returned an invalid status code %d' % status_code)
    error.status_code = status_code
    return error


class FakeClock:
    """Monotonic clock advanced only by sleeping."""

    def __init__(self, start=0.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class FakePolicyDefinitionsApi:
    """In memory stand in for PolicyDefinitionsApi.

    `get_script` scripts the outcome of successive get calls: True reads
    the stored definition, False reports not found, an exception is
    raised as is. Once exhausted, gets read the stored definitions.
    """

    def __init__(self, get_script=(), delete_error=None, write_error=None):
        self.definitions = {}
        self.calls = []
        self.get_script = iter(get_script)
        self.delete_error = delete_error
        self.write_error = write_error

    @staticmethod
    def key(name, scope_id):
        return management_group_name(scope_id).lower(), name

    def add(self, name, scope_id, body):
        stored = copy.deepcopy(body)
        stored['id'] = policy_definition_id(name, management_group_name(scope_id))
        stored['name'] = name
        stored['type'] = 'Microsoft.Authorization/policyDefinitions'
        self.definitions[self.key(name, scope_id)] = stored
        return copy.deepcopy(stored)

    def create_or_update(self, name, scope_id, body):
        self.calls.append(('create_or_update', name, scope_id))
        if self.write_error is not None:
            raise self.write_error
        return self.add(name, scope_id, body)

    def get(self, name, scope_id):
        self.calls.append(('get', name, scope_id))
        outcome = next(self.get_script, True)
        if isinstance(outcome, Exception):
            raise outcome
        key = self.key(name, scope_id)
        if outcome is False or key not in self.definitions:
            raise http_error(404)
        return copy.deepcopy(self.definitions[key])

    def delete(self, name, scope_id):
        self.calls.append(('delete', name, scope_id))
        if self.delete_error is not None:
            raise self.delete_error
        key = self.key(name, scope_id)
        if key not in self.definitions:
            raise http_error(404)
        del self.definitions[key]

    def count(self, method):
        return len([c for c in self.calls if c[0] == method])


class BaseTest(unittest.TestCase):
    """ Policy definition base testing class.
    """

    def get_context(self, **options):
        self.clock = FakeClock()
        return ExecutionContext(
            Config.empty(**options), clock=self.clock, sleep=self.clock.sleep)
