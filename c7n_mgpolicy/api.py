# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
import logging

from azure.mgmt.resource.policy import models

from c7n_mgpolicy.utils import management_group_name

log = logging.getLogger('custodian.mgpolicy.api')


class PolicyDefinitionsApi:
    """Management group scoped calls of the policy definitions api.

    Request and response bodies are plain dicts in the REST shape,
    ``{"id": ..., "name": ..., "properties": {"policyType": ..., ...}}``.
    Failures surface as the sdk's ``HttpResponseError``, whose
    ``status_code`` tells a missing definition (404) apart.

    The scope may be given as a bare management group name or as its
    full ``/providers/Microsoft.Management/managementGroups/{name}`` path.
    """

    def __init__(self, client):
        self.client = client

    @property
    def operations(self):
        return self.client.policy_definitions

    def create_or_update(self, name, scope_id, body):
        log.debug("create_or_update policy definition:%s scope:%s", name, scope_id)
        result = self.operations.create_or_update_at_management_group(
            policy_definition_name=name,
            management_group_id=management_group_name(scope_id),
            parameters=self.to_model(body))
        return self.to_body(result)

    def get(self, name, scope_id):
        log.debug("get policy definition:%s scope:%s", name, scope_id)
        result = self.operations.get_at_management_group(
            policy_definition_name=name,
            management_group_id=management_group_name(scope_id))
        return self.to_body(result)

    def delete(self, name, scope_id):
        log.debug("delete policy definition:%s scope:%s", name, scope_id)
        self.operations.delete_at_management_group(
            policy_definition_name=name,
            management_group_id=management_group_name(scope_id))

    @staticmethod
    def to_model(body):
        return models.PolicyDefinition.from_dict(body)

    @staticmethod
    def to_body(result):
        if result is None:
            return None
        return result.serialize(keep_readonly=True)
