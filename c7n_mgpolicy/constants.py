# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0

"""
Resource
"""
RESOURCE_TYPE = 'azurerm_management_group_policy_definition'
POLICY_CLIENT = 'azure.mgmt.resource.policy.PolicyClient'

"""
Canonical Id
"""
# /providers/Microsoft.Management/managementGroups/{mg}/providers/
#   Microsoft.Authorization/policyDefinitions/{name}
ID_SEGMENT_COUNT = 9
SCOPE_SEGMENT_COUNT = 5
MANAGEMENT_PROVIDER = 'Microsoft.Management'
AUTHORIZATION_PROVIDER = 'Microsoft.Authorization'
TEMPLATE_MANAGEMENT_GROUP_SCOPE = '/providers/{0}/managementGroups/{1}'
TEMPLATE_POLICY_DEFINITION_ID = '{0}/providers/{1}/policyDefinitions/{2}'

"""
Consistency Wait
"""
DEFAULT_CONSISTENCY_TIMEOUT = 5 * 60
DEFAULT_POLL_INTERVAL = 10
DEFAULT_TARGET_OCCURRENCE = 10
STATE_NOT_FOUND = '404'
STATE_FOUND = '200'

"""
Schema Fields
"""
FIELD_NAME = 'name'
FIELD_POLICY_TYPE = 'policy_type'
FIELD_MODE = 'mode'
FIELD_DISPLAY_NAME = 'display_name'
FIELD_DESCRIPTION = 'description'
FIELD_POLICY_RULE = 'policy_rule'
FIELD_METADATA = 'metadata'
FIELD_PARAMETERS = 'parameters'
FIELD_MANAGEMENT_GROUP_ID = 'management_group_id'

JSON_FIELDS = (FIELD_POLICY_RULE, FIELD_METADATA, FIELD_PARAMETERS)
FORCE_NEW_FIELDS = (FIELD_NAME, FIELD_POLICY_TYPE, FIELD_MODE, FIELD_MANAGEMENT_GROUP_ID)

# schema field -> REST property key under "properties"
WIRE_PROPERTIES = {
    FIELD_POLICY_TYPE: 'policyType',
    FIELD_MODE: 'mode',
    FIELD_DISPLAY_NAME: 'displayName',
    FIELD_DESCRIPTION: 'description',
    FIELD_POLICY_RULE: 'policyRule',
    FIELD_METADATA: 'metadata',
    FIELD_PARAMETERS: 'parameters',
}

"""
Environment Variables
"""
ENV_TENANT_ID = 'AZURE_TENANT_ID'
ENV_CLIENT_ID = 'AZURE_CLIENT_ID'
ENV_SUB_ID = 'AZURE_SUBSCRIPTION_ID'
ENV_CLIENT_SECRET = 'AZURE_CLIENT_SECRET'
ENV_USE_MSI = 'AZURE_USE_MSI'
