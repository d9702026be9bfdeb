# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
"""
Policy definition model and its translation to and from the
Azure Resource Manager wire representation.
"""
import enum

from c7n_mgpolicy import constants
from c7n_mgpolicy.exceptions import MalformedInput
from c7n_mgpolicy.utils import StringUtils, expand_json, filter_empty, flatten_json


class WireEnum(enum.Enum):
    """Closed set of values exchanged with the api as plain strings."""

    @classmethod
    def field_name(cls):
        raise NotImplementedError()

    @classmethod
    def from_wire(cls, value):
        if isinstance(value, cls):
            return value
        for member in cls:
            if StringUtils.equal(member.value, value):
                return member
        raise MalformedInput(
            cls.field_name(), "expected one of {}, got {!r}".format(cls.values(), value))

    @classmethod
    def values(cls):
        return [m.value for m in cls]

    def to_wire(self):
        return self.value

    def __str__(self):
        return self.value


@enum.unique
class PolicyType(WireEnum):
    built_in = 'BuiltIn'
    custom = 'Custom'
    not_specified = 'NotSpecified'

    @classmethod
    def field_name(cls):
        return constants.FIELD_POLICY_TYPE


@enum.unique
class PolicyMode(WireEnum):
    all = 'All'
    indexed = 'Indexed'
    not_specified = 'NotSpecified'

    @classmethod
    def field_name(cls):
        return constants.FIELD_MODE


class PolicyDefinition:
    """Flat field set of a management group policy definition.

    The three JSON documents are held in their string encoded form,
    an empty string meaning unset.
    """

    def __init__(self, name, policy_type, mode, display_name, management_group_id,
                 description='', policy_rule='', metadata='', parameters=''):
        self.name = name
        self.policy_type = PolicyType.from_wire(policy_type)
        self.mode = PolicyMode.from_wire(mode)
        self.display_name = display_name
        self.management_group_id = management_group_id
        self.description = description or ''
        self.policy_rule = policy_rule or ''
        self.metadata = metadata or ''
        self.parameters = parameters or ''

    def __eq__(self, other):
        if not isinstance(other, PolicyDefinition):
            return NotImplemented
        return self.to_state() == other.to_state()

    def __repr__(self):
        return "<PolicyDefinition {} at {}>".format(self.name, self.management_group_id)

    @classmethod
    def from_state(cls, data):
        return cls(
            name=data.get(constants.FIELD_NAME),
            policy_type=data.get(constants.FIELD_POLICY_TYPE),
            mode=data.get(constants.FIELD_MODE),
            display_name=data.get(constants.FIELD_DISPLAY_NAME),
            management_group_id=data.get(constants.FIELD_MANAGEMENT_GROUP_ID),
            description=data.get(constants.FIELD_DESCRIPTION),
            policy_rule=data.get(constants.FIELD_POLICY_RULE),
            metadata=data.get(constants.FIELD_METADATA),
            parameters=data.get(constants.FIELD_PARAMETERS))

    def to_state(self):
        return {
            constants.FIELD_NAME: self.name,
            constants.FIELD_POLICY_TYPE: self.policy_type.to_wire(),
            constants.FIELD_MODE: self.mode.to_wire(),
            constants.FIELD_DISPLAY_NAME: self.display_name,
            constants.FIELD_DESCRIPTION: self.description,
            constants.FIELD_POLICY_RULE: self.policy_rule,
            constants.FIELD_METADATA: self.metadata,
            constants.FIELD_PARAMETERS: self.parameters,
            constants.FIELD_MANAGEMENT_GROUP_ID: self.management_group_id,
        }

    def to_wire(self):
        """Build the create/update request body.

        JSON documents are only parsed when set; unset ones are left out of
        the request. Raises MalformedInput naming the offending field.
        """
        properties = {
            'policyType': self.policy_type.to_wire(),
            'mode': self.mode.to_wire(),
            'displayName': self.display_name,
            'description': self.description,
        }
        for field in constants.JSON_FIELDS:
            document = expand_json(getattr(self, field), field)
            if document is not None:
                properties[constants.WIRE_PROPERTIES[field]] = document

        return {'name': self.name, 'properties': properties}

    @classmethod
    def from_wire(cls, body, management_group_id):
        properties = body.get('properties') or {}
        values = {}
        for field, key in constants.WIRE_PROPERTIES.items():
            value = properties.get(key)
            if value is None:
                continue
            if field in constants.JSON_FIELDS:
                value = flatten_json(value)
            values[field] = value

        values = filter_empty(values)
        return cls(
            name=body.get('name'),
            policy_type=values.pop(constants.FIELD_POLICY_TYPE,
                                   PolicyType.not_specified.value),
            mode=values.pop(constants.FIELD_MODE, PolicyMode.not_specified.value),
            display_name=values.pop(constants.FIELD_DISPLAY_NAME, ''),
            management_group_id=management_group_id,
            **values)
