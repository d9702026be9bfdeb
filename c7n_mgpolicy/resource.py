# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
"""
Management group policy definition resource lifecycle.

Every operation receives the api client and the execution context
explicitly, along with the per instance :class:`ResourceData`.
"""
import logging
from collections import namedtuple

from azure.core.exceptions import HttpResponseError

from c7n_mgpolicy import constants, schema
from c7n_mgpolicy.exceptions import (
    InvalidIdentifier, MalformedIdentifier, MalformedInput, RemoteDeleteError,
    RemoteReadError, RemoteWriteError)
from c7n_mgpolicy.model import PolicyDefinition
from c7n_mgpolicy.utils import is_not_found, parse_policy_definition_id, policy_definition_id
from c7n_mgpolicy.waiter import wait_for_consistency

log = logging.getLogger('custodian.mgpolicy.resource')


class ResourceData:
    """State of one resource instance.

    An empty id means the resource does not exist (or was removed
    remotely and must be dropped from state).
    """

    def __init__(self, attributes=None, id=''):
        self.attributes = dict(attributes or {})
        self.id = id or ''

    def __repr__(self):
        return "<ResourceData %s>" % (self.id or '(new)')

    def get(self, key, default=None):
        return self.attributes.get(key, default)

    def set(self, key, value):
        self.attributes[key] = value

    def set_id(self, id):
        self.id = id or ''

    @property
    def exists(self):
        return bool(self.id)

    def to_dict(self):
        d = dict(self.attributes)
        d['id'] = self.id
        return d


def _parse_id(resource_id):
    try:
        return parse_policy_definition_id(resource_id)
    except MalformedIdentifier as e:
        raise InvalidIdentifier(resource_id, e) from e


def create_update(api, ctx, data):
    definition = PolicyDefinition.from_state(data.attributes)
    name = definition.name
    scope = definition.management_group_id
    body = definition.to_wire()

    try:
        api.create_or_update(name, scope, body)
    except HttpResponseError as e:
        raise RemoteWriteError(name, e) from e
    log.info("Created/Updated Management Group Policy Definition %r at %s", name, scope)

    def refresh():
        try:
            api.get(name, scope)
        except HttpResponseError as e:
            if is_not_found(e):
                return False
            raise RemoteReadError(name, e) from e
        return True

    wait_for_consistency(refresh, ctx, name)

    try:
        result = api.get(name, scope)
    except HttpResponseError as e:
        raise RemoteReadError(name, e) from e

    data.set_id(result.get('id') or policy_definition_id(name, scope))
    return read(api, ctx, data)


def read(api, ctx, data):
    resource_id = _parse_id(data.id)

    try:
        result = api.get(resource_id.name, resource_id.scope_id)
    except HttpResponseError as e:
        if is_not_found(e):
            log.debug("Error reading Management Group Policy Definition %r - "
                      "removing from state", data.id)
            data.set_id('')
            return data
        raise RemoteReadError(resource_id.name, e) from e

    try:
        definition = PolicyDefinition.from_wire(result, resource_id.scope_id)
    except MalformedInput as e:
        raise RemoteReadError(resource_id.name, e) from e
    for k, v in definition.to_state().items():
        data.set(k, v)
    return data


def delete(api, ctx, data):
    resource_id = _parse_id(data.id)

    try:
        api.delete(resource_id.name, resource_id.scope_id)
    except HttpResponseError as e:
        if not is_not_found(e):
            raise RemoteDeleteError(resource_id.name, e) from e
        log.debug("Management Group Policy Definition %r already absent", data.id)
    else:
        log.info("Deleted Management Group Policy Definition %r", resource_id.name)

    data.set_id('')
    return data


def import_state(api, ctx, resource_id):
    _parse_id(resource_id)
    return read(api, ctx, ResourceData(id=resource_id))


Plan = namedtuple('Plan', 'action changes replace')


class ManagementGroupPolicyDefinition:
    """Resource type binding the schema to the lifecycle operations."""

    type = constants.RESOURCE_TYPE
    fields = schema.FIELDS

    create = staticmethod(create_update)
    update = staticmethod(create_update)
    read = staticmethod(read)
    delete = staticmethod(delete)
    importer = staticmethod(import_state)

    @staticmethod
    def validate(attributes):
        return schema.validate(attributes)

    @staticmethod
    def plan(data, desired):
        """Compare current state with desired attributes.

        action is one of create, update, replace or noop.
        """
        if data is None or not data.exists:
            return Plan('create', schema.diff({}, desired), [])

        changes = schema.diff(data.attributes, desired)
        replace = schema.requires_replacement(changes)
        if replace:
            action = 'replace'
        elif changes:
            action = 'update'
        else:
            action = 'noop'
        return Plan(action, changes, replace)
