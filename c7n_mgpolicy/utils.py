# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
import json
import logging
import os
from collections import namedtuple

import yaml
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from c7n_mgpolicy import constants
from c7n_mgpolicy.exceptions import MalformedIdentifier, MalformedInput

try:
    from yaml import CSafeLoader as SafeLoader, CSafeDumper as BaseSafeDumper
except ImportError:  # pragma: no cover
    from yaml import SafeLoader, SafeDumper as BaseSafeDumper


class SafeDumper(BaseSafeDumper):
    def ignore_aliases(self, data):
        return True


log = logging.getLogger('custodian.mgpolicy.utils')


PolicyDefinitionId = namedtuple('PolicyDefinitionId', 'scope_id name')


class ResourceIdParser:

    @staticmethod
    def parse(resource_id):
        """Split a canonical id into its management group scope and name.

        Only the shape is checked, the literal provider and collection
        segments are trusted as is.
        """
        components = resource_id.split('/')
        if len(components) != constants.ID_SEGMENT_COUNT:
            raise MalformedIdentifier(
                resource_id, constants.ID_SEGMENT_COUNT, len(components))

        return PolicyDefinitionId(
            scope_id='/'.join(components[:constants.SCOPE_SEGMENT_COUNT]),
            name=components[-1])


def parse_policy_definition_id(resource_id):
    return ResourceIdParser.parse(resource_id)


def management_group_name(management_group):
    """The bare group name, given either a name or a full scope path."""
    if management_group and management_group.startswith('/'):
        return management_group.rstrip('/').rsplit('/', 1)[-1]
    return management_group


def management_group_scope(management_group):
    if management_group and management_group.startswith('/'):
        return management_group.rstrip('/')
    return constants.TEMPLATE_MANAGEMENT_GROUP_SCOPE.format(
        constants.MANAGEMENT_PROVIDER, management_group)


def policy_definition_id(name, management_group):
    return constants.TEMPLATE_POLICY_DEFINITION_ID.format(
        management_group_scope(management_group),
        constants.AUTHORIZATION_PROVIDER, name)


class StringUtils:

    @staticmethod
    def equal(a, b, case_insensitive=True):
        if isinstance(a, str) and isinstance(b, str):
            if case_insensitive:
                return a.strip().lower() == b.strip().lower()
            else:
                return a.strip() == b.strip()

        return False


def expand_json(value, field):
    """Parse a JSON encoded field into a document.

    An empty string means unset and yields None. Documents are always
    objects, any other json value is rejected.
    """
    if value is None or value == '':
        return None
    try:
        document = json.loads(value)
    except (TypeError, ValueError) as e:
        raise MalformedInput(field, e) from e
    if not isinstance(document, dict):
        raise MalformedInput(
            field, "expected a json object, got {}".format(type(document).__name__))
    return document


def flatten_json(document):
    """Canonical string form of a document, stable across key order."""
    return json.dumps(document, sort_keys=True, separators=(',', ':'))


def normalize_json(value):
    if value is None or value == '':
        return ''
    try:
        return flatten_json(json.loads(value))
    except (TypeError, ValueError):
        return value


def json_equal(a, b):
    """Whitespace and ordering insensitive comparison of JSON strings.

    Strings which do not parse are compared verbatim.
    """
    return normalize_json(a) == normalize_json(b)


def is_not_found(error):
    if isinstance(error, ResourceNotFoundError):
        return True
    return isinstance(error, HttpResponseError) and error.status_code == 404


def filter_empty(d):
    for k, v in list(d.items()):
        if v is None or v == '':
            del d[k]
    return d


def yaml_load(value):
    return yaml.load(value, Loader=SafeLoader)


def yaml_dump(value):
    return yaml.dump(value, default_flow_style=False, Dumper=SafeDumper)


def loads(body):
    return json.loads(body)


def dumps(data, fh=None, indent=0):
    if fh:
        return json.dump(data, fh, indent=indent)
    else:
        return json.dumps(data, indent=indent)


def load_file(path, format=None):
    if format is None:
        format = 'yaml'
        _, ext = os.path.splitext(path)
        if ext[1:] == 'json':
            format = 'json'

    with open(path) as fh:
        contents = fh.read()

    if format == 'yaml':
        return yaml_load(contents)
    elif format == 'json':
        return loads(contents)
