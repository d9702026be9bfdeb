# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
from functools import wraps
import logging
import os
import sys

import yaml

from c7n_mgpolicy import constants
from c7n_mgpolicy.api import PolicyDefinitionsApi
from c7n_mgpolicy.ctx import ExecutionContext
from c7n_mgpolicy.exceptions import PolicyDefinitionError
from c7n_mgpolicy.resource import ManagementGroupPolicyDefinition, ResourceData
from c7n_mgpolicy.session import Session
from c7n_mgpolicy.utils import dumps, flatten_json, load_file, yaml_dump
from c7n_mgpolicy.version import version


log = logging.getLogger('custodian.mgpolicy.commands')


def load_definition(path):
    """Load resource attributes from a yaml or json file.

    JSON document fields may be written inline as mappings, they are
    encoded to the string form the resource expects.
    """
    data = load_file(os.path.expanduser(path))
    if not isinstance(data, dict):
        raise ValueError("expected a mapping of resource attributes")
    for field in constants.JSON_FIELDS:
        if isinstance(data.get(field), (dict, list)):
            data[field] = flatten_json(data[field])
    return data


def get_api(options):
    session = Session(
        subscription_id=options.subscription_id,
        authorization_file=options.authorization_file)
    return PolicyDefinitionsApi(session.client(constants.POLICY_CLIENT))


def output(options, data):
    if options.output_format == 'json':
        print(dumps(data, indent=2))
    else:
        print(yaml_dump(data), end='')


def resource_command(f):

    @wraps(f)
    def _run(options):
        resource = ManagementGroupPolicyDefinition
        ctx = ExecutionContext(options)
        log.debug("Running %s execution:%s", f.__name__, ctx.execution_id)
        try:
            with ctx:
                return f(options, resource, get_api(options), ctx)
        except PolicyDefinitionError as e:
            log.error(str(e))
            sys.exit(1)

    return _run


def _load_or_exit(path):
    try:
        return load_definition(path)
    except IOError:
        log.error('definition file does not exist ({})'.format(path))
    except yaml.YAMLError as e:
        log.error("yaml syntax error loading definition file ({}) error:\n {}".format(
            path, e))
    except ValueError as e:
        log.error('problem loading definition file ({}) error: {}'.format(path, str(e)))
    sys.exit(1)


def _validate_or_exit(resource, path, data):
    errors = resource.validate(data)
    for e in errors:
        log.error("invalid definition file: {} error: {}".format(path, e.message))
    if errors:
        sys.exit(1)


def validate(options):
    errors = 0
    for path in options.configs:
        try:
            data = load_definition(path)
        except (IOError, ValueError, yaml.YAMLError) as e:
            log.error("problem loading definition file ({}) error: {}".format(path, e))
            errors += 1
            continue
        found = ManagementGroupPolicyDefinition.validate(data)
        for e in found:
            log.error("invalid definition file: {} error: {}".format(path, e.message))
        errors += len(found)
        if not found:
            log.info("Configuration valid: {}".format(path))

    if errors:
        log.error("Found {} errors. Exiting.".format(errors))
        sys.exit(1)


def _current(resource, api, ctx, resource_id):
    if not resource_id:
        return None
    return resource.read(api, ctx, ResourceData(id=resource_id))


@resource_command
def plan(options, resource, api, ctx):
    desired = _load_or_exit(options.config)
    _validate_or_exit(resource, options.config, desired)

    current = _current(resource, api, ctx, options.id)
    result = resource.plan(current, desired)
    output(options, {
        'action': result.action,
        'replace': list(result.replace),
        'changes': {k: {'old': old, 'new': new} for k, (old, new) in result.changes.items()},
    })


@resource_command
def apply(options, resource, api, ctx):
    desired = _load_or_exit(options.config)
    _validate_or_exit(resource, options.config, desired)

    current = _current(resource, api, ctx, options.id)
    result = resource.plan(current, desired)
    log.info("Management Group Policy Definition %s action:%s",
             desired[constants.FIELD_NAME], result.action)

    if result.action == 'noop':
        output(options, current.to_dict())
        return

    if result.action == 'replace':
        log.info("Replacing Management Group Policy Definition, immutable fields changed: %s",
                 ", ".join(result.replace))
        resource.delete(api, ctx, current)

    data = ResourceData(desired, id=current.id if current is not None else '')
    create = resource.update if result.action == 'update' else resource.create
    create(api, ctx, data)
    log.info("Management Group Policy Definition %s applied time:%0.2f",
             data.get(constants.FIELD_NAME), ctx.clock() - ctx.start_time)
    output(options, data.to_dict())


@resource_command
def show(options, resource, api, ctx):
    data = resource.read(api, ctx, ResourceData(id=options.id))
    if not data.exists:
        log.error("Management Group Policy Definition not found: %s", options.id)
        sys.exit(1)
    output(options, data.to_dict())


@resource_command
def import_cmd(options, resource, api, ctx):
    data = resource.importer(api, ctx, options.id)
    if not data.exists:
        log.error("Cannot import non-existent Management Group Policy Definition: %s",
                  options.id)
        sys.exit(1)
    output(options, data.to_dict())


@resource_command
def delete(options, resource, api, ctx):
    resource.delete(api, ctx, ResourceData(id=options.id))
    log.info("Management Group Policy Definition removed: %s", options.id)


def version_cmd(options):
    print(version)
