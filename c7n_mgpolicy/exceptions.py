# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0


class PolicyDefinitionError(Exception):
    """Management Group Policy Definition Exception Base Class
    """


class MalformedInput(PolicyDefinitionError):
    """A JSON document field could not be parsed.
    """
    def __init__(self, field, cause=None):
        self.field = field
        self.cause = cause
        msg = "unable to parse {}".format(field)
        if cause is not None:
            msg = "{}: {}".format(msg, cause)
        super(MalformedInput, self).__init__(msg)


class RemoteError(PolicyDefinitionError):
    """A call against the policy definitions api failed.
    """
    action = 'calling'

    def __init__(self, name, cause):
        self.name = name
        self.cause = cause
        super(RemoteError, self).__init__(
            "Error {} Management Group Policy Definition {!r}: {}".format(
                self.action, name, cause))


class RemoteWriteError(RemoteError):
    action = 'creating/updating'


class RemoteReadError(RemoteError):
    action = 'reading'


class RemoteDeleteError(RemoteError):
    action = 'deleting'


class ConsistencyTimeoutError(PolicyDefinitionError):
    """The write succeeded but reads never stabilized before the timeout.
    """
    def __init__(self, name, timeout, last_state, streak, target, observations):
        self.name = name
        self.observations = observations
        self.timeout = timeout
        self.last_state = last_state
        self.streak = streak
        self.target = target
        super(ConsistencyTimeoutError, self).__init__(
            "Error waiting for Management Group Policy Definition {!r} to become "
            "available: timeout while waiting for state to become '200' "
            "(last state: '{}', consecutive successes: {}/{}, reads: {}, timeout: {}s)".format(
                name, last_state, streak, target, observations, timeout))


class InvalidIdentifier(PolicyDefinitionError):
    """The canonical id could not be used to address the resource.
    """
    def __init__(self, resource_id, cause=None):
        self.resource_id = resource_id
        self.cause = cause
        msg = "Error parsing Management Group Policy Definition name from ID {}".format(
            resource_id)
        if cause is not None:
            msg = "{}: {}".format(msg, cause)
        super(InvalidIdentifier, self).__init__(msg)


class MalformedIdentifier(InvalidIdentifier):
    """The id does not have the fixed segment shape.
    """
    def __init__(self, resource_id, expected, actual):
        self.expected = expected
        self.actual = actual
        PolicyDefinitionError.__init__(
            self,
            "Azure Management Group Policy Definition Id should have {} segments, "
            "got {}: '{}'".format(expected, actual, resource_id))
        self.resource_id = resource_id
        self.cause = None
