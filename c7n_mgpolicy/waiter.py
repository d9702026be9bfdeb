# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
"""
Eventual consistency wait for management group policy definitions.

A write against a management group can succeed while reads of the same
path keep reporting not found for a while, and reads may flap between
found and not found before settling. Callers must not observe success
until reads are stable, so after a write we poll until a run of
consecutive successful reads is seen, bounded by a wall clock timeout.

The bookkeeping lives in :class:`ConsistencyWaiter`, a small state
machine that is driven by observations and knows nothing about time
or the api; :func:`wait_for_consistency` feeds it from a refresh
function at a fixed cadence.
"""
import enum
import logging

from c7n_mgpolicy import constants
from c7n_mgpolicy.exceptions import ConsistencyTimeoutError

log = logging.getLogger('custodian.mgpolicy.waiter')


@enum.unique
class ConsistencyState(enum.Enum):
    pending = 'Pending'
    stabilizing = 'Stabilizing'
    stable = 'Stable'
    timed_out = 'TimedOut'

    def __str__(self):
        return self.value


class ConsistencyWaiter:

    def __init__(self, target=constants.DEFAULT_TARGET_OCCURRENCE):
        if target < 1:
            raise ValueError("target occurrence must be at least 1, got %d" % target)
        self.target = target
        self.state = ConsistencyState.pending
        self.streak = 0
        self.observations = 0
        self.last_state = None

    def __repr__(self):
        if self.state is ConsistencyState.stabilizing:
            return "<ConsistencyWaiter %s(%d/%d)>" % (self.state, self.streak, self.target)
        return "<ConsistencyWaiter %s>" % self.state

    @property
    def done(self):
        return self.state in (ConsistencyState.stable, ConsistencyState.timed_out)

    def observe(self, found):
        """Record one read result and return the resulting state.

        Any not found resets the streak, so only an unbroken run of
        `target` successful reads reaches stable.
        """
        if self.done:
            raise RuntimeError("waiter already finished in state %s" % self.state)

        self.observations += 1
        if found:
            self.last_state = constants.STATE_FOUND
            self.streak += 1
            if self.streak >= self.target:
                self.state = ConsistencyState.stable
            else:
                self.state = ConsistencyState.stabilizing
        else:
            self.last_state = constants.STATE_NOT_FOUND
            self.streak = 0
            self.state = ConsistencyState.pending
        return self.state

    def expire(self):
        if self.state is not ConsistencyState.stable:
            self.state = ConsistencyState.timed_out
        return self.state


def wait_for_consistency(refresh, ctx, name, timeout=None, poll_interval=None,
                         target=None):
    """Poll `refresh` until reads are stable.

    :param refresh: callable returning True when the read succeeded and
      False when it reported not found. Any error it raises is fatal and
      propagates as is.
    :param ctx: execution context, supplies the clock, sleep and defaults.
    :param name: resource name, used in logs and errors.
    :return: the finished :class:`ConsistencyWaiter`.
    :raises ConsistencyTimeoutError: when the timeout elapses first.
    """
    timeout = ctx.timeout if timeout is None else timeout
    poll_interval = ctx.poll_interval if poll_interval is None else poll_interval
    target = ctx.target_occurrence if target is None else target

    waiter = ConsistencyWaiter(target)
    deadline = ctx.deadline(timeout)

    log.debug("Waiting for Management Group Policy Definition %r to become available", name)
    while True:
        state = waiter.observe(refresh())
        log.debug("policy definition:%s state:%s streak:%d/%d",
                  name, state, waiter.streak, waiter.target)
        if state is ConsistencyState.stable:
            return waiter

        remaining = deadline - ctx.clock()
        if remaining < poll_interval:
            if remaining > 0:
                ctx.sleep(remaining)
            waiter.expire()
            raise ConsistencyTimeoutError(
                name, timeout, waiter.last_state, waiter.streak, waiter.target,
                waiter.observations)
        ctx.sleep(poll_interval)
