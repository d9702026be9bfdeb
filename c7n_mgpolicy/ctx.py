# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
import time
import uuid

from c7n_mgpolicy.config import Config


class ExecutionContext:
    """Lifecycle call context.

    Carries the options and the time source used to bound the
    consistency wait. `clock` and `sleep` are replaceable so the
    wait can be driven without real time passing.
    """

    def __init__(self, options=None, clock=time.monotonic, sleep=time.sleep):
        self.options = options if options is not None else Config.empty()
        self.clock = clock
        self.sleep = sleep
        self.execution_id = str(uuid.uuid4())
        self.start_time = None

    @property
    def timeout(self):
        return self.options.timeout

    @property
    def poll_interval(self):
        return self.options.poll_interval

    @property
    def target_occurrence(self):
        return self.options.target_occurrence

    def deadline(self, timeout=None):
        """Absolute clock value after which waiting stops."""
        return self.clock() + (self.timeout if timeout is None else timeout)

    def __enter__(self):
        self.start_time = self.clock()
        return self

    def __exit__(self, exc_type=None, exc_value=None, exc_traceback=None):
        return False
