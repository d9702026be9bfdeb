# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
import os
import logging

from c7n_mgpolicy import constants

log = logging.getLogger('custodian.mgpolicy.config')


class Bag(dict):
    def __getattr__(self, k):
        try:
            return self[k]
        except KeyError:
            raise AttributeError(k)

    def __setattr__(self, k, v):
        self[k] = v


class Config(Bag):

    @classmethod
    def empty(cls, **kw):
        d = {}
        d.update({
            'subscription_id': os.environ.get(constants.ENV_SUB_ID),
            'authorization_file': None,
            'timeout': constants.DEFAULT_CONSISTENCY_TIMEOUT,
            'poll_interval': constants.DEFAULT_POLL_INTERVAL,
            'target_occurrence': constants.DEFAULT_TARGET_OCCURRENCE,
            'output_format': 'yaml',
            'verbose': 0,
            'quiet': 0,
            'debug': False})
        d.update(kw)
        return cls(d)
