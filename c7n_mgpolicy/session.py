# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0

import abc
import importlib
import inspect
import json
import logging
import os
import sys
from collections import namedtuple
from functools import lru_cache

from azure.identity import AzureCliCredential, ClientSecretCredential, ManagedIdentityCredential

from c7n_mgpolicy import constants


log = logging.getLogger('custodian.mgpolicy.session')


class Session:

    def __init__(self, subscription_id=None, authorization_file=None):
        """
        :param subscription_id: If provided overrides environment variables.
        :param authorization_file: Path to a json file with service principal
          parameters (client_id, client_secret, tenant_id, subscription_id).
        """

        self.subscription_id_override = subscription_id
        self.credentials = None
        self.subscription_id = None
        self.tenant_id = None
        self.authorization_file = authorization_file
        self.token_provider = None
        self._auth_params = {}

    def _authenticate(self):
        token_providers = [
            ServicePrincipalProvider,
            MSIProvider,
            CLIProvider
        ]

        instance = None
        for provider in token_providers:
            instance = provider(self._auth_params)
            if instance.is_available():
                result = instance.authenticate()
                self.subscription_id = result.subscription_id
                self.tenant_id = result.tenant_id
                self.credentials = result.credential
                self.token_provider = provider
                break

        # Let provided id parameter override everything else
        if self.subscription_id_override is not None:
            self.subscription_id = self.subscription_id_override

        if self.credentials is not None:
            log.info('Authenticated [%s | %s%s]',
                     instance.name, self.subscription_id,
                     ' | Authorization File' if self.authorization_file else '')

    def _initialize_session(self):
        """
        Creates a session using available authentication type.
        """

        # Only run once
        if self.credentials is not None:
            return

        if self.authorization_file:
            with open(self.authorization_file) as json_file:
                self._auth_params = json.load(json_file)
            if self.subscription_id_override is not None:
                self._auth_params['subscription_id'] = self.subscription_id_override
        else:
            self._auth_params = {
                'client_id': os.environ.get(constants.ENV_CLIENT_ID),
                'client_secret': os.environ.get(constants.ENV_CLIENT_SECRET),
                'tenant_id': os.environ.get(constants.ENV_TENANT_ID),
                'use_msi': bool(os.environ.get(constants.ENV_USE_MSI)),
                'subscription_id':
                    self.subscription_id_override or os.environ.get(constants.ENV_SUB_ID),
                'enable_cli_auth': True
            }

        try:
            self._authenticate()
        except Exception:
            log.exception("Failed to authenticate.")
            sys.exit(1)

        if self.credentials is None:
            log.error('Failed to authenticate.')
            sys.exit(1)

    @lru_cache()
    def client(self, client):
        credentials = self.get_credentials()
        service_name, client_name = client.rsplit('.', 1)
        svc_module = importlib.import_module(service_name)
        klass = getattr(svc_module, client_name)

        klass_parameters = inspect.signature(klass).parameters

        if 'subscription_id' in klass_parameters:
            # management group scoped calls never put the subscription on the wire
            return klass(credential=credentials,
                         subscription_id=self.get_subscription_id() or '')
        return klass(credential=credentials)

    def get_credentials(self):
        self._initialize_session()
        return self.credentials

    def get_subscription_id(self):
        self._initialize_session()
        return self.subscription_id


class TokenProvider(metaclass=abc.ABCMeta):
    AuthenticationResult = namedtuple(
        'AuthenticationResult', 'credential, subscription_id, tenant_id')

    def __init__(self, parameters):
        # type: (dict) -> None
        self.parameters = parameters
        self.subscription_id = self.parameters.get('subscription_id')

    @abc.abstractmethod
    def is_available(self):
        # type: () -> bool
        raise NotImplementedError()

    @abc.abstractmethod
    def authenticate(self):
        # type: () -> TokenProvider.AuthenticationResult
        raise NotImplementedError()

    @property
    @abc.abstractmethod
    def name(self):
        # type: () -> str
        raise NotImplementedError()


class CLIProvider(TokenProvider):
    def is_available(self):
        # type: () -> bool
        return bool(self.parameters.get('enable_cli_auth', False))

    def authenticate(self):
        # type: () -> TokenProvider.AuthenticationResult
        tenant_id = self.parameters.get('tenant_id')
        return TokenProvider.AuthenticationResult(
            credential=AzureCliCredential(tenant_id=tenant_id),
            subscription_id=self.subscription_id,
            tenant_id=tenant_id
        )

    @property
    def name(self):
        # type: () -> str
        return "Azure CLI"


class ServicePrincipalProvider(TokenProvider):
    def __init__(self, parameters):
        super(ServicePrincipalProvider, self).__init__(parameters)
        self.client_id = self.parameters.get('client_id')
        self.client_secret = self.parameters.get('client_secret')
        self.tenant_id = self.parameters.get('tenant_id')

    def is_available(self):
        # type: () -> bool
        return bool(self.client_id and
                    self.client_secret and
                    self.tenant_id)

    def authenticate(self):
        # type: () -> TokenProvider.AuthenticationResult
        credential = ClientSecretCredential(tenant_id=self.tenant_id,
                                            client_id=self.client_id,
                                            client_secret=self.client_secret)

        return TokenProvider.AuthenticationResult(
            credential=credential,
            subscription_id=self.subscription_id,
            tenant_id=self.tenant_id
        )

    @property
    def name(self):
        # type: () -> str
        return "Principal"


class MSIProvider(TokenProvider):
    def __init__(self, parameters):
        super(MSIProvider, self).__init__(parameters)
        self.client_id = self.parameters.get('client_id')
        self.use_msi = self.parameters.get('use_msi')

    def is_available(self):
        # type: () -> bool
        return bool(self.use_msi)

    def authenticate(self):
        # type: () -> TokenProvider.AuthenticationResult
        if self.client_id:
            credential = ManagedIdentityCredential(client_id=self.client_id)
        else:
            credential = ManagedIdentityCredential()

        return TokenProvider.AuthenticationResult(
            credential=credential,
            subscription_id=self.subscription_id,
            tenant_id=None
        )

    @property
    def name(self):
        # type: () -> str
        return "MSI"
