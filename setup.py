# Automatically generated from poetry/pyproject.toml
# flake8: noqa
# -*- coding: utf-8 -*-
from setuptools import setup

packages = \
['c7n_mgpolicy']

package_data = \
{'': ['*']}

install_requires = \
['argcomplete>=1.12.1',
 'azure-core>=1.24.0,<2.0.0',
 'azure-identity>=1.10.0,<2.0.0',
 'azure-mgmt-resource>=21.0.0,<24.0.0',
 'jsonschema>=3.2.0',
 'pyyaml>=5.3.1']

extras_require = \
{'test': ['pytest>=6.0', 'mock>=4.0']}

entry_points = \
{'console_scripts': ['custodian-mgpolicy = c7n_mgpolicy.cli:main']}

setup_kwargs = {
    'name': 'c7n-mgpolicy',
    'version': '0.1.0',
    'description': 'Cloud Custodian - Azure Management Group Policy Definitions',
    'long_description': '\n# c7n-mgpolicy: Management Group Policy Definitions\n\nManage an Azure policy definition scoped to a management group with a\ncreate / read / update / delete / import lifecycle.\n\n    $ pip install -e .\n    $ custodian-mgpolicy validate definition.yml\n    $ custodian-mgpolicy apply definition.yml\n    $ custodian-mgpolicy show /providers/Microsoft.Management/managementGroups/mg1/providers/Microsoft.Authorization/policyDefinitions/pol1\n',
    'long_description_content_type': 'text/markdown',
    'author': 'Cloud Custodian Project',
    'author_email': None,
    'maintainer': None,
    'maintainer_email': None,
    'url': 'https://cloudcustodian.io',
    'packages': packages,
    'package_data': package_data,
    'install_requires': install_requires,
    'extras_require': extras_require,
    'entry_points': entry_points,
    'python_requires': '>=3.8,<4.0',
}


setup(**setup_kwargs)
