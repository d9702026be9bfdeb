# Copyright The Cloud Custodian Authors.
# SPDX-License-Identifier: Apache-2.0
#
# PYTHON_ARGCOMPLETE_OK  (Must be in first 1024 bytes, so if tab completion
# is failing, move this above the license)

import argcomplete
import argparse
import importlib
import logging
import pdb
import sys
import traceback

from c7n_mgpolicy import constants
from c7n_mgpolicy.config import Config

log = logging.getLogger('custodian.mgpolicy.cli')


def _default_options(p, exclude=()):
    """ Add basic options to the subparser.

    `exclude` is a list of options to exclude from the default set.
    e.g.: ['wait']
    """
    provider = p.add_argument_group(
        "provider", "Azure credentials, defaults per the environment and az cli")
    provider.add_argument(
        "--subscription-id", default=None,
        help="Subscription used to build the api client")
    provider.add_argument(
        "--authorization-file", default=None,
        help="File with service principal credentials")

    if 'wait' not in exclude:
        wait = p.add_argument_group("wait", "Eventual consistency wait after writes")
        wait.add_argument(
            "--timeout", type=int, default=constants.DEFAULT_CONSISTENCY_TIMEOUT,
            help="Seconds to wait for reads to stabilize (default %(default)i)")
        wait.add_argument(
            "--poll-interval", type=int, default=constants.DEFAULT_POLL_INTERVAL,
            help="Seconds between reads (default %(default)i)")
        wait.add_argument(
            "--target-occurrence", type=int,
            default=constants.DEFAULT_TARGET_OCCURRENCE,
            help="Consecutive successful reads required (default %(default)i)")

    output = p.add_argument_group("output", "Output control")
    output.add_argument(
        "-o", "--output-format", choices=('yaml', 'json'), default='yaml',
        help="Format of the resource state written to stdout")
    output.add_argument("-v", "--verbose", action="count", help="Verbose logging")
    output.add_argument("-q", "--quiet", action="count",
                        help="Less logging (repeatable, -qqq for no output)")
    output.add_argument("--debug", default=False, help=argparse.SUPPRESS,
                        action="store_true")


def _id_options(p):
    p.add_argument(
        "id", help="Canonical id: /providers/Microsoft.Management/managementGroups/"
        "{group}/providers/Microsoft.Authorization/policyDefinitions/{name}")


def setup_parser():
    c7n_parser = argparse.ArgumentParser(
        prog='custodian-mgpolicy',
        description="Manage Azure policy definitions scoped to a management group")
    subs = c7n_parser.add_subparsers(
        title='commands',
        dest='subparser')

    validate_desc = (
        "Validate definition files against the json schema")
    validate = subs.add_parser(
        'validate', description=validate_desc, help=validate_desc)
    validate.set_defaults(command="c7n_mgpolicy.commands.validate")
    validate.add_argument("configs", nargs='+', help="Definition file(s)")
    validate.add_argument("-v", "--verbose", action="count", help="Verbose Logging")
    validate.add_argument("-q", "--quiet", action="count", help="Less logging (repeatable)")
    validate.add_argument("--debug", default=False, help=argparse.SUPPRESS,
                          action="store_true")

    plan_desc = (
        "Show the changes applying a definition file would make. With --id the "
        "current remote state is read and compared, otherwise a create is planned.")
    plan = subs.add_parser('plan', description=plan_desc, help="Preview changes")
    plan.set_defaults(command="c7n_mgpolicy.commands.plan")
    plan.add_argument("config", help="Definition file")
    plan.add_argument("--id", default=None, help="Canonical id of the existing definition")
    _default_options(plan, exclude=['wait'])

    apply_desc = (
        "Create or update the policy definition described by a definition file, "
        "waiting until reads of the written definition are stable.")
    apply = subs.add_parser('apply', description=apply_desc, help="Create or update")
    apply.set_defaults(command="c7n_mgpolicy.commands.apply")
    apply.add_argument("config", help="Definition file")
    apply.add_argument("--id", default=None, help="Canonical id of the existing definition")
    _default_options(apply)

    show = subs.add_parser('show', help="Read a policy definition by id")
    show.set_defaults(command="c7n_mgpolicy.commands.show")
    _id_options(show)
    _default_options(show, exclude=['wait'])

    import_desc = "Reconstruct the full resource state from a canonical id"
    imp = subs.add_parser('import', description=import_desc, help=import_desc)
    imp.set_defaults(command="c7n_mgpolicy.commands.import_cmd")
    _id_options(imp)
    _default_options(imp, exclude=['wait'])

    delete = subs.add_parser('delete', help="Delete a policy definition by id")
    delete.set_defaults(command="c7n_mgpolicy.commands.delete")
    _id_options(delete)
    _default_options(delete, exclude=['wait'])

    version = subs.add_parser(
        'version', help="Display installed version")
    version.set_defaults(command='c7n_mgpolicy.commands.version_cmd')
    version.add_argument('-v', '--verbose', action="count", help="Verbose logging")
    version.add_argument("-q", "--quiet", action="count", help=argparse.SUPPRESS)
    version.add_argument("--debug", action="store_true", help=argparse.SUPPRESS)

    return c7n_parser


def _setup_logger(options):
    level = 3 + (options.verbose or 0) - (options.quiet or 0)

    if level <= 0:
        # print nothing
        log_level = logging.CRITICAL + 1
    elif level == 1:
        log_level = logging.ERROR
    elif level == 2:
        log_level = logging.WARNING
    elif level == 3:
        # default
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s: %(name)s:%(levelname)s %(message)s")

    external_log_level = logging.ERROR
    if level <= 0:
        external_log_level = logging.CRITICAL + 1
    elif level >= 5:
        external_log_level = logging.INFO

    logging.getLogger('azure').setLevel(external_log_level)
    logging.getLogger('msal').setLevel(external_log_level)
    logging.getLogger('urllib3').setLevel(logging.ERROR)


def main(args=None):
    parser = setup_parser()
    argcomplete.autocomplete(parser)
    options = parser.parse_args(args)
    if options.subparser is None:
        parser.print_help(file=sys.stderr)
        return sys.exit(2)

    _setup_logger(options)

    config = Config.empty(**vars(options))

    try:
        command = options.command
        if not callable(command):
            command = getattr(
                importlib.import_module(command.rsplit('.', 1)[0]),
                command.rsplit('.', 1)[-1])
        command(config)
    except Exception:
        if not options.debug:
            raise
        traceback.print_exc()
        pdb.post_mortem(sys.exc_info()[-1])


if __name__ == '__main__':
    main()
