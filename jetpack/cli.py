"""Command-line entry point.

The program is initialized with the ``startup`` dependency graph:

  PARSER ---> PARSE --+--> ARGS ---> LOGGING ---> CONFIG ---> STORE
                      |                             |           |
              ARGV ---+                             +-----------+--> REGISTRY

and then the command named by the first positional argument is looked up
in the registry and run with the rest of the arguments.

Exit status: 0 on success, 1 on errors, and 2 on usage errors.
"""

__all__ = [
    'main',
    'run',
]

import argparse
import logging
import os
import sys
from pathlib import Path

from startup import Startup

from . import apps
from . import configs
from . import errors
from . import stores

LOG = logging.getLogger(__name__)
LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

ARGS = 'args'
ARGV = 'argv'
CONFIG = 'config'
LOGGING = 'logging'
PARSE = 'parse'
PARSER = 'parser'
REGISTRY = 'registry'
STORE = 'store'

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


def add_arguments(parser: PARSER) -> PARSE:
    parser.add_argument(
        '-v', '--verbose', action='count', default=0,
        help='verbose output',
    )
    parser.add_argument(
        '-c', '--config', metavar='PATH', type=Path,
        help='read configuration from this file (default %s)' %
        configs.DEFAULT_PATH,
    )
    parser.add_argument(
        '-o', dest='overrides', metavar='KEY=VALUE', action='append',
        type=configs.parse_override, default=[],
        help='override a configuration value',
    )
    parser.add_argument('command', nargs='?', help='command to run')
    parser.add_argument(
        'args', nargs=argparse.REMAINDER, help='arguments of the command'
    )


def parse_argv(parser: PARSER, argv: ARGV, _: PARSE) -> ARGS:
    return parser.parse_args(argv[1:])


def configure_logging(args: ARGS) -> LOGGING:
    if os.environ.get('DEBUG') not in (None, '', '0'):
        level = logging.DEBUG
    elif args.verbose == 0:
        level = logging.WARNING
    elif args.verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return level


def load_config(args: ARGS, _: LOGGING) -> CONFIG:
    return configs.load(args.config, args.overrides)


def make_store(config: CONFIG) -> STORE:
    return stores.RepoStore(config['root'])


def make_registry(config: CONFIG, store: STORE) -> REGISTRY:
    return apps.make_registry(store, config)


def dispatch(registry, command_name, args, verbose=False):
    if not command_name:
        registry['help'].run(())
        return EXIT_USAGE
    try:
        command = registry[command_name]
    except KeyError:
        print(
            '%s: unknown command: %s' % (registry.app_name, command_name),
            file=sys.stderr,
        )
        return EXIT_USAGE
    try:
        command.run(args)
    except errors.UsageError as exc:
        print(errors.format_error(exc), file=sys.stderr)
        return EXIT_USAGE
    except Exception as exc:
        LOG.debug('command %s failed', command_name, exc_info=True)
        print(
            '%s: %s' % (
                registry.app_name,
                errors.format_error(exc, with_contexts=verbose),
            ),
            file=sys.stderr,
        )
        return EXIT_ERROR
    return EXIT_OK


def main(argv=None):
    if argv is None:
        argv = sys.argv
    startup = Startup()
    startup.set(ARGV, argv)
    startup.set(
        PARSER,
        argparse.ArgumentParser(
            prog=apps.APP_NAME,
            description='Manage App Container images and pods.',
        ),
    )
    for func in (
        add_arguments,
        parse_argv,
        configure_logging,
        load_config,
        make_store,
        make_registry,
    ):
        startup(func)
    try:
        varz = startup.call()
    except errors.ConfigError as exc:
        print('%s: %s' % (apps.APP_NAME, exc), file=sys.stderr)
        return EXIT_ERROR
    args = varz[ARGS]
    return dispatch(
        varz[REGISTRY], args.command, args.args, verbose=args.verbose > 0
    )


def run():
    sys.exit(main())
