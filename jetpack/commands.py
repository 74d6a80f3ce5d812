"""Registry of named subcommands.

A command is registered with a usage string, whose first word is the
command name, a one-line synopsis, a handler that takes a list of
positional arguments, and optionally a function that adds flags to the
command's own ``ArgumentParser``.  Flags come before positional
arguments, and a malformed flag terminates the program right away (this
is what ``ArgumentParser`` does on errors), so handlers may assume flags
are valid.
"""

__all__ = [
    'Command',
    'Registry',
]

import argparse
import collections.abc
import logging
import re
import sys

from . import errors

LOG = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r'\S*')

# Destination of positional arguments in the flag parser.
_ARGS = 'args'


class Command:

    def __init__(self, app_name, usage, synopsis, handler, parser=None):
        self.app_name = app_name
        self.usage = usage
        self.synopsis = synopsis
        self.handler = handler
        self.parser = parser
        # Flag values of the latest run.
        self.options = argparse.Namespace()

    @property
    def name(self):
        return _NAME_PATTERN.match(self.usage).group()

    def describe(self):
        if self.synopsis:
            return '%s -- %s' % (self.usage, self.synopsis)
        return self.usage

    __str__ = describe

    def format_usage(self):
        return 'Usage: %s %s' % (self.app_name, self.usage)

    def help(self, output=None):
        output = output or sys.stderr
        output.write('%s\n\n%s\n' % (self.synopsis, self.format_usage()))
        if self.parser is not None:
            output.write('\n')
            output.write(self.parser.format_help())

    def run(self, args):
        args = list(args)
        if self.parser is not None:
            self.options = self.parser.parse_args(args)
            args = getattr(self.options, _ARGS)
            delattr(self.options, _ARGS)
        LOG.debug('run command: %s %s', self.name, args)
        try:
            self.handler(args)
        except errors.UsageError as exc:
            if exc.message:
                raise
            raise errors.UsageError(self.format_usage()) from exc


class Registry(collections.abc.Mapping):
    """Map command names to commands.

    Registering a name twice replaces the earlier command.
    """

    def __init__(self, app_name):
        self.app_name = app_name
        self._commands = {}

    def register(self, usage, synopsis, handler, add_flags=None):
        name = _NAME_PATTERN.match(usage).group()
        if add_flags is None:
            parser = None
        else:
            parser = argparse.ArgumentParser(
                prog='%s %s' % (self.app_name, name),
                usage=argparse.SUPPRESS,
                add_help=False,
                allow_abbrev=False,
            )
            add_flags(parser)
            parser.add_argument(
                _ARGS, nargs=argparse.REMAINDER, help=argparse.SUPPRESS
            )
        if name in self._commands:
            LOG.debug('replace command: %s', name)
        command = self._commands[name] = Command(
            self.app_name, usage, synopsis, handler, parser
        )
        return command

    def __getitem__(self, name):
        return self._commands[name]

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)

    def describe(self):
        return '\n'.join(
            '  %s' % command.describe() for command in self.values()
        )
