"""Error kinds of the command layer.

Errors are classified by ``kind`` rather than by identity so that a
usage error raised deep inside nested argument bindings is still
recognized as one after contexts have been attached to it.
"""

__all__ = [
    'Kinds',
    'Error',
    'UsageError',
    'NotFoundError',
    'ResolutionError',
    'AmbiguityError',
    'ConfigError',
    'format_error',
    'tracing',
]

import contextlib
import enum


class Kinds(enum.Enum):
    USAGE = enum.auto()
    NOT_FOUND = enum.auto()
    RESOLUTION = enum.auto()
    AMBIGUITY = enum.auto()
    DOMAIN = enum.auto()


class Error(Exception):

    kind = Kinds.DOMAIN

    def __init__(self, message=None, *args):
        if message is None:
            super().__init__()
        else:
            super().__init__(message % args if args else message)
        # Innermost first.
        self.contexts = []

    @property
    def message(self):
        return self.args[0] if self.args else ''

    def trace(self, context, *args):
        self.contexts.append(context % args if args else context)
        return self


class UsageError(Error):
    """Caller supplied the wrong shape of arguments.

    Raise it without a message; ``Command.run`` synthesizes the message
    from the usage text of the command.
    """

    kind = Kinds.USAGE


class NotFoundError(Error):
    kind = Kinds.NOT_FOUND


class ResolutionError(Error):
    kind = Kinds.RESOLUTION


class AmbiguityError(Error):
    kind = Kinds.AMBIGUITY


class ConfigError(Error):
    pass


@contextlib.contextmanager
def tracing(context, *args):
    """Attach context to any ``Error`` passing through."""
    try:
        yield
    except Error as exc:
        exc.trace(context, *args)
        raise


def format_error(exc, *, with_contexts=False):
    if isinstance(exc, Error):
        message = exc.message or exc.kind.name.lower().replace('_', ' ')
        contexts = exc.contexts if with_contexts else ()
    else:
        message = str(exc) or type(exc).__name__
        contexts = ()
    return '\n'.join([message] + ['  while %s' % c for c in contexts])
