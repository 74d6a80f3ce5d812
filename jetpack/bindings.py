"""Bind positional arguments to resolved entities.

Each ``wrap_*`` function adapts a handler that takes resolved entities
into a command handler that takes a list of strings.  They nest; the
innermost one is the closest to the domain logic.  For example, the
handler of ``app POD[:APP]`` is:

  wrap_must_app0(store, show_app)

where ``show_app(pod, app_name)`` is called with a resolved pod and an
app name that is present in the pod.

The ``*0`` variants reject arguments beyond the entity reference.  The
``app`` variants pass ``None`` as the app name when the reference has
no ``:APP`` part and the pod does not have exactly one app.
"""

__all__ = [
    'wrap',
    'wrap_err',
    'wrap_image',
    'wrap_image0',
    'wrap_pod',
    'wrap_pod0',
    'wrap_app',
    'wrap_app0',
    'wrap_must_app',
    'wrap_must_app0',
]

import functools
import logging

from . import errors
from . import names
from . import resolvers

LOG = logging.getLogger(__name__)


def wrap(func):
    """Wrap a function that cannot fail; arguments are ignored."""

    @functools.wraps(func)
    def handler(_):
        func()

    return handler


def wrap_err(func):
    """Wrap a function that may fail; arguments are ignored."""

    @functools.wraps(func)
    def handler(_):
        with errors.tracing('running %s', func.__name__):
            func()

    return handler


def _no_more_args(func):
    """Adapt ``func(*entities)`` to ``func(*entities, args)``."""

    @functools.wraps(func)
    def wrapper(*entities_and_args):
        *entities, args = entities_and_args
        if args:
            raise errors.UsageError()
        return func(*entities)

    return wrapper


def wrap_image(store, func, local_only=False):

    @functools.wraps(func)
    def handler(args):
        if not args:
            raise errors.UsageError()
        with errors.tracing('resolving image %r', args[0]):
            image = resolvers.get_image(store, args[0], local_only)
        return func(image, args[1:])

    return handler


def wrap_image0(store, func, local_only=False):
    return wrap_image(store, _no_more_args(func), local_only)


def wrap_pod(store, func):

    @functools.wraps(func)
    def handler(args):
        if not args:
            raise errors.UsageError()
        with errors.tracing('resolving pod %r', args[0]):
            pod = resolvers.get_pod(store, args[0])
        return func(pod, args[1:])

    return handler


def wrap_pod0(store, func):
    return wrap_pod(store, _no_more_args(func))


def wrap_app(store, func):

    @functools.wraps(func)
    def handler(args):
        if not args:
            raise errors.UsageError()
        pod_ref, sep, app_ref = args[0].partition(':')
        with errors.tracing('resolving pod %r', pod_ref):
            pod = resolvers.get_pod(store, pod_ref)
        if not sep:
            apps = pod.manifest.apps
            if len(apps) == 1:
                LOG.debug('select the only app of pod %s: %s', pod, apps[0])
                app_name = apps[0].name
            else:
                app_name = None
        else:
            with errors.tracing('resolving app %r', args[0]):
                app_name = names.validate_ac_name(app_ref)
                if pod.manifest.get_app(app_name) is None:
                    raise errors.NotFoundError(
                        'pod %s has no app %s', pod.uuid, app_name
                    )
        return func(pod, app_name, args[1:])

    return handler


def wrap_app0(store, func):
    return wrap_app(store, _no_more_args(func))


def _must_app(func):

    @functools.wraps(func)
    def wrapper(pod, app_name, *rest):
        if app_name is None:
            raise errors.AmbiguityError(
                'no app name provided, and pod %s has %d apps',
                pod.uuid,
                len(pod.manifest.apps),
            )
        return func(pod, app_name, *rest)

    return wrapper


def wrap_must_app(store, func):
    return wrap_app(store, _must_app(func))


def wrap_must_app0(store, func):
    return wrap_app(store, _no_more_args(_must_app(func)))
