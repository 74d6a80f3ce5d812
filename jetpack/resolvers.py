"""Resolve user-supplied references into images and pods."""

__all__ = [
    'get_image',
    'get_pod',
    'parse_image_name',
]

import logging
import re
import uuid

from . import errors
from . import names

LOG = logging.getLogger(__name__)

# Dashed form only, optionally as a URN.
_UUID_PATTERN = re.compile(
    r'(?:urn:uuid:)?'
    r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}',
    re.IGNORECASE,
)


def parse_image_name(name):
    """Parse an app-discovery string into (identifier, labels).

    Absent (or empty) "os" and "arch" labels default to the host's.
    """
    identifier, pairs = names.parse_app_string(name)
    labels = dict(pairs)
    if not labels.get('os'):
        labels['os'] = names.host_os()
    if not labels.get('arch'):
        labels['arch'] = names.host_arch()
    return identifier, names.make_labels(labels.items())


def get_image(store, name, local_only=False):
    try:
        image_hash = names.Hash.parse(name)
    except errors.ResolutionError:
        image_hash = None

    if image_hash is not None:
        if not image_hash.is_full():
            # Short hash; return the first prefix match.
            # TODO: Report an ambiguity error when a prefix matches more
            # than one image, instead of picking the first one.
            prefix = name.lower()
            LOG.debug('look up image by hash prefix: %s', prefix)
            for image in store.images():
                if str(image.hash).startswith(prefix):
                    return image
            raise errors.NotFoundError('image not found: %s', name)
        LOG.debug('look up image by hash: %s', image_hash)
        return store.get_image(image_hash, None, None)

    with errors.tracing('parsing image name %r', name):
        identifier, labels = parse_image_name(name)
    LOG.debug(
        'look up %s image by name: %s %s',
        'local' if local_only else 'any',
        identifier,
        labels,
    )
    if local_only:
        return store.get_local_image(None, identifier, labels)
    else:
        return store.get_image(None, identifier, labels)


def get_pod(store, name):
    if not _UUID_PATTERN.fullmatch(name):
        # TODO: Look up pods by name once pods can be named.
        LOG.debug('not a pod uuid: %r', name)
        raise errors.UsageError()
    return store.get_pod(uuid.UUID(name[-36:]))
