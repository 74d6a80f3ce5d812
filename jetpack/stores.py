"""Image and pod storage.

The command layer only reads from storage; fetching, importing, and
removing images and pods happen elsewhere.  The repository layout is:

  ${ROOT}/images/${HASH}/manifest
  ${ROOT}/pods/${UUID}/manifest
"""

__all__ = [
    'Store',
    'RepoStore',
]

import logging
from pathlib import Path

from . import errors
from . import models

LOG = logging.getLogger(__name__)


class Store:
    """Interface of the storage consumed by the command layer."""

    def images(self):
        """Return all images in a fixed enumeration order."""
        raise NotImplementedError

    def pods(self):
        """Return all pods in a fixed enumeration order."""
        raise NotImplementedError

    def get_image(self, image_hash=None, name=None, labels=None):
        """Look up an image, allowing remote resolution."""
        raise NotImplementedError

    def get_local_image(self, image_hash=None, name=None, labels=None):
        """Look up an image among the locally stored ones."""
        raise NotImplementedError

    def get_pod(self, pod_uuid):
        raise NotImplementedError


class RepoStore(Store):

    IMAGES_DIR = 'images'
    PODS_DIR = 'pods'

    def __init__(self, root_path):
        self.root_path = Path(root_path)

    @property
    def images_path(self):
        return self.root_path / self.IMAGES_DIR

    @property
    def pods_path(self):
        return self.root_path / self.PODS_DIR

    @staticmethod
    def _iter_dirs(path):
        if not path.is_dir():
            LOG.debug('no such directory: %s', path)
            return
        yield from sorted(p for p in path.iterdir() if p.is_dir())

    def images(self):
        return [
            models.Image.load(path)
            for path in self._iter_dirs(self.images_path)
        ]

    def pods(self):
        return [models.Pod.load(p) for p in self._iter_dirs(self.pods_path)]

    def get_image(self, image_hash=None, name=None, labels=None):
        try:
            return self.get_local_image(image_hash, name, labels)
        except errors.NotFoundError:
            # Remote image discovery is not supported by this store.
            LOG.debug(
                'image is not found locally and remote discovery is not '
                'available: hash=%s name=%s labels=%s',
                image_hash, name, labels,
            )
            raise

    def get_local_image(self, image_hash=None, name=None, labels=None):
        if image_hash is not None:
            image_dir_path = self.images_path / str(image_hash)
            if not image_dir_path.is_dir():
                raise errors.NotFoundError('image not found: %s', image_hash)
            return models.Image.load(image_dir_path)
        if name is None:
            raise errors.Error('expect either image hash or name')
        for image in self.images():
            if image.matches(name, labels):
                return image
        raise errors.NotFoundError(
            'image not found: %s%s',
            name,
            ''.join(
                ',%s=%s' % pair
                for pair in sorted((labels or {}).items())
            ),
        )

    def get_pod(self, pod_uuid):
        pod_dir_path = self.pods_path / str(pod_uuid)
        if not pod_dir_path.is_dir():
            raise errors.NotFoundError('pod not found: %s', pod_uuid)
        return models.Pod.load(pod_dir_path)
