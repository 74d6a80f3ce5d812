import unittest

import json
import tempfile
import uuid
from pathlib import Path

from jetpack import errors
from jetpack import models
from jetpack import names
from jetpack import stores

POD_UUID_1 = uuid.UUID('11111111-2222-3333-4444-555555555555')
POD_UUID_2 = uuid.UUID('66666666-7777-8888-9999-aaaaaaaaaaaa')
POD_UUID_3 = uuid.UUID('bbbbbbbb-cccc-dddd-eeee-ffffffffffff')


def make_hash(hex_prefix):
    """Make a full-length hash starting with ``hex_prefix``."""
    size = names.HASH_SIZE - len(names.HASH_ALGORITHM) - 1
    return names.Hash(names.HASH_ALGORITHM, hex_prefix.ljust(size, '0'))


def make_image(hex_prefix, name='example.com/web', **labels):
    return models.Image(hash=make_hash(hex_prefix), name=name, labels=labels)


def make_pod(pod_uuid, *app_names):
    return models.Pod(
        uuid=pod_uuid,
        manifest=models.PodManifest(
            apps=tuple(
                models.RuntimeApp(
                    name=app_name,
                    image=models.ImageRef(
                        name='example.com/%s' % app_name,
                        id=make_hash('ab'),
                    ),
                    app={
                        'exec': ['/bin/%s' % app_name, '--serve'],
                        'user': 'www',
                        'group': 'www',
                        'environment': [
                            {'name': 'PORT', 'value': '8080'},
                            {'name': 'APP', 'value': app_name},
                        ],
                    },
                ) for app_name in app_names
            ),
        ),
    )


class FakeStore(stores.Store):
    """In-memory store that records lookups."""

    def __init__(self, images=(), pods=()):
        self._images = list(images)
        self._pods = {pod.uuid: pod for pod in pods}
        self.calls = []

    def images(self):
        self.calls.append(('images', ))
        return list(self._images)

    def pods(self):
        self.calls.append(('pods', ))
        return list(self._pods.values())

    def _find(self, image_hash, name, labels):
        for image in self._images:
            if image_hash is not None:
                if image.hash == image_hash:
                    return image
            elif image.matches(name, labels):
                return image
        raise errors.NotFoundError('image not found')

    def get_image(self, image_hash=None, name=None, labels=None):
        self.calls.append(('get_image', image_hash, name, labels))
        return self._find(image_hash, name, labels)

    def get_local_image(self, image_hash=None, name=None, labels=None):
        self.calls.append(('get_local_image', image_hash, name, labels))
        return self._find(image_hash, name, labels)

    def get_pod(self, pod_uuid):
        self.calls.append(('get_pod', pod_uuid))
        try:
            return self._pods[pod_uuid]
        except KeyError:
            raise errors.NotFoundError('pod not found: %s', pod_uuid) \
                from None


class RepoTestCaseBase(unittest.TestCase):

    def setUp(self):
        super().setUp()
        self.test_repo_tempdir = tempfile.TemporaryDirectory()
        self.test_repo_path = Path(self.test_repo_tempdir.name)

    def tearDown(self):
        self.test_repo_tempdir.cleanup()
        super().tearDown()

    def write_image(self, image_hash, manifest):
        image_dir_path = self.test_repo_path / 'images' / str(image_hash)
        image_dir_path.mkdir(parents=True)
        (image_dir_path / 'manifest').write_text(json.dumps(manifest))
        return image_dir_path

    def write_pod(self, pod_uuid, manifest):
        pod_dir_path = self.test_repo_path / 'pods' / str(pod_uuid)
        pod_dir_path.mkdir(parents=True)
        (pod_dir_path / 'manifest').write_text(json.dumps(manifest))
        return pod_dir_path

    @staticmethod
    def make_image_manifest(name, **labels):
        return {
            'acKind': 'ImageManifest',
            'acVersion': '0.8.11',
            'name': name,
            'labels': [
                {'name': label_name, 'value': value}
                for label_name, value in labels.items()
            ],
        }

    @staticmethod
    def make_pod_manifest(*apps):
        return {
            'acKind': 'PodManifest',
            'acVersion': '0.8.11',
            'apps': [
                {
                    'name': app_name,
                    'image': {'name': image_name, 'id': str(image_hash)},
                    'app': {'exec': ['/bin/%s' % app_name]},
                } for app_name, image_name, image_hash in apps
            ],
        }
