"""Data model of images and pods.

Both are loaded from App Container manifests (JSON); this module only
reads them, and never writes them back.
"""

__all__ = [
    'Image',
    'ImageRef',
    'Pod',
    'PodManifest',
    'RuntimeApp',
]

import dataclasses
import json
import typing
import uuid
from pathlib import Path

from . import errors
from . import names

MANIFEST = 'manifest'


def _labels_from_manifest(label_list):
    return names.make_labels(_name_value_pairs(label_list, 'label'))


def _name_value_pairs(entries, what):
    pairs = []
    for entry in entries or ():
        try:
            pairs.append((entry['name'], entry['value']))
        except (KeyError, TypeError):
            raise errors.Error(
                'malformed %s entry: %r', what, entry
            ) from None
    return pairs


def _labels_to_manifest(labels):
    return [{'name': name, 'value': value} for name, value in labels.items()]


def load_manifest(path):
    try:
        manifest = json.loads(path.read_text())
    except (OSError, ValueError) as exc:
        raise errors.Error('cannot load manifest: %s: %s', path, exc) from exc
    if not isinstance(manifest, dict):
        raise errors.Error('expect JSON object in manifest: %s', path)
    return manifest


@dataclasses.dataclass(frozen=True)
class Image:

    hash: names.Hash
    name: str
    labels: typing.Dict[str, str] = dataclasses.field(default_factory=dict)
    manifest: dict = dataclasses.field(default_factory=dict, repr=False)
    path: typing.Optional[Path] = None

    @classmethod
    def load(cls, image_dir_path):
        manifest = load_manifest(image_dir_path / MANIFEST)
        with errors.tracing('loading image %s', image_dir_path):
            return cls(
                hash=names.Hash.parse(image_dir_path.name),
                name=names.validate_ac_identifier(manifest.get('name', '')),
                labels=_labels_from_manifest(manifest.get('labels')),
                manifest=manifest,
                path=image_dir_path,
            )

    def __str__(self):
        return '%s (%s)' % (self.name, self.hash)

    def matches(self, name, labels):
        """True if this image satisfies a (name, labels) query.

        A label that the image does not declare does not disqualify it;
        images without an "arch" label run on any arch, for example.
        """
        if self.name != name:
            return False
        return all(
            self.labels.get(label_name, value) == value
            for label_name, value in (labels or {}).items()
        )


@dataclasses.dataclass(frozen=True)
class ImageRef:
    """Image of an app as written in a pod manifest."""

    name: str
    id: typing.Optional[names.Hash] = None
    labels: typing.Dict[str, str] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_manifest(cls, image_data):
        image_id = image_data.get('id')
        return cls(
            name=image_data.get('name', ''),
            id=names.Hash.parse(image_id) if image_id else None,
            labels=_labels_from_manifest(image_data.get('labels')),
        )


@dataclasses.dataclass(frozen=True)
class RuntimeApp:

    name: str
    image: ImageRef
    app: dict = dataclasses.field(default_factory=dict)

    @classmethod
    def from_manifest(cls, app_data):
        return cls(
            name=names.validate_ac_name(app_data.get('name', '')),
            image=ImageRef.from_manifest(app_data.get('image') or {}),
            app=app_data.get('app') or {},
        )

    @property
    def exec(self):
        return list(self.app.get('exec') or ())

    @property
    def user(self):
        return self.app.get('user', '')

    @property
    def group(self):
        return self.app.get('group', '')

    @property
    def environment(self):
        return dict(
            _name_value_pairs(self.app.get('environment'), 'environment')
        )

    def to_manifest(self):
        image_data = {'name': self.image.name}
        if self.image.id:
            image_data['id'] = str(self.image.id)
        if self.image.labels:
            image_data['labels'] = _labels_to_manifest(self.image.labels)
        app_data = {'name': self.name, 'image': image_data}
        if self.app:
            app_data['app'] = self.app
        return app_data


@dataclasses.dataclass(frozen=True)
class PodManifest:

    # Apps are kept in manifest order.
    apps: typing.Tuple[RuntimeApp, ...] = ()
    annotations: typing.Dict[str, str] = dataclasses.field(
        default_factory=dict
    )

    @classmethod
    def from_manifest(cls, manifest):
        apps = tuple(
            RuntimeApp.from_manifest(app_data)
            for app_data in manifest.get('apps') or ()
        )
        app_names = [app.name for app in apps]
        if len(set(app_names)) != len(app_names):
            raise errors.Error('duplicate app names in pod: %s', app_names)
        return cls(
            apps=apps,
            annotations=dict(
                _name_value_pairs(manifest.get('annotations'), 'annotation')
            ),
        )

    def get_app(self, name):
        for app in self.apps:
            if app.name == name:
                return app
        return None

    def to_manifest(self):
        manifest = {
            'acKind': 'PodManifest',
            'apps': [app.to_manifest() for app in self.apps],
        }
        if self.annotations:
            manifest['annotations'] = _labels_to_manifest(self.annotations)
        return manifest


@dataclasses.dataclass(frozen=True)
class Pod:

    uuid: uuid.UUID
    manifest: PodManifest
    path: typing.Optional[Path] = None

    @classmethod
    def load(cls, pod_dir_path):
        manifest = load_manifest(pod_dir_path / MANIFEST)
        with errors.tracing('loading pod %s', pod_dir_path):
            try:
                pod_uuid = uuid.UUID(pod_dir_path.name)
            except ValueError:
                raise errors.Error(
                    'invalid pod directory name: %s', pod_dir_path.name
                ) from None
            return cls(
                uuid=pod_uuid,
                manifest=PodManifest.from_manifest(manifest),
                path=pod_dir_path,
            )

    def __str__(self):
        return str(self.uuid)
