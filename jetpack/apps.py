"""Subcommands of the jetpack tool."""

__all__ = [
    'APP_NAME',
    'make_registry',
]

import json
import sys

from . import __version__
from . import bindings
from . import commands
from . import errors
from . import formatters
from . import names

APP_NAME = 'jetpack'


def add_quiet_flag(parser):
    parser.add_argument(
        '-q', '--quiet', action='store_true',
        help='print only identifiers',
    )


def format_labels(labels):
    return ','.join('%s=%s' % pair for pair in labels.items())


def format_image_ref(image_ref):
    return str(image_ref.id) if image_ref.id else image_ref.name


class Application:

    def __init__(self, store, config, output=None, error_output=None):
        self.store = store
        self.config = config
        self.output = output or sys.stdout
        self.error_output = error_output or sys.stderr
        self.registry = None
        self.images_command = None
        self.pods_command = None

    def print(self, *args):
        print(*args, file=self.output)

    #
    # Global commands.
    #

    def help(self, args):
        if not args:
            print(
                'Usage: %s [-v] [-c PATH] [-o KEY=VALUE] COMMAND [ARGS...]\n'
                '\nCommands:\n%s' %
                (self.registry.app_name, self.registry.describe()),
                file=self.error_output,
            )
        elif len(args) == 1:
            try:
                command = self.registry[args[0]]
            except KeyError:
                raise errors.NotFoundError(
                    'unknown command: %s', args[0]
                ) from None
            command.help(self.error_output)
        else:
            raise errors.UsageError()

    def show_version(self):
        self.print('%s %s' % (APP_NAME, __version__))

    def show_info(self):
        self.print('root: %s' % self.config['root'])
        self.print('host: %s/%s' % (names.host_os(), names.host_arch()))
        self.print('images: %d' % len(self.store.images()))
        self.print('pods: %d' % len(self.store.pods()))

    #
    # Image commands.
    #

    def list_images(self):
        images = self.store.images()
        if self.images_command.options.quiet:
            for image in images:
                self.print(image.hash)
            return
        formatter = formatters.Formatter.from_config(
            ('HASH', 'NAME', 'LABELS'), self.config
        )
        for image in images:
            formatter.append(
                image.hash, image.name, format_labels(image.labels)
            )
        formatter.output(self.output)

    def show_image(self, image, label_names):
        if label_names:
            for label_name in label_names:
                if label_name not in image.labels:
                    raise errors.NotFoundError(
                        'image %s has no label %s', image.hash, label_name
                    )
                self.print(image.labels[label_name])
            return
        self.print('hash: %s' % image.hash)
        self.print('name: %s' % image.name)
        for label_name, value in image.labels.items():
            self.print('label: %s=%s' % (label_name, value))

    def show_image_hash(self, image):
        self.print(image.hash)

    #
    # Pod commands.
    #

    def list_pods(self):
        pods = self.store.pods()
        if self.pods_command.options.quiet:
            for pod in pods:
                self.print(pod.uuid)
            return
        formatter = formatters.Formatter.from_config(
            ('UUID', 'APPS'), self.config
        )
        for pod in pods:
            formatter.append(
                pod.uuid, ','.join(app.name for app in pod.manifest.apps)
            )
        formatter.output(self.output)

    def show_pod(self, pod):
        self.print('uuid: %s' % pod.uuid)
        for name, value in pod.manifest.annotations.items():
            self.print('annotation: %s=%s' % (name, value))
        for app in pod.manifest.apps:
            self.print('app: %s %s' % (app.name, format_image_ref(app.image)))

    def list_apps(self, pod, app_names):
        if app_names:
            apps = [
                self._get_app(pod, names.validate_ac_name(app_name))
                for app_name in app_names
            ]
        else:
            apps = pod.manifest.apps
        formatter = formatters.Formatter.from_config(
            ('NAME', 'IMAGE', 'EXEC'), self.config
        )
        for app in apps:
            formatter.append(
                app.name, format_image_ref(app.image), ' '.join(app.exec)
            )
        formatter.output(self.output)

    #
    # App commands.
    #

    @staticmethod
    def _get_app(pod, app_name):
        app = pod.manifest.get_app(app_name)
        if app is None:
            raise errors.NotFoundError(
                'pod %s has no app %s', pod.uuid, app_name
            )
        return app

    def show_manifest(self, pod, app_name, keys):
        if app_name is None:
            manifest = pod.manifest.to_manifest()
        else:
            manifest = self._get_app(pod, app_name).to_manifest()
        if keys:
            missing = [key for key in keys if key not in manifest]
            if missing:
                raise errors.NotFoundError(
                    'no such manifest keys: %s', ', '.join(missing)
                )
            manifest = {key: manifest[key] for key in keys}
        self.print(json.dumps(manifest, indent=2, sort_keys=True))

    def show_app_images(self, pod, app_name):
        if app_name is None:
            apps = pod.manifest.apps
        else:
            apps = [self._get_app(pod, app_name)]
        for app in apps:
            self.print('%s %s' % (app.name, format_image_ref(app.image)))

    def show_app(self, pod, app_name):
        app = self._get_app(pod, app_name)
        self.print('pod: %s' % pod.uuid)
        self.print('name: %s' % app.name)
        self.print('image: %s' % format_image_ref(app.image))
        if app.exec:
            self.print('exec: %s' % ' '.join(app.exec))
        if app.user or app.group:
            self.print('user: %s:%s' % (app.user, app.group))

    def show_environment(self, pod, app_name, var_names):
        environment = self._get_app(pod, app_name).environment
        for var_name in var_names or environment:
            if var_name not in environment:
                raise errors.NotFoundError(
                    'app %s has no environment variable %s',
                    app_name,
                    var_name,
                )
            self.print('%s=%s' % (var_name, environment[var_name]))


def make_registry(
    store,
    config,
    *,
    app_name=APP_NAME,
    output=None,
    error_output=None,
):
    app = Application(store, config, output, error_output)
    registry = app.registry = commands.Registry(app_name)

    registry.register('help [COMMAND]', 'show help', app.help)
    registry.register(
        'version', 'show version', bindings.wrap(app.show_version)
    )
    registry.register(
        'info', 'show repository information',
        bindings.wrap_err(app.show_info),
    )

    app.images_command = registry.register(
        'images [-q]', 'list images',
        bindings.wrap_err(app.list_images),
        add_quiet_flag,
    )
    registry.register(
        'image IMAGE [LABEL...]', 'show image or its label values',
        bindings.wrap_image(store, app.show_image, local_only=True),
    )
    registry.register(
        'hash IMAGE', 'resolve image hash',
        bindings.wrap_image0(store, app.show_image_hash, local_only=False),
    )

    app.pods_command = registry.register(
        'pods [-q]', 'list pods',
        bindings.wrap_err(app.list_pods),
        add_quiet_flag,
    )
    registry.register(
        'pod POD', 'show pod',
        bindings.wrap_pod0(store, app.show_pod),
    )
    registry.register(
        'apps POD [APP...]', 'list apps of pod',
        bindings.wrap_pod(store, app.list_apps),
    )

    registry.register(
        'manifest POD[:APP] [KEY...]', 'show pod or app manifest',
        bindings.wrap_app(store, app.show_manifest),
    )
    registry.register(
        'app-images POD[:APP]', 'show images of pod apps',
        bindings.wrap_app0(store, app.show_app_images),
    )
    registry.register(
        'app POD[:APP]', 'show app',
        bindings.wrap_must_app0(store, app.show_app),
    )
    registry.register(
        'env POD[:APP] [NAME...]', 'show app environment',
        bindings.wrap_must_app(store, app.show_environment),
    )

    return registry
