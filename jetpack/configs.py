"""Configuration.

Values are read from two sources, higher precedence one comes first:
  * Command-line overrides (``-o KEY=VALUE``).
  * The configuration file (YAML).

Nested mappings of the file are flattened into dotted keys; so these
two files are equivalent:

  output:
    format: csv

  output.format: csv
"""

__all__ = [
    'DEFAULT_PATH',
    'DEFAULTS',
    'load',
    'parse_override',
]

import argparse
import logging
from pathlib import Path

import yaml

from . import errors

LOG = logging.getLogger(__name__)

DEFAULT_PATH = Path('/usr/local/etc/jetpack.yaml')

DEFAULTS = {
    'root': '/var/lib/jetpack',
    'output.format': 'text',
    'output.header': True,
}

_CHOICES = {
    'output.format': ('text', 'csv'),
}


def _flatten(data, prefix=''):
    for key, value in data.items():
        key = '%s%s' % (prefix, key)
        if isinstance(value, dict):
            yield from _flatten(value, key + '.')
        else:
            yield key, value


def _set(config, key, value, source):
    if key not in DEFAULTS:
        raise errors.ConfigError('unknown config key in %s: %s', source, key)
    expect_type = type(DEFAULTS[key])
    if not isinstance(value, expect_type):
        raise errors.ConfigError(
            'expect %s-typed value for %s in %s: %r',
            expect_type.__name__, key, source, value,
        )
    choices = _CHOICES.get(key)
    if choices is not None and value not in choices:
        raise errors.ConfigError(
            'expect one of %s for %s in %s: %r',
            ', '.join(choices), key, source, value,
        )
    config[key] = value


def parse_override(override):
    """Parse ``KEY=VALUE``; this is meant to be an argparse type."""
    key, sep, value = override.partition('=')
    if not sep or not key:
        raise argparse.ArgumentTypeError(
            'expect KEY=VALUE: %r' % override
        )
    try:
        value = yaml.safe_load(value) if value else ''
    except yaml.YAMLError as exc:
        raise argparse.ArgumentTypeError(
            'cannot parse value of %s: %s' % (key, exc)
        ) from None
    return key, value


def load(path=None, overrides=()):
    config = dict(DEFAULTS)

    if path is None:
        path = DEFAULT_PATH
        required = False
    else:
        path = Path(path)
        required = True

    if path.exists():
        LOG.info('load config: %s', path)
        try:
            data = yaml.safe_load(path.read_text())
        except (OSError, yaml.YAMLError) as exc:
            raise errors.ConfigError(
                'cannot read config %s: %s', path, exc
            ) from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise errors.ConfigError('expect mapping in config: %s', path)
        for key, value in _flatten(data):
            _set(config, key, value, path)
    elif required:
        raise errors.ConfigError('config file not found: %s', path)
    else:
        LOG.debug('use default config since %s is absent', path)

    for key, value in overrides:
        _set(config, key, value, 'command-line')

    return config
