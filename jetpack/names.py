"""App Container naming rules.

See: https://github.com/appc/spec/blob/master/spec/types.md
"""

__all__ = [
    'HASH_ALGORITHM',
    'HASH_SIZE',
    'Hash',
    'host_arch',
    'host_os',
    'make_labels',
    'parse_app_string',
    'validate_ac_identifier',
    'validate_ac_name',
]

import dataclasses
import hashlib
import platform
import re
import sys

from . import errors

# https://github.com/appc/spec/blob/master/spec/types.md#ac-name-type
AC_NAME_PATTERN = re.compile(r'[a-z0-9]+(?:-[a-z0-9]+)*')
AC_IDENTIFIER_PATTERN = re.compile(r'[a-z0-9]+(?:[-._~/][a-z0-9]+)*')

HASH_ALGORITHM = 'sha512'
# Length of the string form of a full hash: "sha512-" + 128 hex digits.
HASH_SIZE = len(HASH_ALGORITHM) + 1 + hashlib.sha512().digest_size * 2

_HEX_PATTERN = re.compile(r'[0-9a-fA-F]+')

# Known os/arch combinations; Go-style arch names are accepted as well
# because that is what host_arch() reports.
VALID_OS_ARCH = {
    'linux': frozenset((
        'amd64', 'i386', 'aarch64', 'aarch64_be', 'armv6l', 'armv7l',
        'armv7b', 'ppc64', 'ppc64le', 's390x',
        '386', 'arm', 'arm64',
    )),
    'freebsd': frozenset(('amd64', 'i386', 'arm', '386', 'arm64')),
    'darwin': frozenset(('x86_64', 'i386', 'amd64', 'arm64')),
}

_MACHINE_TO_ARCH = {
    'x86_64': 'amd64',
    'amd64': 'amd64',
    'i386': '386',
    'i686': '386',
    'aarch64': 'arm64',
    'arm64': 'arm64',
    'armv6l': 'arm',
    'armv7l': 'arm',
}


def validate_ac_name(name):
    if not AC_NAME_PATTERN.fullmatch(name):
        raise errors.ResolutionError('invalid app name: %r', name)
    return name


def validate_ac_identifier(identifier):
    if not AC_IDENTIFIER_PATTERN.fullmatch(identifier):
        raise errors.ResolutionError('invalid identifier: %r', identifier)
    return identifier


@dataclasses.dataclass(frozen=True)
class Hash:
    """Content hash of an image, like ``sha512-0123abcd...``.

    The value may be shorter than a full digest, since users type hash
    prefixes on the command line.
    """

    algorithm: str
    value: str

    @classmethod
    def parse(cls, hash_str):
        pieces = hash_str.split('-')
        if len(pieces) != 2:
            raise errors.ResolutionError('badly formatted hash: %r', hash_str)
        algorithm, value = pieces
        if algorithm != HASH_ALGORITHM:
            raise errors.ResolutionError('unknown hash type: %r', algorithm)
        if not _HEX_PATTERN.fullmatch(value):
            raise errors.ResolutionError('bad hash value: %r', value)
        return cls(algorithm, value)

    def __str__(self):
        return '%s-%s' % (self.algorithm, self.value)

    def is_full(self):
        return len(str(self)) >= HASH_SIZE


def host_os():
    for os_name in VALID_OS_ARCH:
        if sys.platform.startswith(os_name):
            return os_name
    return sys.platform


def host_arch():
    machine = platform.machine().lower()
    return _MACHINE_TO_ARCH.get(machine, machine)


def make_labels(pairs):
    """Make a label dict from (name, value) pairs and validate it."""
    labels = {}
    for name, value in pairs:
        validate_ac_identifier(name)
        if name == 'name':
            raise errors.ResolutionError('invalid label name: %r', name)
        if name in labels:
            raise errors.ResolutionError('duplicate label: %r', name)
        labels[name] = value
    os_name = labels.get('os')
    if os_name is not None:
        valid_archs = VALID_OS_ARCH.get(os_name)
        if valid_archs is None:
            raise errors.ResolutionError(
                'bad os %r (must be one of: %s)',
                os_name,
                ', '.join(sorted(VALID_OS_ARCH)),
            )
        arch = labels.get('arch')
        if arch is not None and arch not in valid_archs:
            raise errors.ResolutionError(
                'bad arch %r for os %r (must be one of: %s)',
                arch,
                os_name,
                ', '.join(sorted(valid_archs)),
            )
    return labels


def parse_app_string(app_str):
    """Parse ``name[:version][,key=value]...``.

    Return the name and the raw (unvalidated) label pairs; the version,
    if given, becomes a ``version`` label.
    """
    first_comma = app_str.find(',')
    first_colon = app_str.find(':')
    if first_comma > -1 and first_colon > first_comma:
        raise errors.ResolutionError(
            'malformed app string: colon may appear only right after '
            'the app name: %r',
            app_str,
        )
    if app_str.count(':') > 1:
        raise errors.ResolutionError(
            'malformed app string: colon may appear at most once: %r',
            app_str,
        )
    app_str = 'name=' + app_str.replace(':', ',version=', 1)
    name = None
    pairs = []
    seen = set()
    for part in app_str.split(','):
        key, sep, value = part.partition('=')
        if not sep:
            raise errors.ResolutionError(
                'malformed app string: %r has no key-value pair', part
            )
        if key in seen:
            raise errors.ResolutionError(
                'label %r with multiple values', key
            )
        seen.add(key)
        if key == 'name':
            name = value
        else:
            pairs.append((key, value))
    return validate_ac_identifier(name), pairs
