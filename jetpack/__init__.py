"""Jetpack: manage App Container images and pods.

This package is the command-line front end of the tool; it parses
subcommand arguments, resolves the textual references a user types
into images, pods, and apps, and hands them to the command handlers:

* An image is referred to by its content hash (a unique prefix of it
  is accepted) or by a discovery string like ``example.com/web:1.0``
  with optional ``,label=value`` pairs.

* A pod is referred to by its UUID, and an app by ``POD:APP``; when a
  pod has only one app, ``POD`` alone selects it.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = '0.1.0'
