"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (settings, logging, storage, errors and
middleware), ``schemas``, ``services`` and the versioned routes under
``api/<version>/``.
"""

from .main import app  # noqa: F401
