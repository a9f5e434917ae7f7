"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import LookupCacheBackend
from .inmemory import InMemoryLookupCache
from .registry import (
    create_lookup_cache,
    list_lookup_cache_backends,
    register_lookup_cache_backend,
)

__all__ = [
    "LookupCacheBackend",
    "InMemoryLookupCache",
    "register_lookup_cache_backend",
    "create_lookup_cache",
    "list_lookup_cache_backends",
]
