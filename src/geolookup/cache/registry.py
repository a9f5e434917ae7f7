"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/registry.py.
"""

from __future__ import annotations

from collections.abc import Callable
from threading import Lock

from ..errors import LookupCacheError
from .base import LookupCacheBackend
from .inmemory import InMemoryLookupCache

_REGISTRY: dict[str, Callable[[], LookupCacheBackend]] = {
    "inmemory": InMemoryLookupCache,
}
_LOCK = Lock()


def register_lookup_cache_backend(
    backend_id: str,
    factory: Callable[[], LookupCacheBackend],
    *,
    overwrite: bool = False,
) -> None:
    """Register one cache backend factory by id."""
    key = backend_id.strip().lower()
    if not key:
        raise LookupCacheError("Cache backend id must be non-empty")

    with _LOCK:
        if key in _REGISTRY and not overwrite:
            raise LookupCacheError(f"Cache backend already registered: {key}")
        _REGISTRY[key] = factory


def create_lookup_cache(
    backend: str | LookupCacheBackend | None = None,
) -> LookupCacheBackend:
    """Resolve a fresh cache from id/instance/default.

    Each call with an id builds a new store, so separate geocoders never
    share cached rows.
    """
    if backend is None:
        backend = "inmemory"

    if not isinstance(backend, str):
        return backend

    key = backend.strip().lower()
    with _LOCK:
        factory = _REGISTRY.get(key)
    if factory is None:
        raise LookupCacheError(f"Unknown lookup cache backend '{backend}'")
    return factory()


def list_lookup_cache_backends() -> list[str]:
    """List registered cache backend ids."""
    with _LOCK:
        return sorted(_REGISTRY.keys())
