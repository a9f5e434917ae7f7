"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: fetchers/__init__.py.
"""

from .base import Fetcher
from .nominatim import NominatimFetcher

__all__ = ["Fetcher", "NominatimFetcher"]
