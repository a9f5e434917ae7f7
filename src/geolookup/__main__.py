"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: __main__.py.
"""

from .cli import main

raise SystemExit(main())
