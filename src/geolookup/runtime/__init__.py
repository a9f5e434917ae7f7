"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .coalescer import LookupCoalescer
from .pending import PendingRequestTable
from .scheduler import LoopScheduler, ManualScheduler, Scheduler, TimerHandle
from .state import CoalescerState, SlotPhase, Waiter
from .timeouts import await_with_timeout

__all__ = [
    "LookupCoalescer",
    "PendingRequestTable",
    "Scheduler",
    "TimerHandle",
    "LoopScheduler",
    "ManualScheduler",
    "CoalescerState",
    "SlotPhase",
    "Waiter",
    "await_with_timeout",
]
