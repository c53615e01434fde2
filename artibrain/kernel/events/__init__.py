"""
Event log - append-only audit of mutations.
"""

from artibrain.kernel.events.event_store import EventStore

__all__ = ["EventStore"]
