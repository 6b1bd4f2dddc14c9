"""Synchronization engine."""

from .orchestrator import MediaSyncer, load_seen_set

__all__ = ["MediaSyncer", "load_seen_set"]
