"""
Dataset services.

Services responsible for reading EDM4eic collections from ROOT files.
"""

from .event_source import EventSource

__all__ = ["EventSource"]
