"""Long-running and event-driven services."""

from .hook import MovingMarker, PullWindowHook
from .registry import StickyRegistry
from .tracker import StickyTracker

__all__ = ["MovingMarker", "PullWindowHook", "StickyRegistry", "StickyTracker"]
