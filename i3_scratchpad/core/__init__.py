"""Window selection and movement engine."""

from .client import WindowManager
from .dry_run import DryRunClient
from .i3_client import I3Client
from .mover import Geometry, WindowMover
from .orchestrator import ScratchpadOrchestrator
from .querier import WindowQuerier

__all__ = [
    "DryRunClient",
    "Geometry",
    "I3Client",
    "ScratchpadOrchestrator",
    "WindowManager",
    "WindowMover",
    "WindowQuerier",
]
