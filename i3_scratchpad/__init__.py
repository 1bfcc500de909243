"""
i3-scratchpad: an i3-style scratchpad for i3 and sway.

Windows are hidden in the reserved '.scratchpad' workspace and brought back
by pattern, with optional property filters.
"""

__version__ = "0.1.0"
