"""Constants shared across the scratchpad tool."""

from pathlib import Path
from typing import Dict

# Reserved workspace holding hidden windows
SCRATCHPAD_WORKSPACE = ".scratchpad"

# Present while a programmatic move into the scratchpad is in flight
MOVING_MARKER_PATH = Path("/tmp/.i3-scratchpad-moving")

# Environment variables
ENV_LOGS_PATH = "I3_SCRATCHPAD_LOGS_PATH"
ENV_LOGS_LEVEL = "I3_SCRATCHPAD_LOGS_LEVEL"
ENV_SOCKET = "I3_SCRATCHPAD_SOCKET"
ENV_IPC_TIMEOUT = "I3_SCRATCHPAD_IPC_TIMEOUT"
ENV_CONFIG_DIR = "I3_SCRATCHPAD_CONFIG_DIR"

DEFAULT_LOGS_PATH = Path("/tmp/i3-scratchpad.log")
DEFAULT_IPC_TIMEOUT = 5.0

# Sticky tracker poll period (seconds)
STICKY_POLL_INTERVAL = 0.5
STICKY_REGISTRY_FILENAME = "sticky.json"

# Oldest i3 release with `focus next|prev`
MIN_I3_VERSION = (4, 20)

# Well-known applications and the scratchpad workspace they live on.
# Descriptive only, nothing moves windows here automatically.
HOME_WORKSPACES: Dict[str, str] = {
    "1Password": ".scratchpad",
    "Alacritty": ".scratchpad",
    "Calculator": ".scratchpad",
    "Ghostty": ".scratchpad",
    "Slack": ".scratchpad",
    "Spotify": ".scratchpad",
    "kitty": ".scratchpad",
    "obsidian": ".scratchpad",
    "pavucontrol": ".scratchpad",
}
