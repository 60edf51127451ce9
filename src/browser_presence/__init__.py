"""
Browser Presence - Share the active browser tab as rich presence.

This package watches open browser windows and publishes what is being
browsed to a remote presence service, with features including:

- Declarative per-browser title rules (Chrome, Edge, Firefox, Opera, Brave, Vivaldi)
- Incognito and private window detection
- Change detection with a bounded error budget
- Discord Rich Presence and HTTP publishers
- Background operation as a daemon
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .catalog import BrowserRule, build_catalog
from .classifier import TitleClassifier
from .core import BrowserPresence
from .models import BrowserState, WindowType
from .monitor import PresenceMonitor
from .snapshot import BrowserSnapshotter

__all__ = [
    "BrowserPresence",
    "BrowserRule",
    "BrowserSnapshotter",
    "BrowserState",
    "PresenceMonitor",
    "TitleClassifier",
    "WindowType",
    "build_catalog",
]
