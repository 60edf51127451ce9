#!/usr/bin/env python3
"""
Process and window enumeration for Browser Presence.
Handles all macOS-specific detection logic.
"""

import sys
from typing import Dict, List

from .snapshot import ProcessWindow

try:
    from AppKit import NSWorkspace
    from Quartz import (
        CGWindowListCopyWindowInfo,
        kCGNullWindowID,
        kCGWindowListExcludeDesktopElements,
        kCGWindowListOptionOnScreenOnly,
    )
except ImportError:
    print(
        "Error: pyobjc frameworks not installed. "
        "Run: pip install pyobjc-framework-Cocoa pyobjc-framework-Quartz"
    )
    sys.exit(1)


class ProcessWindowLister:
    """Lists running applications with their front-most window title."""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def list_processes(self) -> List[ProcessWindow]:
        """
        Enumerate running applications.

        Applications that cannot be inspected are skipped rather than raised;
        a failure to query the workspace itself propagates to the caller.
        """
        titles = self.get_window_titles()
        processes = []

        for app in NSWorkspace.sharedWorkspace().runningApplications():
            try:
                pid = int(app.processIdentifier())
                name = str(app.localizedName() or "")
            except Exception as e:
                if self.debug:
                    print(f"Debug: Skipping inaccessible application: {e}")
                continue

            if name:
                processes.append(ProcessWindow(pid, name, titles.get(pid, "")))

        return processes

    def get_window_titles(self) -> Dict[int, str]:
        """Map owner PID to the title of its front-most normal window."""
        titles: Dict[int, str] = {}
        window_list = CGWindowListCopyWindowInfo(
            kCGWindowListOptionOnScreenOnly | kCGWindowListExcludeDesktopElements,
            kCGNullWindowID,
        )

        # Quartz returns windows front to back
        for window in window_list or []:
            try:
                if window.get("kCGWindowLayer", 0) != 0:
                    continue
                pid = int(window.get("kCGWindowOwnerPID", -1))
                title = window.get("kCGWindowName", "") or ""
            except Exception as e:
                if self.debug:
                    print(f"Debug: Skipping unreadable window entry: {e}")
                continue

            if pid not in titles and title.strip():
                titles[pid] = str(title)

        return titles
