#!/usr/bin/env python3
"""
Presence monitoring core logic for Browser Presence.
Polls for the active browser, detects changes and drives the publisher.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from .models import BrowserState
from .publisher import PresencePublisher
from .snapshot import BrowserSnapshotter

MAX_CONSECUTIVE_ERRORS = 5

StatusCallback = Callable[[str], None]
ChangeCallback = Callable[[BrowserState], None]


class MonitorStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class PollState:
    """Mutable loop state. Only the monitor thread touches it."""

    last_state: Optional[BrowserState] = None
    error_count: int = 0


class PresenceMonitor:
    """
    Publishes the active browser to a presence channel on a fixed interval.

    One background thread runs the loop; callers only see the status and
    change callbacks. The delay is applied after each tick completes, so slow
    ticks push the schedule back rather than overlapping.
    """

    def __init__(
        self,
        snapshotter: BrowserSnapshotter,
        publisher: PresencePublisher,
        interval: float = 3,
        on_status: Optional[StatusCallback] = None,
        on_change: Optional[ChangeCallback] = None,
        max_errors: int = MAX_CONSECUTIVE_ERRORS,
    ):
        self.snapshotter = snapshotter
        self.publisher = publisher
        self.interval = interval
        self.on_status = on_status
        self.on_change = on_change
        self.max_errors = max_errors

        self.status = MonitorStatus.IDLE
        self.poll_state = PollState()
        self._cancel = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._publisher_open = False
        self._release_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self.status is MonitorStatus.RUNNING

    def start(self, timeout: float = 5.0) -> bool:
        """Connect the publisher and start polling. Returns False on failure."""
        if self.is_running:
            return True
        if self.status is MonitorStatus.STOPPED:
            self._emit_status("Monitoring already stopped. Create a new monitor.")
            return False

        self._emit_status("Connecting to presence service...")
        if not self._handshake(timeout):
            self._emit_status(
                "Failed to connect to presence service. "
                "Make sure it is running and configured."
            )
            return False

        self._publisher_open = True
        self.poll_state = PollState()
        self.status = MonitorStatus.RUNNING
        self._emit_status("Starting browser monitoring...")

        self._thread = threading.Thread(
            target=self.run_loop, name="browser-presence-monitor", daemon=True
        )
        self._thread.start()
        return True

    def _handshake(self, timeout: float) -> bool:
        """
        Run publisher.initialize() in a helper thread, bounded by timeout.

        A session that only opens after the caller gave up is disposed by
        the helper thread itself.
        """
        result = {"done": False, "connected": False}
        abandoned = threading.Event()
        lock = threading.Lock()

        def connect():
            connected = False
            try:
                connected = bool(self.publisher.initialize(timeout))
            except Exception as e:
                self._emit_status(f"Presence service error: {e}")

            with lock:
                if not abandoned.is_set():
                    result["done"] = True
                    result["connected"] = connected
                    return

            if connected:
                try:
                    self.publisher.dispose()
                except Exception as e:
                    self._emit_status(f"Error releasing presence service: {e}")

        worker = threading.Thread(
            target=connect, name="browser-presence-handshake", daemon=True
        )
        worker.start()
        worker.join(timeout)

        with lock:
            if not result["done"]:
                abandoned.set()
        if abandoned.is_set():
            self._emit_status(f"Presence service connection timed out after {timeout}s")
            return False
        return result["connected"]

    def run_loop(self) -> None:
        """Tick until cancelled or the error budget is exhausted."""
        while not self._cancel.is_set():
            if not self.tick():
                break
            if self._cancel.wait(self.interval):
                break

    def tick(self) -> bool:
        """
        Run one sample/diff/publish iteration.

        Returns False once the error budget is exhausted and the monitor has
        stopped.
        """
        state = self.poll_state
        try:
            current = self.snapshotter.get_active_browser()

            if current is not None:
                if state.last_state is None or current != state.last_state:
                    self.publisher.publish(current)
                    state.last_state = current
                    self._emit_change(current)
                    self._emit_status(
                        f"Active: {current.browser_name}{current.mode_label} - "
                        f"{current.tab_title}"
                    )
            elif state.last_state is not None:
                self.publisher.clear()
                state.last_state = None
                self._emit_status("No active browser detected")

            state.error_count = 0
            return True

        except Exception as e:
            state.error_count += 1
            self._emit_status(
                f"Monitoring error ({state.error_count}/{self.max_errors}): {e}"
            )
            if state.error_count >= self.max_errors:
                self._emit_status("Too many errors. Stopping monitoring.")
                self.status = MonitorStatus.STOPPED
                self._cancel.set()
                return False
            return True

    def stop(self) -> None:
        """Stop polling and release the publisher. Safe to call repeatedly."""
        self._cancel.set()

        # A callback running on the loop thread may call stop() itself
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

        with self._release_lock:
            release = self._publisher_open
            self._publisher_open = False

        self.status = MonitorStatus.STOPPED
        if not release:
            return

        self.poll_state.last_state = None
        try:
            self.publisher.dispose()
        except Exception as e:
            self._emit_status(f"Error releasing presence service: {e}")
        self._emit_status("Monitoring stopped")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the loop thread exits. Returns True if it has."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _emit_status(self, message: str) -> None:
        if self.on_status:
            try:
                self.on_status(message)
            except Exception as e:
                print(f"Warning: Status callback failed: {e}")

    def _emit_change(self, state: BrowserState) -> None:
        if self.on_change:
            self.on_change(state)


class MonitorLogger:
    """Handles console output for presence monitoring."""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

    def _timestamp(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def log_monitoring_start(self, publisher: str, interval: float) -> None:
        """Log monitoring start information."""
        if not self.verbose:
            return

        print("=== Browser Presence ===")
        print(f"Publisher: {publisher}")
        print(f"Update interval: {interval}s")
        print("-" * 70)

    def log_status(self, message: str) -> None:
        """Log a status message from the monitor."""
        if not self.verbose:
            return

        print(f"[{self._timestamp()}] {message}")

    def log_browser_change(self, state: BrowserState) -> None:
        """Log a change of active browser or tab."""
        if not self.verbose:
            return

        print(
            f"[{self._timestamp()}] "
            f"{state.browser_name}{state.mode_label}: {state.tab_title}"
        )

    def log_detected_browsers(self, browsers: List[BrowserState]) -> None:
        """Print the result of a one-off detection sweep."""
        if not browsers:
            print("No browsers detected. Make sure a browser window is open.")
            return

        print(f"Detected {len(browsers)} browser(s):")
        print()
        for browser in browsers:
            mode = browser.window_type.value.capitalize()
            print(f"[{mode}] {browser.browser_name}")
            print(f"  Title: {browser.tab_title}")
            print(f"  Icon: {browser.icon_key}")
            if browser.url:
                print(f"  URL: {browser.url}")
            print()
