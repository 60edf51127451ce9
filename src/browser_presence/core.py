#!/usr/bin/env python3
"""
Browser Presence
Shares the active browser tab with a remote presence service.
"""

from typing import List, Mapping, Optional

from .catalog import BrowserRule, build_catalog
from .config import Config, get_config
from .models import BrowserState
from .monitor import MonitorLogger, PresenceMonitor
from .publisher import PresencePublisher, create_publisher
from .snapshot import BrowserSnapshotter, ProcessLister


def default_process_lister(debug: bool = False) -> ProcessLister:
    """macOS process enumeration, imported on first use."""
    from .detection import ProcessWindowLister

    return ProcessWindowLister(debug=debug)


class BrowserPresence:
    """
    Browser Presence - Orchestrates detection, monitoring and publishing.

    Uses composition to delegate responsibilities to specialized classes.
    """

    def __init__(
        self,
        publisher: Optional[PresencePublisher] = None,
        interval: int = 3,
        verbose: bool = True,
        debug: bool = False,
        handshake_timeout: float = 5.0,
        lister: Optional[ProcessLister] = None,
        catalog: Optional[Mapping[str, BrowserRule]] = None,
    ):
        """
        Initialize Browser Presence.

        Args:
            publisher (Optional[PresencePublisher]): Presence channel. Only
                needed for monitoring; detection works without one.
            interval (int): Seconds between the end of one poll and the next.
            verbose (bool): Print status and browser changes.
            debug (bool): Print notes about skipped processes and titles.
            handshake_timeout (float): Seconds to wait for the publisher.
            lister (Optional[ProcessLister]): Process enumeration primitive.
            catalog (Optional[Mapping]): Browser rules, defaults to the
                built-in catalog.
        """
        self.interval = interval
        self.handshake_timeout = handshake_timeout
        self.publisher = publisher
        self.logger = MonitorLogger(verbose=verbose)

        self.catalog = catalog if catalog is not None else build_catalog()
        self.snapshotter = BrowserSnapshotter(
            self.catalog,
            lister if lister is not None else default_process_lister(debug),
            debug=debug,
        )
        self.monitor: Optional[PresenceMonitor] = None

    @classmethod
    def from_config(
        cls, config: Config, lister: Optional[ProcessLister] = None
    ) -> "BrowserPresence":
        """Build an instance wired to the configured publisher."""
        app = cls(
            interval=config.update_interval_seconds,
            verbose=config.verbose_logging,
            debug=config.debug,
            handshake_timeout=config.handshake_timeout,
            lister=lister,
        )
        app.publisher = create_publisher(config, on_log=app.logger.log_status)
        return app

    def start(self) -> bool:
        """Connect the publisher and start background monitoring."""
        if self.publisher is None:
            raise ValueError("A presence publisher is required for monitoring")

        if self.monitor is None or not self.monitor.is_running:
            if self.monitor is not None:
                # A monitor that gave up on errors still holds its session
                self.monitor.stop()
            self.monitor = PresenceMonitor(
                self.snapshotter,
                self.publisher,
                interval=self.interval,
                on_status=self.logger.log_status,
                on_change=self.logger.log_browser_change,
            )

        self.logger.log_monitoring_start(self.publisher.label, self.interval)
        return self.monitor.start(timeout=self.handshake_timeout)

    def run(self) -> bool:
        """Start monitoring and block until it stops on its own."""
        if not self.start():
            print("\nFailed to start monitoring.")
            print("Make sure the presence service is running and setup is complete.")
            return False

        print("Monitoring started. Press Ctrl+C to exit.")
        # Short joins keep the main thread responsive to KeyboardInterrupt
        while not self.monitor.wait(1.0):
            pass
        return True

    def stop(self) -> None:
        """Stop monitoring and release the publisher."""
        if self.monitor is not None:
            self.monitor.stop()

    def detect(self) -> List[BrowserState]:
        """Run one detection sweep in the foreground and print the result."""
        print("Testing browser detection...")
        print()
        browsers = self.snapshotter.get_active_browsers()
        self.logger.log_detected_browsers(browsers)
        return browsers


def print_usage() -> None:
    print("Browser Presence")
    print("Usage: browser-presence [run|detect] [options]")
    print("Commands:")
    print("  run                    Publish the active browser (default)")
    print("  detect                 List detected browser windows once and exit")
    print("Options:")
    print("  --quiet, -q            Run in quiet mode (no logging)")
    print("  --debug                Print notes about skipped processes")
    print("  --interval SEC         Update interval in seconds (minimum: 2)")
    print("  --publisher NAME       Presence backend: discord or http")
    print("  --help, -h             Show this help message")


def main():
    """Main entry point."""
    import sys

    if "--help" in sys.argv or "-h" in sys.argv:
        print_usage()
        return

    config = get_config()
    overrides = {}

    if "--quiet" in sys.argv or "-q" in sys.argv:
        overrides["verbose_logging"] = False
    if "--debug" in sys.argv:
        overrides["debug"] = True

    for i, arg in enumerate(sys.argv):
        if arg == "--interval" and i + 1 < len(sys.argv):
            try:
                overrides["update_interval_seconds"] = int(sys.argv[i + 1])
            except ValueError:
                print(f"Invalid interval: {sys.argv[i + 1]}")
                return
        elif arg == "--publisher" and i + 1 < len(sys.argv):
            overrides["publisher"] = sys.argv[i + 1]

    config.update(overrides)

    if "detect" in sys.argv[1:]:
        app = BrowserPresence(verbose=True, debug=config.debug)
        app.detect()
        return

    try:
        app = BrowserPresence.from_config(config)
    except ValueError as e:
        print(f"Error: {e}")
        return

    try:
        app.run()
    except KeyboardInterrupt:
        print("\nReceived interrupt signal")
    finally:
        app.stop()
        print("Browser presence stopped")


if __name__ == "__main__":
    main()
