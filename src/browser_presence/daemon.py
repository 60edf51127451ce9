#!/usr/bin/env python3
"""
Daemon wrapper for Browser Presence.
Runs presence monitoring as a background service.
"""

import fcntl
import os
import signal
import sys
import tempfile
import time
from pathlib import Path
from typing import Optional

from .config import get_config
from .core import BrowserPresence


class PresenceDaemon:
    def __init__(self, pidfile: Optional[str] = None):
        if pidfile is None:
            temp_dir = Path(tempfile.gettempdir())
            self.pidfile = str(temp_dir / "browser_presence.pid")
        else:
            self.pidfile = pidfile
        self.app: Optional[BrowserPresence] = None

    def daemonize(self):
        """Daemonize the process."""
        try:
            pid = os.fork()
            if pid > 0:
                sys.exit(0)  # Exit parent
        except OSError as e:
            sys.stderr.write(f"Fork #1 failed: {e}\n")
            sys.exit(1)

        # Decouple from parent environment
        os.chdir("/")
        os.setsid()
        os.umask(0o077)

        try:
            pid = os.fork()
            if pid > 0:
                sys.exit(0)  # Exit second parent
        except OSError as e:
            sys.stderr.write(f"Fork #2 failed: {e}\n")
            sys.exit(1)

        sys.stdout.flush()
        sys.stderr.flush()

        # Exclusive lock guards against two daemons starting at once
        try:
            with open(self.pidfile, "w") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                f.write(str(os.getpid()))
                f.flush()
        except BlockingIOError:
            sys.stderr.write("Another daemon instance is already starting\n")
            sys.exit(1)

    def _read_pid(self) -> Optional[int]:
        """Read the pidfile, removing it if it is corrupt."""
        try:
            with open(self.pidfile, "r") as f:
                return int(f.read().strip())
        except ValueError:
            os.remove(self.pidfile)
            return None

    def start(self):
        """Start the daemon."""
        if os.path.exists(self.pidfile):
            pid = self._read_pid()
            if pid is not None:
                try:
                    os.kill(pid, 0)  # Check if process exists
                    print(f"Daemon already running with PID {pid}")
                    return
                except OSError:
                    os.remove(self.pidfile)

        print("Starting browser presence daemon...")
        self.daemonize()

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        try:
            self.app = BrowserPresence.from_config(get_config())
            self.app.run()
        finally:
            if self.app is not None:
                self.app.stop()
            self._remove_pidfile()

    def stop(self):
        """Stop the daemon."""
        if not os.path.exists(self.pidfile):
            print("Daemon not running")
            return

        pid = self._read_pid()
        if pid is None:
            print("Daemon not running (corrupt pidfile)")
            return

        try:
            os.kill(pid, signal.SIGTERM)
            print(f"Stopped daemon with PID {pid}")
            os.remove(self.pidfile)
        except OSError as e:
            print(f"Error stopping daemon: {e}")

    def status(self):
        """Check daemon status."""
        if not os.path.exists(self.pidfile):
            print("Daemon not running")
            return

        pid = self._read_pid()
        if pid is None:
            print("Daemon not running (corrupt pidfile)")
            return

        try:
            os.kill(pid, 0)
            print(f"Daemon running with PID {pid}")
        except OSError:
            print("Daemon not running (stale pidfile)")
            os.remove(self.pidfile)

    def _remove_pidfile(self):
        if os.path.exists(self.pidfile):
            os.remove(self.pidfile)

    def _signal_handler(self, signum, frame):
        """Handle termination signals."""
        if self.app:
            self.app.stop()
        self._remove_pidfile()
        sys.exit(0)


def main():
    """Main entry point for daemon control."""
    daemon = PresenceDaemon()

    if len(sys.argv) != 2:
        print("Usage: browser-presence-daemon {start|stop|restart|status}")
        sys.exit(1)

    command = sys.argv[1]

    if command == "start":
        daemon.start()
    elif command == "stop":
        daemon.stop()
    elif command == "restart":
        daemon.stop()
        time.sleep(1)
        daemon.start()
    elif command == "status":
        daemon.status()
    else:
        print("Unknown command. Use: start|stop|restart|status")
        sys.exit(1)


if __name__ == "__main__":
    main()
