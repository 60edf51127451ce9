#!/usr/bin/env python3
"""
Presence publishers for Browser Presence.
Handles all communication with remote presence consumers.
"""

import platform
import socket
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import requests
from pypresence import Presence
from pypresence.exceptions import InvalidID, InvalidPipe, PyPresenceException

from .models import BrowserState

LogCallback = Callable[[str], None]

REQUEST_TIMEOUT = (5, 15)  # (connect, read)
PRIVATE_ICON_KEY = "incognito"


class DeviceIdentifier:
    """Generates device identification information."""

    @staticmethod
    def get_device_name() -> str:
        """Get the device name for identification."""
        try:
            hostname = socket.gethostname()

            # On macOS, remove .local suffix
            if hostname.endswith(".local"):
                hostname = hostname[:-6]

            if not hostname or hostname in ["localhost", "unknown"]:
                hostname = platform.node()
                if hostname.endswith(".local"):
                    hostname = hostname[:-6]

            return hostname
        except Exception:
            return f"{platform.system().lower()}-{platform.machine()}"


class PresencePayloadBuilder:
    """Builds presence fields from a browser state."""

    def __init__(self):
        self.device_identifier = DeviceIdentifier()

    def create_presence(self, state: BrowserState) -> Dict[str, Any]:
        """Fields understood by rich presence consumers."""
        presence: Dict[str, Any] = {
            "details": state.details,
            "state": state.status_text,
        }
        if state.icon_key:
            presence["large_image"] = state.icon_key.lower()
            presence["large_text"] = state.browser_name
            if state.is_private_mode:
                presence["small_image"] = PRIVATE_ICON_KEY
                presence["small_text"] = "Private Browsing"
        return presence

    def create_http_payload(self, state: BrowserState) -> Dict[str, Any]:
        """Presence fields plus the envelope sent to HTTP endpoints."""
        return {
            "timestamp": state.captured_at.isoformat(),
            "presence": self.create_presence(state),
            "browser": state.browser_name,
            "window_type": state.window_type.value,
            "url": state.url,
            "source": "browser-presence",
            "device": self.device_identifier.get_device_name(),
            "version": "1.0",
        }


class PresencePublisher(ABC):
    """
    Base class for presence channels.

    Subclasses must not raise from publish() or clear() on transient channel
    errors; they report them through the log callback instead.
    """

    label = "Presence"

    def __init__(self, on_log: Optional[LogCallback] = None):
        self.on_log = on_log
        self.payload_builder = PresencePayloadBuilder()

    @property
    @abstractmethod
    def is_connected(self) -> bool: ...

    @abstractmethod
    def initialize(self, timeout: float = 5.0) -> bool: ...

    @abstractmethod
    def publish(self, state: BrowserState) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...

    def dispose(self) -> None:
        self.clear()

    def log(self, message: str) -> None:
        if self.on_log:
            self.on_log(message)
        else:
            print(f"[{self.label}] {message}")


class DiscordPresencePublisher(PresencePublisher):
    """Publishes browser presence to the local Discord client over RPC."""

    label = "Discord"

    def __init__(self, application_id: str, on_log: Optional[LogCallback] = None):
        super().__init__(on_log)
        self.application_id = application_id
        self._rpc: Optional[Presence] = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected and self._rpc is not None

    def initialize(self, timeout: float = 5.0) -> bool:
        """Connect to Discord. The caller bounds how long this may take."""
        if not self.application_id or not self.application_id.strip():
            self.log("No Discord Application ID configured.")
            return False

        if self._rpc is not None:
            self.dispose()

        try:
            self._rpc = Presence(
                self.application_id.strip(), connection_timeout=timeout
            )
            self._rpc.connect()
        except InvalidID:
            self.log("Invalid Discord Application ID.")
            self._rpc = None
            return False
        except (InvalidPipe, PyPresenceException, OSError) as e:
            self.log(f"Failed to initialize Discord: {e}")
            self._rpc = None
            return False

        self._connected = True
        self.log("Discord client initialized successfully")
        return True

    def publish(self, state: BrowserState) -> None:
        if not self.is_connected or state is None:
            return

        presence = self.payload_builder.create_presence(state)
        try:
            self._rpc.update(start=int(time.time()), **presence)
        except (PyPresenceException, OSError) as e:
            self.log(f"Error updating presence: {e}")

    def clear(self) -> None:
        if not self.is_connected:
            return

        try:
            self._rpc.clear()
            self.log("Cleared Discord presence")
        except (PyPresenceException, OSError) as e:
            self.log(f"Error clearing presence: {e}")

    def dispose(self) -> None:
        try:
            self.clear()
            if self._rpc is not None:
                self._rpc.close()
        except (PyPresenceException, OSError) as e:
            self.log(f"Error closing Discord connection: {e}")
        finally:
            self._rpc = None
            self._connected = False


class HttpPresencePublisher(PresencePublisher):
    """Publishes browser presence to an HTTP endpoint."""

    label = "HTTP"

    def __init__(
        self,
        endpoint: str,
        auth_token: str = "",  # nosec B107
        on_log: Optional[LogCallback] = None,
    ):
        super().__init__(on_log)
        self.endpoint = endpoint
        self.auth_token = auth_token
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authentication if configured."""
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    def initialize(self, timeout: float = 5.0) -> bool:
        """Check that the endpoint is reachable."""
        if not self.endpoint:
            self.log("No presence endpoint configured.")
            return False

        try:
            response = requests.get(
                self.endpoint, headers=self._get_headers(), timeout=timeout
            )
        except requests.exceptions.RequestException as e:
            self.log(f"Presence endpoint unreachable: {e}")
            return False

        if response.status_code >= 500:
            self.log(f"Presence endpoint unavailable: HTTP {response.status_code}")
            return False

        self._connected = True
        self.log(f"Connected to {self.endpoint}")
        return True

    def publish(self, state: BrowserState) -> None:
        if not self.is_connected or state is None:
            return

        payload = self.payload_builder.create_http_payload(state)
        try:
            response = requests.post(
                self.endpoint,
                json=payload,
                headers=self._get_headers(),
                timeout=REQUEST_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            self.log(f"[FAIL] Network error publishing presence: {e}")
            return

        if response.status_code not in [200, 201, 202, 204]:
            self.log(
                f"[FAIL] Publish failed: HTTP {response.status_code} - {response.text}"
            )

    def clear(self) -> None:
        if not self.is_connected:
            return

        try:
            response = requests.delete(
                self.endpoint, headers=self._get_headers(), timeout=REQUEST_TIMEOUT
            )
        except requests.exceptions.RequestException as e:
            self.log(f"[FAIL] Network error clearing presence: {e}")
            return

        if response.status_code < 300:
            self.log("Cleared remote presence")
        else:
            self.log(f"[FAIL] Clear failed: HTTP {response.status_code}")

    def dispose(self) -> None:
        self.clear()
        self._connected = False


def create_publisher(config, on_log: Optional[LogCallback] = None) -> PresencePublisher:
    """Build the publisher selected in the configuration."""
    kind = (config.publisher or "discord").lower()
    if kind == "discord":
        return DiscordPresencePublisher(config.discord_application_id, on_log=on_log)
    if kind == "http":
        return HttpPresencePublisher(
            config.presence_endpoint,
            config.get("presence_auth_token", ""),
            on_log=on_log,
        )
    raise ValueError(f"Unknown publisher: {config.publisher}")
