#!/usr/bin/env python3
"""
Value types shared by the detection and monitoring layers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

NEW_TAB_TITLE = "New Tab"
MAX_DETAILS_LENGTH = 128


class WindowType(str, Enum):
    """Privacy classification of a browser window."""

    NORMAL = "normal"
    INCOGNITO = "incognito"
    PRIVATE = "private"


@dataclass(frozen=True)
class BrowserState:
    """
    Browsing context extracted from one browser window.

    Equality only looks at browser name, tab title and the incognito flag,
    so repeated samples of the same tab compare equal regardless of URL or
    capture time.
    """

    browser_name: str
    tab_title: str = NEW_TAB_TITLE
    url: str = field(default="", compare=False)
    icon_key: str = field(default="browser", compare=False)
    is_incognito: bool = False
    is_private: bool = field(default=False, compare=False)
    window_type: WindowType = field(default=WindowType.NORMAL, compare=False)
    captured_at: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def is_private_mode(self) -> bool:
        return self.is_incognito or self.is_private

    @property
    def status_text(self) -> str:
        """Presence state line."""
        if self.is_private_mode:
            return f"Browsing privately ({self.browser_name})"
        return f"Browsing with {self.browser_name}"

    @property
    def details(self) -> str:
        """Presence details line, truncated to the presence field limit."""
        if not self.tab_title or self.tab_title == NEW_TAB_TITLE:
            return NEW_TAB_TITLE
        if len(self.tab_title) > MAX_DETAILS_LENGTH:
            return self.tab_title[: MAX_DETAILS_LENGTH - 3] + "..."
        return self.tab_title

    @property
    def mode_label(self) -> str:
        if self.is_incognito:
            return " (Incognito)"
        if self.is_private:
            return " (Private)"
        return ""
