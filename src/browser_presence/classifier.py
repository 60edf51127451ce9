#!/usr/bin/env python3
"""
Window title classification for Browser Presence.
Turns a raw browser window title into a structured BrowserState.
"""

import re
from datetime import datetime
from typing import Optional, Tuple

from .catalog import BrowserRule
from .models import NEW_TAB_TITLE, BrowserState, WindowType

# Tried in order, loosest last
URL_PATTERNS = (
    re.compile(r"(https?://[^\s]+)"),
    re.compile(r"(www\.[^\s]+\.[^\s]+)"),
    re.compile(r"([^\s]+\.[a-z]{2,}/[^\s]*)"),
)


def extract_url(title: str) -> str:
    """Best-effort URL lookup in a window title, empty string if none."""
    for pattern in URL_PATTERNS:
        match = pattern.search(title)
        if match:
            return match.group(0)
    return ""


class TitleClassifier:
    """Classifies browser window titles using a BrowserRule."""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def classify(self, title: str, rule: BrowserRule) -> Optional[BrowserState]:
        """
        Build a BrowserState from a raw window title.

        Malformed titles still produce a best-effort result; None is only
        returned when something unexpected goes wrong.
        """
        try:
            window_type = self.detect_window_type(title, rule)
            return BrowserState(
                browser_name=rule.name,
                tab_title=self.clean_title(title, rule),
                url=extract_url(title),
                icon_key=rule.icon_key,
                is_incognito=window_type is WindowType.INCOGNITO,
                is_private=window_type is WindowType.PRIVATE,
                window_type=window_type,
                captured_at=datetime.now(),
            )
        except Exception as e:
            if self.debug:
                print(f"Debug: Could not classify title {title!r} for {rule.name}: {e}")
            return None

    @staticmethod
    def detect_window_type(title: str, rule: BrowserRule) -> WindowType:
        """Incognito markers win over private markers."""
        if _contains_any(title, rule.incognito_titles):
            return WindowType.INCOGNITO
        if _contains_any(title, rule.private_titles):
            return WindowType.PRIVATE
        return WindowType.NORMAL

    @staticmethod
    def clean_title(title: str, rule: BrowserRule) -> str:
        """Strip browser suffixes and privacy markers anywhere in the title."""
        for marker in rule.normal_titles + rule.incognito_titles + rule.private_titles:
            if marker:
                title = title.replace(marker, "")

        title = title.strip()
        return title or NEW_TAB_TITLE


def _contains_any(title: str, markers: Tuple[str, ...]) -> bool:
    return any(marker and marker in title for marker in markers)
