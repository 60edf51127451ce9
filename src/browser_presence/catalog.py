#!/usr/bin/env python3
"""
Browser catalog for Browser Presence.
Declarative table of known browsers and their window-title conventions.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

MARKER_FIELDS = (
    "process_names",
    "normal_titles",
    "incognito_titles",
    "private_titles",
)


@dataclass(frozen=True)
class BrowserRule:
    """Title-matching rules for one browser brand."""

    name: str
    process_names: Tuple[str, ...]
    normal_titles: Tuple[str, ...] = ()
    incognito_titles: Tuple[str, ...] = ()
    private_titles: Tuple[str, ...] = ()
    icon_key: str = "browser"
    is_chromium: bool = False  # Descriptive only

    def __post_init__(self):
        for field_name in MARKER_FIELDS:
            value = getattr(self, field_name)
            if isinstance(value, str):
                raise ValueError(
                    f"{self.name}: {field_name} must be a sequence of strings, "
                    f"got the bare string {value!r}"
                )
            object.__setattr__(self, field_name, tuple(value))

        if not self.process_names:
            raise ValueError(f"{self.name}: at least one process name is required")
        for token in self.process_names:
            if not token or token != token.lower():
                raise ValueError(
                    f"{self.name}: process names must be non-empty and lower-case, "
                    f"got {token!r}"
                )
        if self.incognito_titles and self.private_titles:
            raise ValueError(
                f"{self.name}: declare incognito or private markers, not both"
            )

    def matches_process(self, process_name: str) -> bool:
        """Check if a live process name belongs to this browser."""
        lowered = process_name.lower()
        return any(token in lowered for token in self.process_names)


DEFAULT_RULES: Tuple[Tuple[str, BrowserRule], ...] = (
    (
        "chrome",
        BrowserRule(
            name="Google Chrome",
            process_names=("chrome",),
            normal_titles=(" - Google Chrome",),
            incognito_titles=("Incognito", "Guest"),
            icon_key="chrome",
            is_chromium=True,
        ),
    ),
    (
        "msedge",
        BrowserRule(
            name="Microsoft Edge",
            process_names=("msedge", "microsoft edge"),
            normal_titles=(" - Microsoft Edge",),
            incognito_titles=("InPrivate", "InPrivate Browsing"),
            icon_key="edge",
            is_chromium=True,
        ),
    ),
    (
        "firefox",
        BrowserRule(
            name="Mozilla Firefox",
            process_names=("firefox",),
            normal_titles=(" - Mozilla Firefox",),
            private_titles=("Private Browsing",),
            icon_key="firefox",
        ),
    ),
    (
        "opera",
        BrowserRule(
            name="Opera",
            process_names=("opera",),
            normal_titles=(" - Opera",),
            private_titles=("Private Mode",),
            icon_key="opera",
            is_chromium=True,
        ),
    ),
    (
        "brave",
        BrowserRule(
            name="Brave",
            process_names=("brave",),
            normal_titles=(" - Brave",),
            private_titles=("Private Window",),
            icon_key="brave",
            is_chromium=True,
        ),
    ),
    (
        "vivaldi",
        BrowserRule(
            name="Vivaldi",
            process_names=("vivaldi",),
            normal_titles=(" - Vivaldi",),
            private_titles=("Private Window",),
            icon_key="vivaldi",
            is_chromium=True,
        ),
    ),
)


def build_catalog(
    rules: Iterable[Tuple[str, BrowserRule]] = DEFAULT_RULES,
) -> Mapping[str, BrowserRule]:
    """Build a read-only, ordered catalog from (key, rule) pairs."""
    catalog = {}
    for key, rule in rules:
        if key in catalog:
            raise ValueError(f"Duplicate browser key: {key}")
        catalog[key] = rule
    return MappingProxyType(catalog)
