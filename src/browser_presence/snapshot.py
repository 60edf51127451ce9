#!/usr/bin/env python3
"""
Browser snapshots: one sweep over live processes, classified per window.
"""

from typing import Iterable, List, Mapping, NamedTuple, Optional, Protocol

from .catalog import BrowserRule
from .classifier import TitleClassifier
from .models import BrowserState


class ProcessWindow(NamedTuple):
    """A live process and the title of its main window (possibly empty)."""

    pid: int
    name: str
    title: str


class ProcessLister(Protocol):
    """Anything that can enumerate live processes with window titles."""

    def list_processes(self) -> Iterable[ProcessWindow]: ...


class BrowserSnapshotter:
    """
    Detects open browser windows.

    Stateless apart from its collaborators, so it is safe to call from the
    monitor thread and from foreground commands alike.
    """

    def __init__(
        self,
        catalog: Mapping[str, BrowserRule],
        lister: ProcessLister,
        classifier: Optional[TitleClassifier] = None,
        debug: bool = False,
    ):
        self.catalog = catalog
        self.lister = lister
        self.classifier = classifier or TitleClassifier(debug=debug)
        self.debug = debug

    def get_active_browsers(self) -> List[BrowserState]:
        """Classify every browser window currently open."""
        browsers: List[BrowserState] = []
        processes = list(self.lister.list_processes())

        for rule in self.catalog.values():
            for token in rule.process_names:
                for process in processes:
                    try:
                        if token not in process.name.lower():
                            continue
                        title = process.title
                        if not title or len(title) <= 1:
                            continue

                        state = self.classifier.classify(title, rule)
                        if state is not None:
                            browsers.append(state)
                    except Exception as e:
                        # One bad process must not abort the sweep
                        if self.debug:
                            print(f"Debug: Skipping process during browser sweep: {e}")
                        continue

        return browsers

    def get_active_browser(self) -> Optional[BrowserState]:
        """
        Pick the most recently captured browser state.

        There is no focus information, so detection recency stands in for it;
        on equal timestamps the first detected window wins.
        """
        return select_active_browser(self.get_active_browsers())


def select_active_browser(browsers: List[BrowserState]) -> Optional[BrowserState]:
    if not browsers:
        return None
    return max(browsers, key=lambda browser: browser.captured_at)
