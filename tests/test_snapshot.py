"""Tests for browser snapshots and active browser selection."""

import unittest
from datetime import datetime
from unittest.mock import Mock, patch

from browser_presence.catalog import build_catalog
from browser_presence.models import BrowserState, WindowType
from browser_presence.snapshot import (
    BrowserSnapshotter,
    ProcessWindow,
    select_active_browser,
)


class StaticLister:
    """Returns a fixed process list."""

    def __init__(self, processes):
        self.processes = processes

    def list_processes(self):
        return list(self.processes)


class ExplodingName:
    """A process name that fails when inspected."""

    def lower(self):
        raise PermissionError("access denied")


class TestBrowserSnapshotter(unittest.TestCase):
    """Test cases for BrowserSnapshotter."""

    def setUp(self):
        self.catalog = build_catalog()

    def snapshotter(self, processes, **kwargs):
        return BrowserSnapshotter(self.catalog, StaticLister(processes), **kwargs)

    def test_no_matching_processes(self):
        snapshotter = self.snapshotter(
            [ProcessWindow(1, "Finder", "Downloads"), ProcessWindow(2, "Terminal", "zsh")]
        )

        self.assertEqual(snapshotter.get_active_browsers(), [])
        self.assertIsNone(snapshotter.get_active_browser())

    def test_empty_process_list(self):
        snapshotter = self.snapshotter([])

        self.assertEqual(snapshotter.get_active_browsers(), [])
        self.assertIsNone(snapshotter.get_active_browser())

    def test_classifies_matching_processes(self):
        snapshotter = self.snapshotter(
            [
                ProcessWindow(101, "Google Chrome", "GitHub - Google Chrome"),
                ProcessWindow(201, "firefox", "Private Browsing - Mozilla Firefox"),
            ]
        )

        browsers = snapshotter.get_active_browsers()

        self.assertEqual(len(browsers), 2)
        by_name = {browser.browser_name: browser for browser in browsers}
        self.assertEqual(by_name["Google Chrome"].tab_title, "GitHub")
        self.assertEqual(by_name["Mozilla Firefox"].window_type, WindowType.PRIVATE)

    def test_skips_trivial_titles(self):
        snapshotter = self.snapshotter(
            [
                ProcessWindow(1, "Google Chrome Helper", ""),
                ProcessWindow(2, "Brave Browser", "x"),
                ProcessWindow(3, "Vivaldi", "ab"),
            ]
        )

        browsers = snapshotter.get_active_browsers()

        self.assertEqual([browser.browser_name for browser in browsers], ["Vivaldi"])

    def test_process_name_match_is_case_insensitive(self):
        snapshotter = self.snapshotter([ProcessWindow(1, "CHROME.EXE", "Docs")])

        browsers = snapshotter.get_active_browsers()

        self.assertEqual(len(browsers), 1)
        self.assertEqual(browsers[0].browser_name, "Google Chrome")

    def test_bad_process_is_skipped(self):
        processes = [
            Mock(title="Oops"),
            ProcessWindow(101, "Google Chrome", "GitHub - Google Chrome"),
        ]
        processes[0].name = ExplodingName()

        browsers = self.snapshotter(processes).get_active_browsers()

        self.assertEqual([browser.tab_title for browser in browsers], ["GitHub"])

    def test_bad_process_debug_note(self):
        broken = Mock(title="Oops")
        broken.name = ExplodingName()

        with patch("builtins.print") as mock_print:
            self.snapshotter([broken], debug=True).get_active_browsers()

        self.assertTrue(mock_print.called)

    def test_failed_classification_is_dropped(self):
        classifier = Mock()
        classifier.classify.return_value = None
        snapshotter = BrowserSnapshotter(
            self.catalog,
            StaticLister([ProcessWindow(1, "Google Chrome", "GitHub")]),
            classifier=classifier,
        )

        self.assertEqual(snapshotter.get_active_browsers(), [])

    def test_enumeration_failure_propagates(self):
        lister = Mock()
        lister.list_processes.side_effect = OSError("workspace unavailable")
        snapshotter = BrowserSnapshotter(self.catalog, lister)

        with self.assertRaises(OSError):
            snapshotter.get_active_browsers()

    def test_is_stateless_between_sweeps(self):
        lister = StaticLister([ProcessWindow(1, "Opera", "News - Opera")])
        snapshotter = BrowserSnapshotter(self.catalog, lister)

        first = snapshotter.get_active_browsers()
        lister.processes = []
        second = snapshotter.get_active_browsers()

        self.assertEqual(len(first), 1)
        self.assertEqual(second, [])


class TestSelectActiveBrowser(unittest.TestCase):
    """Test cases for choosing the representative browser."""

    def test_empty(self):
        self.assertIsNone(select_active_browser([]))

    def test_most_recent_wins(self):
        older = BrowserState("Google Chrome", "A", captured_at=datetime(2024, 1, 1, 10))
        newer = BrowserState("Brave", "B", captured_at=datetime(2024, 1, 1, 11))

        self.assertIs(select_active_browser([older, newer]), newer)
        self.assertIs(select_active_browser([newer, older]), newer)

    def test_tie_goes_to_first_detected(self):
        stamp = datetime(2024, 1, 1, 10)
        first = BrowserState("Google Chrome", "A", captured_at=stamp)
        second = BrowserState("Brave", "B", captured_at=stamp)

        self.assertIs(select_active_browser([first, second]), first)


def test_mixed_process_sweep(catalog, sample_processes):
    snapshotter = BrowserSnapshotter(catalog, StaticLister(sample_processes))

    browsers = snapshotter.get_active_browsers()

    assert [(b.browser_name, b.tab_title, b.window_type) for b in browsers] == [
        ("Google Chrome", "GitHub", WindowType.NORMAL),
        ("Mozilla Firefox", "New Tab", WindowType.PRIVATE),
    ]


if __name__ == "__main__":
    unittest.main()
