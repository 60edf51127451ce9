"""Tests for CLI entry point."""

import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

from browser_presence.config import Config
from browser_presence.core import main


class TestCLI(unittest.TestCase):
    """Test cases for CLI arguments and main execution."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config = Config(config_dir=self.temp_dir)
        patcher = patch("browser_presence.core.get_config", return_value=self.config)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir)

    def run_main(self, *args):
        with patch.object(sys, "argv", ["browser-presence", *args]):
            with patch("builtins.print") as mock_print:
                main()
        return mock_print

    @patch("browser_presence.core.BrowserPresence")
    def test_main_defaults(self, mock_app_class):
        """Test main with default arguments."""
        mock_app = mock_app_class.from_config.return_value

        mock_print = self.run_main()

        mock_app_class.from_config.assert_called_once_with(self.config)
        mock_app.run.assert_called_once()
        mock_app.stop.assert_called_once()
        mock_print.assert_any_call("Browser presence stopped")
        self.assertTrue(self.config.verbose_logging)

    @patch("browser_presence.core.BrowserPresence")
    def test_main_arguments(self, mock_app_class):
        """Test main with various arguments."""
        self.run_main("run", "--quiet", "--interval", "10", "--publisher", "http")

        self.assertFalse(self.config.verbose_logging)
        self.assertEqual(self.config.update_interval_seconds, 10)
        self.assertEqual(self.config.publisher, "http")
        mock_app_class.from_config.assert_called_once_with(self.config)

    @patch("browser_presence.core.BrowserPresence")
    def test_main_interval_clamped(self, mock_app_class):
        self.run_main("--interval", "1")

        self.assertEqual(self.config.update_interval_seconds, 2)

    @patch("browser_presence.core.BrowserPresence")
    def test_main_invalid_interval(self, mock_app_class):
        """Test main with invalid interval."""
        mock_print = self.run_main("--interval", "soon")

        mock_print.assert_called_with("Invalid interval: soon")
        mock_app_class.from_config.assert_not_called()

    @patch("browser_presence.core.BrowserPresence")
    def test_main_detect(self, mock_app_class):
        self.run_main("detect", "--debug")

        mock_app_class.assert_called_once_with(verbose=True, debug=True)
        mock_app_class.return_value.detect.assert_called_once()
        mock_app_class.from_config.assert_not_called()

    @patch("browser_presence.core.BrowserPresence")
    def test_main_bad_publisher(self, mock_app_class):
        mock_app_class.from_config.side_effect = ValueError("Unknown publisher: fax")

        mock_print = self.run_main("--publisher", "fax")

        mock_print.assert_called_with("Error: Unknown publisher: fax")

    def test_main_help(self):
        """Test help argument."""
        mock_print = self.run_main("--help")

        args, _ = mock_print.call_args_list[0]
        self.assertEqual(args[0], "Browser Presence")

    @patch("browser_presence.core.BrowserPresence")
    def test_main_interrupt(self, mock_app_class):
        """Test main handles KeyboardInterrupt."""
        mock_app = mock_app_class.from_config.return_value
        mock_app.run.side_effect = KeyboardInterrupt

        mock_print = self.run_main()

        mock_print.assert_any_call("\nReceived interrupt signal")
        mock_app.stop.assert_called_once()


if __name__ == "__main__":
    unittest.main()
