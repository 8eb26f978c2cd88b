"""Tests for tool_checks module."""

import unittest
from unittest.mock import patch

from ospkg_sbom.config import ScannerConfig
from ospkg_sbom.tool_checks import (
    TRIVY_TOOL,
    ToolStatus,
    check_scanner,
    check_tool_available,
    get_tool_install_message,
    log_tool_status,
)


class TestToolInfo(unittest.TestCase):
    """Tests for the scanner ToolInfo."""

    def test_trivy_tool(self):
        self.assertEqual(TRIVY_TOOL.name, "Trivy")
        self.assertEqual(TRIVY_TOOL.command, "trivy")
        self.assertIn("Root filesystems", TRIVY_TOOL.required_for)
        self.assertIn("TRIVY_CMD", TRIVY_TOOL.install_instructions)


class TestCheckToolAvailable(unittest.TestCase):
    """Tests for check_tool_available function."""

    @patch("ospkg_sbom.tool_checks.shutil.which")
    def test_tool_available(self, mock_which):
        mock_which.return_value = "/usr/bin/trivy"
        available, path = check_tool_available("trivy")
        self.assertTrue(available)
        self.assertEqual(path, "/usr/bin/trivy")
        mock_which.assert_called_once_with("trivy")

    @patch("ospkg_sbom.tool_checks.shutil.which")
    def test_tool_not_available(self, mock_which):
        mock_which.return_value = None
        available, path = check_tool_available("trivy")
        self.assertFalse(available)
        self.assertIsNone(path)


class TestCheckScanner(unittest.TestCase):
    """Tests for check_scanner function."""

    @patch("ospkg_sbom.tool_checks.shutil.which")
    @patch("ospkg_sbom.tool_checks.resolve_trivy_binary")
    def test_configured_binary(self, mock_resolve, mock_which):
        mock_resolve.return_value = "/opt/trivy"
        mock_which.return_value = "/opt/trivy"

        status = check_scanner(ScannerConfig(trivy_cmd="/opt/trivy"))

        self.assertIsInstance(status, ToolStatus)
        self.assertTrue(status.available)
        self.assertEqual(status.path, "/opt/trivy")
        self.assertIs(status.info, TRIVY_TOOL)
        mock_which.assert_called_once_with("/opt/trivy")

    @patch("ospkg_sbom.tool_checks.shutil.which")
    @patch("ospkg_sbom.tool_checks.resolve_trivy_binary")
    def test_configured_binary_missing(self, mock_resolve, mock_which):
        mock_resolve.return_value = "/opt/trivy"
        mock_which.return_value = None

        status = check_scanner(ScannerConfig(trivy_cmd="/opt/trivy"))

        self.assertFalse(status.available)
        self.assertIsNone(status.path)

    @patch("ospkg_sbom.tool_checks.shutil.which")
    @patch("ospkg_sbom.tool_checks.resolve_trivy_binary")
    def test_nothing_resolved(self, mock_resolve, mock_which):
        mock_resolve.return_value = None

        status = check_scanner()

        self.assertFalse(status.available)
        mock_which.assert_not_called()


class TestLogToolStatus(unittest.TestCase):
    """Tests for log_tool_status function."""

    @patch("ospkg_sbom.tool_checks.check_scanner")
    @patch("ospkg_sbom.tool_checks.logger")
    def test_available(self, mock_logger, mock_check):
        mock_check.return_value = ToolStatus(name="Trivy", available=True, path="/usr/bin/trivy", info=TRIVY_TOOL)

        status = log_tool_status()

        self.assertTrue(status.available)
        mock_logger.info.assert_called_once()
        self.assertIn("/usr/bin/trivy", mock_logger.info.call_args[0][0])

    @patch("ospkg_sbom.tool_checks.check_scanner")
    @patch("ospkg_sbom.tool_checks.logger")
    def test_missing(self, mock_logger, mock_check):
        mock_check.return_value = ToolStatus(name="Trivy", available=False, info=TRIVY_TOOL)

        status = log_tool_status()

        self.assertFalse(status.available)
        mock_logger.info.assert_not_called()
        mock_logger.warning.assert_called_once()
        self.assertIn("'trivy'", mock_logger.warning.call_args[0][0])


class TestGetToolInstallMessage(unittest.TestCase):
    def test_message_content(self):
        message = get_tool_install_message()
        self.assertIn("Trivy", message)
        self.assertIn("https://trivy.dev", message)
        self.assertIn("brew install trivy", message)

    def test_message_names_what_needs_the_scanner(self):
        message = get_tool_install_message()
        self.assertIn("container images and root filesystems", message)
