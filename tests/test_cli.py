"""Tests for the ospkg-sbom command-line interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from ospkg_sbom._normalization.models import NormalizationResult
from ospkg_sbom.cli.main import cli, main
from ospkg_sbom.tool_checks import TRIVY_TOOL, ToolStatus


class TestCliGroup:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "normalize" in result.output
        assert "scan" in result.output
        assert "tools" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "ospkg-sbom" in result.output


class TestNormalizeCommand:
    def test_writes_output_file(self, tmp_path, ubuntu_focal_bom_file, ubuntu_focal_os_release_file):
        output = tmp_path / "out.json"
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "normalize",
                str(ubuntu_focal_bom_file),
                "--os-release",
                str(ubuntu_focal_os_release_file),
                "-o",
                str(output),
                "--no-summary",
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert set(data) == {"osPackages", "dependenciesList", "allTypes"}
        assert len(data["osPackages"]) == 6
        assert data["allTypes"] == ["deb", "focal", "ubuntu", "ubuntu-20.04"]

    def test_stdout(self, ubuntu_focal_bom_file, ubuntu_rootfs):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["normalize", str(ubuntu_focal_bom_file), "--rootfs", str(ubuntu_rootfs), "--no-summary"],
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["osPackages"][0]["name"] == "libc6"

    def test_summary(self, tmp_path, ubuntu_focal_bom_file):
        runner = CliRunner()
        with patch("ospkg_sbom.cli.main.print_normalization_summary") as mock_summary:
            result = runner.invoke(cli, ["normalize", str(ubuntu_focal_bom_file), "-o", str(tmp_path / "out.json")])

        assert result.exit_code == 0
        mock_summary.assert_called_once()
        assert isinstance(mock_summary.call_args[0][0], NormalizationResult)

    def test_os_release_and_rootfs_exclusive(self, ubuntu_focal_bom_file, ubuntu_focal_os_release_file, ubuntu_rootfs):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "normalize",
                str(ubuntu_focal_bom_file),
                "--os-release",
                str(ubuntu_focal_os_release_file),
                "--rootfs",
                str(ubuntu_rootfs),
            ],
        )

        assert result.exit_code == 2
        assert "only one of" in result.output

    def test_missing_bom_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, ["normalize", str(tmp_path / "missing.json")])
        assert result.exit_code == 2

    def test_invalid_bom_file(self, tmp_path):
        bom = tmp_path / "bom.json"
        bom.write_text("not json")
        runner = CliRunner()
        result = runner.invoke(cli, ["normalize", str(bom), "--no-summary"])
        assert result.exit_code == 1


class TestScanCommand:
    def test_scan(self, tmp_path):
        output = tmp_path / "out.json"
        normalized = NormalizationResult(
            packages=[{"name": "libfoo", "purl": "pkg:deb/libfoo@1.0", "bom-ref": "pkg:deb/libfoo@1.0"}],
            type_tags={"deb"},
        )
        status = ToolStatus(name="Trivy", available=True, path="/usr/bin/trivy", info=TRIVY_TOOL)

        runner = CliRunner()
        with (
            patch("ospkg_sbom.cli.main.log_tool_status", return_value=status),
            patch("ospkg_sbom.cli.main.normalize_rootfs", return_value=normalized) as mock_normalize,
        ):
            result = runner.invoke(cli, ["scan", "ubuntu:20.04", "-o", str(output), "--no-summary"])

        assert result.exit_code == 0, result.output
        assert mock_normalize.call_args[0][0] == "ubuntu:20.04"
        assert json.loads(output.read_text())["allTypes"] == ["deb"]

    def test_scanner_missing(self):
        status = ToolStatus(name="Trivy", available=False, info=TRIVY_TOOL)

        runner = CliRunner()
        with (
            patch("ospkg_sbom.cli.main.log_tool_status", return_value=status),
            patch("ospkg_sbom.cli.main.normalize_rootfs") as mock_normalize,
        ):
            result = runner.invoke(cli, ["scan", "ubuntu:20.04"])

        assert result.exit_code == 1
        mock_normalize.assert_not_called()

    def test_invalid_configuration(self, monkeypatch):
        monkeypatch.setenv("SCAN_TIMEOUT", "soon")
        runner = CliRunner()
        result = runner.invoke(cli, ["scan", "ubuntu:20.04"])
        assert result.exit_code == 1


class TestToolsCommand:
    def test_available(self):
        status = ToolStatus(name="Trivy", available=True, path="/usr/bin/trivy", info=TRIVY_TOOL)
        runner = CliRunner()
        with patch("ospkg_sbom.cli.main.check_scanner", return_value=status):
            result = runner.invoke(cli, ["tools"])
        assert result.exit_code == 0

    def test_missing(self):
        status = ToolStatus(name="Trivy", available=False, info=TRIVY_TOOL)
        runner = CliRunner()
        with patch("ospkg_sbom.cli.main.check_scanner", return_value=status):
            result = runner.invoke(cli, ["tools"])
        assert result.exit_code == 1


class TestMainEntryPoint:
    def test_main_runs_cli_from_argv(self, capsys):
        with patch("sys.argv", ["ospkg-sbom", "--version"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 0
        assert "ospkg-sbom" in capsys.readouterr().out
