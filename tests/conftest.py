"""Pytest configuration and shared fixtures for all tests."""

import json
from pathlib import Path

import pytest

from ospkg_sbom._normalization.models import OsReleaseInfo

TEST_DATA = Path(__file__).parent / "test-data"
UBUNTU_FOCAL_BOM = TEST_DATA / "trivy" / "ubuntu-focal.cdx.json"
UBUNTU_FOCAL_OS_RELEASE = TEST_DATA / "os-release" / "ubuntu-focal"


@pytest.fixture(autouse=True)
def clean_scanner_env(monkeypatch):
    """Keep the developer's scanner settings out of the tests."""
    for name in ("TRIVY_CMD", "OSPKG_PLUGINS_DIR", "TRIVY_CACHE_DIR", "SCAN_TIMEOUT", "SCAN_DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def ubuntu_focal() -> OsReleaseInfo:
    return OsReleaseInfo.from_mapping({"ID": "ubuntu", "ID_LIKE": "debian", "VERSION_ID": "20.04"})


@pytest.fixture
def debian_bookworm() -> OsReleaseInfo:
    return OsReleaseInfo.from_mapping({"ID": "debian", "VERSION_ID": "12", "VERSION_CODENAME": "bookworm"})


@pytest.fixture
def alpine_318() -> OsReleaseInfo:
    return OsReleaseInfo.from_mapping({"ID": "alpine", "VERSION_ID": "3.18.4"})


@pytest.fixture
def mageia_8() -> OsReleaseInfo:
    return OsReleaseInfo.from_mapping({"ID": "mageia", "ID_LIKE": "mandriva fedora", "VERSION_ID": "8"})


@pytest.fixture
def ubuntu_focal_bom() -> dict:
    """Trivy CycloneDX document of an ubuntu:20.04 image."""
    with open(UBUNTU_FOCAL_BOM, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def ubuntu_focal_bom_file() -> Path:
    return UBUNTU_FOCAL_BOM


@pytest.fixture
def ubuntu_focal_os_release_file() -> Path:
    return UBUNTU_FOCAL_OS_RELEASE


@pytest.fixture
def ubuntu_rootfs(tmp_path) -> Path:
    """Minimal root filesystem containing only /etc/os-release."""
    etc = tmp_path / "rootfs" / "etc"
    etc.mkdir(parents=True)
    (etc / "os-release").write_text(UBUNTU_FOCAL_OS_RELEASE.read_text(encoding="utf-8"), encoding="utf-8")
    return tmp_path / "rootfs"
