"""
Unit tests for the artifact locator.

Tests coordinate mapping per product, variant and host platform.
"""

import pytest

from ijplatformkit.artifacts.locator import ArtifactLocator
from ijplatformkit.artifacts.product import (
    PRODUCT_TYPES,
    ArtifactVariant,
    RequestedArtifact,
    product_from_code,
)
from ijplatformkit.core.exceptions import UnsupportedProductTypeError
from ijplatformkit.core.platform import PlatformInfo

REPOSITORY = "https://cache-redirector.jetbrains.com/www.jetbrains.com/intellij-repository"


def _locator(os_name="linux", arch="x64"):
    return ArtifactLocator(platform_info=PlatformInfo(os_name, arch))


ARCHIVE_CODES = sorted(code for code, p in PRODUCT_TYPES.items() if p.maven)
INSTALLER_CODES = sorted(code for code, p in PRODUCT_TYPES.items() if p.installer)


class TestArchiveVariant:
    """Test archive (maven) coordinates."""

    def test_release_url(self, locator):
        """Test release versions live in the releases channel."""
        location = locator.locate("IC", "2022.3.3", ArtifactVariant.ARCHIVE)

        assert location.url == (
            f"{REPOSITORY}/releases/com/jetbrains/intellij/idea/ideaIC/2022.3.3/ideaIC-2022.3.3.zip"
        )
        assert location.file_name == "ideaIC-2022.3.3.zip"

    def test_snapshot_channel(self, locator):
        location = locator.locate("IU", "223-EAP-SNAPSHOT")

        assert location.repository_url == f"{REPOSITORY}/snapshots"

    def test_nightly_channel(self, locator):
        location = locator.locate("IC", "LATEST-TRUNK-SNAPSHOT")

        assert location.repository_url == f"{REPOSITORY}/nightly"

    @pytest.mark.parametrize("code", ARCHIVE_CODES)
    def test_every_archive_product(self, locator, code):
        """Test each archive product maps to its maven coordinates."""
        product = product_from_code(code)
        location = locator.locate(code, "2023.1")

        assert location.coordinates == product.maven
        assert location.extension == "zip"
        assert location.maven_layout

    @pytest.mark.parametrize(
        "code", sorted(code for code, p in PRODUCT_TYPES.items() if not p.maven)
    )
    def test_installer_only_products_rejected(self, locator, code):
        with pytest.raises(UnsupportedProductTypeError):
            locator.locate(code, "2023.1", ArtifactVariant.ARCHIVE)

    def test_unknown_code(self, locator):
        with pytest.raises(UnsupportedProductTypeError):
            locator.locate("ZZ", "2023.1")

    def test_custom_repository(self, linux_platform):
        locator = ArtifactLocator("https://mirror.example.com/repo/", platform_info=linux_platform)

        assert locator.locate("IC", "2022.3").url.startswith(
            "https://mirror.example.com/repo/releases/"
        )


class TestInstallerVariant:
    """Test installer coordinates per platform."""

    @pytest.mark.parametrize("code", INSTALLER_CODES)
    def test_every_installer_product(self, locator, code):
        product = product_from_code(code)
        location = locator.locate(code, "2023.1", ArtifactVariant.INSTALLER)

        assert location.coordinates == product.installer
        assert not location.maven_layout

    def test_linux_x64(self):
        location = _locator().locate("IC", "2022.3.3", ArtifactVariant.INSTALLER)

        assert location.url == "https://download.jetbrains.com/idea/ideaIC-2022.3.3.tar.gz"

    def test_linux_arm64(self):
        location = _locator("linux", "arm64").locate("IC", "2022.3.3", ArtifactVariant.INSTALLER)

        assert location.file_name == "ideaIC-2022.3.3-aarch64.tar.gz"

    def test_macos(self):
        location = _locator("macos", "arm64").locate("GO", "2023.1", ArtifactVariant.INSTALLER)

        assert location.url == "https://download.jetbrains.com/go/goland-2023.1-aarch64.dmg"

    def test_windows(self):
        location = _locator("windows", "x64").locate("RD", "2023.1", ArtifactVariant.INSTALLER)

        assert location.file_name == "JetBrains.Rider-2023.1.win.zip"

    def test_nested_installer_group(self):
        location = _locator().locate("GW", "2023.1", ArtifactVariant.INSTALLER)

        assert location.url == "https://download.jetbrains.com/idea/gateway/JetBrainsGateway-2023.1.tar.gz"

    def test_archive_only_products_rejected(self, locator):
        with pytest.raises(UnsupportedProductTypeError) as exc_info:
            locator.locate("RR", "2023.1", ArtifactVariant.INSTALLER)

        assert "IC" in str(exc_info.value)

    def test_supported_codes(self, locator):
        assert locator.supported_codes(ArtifactVariant.INSTALLER) == INSTALLER_CODES
        assert locator.supported_codes(ArtifactVariant.ARCHIVE) == ARCHIVE_CODES


class TestSources:
    """Test sources availability and coordinates."""

    def test_sources_requested(self, locator):
        assert locator.locate("IC", "2022.3.3", sources=True).has_sources

    def test_sources_not_requested(self, locator):
        assert not locator.locate("IC", "2022.3.3").has_sources

    def test_gateway_has_no_sources(self, locator):
        assert not locator.locate("GW", "2023.1", sources=True).has_sources

    def test_rider_snapshot_has_no_sources(self, locator, caplog):
        location = locator.locate("RD", "2023.1-EAP3-SNAPSHOT", sources=True)

        assert not location.has_sources
        assert "Rider" in caplog.text

    def test_rider_release_has_sources(self, locator):
        assert locator.locate("RD", "2023.1", sources=True).has_sources

    def test_idea_sources_jar(self, locator):
        location = locator.locate_sources("GO", "2023.1")

        assert location.url == (
            f"{REPOSITORY}/releases/com/jetbrains/intellij/idea/ideaIC/2023.1/ideaIC-2023.1-sources.jar"
        )

    def test_pycharm_sources_jar(self, locator):
        location = locator.locate_sources("PY", "2023.1")

        assert location.artifact_id == "pycharmPC"
        assert location.file_name == "pycharmPC-2023.1-sources.jar"


class TestLocateRequest:
    """Test locate_request method."""

    def test_request(self, locator):
        request = RequestedArtifact(product_from_code("IU"), "2022.3", ArtifactVariant.ARCHIVE)

        assert str(locator.locate_request(request)) == "com.jetbrains.intellij.idea:ideaIU:2022.3@zip"
