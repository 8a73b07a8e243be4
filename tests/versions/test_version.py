"""
Unit tests for version module.

Tests version ordering and release-channel classification.
"""

import pytest

from ijplatformkit.versions.version import (
    NIGHTLY,
    RELEASES,
    SNAPSHOTS,
    Version,
    is_nightly,
    is_snapshot,
    release_type,
)


class TestVersion:
    """Test Version ordering."""

    def test_parse_components(self):
        """Test the first three numeric components are used."""
        assert Version.parse("2022.3.3").components == (2022, 3, 3)
        assert Version.parse("223.8836.41.7").components == (223, 8836, 41)

    def test_parse_ignores_non_numeric_parts(self):
        """Test prefixes and suffixes are skipped when reading components."""
        assert Version.parse("GOLAND-212.4535.15-EAP-SNAPSHOT").components == (212, 4535, 15)

    def test_missing_components_default_to_zero(self):
        """Test short versions are padded."""
        assert Version.parse("2021.1").components == (2021, 1, 0)

    def test_non_decimal_digits_are_skipped(self):
        """Test superscript digits are not read as components."""
        assert Version.parse("223.²").components == (223, 0, 0)


    def test_ordering(self):
        """Test numeric ordering rather than lexical ordering."""
        versions = [Version.parse(v) for v in ["2021.1.2", "2021.10", "2021.2", "2021.1"]]

        assert [str(v) for v in sorted(versions)] == ["2021.1", "2021.1.2", "2021.2", "2021.10"]

    def test_greater_than(self):
        assert Version.parse("2021.1.2") > Version.parse("2021.1")
        assert Version.parse("223.8836.41") < Version.parse("231.8109.175")

    def test_equal_components_fall_back_to_text(self):
        """Test raw text breaks ties case-insensitively."""
        assert Version.parse("223-EAP-SNAPSHOT") == Version.parse("223-eap-snapshot")
        assert Version.parse("223-EAP-SNAPSHOT") != Version.parse("223-SNAPSHOT")

    def test_hashable(self):
        assert len({Version.parse("1.2.3"), Version.parse("1.2.3")}) == 1

    def test_str_keeps_original_text(self):
        assert str(Version.parse("2022.3.3")) == "2022.3.3"
        assert str(Version(1, 2, 3)) == "1.2.3"


class TestReleaseType:
    """Test release_type function."""

    @pytest.mark.parametrize(
        "version,expected",
        [
            ("2022.3.3", RELEASES),
            ("223.8836.41", RELEASES),
            ("223-EAP-SNAPSHOT", SNAPSHOTS),
            ("223.8836-EAP-CANDIDATE-SNAPSHOT", SNAPSHOTS),
            ("223-CUSTOM-SNAPSHOT", SNAPSHOTS),
            ("2022.3-SNAPSHOT", SNAPSHOTS),
            ("2023.1-EAP2-SNAPSHOT", SNAPSHOTS),
            ("RIDER-2022.3-SNAPSHOT", SNAPSHOTS),
            ("223.8836-SNAPSHOT", NIGHTLY),
            ("223-SNAPSHOT", NIGHTLY),
            ("LATEST-TRUNK-SNAPSHOT", NIGHTLY),
        ],
    )
    def test_classification(self, version, expected):
        assert release_type(version) == expected


class TestSnapshotPredicates:
    """Test is_snapshot and is_nightly."""

    def test_is_snapshot(self):
        assert is_snapshot("223-EAP-SNAPSHOT")
        assert is_snapshot("223-SNAPSHOT")
        assert not is_snapshot("2022.3.3")

    def test_is_nightly(self):
        assert is_nightly("223-SNAPSHOT")
        assert is_nightly("LATEST-TRUNK-SNAPSHOT")
        assert not is_nightly("223-EAP-SNAPSHOT")
        assert not is_nightly("2022.3.3")
