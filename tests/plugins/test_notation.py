"""
Unit tests for plugin dependency notation parsing.
"""

import pytest

from ijplatformkit.plugins.notation import PluginDependencyNotation, plugin_group


class TestPluginGroup:
    """Test plugin_group function."""

    def test_default_channel(self):
        assert plugin_group() == "com.jetbrains.plugins"

    def test_channel(self):
        assert plugin_group("eap") == "eap.com.jetbrains.plugins"

    def test_prefix(self):
        assert plugin_group(prefix="unzipped") == "unzipped.com.jetbrains.plugins"
        assert plugin_group("eap", prefix="unzipped") == "unzipped.eap.com.jetbrains.plugins"


class TestParse:
    """Test PluginDependencyNotation.parse."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("com.intellij.copyright", ("com.intellij.copyright", None, None)),
            ("org.jetbrains.plugins.go:221.6008.13", ("org.jetbrains.plugins.go", "221.6008.13", None)),
            ("org.intellij.scala:2023.1.5@eap", ("org.intellij.scala", "2023.1.5", "eap")),
            ("org.intellij.scala@nightly", ("org.intellij.scala", None, "nightly")),
            ("  com.intellij.java  ", ("com.intellij.java", None, None)),
            ("org.example:@eap", ("org.example", None, "eap")),
        ],
    )
    def test_forms(self, text, expected):
        notation = PluginDependencyNotation.parse(text)

        assert (notation.id, notation.version, notation.channel) == expected

    def test_existing_path_kept_whole(self, tmp_path):
        """Test a path is not split on separators."""
        plugin = tmp_path / "my:plugin"
        plugin.mkdir()

        notation = PluginDependencyNotation.parse(str(plugin))

        assert notation.id == str(plugin)
        assert not notation.is_versioned

    @pytest.mark.parametrize("text", ["", ":1.0", "@eap", "   "])
    def test_missing_id(self, text):
        with pytest.raises(ValueError):
            PluginDependencyNotation.parse(text)


class TestNotation:
    """Test notation properties."""

    def test_is_versioned(self):
        assert PluginDependencyNotation("a", "1.0").is_versioned
        assert PluginDependencyNotation("a", channel="eap").is_versioned
        assert not PluginDependencyNotation("a").is_versioned

    def test_str(self):
        assert str(PluginDependencyNotation("org.example", "1.0", "eap")) == "eap.com.jetbrains.plugins:org.example:1.0"
