"""
Unit tests for the IDE dependency model.
"""

import pytest

from ijplatformkit.ide.dependency import IdeDependency, is_kotlin_runtime
from ijplatformkit.plugins.registry import BuiltinPluginRegistry
from tests.utils.builders import IdeBuilder


def _ide(root, **kwargs):
    defaults = dict(
        name="ideaIC",
        version="2022.3.3",
        build_number="IC-223.8836.41",
        classes=root,
        plugins_registry=BuiltinPluginRegistry.from_directory(root / "plugins"),
    )
    defaults.update(kwargs)
    return IdeDependency(**defaults)


@pytest.fixture
def ide_root(tmp_path):
    return (
        IdeBuilder()
        .with_jars("kotlin-stdlib-jdk8.jar", "kotlin-reflect.jar", "junit.jar", "annotations.jar")
        .with_file("lib/ant/lib/ant.jar", b"jar")
        .with_file("lib/src/src_css-api.zip", b"zip")
        .build_directory(tmp_path / "ide")
    )


class TestIsKotlinRuntime:
    """Test is_kotlin_runtime function."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("kotlin-runtime", True),
            ("kotlin-stdlib", True),
            ("kotlin-stdlib-jdk8", True),
            ("kotlin-reflect", True),
            ("kotlin-test-junit", True),
            ("kotlinx-coroutines-core", False),
            ("kotlin-compiler", False),
        ],
    )
    def test_names(self, name, expected):
        assert is_kotlin_runtime(name) is expected


class TestJarFiles:
    """Test classpath collection."""

    def test_excludes_kotlin_and_test_jars(self, ide_root):
        ide = _ide(ide_root)

        assert [jar.name for jar in ide.jar_files] == ["app.jar", "util.jar", "ant.jar"]

    def test_with_kotlin(self, ide_root):
        ide = _ide(ide_root, with_kotlin=True)

        names = [jar.name for jar in ide.jar_files]
        assert "kotlin-stdlib-jdk8.jar" in names
        assert "junit.jar" not in names

    def test_source_zips(self, ide_root):
        assert [z.name for z in _ide(ide_root).source_zip_files] == ["src_css-api.zip"]

    def test_missing_lib(self, tmp_path):
        assert _ide(tmp_path).jar_files == []


class TestNames:
    """Test derived names."""

    def test_fqn(self, ide_root, tmp_path):
        assert _ide(ide_root).fqn == "ideaIC-2022.3.3-2"
        assert _ide(ide_root, with_kotlin=True, sources=tmp_path / "s.jar").fqn == (
            "ideaIC-2022.3.3-2-withKotlin-withSources"
        )

    def test_sources_artifact_name(self, ide_root):
        assert _ide(ide_root).sources_artifact_name == "ideaIC"
        assert _ide(ide_root, product_code="PY").sources_artifact_name == "pycharmPC"
        assert _ide(ide_root, name="pycharmPC").is_pycharm
