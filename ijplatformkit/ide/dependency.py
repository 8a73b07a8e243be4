"""
Resolved IDE installation model.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ijplatformkit.artifacts.product import PYCHARM_CODES
from ijplatformkit.ivy.descriptor import IVY_FORMAT_VERSION
from ijplatformkit.plugins.registry import BuiltinPluginRegistry

_KOTLIN_RUNTIME = re.compile(r"kotlin-runtime|kotlin-(reflect|stdlib|test)(-.*)?")
_EXCLUDED_JARS = ("junit.jar", "annotations.jar")


def is_kotlin_runtime(name: str) -> bool:
    """True for Kotlin runtime jar base names (without ``.jar``)."""
    return _KOTLIN_RUNTIME.fullmatch(name) is not None


@dataclass
class IdeDependency:
    """
    An extracted IDE used as a compile-time dependency.

    Attributes:
        name: Module name (e.g. 'ideaIC', or 'ideaLocal' for local installs)
        version: Requested version (build number for local installs)
        build_number: Content of the IDE's build.txt (e.g. 'IC-223.8836.41')
        classes: Root directory of the extracted IDE
        sources: IDE sources jar, if resolved
        with_kotlin: Keep the bundled Kotlin runtime jars on the classpath
        plugins_registry: Registry of the IDE's bundled plugins
        product_code: Product type code, if known
    """

    name: str
    version: str
    build_number: str
    classes: Path
    plugins_registry: BuiltinPluginRegistry
    sources: Optional[Path] = None
    with_kotlin: bool = False
    product_code: Optional[str] = None
    jar_files: List[Path] = field(init=False)
    source_zip_files: List[Path] = field(init=False)

    def __post_init__(self):
        self.classes = Path(self.classes)
        self.jar_files = self._collect_jar_files()
        self.source_zip_files = self._collect_source_zip_files()

    def _collect_jar_files(self) -> List[Path]:
        lib = self.classes / "lib"
        if not lib.is_dir():
            return []

        base_files = sorted(
            jar
            for jar in lib.glob("*.jar")
            if jar.is_file()
            and jar.name not in _EXCLUDED_JARS
            and (self.with_kotlin or not is_kotlin_runtime(jar.stem))
        )
        ant_files = sorted((lib / "ant" / "lib").glob("*.jar"))
        return base_files + ant_files

    def _collect_source_zip_files(self) -> List[Path]:
        return sorted((self.classes / "lib" / "src").glob("*.zip"))

    @property
    def is_pycharm(self) -> bool:
        return self.product_code in PYCHARM_CODES or self.name.startswith("pycharm")

    @property
    def sources_artifact_name(self) -> str:
        return "pycharmPC" if self.is_pycharm else "ideaIC"

    @property
    def ivy_repository_directory(self) -> Path:
        return self.classes

    @property
    def fqn(self) -> str:
        """Fully qualified name used for the synthetic descriptor file."""
        fqn = f"{self.name}-{self.version}-{IVY_FORMAT_VERSION}"
        if self.with_kotlin:
            fqn += "-withKotlin"
        if self.sources is not None:
            fqn += "-withSources"
        return fqn
