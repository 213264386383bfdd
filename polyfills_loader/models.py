"""Core data models shared across polyfills-loader components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

from .errors import ConfigError


@dataclass(frozen=True)
class SingleSource:
    """A polyfill read from exactly one file."""

    path: str

    def paths(self) -> Tuple[str, ...]:
        return (self.path,)


@dataclass(frozen=True)
class SourceList:
    """A polyfill concatenated from several files, in order."""

    entries: Tuple[str, ...]

    def paths(self) -> Tuple[str, ...]:
        return self.entries


PolyfillSource = Union[SingleSource, SourceList]


def source_from(value: object) -> Optional[PolyfillSource]:
    """Build a source from a single path or a sequence of paths."""
    if isinstance(value, (str, Path)):
        text = str(value)
        return SingleSource(text) if text else None
    if isinstance(value, (list, tuple)):
        invalid = [item for item in value if not isinstance(item, (str, Path)) or not str(item)]
        if invalid:
            raise ConfigError(f"Invalid polyfill path entries: {invalid!r}")
        paths = tuple(str(item) for item in value)
        return SourceList(paths) if paths else None
    return None


@dataclass(frozen=True)
class PolyfillRequest:
    """A polyfill to be loaded: where its source lives and when it is needed."""

    name: Optional[str]
    source: Optional[PolyfillSource]
    test: Optional[str] = None
    initializer: Optional[str] = None
    file_type: Optional[str] = None
    minify: bool = False
    package: Optional[str] = None


@dataclass(frozen=True)
class ManifestFile:
    """An output artifact of the build and the kind of loading it needs."""

    type: str
    path: Optional[str] = None


@dataclass(frozen=True)
class ModernEntry:
    files: Tuple[ManifestFile, ...] = ()


@dataclass(frozen=True)
class LegacyEntry:
    """Artifacts served to browsers for which ``test`` evaluates truthy."""

    test: str
    files: Tuple[ManifestFile, ...] = ()


@dataclass(frozen=True)
class PolyfillsConfig:
    """Which built-in polyfills to include, plus caller-supplied ones."""

    core_js: bool = False
    regenerator_runtime: Union[bool, str] = False
    fetch: bool = False
    systemjs_extended: bool = False
    dynamic_import: bool = False
    es_module_shims: bool = False
    intersection_observer: bool = False
    webcomponents: bool = False
    shady_css_custom_style: bool = False
    hash: bool = True
    custom: Tuple[PolyfillRequest, ...] = ()


@dataclass(frozen=True)
class PolyfillsLoaderConfig:
    """Everything the resolver needs: polyfill options and the build manifest."""

    polyfills: PolyfillsConfig = field(default_factory=PolyfillsConfig)
    modern: ModernEntry = field(default_factory=ModernEntry)
    legacy: Optional[Tuple[LegacyEntry, ...]] = None
    polyfills_dir: Optional[str] = None
    node_modules: Path = Path("node_modules")


@dataclass(frozen=True)
class PolyfillFile:
    """A resolved polyfill ready for injection into the loader."""

    type: str
    path: str
    content: str
    test: Optional[str] = None
    initializer: Optional[str] = None


@dataclass(frozen=True)
class PolyfillsData:
    """Resolution result; ``core_js`` never appears in ``polyfill_files``."""

    core_js: Optional[PolyfillFile]
    polyfill_files: Tuple[PolyfillFile, ...]
